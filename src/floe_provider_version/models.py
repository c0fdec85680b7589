"""Data models for provider version reports.

Example:
    >>> from floe_provider_version.models import ProviderVersionInfo
    >>> info = ProviderVersionInfo.model_validate_json(
    ...     '{"version": "v0.4.0", "buildDate": "2024-05-01T00:00:00Z"}'
    ... )
    >>> info.version
    'v0.4.0'
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ProviderVersionInfo(BaseModel):
    """Version record printed by ``<provider> --version``.

    Field names follow the provider's JSON keys through aliases. Unknown keys
    are ignored and missing keys default to an empty string.

    Attributes:
        version: The provider's own version (semver, optionally ``v``-prefixed).
        build_date: Date the provider binary was built.
        min_driver_version: Minimum driver version the provider works with.

    Example:
        >>> info = ProviderVersionInfo(version="1.2.3")
        >>> info.model_dump(by_alias=True)
        {'version': '1.2.3', 'buildDate': '', 'minDriverVersion': ''}
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )

    version: str = Field(
        default="",
        description="Current provider version",
        examples=["v0.4.0", "1.2.3"],
    )
    build_date: str = Field(
        default="",
        alias="buildDate",
        description="Date the provider binary was built",
        examples=["2024-05-01T00:00:00Z"],
    )
    min_driver_version: str = Field(
        default="",
        alias="minDriverVersion",
        description="Minimum driver version the provider works with",
        examples=["v0.3.0"],
    )


__all__ = ["ProviderVersionInfo"]
