"""Configuration for provider version checks.

Settings are read from environment variables with the ``FLOE_`` prefix. The
host driver can also construct them directly from its own flags.

Environment Variables:
    FLOE_PROVIDER_MIN_VERSIONS: Comma-separated provider=version pairs.
    FLOE_PROVIDER_VERSION_TIMEOUT: Seconds to wait for ``--version`` output.

Example:
    >>> from floe_provider_version.config import ProviderVersionSettings
    >>> settings = ProviderVersionSettings(provider_min_versions="vault=0.4.0")
    >>> settings.build_registry().minimum_for("vault")
    '0.4.0'
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from floe_provider_version.registry import build_min_version_registry

if TYPE_CHECKING:
    from floe_provider_version.registry import MinVersionRegistry

DEFAULT_PROBE_TIMEOUT_SECONDS = 10.0


class ProviderVersionSettings(BaseSettings):
    """Settings for the provider version gate.

    The minimum versions string is kept raw here and parsed by
    build_registry(), so malformed configuration surfaces as the same errors
    the registry raises everywhere else.

    Attributes:
        provider_min_versions: Comma-separated ``provider=version`` pairs.
        provider_version_timeout: Deadline in seconds for each probe.
    """

    model_config = SettingsConfigDict(
        env_prefix="FLOE_",
        frozen=True,
        extra="ignore",
    )

    provider_min_versions: str = Field(
        default="",
        description="Minimum provider versions as provider=version pairs",
        examples=["vault=0.4.0,azure=1.2.3"],
    )
    provider_version_timeout: float = Field(
        default=DEFAULT_PROBE_TIMEOUT_SECONDS,
        gt=0,
        description="Seconds to wait for a provider to report its version",
        examples=[5.0, 30.0],
    )

    def build_registry(self) -> MinVersionRegistry:
        """Parse provider_min_versions into a MinVersionRegistry.

        Raises:
            MinVersionConfigError: If the string is malformed.
            InvalidSemverError: If a version is not valid semver.
        """
        return build_min_version_registry(self.provider_min_versions)


__all__ = ["DEFAULT_PROBE_TIMEOUT_SECONDS", "ProviderVersionSettings"]
