"""Minimum provider versions parsed from a configuration string.

The driver is configured with one string of comma-separated pairs:

    vault=0.4.0, azure=1.2.3

Each pair maps a provider name to the minimum version this driver accepts
for it. Providers without an entry have no minimum and are not checked.

Parsing Rules:
    - Empty or whitespace-only input yields an empty registry
    - Whitespace around pairs, names, and versions is ignored
    - Each pair splits on ``=`` into exactly two non-empty parts
    - A provider may appear only once, even with the same version
    - Versions must be valid semver
    - Pairs are checked in input order; the first violation is raised

Example:
    >>> from floe_provider_version.registry import build_min_version_registry
    >>> registry = build_min_version_registry("vault=1.0.0,azure=2.1.3")
    >>> registry.minimum_for("vault")
    '1.0.0'
    >>> registry.minimum_for("gcp") is None
    True
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping

import structlog

from floe_provider_version.errors import (
    DuplicateProviderError,
    InvalidSemverError,
    MalformedEntryError,
)
from floe_provider_version.semver_policy import validate_semver

logger = structlog.get_logger(__name__)

PAIR_SEPARATOR = ","
KEY_VALUE_SEPARATOR = "="


class MinVersionRegistry(Mapping[str, str]):
    """Read-only mapping from provider name to minimum version.

    Instances are immutable once built and safe for concurrent lookups.
    Build one at startup and pass it to the code that checks providers.

    Example:
        >>> registry = MinVersionRegistry.from_string("vault=1.0.0")
        >>> dict(registry)
        {'vault': '1.0.0'}
    """

    __slots__ = ("_versions",)

    def __init__(self, versions: Mapping[str, str] | None = None) -> None:
        """Initialize the registry from a provider to minimum version mapping.

        Entries get the same checks as parsed configuration, so a registry
        built by hand cannot hold a minimum that would fail at compare time.
        Use from_string() to parse a configuration string.

        Args:
            versions: Provider name to minimum version.

        Raises:
            MalformedEntryError: If a provider name or version is empty.
            InvalidSemverError: If a version is not valid semver.
        """
        self._versions: dict[str, str] = {}
        for provider, version in (versions or {}).items():
            _check_entry(provider, version, entry=f"{provider}{KEY_VALUE_SEPARATOR}{version}")
            self._versions[provider] = version

    @classmethod
    def from_string(cls, min_provider_versions: str) -> MinVersionRegistry:
        """Parse a configuration string into a registry.

        See build_min_version_registry().
        """
        return build_min_version_registry(min_provider_versions)

    def minimum_for(self, provider: str) -> str | None:
        """Return the minimum version for a provider, or None if unset."""
        return self._versions.get(provider)

    def __getitem__(self, provider: str) -> str:
        return self._versions[provider]

    def __iter__(self) -> Iterator[str]:
        return iter(self._versions)

    def __len__(self) -> int:
        return len(self._versions)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._versions!r})"


def build_min_version_registry(min_provider_versions: str) -> MinVersionRegistry:
    """Build the minimum version registry from a configuration string.

    Args:
        min_provider_versions: Comma-separated ``provider=version`` pairs.

    Returns:
        MinVersionRegistry with one entry per provider.

    Raises:
        MalformedEntryError: If a pair is not ``provider=version`` or has an
            empty name or version.
        DuplicateProviderError: If a provider appears more than once.
        InvalidSemverError: If a version is not valid semver.

    Examples:
        >>> dict(build_min_version_registry(""))
        {}
        >>> dict(build_min_version_registry(" vault = 1.0.0 , azure=2.1.3 "))
        {'vault': '1.0.0', 'azure': '2.1.3'}
    """
    versions: dict[str, str] = {}

    if not min_provider_versions.strip():
        return MinVersionRegistry(versions)

    for raw_pair in min_provider_versions.split(PAIR_SEPARATOR):
        pair = raw_pair.strip()
        parts = pair.split(KEY_VALUE_SEPARATOR)
        if len(parts) != 2:
            raise MalformedEntryError(pair)

        provider = parts[0].strip()
        version = parts[1].strip()
        if not provider or not version:
            raise MalformedEntryError(pair, provider=provider, version=version)

        if provider in versions:
            raise DuplicateProviderError(provider, versions[provider], version)

        _check_entry(provider, version, entry=pair)
        versions[provider] = version

    logger.debug("min_provider_versions_loaded", min_provider_versions=versions)
    return MinVersionRegistry(versions)


def _check_entry(provider: str, version: str, *, entry: str) -> None:
    if not provider or not version:
        raise MalformedEntryError(entry, provider=provider, version=version)

    try:
        validate_semver(version)
    except InvalidSemverError as e:
        raise InvalidSemverError(version, provider=provider, reason=e.reason) from e


__all__ = [
    "KEY_VALUE_SEPARATOR",
    "PAIR_SEPARATOR",
    "MinVersionRegistry",
    "build_min_version_registry",
]
