"""floe-provider-version: version compatibility gate for provider binaries.

The driver runs each provider with ``--version``, reads the JSON version
record it prints, and compares the reported version against a configured
minimum before using the provider.

Example:
    >>> from floe_provider_version import ProviderVersionGate, build_min_version_registry
    >>> gate = ProviderVersionGate(build_min_version_registry("vault=0.4.0"), timeout=5)
    >>> gate.check("vault", executable="/etc/csi/providers/vault")  # doctest: +SKIP
    True
"""

from __future__ import annotations

from floe_provider_version.checker import (
    ProviderVersionGate,
    is_provider_compatible,
    is_provider_compatible_async,
)
from floe_provider_version.config import ProviderVersionSettings
from floe_provider_version.errors import (
    DuplicateProviderError,
    InvalidSemverError,
    MalformedEntryError,
    MinVersionConfigError,
    ProviderDecodeError,
    ProviderProbeTimeoutError,
    ProviderProcessError,
    ProviderVersionError,
)
from floe_provider_version.models import ProviderVersionInfo
from floe_provider_version.probe import (
    get_provider_version,
    get_provider_version_async,
    get_provider_version_info,
    get_provider_version_info_async,
)
from floe_provider_version.registry import MinVersionRegistry, build_min_version_registry
from floe_provider_version.semver_policy import (
    VersionOrdering,
    compare_versions,
    normalize_version,
    validate_semver,
)

__version__ = "0.1.0"
__all__ = [
    "DuplicateProviderError",
    "InvalidSemverError",
    "MalformedEntryError",
    "MinVersionConfigError",
    "MinVersionRegistry",
    "ProviderDecodeError",
    "ProviderProbeTimeoutError",
    "ProviderProcessError",
    "ProviderVersionError",
    "ProviderVersionGate",
    "ProviderVersionInfo",
    "ProviderVersionSettings",
    "VersionOrdering",
    "build_min_version_registry",
    "compare_versions",
    "get_provider_version",
    "get_provider_version_async",
    "get_provider_version_info",
    "get_provider_version_info_async",
    "is_provider_compatible",
    "is_provider_compatible_async",
    "normalize_version",
    "validate_semver",
]
