"""Provider compatibility checks.

A provider is compatible when the version it reports is greater than or
equal to the configured minimum by semver precedence, after one optional
leading ``v`` is stripped from both sides.

Functions:
    is_provider_compatible: Probe a provider and compare against a minimum.
    is_provider_compatible_async: Asyncio variant, honors task cancellation.

Classes:
    ProviderVersionGate: Checks providers against an injected
        MinVersionRegistry and skips providers without a minimum.

Errors from probing and version parsing propagate unchanged; nothing is
retried. The host decides whether a failed check blocks the provider.

Example:
    >>> from floe_provider_version.checker import is_provider_compatible
    >>> is_provider_compatible("/etc/csi/providers/vault", "v0.4.0", timeout=5)  # doctest: +SKIP
    True
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from floe_provider_version.probe import get_provider_version, get_provider_version_async
from floe_provider_version.semver_policy import (
    VersionOrdering,
    compare_versions,
    normalize_version,
)
from floe_provider_version.tracing import (
    ATTR_COMPATIBLE,
    ATTR_CURRENT_VERSION,
    get_tracer,
    provider_version_span,
)

if TYPE_CHECKING:
    from floe_provider_version.config import ProviderVersionSettings
    from floe_provider_version.registry import MinVersionRegistry

logger = structlog.get_logger(__name__)


def is_provider_compatible(
    provider: str,
    min_provider_version: str,
    *,
    timeout: float | None = None,
) -> bool:
    """Check that a provider's live version meets a minimum.

    Args:
        provider: Path or name of the provider executable.
        min_provider_version: Minimum accepted version, ``v`` prefix allowed.
        timeout: Seconds to wait for the provider. None waits indefinitely.

    Returns:
        True if the reported version is >= the minimum, False otherwise.

    Raises:
        ProviderProcessError: If the provider could not run or exited non-zero.
        ProviderProbeTimeoutError: If the provider did not answer in time.
        ProviderDecodeError: If the provider's output could not be decoded.
        InvalidSemverError: If either version is not valid semver.

    Examples:
        With a provider at that path reporting v0.4.0:

        >>> is_provider_compatible("/etc/csi/providers/vault", "0.4.0")  # doctest: +SKIP
        True
        >>> is_provider_compatible("/etc/csi/providers/vault", "0.5.0")  # doctest: +SKIP
        False
    """
    with provider_version_span(
        get_tracer(), "check", provider=provider, min_version=min_provider_version
    ) as span:
        current_version = get_provider_version(provider, timeout=timeout)
        compatible = _meets_minimum(current_version, min_provider_version)
        span.set_attribute(ATTR_CURRENT_VERSION, current_version)
        span.set_attribute(ATTR_COMPATIBLE, compatible)

    _log_verdict(provider, current_version, min_provider_version, compatible)
    return compatible


async def is_provider_compatible_async(
    provider: str,
    min_provider_version: str,
    *,
    timeout: float | None = None,
) -> bool:
    """Asyncio variant of is_provider_compatible().

    Cancelling the awaiting task kills the provider process and re-raises
    asyncio.CancelledError.
    """
    with provider_version_span(
        get_tracer(), "check", provider=provider, min_version=min_provider_version
    ) as span:
        current_version = await get_provider_version_async(provider, timeout=timeout)
        compatible = _meets_minimum(current_version, min_provider_version)
        span.set_attribute(ATTR_CURRENT_VERSION, current_version)
        span.set_attribute(ATTR_COMPATIBLE, compatible)

    _log_verdict(provider, current_version, min_provider_version, compatible)
    return compatible


class ProviderVersionGate:
    """Checks providers against their configured minimum versions.

    Providers with no entry in the registry have no minimum. For those,
    check() returns None without starting the provider; an empty minimum is
    never compared against an empty version.

    Attributes:
        registry: Minimum versions by provider name.
        timeout: Deadline in seconds for each probe, None for no deadline.

    Example:
        >>> from floe_provider_version.registry import build_min_version_registry
        >>> gate = ProviderVersionGate(build_min_version_registry("vault=0.4.0"), timeout=5)
        >>> gate.check("vault", executable="/etc/csi/providers/vault")  # doctest: +SKIP
        True
        >>> gate.check("azure") is None
        True
    """

    def __init__(self, registry: MinVersionRegistry, *, timeout: float | None = None) -> None:
        """Initialize the gate.

        Args:
            registry: Minimum versions by provider name.
            timeout: Deadline in seconds for each probe.
        """
        self.registry = registry
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings: ProviderVersionSettings) -> ProviderVersionGate:
        """Create a gate from settings.

        Raises:
            MinVersionConfigError: If the minimum versions string is malformed.
            InvalidSemverError: If a configured version is not valid semver.
        """
        return cls(settings.build_registry(), timeout=settings.provider_version_timeout)

    def requires_check(self, provider_name: str) -> bool:
        """Return True if a minimum version is configured for the provider."""
        return self.registry.minimum_for(provider_name) is not None

    def check(self, provider_name: str, *, executable: str | None = None) -> bool | None:
        """Check a provider against its configured minimum.

        Args:
            provider_name: Provider name as used in the registry.
            executable: Path of the provider binary. Defaults to provider_name.

        Returns:
            True or False for the compatibility verdict, or None if no
            minimum is configured and the provider was not probed.

        Raises:
            ProviderVersionError: If the provider could not be probed or
                reported an invalid version.
        """
        min_version = self.registry.minimum_for(provider_name)
        if min_version is None:
            logger.debug("provider_version_check_skipped", provider=provider_name)
            return None
        return is_provider_compatible(
            executable or provider_name, min_version, timeout=self.timeout
        )

    async def check_async(
        self, provider_name: str, *, executable: str | None = None
    ) -> bool | None:
        """Asyncio variant of check()."""
        min_version = self.registry.minimum_for(provider_name)
        if min_version is None:
            logger.debug("provider_version_check_skipped", provider=provider_name)
            return None
        return await is_provider_compatible_async(
            executable or provider_name, min_version, timeout=self.timeout
        )


def _meets_minimum(current_version: str, min_version: str) -> bool:
    ordering = compare_versions(normalize_version(current_version), normalize_version(min_version))
    return ordering >= VersionOrdering.EQUAL


def _log_verdict(provider: str, current_version: str, min_version: str, compatible: bool) -> None:
    logger.info(
        "provider_compatibility_checked",
        provider=provider,
        current_version=current_version,
        min_version=min_version,
        compatible=compatible,
    )


__all__ = [
    "ProviderVersionGate",
    "is_provider_compatible",
    "is_provider_compatible_async",
]
