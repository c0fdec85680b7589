"""Exception hierarchy for floe-provider-version.

This module defines the exceptions raised while probing provider binaries,
validating versions, and parsing minimum-version configuration. All of them
inherit from ProviderVersionError.

Exception Hierarchy:
    ProviderVersionError (base)
    ├── ProviderProcessError          # Provider could not run or exited non-zero
    │   └── ProviderProbeTimeoutError # Deadline expired, child killed (TimeoutError)
    ├── ProviderDecodeError           # --version output is not the JSON record
    ├── InvalidSemverError            # Not a semantic version (ValueError)
    └── MinVersionConfigError         # Bad configuration string (ValueError)
        ├── MalformedEntryError       # Pair not in provider=version form
        └── DuplicateProviderError    # Provider declared more than once

Example:
    >>> from floe_provider_version.errors import DuplicateProviderError
    >>> raise DuplicateProviderError("vault", "1.0.0", "1.1.0")
    Traceback (most recent call last):
        ...
    DuplicateProviderError: duplicate versions defined for vault provider, versions: [1.0.0, 1.1.0]
"""

from __future__ import annotations


class ProviderVersionError(Exception):
    """Base exception for all provider version errors.

    Callers that treat every failure as "cannot confirm compatibility" can
    catch this single class.

    Attributes:
        message: Human-readable error message.

    Example:
        >>> try:
        ...     raise ProviderDecodeError("vault", reason="unexpected end of JSON input")
        ... except ProviderVersionError as e:
        ...     print(f"Cannot confirm provider version: {e}")
        Cannot confirm provider version: error unmarshalling provider version for vault: unexpected end of JSON input
    """

    def __init__(self, message: str) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error message.
        """
        self.message = message
        super().__init__(message)


class ProviderProcessError(ProviderVersionError):
    """Raised when the provider binary cannot be started or exits non-zero.

    The captured standard error of the child is part of the message so the
    host can log it for diagnosis.

    Attributes:
        provider: The executable that was invoked.
        reason: What went wrong (start failure or exit status).
        stderr: Captured standard error of the child, if any.
        returncode: Exit status, or None if the process never ran to completion.

    Example:
        >>> raise ProviderProcessError(
        ...     "vault-provider",
        ...     reason="exit status 2",
        ...     stderr="unknown flag: --version",
        ...     returncode=2,
        ... )
        Traceback (most recent call last):
            ...
        ProviderProcessError: error getting current provider version for vault-provider, err: exit status 2, output: unknown flag: --version
    """

    def __init__(
        self,
        provider: str,
        *,
        reason: str,
        stderr: str = "",
        returncode: int | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            provider: The executable that was invoked.
            reason: What went wrong (start failure or exit status).
            stderr: Captured standard error of the child.
            returncode: Exit status of the child, if it exited.
        """
        self.provider = provider
        self.reason = reason
        self.stderr = stderr
        self.returncode = returncode
        message = (
            f"error getting current provider version for {provider}, "
            f"err: {reason}, output: {stderr}"
        )
        super().__init__(message)


class ProviderProbeTimeoutError(ProviderProcessError, TimeoutError):
    """Raised when the provider did not answer before the deadline.

    The child process has already been killed and reaped when this is raised.
    Inherits from TimeoutError so hosts can handle every deadline the same way.

    Attributes:
        timeout: The deadline in seconds that expired.
    """

    def __init__(self, provider: str, *, timeout: float, stderr: str = "") -> None:
        """Initialize the exception.

        Args:
            provider: The executable that was invoked.
            timeout: The deadline in seconds that expired.
            stderr: Standard error captured before the child was killed.
        """
        self.timeout = timeout
        ProviderProcessError.__init__(
            self,
            provider,
            reason=f"timed out after {timeout}s, process killed",
            stderr=stderr,
        )


class ProviderDecodeError(ProviderVersionError):
    """Raised when the --version output is not the expected JSON record.

    Attributes:
        provider: The executable whose output could not be decoded.
        reason: Why decoding failed.
    """

    def __init__(self, provider: str, *, reason: str) -> None:
        """Initialize the exception.

        Args:
            provider: The executable whose output could not be decoded.
            reason: Why decoding failed.
        """
        self.provider = provider
        self.reason = reason
        super().__init__(f"error unmarshalling provider version for {provider}: {reason}")


class InvalidSemverError(ProviderVersionError, ValueError):
    """Raised when a string is not a valid semantic version.

    Inherits from ValueError so it can be caught by either exception type.

    Attributes:
        version: The offending version string.
        provider: The provider the version belongs to, when known.
        reason: Parser diagnostic.

    Example:
        >>> raise InvalidSemverError("notaversion", provider="vault")
        Traceback (most recent call last):
            ...
        InvalidSemverError: minimum vault provider version notaversion is not a valid semver
    """

    def __init__(
        self,
        version: str,
        *,
        provider: str | None = None,
        reason: str = "",
    ) -> None:
        """Initialize the exception.

        Args:
            version: The offending version string.
            provider: The provider the version belongs to, when known.
            reason: Parser diagnostic.
        """
        self.version = version
        self.provider = provider
        self.reason = reason
        if provider is not None:
            message = f"minimum {provider} provider version {version} is not a valid semver"
        else:
            message = f"{version!r} is not a valid semver"
        if reason:
            message = f"{message}, error {reason}"
        ProviderVersionError.__init__(self, message)


class MinVersionConfigError(ProviderVersionError, ValueError):
    """Base exception for malformed minimum-version configuration strings."""

    def __init__(self, message: str) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error message.
        """
        ProviderVersionError.__init__(self, message)


class MalformedEntryError(MinVersionConfigError):
    """Raised when a configuration pair is not in provider=version form.

    Attributes:
        entry: The offending pair as it appeared after trimming.
        provider: Trimmed provider token, when the pair split correctly.
        version: Trimmed version token, when the pair split correctly.
    """

    def __init__(
        self,
        entry: str,
        *,
        provider: str | None = None,
        version: str | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            entry: The offending pair.
            provider: Trimmed provider token, if the pair split into two parts.
            version: Trimmed version token, if the pair split into two parts.
        """
        self.entry = entry
        self.provider = provider
        self.version = version
        if provider is None and version is None:
            message = (
                "min provider version not defined in expected format "
                f"provider=version, got {entry!r}"
            )
        else:
            message = (
                "min provider version not defined in expected format "
                f"provider=version, got provider {provider!r} version {version!r}"
            )
        super().__init__(message)


class DuplicateProviderError(MinVersionConfigError):
    """Raised when the same provider is declared more than once.

    Raised even if both declarations carry the same version.

    Attributes:
        provider: The duplicated provider name.
        existing_version: Version from the first declaration.
        version: Version from the conflicting declaration.
    """

    def __init__(self, provider: str, existing_version: str, version: str) -> None:
        """Initialize the exception.

        Args:
            provider: The duplicated provider name.
            existing_version: Version from the first declaration.
            version: Version from the conflicting declaration.
        """
        self.provider = provider
        self.existing_version = existing_version
        self.version = version
        super().__init__(
            f"duplicate versions defined for {provider} provider, "
            f"versions: [{existing_version}, {version}]"
        )


__all__ = [
    "DuplicateProviderError",
    "InvalidSemverError",
    "MalformedEntryError",
    "MinVersionConfigError",
    "ProviderDecodeError",
    "ProviderProbeTimeoutError",
    "ProviderProcessError",
    "ProviderVersionError",
]
