"""Unit tests for floe-provider-version error classes."""

from __future__ import annotations

import pytest

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


class TestProviderVersionError:
    """Tests for the base class."""

    @pytest.mark.requirement("ERR-HIERARCHY")
    def test_basic_message(self) -> None:
        """Test basic error message."""
        error = ProviderVersionError("Something went wrong")
        assert str(error) == "Something went wrong"
        assert error.message == "Something went wrong"

    @pytest.mark.requirement("ERR-HIERARCHY")
    @pytest.mark.parametrize(
        "error",
        [
            ProviderProcessError("p", reason="exit status 1"),
            ProviderProbeTimeoutError("p", timeout=1.0),
            ProviderDecodeError("p", reason="bad json"),
            InvalidSemverError("x"),
            MalformedEntryError("x"),
            DuplicateProviderError("p", "1.0.0", "1.0.0"),
        ],
    )
    def test_all_errors_share_base(self, error: ProviderVersionError) -> None:
        """Every error can be caught as ProviderVersionError."""
        assert isinstance(error, ProviderVersionError)


class TestProviderProcessError:
    """Tests for ProviderProcessError."""

    @pytest.mark.requirement("ERR-PROCESS")
    def test_includes_stderr(self) -> None:
        """Captured stderr is part of the message."""
        error = ProviderProcessError(
            "vault-provider",
            reason="exit status 2",
            stderr="unknown flag: --version",
            returncode=2,
        )

        assert "vault-provider" in str(error)
        assert "exit status 2" in str(error)
        assert "unknown flag: --version" in str(error)
        assert error.returncode == 2
        assert error.stderr == "unknown flag: --version"

    @pytest.mark.requirement("ERR-PROCESS")
    def test_defaults(self) -> None:
        """stderr and returncode are optional."""
        error = ProviderProcessError("p", reason="No such file or directory")

        assert error.stderr == ""
        assert error.returncode is None


class TestProviderProbeTimeoutError:
    """Tests for ProviderProbeTimeoutError."""

    @pytest.mark.requirement("ERR-TIMEOUT")
    def test_is_timeout_and_process_error(self) -> None:
        """Timeouts are both TimeoutError and ProviderProcessError."""
        error = ProviderProbeTimeoutError("p", timeout=2.5)

        assert isinstance(error, TimeoutError)
        assert isinstance(error, ProviderProcessError)
        assert error.timeout == 2.5
        assert "timed out after 2.5s" in str(error)


class TestConfigErrors:
    """Tests for configuration string errors."""

    @pytest.mark.requirement("ERR-CONFIG")
    def test_malformed_entry_message(self) -> None:
        """The message names the pair and the expected format."""
        error = MalformedEntryError("vault1.0.0")

        assert "vault1.0.0" in str(error)
        assert "provider=version" in str(error)

    @pytest.mark.requirement("ERR-CONFIG")
    def test_duplicate_message(self) -> None:
        """The message names the provider and both versions."""
        error = DuplicateProviderError("vault", "1.0.0", "1.1.0")

        assert str(error) == (
            "duplicate versions defined for vault provider, versions: [1.0.0, 1.1.0]"
        )

    @pytest.mark.requirement("ERR-CONFIG")
    def test_config_errors_are_value_errors(self) -> None:
        """Configuration errors inherit from ValueError."""
        assert isinstance(MalformedEntryError("x"), MinVersionConfigError)
        assert isinstance(DuplicateProviderError("p", "1", "2"), ValueError)


class TestInvalidSemverError:
    """Tests for InvalidSemverError."""

    @pytest.mark.requirement("ERR-SEMVER")
    def test_with_provider(self) -> None:
        """The message names provider and version when known."""
        error = InvalidSemverError("bogus", provider="vault", reason="not valid")

        assert "vault" in str(error)
        assert "bogus" in str(error)
        assert "not valid" in str(error)

    @pytest.mark.requirement("ERR-SEMVER")
    def test_without_provider(self) -> None:
        """The message names the version alone otherwise."""
        error = InvalidSemverError("")

        assert "'' is not a valid semver" in str(error)
        assert error.provider is None
