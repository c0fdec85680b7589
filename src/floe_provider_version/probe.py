"""Provider version probing (``<provider> --version``).

The driver asks each provider binary to describe itself. The provider prints a
single JSON object on stdout:

    {"version": "v0.4.0", "buildDate": "2024-05-01T00:00:00Z", "minDriverVersion": "v0.3.0"}

Functions:
    get_provider_version_info: Run the provider and decode its version record.
    get_provider_version: Run the provider and return only its version.
    get_provider_version_info_async: Asyncio variant, honors task cancellation.
    get_provider_version_async: Asyncio variant returning only the version.

Every call spawns its own child process in a new session and shares no state
with other calls. When the deadline expires, or the awaiting task is
cancelled, the whole process group (the provider and anything it started) is
killed and the child reaped before the error propagates.

Example:
    >>> from floe_provider_version.probe import get_provider_version
    >>> get_provider_version("/etc/csi/providers/vault", timeout=5)  # doctest: +SKIP
    'v0.4.0'
"""

from __future__ import annotations

import asyncio
import contextlib
import os
import signal
import subprocess

import structlog
from pydantic import ValidationError

from floe_provider_version.errors import (
    ProviderDecodeError,
    ProviderProbeTimeoutError,
    ProviderProcessError,
)
from floe_provider_version.models import ProviderVersionInfo
from floe_provider_version.tracing import (
    ATTR_CURRENT_VERSION,
    get_tracer,
    provider_version_span,
)

logger = structlog.get_logger(__name__)

# Argument asking a provider to print its version record
VERSION_FLAG = "--version"


def get_provider_version_info(
    provider: str,
    *,
    timeout: float | None = None,
) -> ProviderVersionInfo:
    """Run ``provider --version`` and decode the version record.

    Args:
        provider: Path or name of the provider executable.
        timeout: Seconds to wait for the provider. None waits indefinitely.

    Returns:
        The decoded ProviderVersionInfo.

    Raises:
        ProviderProbeTimeoutError: If the provider did not exit before the
            deadline. The provider and its children have been killed.
        ProviderProcessError: If the provider could not be started or exited
            non-zero.
        ProviderDecodeError: If stdout is not the expected JSON record.
    """
    with provider_version_span(get_tracer(), "probe", provider=provider) as span:
        try:
            process = subprocess.Popen(
                [provider, VERSION_FLAG],
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                start_new_session=True,
            )
        except OSError as e:
            raise ProviderProcessError(provider, reason=str(e)) from e

        # Popen.__exit__ closes the pipes and reaps the child on every path
        with process:
            try:
                stdout, stderr = process.communicate(timeout=timeout)
            except subprocess.TimeoutExpired as e:
                _kill_process_group(process.pid)
                # Group is dead, so the pipes close; collect what stderr had so far
                _, stderr = process.communicate()
                logger.warning(
                    "provider_version_probe_timeout",
                    provider=provider,
                    timeout=timeout,
                )
                raise ProviderProbeTimeoutError(
                    provider,
                    timeout=e.timeout,
                    stderr=_decode_stream(stderr),
                ) from e
            except BaseException:
                _kill_process_group(process.pid)
                raise

        info = _read_version_record(provider, process.returncode, stdout, stderr)
        span.set_attribute(ATTR_CURRENT_VERSION, info.version)

    return info


def get_provider_version(provider: str, *, timeout: float | None = None) -> str:
    """Return the version a provider reports for itself.

    Args:
        provider: Path or name of the provider executable.
        timeout: Seconds to wait for the provider. None waits indefinitely.

    Returns:
        The ``version`` field of the record, ``""`` if the provider omitted it.

    Raises:
        ProviderProbeTimeoutError: If the deadline expired.
        ProviderProcessError: If the provider could not run or exited non-zero.
        ProviderDecodeError: If stdout is not the expected JSON record.
    """
    return get_provider_version_info(provider, timeout=timeout).version


async def get_provider_version_info_async(
    provider: str,
    *,
    timeout: float | None = None,
) -> ProviderVersionInfo:
    """Asyncio variant of get_provider_version_info().

    Cancelling the awaiting task kills the provider's process group and reaps
    the child, then re-raises asyncio.CancelledError.

    Args:
        provider: Path or name of the provider executable.
        timeout: Seconds to wait for the provider. None waits indefinitely.

    Returns:
        The decoded ProviderVersionInfo.

    Raises:
        ProviderProbeTimeoutError: If the deadline expired.
        ProviderProcessError: If the provider could not run or exited non-zero.
        ProviderDecodeError: If stdout is not the expected JSON record.
    """
    with provider_version_span(get_tracer(), "probe", provider=provider) as span:
        try:
            process = await asyncio.create_subprocess_exec(
                provider,
                VERSION_FLAG,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                start_new_session=True,
            )
        except OSError as e:
            raise ProviderProcessError(provider, reason=str(e)) from e

        try:
            stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=timeout)
        except asyncio.TimeoutError as e:
            await _kill_process(process)
            logger.warning(
                "provider_version_probe_timeout",
                provider=provider,
                timeout=timeout,
            )
            raise ProviderProbeTimeoutError(provider, timeout=timeout or 0.0) from e
        except asyncio.CancelledError:
            await _kill_process(process)
            logger.debug("provider_version_probe_cancelled", provider=provider)
            raise

        info = _read_version_record(provider, process.returncode, stdout, stderr)
        span.set_attribute(ATTR_CURRENT_VERSION, info.version)

    return info


async def get_provider_version_async(provider: str, *, timeout: float | None = None) -> str:
    """Asyncio variant of get_provider_version()."""
    info = await get_provider_version_info_async(provider, timeout=timeout)
    return info.version


def _read_version_record(
    provider: str,
    returncode: int | None,
    stdout: bytes,
    stderr: bytes,
) -> ProviderVersionInfo:
    """Turn a finished provider run into a ProviderVersionInfo."""
    if returncode != 0:
        raise ProviderProcessError(
            provider,
            reason=f"exit status {returncode}",
            stderr=_decode_stream(stderr),
            returncode=returncode,
        )

    try:
        info = ProviderVersionInfo.model_validate_json(stdout)
    except ValidationError as e:
        raise ProviderDecodeError(provider, reason=str(e)) from e

    logger.debug(
        "provider_version_probed",
        provider=provider,
        version=info.version,
        build_date=info.build_date,
    )
    return info


def _kill_process_group(pid: int) -> None:
    """SIGKILL the provider and everything it spawned.

    Providers run in their own session, so the group id equals the child's
    pid. Processes the provider started hold the same stdout/stderr pipes
    and must die too, or reading the pipes blocks until they exit.
    """
    # The group may already be gone
    with contextlib.suppress(ProcessLookupError):
        os.killpg(pid, signal.SIGKILL)


async def _kill_process(process: asyncio.subprocess.Process) -> None:
    """Kill the provider's process group and wait for the child to be reaped."""
    _kill_process_group(process.pid)
    await process.wait()


def _decode_stream(data: bytes | str | None) -> str:
    if data is None:
        return ""
    if isinstance(data, str):
        return data
    return data.decode("utf-8", errors="replace")


__all__ = [
    "VERSION_FLAG",
    "get_provider_version",
    "get_provider_version_async",
    "get_provider_version_info",
    "get_provider_version_info_async",
]
