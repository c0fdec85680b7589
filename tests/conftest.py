"""Pytest configuration for floe-provider-version tests.

Fixtures:
    - make_provider: Factory writing an executable fake provider script
    - make_wrapper_provider: Factory writing a shell provider that spawns a child
    - process_is_running: Predicate telling whether a pid is still alive
    - span_exporter: TracerProvider wired to an InMemorySpanExporter
"""

from __future__ import annotations

import json
import os
import shlex
import stat
import sys
import textwrap
from collections.abc import Callable, Generator
from pathlib import Path
from typing import Any
from unittest.mock import patch

import pytest
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "requirement(id): Mark test with requirement ID for traceability",
    )


# =============================================================================
# Fake Provider Fixtures
# =============================================================================


@pytest.fixture
def make_provider(tmp_path: Path) -> Callable[..., str]:
    """Create executable fake providers in tmp_path.

    The returned factory writes a Python script that answers ``--version``
    the way a real provider binary would.

    Args:
        tmp_path: Pytest tmp_path fixture.

    Returns:
        Factory taking stdout, stderr, exit_code, sleep and pid_file keyword
        arguments and returning the script path.

    Example:
        def test_probe(make_provider):
            provider = make_provider(stdout='{"version": "v1.0.0"}')
            assert get_provider_version(provider) == "v1.0.0"
    """
    counter = 0

    def _make(
        *,
        stdout: str | dict[str, Any] = "",
        stderr: str = "",
        exit_code: int = 0,
        sleep: float = 0.0,
        pid_file: Path | None = None,
    ) -> str:
        nonlocal counter
        counter += 1
        if isinstance(stdout, dict):
            stdout = json.dumps(stdout)

        script = tmp_path / f"provider-{counter}"
        pid_path = str(pid_file) if pid_file else None
        body = textwrap.dedent(
            f"""\
            import os
            import sys
            import time

            pid_file = {pid_path!r}
            if pid_file:
                with open(pid_file, "w") as fh:
                    fh.write(str(os.getpid()))
            if sys.argv[1:] != ["--version"]:
                sys.stderr.write("unexpected arguments: %r" % sys.argv[1:])
                sys.exit(64)
            time.sleep({sleep!r})
            sys.stdout.write({stdout!r})
            sys.stderr.write({stderr!r})
            sys.exit({exit_code!r})
            """
        )
        script.write_text(f"#!{sys.executable}\n{body}")
        script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return str(script)

    return _make


@pytest.fixture
def make_wrapper_provider(tmp_path: Path) -> Callable[..., str]:
    """Create ``/bin/sh`` providers that run a child process before answering.

    The child inherits the wrapper's stdout and stderr, the way a provider
    shell wrapper around a real binary does. Its pid is written to pid_file.

    Args:
        tmp_path: Pytest tmp_path fixture.

    Returns:
        Factory taking sleep, pid_file and stdout keyword arguments and
        returning the script path.
    """

    def _make(
        *,
        sleep: float,
        pid_file: Path,
        stdout: str = '{"version": "1.0.0"}',
    ) -> str:
        script = tmp_path / "provider-wrapper"
        script.write_text(
            textwrap.dedent(
                f"""\
                #!/bin/sh
                sleep {sleep} &
                echo $! > {shlex.quote(str(pid_file))}
                wait $!
                echo {shlex.quote(stdout)}
                """
            )
        )
        script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return str(script)

    return _make


@pytest.fixture
def version_record() -> dict[str, str]:
    """Version record as printed by a well-behaved provider."""
    return {
        "version": "v0.4.0",
        "buildDate": "2024-05-01T00:00:00Z",
        "minDriverVersion": "v0.3.0",
    }


@pytest.fixture
def process_is_running() -> Callable[[int], bool]:
    """Return a predicate telling whether a pid is still alive.

    A killed orphan stays a zombie until init reaps it, and in containers
    init may never do so. Zombies count as stopped.
    """

    def _is_running(pid: int) -> bool:
        try:
            os.kill(pid, 0)
        except ProcessLookupError:
            return False
        except PermissionError:
            return True
        try:
            stat_line = Path(f"/proc/{pid}/stat").read_text()
        except OSError:
            return True
        # State is the first field after the parenthesized command name
        return stat_line.rpartition(")")[2].split()[0] != "Z"

    return _is_running


# =============================================================================
# Tracing Fixtures
# =============================================================================


@pytest.fixture
def span_exporter() -> Generator[InMemorySpanExporter, None, None]:
    """Route spans from get_tracer() to an in-memory exporter.

    Yields:
        InMemorySpanExporter collecting finished spans.
    """
    exporter = InMemorySpanExporter()
    provider = TracerProvider(resource=Resource.create({}))
    provider.add_span_processor(SimpleSpanProcessor(exporter))

    def _get_tracer() -> Any:
        return provider.get_tracer("floe.provider_version")

    with (
        patch("floe_provider_version.probe.get_tracer", _get_tracer),
        patch("floe_provider_version.checker.get_tracer", _get_tracer),
    ):
        yield exporter
    provider.shutdown()
