"""Semantic version policy for provider compatibility.

Parsing and precedence come from the ``semver`` package. This module only
decides how versions are normalized, which strings are accepted, and how a
comparison is reported.

Version Format:
    Strict semver 2.0.0: ``MAJOR.MINOR.PATCH[-PRERELEASE][+BUILD]``.
    Partial versions ("1.2") and prefixes ("v1.2.3") are rejected by
    validation; call normalize_version() first to drop a leading ``v``.

Example:
    >>> from floe_provider_version.semver_policy import compare_versions, normalize_version
    >>> compare_versions(normalize_version("v1.2.3"), "1.2.0")
    <VersionOrdering.GREATER: 1>
"""

from __future__ import annotations

from enum import IntEnum

import semver

from floe_provider_version.errors import InvalidSemverError


class VersionOrdering(IntEnum):
    """Result of comparing two versions by semver precedence."""

    LESS = -1
    EQUAL = 0
    GREATER = 1


def normalize_version(version: str) -> str:
    """Strip a single leading ``v`` from a version string.

    Args:
        version: Version string as reported or configured.

    Returns:
        The version without one leading ``v``; unchanged otherwise.

    Examples:
        >>> normalize_version("v1.2.3")
        '1.2.3'
        >>> normalize_version("vv1.2.3")
        'v1.2.3'
    """
    return version.removeprefix("v")


def parse_semver(version: str) -> semver.Version:
    """Parse a strict semantic version.

    Args:
        version: Version string to parse.

    Returns:
        Parsed semver.Version.

    Raises:
        InvalidSemverError: If the string is not valid semver.
    """
    try:
        return semver.Version.parse(version)
    except (TypeError, ValueError) as e:
        raise InvalidSemverError(version, reason=str(e)) from e


def validate_semver(version: str) -> None:
    """Check that a string is a valid semantic version.

    Args:
        version: Version string to validate.

    Raises:
        InvalidSemverError: If the string is not valid semver.
    """
    parse_semver(version)


def compare_versions(a: str, b: str) -> VersionOrdering:
    """Compare two versions by semver precedence.

    Build metadata does not take part in precedence; a pre-release sorts
    before its release.

    Args:
        a: Left-hand version.
        b: Right-hand version.

    Returns:
        VersionOrdering of ``a`` relative to ``b``.

    Raises:
        InvalidSemverError: If either version is not valid semver.

    Examples:
        >>> compare_versions("1.0.0-rc.1", "1.0.0")
        <VersionOrdering.LESS: -1>
        >>> compare_versions("1.0.0+build.5", "1.0.0")
        <VersionOrdering.EQUAL: 0>
    """
    left = parse_semver(a)
    right = parse_semver(b)
    return VersionOrdering(left.compare(right))


__all__ = [
    "VersionOrdering",
    "compare_versions",
    "normalize_version",
    "parse_semver",
    "validate_semver",
]
