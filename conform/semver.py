"""Semantic version validation and comparison built atop packaging.version.

npm versions follow SemVer 2.0.0, which packaging's PEP 440 parser does not
accept verbatim ("1.0.0-beta.2" or "1.0.0-foo"). Validation uses the SemVer
grammar; only the numeric core is handed to packaging for ordering.
"""

from __future__ import annotations

import re

from packaging.version import Version

_NUM = r"0|[1-9][0-9]*"
_IDENT = r"(?:0|[1-9][0-9]*|[0-9]*[a-zA-Z-][0-9a-zA-Z-]*)"
SEMVER_PATTERN = re.compile(
    rf"^[v=]?({_NUM})\.({_NUM})\.({_NUM})"
    rf"(?:-({_IDENT}(?:\.{_IDENT})*))?"
    r"(?:\+([0-9a-zA-Z-]+(?:\.[0-9a-zA-Z-]+)*))?$"
)


def is_valid(version: str) -> bool:
    """True if version is a SemVer 2.0.0 string (a leading "v" or "=" is tolerated)."""
    return isinstance(version, str) and SEMVER_PATTERN.match(version.strip()) is not None


def _split(version: str) -> tuple[Version, list[str]]:
    match = SEMVER_PATTERN.match(version.strip())
    if match is None:
        raise ValueError(f"Invalid semantic version: {version!r}")
    core = Version(f"{match.group(1)}.{match.group(2)}.{match.group(3)}")
    prerelease = match.group(4).split(".") if match.group(4) else []
    return core, prerelease


def _compare_identifiers(a: list[str], b: list[str]) -> int:
    # Numeric identifiers sort numerically and before alphanumeric ones;
    # a shorter list of otherwise equal identifiers sorts first.
    for x, y in zip(a, b):
        if x == y:
            continue
        x_num, y_num = x.isdigit(), y.isdigit()
        if x_num and y_num:
            return -1 if int(x) < int(y) else 1
        if x_num != y_num:
            return -1 if x_num else 1
        return -1 if x < y else 1
    return (len(a) > len(b)) - (len(a) < len(b))


def compare(a: str, b: str) -> int:
    """Return -1, 0 or 1 by SemVer precedence. Build metadata is ignored."""
    core_a, pre_a = _split(a)
    core_b, pre_b = _split(b)
    if core_a != core_b:
        return -1 if core_a < core_b else 1
    # A prerelease has lower precedence than its release
    if pre_a and not pre_b:
        return -1
    if pre_b and not pre_a:
        return 1
    return _compare_identifiers(pre_a, pre_b)


def gte(a: str, b: str) -> bool:
    return compare(a, b) >= 0
