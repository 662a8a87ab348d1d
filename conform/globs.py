"""Glob matching for package.json "files" patterns.

Patterns are matched segment by segment, so "*" never crosses a "/" and "**"
spans any number of directories. Braces expand before matching. As with
minimatch, a bare directory pattern such as "dist" matches only the path
"dist" itself, not the files beneath it.
"""

from __future__ import annotations

import re
from fnmatch import fnmatchcase

BRACE_PATTERN = re.compile(r"\{([^{}]*,[^{}]*)\}")


def expand_braces(pattern: str) -> list[str]:
    """Expand "{a,b}" alternatives: "dist/*.{js,map}" -> ["dist/*.js", "dist/*.map"]."""
    match = BRACE_PATTERN.search(pattern)
    if not match:
        return [pattern]
    head, tail = pattern[: match.start()], pattern[match.end() :]
    result = []
    for option in match.group(1).split(","):
        result.extend(expand_braces(head + option + tail))
    return result


def _normalize(path: str) -> list[str]:
    path = path.strip()
    while path.startswith("./"):
        path = path[2:]
    return [part for part in path.split("/") if part]


def _match_segment(name: str, pattern: str) -> bool:
    # Wildcards do not match a leading dot unless the pattern spells it out
    if name.startswith(".") and not pattern.startswith("."):
        return False
    return fnmatchcase(name, pattern)


def _match_parts(parts: list[str], patterns: list[str]) -> bool:
    if not patterns:
        return not parts
    head, rest = patterns[0], patterns[1:]
    if head == "**":
        for i in range(len(parts) + 1):
            if any(p.startswith(".") for p in parts[:i]):
                break
            if _match_parts(parts[i:], rest):
                return True
        return False
    if not parts:
        return False
    return _match_segment(parts[0], head) and _match_parts(parts[1:], rest)


def matches(path: str, pattern: str) -> bool:
    """True if path is selected by the glob pattern."""
    parts = _normalize(path)
    for expanded in expand_braces(pattern):
        pattern_parts = _normalize(expanded)
        if not pattern_parts:
            continue
        if _match_parts(parts, pattern_parts):
            return True
    return False


def any_match(path: str, patterns: list[str]) -> bool:
    return any(matches(path, pattern) for pattern in patterns)
