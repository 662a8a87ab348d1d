"""TAP version 14 rendering of check results."""

from __future__ import annotations

import json
import sys
from typing import TYPE_CHECKING, TextIO

if TYPE_CHECKING:
    from .runner import CheckResult

TAP_VERSION = "TAP version 14"


def _quote(message: str) -> str:
    # A JSON string is a valid YAML double-quoted scalar
    return json.dumps(message, ensure_ascii=False)


def _escape(description: str) -> str:
    # An unescaped "#" would start a TAP directive
    return description.replace("\\", "\\\\").replace("#", "\\#")


def format_plan(count: int) -> str:
    return f"{TAP_VERSION}\n1..{count}"


def format_result(result: "CheckResult") -> str:
    """Render one result as an ok / not ok line plus its diagnostic block."""
    if result.ok:
        return f"ok {result.number} - {_escape(result.description)}"
    lines = [
        f"not ok {result.number} - {_escape(result.description)}",
        "  ---",
        f"  message: {_quote(result.message)}",
    ]
    if result.crashed:
        lines.append("  severity: crash")
    lines.append("  ...")
    return "\n".join(lines)


class TapReporter:
    """Writes the report line by line as results arrive."""

    def __init__(self, stream: TextIO | None = None):
        self.stream = stream or sys.stdout

    def _write(self, text: str) -> None:
        self.stream.write(text + "\n")
        self.stream.flush()

    def plan(self, count: int) -> None:
        self._write(format_plan(count))

    def result(self, result: "CheckResult") -> None:
        self._write(format_result(result))


def summarize(results: list["CheckResult"]) -> dict[str, int]:
    """Count passed, failed and crashed checks."""
    counts = {"total": len(results), "passed": 0, "failed": 0, "crashed": 0}
    for r in results:
        if r.ok:
            counts["passed"] += 1
        elif r.crashed:
            counts["crashed"] += 1
        else:
            counts["failed"] += 1
    return counts
