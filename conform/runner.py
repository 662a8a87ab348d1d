"""Ordered check registry and executor.

Checks run in registration order against a shared CheckContext. A check
passes by returning and fails by raising CheckFailure; either way the next
check still runs.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from .checks import CheckContext, CheckFailure
from .report import TapReporter

CheckBody = Callable[[CheckContext], None]


@dataclass(frozen=True)
class Check:
    """A registered check. `number` is 1-based and fixed at registration."""

    number: int
    description: str
    body: CheckBody


@dataclass(frozen=True)
class CheckResult:
    number: int
    description: str
    ok: bool
    message: str = ""
    crashed: bool = False


class Runner:
    """Collection of checks executed in the order they were registered."""

    def __init__(self) -> None:
        self._checks: list[Check] = []

    @property
    def checks(self) -> list[Check]:
        return list(self._checks)

    def __len__(self) -> int:
        return len(self._checks)

    def register(self, description: str, body: CheckBody) -> Check:
        """Append a check; it is not executed until run()."""
        check = Check(number=len(self._checks) + 1, description=description, body=body)
        self._checks.append(check)
        return check

    def check(self, description: str) -> Callable[[CheckBody], CheckBody]:
        """Decorator form of register()."""

        def decorator(body: CheckBody) -> CheckBody:
            self.register(description, body)
            return body

        return decorator

    def execute(self, check: Check, ctx: CheckContext) -> CheckResult:
        try:
            check.body(ctx)
        except CheckFailure as exc:
            return CheckResult(check.number, check.description, ok=False, message=exc.message)
        except Exception as exc:
            # A defect in the check itself, reported apart from rule violations
            message = f"{type(exc).__name__}: {exc}"
            return CheckResult(check.number, check.description, ok=False, message=message, crashed=True)
        return CheckResult(check.number, check.description, ok=True)

    def run(self, ctx: CheckContext, reporter: TapReporter | None = None) -> list[CheckResult]:
        """Run every check once, streaming each result to the reporter.

        The plan line is written before the first check runs, so the count is
        fixed by what has been registered at this point.
        """
        checks = list(self._checks)
        if reporter is not None:
            reporter.plan(len(checks))

        results = []
        for check in checks:
            result = self.execute(check, ctx)
            results.append(result)
            if reporter is not None:
                reporter.result(result)
        return results
