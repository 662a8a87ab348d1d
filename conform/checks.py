"""Failure signalling and the shared context handed to every check."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .models import CIConfig, Manifest, Readme
    from .policy import Policy


class CheckFailure(Exception):
    """A violated convention. The message names the expectation that failed."""

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message


def expect(condition: Any, message: str) -> None:
    """Raise CheckFailure(message) unless condition is truthy."""
    if not condition:
        raise CheckFailure(message)


def expect_equal(actual: Any, expected: Any, label: str) -> None:
    """Raise CheckFailure unless actual == expected."""
    if actual != expected:
        raise CheckFailure(f"{label} is {actual!r}, expected {expected!r}")


@dataclass
class CheckContext:
    """Documents loaded so far, shared by reference across a run.

    Loading checks fill the document slots; later checks read them through
    the require_* accessors so a failed load turns into a failed check.
    """

    root: Path
    policy: "Policy"
    manifest: "Manifest | None" = None
    ci: "CIConfig | None" = None
    readme: "Readme | None" = None

    def require_manifest(self) -> "Manifest":
        if self.manifest is None:
            raise CheckFailure("package.json was not loaded")
        return self.manifest

    def require_ci(self) -> "CIConfig":
        if self.ci is None:
            raise CheckFailure(".gitlab-ci.yml was not loaded")
        return self.ci

    def require_readme(self) -> "Readme":
        if self.readme is None:
            raise CheckFailure(f"{self.policy.readme_file} was not loaded")
        return self.readme
