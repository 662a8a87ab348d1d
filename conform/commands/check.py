"""Check, list and variants command implementations."""

import sys
from pathlib import Path
from typing import TextIO

from rich.console import Console
from rich.table import Table

from ..checks import CheckContext
from ..policy import VARIANTS, Policy, resolve_policy
from ..report import TapReporter, summarize
from ..rules import build_runner


def _resolve(console: Console, root: Path, variant: str | None, policy_path: Path | None) -> Policy | None:
    try:
        return resolve_policy(root, variant=variant, policy_path=policy_path)
    except (OSError, ValueError) as exc:
        console.print(f"Invalid policy: {exc}", style="bold red")
        return None


def run_check(
    root: Path,
    variant: str | None = None,
    policy_path: Path | None = None,
    fail: bool = True,
    stream: TextIO | None = None,
) -> int:
    """Run every convention check against a package root.

    Args:
        root: Directory holding package.json, .gitlab-ci.yml and README.md
        variant: Built-in policy variant (overrides the policy file's variant)
        policy_path: Explicit policy TOML (default: <root>/conform.toml if present)
        fail: Exit non-zero when any check fails
        stream: Where the TAP report goes (default: stdout)

    Returns:
        Exit code (0 = all passed, 1 = failures found, 2 = bad policy)
    """
    console = Console(stderr=True)

    policy = _resolve(console, root, variant, policy_path)
    if policy is None:
        return 2

    console.print(f"Checking {root} against {policy.variant} conventions...", style="dim")

    runner = build_runner(policy)
    ctx = CheckContext(root=root, policy=policy)
    results = runner.run(ctx, TapReporter(stream or sys.stdout))

    counts = summarize(results)
    failed = counts["failed"] + counts["crashed"]
    if counts["crashed"]:
        console.print(f"⚠ {counts['crashed']} check(s) crashed; see 'severity: crash' entries", style="yellow")
    if failed:
        console.print(f"✗ {failed} of {counts['total']} checks failed", style="bold red")
    else:
        console.print(f"✓ All {counts['total']} checks passed", style="bold green")

    if fail and failed:
        return 1
    return 0


def run_list(root: Path, variant: str | None = None, policy_path: Path | None = None) -> int:
    """Print the registered checks in report order without running them."""
    console = Console()

    policy = _resolve(Console(stderr=True), root, variant, policy_path)
    if policy is None:
        return 2

    runner = build_runner(policy)
    table = Table(title=f"Checks ({policy.variant})")
    table.add_column("#", justify="right", style="cyan")
    table.add_column("Description")
    for check in runner.checks:
        table.add_row(str(check.number), check.description)

    console.print(table)
    return 0


def run_variants() -> int:
    """Print the built-in policy variants."""
    console = Console()

    table = Table(title="Policy variants")
    table.add_column("Variant", style="cyan", no_wrap=True)
    table.add_column("Repository")
    table.add_column("Description")
    for name, policy in VARIANTS.items():
        table.add_row(name, policy.repository_prefix, policy.description)

    console.print(table)
    return 0
