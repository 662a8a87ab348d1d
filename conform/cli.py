"""CLI entrypoint for conform."""

import sys
from pathlib import Path

import click

from . import __version__
from .policy import VARIANTS


@click.group()
@click.version_option(__version__, prog_name="conform")
@click.option(
    "--root",
    "-r",
    type=click.Path(exists=False, file_okay=False, dir_okay=True, path_type=Path),
    default=None,
    help="Package directory to check (defaults to the current directory)",
)
@click.pass_context
def cli(ctx: click.Context, root: Path | None) -> None:
    """conform - Convention checker for Gramener npm packages.

    Checks package.json, .gitlab-ci.yml and README.md and prints a TAP report.
    """
    ctx.ensure_object(dict)
    if root is None:
        root = Path.cwd()

    if not root.exists() or not root.is_dir():
        raise click.BadParameter(f"Directory '{root}' does not exist.", param_hint="--root / -r")

    ctx.obj["root"] = root.resolve()


variant_option = click.option(
    "--variant",
    type=click.Choice(list(VARIANTS)),
    default=None,
    help="Built-in convention variant (default: gitlab-browser, or the policy file's variant)",
)
policy_option = click.option(
    "--policy",
    "policy_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Policy TOML file (default: <root>/conform.toml if present)",
)


@cli.command()
@variant_option
@policy_option
@click.option(
    "--fail/--no-fail",
    default=True,
    help="Exit with status 1 when any check fails (default: fail)",
)
@click.pass_context
def check(ctx: click.Context, variant: str | None, policy_path: Path | None, fail: bool) -> None:
    """Run all convention checks and print a TAP report to stdout.

    Examples:

        conform check

        conform --root ../gramex-charts check --variant gitlab-main

        conform check --no-fail | tap-parser
    """
    from .commands.check import run_check

    exit_code = run_check(ctx.obj["root"], variant=variant, policy_path=policy_path, fail=fail)
    sys.exit(exit_code)


@cli.command("list")
@variant_option
@policy_option
@click.pass_context
def list_checks(ctx: click.Context, variant: str | None, policy_path: Path | None) -> None:
    """List the checks that `check` would run, in report order."""
    from .commands.check import run_list

    exit_code = run_list(ctx.obj["root"], variant=variant, policy_path=policy_path)
    sys.exit(exit_code)


@cli.command()
def variants() -> None:
    """List the built-in convention variants."""
    from .commands.check import run_variants

    sys.exit(run_variants())


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
