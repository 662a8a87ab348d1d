"""README heading structure conventions."""

from __future__ import annotations

import yaml

from ..checks import CheckContext, CheckFailure, expect
from ..models import Heading
from ..parser import load_readme
from ..policy import Policy
from ..runner import Runner


def _show(heading: Heading) -> str:
    return f"{'#' * heading.depth} {heading.text}"


def _expect_heading(headings: list[Heading], index: int, depth: int, text: str) -> None:
    wanted = f"{'#' * depth} {text}"
    expect(len(headings) > index, f"heading {index + 1} is missing, expected {wanted!r}")
    heading = headings[index]
    expect(
        heading.depth == depth and heading.text == text,
        f"heading {index + 1} is {_show(heading)!r}, expected {wanted!r}",
    )


def load(ctx: CheckContext) -> None:
    ctx.readme = None
    name = ctx.policy.readme_file
    path = ctx.root / name
    try:
        readme = load_readme(path)
    except OSError as exc:
        raise CheckFailure(f"cannot read {name}: {exc.strerror or exc}") from exc
    except UnicodeDecodeError as exc:
        raise CheckFailure(f"{name} is not UTF-8 text") from exc
    except yaml.YAMLError as exc:
        raise CheckFailure(f"{name} front matter is not valid YAML: {exc}") from exc
    expect(readme.headings, f"{name} has no headings")
    ctx.readme = readme


def check_title(ctx: CheckContext) -> None:
    pkg = ctx.require_manifest()
    readme = ctx.require_readme()
    expect(pkg.name, 'cannot check the title because "name" is missing')
    _expect_heading(readme.headings, 0, 1, pkg.name)


def check_second_heading(ctx: CheckContext) -> None:
    readme = ctx.require_readme()
    _expect_heading(readme.headings, 1, 2, ctx.policy.readme_second_heading)


def check_third_heading(ctx: CheckContext) -> None:
    readme = ctx.require_readme()
    _expect_heading(readme.headings, 2, 2, ctx.policy.readme_third_heading)


def check_required_heading(ctx: CheckContext) -> None:
    readme = ctx.require_readme()
    text = ctx.policy.readme_required_heading
    expect(
        any(h.depth == 2 and h.text == text for h in readme.headings),
        f"no '## {text}' heading",
    )


def check_trailing_headings(ctx: CheckContext) -> None:
    readme = ctx.require_readme()
    expected = ctx.policy.readme_trailing_headings
    count = len(expected)
    expect(
        len(readme.headings) >= count,
        f"only {len(readme.headings)} heading(s), expected the last {count} to be "
        + ", ".join(f"'## {t}'" for t in expected),
    )
    tail = readme.headings[-count:]
    for position, (heading, text) in enumerate(zip(tail, expected), start=1):
        expect(
            heading.depth == 2 and heading.text == text,
            f"heading {position} of the last {count} is {_show(heading)!r}, expected '## {text}'",
        )


def check_description_position(ctx: CheckContext) -> None:
    pkg = ctx.require_manifest()
    readme = ctx.require_readme()
    expect(pkg.description, 'cannot locate the description because "description" is missing')
    expect(len(readme.headings) >= 2, "the description needs a heading before and after it")

    first, second = readme.headings[0], readme.headings[1]
    start = first.offset + len(first.raw)
    index = readme.content.find(pkg.description, start)
    expect(
        index >= 0 and index + len(pkg.description) <= second.offset,
        f"description {pkg.description!r} does not appear between {_show(first)!r} and {_show(second)!r}",
    )


def register_readme_checks(runner: Runner, policy: Policy) -> None:
    """Register the README checks in report order."""
    name = policy.readme_file
    runner.register(f"{name} should be a Markdown file with headings", load)
    runner.register(f'{name} first heading should be "# " + package.json "name"', check_title)
    runner.register(f'{name} second heading should be "## {policy.readme_second_heading}"', check_second_heading)
    runner.register(f'{name} third heading should be "## {policy.readme_third_heading}"', check_third_heading)
    runner.register(f'{name} should have an "## {policy.readme_required_heading}" heading', check_required_heading)
    runner.register(
        f"{name} last headings should be " + ", ".join(f'"## {t}"' for t in policy.readme_trailing_headings),
        check_trailing_headings,
    )
    runner.register(
        f'{name} should have package.json "description" between the first and second heading',
        check_description_position,
    )
