"""package.json conventions."""

from __future__ import annotations

import json

from .. import semver
from ..checks import CheckContext, CheckFailure, expect, expect_equal
from ..globs import any_match
from ..models import Manifest
from ..policy import Policy
from ..runner import Runner

MANIFEST_FILE = "package.json"


def _reject_constant(name: str) -> None:
    # json accepts NaN, Infinity and -Infinity, which JSON itself does not
    raise ValueError(f"{name} is not a JSON value")


def load_manifest(ctx: CheckContext) -> None:
    ctx.manifest = None
    path = ctx.root / MANIFEST_FILE
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise CheckFailure(f"cannot read {MANIFEST_FILE}: {exc.strerror or exc}") from exc
    except UnicodeDecodeError as exc:
        raise CheckFailure(f"{MANIFEST_FILE} is not UTF-8 text") from exc
    try:
        data = json.loads(text, parse_constant=_reject_constant)
    except ValueError as exc:
        raise CheckFailure(f"{MANIFEST_FILE} is not valid JSON: {exc}") from exc
    expect(isinstance(data, dict), f"{MANIFEST_FILE} must hold a JSON object")
    ctx.manifest = Manifest.from_dict(data)


def check_name(ctx: CheckContext) -> None:
    pkg = ctx.require_manifest()
    expect(pkg.name, '"name" is missing')
    expect(pkg.name.startswith(ctx.policy.name_prefix), f'"name" {pkg.name!r} does not start with {ctx.policy.name_prefix!r}')


def check_version(ctx: CheckContext) -> None:
    pkg = ctx.require_manifest()
    floor = ctx.policy.min_version
    expect(pkg.version, '"version" is missing')
    expect(semver.is_valid(pkg.version), f'"version" {pkg.version!r} is not a valid semver')
    expect(semver.gte(pkg.version, floor), f'"version" {pkg.version} is lower than {floor}')


def check_description(ctx: CheckContext) -> None:
    pkg = ctx.require_manifest()
    expect(pkg.description, '"description" is missing')


def check_module(ctx: CheckContext) -> None:
    pkg = ctx.require_manifest()
    policy = ctx.policy
    expect(pkg.module, '"module" is missing')
    expect(pkg.module.startswith(policy.module_prefix), f'"module" {pkg.module!r} does not start with {policy.module_prefix!r}')
    expect(
        pkg.module.endswith(policy.script_extension),
        f'"module" {pkg.module!r} does not end with {policy.script_extension!r}',
    )


def check_minified_entry(ctx: CheckContext) -> None:
    pkg = ctx.require_manifest()
    field = ctx.policy.minified_field
    value = pkg.entry(field)
    expect(value, f'"{field}" is missing')
    expect(pkg.module, f'"{field}" cannot be derived because "module" is missing')
    expect_equal(value, ctx.policy.minified_path(pkg.module), f'"{field}"')


def check_no_browser(ctx: CheckContext) -> None:
    pkg = ctx.require_manifest()
    expect("browser" not in pkg.raw, '"browser" should not be defined')


def check_build_script(ctx: CheckContext) -> None:
    pkg = ctx.require_manifest()
    expect(pkg.scripts is not None, '"scripts" is missing')
    expect(pkg.script("build"), '"scripts.build" is missing')


def check_prepublish_only(ctx: CheckContext) -> None:
    pkg = ctx.require_manifest()
    expect(pkg.scripts is not None, '"scripts" is missing')
    expect_equal(pkg.script("prepublishOnly"), ctx.policy.prepublish_command, '"scripts.prepublishOnly"')


def check_lint_script(ctx: CheckContext) -> None:
    pkg = ctx.require_manifest()
    expect(pkg.scripts is not None, '"scripts" is missing')
    lint = pkg.script("lint")
    expect(lint, '"scripts.lint" is missing')
    for tool in ctx.policy.lint_tools:
        expect(tool in lint, f'"scripts.lint" does not run {tool}')


def check_no_prepublish(ctx: CheckContext) -> None:
    pkg = ctx.require_manifest()
    expect(not pkg.script("prepublish"), '"scripts.prepublish" is deprecated; use "prepublishOnly"')


def check_pretest(ctx: CheckContext) -> None:
    pkg = ctx.require_manifest()
    if not pkg.script("test"):
        return
    pretest = pkg.script("pretest")
    if pretest is None:
        return
    build = ctx.policy.build_command
    expect(build in pretest, f'"scripts.pretest" {pretest!r} does not run {build!r}')


def check_files(ctx: CheckContext) -> None:
    pkg = ctx.require_manifest()
    policy = ctx.policy
    expect(pkg.files is not None, '"files" must be a list')
    required = [("README", policy.readme_file), ("module", pkg.module)]
    required.append((policy.minified_field, pkg.entry(policy.minified_field)))
    if policy.minified_field != "browser":
        required.append(("browser", pkg.browser))
    for label, path in required:
        if path:
            expect(any_match(path, pkg.files), f'"files" does not include {label} {path!r}')


def check_repository(ctx: CheckContext) -> None:
    pkg = ctx.require_manifest()
    policy = ctx.policy
    repo = pkg.repository
    expect(repo is not None, '"repository" must be an object with "type" and "url"')
    expect_equal(repo.type, policy.repository_type, '"repository.type"')
    expect(repo.url, '"repository.url" is missing')
    expect(
        repo.url.startswith(policy.repository_prefix),
        f'"repository.url" {repo.url!r} does not start with {policy.repository_prefix!r}',
    )


def check_keywords(ctx: CheckContext) -> None:
    pkg = ctx.require_manifest()
    expect(pkg.keywords is not None, '"keywords" must be a list')


def check_author(ctx: CheckContext) -> None:
    pkg = ctx.require_manifest()
    expect(pkg.author, '"author" is missing')


def check_license(ctx: CheckContext) -> None:
    pkg = ctx.require_manifest()
    expect_equal(pkg.license, ctx.policy.license, '"license"')


def check_bugs(ctx: CheckContext) -> None:
    pkg = ctx.require_manifest()
    expect(pkg.bugs_url, '"bugs.url" is missing')
    expect(pkg.repository and pkg.repository.url, '"bugs.url" cannot be derived because "repository.url" is missing')
    expect_equal(pkg.bugs_url, ctx.policy.bugs_url_for(pkg.repository.url), '"bugs.url"')


def check_prettier(ctx: CheckContext) -> None:
    pkg = ctx.require_manifest()
    minimum = ctx.policy.prettier_min_print_width
    expect(pkg.prettier is not None, '"prettier" config is missing')
    width = pkg.prettier.get("printWidth")
    expect(
        isinstance(width, (int, float)) and not isinstance(width, bool) and width >= minimum,
        f'"prettier.printWidth" is {width!r}, expected {minimum} or more',
    )


def check_homepage(ctx: CheckContext) -> None:
    pkg = ctx.require_manifest()
    if not pkg.homepage:
        return
    slug = pkg.scope_slug
    expect(slug, f'"homepage" cannot be derived because "name" {pkg.name!r} has no scope')
    expect_equal(pkg.homepage, ctx.policy.homepage_for(slug), '"homepage"')


def check_publish_config(ctx: CheckContext) -> None:
    pkg = ctx.require_manifest()
    config = pkg.publish_config
    expect(config is not None, '"publishConfig" is missing')
    expect_equal(config.access, ctx.policy.publish_access, '"publishConfig.access"')
    expect_equal(config.registry, ctx.policy.publish_registry, '"publishConfig.registry"')


def register_manifest_checks(runner: Runner, policy: Policy) -> None:
    """Register the package.json checks in report order."""
    pkg = MANIFEST_FILE
    field = policy.minified_field
    ext, min_ext = policy.script_extension, policy.minified_extension

    runner.register(f"{pkg} should be a valid JSON file", load_manifest)
    runner.register(f'{pkg} "name" property should start with "{policy.name_prefix}"', check_name)
    runner.register(
        f'{pkg} "version" should be a valid semver and greater than {policy.min_version}',
        check_version,
    )
    runner.register(f'{pkg} "description" property should exist', check_description)
    runner.register(
        f'{pkg} "module" should begin with "{policy.module_prefix}" and end with "{ext}"',
        check_module,
    )
    runner.register(
        f'{pkg} "{field}" should be the same as "module" but end with "{min_ext}" instead of "{ext}"',
        check_minified_entry,
    )
    if policy.forbid_browser:
        runner.register(f'{pkg} "browser" should not be defined', check_no_browser)
    runner.register(f'{pkg} "scripts.build" should be defined', check_build_script)
    runner.register(f'{pkg} "scripts.prepublishOnly" should be "{policy.prepublish_command}"', check_prepublish_only)
    runner.register(f'{pkg} "scripts.lint" should run {" and ".join(policy.lint_tools)}', check_lint_script)
    runner.register(f'{pkg} "scripts.prepublish" should not be defined', check_no_prepublish)
    runner.register(f'{pkg} "scripts.pretest" should run "{policy.build_command}" (if test is defined)', check_pretest)
    runner.register(f'{pkg} "files" should include "{policy.readme_file}", module, {field}', check_files)
    runner.register(
        f'{pkg} "repository" should point to a {{type: {policy.repository_type}, url: "{policy.repository_prefix}..."}}',
        check_repository,
    )
    runner.register(f'{pkg} "keywords" should be defined', check_keywords)
    runner.register(f'{pkg} "author" should be defined', check_author)
    runner.register(f'{pkg} "license" should be "{policy.license}"', check_license)
    runner.register(
        f'{pkg} "bugs" should point the same code base as repository, but with "{policy.bugs_suffix}" added',
        check_bugs,
    )
    runner.register(
        f'{pkg} "prettier" should have a "printWidth" of {policy.prettier_min_print_width} or more',
        check_prettier,
    )
    runner.register(
        f'{pkg} "homepage" is at {policy.homepage_for("<name>")} (if defined)',
        check_homepage,
    )
    runner.register(f'{pkg} "publishConfig" should push to {policy.publish_registry}', check_publish_config)
