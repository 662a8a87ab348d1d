"""CI pipeline conventions for .gitlab-ci.yml."""

from __future__ import annotations

import yaml

from ..checks import CheckContext, CheckFailure, expect, expect_equal
from ..models import CIConfig
from ..policy import Policy
from ..runner import Runner


def load_ci(ctx: CheckContext) -> None:
    ctx.ci = None
    name = ctx.policy.ci_file
    path = ctx.root / name
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise CheckFailure(f"cannot read {name}: {exc.strerror or exc}") from exc
    except UnicodeDecodeError as exc:
        raise CheckFailure(f"{name} is not UTF-8 text") from exc
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise CheckFailure(f"{name} is not valid YAML: {exc}") from exc
    expect(isinstance(data, dict), f"{name} must hold a YAML mapping")
    ctx.ci = CIConfig(raw=data)


def check_validate_job(ctx: CheckContext) -> None:
    ci = ctx.require_ci()
    expected = ctx.policy.ci_validate_job
    expect(ci.job("validate") is not None, '"validate" job is missing')
    expect_equal(ci.raw["validate"], expected, '"validate"')


def check_deploy_job(ctx: CheckContext) -> None:
    pkg = ctx.require_manifest()
    if not pkg.homepage:
        return
    ci = ctx.require_ci()
    policy = ctx.policy

    deploy = ci.job("deploy")
    expect(deploy is not None, '"deploy" job is missing')
    expect_equal(deploy.script, policy.ci_deploy_script, '"deploy.script"')
    expect(deploy.variables, '"deploy.variables" is missing')

    slug = pkg.scope_slug
    expect(slug, f'"deploy.variables" cannot be derived because "name" {pkg.name!r} has no scope')
    for key, value in policy.deploy_variables_for(slug).items():
        expect_equal(deploy.variables.get(key), value, f'"deploy.variables.{key}"')


def register_ci_checks(runner: Runner, policy: Policy) -> None:
    """Register the CI configuration checks in report order."""
    name = policy.ci_file
    runner.register(f"{name} should be a valid YAML file", load_ci)
    runner.register(f"{name} should validate build errors", check_validate_job)
    runner.register(f"{name} should deploy to package.homepage as static (if defined)", check_deploy_job)
