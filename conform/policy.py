"""Convention policies: the parameters every rule is checked against.

The built-in variants cover the package layouts in use. A project may pin a
variant and override individual fields in a `conform.toml` at its root.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any

from . import semver

POLICY_FILENAME = "conform.toml"


@dataclass(frozen=True)
class Policy:
    """All rule parameters for one convention variant."""

    variant: str = "gitlab-browser"
    description: str = "Browser bundle in 'browser', hosted on code.gramener.com"

    # package.json
    name_prefix: str = "@gramex/"
    min_version: str = "1.0.0"
    module_prefix: str = "dist/"
    script_extension: str = ".js"
    minified_extension: str = ".min.js"
    minified_field: str = "browser"
    forbid_browser: bool = False
    prepublish_command: str = "npm run lint && npm run build"
    lint_tools: tuple[str, ...] = ("prettier", "eslint")
    build_command: str = "npm run build"
    readme_file: str = "README.md"
    repository_type: str = "git"
    repository_prefix: str = "git+https://code.gramener.com/"
    bugs_suffix: str = "/-/issues"
    license: str = "MIT"
    prettier_min_print_width: int = 100
    homepage_template: str = "https://gramener.com/gramex-{slug}/"
    publish_access: str = "public"
    publish_registry: str = "https://registry.npmjs.org/"

    # .gitlab-ci.yml
    ci_file: str = ".gitlab-ci.yml"
    ci_validate_job: dict[str, Any] = field(
        default_factory=lambda: {"image": "gramener/builderrors", "script": "builderrors"}
    )
    ci_deploy_script: str = "deploy"
    ci_deploy_variables: dict[str, str] = field(
        default_factory=lambda: {
            "SERVER": "gramener.com",
            "URL": "gramex-{slug}",
            "VERSION": "static",
            "SETUP": "npm install && npm run build",
        }
    )

    # README.md
    readme_second_heading: str = "Example"
    readme_third_heading: str = "Installation"
    readme_required_heading: str = "API"
    readme_trailing_headings: tuple[str, ...] = ("Release notes", "Authors", "License")

    def minified_path(self, module: str) -> str:
        """dist/index.js -> dist/index.min.js"""
        if module.endswith(self.script_extension):
            module = module[: -len(self.script_extension)]
        return module + self.minified_extension

    def homepage_for(self, slug: str) -> str:
        return self.homepage_template.format(slug=slug)

    def deploy_variables_for(self, slug: str) -> dict[str, str]:
        return {k: v.format(slug=slug) for k, v in self.ci_deploy_variables.items()}

    def bugs_url_for(self, repository_url: str) -> str:
        """git+https://code.gramener.com/x/y.git -> https://code.gramener.com/x/y/-/issues"""
        url = repository_url.removeprefix("git+").removesuffix(".git")
        return f"{url}{self.bugs_suffix}"


VARIANTS: dict[str, Policy] = {
    "gitlab-browser": Policy(),
    "gitlab-main": Policy(
        variant="gitlab-main",
        description="Minified bundle in 'main', no 'browser' field, hosted on code.gramener.com",
        minified_field="main",
        forbid_browser=True,
    ),
    "github-browser": Policy(
        variant="github-browser",
        description="Browser bundle in 'browser', hosted on github.com/gramener",
        repository_prefix="git+https://github.com/gramener/",
        bugs_suffix="/issues",
    ),
}

DEFAULT_VARIANT = "gitlab-browser"

_OVERRIDABLE = {f.name for f in fields(Policy)} - {"variant", "description"}
_TUPLE_FIELDS = {"lint_tools", "readme_trailing_headings"}
_STRING_TABLE_FIELDS = {"ci_deploy_variables"}


def get_policy(variant: str = DEFAULT_VARIANT) -> Policy:
    policy = VARIANTS.get(variant)
    if policy is None:
        raise ValueError(f"Unknown variant {variant!r}. Available: {', '.join(VARIANTS)}")
    return policy


def policy_from_dict(data: dict[str, Any]) -> Policy:
    """Apply overrides from a parsed policy file on top of a variant."""
    policy = get_policy(str(data.get("variant", DEFAULT_VARIANT)).strip())

    overrides = {k: v for k, v in data.items() if k != "variant"}
    unknown = sorted(set(overrides) - _OVERRIDABLE)
    if unknown:
        raise ValueError(f"Unknown policy keys: {', '.join(unknown)}")

    coerced: dict[str, Any] = {}
    for key, value in overrides.items():
        default = getattr(policy, key)
        if key in _TUPLE_FIELDS:
            if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
                raise ValueError(f"{key} must be a list of strings")
            coerced[key] = tuple(value)
        elif isinstance(default, bool):
            if not isinstance(value, bool):
                raise ValueError(f"{key} must be true or false")
            coerced[key] = value
        elif isinstance(default, int):
            if not isinstance(value, int) or isinstance(value, bool):
                raise ValueError(f"{key} must be an integer")
            coerced[key] = value
        elif isinstance(default, dict):
            if not isinstance(value, dict):
                raise ValueError(f"{key} must be a table")
            if key in _STRING_TABLE_FIELDS and not all(isinstance(v, str) for v in value.values()):
                raise ValueError(f"{key} values must be strings")
            coerced[key] = dict(value)
        else:
            if not isinstance(value, str):
                raise ValueError(f"{key} must be a string")
            coerced[key] = value

    policy = replace(policy, **coerced)
    _validate(policy)
    return policy


def _check_template(key: str, template: str) -> None:
    try:
        template.format(slug="slug")
    except (KeyError, IndexError, ValueError) as exc:
        raise ValueError(f"{key} {template!r} may only use the {{slug}} placeholder") from exc


def _validate(policy: Policy) -> None:
    """Reject values that would only fail later, while the checks run."""
    if policy.minified_field not in ("browser", "main"):
        raise ValueError("minified_field must be 'browser' or 'main'")
    if not semver.is_valid(policy.min_version):
        raise ValueError(f"min_version {policy.min_version!r} is not a valid semver")
    _check_template("homepage_template", policy.homepage_template)
    for name, template in policy.ci_deploy_variables.items():
        _check_template(f"ci_deploy_variables.{name}", template)


def _read_policy_file(path: Path) -> dict[str, Any]:
    import tomllib

    return tomllib.loads(path.read_text(encoding="utf-8"))


def load_policy(path: Path) -> Policy:
    """Load a policy from TOML: a `variant` plus any field overrides."""
    return policy_from_dict(_read_policy_file(path))


def find_policy_file(root: Path) -> Path | None:
    """Return <root>/conform.toml if present."""
    path = root / POLICY_FILENAME
    return path if path.is_file() else None


def resolve_policy(root: Path, variant: str | None = None, policy_path: Path | None = None) -> Policy:
    """Pick the policy for a package root.

    An explicit policy file wins, then <root>/conform.toml, then the variant.
    A variant passed alongside a policy file replaces the file's variant.
    """
    path = policy_path or find_policy_file(root)
    if path is None:
        return get_policy(variant or DEFAULT_VARIANT)

    data = _read_policy_file(path)
    if variant:
        data["variant"] = variant
    return policy_from_dict(data)
