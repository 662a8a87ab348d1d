"""Tests for the package.json rules."""

import pytest

from conform.checks import CheckFailure
from conform.rules import manifest as rules


def _loaded(make_context, data, variant="gitlab-browser"):
    ctx = make_context(manifest=data, variant=variant)
    rules.load_manifest(ctx)
    return ctx


def test_conforming_manifest_passes_every_rule(make_context, manifest_data):
    ctx = _loaded(make_context, manifest_data)
    for fn in (
        rules.check_name,
        rules.check_version,
        rules.check_description,
        rules.check_module,
        rules.check_minified_entry,
        rules.check_build_script,
        rules.check_prepublish_only,
        rules.check_lint_script,
        rules.check_no_prepublish,
        rules.check_pretest,
        rules.check_files,
        rules.check_repository,
        rules.check_keywords,
        rules.check_author,
        rules.check_license,
        rules.check_bugs,
        rules.check_prettier,
        rules.check_homepage,
        rules.check_publish_config,
    ):
        fn(ctx)


def test_load_rejects_invalid_json(make_context):
    ctx = make_context(manifest="{not json")
    with pytest.raises(CheckFailure, match="not valid JSON"):
        rules.load_manifest(ctx)
    assert ctx.manifest is None


def test_load_missing_file(make_context):
    ctx = make_context(manifest=False)
    with pytest.raises(CheckFailure, match="cannot read package.json"):
        rules.load_manifest(ctx)


def test_load_accepts_empty_object(make_context):
    ctx = _loaded(make_context, {})
    assert ctx.manifest is not None
    with pytest.raises(CheckFailure, match='"name" is missing'):
        rules.check_name(ctx)


@pytest.mark.parametrize("constant", ["NaN", "Infinity", "-Infinity"])
def test_load_rejects_non_json_constants(make_context, constant):
    ctx = make_context(manifest='{"name": ' + constant + "}")
    with pytest.raises(CheckFailure, match="not valid JSON"):
        rules.load_manifest(ctx)
    assert ctx.manifest is None


def test_dependent_check_fails_when_not_loaded(make_context):
    ctx = make_context(manifest="[]")
    with pytest.raises(CheckFailure):
        rules.load_manifest(ctx)
    with pytest.raises(CheckFailure, match="package.json was not loaded"):
        rules.check_name(ctx)


def test_name_requires_scope(make_context, manifest_data):
    manifest_data["name"] = "charts"
    ctx = _loaded(make_context, manifest_data)
    with pytest.raises(CheckFailure, match="@gramex/"):
        rules.check_name(ctx)


@pytest.mark.parametrize("version,ok", [("0.9.9", False), ("1.0.0", True), ("1.2.3", True), ("1.0", False), ("1\u0661.0.0", False)])
def test_version_floor(make_context, manifest_data, version, ok):
    manifest_data["version"] = version
    ctx = _loaded(make_context, manifest_data)
    if ok:
        rules.check_version(ctx)
    else:
        with pytest.raises(CheckFailure):
            rules.check_version(ctx)


def test_module_prefix_and_extension(make_context, manifest_data):
    manifest_data["module"] = "src/index.mjs"
    ctx = _loaded(make_context, manifest_data)
    with pytest.raises(CheckFailure, match="does not start with 'dist/'"):
        rules.check_module(ctx)


def test_minified_path_derived_from_module(make_context, manifest_data):
    manifest_data["module"] = "dist/index.js"
    manifest_data["browser"] = "dist/index.min.js"
    rules.check_minified_entry(_loaded(make_context, manifest_data))

    manifest_data["browser"] = "dist/index.umd.js"
    with pytest.raises(CheckFailure, match="expected 'dist/index.min.js'"):
        rules.check_minified_entry(_loaded(make_context, manifest_data))


def test_main_variant_uses_main_and_forbids_browser(make_context, manifest_data):
    manifest_data["main"] = manifest_data.pop("browser")
    ctx = _loaded(make_context, manifest_data, variant="gitlab-main")
    rules.check_minified_entry(ctx)
    rules.check_no_browser(ctx)

    manifest_data["browser"] = "dist/charts.min.js"
    ctx = _loaded(make_context, manifest_data, variant="gitlab-main")
    with pytest.raises(CheckFailure, match='"browser" should not be defined'):
        rules.check_no_browser(ctx)


def test_prepublish_only_exact(make_context, manifest_data):
    manifest_data["scripts"]["prepublishOnly"] = "npm run build"
    with pytest.raises(CheckFailure, match="prepublishOnly"):
        rules.check_prepublish_only(_loaded(make_context, manifest_data))


def test_lint_names_missing_tool(make_context, manifest_data):
    manifest_data["scripts"]["lint"] = "npx prettier --check ."
    with pytest.raises(CheckFailure, match="does not run eslint"):
        rules.check_lint_script(_loaded(make_context, manifest_data))


def test_deprecated_prepublish(make_context, manifest_data):
    manifest_data["scripts"]["prepublish"] = "npm run build"
    with pytest.raises(CheckFailure, match="deprecated"):
        rules.check_no_prepublish(_loaded(make_context, manifest_data))


def test_pretest_must_build_only_when_present(make_context, manifest_data):
    manifest_data["scripts"]["pretest"] = "npm run lint"
    with pytest.raises(CheckFailure, match="npm run build"):
        rules.check_pretest(_loaded(make_context, manifest_data))

    del manifest_data["scripts"]["pretest"]
    rules.check_pretest(_loaded(make_context, manifest_data))

    manifest_data["scripts"]["pretest"] = "npm run lint"
    del manifest_data["scripts"]["test"]
    rules.check_pretest(_loaded(make_context, manifest_data))


def test_files_must_cover_entries(make_context, manifest_data):
    manifest_data["files"] = ["README.md", "dist/charts.js"]
    with pytest.raises(CheckFailure, match="browser 'dist/charts.min.js'"):
        rules.check_files(_loaded(make_context, manifest_data))

    manifest_data["files"] = "dist"
    with pytest.raises(CheckFailure, match="must be a list"):
        rules.check_files(_loaded(make_context, manifest_data))


def test_files_skip_undefined_entries(make_context, manifest_data):
    del manifest_data["module"]
    del manifest_data["browser"]
    manifest_data["files"] = ["README.md"]
    rules.check_files(_loaded(make_context, manifest_data))


def test_files_bare_directory_does_not_cover_entries(make_context, manifest_data):
    manifest_data["files"] = ["README.md", "dist"]
    with pytest.raises(CheckFailure, match="does not include module 'dist/charts.js'"):
        rules.check_files(_loaded(make_context, manifest_data))


def test_repository_host(make_context, manifest_data):
    manifest_data["repository"] = {"type": "git", "url": "git+https://github.com/gramener/gramex-charts.git"}
    with pytest.raises(CheckFailure, match="code.gramener.com"):
        rules.check_repository(_loaded(make_context, manifest_data))

    ctx = _loaded(make_context, manifest_data, variant="github-browser")
    rules.check_repository(ctx)


def test_repository_must_be_object(make_context, manifest_data):
    manifest_data["repository"] = "gitlab:cto/gramex-charts"
    with pytest.raises(CheckFailure, match="must be an object"):
        rules.check_repository(_loaded(make_context, manifest_data))


def test_keywords_may_be_empty_but_must_be_list(make_context, manifest_data):
    manifest_data["keywords"] = []
    rules.check_keywords(_loaded(make_context, manifest_data))

    manifest_data["keywords"] = "charts"
    with pytest.raises(CheckFailure):
        rules.check_keywords(_loaded(make_context, manifest_data))


def test_license(make_context, manifest_data):
    manifest_data["license"] = "ISC"
    with pytest.raises(CheckFailure, match="'ISC', expected 'MIT'"):
        rules.check_license(_loaded(make_context, manifest_data))


def test_bugs_url_derived_from_repository(make_context, manifest_data):
    manifest_data["repository"]["url"] = "git+https://code.gramener.com/x/y.git"
    manifest_data["bugs"] = {"url": "https://code.gramener.com/x/y/-/issues"}
    rules.check_bugs(_loaded(make_context, manifest_data))

    manifest_data["bugs"] = "https://code.gramener.com/x/y/issues"
    with pytest.raises(CheckFailure, match="/-/issues"):
        rules.check_bugs(_loaded(make_context, manifest_data))


def test_prettier_print_width(make_context, manifest_data):
    manifest_data["prettier"] = {"printWidth": 80}
    with pytest.raises(CheckFailure, match="100 or more"):
        rules.check_prettier(_loaded(make_context, manifest_data))


def test_homepage_from_name(make_context, manifest_data):
    manifest_data["homepage"] = "https://gramener.com/gramex-charts/"
    rules.check_homepage(_loaded(make_context, manifest_data))

    manifest_data["homepage"] = "https://gramener.com/charts/"
    with pytest.raises(CheckFailure, match="gramex-charts"):
        rules.check_homepage(_loaded(make_context, manifest_data))

    del manifest_data["homepage"]
    rules.check_homepage(_loaded(make_context, manifest_data))


def test_publish_config(make_context, manifest_data):
    manifest_data["publishConfig"] = {"access": "restricted", "registry": "https://registry.npmjs.org/"}
    with pytest.raises(CheckFailure, match="publishConfig.access"):
        rules.check_publish_config(_loaded(make_context, manifest_data))

    del manifest_data["publishConfig"]
    with pytest.raises(CheckFailure, match="publishConfig"):
        rules.check_publish_config(_loaded(make_context, manifest_data))
