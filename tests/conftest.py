"""Pytest configuration and fixtures."""

import copy
import json
from pathlib import Path

import pytest

from conform.checks import CheckContext
from conform.policy import get_policy

MANIFEST = {
    "name": "@gramex/charts",
    "version": "1.2.3",
    "description": "Reusable chart components for Gramex.",
    "module": "dist/charts.js",
    "browser": "dist/charts.min.js",
    "scripts": {
        "build": "npx esbuild src/index.js --bundle --format=esm --outfile=dist/charts.js",
        "lint": "npx prettier@3 --write . && npx eslint@8 src",
        "prepublishOnly": "npm run lint && npm run build",
        "pretest": "npm run build",
        "test": "node --test",
    },
    "files": ["README.md", "dist/*"],
    "repository": {"type": "git", "url": "git+https://code.gramener.com/cto/gramex-charts.git"},
    "keywords": ["gramex", "charts"],
    "author": "Gramener <cto@gramener.com>",
    "license": "MIT",
    "bugs": {"url": "https://code.gramener.com/cto/gramex-charts/-/issues"},
    "prettier": {"printWidth": 120},
    "homepage": "https://gramener.com/gramex-charts/",
    "publishConfig": {"access": "public", "registry": "https://registry.npmjs.org/"},
}

CI_YML = """\
validate:
  image: gramener/builderrors
  script: builderrors

deploy:
  stage: deploy
  script: deploy
  variables:
    SERVER: gramener.com
    URL: gramex-charts
    VERSION: static
    SETUP: npm install && npm run build
"""

README = """\
# @gramex/charts

Reusable chart components for Gramex.

## Example

```js
import { bar } from "@gramex/charts";
```

## Installation

```bash
npm install @gramex/charts
```

## API

### bar(el, data)

Draws a bar chart.

## Release notes

- 1.2.3: Fix axis labels

## Authors

- Gramener

## License

[MIT](https://spdx.org/licenses/MIT.html)
"""


def write_package(root: Path, manifest=None, ci: str | None = CI_YML, readme: str | None = README) -> Path:
    """Write package.json, .gitlab-ci.yml and README.md under root.

    Pass None to leave a file out. A dict manifest is serialized as JSON;
    a string is written verbatim.
    """
    root.mkdir(parents=True, exist_ok=True)
    if manifest is None:
        manifest = MANIFEST
    if manifest is not False:
        text = manifest if isinstance(manifest, str) else json.dumps(manifest, indent=2)
        (root / "package.json").write_text(text, encoding="utf-8")
    if ci is not None:
        (root / ".gitlab-ci.yml").write_text(ci, encoding="utf-8")
    if readme is not None:
        (root / "README.md").write_text(readme, encoding="utf-8")
    return root


@pytest.fixture
def manifest_data() -> dict:
    """A fresh copy of a conforming package.json."""
    return copy.deepcopy(MANIFEST)


@pytest.fixture
def package_root(tmp_path: Path) -> Path:
    """A package directory that passes every check."""
    return write_package(tmp_path / "pkg")


@pytest.fixture
def make_context(tmp_path: Path):
    """Build a CheckContext for a package written from the given pieces."""

    def _make(manifest=None, ci=CI_YML, readme=README, variant: str = "gitlab-browser") -> CheckContext:
        root = write_package(tmp_path / "pkg", manifest=manifest, ci=ci, readme=readme)
        return CheckContext(root=root, policy=get_policy(variant))

    return _make


@pytest.fixture
def readme_text() -> str:
    return README


@pytest.fixture
def ci_text() -> str:
    return CI_YML
