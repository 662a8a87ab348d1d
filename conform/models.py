"""Data models for the documents under validation."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any


def _coerce_dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _str_or_none(value: Any) -> str | None:
    return value if isinstance(value, str) else None


def _str_list_or_none(value: Any) -> list[str] | None:
    if not isinstance(value, list):
        return None
    return [v for v in value if isinstance(v, str)]


@dataclass(frozen=True)
class Repository:
    type: str | None
    url: str | None


@dataclass(frozen=True)
class PublishConfig:
    access: str | None
    registry: str | None


@dataclass
class Manifest:
    """A loaded package.json.

    Fields are None when the key is absent or holds a value of the wrong
    shape; `raw` keeps the parsed mapping untouched.
    """

    raw: dict[str, Any]
    name: str | None = None
    version: str | None = None
    description: str | None = None
    module: str | None = None
    main: str | None = None
    browser: str | None = None
    scripts: dict[str, str] | None = None
    files: list[str] | None = None
    repository: Repository | None = None
    keywords: list[str] | None = None
    author: str | dict | None = None
    license: str | None = None
    bugs_url: str | None = None
    prettier: dict[str, Any] | None = None
    homepage: str | None = None
    publish_config: PublishConfig | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Manifest":
        scripts = data.get("scripts")
        if isinstance(scripts, dict):
            scripts = {str(k): v for k, v in scripts.items() if isinstance(v, str)}
        else:
            scripts = None

        repository = None
        repo_raw = data.get("repository")
        if isinstance(repo_raw, dict):
            repository = Repository(
                type=_str_or_none(repo_raw.get("type")),
                url=_str_or_none(repo_raw.get("url")),
            )

        # npm accepts "bugs" as either {"url": ...} or a bare URL string
        bugs = data.get("bugs")
        if isinstance(bugs, dict):
            bugs_url = _str_or_none(bugs.get("url"))
        else:
            bugs_url = _str_or_none(bugs)

        publish_config = None
        publish_raw = data.get("publishConfig")
        if isinstance(publish_raw, dict):
            publish_config = PublishConfig(
                access=_str_or_none(publish_raw.get("access")),
                registry=_str_or_none(publish_raw.get("registry")),
            )

        author = data.get("author")
        if not isinstance(author, (str, dict)):
            author = None

        prettier = data.get("prettier")

        return cls(
            raw=data,
            name=_str_or_none(data.get("name")),
            version=_str_or_none(data.get("version")),
            description=_str_or_none(data.get("description")),
            module=_str_or_none(data.get("module")),
            main=_str_or_none(data.get("main")),
            browser=_str_or_none(data.get("browser")),
            scripts=scripts,
            files=_str_list_or_none(data.get("files")),
            repository=repository,
            keywords=_str_list_or_none(data.get("keywords")),
            author=author,
            license=_str_or_none(data.get("license")),
            bugs_url=bugs_url,
            prettier=prettier if isinstance(prettier, dict) else None,
            homepage=_str_or_none(data.get("homepage")),
            publish_config=publish_config,
        )

    def entry(self, field_name: str) -> str | None:
        """Look up an entry-point path ("module", "main" or "browser") by name."""
        if field_name not in ("module", "main", "browser"):
            raise ValueError(f"Unknown entry field: {field_name!r}")
        return getattr(self, field_name)

    def script(self, name: str) -> str | None:
        return (self.scripts or {}).get(name)

    @property
    def scope_slug(self) -> str | None:
        """Second segment of a scoped name: "@gramex/charts" -> "charts"."""
        if not self.name:
            return None
        parts = self.name.split("/")
        if len(parts) < 2 or not parts[1]:
            return None
        return parts[1]


@dataclass(frozen=True)
class CIJob:
    """A single job definition from .gitlab-ci.yml."""

    raw: dict[str, Any]
    script: str | list | None = None
    variables: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CIJob":
        script = data.get("script")
        return cls(
            raw=data,
            script=script if isinstance(script, (str, list)) else None,
            variables=_coerce_dict(data.get("variables")),
        )


@dataclass
class CIConfig:
    """A loaded .gitlab-ci.yml."""

    raw: dict[str, Any]

    def job(self, name: str) -> CIJob | None:
        value = self.raw.get(name)
        if not isinstance(value, dict):
            return None
        return CIJob.from_dict(value)


@dataclass(frozen=True)
class Heading:
    """A markdown heading: depth, text, exact source fragment and its offset."""

    depth: int
    text: str
    raw: str
    offset: int


@dataclass
class Readme:
    """README body (front matter removed) and its heading sequence."""

    path: Path
    content: str
    headings: list[Heading] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)
