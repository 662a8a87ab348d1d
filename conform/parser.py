"""Markdown parsing utilities for README headings."""

import re
from pathlib import Path

import frontmatter

from .models import Heading, Readme

# "# Title", "## Title ##", "#" (empty heading)
ATX_HEADING_PATTERN = re.compile(r"^ {0,3}(#{1,6})(?:[ \t]+(.*?))?[ \t]*$")
ATX_CLOSING_PATTERN = re.compile(r"(?:^|[ \t]+)#+[ \t]*$")
SETEXT_UNDERLINE_PATTERN = re.compile(r"^ {0,3}(=+|-+)[ \t]*$")
FENCE_PATTERN = re.compile(r"^ {0,3}(`{3,}|~{3,})")
# Lines that open a block other than a paragraph
BLOCK_START_PATTERN = re.compile(r"^ {0,3}(?:[-*+][ \t]|\d+[.)][ \t]|>|<)")


def _split_lines(content: str) -> list[tuple[int, str]]:
    """Return (offset, line) pairs with line endings removed."""
    result = []
    offset = 0
    for line in content.splitlines(keepends=True):
        result.append((offset, line.rstrip("\r\n")))
        offset += len(line)
    return result


def extract_headings(content: str, max_depth: int = 2) -> list[Heading]:
    """Extract ATX and setext headings in document order.

    Headings inside fenced code blocks are ignored, as are headings deeper
    than max_depth.

    Args:
        content: Markdown content
        max_depth: Deepest heading level to keep

    Returns:
        Headings with their exact source fragment and its offset in content
    """
    headings: list[Heading] = []
    paragraph: list[tuple[int, str]] = []
    fence: str | None = None
    # Inside a list item or block quote, whose continuation lines never
    # start a paragraph of their own
    container = False
    after_blank = False

    for offset, line in _split_lines(content):
        if fence is not None:
            stripped = line.strip()
            if stripped.startswith(fence) and set(stripped) == {fence[0]}:
                fence = None
            continue

        fence_match = FENCE_PATTERN.match(line)
        if fence_match:
            fence = fence_match.group(1)
            paragraph = []
            if not line[0].isspace():
                container = False
            continue

        if not line.strip():
            paragraph = []
            after_blank = True
            continue
        blank_before, after_blank = after_blank, False

        atx = ATX_HEADING_PATTERN.match(line)
        if atx:
            depth = len(atx.group(1))
            text = ATX_CLOSING_PATTERN.sub("", atx.group(2) or "").strip()
            if depth <= max_depth:
                headings.append(Heading(depth=depth, text=text, raw=line, offset=offset))
            paragraph = []
            container = False
            continue

        underline = SETEXT_UNDERLINE_PATTERN.match(line)
        if underline and paragraph:
            depth = 1 if underline.group(1).startswith("=") else 2
            start = paragraph[0][0]
            text = " ".join(p.strip() for _, p in paragraph)
            raw = content[start : offset + len(line)]
            if depth <= max_depth:
                headings.append(Heading(depth=depth, text=text, raw=raw, offset=start))
            paragraph = []
            continue

        if underline:
            # Thematic break
            paragraph = []
            container = False
            continue

        if not paragraph and BLOCK_START_PATTERN.match(line):
            # List item, quote or HTML block
            container = True
            continue

        if container:
            # Lazy or indented continuation of the open list item or quote
            if not blank_before or line[0] in " \t":
                continue
            container = False

        paragraph.append((offset, line))

    return headings


def parse_readme(text: str, path: Path, max_depth: int = 2) -> Readme:
    """Split off YAML front matter and extract the heading sequence."""
    post = frontmatter.loads(text)
    return Readme(
        path=path,
        content=post.content,
        headings=extract_headings(post.content, max_depth=max_depth),
        metadata=dict(post.metadata),
    )


def load_readme(path: Path, max_depth: int = 2) -> Readme:
    """Load a README file from disk."""
    return parse_readme(path.read_text(encoding="utf-8"), path, max_depth=max_depth)
