"""Markdown page discovery: reads YAML frontmatter from the site's content tree."""

import logging
from pathlib import Path
from typing import Awaitable, Callable, List, Optional

import yaml
from pydantic import ValidationError

from pooltable.models.page import MarkdownPage

logger = logging.getLogger(__name__)

PageReader = Callable[[], Awaitable[List[MarkdownPage]]]

_FRONTMATTER_DELIMITER = "---"


def parse_frontmatter(text: str) -> dict:
    """Return the YAML frontmatter block at the top of *text* as a dict.

    Text without a frontmatter block yields an empty dict.
    """
    lines = text.lstrip("\ufeff").splitlines()
    if not lines or lines[0].strip() != _FRONTMATTER_DELIMITER:
        return {}

    for end, line in enumerate(lines[1:], start=1):
        if line.strip() == _FRONTMATTER_DELIMITER:
            block = "\n".join(lines[1:end])
            data = yaml.safe_load(block) or {}
            if not isinstance(data, dict):
                raise ValueError("Frontmatter must be a YAML mapping.")
            return data

    raise ValueError("Unterminated frontmatter block.")


def load_page(path: Path) -> Optional[MarkdownPage]:
    """Build a :class:`MarkdownPage` from *path*; the file stem becomes ``params.filename``."""
    try:
        frontmatter = parse_frontmatter(path.read_text(encoding="utf-8"))
    except (yaml.YAMLError, ValueError) as exc:
        logger.warning("Skipping %s: invalid frontmatter – %s", path, exc)
        return None

    params = dict(frontmatter.pop("params", None) or {})
    params.setdefault("filename", path.stem)
    try:
        return MarkdownPage(params=params, **frontmatter)
    except ValidationError as exc:
        logger.warning("Skipping %s: %s", path, exc)
        return None


def read_markdown_pages(pages_dir: str | Path) -> List[MarkdownPage]:
    """Read every ``*.md`` file below *pages_dir*, in sorted path order."""
    root = Path(pages_dir)
    if not root.is_dir():
        logger.warning("Pages directory %s does not exist", root)
        return []

    pages: List[MarkdownPage] = []
    for path in sorted(root.rglob("*.md")):
        page = load_page(path)
        if page is not None:
            pages.append(page)
    logger.info("Read %d markdown pages from %s", len(pages), root)
    return pages


def directory_reader(pages_dir: str | Path) -> PageReader:
    """Wrap :func:`read_markdown_pages` as an async :data:`PageReader`."""

    async def reader() -> List[MarkdownPage]:
        return read_markdown_pages(pages_dir)

    return reader
