"""
Markdown document loader using markdown-it-py.

Parses Markdown into a token stream that can be rewritten and rendered
back to Markdown without losing escapes, entities or tables.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import ClassVar

from markdown_it import MarkdownIt

from chapnum.core.document import MarkdownDocument
from chapnum.loaders.base import BaseLoader, LoaderError

# YAML front matter: a leading "---" line up to the next "---" or "..." line.
_FRONT_MATTER_RE = re.compile(r"\A---[ \t]*\r?\n(?:.*?\r?\n)??(?:---|\.\.\.)[ \t]*(?:\r?\n|\Z)", re.DOTALL)


class MarkdownLoader(BaseLoader):
    """
    Load Markdown documents using markdown-it-py.

    CommonMark plus GFM tables and strikethrough. The ``text_join`` core
    rule is disabled so backslash escapes and entities stay separate
    ``text_special`` tokens and can be written back exactly as typed.
    """

    SUPPORTED_EXTENSIONS: ClassVar[list[str]] = [".md", ".markdown", ".mdown"]

    def __init__(self, encoding: str = "utf-8") -> None:
        super().__init__(encoding)
        self._md = MarkdownIt("commonmark")
        self._md.enable(["table", "strikethrough"])
        self._md.disable("text_join")

    def parse(self, content: str, source_path: Path | None = None) -> MarkdownDocument:
        """Parse Markdown text into a document."""
        front_matter, body = split_front_matter(content)
        env: dict = {}

        try:
            tokens = self._md.parse(body, env)
        except Exception as e:
            raise LoaderError(
                f"Failed to parse Markdown: {e}",
                source_path=source_path,
                details=str(e),
            ) from e

        return MarkdownDocument(
            tokens=tokens,
            env=env,
            source_path=source_path,
            front_matter=front_matter,
        )


def split_front_matter(content: str) -> tuple[str | None, str]:
    """
    Split YAML front matter off the top of a document.

    Returns:
        (front_matter, body). The front matter is returned verbatim,
        delimiters included, or None when the document has none.
    """
    match = _FRONT_MATTER_RE.match(content)
    if not match:
        return None, content
    return match.group(0), content[match.end():]
