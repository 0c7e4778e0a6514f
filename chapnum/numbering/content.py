"""
Content file numbering.

A content file is a Markdown document linked from a TOC heading. Its
headings are numbered below the chapter of that TOC heading, and it may
receive a synthesized title carried over from the TOC.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from markdown_it.token import Token

from chapnum.core.document import MarkdownDocument
from chapnum.exporters.markdown import MarkdownRenderer
from chapnum.loaders.base import BaseLoader
from chapnum.numbering.counter import HierarchicalCounter
from chapnum.numbering.rewriter import HeadingRewriter, NumberedHeading

logger = logging.getLogger(__name__)


class PendingTitle:
    """
    Chapter title waiting to be placed on top of the next content file.

    Either empty or holding one title; ``take`` hands it out exactly once.
    The title's inline spans travel with it so the synthesized heading
    keeps the TOC entry's escapes and inline markup.
    """

    def __init__(self, text: str | None = None, spans: list[Token] | None = None) -> None:
        self._text: str | None = None
        self._spans: list[Token] | None = None
        self.set(text or "", spans)

    @property
    def text(self) -> str | None:
        return self._text

    @property
    def spans(self) -> list[Token] | None:
        return self._spans

    def set(self, text: str, spans: list[Token] | None = None) -> None:
        self._text = text or None
        self._spans = list(spans) if self._text and spans else None

    def take(self) -> tuple[str, list[Token] | None] | None:
        """Return the pending title and its spans, and clear both."""
        if self._text is None:
            return None
        title = (self._text, self._spans)
        self._text = self._spans = None
        return title

    def __bool__(self) -> bool:
        return self._text is not None

    def __repr__(self) -> str:
        return f"PendingTitle({self._text!r})"


@dataclass
class ContentResult:
    """Outcome of numbering one content file."""

    source_path: Path
    output_path: Path
    numbered: list[NumberedHeading]
    inserted_title: str | None = None


class ContentFileProcessor:
    """Number, retitle and render one content file."""

    def __init__(self, loader: BaseLoader, renderer: MarkdownRenderer) -> None:
        self.loader = loader
        self.renderer = renderer

    def number_document(
        self,
        document: MarkdownDocument,
        counter: HierarchicalCounter,
        pending_title: PendingTitle,
    ) -> tuple[list[NumberedHeading], str | None]:
        """
        Number a content document in place.

        Args:
            document: Parsed content file.
            counter: Counter positioned at the linking TOC heading. The
                caller must pass a copy; it is advanced here.
            pending_title: Carried-over TOC title; consumed if set.

        Returns:
            Numbered headings and the title inserted on top, if any.
        """
        numbered = HeadingRewriter(counter, content_mode=True).rewrite(document)

        title = None
        pending = pending_title.take()
        if pending is not None:
            title, spans = pending
            document.insert_heading(0, level=1, text=title, spans=spans)

        return numbered, title

    def process(
        self,
        counter: HierarchicalCounter,
        pending_title: PendingTitle,
        source_path: Path,
        output_path: Path,
    ) -> ContentResult:
        """
        Load ``source_path``, number it and render it to ``output_path``.

        The caller has already checked that the file exists; read, parse
        and write failures propagate.
        """
        document = self.loader.load(source_path)
        numbered, title = self.number_document(document, counter, pending_title)

        if title:
            logger.debug("Inserted title %r into %s", title, source_path)

        self.renderer.render_to_file(document, output_path)

        return ContentResult(
            source_path=source_path,
            output_path=output_path,
            numbered=numbered,
            inserted_title=title,
        )
