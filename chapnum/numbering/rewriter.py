"""
Heading rewriter.

Walks the headings of one document in order, advances a chapter counter
per heading and prepends the resulting chapter number to the heading's
visible text.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from chapnum.core.document import Heading, MarkdownDocument
from chapnum.numbering.counter import HierarchicalCounter

logger = logging.getLogger(__name__)


@dataclass
class NumberedHeading:
    """A heading together with the chapter number it received."""

    heading: Heading
    number: str


def number_heading(heading: Heading, number: str) -> bool:
    """
    Prepend ``number`` to a heading's visible text.

    The number goes in front of the first literal span, or in front of a
    link's label when the link comes first; link targets are never
    touched.

    Returns:
        True if the heading was numbered.
    """
    if not number:
        return False
    return heading.prepend_text(f"{number} ")


class HeadingRewriter:
    """
    Number the headings of a single document.

    In TOC mode every heading level is numbered. In content mode level-1
    headings are skipped entirely (no increment, no number): a content
    file's chapter comes from the TOC heading that links to it.
    """

    def __init__(self, counter: HierarchicalCounter, *, content_mode: bool = False) -> None:
        self.counter = counter
        self.content_mode = content_mode

    def advance(self, heading: Heading) -> str:
        """Advance the counter for ``heading`` and return its chapter number.

        Returns an empty string for headings that are not numbered.
        """
        if self.content_mode and heading.level == 1:
            return ""
        self.counter.increment(heading.level)
        return self.counter.format()

    def rewrite(
        self,
        document: MarkdownDocument,
        on_heading: Callable[[Heading, str], None] | None = None,
    ) -> list[NumberedHeading]:
        """
        Number every heading of ``document`` in place.

        Args:
            document: Document to rewrite.
            on_heading: Called after each heading is numbered, before the
                next one is visited.

        Returns:
            The headings that received a number.
        """
        numbered: list[NumberedHeading] = []

        for heading in document.headings():
            number = self.advance(heading)
            if number_heading(heading, number):
                numbered.append(NumberedHeading(heading=heading, number=number))
            else:
                logger.debug("Heading left unnumbered: %r", heading.text)
            if on_heading is not None:
                on_heading(heading, number)

        return numbered
