"""
TOC walker.

The TOC owns the top-level chapter numbers. Walking it numbers its own
headings and, for every heading that links to a content file, numbers
that file below the heading's chapter.
"""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from urllib.parse import unquote

from chapnum.config import NumberingConfig
from chapnum.core.document import Heading, MarkdownDocument
from chapnum.exporters.markdown import MarkdownRenderer
from chapnum.loaders.base import BaseLoader
from chapnum.mirror import HandledFiles, is_within, output_path_for
from chapnum.numbering.content import ContentFileProcessor, ContentResult, PendingTitle
from chapnum.numbering.counter import HierarchicalCounter
from chapnum.numbering.rewriter import HeadingRewriter

logger = logging.getLogger(__name__)

# "http:", "mailto:", "C:" ... anything with a scheme is not a local file.
_SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]*:")


@dataclass
class WalkResult:
    """Summary of one TOC walk."""

    toc_output: Path
    content_files: list[ContentResult] = field(default_factory=list)
    missing: list[Path] = field(default_factory=list)
    not_followed: list[str] = field(default_factory=list)


class TocWalker:
    """
    Number a TOC and every content file it links to.

    One counter and one pending title live for the whole walk. Content
    files always get a copy of the counter, so numbering inside a content
    file never moves the TOC's own numbers.
    """

    def __init__(
        self,
        source_root: Path,
        target_root: Path,
        handled: HandledFiles,
        loader: BaseLoader,
        renderer: MarkdownRenderer,
        config: NumberingConfig | None = None,
    ) -> None:
        self.source_root = source_root
        self.target_root = target_root
        self.handled = handled
        self.loader = loader
        self.renderer = renderer
        self.config = config or NumberingConfig()
        self.content_processor = ContentFileProcessor(loader, renderer)

    def walk(self, toc: MarkdownDocument, toc_file: Path) -> WalkResult:
        """
        Number ``toc`` and its linked files, then render the TOC.

        Args:
            toc: Parsed TOC document; rewritten in place.
            toc_file: Path the TOC was loaded from.

        Returns:
            What was written, plus links that could not be followed.
        """
        counter = HierarchicalCounter(self.config.max_depth)
        pending_title = PendingTitle()
        result = WalkResult(
            toc_output=output_path_for(self.source_root, self.target_root, toc_file)
        )

        def visit(heading: Heading, number: str) -> None:
            # The counter already sits on this heading: linked files
            # continue from here.
            url = heading.link_target()
            if url:
                self._follow_link(url, counter, pending_title, result)
            elif url is None and heading.level == 2 and heading.text:
                pending_title.set(heading.text, heading.spans)

        HeadingRewriter(counter).rewrite(toc, on_heading=visit)

        self.renderer.render_to_file(toc, result.toc_output)
        return result

    def resolve_link(self, url: str) -> Path | None:
        """
        Resolve a heading link to a source file path.

        Returns None for links that do not point at a local file
        (external URLs, in-page anchors).
        """
        if _SCHEME_RE.match(url) or url.startswith(("#", "//")):
            return None

        path_part = url.split("#", 1)[0].split("?", 1)[0]
        if not path_part:
            return None

        return Path(os.path.normpath(self.source_root / unquote(path_part)))

    def _follow_link(
        self,
        url: str,
        counter: HierarchicalCounter,
        pending_title: PendingTitle,
        result: WalkResult,
    ) -> None:
        source_path = self.resolve_link(url)
        if source_path is None:
            logger.debug("Not following link %s", url)
            result.not_followed.append(url)
            return

        if not is_within(source_path, self.source_root):
            logger.warning(
                "Content file '%s' is outside the source directory and is skipped.", source_path
            )
            result.not_followed.append(url)
            return

        if not self.loader.can_load(source_path):
            logger.warning(
                "Content file '%s' is not a Markdown document and is copied unnumbered.",
                source_path,
            )
            result.not_followed.append(url)
            return

        self.handled.add(source_path)

        if not source_path.is_file():
            logger.warning("Content file '%s' does not exist.", source_path)
            result.missing.append(source_path)
            return

        output_path = output_path_for(self.source_root, self.target_root, source_path)
        result.content_files.append(
            self.content_processor.process(counter.clone(), pending_title, source_path, output_path)
        )
