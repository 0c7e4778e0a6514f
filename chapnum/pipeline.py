"""
End-to-end numbering run.

Loads the TOC, numbers it together with every linked content file, and
mirrors the rest of the source tree into the target directory.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from chapnum.config import NumberingConfig
from chapnum.errors import ChapnumError, MissingTocError
from chapnum.exporters.markdown import MarkdownRenderer
from chapnum.loaders.markdown import MarkdownLoader
from chapnum.mirror import HandledFiles, TreeMirror, is_within
from chapnum.numbering.toc import TocWalker

logger = logging.getLogger(__name__)


@dataclass
class RunSummary:
    """What one run produced."""

    source_root: Path
    target_root: Path
    toc_output: Path
    numbered: list[Path] = field(default_factory=list)
    copied: list[Path] = field(default_factory=list)
    missing: list[Path] = field(default_factory=list)


class ChapterNumberingPipeline:
    """Runs the full TOC -> content files -> mirror sequence."""

    def __init__(self, config: NumberingConfig | None = None) -> None:
        self.config = config or NumberingConfig()
        self.loader = MarkdownLoader(encoding=self.config.encoding)
        self.renderer = MarkdownRenderer(encoding=self.config.encoding)

    def run(self, toc_file: str | Path, target_dir: str | Path, force: bool = False) -> RunSummary:
        """
        Number the documentation set rooted at ``toc_file``.

        Args:
            toc_file: TOC document; its directory is the source root.
            target_dir: Output root, created if absent.
            force: Delete and recreate ``target_dir`` if it exists.

        Raises:
            MissingTocError: If the TOC file does not exist. Nothing on
                disk has been touched at that point.
        """
        toc_path = Path(toc_file).resolve()
        target_root = Path(target_dir).resolve()

        if not toc_path.is_file():
            raise MissingTocError(toc_path)

        source_root = toc_path.parent
        _check_roots(source_root, target_root, force)

        mirror = TreeMirror(source_root, target_root)
        mirror.prepare_target(force)

        handled = HandledFiles([toc_path])
        toc = self.loader.load(toc_path)

        walker = TocWalker(
            source_root,
            target_root,
            handled,
            self.loader,
            self.renderer,
            self.config,
        )
        walk = walker.walk(toc, toc_path)
        copied = mirror.copy_remaining(handled)

        summary = RunSummary(
            source_root=source_root,
            target_root=target_root,
            toc_output=walk.toc_output,
            numbered=[walk.toc_output] + [c.output_path for c in walk.content_files],
            copied=copied,
            missing=walk.missing,
        )
        logger.debug(
            "Numbered %d files, copied %d, %d missing",
            len(summary.numbered),
            len(summary.copied),
            len(summary.missing),
        )
        return summary


def _check_roots(source_root: Path, target_root: Path, force: bool) -> None:
    """Refuse target directories that would overwrite or delete the sources."""
    if target_root == source_root:
        raise ChapnumError(f"Target directory '{target_root}' is the source directory.")
    if force and is_within(source_root, target_root):
        raise ChapnumError(
            f"Refusing to recreate '{target_root}': it contains the source directory."
        )
