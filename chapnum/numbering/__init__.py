"""
Numbering module - core of chapnum.

Keeps a hierarchical chapter counter consistent across a TOC and every
content file it links to.
"""

from chapnum.numbering.content import ContentFileProcessor, ContentResult, PendingTitle
from chapnum.numbering.counter import HierarchicalCounter
from chapnum.numbering.rewriter import HeadingRewriter, NumberedHeading, number_heading
from chapnum.numbering.toc import TocWalker, WalkResult

__all__ = [
    "ContentFileProcessor",
    "ContentResult",
    "HeadingRewriter",
    "HierarchicalCounter",
    "NumberedHeading",
    "PendingTitle",
    "TocWalker",
    "WalkResult",
    "number_heading",
]
