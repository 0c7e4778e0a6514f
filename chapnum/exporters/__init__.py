"""Exporters for chapnum."""

from chapnum.exporters.markdown import MarkdownRenderer, RenderContext

__all__ = [
    "MarkdownRenderer",
    "RenderContext",
]
