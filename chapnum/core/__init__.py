"""Core document model for chapnum."""

from chapnum.core.document import Heading, MarkdownDocument, make_heading_tokens

__all__ = [
    "Heading",
    "MarkdownDocument",
    "make_heading_tokens",
]
