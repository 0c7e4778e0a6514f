"""Document loaders for chapnum."""

from chapnum.loaders.base import BaseLoader, LoaderError
from chapnum.loaders.markdown import MarkdownLoader, split_front_matter

__all__ = [
    "BaseLoader",
    "LoaderError",
    "MarkdownLoader",
    "split_front_matter",
]
