"""
Base loader class for documents taking part in a numbering run.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import ClassVar

from chapnum.core.document import MarkdownDocument
from chapnum.errors import ChapnumError


class LoaderError(ChapnumError):
    """Raised when a document cannot be parsed."""

    def __init__(self, message: str, source_path: Path | None = None, details: str | None = None):
        self.source_path = source_path
        self.details = details
        super().__init__(message)


class BaseLoader(ABC):
    """
    Abstract base class for document loaders.

    Each loader is responsible for:
    1. Detecting if it can handle a file type
    2. Turning file contents into an owned, mutable document
    """

    SUPPORTED_EXTENSIONS: ClassVar[list[str]] = []

    def __init__(self, encoding: str = "utf-8") -> None:
        self.encoding = encoding

    @classmethod
    def can_load(cls, path: Path) -> bool:
        """Check if this loader can handle the given file."""
        return path.suffix.lower() in cls.SUPPORTED_EXTENSIONS

    @abstractmethod
    def parse(self, content: str, source_path: Path | None = None) -> MarkdownDocument:
        """
        Parse document text.

        Raises:
            LoaderError: If the text cannot be parsed
        """

    def load(self, path: Path) -> MarkdownDocument:
        """
        Read and parse a document from disk.

        I/O errors propagate unchanged so the caller sees the platform
        error (and errno) of the failing read.
        """
        content = path.read_text(encoding=self.encoding)
        return self.parse(content, source_path=path)
