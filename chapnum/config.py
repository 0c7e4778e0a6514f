"""Run configuration for chapter numbering."""

from __future__ import annotations

from dataclasses import dataclass

# Markdown has six heading levels.
MAX_HEADING_LEVEL = 6


@dataclass
class NumberingConfig:
    """Configuration for one numbering run.

    Attributes:
        max_depth: Number of counter levels; headings deeper than this are
            a fatal input error.
        encoding: Text encoding used to read and write Markdown documents.
    """

    max_depth: int = MAX_HEADING_LEVEL
    encoding: str = "utf-8"

    def __post_init__(self) -> None:
        if not 1 <= self.max_depth <= MAX_HEADING_LEVEL:
            raise ValueError(
                f"max_depth must be between 1 and {MAX_HEADING_LEVEL}, got {self.max_depth}"
            )
        if not self.encoding:
            raise ValueError("encoding must not be empty")
