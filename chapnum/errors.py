"""Exception taxonomy and exit-code mapping for chapnum.

Every failure below the CLI propagates unmodified; only ``cli.main``
turns an exception into a message and a process exit code.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

EXIT_OK = 0
EXIT_USAGE = 1
EXIT_MISSING_TOC = 2
EXIT_FAILURE = 3


class ChapnumError(Exception):
    """Base exception for chapnum errors."""


class UsageError(ChapnumError):
    """Raised when the command line cannot be parsed."""


class MissingTocError(ChapnumError):
    """Raised when the TOC file given on the command line does not exist."""

    def __init__(self, toc_file: Path) -> None:
        self.toc_file = toc_file
        super().__init__(f"The specified TOC file '{toc_file}' does not exist.")


class LevelOutOfRangeError(ChapnumError, ValueError):
    """Raised when a heading level falls outside the counter's depth."""

    def __init__(self, level: int, max_depth: int) -> None:
        self.level = level
        self.max_depth = max_depth
        super().__init__(f"Level {level} out of range (expected 1..{max_depth}).")


@dataclass
class ErrorDescription:
    """A fatal error rendered for the console.

    Attributes:
        message: What went wrong, taken from the exception.
        suggestion: What the user can do about it.
        exit_code: Process exit code for the failure.
    """

    message: str
    suggestion: str
    exit_code: int


def exit_code_for(error: BaseException) -> int:
    """Map a fatal error to a process exit code.

    ``OSError`` carries the platform errno; codes that would collide with
    the usage and missing-TOC codes fall back to ``EXIT_FAILURE``.
    """
    if isinstance(error, MissingTocError):
        return EXIT_MISSING_TOC
    if isinstance(error, UsageError):
        return EXIT_USAGE
    if isinstance(error, OSError) and error.errno and error.errno > EXIT_MISSING_TOC:
        return error.errno
    return EXIT_FAILURE


def describe_error(error: BaseException) -> ErrorDescription:
    """Build the console description for a fatal error.

    Args:
        error: The caught exception.

    Returns:
        Message, actionable suggestion and exit code.
    """
    message = str(error) or error.__class__.__name__
    return ErrorDescription(
        message=message,
        suggestion=_suggestion_for(error),
        exit_code=exit_code_for(error),
    )


def _suggestion_for(error: BaseException) -> str:
    if isinstance(error, MissingTocError):
        return "Check that the TOC path is correct and the file exists."
    if isinstance(error, LevelOutOfRangeError):
        return "Raise --max-depth or flatten the heading structure."
    if isinstance(error, FileNotFoundError):
        return "Check that the file path is correct and the file exists."
    if isinstance(error, PermissionError):
        return "Check file permissions on the source and target directories."
    if isinstance(error, UnicodeDecodeError):
        return "Pass --encoding with the encoding the documents are stored in."
    if isinstance(error, OSError):
        return "Check free disk space and that the target directory is writable."
    return "If this keeps happening, please report the issue."
