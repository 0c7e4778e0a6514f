"""Command-line interface for chapnum."""

from __future__ import annotations

import argparse
import logging
import sys
import traceback

from chapnum import __version__
from chapnum.config import MAX_HEADING_LEVEL, NumberingConfig
from chapnum.errors import EXIT_OK, EXIT_USAGE, MissingTocError, UsageError, describe_error
from chapnum.pipeline import ChapterNumberingPipeline

logger = logging.getLogger("chapnum")


class _ArgumentParser(argparse.ArgumentParser):
    """Argument parser that raises instead of exiting on bad input."""

    def error(self, message: str) -> None:  # type: ignore[override]
        raise UsageError(message)


class _BelowLevelFilter(logging.Filter):
    def __init__(self, level: int) -> None:
        super().__init__()
        self.level = level

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno < self.level


def _depth(value: str) -> int:
    try:
        depth = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid depth: {value!r}") from None
    if not 1 <= depth <= MAX_HEADING_LEVEL:
        raise argparse.ArgumentTypeError(f"depth must be between 1 and {MAX_HEADING_LEVEL}")
    return depth


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="chapnum",
        description=(
            "Add hierarchical chapter numbers to a TOC-driven Markdown documentation "
            "set and mirror it into a target directory"
        ),
    )
    parser.add_argument("toc_file", metavar="TOC.MD", help="TOC document; its directory is the source root")
    parser.add_argument(
        "target_directory",
        metavar="TARGETDIRECTORY",
        help="Output directory, created if it does not exist",
    )
    parser.add_argument(
        "-f",
        "--force",
        action="store_true",
        help="Delete and recreate the target directory if it already exists",
    )
    parser.add_argument(
        "--max-depth",
        type=_depth,
        default=MAX_HEADING_LEVEL,
        help=f"Deepest heading level that can be numbered (default: {MAX_HEADING_LEVEL})",
    )
    parser.add_argument(
        "--encoding",
        default="utf-8",
        help="Encoding of the Markdown documents (default: utf-8)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Show debug output")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    return build_parser().parse_args(argv)


def configure_logging(verbose: bool = False) -> list[logging.Handler]:
    """
    Route progress to stdout and warnings/errors to stderr.

    Returns:
        The handlers installed on the ``chapnum`` logger.
    """
    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setLevel(logging.DEBUG)
    stdout_handler.addFilter(_BelowLevelFilter(logging.WARNING))
    stdout_handler.setFormatter(logging.Formatter("%(message)s"))

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setLevel(logging.WARNING)
    stderr_handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))

    handlers: list[logging.Handler] = [stdout_handler, stderr_handler]
    for handler in handlers:
        logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    return handlers


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except UsageError as exc:
        print(parser.format_usage().rstrip(), file=sys.stderr)
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_USAGE

    handlers = configure_logging(args.verbose)
    try:
        config = NumberingConfig(max_depth=args.max_depth, encoding=args.encoding)
        ChapterNumberingPipeline(config).run(
            args.toc_file,
            args.target_directory,
            force=args.force,
        )
        return EXIT_OK

    except MissingTocError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return describe_error(exc).exit_code
    except Exception as exc:
        description = describe_error(exc)
        print(f"Error: {description.message}", file=sys.stderr)
        print(f"Hint: {description.suggestion}", file=sys.stderr)
        traceback.print_exc(file=sys.stderr)
        return description.exit_code
    finally:
        for handler in handlers:
            logger.removeHandler(handler)


if __name__ == "__main__":
    raise SystemExit(main())
