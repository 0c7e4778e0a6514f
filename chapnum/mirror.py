"""
Source tree mirroring.

Maps source paths onto the target directory and copies every file that
was not written by the numbering pipeline.
"""

from __future__ import annotations

import logging
import os
import shutil
from collections.abc import Iterable, Iterator
from pathlib import Path

logger = logging.getLogger(__name__)


def output_path_for(source_root: Path, target_root: Path, path: Path) -> Path:
    """
    Mirror ``path`` from the source tree into the target tree.

    Raises:
        ValueError: If ``path`` is not inside ``source_root``.
    """
    relative = path.relative_to(source_root)
    return target_root / relative


def is_within(path: Path, root: Path) -> bool:
    """Return True when ``path`` is ``root`` or nested inside it."""
    try:
        path.relative_to(root)
        return True
    except ValueError:
        return False


class HandledFiles:
    """
    Set of source files already produced by the numbering pipeline.

    Membership uses the platform's path case rules.
    """

    def __init__(self, paths: Iterable[Path] = ()) -> None:
        self._keys: dict[str, Path] = {}
        for path in paths:
            self.add(path)

    @staticmethod
    def _key(path: Path) -> str:
        return os.path.normcase(os.path.abspath(path))

    def add(self, path: Path) -> None:
        self._keys.setdefault(self._key(path), path)

    def __contains__(self, path: object) -> bool:
        if not isinstance(path, (str, Path)):
            return False
        return self._key(Path(path)) in self._keys

    def __iter__(self) -> Iterator[Path]:
        return iter(self._keys.values())

    def __len__(self) -> int:
        return len(self._keys)


class TreeMirror:
    """Copies the untouched part of a source tree into the target tree."""

    def __init__(self, source_root: Path, target_root: Path) -> None:
        self.source_root = source_root
        self.target_root = target_root

    def prepare_target(self, force: bool = False) -> None:
        """
        Make sure the target directory exists.

        With ``force`` an existing target is deleted and recreated empty.
        """
        if not self.target_root.exists():
            logger.debug("Creating target directory %s", self.target_root)
            self.target_root.mkdir(parents=True)
        elif force:
            logger.info("Recreating existing target directory '%s'.", self.target_root)
            shutil.rmtree(self.target_root)
            self.target_root.mkdir(parents=True)

    def source_files(self) -> list[Path]:
        """Every file below the source root, in a stable order."""
        nested_target = is_within(self.target_root, self.source_root)
        files = []
        for path in sorted(self.source_root.rglob("*")):
            if not path.is_file():
                continue
            if nested_target and is_within(path, self.target_root):
                continue
            files.append(path)
        return files

    def copy_remaining(self, handled: HandledFiles) -> list[Path]:
        """
        Copy every source file not in ``handled`` to its mirrored path.

        Returns:
            The output paths written.
        """
        copied: list[Path] = []

        for path in self.source_files():
            if path in handled:
                continue

            target = output_path_for(self.source_root, self.target_root, path)
            logger.info("Copying %s -> %s", path.name, target)

            target.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(path, target)
            copied.append(target)

        return copied
