"""
Hierarchical chapter counter.

Tracks one running number per heading depth and formats the dotted
chapter number ("2.3.1") for the current position.
"""

from __future__ import annotations

from chapnum.config import MAX_HEADING_LEVEL
from chapnum.errors import LevelOutOfRangeError


class HierarchicalCounter:
    """
    Multi-level counter with reset-on-ascent semantics.

    Incrementing level k bumps counter[k] and zeroes every deeper level.
    Shallower levels are never touched.
    """

    def __init__(self, max_depth: int = MAX_HEADING_LEVEL) -> None:
        if max_depth < 1:
            raise ValueError(f"max_depth must be positive, got {max_depth}")
        self._counts: list[int] = [0] * max_depth

    @property
    def max_depth(self) -> int:
        return len(self._counts)

    @property
    def levels(self) -> tuple[int, ...]:
        """Current value of every level, shallowest first."""
        return tuple(self._counts)

    def increment(self, level: int) -> None:
        """Advance the counter at ``level`` (1-based).

        Raises:
            LevelOutOfRangeError: If level is outside 1..max_depth. The
                counter is left unchanged.
        """
        if not 1 <= level <= self.max_depth:
            raise LevelOutOfRangeError(level, self.max_depth)

        index = level - 1
        self._counts[index] += 1
        for deeper in range(index + 1, self.max_depth):
            self._counts[deeper] = 0

    def clone(self) -> HierarchicalCounter:
        """Return an independent copy with the same values."""
        copy = HierarchicalCounter(self.max_depth)
        copy._counts = list(self._counts)
        return copy

    def format(self) -> str:
        """Dotted chapter number for the current position.

        Levels are emitted outward-in and stop at the first zero, so a
        level never shows up while a shallower level is still zero.
        """
        parts: list[str] = []
        for count in self._counts:
            if count <= 0:
                break
            parts.append(str(count))
        return ".".join(parts)

    def __str__(self) -> str:
        return self.format()

    def __repr__(self) -> str:
        return f"HierarchicalCounter({list(self._counts)!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, HierarchicalCounter):
            return NotImplemented
        return self._counts == other._counts

    __hash__ = None  # type: ignore[assignment]
