"""Board coordinates.

The board origin is the top-left cell ``(0, 0)``; ``x`` grows to the right and
``y`` grows downwards. A board of size ``Coordinate(w, h)`` contains the cells
``0 <= x < w`` and ``0 <= y < h``.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Coordinate:
    """Immutable 2D cell position.

    Equality and hashing use both components. The ordering operators are a
    component-wise dominance test: ``a < b`` only when *both* components of
    ``a`` are smaller. This is a partial order, so use :attr:`sort_key` when a
    total order is needed.
    """

    x: int
    y: int

    # ── Arithmetic ───────────────────────────────────────────────────────

    def __add__(self, other: Coordinate) -> Coordinate:
        return Coordinate(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Coordinate) -> Coordinate:
        return Coordinate(self.x - other.x, self.y - other.y)

    # ── Dominance comparisons ────────────────────────────────────────────

    def __lt__(self, other: Coordinate) -> bool:
        return self.x < other.x and self.y < other.y

    def __le__(self, other: Coordinate) -> bool:
        return self.x <= other.x and self.y <= other.y

    def __gt__(self, other: Coordinate) -> bool:
        return self.x > other.x and self.y > other.y

    def __ge__(self, other: Coordinate) -> bool:
        return self.x >= other.x and self.y >= other.y

    # ── Helpers ──────────────────────────────────────────────────────────

    @property
    def sort_key(self) -> tuple[int, int]:
        """Row-major key: ``sorted(cells, key=lambda c: c.sort_key)``."""
        return (self.y, self.x)

    def clamped(self) -> Coordinate:
        """Copy with negative components raised to zero."""
        if self.x >= 0 and self.y >= 0:
            return self
        return Coordinate(max(0, self.x), max(0, self.y))

    def in_bounds(self, size: Coordinate) -> bool:
        """Is this cell inside a board of *size* (width, height)?"""
        return 0 <= self.x < size.x and 0 <= self.y < size.y

    def __str__(self) -> str:
        return f"({self.x}, {self.y})"


# Returned in place of a board position once a competitor has forfeited.
FORFEIT_SHOT = Coordinate(-50, -50)
