"""Ship placement geometry."""

from __future__ import annotations

from collections.abc import Iterable

from salvo.core.enums import Orientation
from salvo.core.types import Coordinate

_STEP: dict[Orientation, Coordinate] = {
    Orientation.HORIZONTAL: Coordinate(1, 0),
    Orientation.VERTICAL: Coordinate(0, 1),
}


class Ship:
    """A ship of fixed length that a competitor places on its board.

    A new ship is unplaced. :meth:`place` anchors it at an origin cell and
    extends it ``length`` cells along *orientation*.
    """

    __slots__ = ("_length", "_origin", "_orientation", "_cells")

    def __init__(self, length: int) -> None:
        if length < 1:
            raise ValueError(f"Ship length must be positive, got {length}")
        self._length = length
        self._origin: Coordinate | None = None
        self._orientation: Orientation | None = None
        self._cells: tuple[Coordinate, ...] = ()

    # ── Properties ───────────────────────────────────────────────────────

    @property
    def length(self) -> int:
        return self._length

    @property
    def origin(self) -> Coordinate | None:
        return self._origin

    @property
    def orientation(self) -> Orientation | None:
        return self._orientation

    @property
    def is_placed(self) -> bool:
        return self._origin is not None

    @property
    def cells(self) -> tuple[Coordinate, ...]:
        """Occupied cells from the origin outwards (empty while unplaced)."""
        return self._cells

    # ── Placement ────────────────────────────────────────────────────────

    def place(self, origin: Coordinate, orientation: Orientation) -> None:
        """Anchor the ship. Bounds are checked later by :meth:`is_valid`."""
        step = _STEP[orientation]
        self._origin = origin
        self._orientation = orientation
        self._cells = tuple(
            Coordinate(origin.x + step.x * i, origin.y + step.y * i)
            for i in range(self._length)
        )

    def reset(self) -> None:
        """Return the ship to the unplaced state."""
        self._origin = None
        self._orientation = None
        self._cells = ()

    def copy(self) -> Ship:
        ship = Ship(self._length)
        if self._origin is not None and self._orientation is not None:
            ship.place(self._origin, self._orientation)
        return ship

    # ── Geometry queries ─────────────────────────────────────────────────

    def is_at(self, coord: Coordinate) -> bool:
        return coord in self._cells

    def is_valid(self, board_size: Coordinate) -> bool:
        """Placed, and every cell lies on a board of *board_size*."""
        if not self.is_placed:
            return False
        return all(cell.in_bounds(board_size) for cell in self._cells)

    def conflicts_with(self, other: Ship) -> bool:
        """Do the two ships share at least one cell?"""
        if not self._cells or not other._cells:
            return False
        return not set(self._cells).isdisjoint(other._cells)

    def is_sunk(self, shots: Iterable[Coordinate]) -> bool:
        """Has every cell of this ship been shot at?"""
        if not self._cells:
            return False
        shot_set = shots if isinstance(shots, (set, frozenset)) else set(shots)
        return all(cell in shot_set for cell in self._cells)

    def __repr__(self) -> str:
        if self._origin is None:
            return f"Ship(length={self._length}, unplaced)"
        return (
            f"Ship(length={self._length}, origin={self._origin}, "
            f"{self._orientation})"
        )
