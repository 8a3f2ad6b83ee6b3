"""Ship and placement geometry for the MCMC board model."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class Coordinate:
    """Immutable board coordinate."""

    row: int
    col: int


class Direction(Enum):
    """Axis-aligned directions a ship extends in from its anchor."""

    DOWN = "down"
    UP = "up"
    RIGHT = "right"
    LEFT = "left"

    @property
    def step(self) -> tuple[int, int]:
        """Return the (row, col) delta between consecutive ship cells."""
        return _STEPS[self]


_STEPS: dict[Direction, tuple[int, int]] = {
    Direction.DOWN: (1, 0),
    Direction.UP: (-1, 0),
    Direction.RIGHT: (0, 1),
    Direction.LEFT: (0, -1),
}


@dataclass(frozen=True)
class Handle:
    """Anchor cell plus direction; with a length it fixes a ship's cells."""

    anchor: Coordinate
    direction: Direction


def occupied_cells(handle: Handle, length: int) -> tuple[Coordinate, ...]:
    """Return the ordered cells covered by a ship of ``length`` at ``handle``.

    Cells are not clipped: a handle running off the grid yields out-of-bounds
    coordinates, which the handle enumerator never produces.
    """
    delta_row, delta_col = handle.direction.step
    anchor = handle.anchor
    return tuple(
        Coordinate(anchor.row + delta_row * offset, anchor.col + delta_col * offset)
        for offset in range(length)
    )


def excluded_cells(cells: tuple[Coordinate, ...] | list[Coordinate], height: int, width: int) -> set[Coordinate]:
    """Return the 8-neighbourhood (plus the cell itself) of every cell, clipped to the grid."""
    excluded: set[Coordinate] = set()
    for coord in cells:
        for delta_row in (-1, 0, 1):
            for delta_col in (-1, 0, 1):
                row = coord.row + delta_row
                col = coord.col + delta_col
                if 0 <= row < height and 0 <= col < width:
                    excluded.add(Coordinate(row, col))
    return excluded


@dataclass
class Ship:
    """A single ship of fixed length, either placed (active) or lifted off the board."""

    index: int
    length: int
    active: bool = False
    handle: Handle | None = None

    def __post_init__(self) -> None:
        if self.length <= 0:
            raise ValueError("Ship length must be positive.")

    def coordinates(self) -> list[Coordinate]:
        """Return the ordered list of coordinates occupied by this ship."""
        if not self.active or self.handle is None:
            return []
        return list(occupied_cells(self.handle, self.length))

    def place(self, handle: Handle) -> None:
        self.handle = handle
        self.active = True

    def lift(self) -> None:
        self.active = False
        self.handle = None
