"""Enumeration of legal placements (handles) for a single ship."""

from __future__ import annotations

import random

from battleship_mcmc.errors import UnplaceableStateError

from .board import Board
from .ship import Coordinate, Direction, Handle

DIRECTIONS: tuple[Direction, ...] = tuple(Direction)


def valid_handles(length: int, board: Board) -> list[Handle]:
    """Return every handle at which a ship of ``length`` fits on ``board``.

    The ship being placed must already be inactive on ``board`` so that only
    the other ships constrain it. A handle is kept iff all ``length`` cells
    from its anchor are in bounds and outside the exclusion matrix.
    Handles come back in row-major order, then direction order.
    """
    available = ~board.exclusion_matrix()
    height, width = board.height, board.width
    handles: list[Handle] = []
    for row in range(height):
        for col in range(width):
            for direction in DIRECTIONS:
                delta_row, delta_col = direction.step
                free = 0
                for offset in range(length):
                    r = row + delta_row * offset
                    c = col + delta_col * offset
                    if 0 <= r < height and 0 <= c < width and available[r, c]:
                        free += 1
                if free == length:
                    handles.append(Handle(Coordinate(row, col), direction))
    return handles


def draw_handle(
    handles: list[Handle],
    rng: random.Random,
    *,
    ship_index: int,
    length: int,
    phase: str,
) -> Handle:
    """Pick one handle uniformly; an empty set means the board is a dead end."""
    if not handles:
        raise UnplaceableStateError(ship_index=ship_index, length=length, phase=phase)
    return handles[rng.randrange(len(handles))]
