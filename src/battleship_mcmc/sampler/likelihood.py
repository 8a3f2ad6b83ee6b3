"""Binary likelihood of a board given the observed misses."""

from __future__ import annotations

from typing import Iterable

from battleship_mcmc.engine.board import Board
from battleship_mcmc.engine.ship import Coordinate


def board_likelihood(board: Board, misses: Iterable[Coordinate]) -> float:
    """Return 1.0 if no active ship covers a miss, else 0.0."""
    occupied = board.occupancy_matrix()
    for miss in misses:
        if occupied[miss.row, miss.col]:
            return 0.0
    return 1.0


def is_consistent_with(board: Board, misses: Iterable[Coordinate]) -> bool:
    return board_likelihood(board, misses) == 1.0
