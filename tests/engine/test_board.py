"""Tests for board state and derived matrices."""

import numpy as np
import pytest

from battleship_mcmc.engine.board import Board
from battleship_mcmc.engine.ship import Coordinate, Direction, Handle


def _board_with_destroyer() -> Board:
    board = Board.empty(5, 5, [2, 1])
    board.place(0, Handle(Coordinate(2, 2), Direction.RIGHT))
    return board


def test_empty_board_has_inactive_ships() -> None:
    board = Board.empty(4, 6, [3, 2])
    assert [ship.length for ship in board.ships] == [3, 2]
    assert board.active_ships() == []
    assert not board.occupancy_matrix().any()
    assert board.occupancy_matrix().shape == (4, 6)


def test_occupancy_matrix_marks_active_ship_cells() -> None:
    occupied = _board_with_destroyer().occupancy_matrix()
    assert occupied.dtype == np.bool_
    assert occupied.sum() == 2
    assert occupied[2, 2] and occupied[2, 3]


def test_exclusion_matrix_covers_neighbourhood() -> None:
    excluded = _board_with_destroyer().exclusion_matrix()
    assert excluded.sum() == 12
    assert excluded[1:4, 1:5].all()
    assert not excluded[0].any()


def test_copy_is_independent() -> None:
    board = _board_with_destroyer()
    candidate = board.copy()
    candidate.remove(0)
    candidate.place(1, Handle(Coordinate(0, 0), Direction.UP))

    assert board.ships[0].active
    assert not board.ships[1].active
    assert candidate != board


def test_place_rejects_handle_off_the_grid() -> None:
    board = Board.empty(5, 5, [4])
    with pytest.raises(ValueError):
        board.place(0, Handle(Coordinate(0, 2), Direction.RIGHT))
    assert not board.ships[0].active


def test_is_consistent_detects_touching_ships() -> None:
    board = Board.empty(5, 5, [2, 2])
    board.place(0, Handle(Coordinate(0, 0), Direction.RIGHT))
    board.place(1, Handle(Coordinate(2, 0), Direction.RIGHT))
    assert board.is_consistent()

    board.place(1, Handle(Coordinate(1, 2), Direction.DOWN))
    assert not board.is_consistent()

    board.place(1, Handle(Coordinate(0, 1), Direction.DOWN))
    assert not board.is_consistent()


def test_render_draws_occupied_cells() -> None:
    board = Board.empty(3, 3, [2])
    board.place(0, Handle(Coordinate(0, 0), Direction.RIGHT))
    assert board.render() == "|XX |\n|   |\n|   |"
