"""Tests for valid-handle enumeration and uniform draws."""

import random
from collections import Counter

import pytest

from battleship_mcmc.engine.board import Board
from battleship_mcmc.engine.handles import draw_handle, valid_handles
from battleship_mcmc.engine.ship import Coordinate, Direction, Handle, occupied_cells
from battleship_mcmc.errors import UnplaceableStateError
from battleship_mcmc.sampler.initializer import initialize_board


def test_handles_respect_bounds() -> None:
    board = Board.empty(5, 5, [4])
    handles = valid_handles(4, board)
    assert Handle(Coordinate(0, 0), Direction.RIGHT) in handles
    assert Handle(Coordinate(0, 2), Direction.RIGHT) not in handles
    for handle in handles:
        assert all(board.is_valid_coordinate(cell) for cell in occupied_cells(handle, 4))


def test_every_placement_counted_from_both_ends() -> None:
    # 20 placements of length 4 on a 5x5 board, each reachable from either end.
    assert len(valid_handles(4, Board.empty(5, 5, [4]))) == 40
    # A single cell is reachable in all four directions.
    assert len(valid_handles(1, Board.empty(3, 3, [1]))) == 36


def test_handles_avoid_exclusion_zone() -> None:
    board = Board.empty(5, 5, [1, 2])
    board.place(0, Handle(Coordinate(2, 2), Direction.DOWN))
    excluded = board.exclusion_matrix()
    for handle in valid_handles(2, board):
        for cell in occupied_cells(handle, 2):
            assert not excluded[cell.row, cell.col]


def test_boxed_in_board_has_no_handles() -> None:
    board = Board.empty(3, 3, [1, 1])
    board.place(0, Handle(Coordinate(1, 1), Direction.LEFT))
    assert valid_handles(1, board) == []


def test_current_placement_is_valid_after_lifting_ship() -> None:
    board = Board.empty(10, 10, [4, 3, 3, 2, 2, 2, 1, 1, 1, 1])
    initialize_board(board, random.Random(11))
    for ship in board.ships:
        candidate = board.copy()
        candidate.remove(ship.index)
        assert ship.handle in valid_handles(ship.length, candidate)


def test_draw_handle_is_uniform_over_list() -> None:
    handles = valid_handles(2, Board.empty(2, 2, [2]))
    assert len(handles) == 8
    rng = random.Random(5)
    draws = Counter(
        draw_handle(handles, rng, ship_index=0, length=2, phase="test") for _ in range(8000)
    )
    assert set(draws) == set(handles)
    # 1000 expected per handle, standard deviation about 30.
    for handle in handles:
        assert 850 <= draws[handle] <= 1150


def test_draw_handle_raises_on_empty_set() -> None:
    with pytest.raises(UnplaceableStateError) as excinfo:
        draw_handle([], random.Random(0), ship_index=3, length=4, phase="propose")
    assert excinfo.value.ship_index == 3
    assert excinfo.value.length == 4
    assert excinfo.value.phase == "propose"
