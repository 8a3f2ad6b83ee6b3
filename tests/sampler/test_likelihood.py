"""Tests for the binary likelihood."""

from battleship_mcmc.engine.board import Board
from battleship_mcmc.engine.ship import Coordinate, Direction, Handle
from battleship_mcmc.sampler.likelihood import board_likelihood, is_consistent_with


def _board() -> Board:
    board = Board.empty(5, 5, [2, 1])
    board.place(0, Handle(Coordinate(0, 0), Direction.RIGHT))
    return board


def test_ship_over_miss_has_zero_likelihood() -> None:
    misses = {Coordinate(4, 4), Coordinate(0, 1)}
    assert board_likelihood(_board(), misses) == 0.0
    assert not is_consistent_with(_board(), misses)


def test_board_clear_of_misses_has_unit_likelihood() -> None:
    assert board_likelihood(_board(), {Coordinate(4, 4), Coordinate(1, 1)}) == 1.0
    assert board_likelihood(_board(), set()) == 1.0


def test_inactive_ships_do_not_count() -> None:
    board = _board()
    board.remove(0)
    assert board_likelihood(board, {Coordinate(0, 0)}) == 1.0
