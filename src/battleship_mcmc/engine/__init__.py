"""Board, ship and placement geometry."""

from .board import Board
from .handles import draw_handle, valid_handles
from .ship import Coordinate, Direction, Handle, Ship, excluded_cells, occupied_cells

__all__ = [
    "Board",
    "Coordinate",
    "Direction",
    "Handle",
    "Ship",
    "draw_handle",
    "excluded_cells",
    "occupied_cells",
    "valid_handles",
]
