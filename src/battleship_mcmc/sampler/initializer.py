"""Random starting board for the chain."""

from __future__ import annotations

import logging
import random

from battleship_mcmc.engine.board import Board
from battleship_mcmc.engine.handles import draw_handle, valid_handles

logger = logging.getLogger(__name__)


def initialize_board(board: Board, rng: random.Random) -> list[int]:
    """Place every ship once, in random order, uniformly over its valid handles.

    Ships not yet placed do not constrain the others. Returns the placement
    order as a list of ship indices.
    """
    for ship in board.ships:
        ship.lift()

    order = list(range(len(board.ships)))
    rng.shuffle(order)
    for index in order:
        ship = board.ships[index]
        handles = valid_handles(ship.length, board)
        handle = draw_handle(
            handles, rng, ship_index=index, length=ship.length, phase="initialize"
        )
        board.place(index, handle)
        logger.debug(
            "initial_ship_placed",
            extra={
                "ship_index": index,
                "length": ship.length,
                "row": handle.anchor.row,
                "col": handle.anchor.col,
                "direction": handle.direction.value,
                "options": len(handles),
            },
        )
    return order
