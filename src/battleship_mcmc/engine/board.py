"""Board state for the MCMC sampler: a flat collection of ships indexed by id."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Sequence, TypeAlias

import numpy as np
import numpy.typing as npt

from .ship import Coordinate, Handle, Ship, excluded_cells, occupied_cells

logger = logging.getLogger(__name__)

BoolGrid: TypeAlias = npt.NDArray[np.bool_]


@dataclass
class Board:
    """A ``height`` x ``width`` grid and the fleet of ships placed on it."""

    height: int = 10
    width: int = 10
    ships: list[Ship] = field(default_factory=list)

    @classmethod
    def empty(cls, height: int, width: int, lengths: Sequence[int]) -> Board:
        """Create a board whose ships all start lifted off the grid."""
        ships = [Ship(index=index, length=length) for index, length in enumerate(lengths)]
        return cls(height=height, width=width, ships=ships)

    def copy(self) -> Board:
        """Return an independent board; mutating it never touches this one."""
        return Board(
            height=self.height,
            width=self.width,
            ships=[replace(ship) for ship in self.ships],
        )

    def is_valid_coordinate(self, coord: Coordinate) -> bool:
        """Check whether a coordinate lies inside the board boundaries."""
        return 0 <= coord.row < self.height and 0 <= coord.col < self.width

    def active_ships(self) -> list[Ship]:
        return [ship for ship in self.ships if ship.active]

    def place(self, index: int, handle: Handle) -> None:
        """Activate ship ``index`` at ``handle``.

        The caller is responsible for drawing ``handle`` from the valid handle
        set; only the bounds are checked here.
        """
        ship = self.ships[index]
        cells = occupied_cells(handle, ship.length)
        if not all(self.is_valid_coordinate(coord) for coord in cells):
            raise ValueError(f"Handle {handle} puts ship {index} off the board.")
        ship.place(handle)

    def remove(self, index: int) -> None:
        self.ships[index].lift()

    def occupancy_matrix(self) -> BoolGrid:
        """Boolean grid, true where any active ship sits."""
        occupied = np.zeros((self.height, self.width), dtype=bool)
        for ship in self.active_ships():
            for coord in ship.coordinates():
                occupied[coord.row, coord.col] = True
        return occupied

    def exclusion_matrix(self) -> BoolGrid:
        """Boolean grid, true where a ship may not be placed.

        That is every active ship's cells together with their 8-neighbourhood.
        """
        excluded = np.zeros((self.height, self.width), dtype=bool)
        for ship in self.active_ships():
            for coord in excluded_cells(ship.coordinates(), self.height, self.width):
                excluded[coord.row, coord.col] = True
        return excluded

    def is_consistent(self) -> bool:
        """Check bounds plus the no-overlap/no-adjacency rule for all active ships."""
        ships = self.active_ships()
        cells = {ship.index: set(ship.coordinates()) for ship in ships}
        for ship in ships:
            if not all(self.is_valid_coordinate(coord) for coord in cells[ship.index]):
                logger.debug("ship_out_of_bounds", extra={"ship_index": ship.index})
                return False
        for position, first in enumerate(ships):
            halo = excluded_cells(list(cells[first.index]), self.height, self.width)
            for second in ships[position + 1 :]:
                if cells[second.index] & halo:
                    logger.debug(
                        "ships_touching",
                        extra={"first": first.index, "second": second.index},
                    )
                    return False
        return True

    def render(self) -> str:
        """Return a framed text picture of the occupied cells."""
        occupied = self.occupancy_matrix()
        rows = []
        for row in occupied:
            rows.append("|" + "".join("X" if cell else " " for cell in row) + "|")
        return "\n".join(rows)
