"""Exceptions raised by the Battleship MCMC sampler."""

from __future__ import annotations


class BattleshipMCMCError(Exception):
    """Base class for every sampler failure."""


class ConfigurationError(BattleshipMCMCError):
    """The run parameters can never produce a meaningful posterior."""


class UnplaceableStateError(BattleshipMCMCError):
    """No legal handle exists for a ship on the current board."""

    def __init__(self, ship_index: int, length: int, phase: str) -> None:
        self.ship_index = ship_index
        self.length = length
        self.phase = phase
        super().__init__(
            f"No valid placement for ship {ship_index} (length {length}) during {phase}."
        )
