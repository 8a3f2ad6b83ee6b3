"""Run parameters for a Markov chain over Battleship boards."""

from __future__ import annotations

import os
from typing import Annotated, Any, Dict

from pydantic import BaseModel, Field, ValidationError, model_validator

from battleship_mcmc.engine.ship import Coordinate
from battleship_mcmc.errors import ConfigurationError

ENV_PREFIX = "BATTLESHIP_MCMC_"

DEFAULT_SHIP_LENGTHS = (4, 3, 3, 2, 2, 2, 1, 1, 1, 1)
DEFAULT_MISSES = frozenset({(5, 5), (2, 3), (8, 7), (3, 8), (8, 1)})

PositiveInt = Annotated[int, Field(gt=0)]


class ChainConfig(BaseModel):
    """Board geometry, fleet, observations and chain schedule."""

    board_width: PositiveInt = 10
    board_height: PositiveInt = 10
    ship_lengths: list[PositiveInt] = Field(
        default_factory=lambda: list(DEFAULT_SHIP_LENGTHS), min_length=1
    )
    observed_misses: frozenset[tuple[int, int]] = Field(default_factory=frozenset)
    chain_length: PositiveInt = 1_000_000
    burn_in: int = Field(default=1000, ge=0)
    sample_stride: PositiveInt = 1
    seed: int | None = None
    progress_interval: int = Field(default=10_000, ge=0)
    max_init_attempts: PositiveInt = 1000

    @model_validator(mode="before")
    @classmethod
    def _default_misses(cls, data: Any) -> Any:
        """Apply the stock misses only to the stock 10x10 board."""
        if not isinstance(data, dict) or data.get("observed_misses") is not None:
            return data
        stock_board = data.get("board_width", 10) == 10 and data.get("board_height", 10) == 10
        return {**data, "observed_misses": DEFAULT_MISSES if stock_board else frozenset()}

    @classmethod
    def from_env(cls, **overrides: Any) -> "ChainConfig":
        """Construct config from `BATTLESHIP_MCMC_*` env vars; overrides win."""

        data: Dict[str, Any] = {}
        int_fields = {
            "WIDTH": "board_width",
            "HEIGHT": "board_height",
            "CHAIN_LENGTH": "chain_length",
            "BURN_IN": "burn_in",
            "SAMPLE_STRIDE": "sample_stride",
            "SEED": "seed",
            "PROGRESS_INTERVAL": "progress_interval",
            "MAX_INIT_ATTEMPTS": "max_init_attempts",
        }
        for suffix, field in int_fields.items():
            value = os.getenv(ENV_PREFIX + suffix)
            if value is not None and value.strip():
                data[field] = int(value)

        ships = os.getenv(ENV_PREFIX + "SHIPS")
        if ships:
            data["ship_lengths"] = [int(part) for part in ships.split(",") if part.strip()]

        misses = os.getenv(ENV_PREFIX + "MISSES")
        if misses is not None:
            data["observed_misses"] = frozenset(
                parse_cell(part, separator=":") for part in misses.split(",") if part.strip()
            )

        data.update(overrides)
        return cls(**data)

    def miss_coordinates(self) -> frozenset[Coordinate]:
        return frozenset(Coordinate(row, col) for row, col in self.observed_misses)

    def expected_samples(self) -> int:
        """Number of iterations the accumulator will sample."""
        first = self.burn_in + (-self.burn_in) % self.sample_stride
        if first >= self.chain_length:
            return 0
        return (self.chain_length - 1 - first) // self.sample_stride + 1

    def check_consistency(self) -> None:
        """Raise ConfigurationError for parameters that cannot yield a posterior."""
        if self.burn_in >= self.chain_length:
            raise ConfigurationError(
                f"burn_in ({self.burn_in}) must be smaller than chain_length ({self.chain_length})."
            )
        longest_side = max(self.board_width, self.board_height)
        for index, length in enumerate(self.ship_lengths):
            if length > longest_side:
                raise ConfigurationError(
                    f"Ship {index} of length {length} does not fit on a "
                    f"{self.board_height}x{self.board_width} board."
                )
        for row, col in sorted(self.observed_misses):
            if not (0 <= row < self.board_height and 0 <= col < self.board_width):
                raise ConfigurationError(f"Observed miss ({row}, {col}) lies outside the board.")


def parse_cell(text: str, separator: str = ",") -> tuple[int, int]:
    """Parse ``"row<sep>col"`` into a tuple of ints."""
    parts = text.strip().split(separator)
    if len(parts) != 2:
        raise ValueError(f"Expected 'row{separator}col', got {text!r}.")
    return int(parts[0]), int(parts[1])


def load_chain_config(*, from_env: bool = False, **values: Any) -> ChainConfig:
    """Build and check a config, reporting every problem as ConfigurationError.

    With ``from_env`` the `BATTLESHIP_MCMC_*` variables fill in whatever
    ``values`` leaves unset.
    """
    try:
        config = ChainConfig.from_env(**values) if from_env else ChainConfig(**values)
    except (ValidationError, ValueError) as exc:
        raise ConfigurationError(str(exc)) from exc
    config.check_consistency()
    return config
