"""Metropolis-Hastings chain over Battleship boards with a binary likelihood.

Each step lifts one uniformly chosen ship and re-places it uniformly over the
handles left free by the other ships. Removing the ship leaves the same board
whichever of the two states the move starts from, so the proposal is
symmetric, the Hastings and prior ratios are 1, and the acceptance
probability reduces to the candidate's likelihood: consistent boards are
always accepted and inconsistent ones always rejected.
"""

from __future__ import annotations

import logging
import random
import time
from dataclasses import dataclass

from battleship_mcmc.engine.board import Board
from battleship_mcmc.engine.handles import draw_handle, valid_handles
from battleship_mcmc.engine.ship import Handle
from battleship_mcmc.errors import ConfigurationError, UnplaceableStateError
from battleship_mcmc.telemetry import (
    get_meter,
    get_tracer,
    observe_chain_value,
    record_chain_metric,
)

from .config import ChainConfig
from .initializer import initialize_board
from .likelihood import is_consistent_with
from .posterior import CountGrid, PosteriorAccumulator, ProbabilityGrid

logger = logging.getLogger(__name__)
tracer = get_tracer("battleship_mcmc.sampler.chain")
meter = get_meter("battleship_mcmc.sampler.chain")

PROPOSAL_COUNTER = meter.create_counter(
    "battleship_mcmc_proposals",
    unit="1",
    description="Single-ship proposals evaluated by the chain",
)

SAMPLE_COUNTER = meter.create_counter(
    "battleship_mcmc_samples",
    unit="1",
    description="Boards added to the posterior accumulator",
)


@dataclass(frozen=True)
class StepResult:
    """Outcome of one proposal."""

    iteration: int
    ship_index: int
    handle: Handle | None
    accepted: bool


@dataclass
class ChainResult:
    """Posterior estimate plus bookkeeping for one or more merged chains."""

    probabilities: ProbabilityGrid
    counts: CountGrid
    samples: int
    accepted: int
    rejected: int
    initial_boards: list[Board]
    final_boards: list[Board]

    @property
    def chains(self) -> int:
        return len(self.final_boards)

    @property
    def initial_board(self) -> Board:
        return self.initial_boards[0]

    @property
    def final_board(self) -> Board:
        return self.final_boards[0]

    @property
    def acceptance_rate(self) -> float:
        total = self.accepted + self.rejected
        return self.accepted / total if total else 0.0


class MarkovChain:
    """Owns the current board, the random source and the accumulator of one chain."""

    def __init__(self, config: ChainConfig, rng: random.Random | None = None) -> None:
        config.check_consistency()
        self.config = config
        self.rng = rng if rng is not None else random.Random(config.seed)
        self.misses = config.miss_coordinates()
        self.board = Board.empty(config.board_height, config.board_width, config.ship_lengths)
        self.accumulator = PosteriorAccumulator(
            config.board_height,
            config.board_width,
            burn_in=config.burn_in,
            sample_stride=config.sample_stride,
        )
        self.initial_board: Board | None = None
        self.iteration = 0
        self.accepted = 0
        self.rejected = 0

    def initialize(self) -> Board:
        """Draw a starting board that satisfies the placement rules and the misses.

        A single-ship move cannot repair a start where two ships cover misses,
        so starts are redrawn until one is consistent with the observations.
        """
        with tracer.start_as_current_span("chain.initialize") as span:
            span.set_attribute("ships", len(self.board.ships))
            span.set_attribute("misses", len(self.misses))
            for attempt in range(1, self.config.max_init_attempts + 1):
                try:
                    order = initialize_board(self.board, self.rng)
                except UnplaceableStateError as exc:
                    span.record_exception(exc)
                    span.set_attribute("error", True)
                    logger.error(
                        "chain_initialise_failed",
                        extra={"ship_index": exc.ship_index, "length": exc.length, "phase": exc.phase},
                    )
                    raise
                if is_consistent_with(self.board, self.misses):
                    span.set_attribute("attempts", attempt)
                    self.initial_board = self.board.copy()
                    logger.info(
                        "chain_initialised",
                        extra={"attempts": attempt, "placement_order": order},
                    )
                    return self.board

            exc = ConfigurationError(
                f"No starting board consistent with {len(self.misses)} observed misses "
                f"after {self.config.max_init_attempts} attempts."
            )
            span.record_exception(exc)
            span.set_attribute("error", True)
            logger.error(
                "chain_initialise_inconsistent",
                extra={"attempts": self.config.max_init_attempts},
            )
            raise exc

    def propose(self, ship_index: int) -> Board:
        """Return a candidate board with ship ``ship_index`` re-placed; the current board is untouched."""
        candidate = self.board.copy()
        length = candidate.ships[ship_index].length
        candidate.remove(ship_index)
        handles = valid_handles(length, candidate)
        handle = draw_handle(
            handles, self.rng, ship_index=ship_index, length=length, phase="propose"
        )
        candidate.place(ship_index, handle)
        return candidate

    def step(self) -> StepResult:
        """Run one proposal and accept it iff the candidate explains every miss."""
        if self.initial_board is None:
            raise RuntimeError("Chain has not been initialised.")

        ship_index = self.rng.randrange(len(self.board.ships))
        candidate = self.propose(ship_index)
        accepted = is_consistent_with(candidate, self.misses)
        if accepted:
            self.board = candidate
            self.accepted += 1
        else:
            self.rejected += 1
        PROPOSAL_COUNTER.add(1, attributes={"result": "accepted" if accepted else "rejected"})

        result = StepResult(
            iteration=self.iteration,
            ship_index=ship_index,
            handle=candidate.ships[ship_index].handle,
            accepted=accepted,
        )
        self.iteration += 1
        return result

    def run(self) -> ChainResult:
        """Run the remaining iterations, sampling the current board after each one."""
        config = self.config
        with tracer.start_as_current_span("chain.run") as span:
            span.set_attribute("chain.length", config.chain_length)
            span.set_attribute("chain.burn_in", config.burn_in)
            span.set_attribute("chain.sample_stride", config.sample_stride)
            if self.initial_board is None:
                self.initialize()

            started = time.perf_counter()
            try:
                while self.iteration < config.chain_length:
                    iteration = self.iteration
                    self.step()
                    if self.accumulator.should_sample(iteration):
                        self.accumulator.observe(self.board.occupancy_matrix())
                        SAMPLE_COUNTER.add(1)
                    if config.progress_interval and (iteration + 1) % config.progress_interval == 0:
                        logger.info(
                            "chain_progress",
                            extra={
                                "completed": iteration + 1,
                                "total": config.chain_length,
                                "accepted": self.accepted,
                            },
                        )
            except UnplaceableStateError as exc:
                span.record_exception(exc)
                span.set_attribute("error", True)
                logger.error(
                    "chain_step_failed",
                    extra={
                        "iteration": self.iteration,
                        "ship_index": exc.ship_index,
                        "length": exc.length,
                        "phase": exc.phase,
                    },
                )
                raise

            duration = time.perf_counter() - started
            result = self._result()
            span.set_attribute("chain.samples", result.samples)
            span.set_attribute("chain.acceptance_rate", result.acceptance_rate)
            observe_chain_value("battleship_mcmc_acceptance_rate", result.acceptance_rate)
            observe_chain_value("battleship_mcmc_run_seconds", duration)
            logger.info(
                "chain_finished",
                extra={
                    "samples": result.samples,
                    "accepted": result.accepted,
                    "rejected": result.rejected,
                    "duration_s": round(duration, 3),
                },
            )
            return result

    def _result(self) -> ChainResult:
        initial = self.initial_board if self.initial_board is not None else self.board
        return ChainResult(
            probabilities=self.accumulator.probabilities(),
            counts=self.accumulator.counts.copy(),
            samples=self.accumulator.samples,
            accepted=self.accepted,
            rejected=self.rejected,
            initial_boards=[initial.copy()],
            final_boards=[self.board.copy()],
        )


def run_chains(config: ChainConfig, num_chains: int = 1) -> ChainResult:
    """Run independent chains one after another and merge their posteriors.

    Each chain gets its own ``random.Random`` seeded from a parent generator
    built from ``config.seed``, its own board and its own accumulator.
    """
    if num_chains < 1:
        raise ConfigurationError("num_chains must be at least 1.")

    parent = random.Random(config.seed)
    with tracer.start_as_current_span("chain.run_chains") as span:
        span.set_attribute("chains", num_chains)
        merged = PosteriorAccumulator(
            config.board_height,
            config.board_width,
            burn_in=config.burn_in,
            sample_stride=config.sample_stride,
        )
        accepted = rejected = 0
        initial_boards: list[Board] = []
        final_boards: list[Board] = []
        for chain_id in range(num_chains):
            chain = MarkovChain(config, rng=random.Random(parent.getrandbits(64)))
            result = chain.run()
            merged.merge(chain.accumulator)
            accepted += result.accepted
            rejected += result.rejected
            initial_boards.extend(result.initial_boards)
            final_boards.extend(result.final_boards)
            logger.info("chain_merged", extra={"chain_id": chain_id, "samples": result.samples})

        record_chain_metric("battleship_mcmc_chains_total", num_chains)
        return ChainResult(
            probabilities=merged.probabilities(),
            counts=merged.counts.copy(),
            samples=merged.samples,
            accepted=accepted,
            rejected=rejected,
            initial_boards=initial_boards,
            final_boards=final_boards,
        )
