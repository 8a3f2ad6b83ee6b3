"""Per-cell occupancy counts gathered from the sampled part of a chain."""

from __future__ import annotations

import logging
from typing import TypeAlias

import numpy as np
import numpy.typing as npt

from battleship_mcmc.engine.board import BoolGrid

logger = logging.getLogger(__name__)

CountGrid: TypeAlias = npt.NDArray[np.int64]
ProbabilityGrid: TypeAlias = npt.NDArray[np.float64]


class PosteriorAccumulator:
    """Running occupancy counts after burn-in, thinned by ``sample_stride``.

    ``probabilities()`` turns the counts into the estimated posterior
    probability that a ship covers each cell.
    """

    def __init__(self, height: int, width: int, burn_in: int = 0, sample_stride: int = 1) -> None:
        if sample_stride < 1:
            raise ValueError("sample_stride must be at least 1.")
        if burn_in < 0:
            raise ValueError("burn_in must be non-negative.")
        self.height = height
        self.width = width
        self.burn_in = burn_in
        self.sample_stride = sample_stride
        self.counts: CountGrid = np.zeros((height, width), dtype=np.int64)
        self.samples = 0

    def should_sample(self, iteration: int) -> bool:
        return iteration >= self.burn_in and iteration % self.sample_stride == 0

    def observe(self, occupancy: BoolGrid) -> None:
        """Count one sampled board."""
        if occupancy.shape != self.counts.shape:
            raise ValueError(
                f"Occupancy shape {occupancy.shape} does not match accumulator {self.counts.shape}."
            )
        self.counts += occupancy.astype(np.int64)
        self.samples += 1

    def probabilities(self) -> ProbabilityGrid:
        if self.samples == 0:
            logger.warning("posterior_without_samples", extra={"burn_in": self.burn_in})
            return np.zeros((self.height, self.width), dtype=np.float64)
        return self.counts / float(self.samples)

    def merge(self, other: PosteriorAccumulator) -> None:
        """Fold in the counts of an independent chain over the same board."""
        if other.counts.shape != self.counts.shape:
            raise ValueError("Cannot merge accumulators for different board sizes.")
        self.counts += other.counts
        self.samples += other.samples
