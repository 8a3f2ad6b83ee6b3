"""Markov chain sampler exports."""

from .chain import ChainResult, MarkovChain, StepResult, run_chains
from .config import ChainConfig, load_chain_config
from .likelihood import board_likelihood
from .posterior import PosteriorAccumulator

__all__ = [
    "ChainConfig",
    "ChainResult",
    "MarkovChain",
    "PosteriorAccumulator",
    "StepResult",
    "board_likelihood",
    "load_chain_config",
    "run_chains",
]
