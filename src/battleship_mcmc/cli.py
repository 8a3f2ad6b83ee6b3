"""Command-line driver: estimate ship occupancy probabilities from observed misses."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Sequence

import numpy as np
from opentelemetry.instrumentation.logging import LoggingInstrumentor

from battleship_mcmc.engine.board import Board
from battleship_mcmc.errors import ConfigurationError, UnplaceableStateError
from battleship_mcmc.sampler.chain import ChainResult, MarkovChain, run_chains
from battleship_mcmc.sampler.config import ChainConfig, load_chain_config, parse_cell
from battleship_mcmc.telemetry import configure_console_logging, init_telemetry

logger = logging.getLogger(__name__)


def _parse_ships(text: str) -> list[int]:
    try:
        return [int(part) for part in text.split(",") if part.strip()]
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"Invalid ship list {text!r}.") from exc


def _parse_miss(text: str) -> tuple[int, int]:
    try:
        return parse_cell(text)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def format_posterior(probabilities: np.ndarray, precision: int = 3) -> str:
    """Render the probability grid one row per line, comma separated."""
    rows = []
    for row in probabilities:
        rows.append(", ".join(f"{value:.{precision}f}" for value in row))
    return "\n".join(rows)


def _print_boards(title: str, boards: Sequence[Board]) -> None:
    for chain_id, board in enumerate(boards):
        label = title if len(boards) == 1 else f"{title} (chain {chain_id})"
        print(f"--{label}--")
        print(board.render())


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Estimate Battleship ship-occupancy probabilities with MCMC."
    )
    parser.add_argument("--width", type=int, default=None, help="Board width.")
    parser.add_argument("--height", type=int, default=None, help="Board height.")
    parser.add_argument(
        "--ships", type=_parse_ships, default=None, help="Comma separated ship lengths, e.g. 4,3,3,2."
    )
    misses = parser.add_mutually_exclusive_group()
    misses.add_argument(
        "--miss",
        type=_parse_miss,
        action="append",
        default=None,
        help="Observed miss as ROW,COL. Repeat for several misses. "
        "Without it the stock misses apply to a 10x10 board and none to other sizes.",
    )
    misses.add_argument(
        "--no-misses", action="store_true", help="Run with no observed misses at all."
    )
    parser.add_argument("--chain-length", type=int, default=None, help="Total iterations.")
    parser.add_argument("--burn-in", type=int, default=None, help="Iterations discarded first.")
    parser.add_argument("--stride", type=int, default=None, help="Keep every Nth iteration.")
    parser.add_argument("--seed", type=int, default=None, help="Optional RNG seed for reproducibility.")
    parser.add_argument("--chains", type=int, default=1, help="Independent chains to merge.")
    parser.add_argument(
        "--progress-interval", type=int, default=None, help="Log progress every N iterations (0 disables)."
    )
    parser.add_argument("--precision", type=int, default=3, help="Digits printed per probability.")
    return parser


def _config_from_args(args: argparse.Namespace) -> ChainConfig:
    misses = frozenset(args.miss) if args.miss is not None else None
    if args.no_misses:
        misses = frozenset()
    overrides = {
        "board_width": args.width,
        "board_height": args.height,
        "ship_lengths": args.ships,
        "observed_misses": misses,
        "chain_length": args.chain_length,
        "burn_in": args.burn_in,
        "sample_stride": args.stride,
        "seed": args.seed,
        "progress_interval": args.progress_interval,
    }
    return load_chain_config(
        from_env=True, **{key: value for key, value in overrides.items() if value is not None}
    )


def run(args: argparse.Namespace) -> ChainResult:
    config = _config_from_args(args)
    if args.chains == 1:
        chain = MarkovChain(config)
        _print_boards("Initial Board", [chain.initialize()])
        print("\n--Starting MCMC--")
        return chain.run()
    result = run_chains(config, num_chains=args.chains)
    _print_boards("Initial Board", result.initial_boards)
    return result


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_console_logging()
    telemetry = init_telemetry()
    if telemetry.enable_logging:
        LoggingInstrumentor().instrument()

    try:
        result = run(args)
    except ConfigurationError as exc:
        logger.error("invalid_configuration", extra={"reason": str(exc)})
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 2
    except UnplaceableStateError as exc:
        print(f"Sampler stuck: {exc}", file=sys.stderr)
        return 1

    print("\n--Posterior Board--")
    print(format_posterior(result.probabilities, precision=args.precision))
    print(
        f"\nsamples={result.samples} chains={result.chains} "
        f"acceptance_rate={result.acceptance_rate:.3f}"
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
