"""Tests for chain configuration loading and checks."""

import pytest
from pydantic import ValidationError

from battleship_mcmc.engine.ship import Coordinate
from battleship_mcmc.errors import ConfigurationError
from battleship_mcmc.sampler.config import (
    DEFAULT_MISSES,
    ChainConfig,
    load_chain_config,
    parse_cell,
)


def test_defaults_describe_classic_fleet() -> None:
    config = ChainConfig()
    assert (config.board_height, config.board_width) == (10, 10)
    assert config.ship_lengths == [4, 3, 3, 2, 2, 2, 1, 1, 1, 1]
    assert Coordinate(5, 5) in config.miss_coordinates()
    config.check_consistency()


def test_field_constraints_are_validated() -> None:
    with pytest.raises(ValidationError):
        ChainConfig(board_width=0)
    with pytest.raises(ValidationError):
        ChainConfig(ship_lengths=[])
    with pytest.raises(ValidationError):
        ChainConfig(sample_stride=0)


def test_load_chain_config_reports_configuration_errors() -> None:
    with pytest.raises(ConfigurationError):
        load_chain_config(board_height=-1)
    with pytest.raises(ConfigurationError):
        load_chain_config(chain_length=100, burn_in=100)
    with pytest.raises(ConfigurationError):
        load_chain_config(board_width=4, board_height=3, ship_lengths=[5])
    with pytest.raises(ConfigurationError):
        load_chain_config(board_width=4, board_height=4, observed_misses={(4, 0)})


def test_ship_fitting_one_orientation_is_accepted() -> None:
    config = load_chain_config(board_width=6, board_height=2, ship_lengths=[6], observed_misses=set())
    assert config.ship_lengths == [6]


def test_expected_samples_counts_strided_iterations() -> None:
    assert ChainConfig(chain_length=1000, burn_in=100).expected_samples() == 900
    assert ChainConfig(chain_length=110, burn_in=10, sample_stride=5).expected_samples() == 20
    assert ChainConfig(chain_length=20, burn_in=3, sample_stride=5).expected_samples() == 3
    assert ChainConfig(chain_length=12, burn_in=11, sample_stride=5).expected_samples() == 0


def test_from_env_reads_prefixed_variables(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("BATTLESHIP_MCMC_WIDTH", "6")
    monkeypatch.setenv("BATTLESHIP_MCMC_HEIGHT", "7")
    monkeypatch.setenv("BATTLESHIP_MCMC_SHIPS", "3,2")
    monkeypatch.setenv("BATTLESHIP_MCMC_MISSES", "0:0, 1:2")
    monkeypatch.setenv("BATTLESHIP_MCMC_SEED", "99")

    config = ChainConfig.from_env(chain_length=50, burn_in=5)

    assert (config.board_width, config.board_height) == (6, 7)
    assert config.ship_lengths == [3, 2]
    assert config.observed_misses == frozenset({(0, 0), (1, 2)})
    assert config.seed == 99
    assert config.chain_length == 50


def test_from_env_overrides_win(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("BATTLESHIP_MCMC_WIDTH", "6")
    assert ChainConfig.from_env(board_width=8).board_width == 8


def test_parse_cell() -> None:
    assert parse_cell("3,4") == (3, 4)
    assert parse_cell(" 1:2 ", separator=":") == (1, 2)
    with pytest.raises(ValueError):
        parse_cell("1,2,3")


def test_stock_misses_only_apply_to_stock_board() -> None:
    assert ChainConfig().observed_misses == DEFAULT_MISSES
    assert ChainConfig(board_width=5, board_height=5).observed_misses == frozenset()
    assert ChainConfig(board_height=8).observed_misses == frozenset()
    assert ChainConfig(observed_misses=set()).observed_misses == frozenset()
    load_chain_config(board_width=5, board_height=5, ship_lengths=[2])


def test_load_chain_config_reads_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("BATTLESHIP_MCMC_WIDTH", "6")
    monkeypatch.setenv("BATTLESHIP_MCMC_HEIGHT", "6")
    monkeypatch.setenv("BATTLESHIP_MCMC_MISSES", "")
    monkeypatch.setenv("BATTLESHIP_MCMC_MAX_INIT_ATTEMPTS", "7")

    config = load_chain_config(from_env=True, ship_lengths=[2], chain_length=30, burn_in=3)

    assert (config.board_width, config.board_height) == (6, 6)
    assert config.observed_misses == frozenset()
    assert config.max_init_attempts == 7


def test_load_chain_config_wraps_malformed_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("BATTLESHIP_MCMC_SEED", "abc")
    with pytest.raises(ConfigurationError):
        load_chain_config(from_env=True)
