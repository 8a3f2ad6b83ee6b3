"""Bayesian occupancy inference for Battleship boards via MCMC."""

__version__ = "0.1.0"
