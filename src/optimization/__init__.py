"""
Optimization module for the trial scheduler.

This module contains the orchestration loop that asks a search strategy for
proposals, evaluates them serially, and records outcomes on the trial store,
plus the fmin() entry point that wires it together.
"""

from .engine import FMinIter, ExperimentCallbacks, StrategyContractError, SEED_UPPER_BOUND
from .config import FMinConfig
from .fmin import fmin

__all__ = [
    "FMinIter",
    "ExperimentCallbacks",
    "StrategyContractError",
    "SEED_UPPER_BOUND",
    "FMinConfig",
    "fmin",
]
