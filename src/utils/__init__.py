"""
Utility modules for the trial scheduler.

This package provides cross-cutting helpers such as on-disk trial logging.
"""

from .trial_logger import TrialLogger

__all__ = [
    "TrialLogger",
]
