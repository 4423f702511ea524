"""
Core data structures and default collaborators for the trial scheduler.
"""

from .trial import (
    TrialRecord,
    JOB_STATE_NEW,
    JOB_STATE_RUNNING,
    JOB_STATE_DONE,
    JOB_STATE_ERROR,
    JOB_STATES,
)
from .trials import Trials
from .domain import Domain
from .random_state import RandomState

__all__ = [
    "TrialRecord",
    "JOB_STATE_NEW",
    "JOB_STATE_RUNNING",
    "JOB_STATE_DONE",
    "JOB_STATE_ERROR",
    "JOB_STATES",
    "Trials",
    "Domain",
    "RandomState",
]
