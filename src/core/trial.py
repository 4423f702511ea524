"""
Core data structures for the trial scheduler.

This module defines the TrialRecord class, which represents a single proposed
parameter set together with its evaluation outcome and bookkeeping timestamps.
"""

from dataclasses import dataclass, field, asdict
from typing import Optional, Dict, Any
import time


JOB_STATE_NEW = "new"
JOB_STATE_RUNNING = "running"
JOB_STATE_DONE = "done"
JOB_STATE_ERROR = "error"

JOB_STATES = (JOB_STATE_NEW, JOB_STATE_RUNNING, JOB_STATE_DONE, JOB_STATE_ERROR)

# Allowed state transitions; DONE and ERROR are terminal
_TRANSITIONS = {
    JOB_STATE_NEW: (JOB_STATE_RUNNING,),
    JOB_STATE_RUNNING: (JOB_STATE_DONE, JOB_STATE_ERROR),
    JOB_STATE_DONE: (),
    JOB_STATE_ERROR: (),
}


def now_ms() -> int:
    """Current wall-clock time in milliseconds."""
    return int(time.time() * 1000)


@dataclass
class TrialRecord:
    """
    Represents a single trial: one proposed parameter set and its outcome.

    Attributes:
        tid: Identifier allocated by the trial store (unique, never reused)
        args: Opaque payload passed to the objective function
        state: One of new/running/done/error
        result: Objective return value (only set once the trial is done)
        error: Failure message (only set once the trial is in error)
        book_time: Time the trial was picked up for evaluation (ms)
        refresh_time: Time of the last state change (ms, never decreases)
        metadata: Free-form extra information attached by a search strategy
    """

    tid: int
    args: Any = None
    state: str = JOB_STATE_NEW
    result: Any = None
    error: Optional[str] = None
    book_time: Optional[int] = None
    refresh_time: Optional[int] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if self.state not in JOB_STATES:
            raise ValueError(f"Unknown trial state: {self.state}")

    @property
    def is_new(self) -> bool:
        return self.state == JOB_STATE_NEW

    @property
    def is_finished(self) -> bool:
        """Check if the trial reached a terminal state."""
        return self.state in (JOB_STATE_DONE, JOB_STATE_ERROR)

    def _transition(self, new_state: str) -> None:
        if new_state not in _TRANSITIONS[self.state]:
            raise ValueError(
                f"Illegal state transition for trial {self.tid}: {self.state} -> {new_state}"
            )
        self.state = new_state

    def _touch(self, timestamp: Optional[int] = None) -> None:
        timestamp = now_ms() if timestamp is None else timestamp
        if self.refresh_time is not None:
            timestamp = max(timestamp, self.refresh_time)
        self.refresh_time = timestamp

    def mark_running(self) -> None:
        """Move NEW -> RUNNING and stamp book_time and refresh_time."""
        self._transition(JOB_STATE_RUNNING)
        now = now_ms()
        self.book_time = now
        self._touch(now)

    def mark_done(self, result: Any) -> None:
        """Move RUNNING -> DONE and store the objective's result."""
        self._transition(JOB_STATE_DONE)
        self.result = result
        self._touch()

    def mark_error(self, message: str) -> None:
        """Move RUNNING -> ERROR and store the failure message."""
        self._transition(JOB_STATE_ERROR)
        self.error = message
        self._touch()

    @property
    def loss(self) -> Optional[float]:
        """
        Loss of a finished trial.

        A result is either a plain number or a mapping with a "loss" key.
        Returns None when the trial is not done or carries no usable loss.
        """
        if self.state != JOB_STATE_DONE or self.result is None:
            return None
        value = self.result.get("loss") if isinstance(self.result, dict) else self.result
        if isinstance(value, bool):
            return None
        try:
            return float(value)
        except (TypeError, ValueError):
            return None

    @property
    def duration(self) -> Optional[int]:
        """Evaluation time in milliseconds for a finished trial."""
        if self.is_finished and self.book_time is not None and self.refresh_time is not None:
            return self.refresh_time - self.book_time
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Convert the trial to a dictionary for logging."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TrialRecord":
        return cls(**data)

    def __repr__(self) -> str:
        return (
            f"TrialRecord(tid={self.tid}, "
            f"state={self.state}, "
            f"args={self.args}, "
            f"result={self.result}, "
            f"error={self.error})"
        )
