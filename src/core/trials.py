"""
Trial store for the scheduler.

This module defines the Trials class, an in-memory append-only store of
TrialRecord objects. It allocates trial identifiers and keeps two views of the
records: a live list that the orchestrator mutates in place, and a synced view
that is only rebuilt on refresh().
"""

import logging
from typing import List, Dict, Any, Optional

import numpy as np

from .trial import (
    TrialRecord,
    JOB_STATES,
    JOB_STATE_NEW,
    JOB_STATE_DONE,
)

logger = logging.getLogger(__name__)


class Trials:
    """
    In-memory store of trial records.

    Identifiers come from a counter that only grows, so ids are unique and
    strictly increasing in allocation order even if allocated ids are never
    inserted.

    Attributes:
        _dynamic_trials: Live ordered list of every inserted record
        _trials: Synced view, rebuilt by refresh() and sorted by tid
    """

    def __init__(self):
        self._dynamic_trials: List[TrialRecord] = []
        self._trials: List[TrialRecord] = []
        self._next_tid = 0
        self._allocated: set = set()
        self._inserted: set = set()

    # Identifier allocation and insertion

    def new_trial_ids(self, n: int) -> List[int]:
        """
        Allocate n fresh trial identifiers.

        Args:
            n: Number of identifiers to allocate

        Returns:
            List of n unique, strictly increasing identifiers
        """
        if n < 0:
            raise ValueError(f"Cannot allocate a negative number of ids: {n}")
        tids = list(range(self._next_tid, self._next_tid + n))
        self._next_tid += n
        self._allocated.update(tids)
        return tids

    def new_trial_docs(self, tids: List[int], args_list: List[Any]) -> List[TrialRecord]:
        """
        Build NEW records for the given ids, for use by search strategies.

        Args:
            tids: Identifiers previously returned by new_trial_ids()
            args_list: One argument payload per identifier

        Returns:
            List of records in state NEW (not yet inserted)
        """
        if len(tids) != len(args_list):
            raise ValueError("tids and args_list must have the same length")
        return [TrialRecord(tid=tid, args=args) for tid, args in zip(tids, args_list)]

    def insert_trial_docs(self, docs: List[TrialRecord]) -> List[int]:
        """
        Append new records to the live list.

        Args:
            docs: Records in state NEW whose ids were allocated by this store

        Returns:
            List of inserted identifiers
        """
        seen = set()
        for doc in docs:
            if doc.state != JOB_STATE_NEW:
                raise ValueError(f"Trial {doc.tid} must be in state new, got {doc.state}")
            if doc.tid not in self._allocated:
                raise ValueError(f"Trial id {doc.tid} was not allocated by this store")
            if doc.tid in self._inserted or doc.tid in seen:
                raise ValueError(f"Trial id {doc.tid} already inserted")
            seen.add(doc.tid)

        for doc in docs:
            self._inserted.add(doc.tid)
            self._dynamic_trials.append(doc)

        logger.debug(f"Inserted {len(docs)} trials, store now holds {len(self._dynamic_trials)}")
        return [doc.tid for doc in docs]

    def insert_trial_doc(self, doc: TrialRecord) -> int:
        return self.insert_trial_docs([doc])[0]

    def refresh(self) -> None:
        """Rebuild the synced view from the live list."""
        self._trials = sorted(self._dynamic_trials, key=lambda t: t.tid)

    def delete_all(self) -> None:
        """Drop every record. Identifier allocation keeps counting up."""
        self._dynamic_trials = []
        self._inserted = set()
        self.refresh()

    # Views

    @property
    def dynamic_trials(self) -> List[TrialRecord]:
        """Live ordered list of all records, in insertion order."""
        return self._dynamic_trials

    @property
    def trials(self) -> List[TrialRecord]:
        """Synced view as of the last refresh()."""
        return self._trials

    @property
    def tids(self) -> List[int]:
        return [t.tid for t in self._trials]

    @property
    def states(self) -> List[str]:
        return [t.state for t in self._trials]

    @property
    def results(self) -> List[Any]:
        return [t.result for t in self._trials]

    def losses(self) -> List[Optional[float]]:
        """Loss of each synced trial, None where unavailable."""
        return [t.loss for t in self._trials]

    @property
    def best_trial(self) -> Optional[TrialRecord]:
        """The DONE trial with the lowest loss, or None."""
        candidates = [t for t in self._trials if t.loss is not None]
        if not candidates:
            return None
        return min(candidates, key=lambda t: t.loss)

    def count_by_state_synced(self, state: str) -> int:
        """Count records in the given state using the synced view."""
        return sum(1 for t in self._trials if t.state == state)

    def count_by_state_unsynced(self, state: str) -> int:
        """Count records in the given state using the live list, without refreshing."""
        return sum(1 for t in self._dynamic_trials if t.state == state)

    def statistics(self) -> Dict[str, Any]:
        """
        Compute store statistics over the synced view.

        Returns:
            Dictionary with the record count, a count per state, and loss stats
        """
        counts = {state: self.count_by_state_synced(state) for state in JOB_STATES}
        losses = [loss for loss in self.losses() if loss is not None]

        return {
            "size": len(self._trials),
            "states": counts,
            "best_loss": float(np.min(losses)) if losses else None,
            "avg_loss": float(np.mean(losses)) if losses else None,
            "worst_loss": float(np.max(losses)) if losses else None,
        }

    def __len__(self) -> int:
        return len(self._trials)

    def __iter__(self):
        return iter(self._trials)

    def __getitem__(self, item):
        return self._trials[item]

    def __repr__(self) -> str:
        stats = self.statistics()
        return (
            f"Trials(size={stats['size']}, "
            f"done={stats['states'][JOB_STATE_DONE]}, "
            f"best_loss={stats['best_loss']})"
        )
