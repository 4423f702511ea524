"""
Trial logger for tracking an optimization run on disk.

This module writes one JSON file per finished trial plus a run summary, so a
run can be inspected after the fact:
- Every trial's arguments, outcome and timings
- Final state counts and best trial

Logs are organized by run for easy analysis.
"""

import json
import logging
from pathlib import Path
from typing import Dict, Any, Optional
from datetime import datetime

from ..core.trial import TrialRecord
from ..core.trials import Trials
from ..optimization.engine import ExperimentCallbacks


logger = logging.getLogger(__name__)


class TrialLogger:
    """
    Detailed logger for an optimization run.

    Records every finished trial as it completes. Use as_callbacks() to plug
    it into fmin().
    """

    def __init__(self, output_dir: Path, run_id: Optional[str] = None):
        """
        Initialize the trial logger.

        Args:
            output_dir: Base output directory
            run_id: Run identifier (used for the subdirectory name, defaults to a timestamp)
        """
        self.run_id = run_id or datetime.now().strftime('%Y%m%d_%H%M%S')
        self.output_dir = Path(output_dir) / f"run_{self.run_id}"
        self.output_dir.mkdir(parents=True, exist_ok=True)
        self.n_logged = 0

        logger.info(f"TrialLogger initialized for run {self.run_id} at {self.output_dir}")

    def log_trial(self, index: int, trial: TrialRecord) -> None:
        """
        Log a finished trial.

        Args:
            index: Position of the trial in the store
            trial: Trial to record
        """
        data = {
            "run_id": self.run_id,
            "index": index,
            "timestamp": datetime.now().isoformat(),
            "trial": self._trial_to_dict(trial),
        }

        self._save_json(f"trial_{trial.tid}.json", data)
        self.n_logged += 1
        logger.debug(f"Logged trial {trial.tid} ({trial.state})")

    def log_summary(self, trials: Trials) -> None:
        """
        Log the final state of a run.

        Args:
            trials: Trial store after the run
        """
        best = trials.best_trial
        data = {
            "run_id": self.run_id,
            "phase": "summary",
            "timestamp": datetime.now().isoformat(),
            "statistics": trials.statistics(),
            "best_trial": self._trial_to_dict(best) if best else None,
        }

        self._save_json("run_summary.json", data)
        logger.info(f"Logged run summary: {len(trials)} trials")

    def as_callbacks(self) -> ExperimentCallbacks:
        """Callbacks that record each trial once it finishes. They never request a stop."""
        def on_experiment_end(index: int, trial: TrialRecord) -> bool:
            self.log_trial(index, trial)
            return False

        return ExperimentCallbacks(on_experiment_end=on_experiment_end)

    def _trial_to_dict(self, trial: TrialRecord) -> Dict[str, Any]:
        return {
            "tid": trial.tid,
            "state": trial.state,
            "args": trial.args,
            "result": trial.result,
            "loss": trial.loss,
            "error": trial.error,
            "book_time": trial.book_time,
            "refresh_time": trial.refresh_time,
            "duration_ms": trial.duration,
            "metadata": trial.metadata,
        }

    def _save_json(self, filename: str, data: Dict):
        """
        Save data to a JSON file.

        Args:
            filename: Name of the file
            data: Data to save
        """
        filepath = self.output_dir / filename

        try:
            with open(filepath, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=2, ensure_ascii=False, default=str)
        except (OSError, TypeError, ValueError) as e:
            logger.error(f"Failed to save {filename}: {e}")
