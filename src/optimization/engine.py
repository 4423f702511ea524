"""
Trial-scheduling engine.

This module implements the orchestration loop: it asks a search strategy for
proposals (bounded by a queue length), evaluates pending trials one at a time,
records outcomes on the trial store, and decides when to stop.
"""

import inspect
import logging
from dataclasses import dataclass
from typing import Any, Callable, List, Optional

from ..core.domain import Domain
from ..core.random_state import RandomState
from ..core.trial import TrialRecord, JOB_STATE_NEW
from ..core.trials import Trials

logger = logging.getLogger(__name__)

# Exclusive upper bound of the seed handed to the search strategy
SEED_UPPER_BOUND = 2 ** 31

SearchStrategy = Callable[[List[int], Domain, Trials, int], List[TrialRecord]]
ExperimentCallback = Callable[[int, TrialRecord], Any]


class StrategyContractError(RuntimeError):
    """Raised when a search strategy returns more records than ids it was granted."""


@dataclass
class ExperimentCallbacks:
    """
    Optional hooks called around each trial evaluation.

    Each hook receives the trial's index in the store and the trial itself, and
    may be a plain function or a coroutine function. A truthy return value
    requests a stop; the stop takes effect after the current trial finishes.
    """

    on_experiment_begin: Optional[ExperimentCallback] = None
    on_experiment_end: Optional[ExperimentCallback] = None


async def _call_hook(hook: Optional[ExperimentCallback], index: int, trial: TrialRecord) -> bool:
    if hook is None:
        return False
    rval = hook(index, trial)
    if inspect.isawaitable(rval):
        rval = await rval
    return bool(rval)


def describe_error(exc: BaseException) -> str:
    """Message stored on a trial whose evaluation raised exc."""
    message = str(exc)
    if message:
        return f"{type(exc).__name__}: {message}"
    return type(exc).__name__


class FMinIter:
    """
    Orchestrator for an optimization run.

    Holds the search strategy, domain, trial store and random source, and
    alternates between an enqueue phase (ask the strategy for at most
    max_queue_len pending trials) and a serial evaluation phase. Evaluations
    never overlap, whatever the queue length.

    Example usage:
        ```python
        it = FMinIter(rand.suggest, Domain(objective, space), Trials(),
                      rng=RandomState(42), max_evals=50)
        await it.exhaust()
        ```
    """

    def __init__(
        self,
        algo: SearchStrategy,
        domain: Domain,
        trials: Trials,
        rng: RandomState,
        catch_exceptions: bool = False,
        max_queue_len: int = 1,
        max_evals: Optional[int] = None,
        callbacks: Optional[ExperimentCallbacks] = None
    ):
        """
        Initialize the orchestrator.

        Args:
            algo: Search strategy, (new_ids, domain, trials, seed) -> records
            domain: Objective binding
            trials: Trial store
            rng: Random source used to seed every strategy call
            catch_exceptions: Record evaluation failures and keep going instead of raising
            max_queue_len: Maximum number of trials allowed in state NEW at once
            max_evals: Total evaluation budget for exhaust() (unbounded if None)
            callbacks: Optional begin/end hooks
        """
        if max_queue_len < 1:
            raise ValueError("max_queue_len must be at least 1")

        self.algo = algo
        self.domain = domain
        self.trials = trials
        self.rng = rng
        self.catch_exceptions = catch_exceptions
        self.max_queue_len = max_queue_len
        self.max_evals = max_evals
        self.callbacks = callbacks or ExperimentCallbacks()

        logger.debug(f"Initialized FMinIter with max_queue_len={max_queue_len}, "
                     f"max_evals={max_evals}, catch_exceptions={catch_exceptions}")

    async def serial_evaluate(self, n: int = -1) -> bool:
        """
        Evaluate pending trials one at a time, in store order.

        Walks the whole live record list; records that are not NEW are skipped.
        Every visited record counts against n (a negative n means no limit).

        Args:
            n: Maximum number of records to visit

        Returns:
            True if a callback requested a stop
        """
        stopped = False
        # Index loop over the live list, which may grow while hooks run
        i = 0
        try:
            while i < len(self.trials.dynamic_trials):
                trial = self.trials.dynamic_trials[i]
                if trial.state == JOB_STATE_NEW:
                    if await self._evaluate_trial(i, trial):
                        stopped = True

                n -= 1
                if n == 0 or stopped:
                    break
                i += 1
        finally:
            self.trials.refresh()

        return stopped

    async def _evaluate_trial(self, index: int, trial: TrialRecord) -> bool:
        trial.mark_running()
        stopped = False

        # A failing begin hook is handled like a failing objective
        try:
            stopped = await _call_hook(self.callbacks.on_experiment_begin, index, trial)
            if stopped:
                logger.info(f"Stop requested before trial {trial.tid}, finishing it first")
            result = await self.domain.evaluate(trial.args)
        except Exception as e:
            trial.mark_error(describe_error(e))
            logger.error(f"Trial {trial.tid} failed: {trial.error}")
            if not self.catch_exceptions:
                # serial_evaluate() refreshes the store before this propagates
                raise
        else:
            trial.mark_done(result)
            logger.debug(f"Trial {trial.tid} done: {result}")

        if await _call_hook(self.callbacks.on_experiment_end, index, trial):
            logger.info(f"Stop requested after trial {trial.tid}")
            stopped = True

        return stopped

    def _queue_len(self) -> int:
        return self.trials.count_by_state_unsynced(JOB_STATE_NEW)

    async def run(self, n: int) -> None:
        """
        Queue and evaluate up to n new trials.

        Args:
            n: Number of trials to queue during this run
        """
        n_queued = 0
        stopped = False

        logger.info(f"Starting run for up to {n} trials")

        while n_queued < n:
            qlen = self._queue_len()
            while qlen < self.max_queue_len and n_queued < n:
                n_to_enqueue = min(self.max_queue_len - qlen, n - n_queued)
                new_ids = self.trials.new_trial_ids(n_to_enqueue)
                self.trials.refresh()
                seed = self.rng.randrange(0, SEED_UPPER_BOUND)
                new_trials = self.algo(new_ids, self.domain, self.trials, seed)

                if len(new_trials) > len(new_ids):
                    raise StrategyContractError(
                        f"Search strategy returned {len(new_trials)} trials for {len(new_ids)} ids"
                    )

                if new_trials:
                    self.trials.insert_trial_docs(new_trials)
                    self.trials.refresh()
                    n_queued += len(new_trials)
                    qlen = self._queue_len()
                    logger.debug(f"Queued {len(new_trials)} trials ({n_queued}/{n})")
                else:
                    logger.info("Search strategy is exhausted, stopping")
                    stopped = True
                    break

            if await self.serial_evaluate():
                stopped = True
            if stopped:
                break

        qlen = self._queue_len()
        if qlen:
            logger.warning(f"Exiting run, not waiting for {qlen} jobs.")

    async def exhaust(self) -> "FMinIter":
        """
        Run until the total evaluation budget is used up.

        Returns:
            self
        """
        if self.max_evals is None:
            raise ValueError("exhaust() requires max_evals")
        n_done = len(self.trials)
        await self.run(self.max_evals - n_done)
        self.trials.refresh()

        stats = self.trials.statistics()
        logger.info(f"Run complete: {stats['size']} trials, states={stats['states']}, "
                    f"best_loss={stats['best_loss']}")
        return self
