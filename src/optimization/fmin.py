"""
Top-level entry point for minimizing an objective over a search space.
"""

import logging
from typing import Any, Callable, Optional

from ..core.domain import Domain
from ..core.random_state import RandomState
from ..core.trials import Trials
from .config import FMinConfig
from .engine import FMinIter, ExperimentCallbacks, SearchStrategy

logger = logging.getLogger(__name__)


async def fmin(
    fn: Callable[[Any], Any],
    space: Any,
    algo: SearchStrategy,
    max_evals: Optional[int] = None,
    trials: Optional[Trials] = None,
    rng: Optional[RandomState] = None,
    catch_exceptions: Optional[bool] = None,
    max_queue_len: Optional[int] = None,
    callbacks: Optional[ExperimentCallbacks] = None,
    config: Optional[FMinConfig] = None
) -> Trials:
    """
    Minimize fn over space using the given search strategy.

    Explicit keyword arguments take precedence over the values in config.
    Trials already in a supplied store count against max_evals.

    Args:
        fn: Objective, plain or async, called with each trial's arguments
        space: Search space handed to the strategy through the Domain
        algo: Search strategy, e.g. rand.suggest
        max_evals: Total evaluation budget
        trials: Existing store to extend (a fresh one if None)
        rng: Random source (a RandomState seeded from config.seed if None)
        catch_exceptions: Record objective failures instead of raising them
        max_queue_len: Maximum number of pending proposals
        callbacks: Optional begin/end hooks
        config: Run configuration supplying defaults for the above

    Returns:
        The populated trial store
    """
    if config is None:
        config = FMinConfig()
    else:
        # Configure logging
        logging.getLogger().setLevel(getattr(logging, config.log_level))

    if max_evals is None:
        max_evals = config.max_evals
    if catch_exceptions is None:
        catch_exceptions = config.catch_exceptions
    if max_queue_len is None:
        max_queue_len = config.max_queue_len

    if rng is None:
        rng = RandomState(config.seed)
    if trials is None:
        trials = Trials()

    domain = Domain(fn, space, params={
        "max_evals": max_evals,
        "max_queue_len": max_queue_len,
        "catch_exceptions": catch_exceptions,
    })

    logger.info(f"Starting fmin with max_evals={max_evals}, max_queue_len={max_queue_len}, "
                f"{len(trials)} existing trials")

    rval = FMinIter(
        algo,
        domain,
        trials,
        rng=rng,
        catch_exceptions=catch_exceptions,
        max_queue_len=max_queue_len,
        max_evals=max_evals,
        callbacks=callbacks
    )
    await rval.exhaust()
    return trials
