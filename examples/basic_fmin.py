#!/usr/bin/env python3
"""
Basic example of using fmin with random search.

This script demonstrates how to:
1. Define a search space and an objective (plain or async)
2. Run fmin with random search
3. Stop early from a callback
4. Keep going when the objective raises
"""

import asyncio
import logging

from src.core.trials import Trials
from src.optimization.engine import ExperimentCallbacks
from src.optimization.fmin import fmin
from src.search import rand, Uniform, Choice

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def quadratic(args):
    """Bowl with its minimum at (1, -2)."""
    return (args["x"] - 1.0) ** 2 + (args["y"] + 2.0) ** 2


async def noisy_model(args):
    """Async objective that fails for one of its configurations."""
    await asyncio.sleep(0)
    if args["optimizer"] == "broken":
        raise RuntimeError("optimizer diverged")
    return {"loss": args["lr"] * 10, "status": "ok"}


async def minimize_quadratic():
    """Example 1: plain random search."""
    space = {"x": Uniform(-5, 5), "y": Uniform(-5, 5)}
    trials = await fmin(quadratic, space, rand.suggest, max_evals=100)

    best = trials.best_trial
    logger.info(f"Best loss {best.loss:.4f} at {best.args}")


async def stop_when_good_enough():
    """Example 2: stop as soon as a trial beats a threshold."""
    def on_experiment_end(index, trial):
        return trial.loss is not None and trial.loss < 0.5

    space = {"x": Uniform(-5, 5), "y": Uniform(-5, 5)}
    trials = await fmin(
        quadratic,
        space,
        rand.suggest,
        max_evals=1000,
        callbacks=ExperimentCallbacks(on_experiment_end=on_experiment_end)
    )
    logger.info(f"Stopped after {len(trials)} trials, best loss {trials.best_trial.loss:.4f}")


async def tolerate_failures():
    """Example 3: record failing trials instead of aborting the run."""
    space = {
        "lr": Uniform(0.001, 0.1),
        "optimizer": Choice(["adam", "sgd", "broken"]),
    }
    trials = Trials()
    await fmin(noisy_model, space, rand.suggest, max_evals=20,
               trials=trials, catch_exceptions=True, max_queue_len=4)

    stats = trials.statistics()
    logger.info(f"States: {stats['states']}")


async def main():
    """Main entry point."""
    await minimize_quadratic()
    await stop_when_good_enough()
    await tolerate_failures()


if __name__ == "__main__":
    asyncio.run(main())
