#!/usr/bin/env python3
"""
Main entry point for minimizing an objective with random search.

This script loads a run configuration and a search space from YAML, imports
the objective function, runs fmin() and logs a summary of the trials.

Usage:
    python run_fmin.py --objective examples.basic_fmin:quadratic --config config/fmin.yaml
    python run_fmin.py --objective mypkg.objectives:loss --max-evals 200 --catch-exceptions
"""

import asyncio
import argparse
import importlib
import logging
import sys
import yaml
from pathlib import Path
from typing import Any, Callable, Dict

# Add src to path
sys.path.insert(0, str(Path(__file__).parent / "src"))

from src.optimization.config import FMinConfig
from src.optimization.fmin import fmin
from src.search import rand, space_from_config
from src.utils.trial_logger import TrialLogger

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(sys.stdout)
    ]
)
logger = logging.getLogger(__name__)


def load_objective(target: str) -> Callable[[Any], Any]:
    """
    Import an objective given as "package.module:function".

    Args:
        target: Import path of the objective

    Returns:
        The objective callable
    """
    if ":" not in target:
        raise ValueError(f"Objective must look like 'module:function', got '{target}'")

    module_name, attr = target.split(":", 1)
    module = importlib.import_module(module_name)
    fn = getattr(module, attr, None)
    if fn is None:
        raise ValueError(f"Module '{module_name}' has no attribute '{attr}'")
    return fn


def load_space(config_path: Path) -> Dict[str, Any]:
    """
    Load the search space from the "space" section of a YAML file.

    Args:
        config_path: Path to the YAML file

    Returns:
        Search space dictionary (empty if the file has no "space" section)
    """
    with open(config_path) as f:
        config = yaml.safe_load(f) or {}

    space_config = config.get("space", {})
    if not space_config:
        logger.warning(f"No 'space' section in {config_path}, objective gets empty arguments")
    return space_from_config(space_config)


def parse_arguments():
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Minimize an objective function with random search",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Run the bundled quadratic example for 50 evaluations
  python run_fmin.py --objective examples.basic_fmin:quadratic --max-evals 50

  # Keep going when the objective raises, and log every trial to disk
  python run_fmin.py --objective mypkg.objectives:loss --catch-exceptions --output-dir outputs/
        """
    )

    parser.add_argument(
        "--objective",
        type=str,
        required=True,
        help="Objective to minimize, as 'module:function'"
    )

    parser.add_argument(
        "--config",
        type=str,
        default="config/fmin.yaml",
        help="Path to run config YAML with 'fmin' and 'space' sections (default: config/fmin.yaml)"
    )

    parser.add_argument(
        "--max-evals",
        type=int,
        default=None,
        help="Total evaluation budget (overrides config)"
    )

    parser.add_argument(
        "--max-queue-len",
        type=int,
        default=None,
        help="Maximum number of pending proposals (overrides config)"
    )

    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Seed for the random source (overrides config)"
    )

    parser.add_argument(
        "--catch-exceptions",
        action="store_true",
        default=False,
        help="Record objective failures on the trial and keep going"
    )

    parser.add_argument(
        "--output-dir",
        type=str,
        default=None,
        help="Write one JSON file per trial and a run summary under this directory"
    )

    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (overrides config)"
    )

    return parser.parse_args()


def build_config(args) -> FMinConfig:
    """Load the run config and apply command-line overrides."""
    config_path = Path(args.config)
    if config_path.exists():
        config = FMinConfig.from_yaml(config_path)
        logger.info(f"Loaded fmin config from: {config_path}")
    else:
        logger.warning(f"Config file not found: {config_path}, using defaults")
        config = FMinConfig()

    overrides = {
        "max_evals": args.max_evals,
        "max_queue_len": args.max_queue_len,
        "seed": args.seed,
        "log_level": args.log_level,
    }
    values = {
        "max_evals": config.max_evals,
        "max_queue_len": config.max_queue_len,
        "catch_exceptions": config.catch_exceptions or args.catch_exceptions,
        "seed": config.seed,
        "log_level": config.log_level,
        "log_trials": config.log_trials or args.output_dir is not None,
    }
    values.update({key: value for key, value in overrides.items() if value is not None})
    return FMinConfig(**values)


async def main():
    """Main entry point."""
    args = parse_arguments()
    config = build_config(args)

    logger.info("=" * 70)
    logger.info("fmin: random search")
    logger.info("=" * 70)
    logger.info(f"Objective: {args.objective}")
    logger.info(f"Max evals: {config.max_evals}")
    logger.info(f"Max queue length: {config.max_queue_len}")
    logger.info(f"Catch exceptions: {config.catch_exceptions}")
    logger.info(f"Seed: {config.seed}")
    logger.info("=" * 70)

    try:
        objective = load_objective(args.objective)
        config_path = Path(args.config)
        space = load_space(config_path) if config_path.exists() else {}

        trial_logger = None
        if config.log_trials:
            trial_logger = TrialLogger(Path(args.output_dir or "outputs"))

        trials = await fmin(
            objective,
            space,
            rand.suggest,
            config=config,
            callbacks=trial_logger.as_callbacks() if trial_logger else None
        )

        if trial_logger:
            trial_logger.log_summary(trials)

        stats = trials.statistics()
        logger.info("Summary:")
        logger.info(f"  Total trials: {stats['size']}")
        for state, count in stats["states"].items():
            logger.info(f"  {state}: {count}")
        best = trials.best_trial
        if best is not None:
            logger.info(f"  Best loss: {best.loss:.6g}")
            logger.info(f"  Best args: {best.args}")

        sys.exit(0)

    except Exception as e:
        logger.error(f"Error: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    asyncio.run(main())
