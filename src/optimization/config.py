"""
Configuration for the fmin orchestrator.
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional, Union
from pathlib import Path
import yaml

logger = logging.getLogger(__name__)

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def parse_bool(value: Union[str, bool, int]) -> bool:
    """
    Parse a boolean flag from a config or environment value.

    Examples:
        >>> parse_bool("true")
        True
        >>> parse_bool("0")
        False
    """
    if isinstance(value, bool):
        return value

    if isinstance(value, int):
        return value != 0

    value = str(value).strip().lower()
    if value in ("1", "true", "yes", "on"):
        return True
    if value in ("0", "false", "no", "off", ""):
        return False

    logger.warning(f"Invalid boolean value: {value}, falling back to False")
    return False


@dataclass
class FMinConfig:
    """
    Configuration for an optimization run.

    Contains the knobs that control how many trials are evaluated, how many
    proposals may be pending at once, and how evaluation failures are handled.
    """

    # Budget
    max_evals: int = 100
    max_queue_len: int = 1

    # Error handling
    catch_exceptions: bool = False

    # Reproducibility
    seed: Optional[int] = None

    # Logging
    log_level: str = "INFO"
    log_trials: bool = False

    def __post_init__(self):
        """Validate configuration after initialization."""
        if self.max_evals < 0:
            raise ValueError("max_evals must be non-negative")
        if self.max_queue_len < 1:
            raise ValueError("max_queue_len must be at least 1")
        if self.seed is not None and self.seed < 0:
            raise ValueError("seed must be non-negative")
        self.log_level = str(self.log_level).upper()
        if self.log_level not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of {_LOG_LEVELS}, got {self.log_level}")
        if self.max_queue_len > self.max_evals > 0:
            logger.warning(
                f"max_queue_len ({self.max_queue_len}) exceeds max_evals ({self.max_evals}), "
                "at most max_evals trials will ever be queued"
            )

    @classmethod
    def from_yaml(cls, config_path: Path) -> "FMinConfig":
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to YAML configuration file

        Returns:
            FMinConfig instance
        """
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with open(config_path) as f:
            config = yaml.safe_load(f) or {}

        # Extract nested parameters if present
        if "fmin" in config:
            fmin_config = dict(config["fmin"] or {})
        else:
            fmin_config = dict(config)
        fmin_config.pop("space", None)

        if "catch_exceptions" in fmin_config:
            fmin_config["catch_exceptions"] = parse_bool(fmin_config["catch_exceptions"])
        if "log_trials" in fmin_config:
            fmin_config["log_trials"] = parse_bool(fmin_config["log_trials"])

        return cls(**fmin_config)

    @classmethod
    def from_env(cls) -> "FMinConfig":
        """
        Load configuration from environment variables.

        Reads the following environment variables:
        - MAX_EVALS: max_evals
        - MAX_QUEUE_LEN: max_queue_len
        - CATCH_EXCEPTIONS: catch_exceptions ("true"/"false")
        - SEED: seed (unset for a random seed)
        - LOG_LEVEL: log_level

        Returns:
            FMinConfig instance
        """
        seed = os.getenv("SEED")
        return cls(
            max_evals=int(os.getenv("MAX_EVALS", "100")),
            max_queue_len=int(os.getenv("MAX_QUEUE_LEN", "1")),
            catch_exceptions=parse_bool(os.getenv("CATCH_EXCEPTIONS", "false")),
            seed=int(seed) if seed else None,
            log_level=os.getenv("LOG_LEVEL", "INFO"),
        )

    def to_yaml(self, save_path: Path) -> None:
        """
        Save configuration to YAML file.

        Args:
            save_path: Path where to save the configuration
        """
        config_dict = {
            "fmin": {
                "max_evals": self.max_evals,
                "max_queue_len": self.max_queue_len,
                "catch_exceptions": self.catch_exceptions,
                "seed": self.seed,
                "log_level": self.log_level,
                "log_trials": self.log_trials,
            }
        }

        with open(save_path, 'w') as f:
            yaml.dump(config_dict, f, default_flow_style=False)

        logger.info(f"Saved configuration to {save_path}")
