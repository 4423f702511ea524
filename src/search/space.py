"""
Search-space primitives for the trial scheduler.

A space is any nesting of dicts, lists and tuples whose leaves are either
constants or the distribution nodes defined here. sample() walks the nesting
and draws one value per node.
"""

import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, List

import numpy as np

logger = logging.getLogger(__name__)


class Node:
    """Base class for a sampled hyperparameter."""

    def sample(self, rng: np.random.Generator) -> Any:
        raise NotImplementedError("Subclasses must implement sample()")


@dataclass
class Uniform(Node):
    """Float drawn uniformly from [low, high)."""
    low: float
    high: float

    def __post_init__(self):
        if self.high <= self.low:
            raise ValueError(f"uniform requires low < high, got {self.low}, {self.high}")

    def sample(self, rng: np.random.Generator) -> float:
        return float(rng.uniform(self.low, self.high))


@dataclass
class LogUniform(Node):
    """Float whose logarithm is uniform in [log(low), log(high))."""
    low: float
    high: float

    def __post_init__(self):
        if self.low <= 0 or self.high <= self.low:
            raise ValueError(f"loguniform requires 0 < low < high, got {self.low}, {self.high}")

    def sample(self, rng: np.random.Generator) -> float:
        return float(math.exp(rng.uniform(math.log(self.low), math.log(self.high))))


@dataclass
class QUniform(Node):
    """Uniform float rounded to a multiple of q."""
    low: float
    high: float
    q: float

    def __post_init__(self):
        if self.high <= self.low:
            raise ValueError(f"quniform requires low < high, got {self.low}, {self.high}")
        if self.q <= 0:
            raise ValueError(f"quniform requires q > 0, got {self.q}")

    def sample(self, rng: np.random.Generator) -> float:
        return float(np.round(rng.uniform(self.low, self.high) / self.q) * self.q)


@dataclass
class RandInt(Node):
    """Integer drawn uniformly from [low, high)."""
    low: int
    high: int

    def __post_init__(self):
        if self.high <= self.low:
            raise ValueError(f"randint requires low < high, got {self.low}, {self.high}")

    def sample(self, rng: np.random.Generator) -> int:
        return int(rng.integers(self.low, self.high))


@dataclass
class Normal(Node):
    """Float drawn from a normal distribution."""
    mu: float
    sigma: float

    def __post_init__(self):
        if self.sigma <= 0:
            raise ValueError(f"normal requires sigma > 0, got {self.sigma}")

    def sample(self, rng: np.random.Generator) -> float:
        return float(rng.normal(self.mu, self.sigma))


@dataclass
class Choice(Node):
    """One of a list of options; options may themselves be sub-spaces."""
    options: List[Any]

    def __post_init__(self):
        if not self.options:
            raise ValueError("choice requires at least one option")

    def sample(self, rng: np.random.Generator) -> Any:
        idx = int(rng.integers(0, len(self.options)))
        return sample(self.options[idx], rng)


def sample(space: Any, rng: np.random.Generator) -> Any:
    """
    Draw one point from a space.

    Args:
        space: Node, constant, or dict/list/tuple nesting of them
        rng: numpy random generator

    Returns:
        Same nesting with every node replaced by a sampled value
    """
    if isinstance(space, Node):
        return space.sample(rng)
    if isinstance(space, dict):
        return {key: sample(value, rng) for key, value in space.items()}
    if isinstance(space, list):
        return [sample(value, rng) for value in space]
    if isinstance(space, tuple):
        return tuple(sample(value, rng) for value in space)
    return space


_NODE_TYPES = {
    "uniform": Uniform,
    "loguniform": LogUniform,
    "quniform": QUniform,
    "randint": RandInt,
    "normal": Normal,
    "choice": Choice,
}


def space_from_config(config: Dict[str, Any]) -> Dict[str, Any]:
    """
    Build a space from a config mapping, as loaded from YAML.

    Each entry is either a mapping with a "type" key naming a node
    (uniform, loguniform, quniform, randint, normal, choice) plus that node's
    fields, or a constant.

    Examples:
        >>> space_from_config({"x": {"type": "uniform", "low": -5, "high": 5}})
        {'x': Uniform(low=-5, high=5)}
    """
    space = {}
    for name, spec in config.items():
        if isinstance(spec, dict) and "type" in spec:
            spec = dict(spec)
            node_type = spec.pop("type")
            if node_type not in _NODE_TYPES:
                raise ValueError(f"Unknown space node type for '{name}': {node_type}")
            space[name] = _NODE_TYPES[node_type](**spec)
        else:
            space[name] = spec

    logger.debug(f"Built search space with {len(space)} entries")
    return space
