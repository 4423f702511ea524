"""
Search strategies and search-space primitives.
"""

from . import rand
from .space import (
    Node,
    Uniform,
    LogUniform,
    QUniform,
    RandInt,
    Normal,
    Choice,
    sample,
    space_from_config,
)

__all__ = [
    "rand",
    "Node",
    "Uniform",
    "LogUniform",
    "QUniform",
    "RandInt",
    "Normal",
    "Choice",
    "sample",
    "space_from_config",
]
