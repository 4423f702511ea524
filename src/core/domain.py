"""
Objective binding for the trial scheduler.

A Domain ties the user's objective function to the search-space description
that search strategies sample from.
"""

import inspect
import logging
from typing import Any, Callable, Dict, Optional

logger = logging.getLogger(__name__)


class Domain:
    """
    Binding of an objective function to a search space.

    The objective may be a plain function or a coroutine function. It receives
    a trial's argument payload and returns the result stored on the trial.

    Attributes:
        fn: Objective function
        space: Search-space description (consumed by search strategies)
        params: Extra options passed through from fmin()
    """

    def __init__(self, fn: Callable[[Any], Any], space: Any, params: Optional[Dict[str, Any]] = None):
        if not callable(fn):
            raise ValueError(f"Objective must be callable, got {type(fn).__name__}")
        self.fn = fn
        self.space = space
        self.params = params or {}

    async def evaluate(self, args: Any) -> Any:
        """
        Evaluate the objective on one trial's arguments.

        Args:
            args: Argument payload of the trial

        Returns:
            Whatever the objective returns (awaited if it is awaitable)
        """
        result = self.fn(args)
        if inspect.isawaitable(result):
            result = await result
        return result

    def __repr__(self) -> str:
        name = getattr(self.fn, "__name__", repr(self.fn))
        return f"Domain(fn={name}, space={self.space})"
