"""
Random search strategy.

Draws every proposal independently from the domain's search space, so it never
runs out of proposals on its own.
"""

import logging
from typing import List

import numpy as np

from ..core.domain import Domain
from ..core.trial import TrialRecord
from ..core.trials import Trials
from .space import sample

logger = logging.getLogger(__name__)


def suggest(new_ids: List[int], domain: Domain, trials: Trials, seed: int) -> List[TrialRecord]:
    """
    Propose one random point per id.

    Args:
        new_ids: Identifiers allocated for this batch
        domain: Domain whose space is sampled
        trials: Trial store (used to build the records)
        seed: Seed for this call's generator

    Returns:
        One NEW record per id
    """
    rng = np.random.default_rng(seed)
    args_list = [sample(domain.space, rng) for _ in new_ids]
    logger.debug(f"Random search proposed {len(args_list)} trials (seed={seed})")

    docs = trials.new_trial_docs(new_ids, args_list)
    for doc in docs:
        doc.metadata["seed"] = seed
    return docs
