"""
Fixtures for unit tests.
"""

import pytest
from src.core.trial import TrialRecord
from src.core.trials import Trials
from src.core.domain import Domain
from src.search.space import Uniform, RandInt


@pytest.fixture
def sample_trial():
    """Create a sample NEW trial for testing."""
    return TrialRecord(tid=0, args={"x": 1.5, "layers": 3})


@pytest.fixture
def empty_trials():
    """Create an empty trial store."""
    return Trials()


@pytest.fixture
def sample_space():
    """Create a small search space."""
    return {
        "x": Uniform(-5.0, 5.0),
        "layers": RandInt(1, 4),
        "name": "fixed",
    }


@pytest.fixture
def sample_trials():
    """Create a store with five finished trials and one pending one."""
    trials = Trials()
    tids = trials.new_trial_ids(6)
    docs = trials.new_trial_docs(tids, [{"x": float(i)} for i in range(6)])
    trials.insert_trial_docs(docs)

    for i, trial in enumerate(docs[:5]):
        trial.mark_running()
        if i == 3:
            trial.mark_error("ValueError: bad x")
        else:
            trial.mark_done({"loss": (i - 2) ** 2, "status": "ok"})

    trials.refresh()
    return trials


@pytest.fixture
def quadratic_domain(sample_space):
    """Create a domain around a simple quadratic objective."""
    return Domain(lambda args: (args["x"] - 1.0) ** 2, sample_space)
