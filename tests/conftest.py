"""Pytest fixtures for the exotab test suite."""

import sys
from pathlib import Path

import numpy as np
import pandas as pd
import pytest

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from exotab.data.dataset import Dataset  # noqa: E402
from exotab.data.sample import sample_dataset  # noqa: E402
from exotab.runtime import EngineGate  # noqa: E402


@pytest.fixture
def sample() -> Dataset:
    """The built-in 15-row table (10 distinct rows)."""
    return sample_dataset()


@pytest.fixture
def gappy() -> Dataset:
    """Small table with nulls in numeric and text columns."""
    return Dataset.from_records([
        {"a": 1.0, "b": "x", "c": 10},
        {"a": None, "b": "y", "c": 20},
        {"a": 3.0, "b": None, "c": 30},
        {"a": None, "b": "x", "c": 40},
        {"a": 5.0, "b": "x", "c": 50},
    ])


@pytest.fixture
def noop_gate() -> EngineGate:
    """Gate whose initialization does nothing, so tests avoid heavy imports."""
    return EngineGate(initializer=lambda: None)


@pytest.fixture
def classification_dataset() -> Dataset:
    """Binary target with two numeric features, a text feature and a few nulls."""
    rng = np.random.RandomState(42)
    n = 120
    f1 = rng.normal(0, 1, n)
    f2 = rng.normal(2, 1, n)
    color = rng.choice(["red", "green", "blue"], n)
    target = np.where(f1 + 0.5 * f2 > 1.0, "yes", "no")
    df = pd.DataFrame({"f1": f1, "f2": f2, "color": color, "label": target})
    df.loc[0:4, "f2"] = np.nan
    return Dataset.from_frame(df)


@pytest.fixture
def regression_dataset() -> Dataset:
    rng = np.random.RandomState(7)
    n = 120
    x1 = rng.uniform(0, 10, n)
    x2 = rng.uniform(-5, 5, n)
    group = rng.choice(["A", "B"], n)
    y = 3.0 * x1 - 2.0 * x2 + rng.normal(0, 0.5, n)
    return Dataset.from_frame(pd.DataFrame({"x1": x1, "x2": x2, "group": group, "y": y}))
