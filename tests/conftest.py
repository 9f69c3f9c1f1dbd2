"""Shared fixtures for the permutation_engine test suite."""

from __future__ import annotations

import os

import numpy as np
import pytest

import permutation_engine._config as _cfg
from permutation_engine import Dataset

# Ant colony counts: four field sites and six forest sites.
FIELD = [12, 9, 12, 10]
FOREST = [9, 6, 4, 6, 7, 10]


@pytest.fixture(autouse=True)
def _reset_config():
    """Isolate every test from configuration overrides."""
    _cfg._max_enumeration_override = None
    _cfg._n_jobs_override = None
    os.environ.pop("PERMUTATION_ENGINE_MAX_ENUMERATION", None)
    os.environ.pop("PERMUTATION_ENGINE_N_JOBS", None)
    yield
    _cfg._max_enumeration_override = None
    _cfg._n_jobs_override = None
    os.environ.pop("PERMUTATION_ENGINE_MAX_ENUMERATION", None)
    os.environ.pop("PERMUTATION_ENGINE_N_JOBS", None)


@pytest.fixture()
def ants() -> Dataset:
    return Dataset.two_sample(
        FIELD,
        FOREST,
        labels=("field", "forest"),
        response_name="colonies",
        predictor_name="place",
    )


@pytest.fixture()
def small_regression() -> Dataset:
    """Six points with a clear positive trend."""
    x = np.array([1.0, 2.0, 3.0, 4.0, 5.0, 6.0])
    y = np.array([2.1, 2.9, 4.2, 4.8, 6.1, 7.2])
    return Dataset.regression(y, x, response_name="y", predictor_name="x")
