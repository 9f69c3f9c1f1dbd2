"""Permutation engine — Builder for validation, observed statistic, and dispatch.

The :class:`PermutationEngine` centralises everything that happens
*before* a reference distribution is generated:

1. **Input checks** — the statistic must be callable; the dataset is
   already validated by :class:`~permutation_engine.dataset.Dataset`.
2. **Configuration resolution** — enumeration ceiling and worker count
   from the call, else from :mod:`permutation_engine._config`.
3. **Observed statistic** — evaluated once on the original labelling;
   it must be finite.
4. **Classical reference** — the asymptotic p-value for the same data.

:meth:`PermutationEngine.run` then builds the distribution with the
exact enumerator or the Monte Carlo sampler and packages every p-value
into a :class:`~permutation_engine._results.PermutationTestResult`.
"""

from __future__ import annotations

import logging
import math
import warnings
from typing import Any

import numpy as np

from ._config import get_max_enumeration, get_n_jobs
from ._evaluate import evaluate_statistic
from ._results import PermutationTestResult
from ._typing import RandomState
from .dataset import TWO_SAMPLE, Dataset
from .enumeration import check_feasible, exact_distribution, exact_size
from .exceptions import ComputeInfeasible, InputError
from .pvalues import (
    check_tail,
    classical_p_value,
    clopper_pearson_interval,
    compute_p_value,
    exceedance_count,
    p_value_lower,
    p_value_two_tailed_abs,
    p_value_two_tailed_double,
    p_value_upper,
)
from .sampling import monte_carlo_distribution
from .statistics import StatisticFunction, statistic_name

logger = logging.getLogger(__name__)

METHODS = ("exact", "monte_carlo")


class PermutationEngine:
    """Builder that validates inputs and holds the observed statistic.

    Construct an engine, then call :meth:`run` (or the lower-level
    :meth:`exact_distribution` / :meth:`monte_carlo_distribution`).
    The engine is immutable after construction and can run any number
    of tests against the same dataset.

    Attributes:
        dataset: The dataset under test.
        statistic: The caller-supplied statistic.
        statistic_name: Display name of the statistic.
        observed: Statistic on the original labelling.
        classical_p_value: Asymptotic two-sided p-value (may be ``nan``).
        max_enumeration: Active exact-enumeration ceiling.
        n_jobs: Active worker count.

    Raises:
        InputError: If *statistic* is not callable, raises on the
            original dataset, or returns a non-finite value.
    """

    def __init__(
        self,
        dataset: Dataset,
        statistic: StatisticFunction,
        *,
        max_enumeration: int | None = None,
        n_jobs: int | None = None,
    ) -> None:
        if not isinstance(dataset, Dataset):
            raise InputError(
                f"dataset must be a Dataset, got {type(dataset).__name__}. "
                f"Build one with Dataset.two_sample(), Dataset.regression() "
                f"or Dataset.from_frame()."
            )
        if not callable(statistic):
            raise InputError(
                f"statistic must be callable as statistic(dataset), "
                f"got {type(statistic).__name__}."
            )

        self.dataset: Dataset = dataset
        self.statistic: StatisticFunction = statistic
        self.statistic_name: str = statistic_name(statistic)

        # ---- Configuration ----------------------------------------
        self.max_enumeration: int = (
            max_enumeration if max_enumeration is not None else get_max_enumeration()
        )
        self.n_jobs: int = n_jobs if n_jobs is not None else get_n_jobs()

        # ---- Observed statistic -----------------------------------
        self.observed: float = evaluate_statistic(statistic, dataset)
        if not math.isfinite(self.observed):
            raise InputError(
                f"Statistic '{self.statistic_name}' returned {self.observed} "
                f"on the observed data; a finite value is required."
            )

        # ---- Classical reference ----------------------------------
        self.classical_p_value: float = classical_p_value(dataset)

        logger.debug(
            "PermutationEngine ready: kind=%s N=%d statistic=%s observed=%.6g",
            dataset.kind,
            len(dataset),
            self.statistic_name,
            self.observed,
        )

    # ---- Sizing ---------------------------------------------------

    @property
    def exact_size(self) -> int:
        """Label assignments an exact run would evaluate.

        Raises:
            InputError: For an invalid partition (``k <= 0`` or ``k >= N``).
        """
        return exact_size(self.dataset)

    @property
    def exact_feasible(self) -> bool:
        """Whether an exact run fits under :attr:`max_enumeration`."""
        try:
            check_feasible(self.dataset, self.max_enumeration)
        except (InputError, ComputeInfeasible):
            return False
        return True

    # ---- Distributions --------------------------------------------

    def exact_distribution(self) -> np.ndarray:
        """Statistic over every label assignment, in enumeration order."""
        return exact_distribution(
            self.dataset,
            self.statistic,
            max_enumeration=self.max_enumeration,
            n_jobs=self.n_jobs,
        )

    def monte_carlo_distribution(
        self,
        n_samples: int,
        random_state: RandomState = None,
    ) -> np.ndarray:
        """Statistic over *n_samples* random shuffles, in draw order."""
        return monte_carlo_distribution(
            self.dataset,
            self.statistic,
            n_samples,
            random_state=random_state,
            n_jobs=self.n_jobs,
        )

    # ---- Full test ------------------------------------------------

    def run(
        self,
        method: str,
        *,
        tail: str,
        n_samples: int | None = None,
        random_state: RandomState = None,
        confidence_level: float = 0.95,
    ) -> PermutationTestResult:
        """Build the reference distribution and compute p-values.

        Args:
            method: ``"exact"`` (every label assignment) or
                ``"monte_carlo"`` (*n_samples* random full shuffles).
            tail: ``"upper"``, ``"lower"``, ``"double"`` or ``"both"``.
                Required; see :mod:`permutation_engine.pvalues`.
            n_samples: Number of Monte Carlo draws.  Required for
                ``"monte_carlo"``; ignored (with a warning) for
                ``"exact"``.
            random_state: Seed or generator for ``"monte_carlo"``.
            confidence_level: Level of the Clopper–Pearson interval
                attached to Monte Carlo p-values.

        Returns:
            A :class:`PermutationTestResult`.

        Raises:
            InputError: Unknown method/tail, missing *n_samples*,
                invalid partition, or the statistic raised.
            ComputeInfeasible: Exact run above the ceiling.
        """
        if method not in METHODS:
            raise InputError(f"Unknown method {method!r}. Choose from: {list(METHODS)}")
        check_tail(tail)

        if method == "exact":
            if n_samples is not None:
                warnings.warn(
                    "n_samples is ignored for method='exact'; every label "
                    "assignment is enumerated.",
                    UserWarning,
                    stacklevel=2,
                )
            distribution = self.exact_distribution()
            seed: Any = None
        else:
            if n_samples is None:
                raise InputError("method='monte_carlo' requires n_samples.")
            self._warn_if_exact_is_cheaper(n_samples)
            distribution = self.monte_carlo_distribution(n_samples, random_state)
            seed = random_state

        n_bad = int(np.count_nonzero(~np.isfinite(distribution)))
        if n_bad:
            warnings.warn(
                f"{n_bad} of {len(distribution)} permuted statistics are not "
                f"finite; they never count as extreme.",
                UserWarning,
                stacklevel=2,
            )

        return self._package(method, tail, distribution, seed, confidence_level)

    # ---- Internals ------------------------------------------------

    def _warn_if_exact_is_cheaper(self, n_samples: int) -> None:
        if self.exact_feasible and n_samples >= self.exact_size:
            warnings.warn(
                f"n_samples={n_samples:,} is at least the {self.exact_size:,} "
                f"distinct label assignments; method='exact' gives the exact "
                f"p-value at no greater cost.",
                UserWarning,
                stacklevel=3,
            )

    def _package(
        self,
        method: str,
        tail: str,
        distribution: np.ndarray,
        seed: Any,
        confidence_level: float,
    ) -> PermutationTestResult:
        obs = self.observed
        count = exceedance_count(obs, distribution, tail)
        n = len(distribution)

        # Exact p-values carry no sampling error.
        interval: tuple[float, float] | None = None
        if method == "monte_carlo":
            lo, hi = clopper_pearson_interval(count, n, confidence_level)
            if tail == "double":
                lo, hi = min(1.0, 2.0 * lo), min(1.0, 2.0 * hi)
            interval = (lo, hi)

        ds = self.dataset
        two_sample = ds.kind == TWO_SAMPLE
        result = PermutationTestResult(
            method=method,
            tail=tail,
            statistic_name=self.statistic_name,
            observed=obs,
            distribution=distribution,
            p_value=compute_p_value(obs, distribution, tail),
            p_value_upper=p_value_upper(obs, distribution),
            p_value_lower=p_value_lower(obs, distribution),
            p_value_two_tailed_double=p_value_two_tailed_double(obs, distribution),
            p_value_two_tailed_abs=p_value_two_tailed_abs(obs, distribution),
            exceedance_count=count,
            confidence_interval=interval,
            confidence_level=confidence_level,
            classical_p_value=self.classical_p_value,
            random_state=seed,
            dataset_kind=ds.kind,
            n_records=len(ds),
            group_size=ds.group_size if two_sample else None,
            levels=ds.levels,
            response_name=ds.response_name,
            predictor_name=ds.predictor_name,
            dataset=ds,
        )
        logger.debug(
            "Permutation test done: method=%s tail=%s n=%d p=%.6g",
            method,
            tail,
            n,
            result.p_value,
        )
        return result
