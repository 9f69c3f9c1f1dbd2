"""Test statistics for permutation tests.

The engine treats a statistic as an opaque capability: any callable
mapping a :class:`~permutation_engine.dataset.Dataset` to a single real
number satisfies :class:`StatisticFunction`.  Statistics are passed
explicitly to each call; there is no global registry.

Stock statistics
----------------
Two-sample (grouped) data:

* :func:`difference_of_means` — ``mean(first) − mean(second)``.
* :func:`difference_of_medians` — ``median(first) − median(second)``.
* :func:`welch_t_statistic` — Welch's unequal-variance *t*
  (``scipy.stats.ttest_ind(equal_var=False)``).

Regression data:

* :func:`regression_slope` — OLS slope of response on covariate.
* :func:`pearson_correlation` — Pearson's *r*.

Each stock statistic raises :class:`ValueError` when it is undefined
for the data it is handed (an empty group, a constant covariate); the
engine turns that into an :class:`~permutation_engine.exceptions.InputError`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

import numpy as np
from scipy import stats as _sp_stats

if TYPE_CHECKING:
    from .dataset import Dataset


@runtime_checkable
class StatisticFunction(Protocol):
    """A pure function ``(Dataset) -> float``.

    Implementations must not mutate the dataset and must return the
    same value for the same labelling.
    """

    def __call__(self, dataset: Dataset) -> float: ...


def statistic_name(statistic: StatisticFunction) -> str:
    """Best-effort display name for *statistic*."""
    name = getattr(statistic, "__name__", None)
    if name is None:
        name = getattr(type(statistic), "__name__", "statistic")
    return str(name)


def _two_groups(dataset: Dataset) -> tuple[np.ndarray, np.ndarray]:
    if dataset.groups is None:
        raise ValueError("A two-sample statistic needs a grouped dataset.")
    first = dataset.values_for(dataset.levels[0])
    second = dataset.values_for(dataset.levels[1])
    if len(first) == 0 or len(second) == 0:
        raise ValueError("Both groups must contain at least one observation.")
    return first, second


def _paired(dataset: Dataset) -> tuple[np.ndarray, np.ndarray]:
    if dataset.covariate is None:
        raise ValueError("A regression statistic needs a covariate.")
    if len(dataset) < 2:
        raise ValueError("At least two observations are needed.")
    return dataset.covariate, dataset.response


# ------------------------------------------------------------------ #
# Two-sample statistics
# ------------------------------------------------------------------ #


def difference_of_means(dataset: Dataset) -> float:
    """Mean of the first level minus mean of the second level."""
    first, second = _two_groups(dataset)
    return float(np.mean(first) - np.mean(second))


def difference_of_medians(dataset: Dataset) -> float:
    """Median of the first level minus median of the second level."""
    first, second = _two_groups(dataset)
    return float(np.median(first) - np.median(second))


def welch_t_statistic(dataset: Dataset) -> float:
    """Welch's two-sample *t* statistic (first level minus second).

    Undefined when either group has fewer than two observations or
    both groups have zero variance.
    """
    first, second = _two_groups(dataset)
    if len(first) < 2 or len(second) < 2:
        raise ValueError("Welch's t needs at least two observations per group.")
    if np.var(first) == 0 and np.var(second) == 0:
        raise ValueError("Welch's t is undefined when both groups are constant.")
    return float(_sp_stats.ttest_ind(first, second, equal_var=False).statistic)


# ------------------------------------------------------------------ #
# Regression statistics
# ------------------------------------------------------------------ #


def regression_slope(dataset: Dataset) -> float:
    """OLS slope of the response on the covariate (with intercept).

    Computed in closed form, ``Σ(x − x̄)(y − ȳ) / Σ(x − x̄)²``.
    """
    x, y = _paired(dataset)
    x_c = x - x.mean()
    sxx = float(x_c @ x_c)
    if sxx == 0.0:
        raise ValueError("The covariate is constant; the slope is undefined.")
    return float(x_c @ (y - y.mean())) / sxx


def pearson_correlation(dataset: Dataset) -> float:
    """Pearson correlation between covariate and response."""
    x, y = _paired(dataset)
    if np.ptp(x) == 0 or np.ptp(y) == 0:
        raise ValueError("Correlation is undefined for a constant variable.")
    return float(np.corrcoef(x, y)[0, 1])
