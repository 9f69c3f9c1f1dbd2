"""Exact enumeration of label assignments.

Two-sample data
---------------
Under the null hypothesis the *N* response values are exchangeable
between the two groups, so every way of choosing which *k* records
carry the first label is equally likely.  There are exactly
``C(N, k)`` such partitions.  :func:`iter_combinations` yields each
one once, as a sorted index tuple, in lexicographic order::

    N=4, k=2 → (0,1) (0,2) (0,3) (1,2) (1,3) (2,3)

Because the order is fixed, an exact distribution is reproducible
without any seed.

Regression data
---------------
The exact reference set is every ordering of the response vector
against the fixed covariate: ``N!`` of them.  That grows too fast to
be useful past roughly ten observations (``10! = 3_628_800``,
``11! = 39_916_800``), so the default enumeration ceiling stops there
and larger problems must use Monte Carlo sampling
(:mod:`permutation_engine.sampling`).  Orderings are walked lazily in
lexicographic order and never materialised all at once.

Ceiling
-------
Before any statistic is evaluated, the number of assignments is
compared with the active ceiling
(:func:`~permutation_engine._config.get_max_enumeration`).  If it is
exceeded, :class:`~permutation_engine.exceptions.ComputeInfeasible`
is raised; the enumeration is never silently truncated.
"""

from __future__ import annotations

import itertools
import logging
import math
from collections.abc import Iterator

import numpy as np

from ._config import get_max_enumeration, get_n_jobs
from ._evaluate import chunked, evaluate_chunks
from .dataset import TWO_SAMPLE, Dataset
from .exceptions import ComputeInfeasible, InputError
from .statistics import StatisticFunction

logger = logging.getLogger(__name__)


def _check_partition(n: int, k: int) -> None:
    if n < 1:
        raise InputError("Dataset must contain at least one observation.")
    if not 0 < k < n:
        raise InputError(
            f"Partition size k={k} is invalid for N={n}; need 0 < k < N so "
            f"that both groups are non-empty."
        )


def count_combinations(n: int, k: int) -> int:
    """Number of distinct k-subsets of ``range(n)``, ``C(n, k)``.

    Raises:
        InputError: Unless ``0 < k < n``.
    """
    _check_partition(n, k)
    return math.comb(n, k)


def iter_combinations(n: int, k: int) -> Iterator[tuple[int, ...]]:
    """Yield every k-subset of ``range(n)`` once, in lexicographic order.

    Raises:
        InputError: Unless ``0 < k < n``.
    """
    _check_partition(n, k)
    return itertools.combinations(range(n), k)


def count_orderings(n: int) -> int:
    """Number of orderings of *n* response values, ``n!``."""
    if n < 1:
        raise InputError("Dataset must contain at least one observation.")
    return math.factorial(n)


def iter_orderings(n: int) -> Iterator[tuple[int, ...]]:
    """Yield every permutation of ``range(n)`` in lexicographic order.

    The first item is the identity.  Only feasible for small *n*; see
    the module docstring.
    """
    if n < 1:
        raise InputError("Dataset must contain at least one observation.")
    return itertools.permutations(range(n))


def exact_size(dataset: Dataset) -> int:
    """Number of label assignments an exact test on *dataset* evaluates.

    ``C(N, k)`` for two-sample data, ``N!`` for regression data.
    """
    if dataset.kind == TWO_SAMPLE:
        return count_combinations(len(dataset), dataset.group_size)
    return count_orderings(len(dataset))


def _bounded_size(n: int, k: int | None, cap: int) -> int | None:
    """``C(n, k)`` (or ``n!`` when *k* is ``None``) if it is ``<= cap``, else ``None``.

    Builds the count one factor at a time and stops as soon as *cap* is
    passed, so a large *N* never pays for a huge factorial.
    """
    size = 1
    if k is None:
        for i in range(2, n + 1):
            size *= i
            if size > cap:
                return None
        return size
    k = min(k, n - k)
    for i in range(k):
        # Exact: C(n, i+1) = C(n, i) * (n - i) / (i + 1).
        size = size * (n - i) // (i + 1)
        if size > cap:
            return None
    return size


def check_feasible(dataset: Dataset, max_enumeration: int | None = None) -> int:
    """Return :func:`exact_size` or raise if it exceeds the ceiling.

    Raises:
        InputError: For an invalid partition.
        ComputeInfeasible: If the size exceeds *max_enumeration*
            (default: the configured ceiling).
    """
    ceiling = max_enumeration if max_enumeration is not None else get_max_enumeration()
    n = len(dataset)
    if dataset.kind == TWO_SAMPLE:
        k: int | None = dataset.group_size
        _check_partition(n, k)
    else:
        k = None
    size = _bounded_size(n, k, ceiling)
    if size is None:
        # C(N, k) is cheap to report in full; N! is left uncounted.
        raise ComputeInfeasible(math.comb(n, k) if k is not None else None, ceiling)
    return size


def exact_distribution(
    dataset: Dataset,
    statistic: StatisticFunction,
    *,
    max_enumeration: int | None = None,
    n_jobs: int | None = None,
) -> np.ndarray:
    """Evaluate *statistic* over every label assignment of *dataset*.

    Two-sample datasets are relabelled by moving the first-level labels
    onto each k-subset from :func:`iter_combinations`; regression
    datasets reorder the response by each permutation from
    :func:`iter_orderings`.

    Args:
        dataset: Two-sample or regression dataset.
        statistic: ``(Dataset) -> float``.
        max_enumeration: Ceiling override for this call.
        n_jobs: Worker count override for this call.

    Returns:
        Array of length :func:`exact_size`, in enumeration order.

    Raises:
        InputError: Invalid partition, or the statistic raised.
        ComputeInfeasible: Too many assignments.
    """
    size = check_feasible(dataset, max_enumeration)
    n = len(dataset)
    jobs = n_jobs if n_jobs is not None else get_n_jobs()

    logger.debug(
        "Exact enumeration: kind=%s N=%d assignments=%d", dataset.kind, n, size
    )

    if dataset.kind == TWO_SAMPLE:
        assignments = iter_combinations(n, dataset.group_size)
        relabel = Dataset.with_first_group
    else:
        assignments = iter_orderings(n)
        relabel = Dataset.with_response_order

    return evaluate_chunks(
        dataset, statistic, relabel, chunked(assignments), n_jobs=jobs
    )
