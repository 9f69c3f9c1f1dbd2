"""One-call entry point for permutation tests.

:func:`permutation_test` wraps :class:`~permutation_engine.engine.PermutationEngine`
for the common case of a single test::

    from permutation_engine import Dataset, difference_of_means, permutation_test

    ants = Dataset.two_sample(
        [12, 9, 12, 10], [9, 6, 4, 6, 7, 10], labels=("field", "forest")
    )
    result = permutation_test(
        ants, difference_of_means, method="exact", tail="both"
    )
    result.p_value            # exact two-tailed p-value over C(10, 4) = 210 splits

Choosing a method
-----------------
``method="exact"`` evaluates every label assignment: ``C(N, k)``
partitions for two-sample data or ``N!`` orderings for regression
data.  It is deterministic and has no sampling error, but is refused
with :class:`~permutation_engine.exceptions.ComputeInfeasible` once the
count passes the configured ceiling.

``method="monte_carlo"`` evaluates ``n_samples`` random full shuffles.
Pass an integer ``random_state`` for a reproducible run.  Use
:func:`~permutation_engine.planning.required_sample_count` to choose
``n_samples`` for a target precision.

Choosing a tail
---------------
``tail`` has no default; see :mod:`permutation_engine.pvalues` for the
difference between ``"double"`` and ``"both"``.
"""

from __future__ import annotations

from ._results import PermutationTestResult
from ._typing import RandomState
from .dataset import Dataset
from .engine import PermutationEngine
from .statistics import StatisticFunction


def permutation_test(
    dataset: Dataset,
    statistic: StatisticFunction,
    *,
    method: str,
    tail: str,
    n_samples: int | None = None,
    random_state: RandomState = None,
    n_jobs: int | None = None,
    max_enumeration: int | None = None,
    confidence_level: float = 0.95,
) -> PermutationTestResult:
    """Run a permutation test of *statistic* on *dataset*.

    Args:
        dataset: Two-sample or regression
            :class:`~permutation_engine.dataset.Dataset`.
        statistic: Callable ``(Dataset) -> float``.
        method: ``"exact"`` or ``"monte_carlo"``.
        tail: ``"upper"``, ``"lower"``, ``"double"`` (two-tailed by
            doubling) or ``"both"`` (two-tailed by both-tails counting).
        n_samples: Monte Carlo draws; required for ``"monte_carlo"``.
        random_state: Seed (``int``) or ``numpy.random.Generator`` for
            ``"monte_carlo"``.  ``None`` draws fresh entropy.
        n_jobs: Worker threads for statistic evaluation (``1`` =
            sequential, ``-1`` = all cores).  Defaults to the configured
            value.  Results do not depend on it.
        max_enumeration: Exact-enumeration ceiling for this call.
            Defaults to the configured value (``10!``).
        confidence_level: Level of the Clopper–Pearson interval attached
            to Monte Carlo p-values.

    Returns:
        A :class:`~permutation_engine._results.PermutationTestResult`
        holding the observed statistic, the full permutation
        distribution, and all p-value variants.

    Raises:
        InputError: Invalid dataset, partition, method, tail or sample
            count, or the statistic raised on a relabelled dataset.
        ComputeInfeasible: ``method="exact"`` above the ceiling.
    """
    engine = PermutationEngine(
        dataset,
        statistic,
        max_enumeration=max_enumeration,
        n_jobs=n_jobs,
    )
    return engine.run(
        method,
        tail=tail,
        n_samples=n_samples,
        random_state=random_state,
        confidence_level=confidence_level,
    )
