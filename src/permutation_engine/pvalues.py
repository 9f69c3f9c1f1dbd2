"""P-value calculation for permutation tests.

Given the observed statistic ``obs`` and a permutation distribution
``D`` of length *n*:

* :func:`p_value_upper` — ``#{d >= obs} / n``
* :func:`p_value_lower` — ``#{d <= obs} / n``
* :func:`p_value_two_tailed_double` — ``min(1, 2 · p_value_upper)``
* :func:`p_value_two_tailed_abs` — ``#{|d| >= |obs|} / n``

Two two-tailed conventions
--------------------------
*Doubling* the upper tail assumes the null distribution is symmetric
about zero.  *Both-tails counting* compares magnitudes and makes no
symmetry assumption.  On a skewed distribution the two disagree, so
neither is a default: :func:`compute_p_value` requires the caller to
name a tail (``"upper"``, ``"lower"``, ``"double"`` or ``"both"``).

Note that doubling uses the *upper* tail as given.  When the observed
statistic sits in the lower tail the doubled value saturates at 1.0;
callers expecting a negative effect should orient the statistic
accordingly.

Monte Carlo uncertainty
-----------------------
A Monte Carlo p-value is a binomial proportion ``b / B``.  Its exact
(Clopper–Pearson) confidence interval uses beta quantiles::

    lo = Beta(α/2; b, B − b + 1)        (0 when b = 0)
    hi = Beta(1 − α/2; b + 1, B − b)    (1 when b = B)

:func:`phipson_smyth` gives the ``(b + 1) / (B + 1)`` estimate, which
counts the observed labelling as one member of the reference set and
so can never be zero.

Classical (asymptotic) p-values
-------------------------------
For comparison, :func:`classical_p_value` computes the textbook
answer: Welch's *t*-test (scipy) for two-sample data, and the OLS
slope's *t*-test (statsmodels) for regression data.

Reference:
    Phipson, B. & Smyth, G. K. (2010). Permutation p-values should
    never be zero: calculating exact p-values when permutations are
    randomly drawn. *Statistical Applications in Genetics and Molecular
    Biology*, 9(1), Article 39.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence

import numpy as np
import statsmodels.api as sm
from scipy import stats as _sp_stats

from .dataset import TWO_SAMPLE, Dataset
from .exceptions import InputError

TAILS = ("upper", "lower", "double", "both")


def _as_distribution(distribution: Sequence[float] | np.ndarray) -> np.ndarray:
    dist = np.asarray(distribution, dtype=float)
    if dist.ndim != 1:
        raise InputError(
            f"Permutation distribution must be one-dimensional, got shape {dist.shape}."
        )
    if dist.size == 0:
        raise InputError("Permutation distribution is empty.")
    return dist


def count_upper(observed: float, distribution: Sequence[float] | np.ndarray) -> int:
    """``#{d >= observed}``."""
    return int(np.count_nonzero(_as_distribution(distribution) >= observed))


def count_lower(observed: float, distribution: Sequence[float] | np.ndarray) -> int:
    """``#{d <= observed}``."""
    return int(np.count_nonzero(_as_distribution(distribution) <= observed))


def count_abs(observed: float, distribution: Sequence[float] | np.ndarray) -> int:
    """``#{|d| >= |observed|}``."""
    dist = _as_distribution(distribution)
    return int(np.count_nonzero(np.abs(dist) >= abs(observed)))


def p_value_upper(observed: float, distribution: Sequence[float] | np.ndarray) -> float:
    """One-tailed (upper) p-value: ``#{d >= obs} / n``."""
    return count_upper(observed, distribution) / len(distribution)


def p_value_lower(observed: float, distribution: Sequence[float] | np.ndarray) -> float:
    """One-tailed (lower) p-value: ``#{d <= obs} / n``."""
    return count_lower(observed, distribution) / len(distribution)


def p_value_two_tailed_double(
    observed: float, distribution: Sequence[float] | np.ndarray
) -> float:
    """Two-tailed p-value by doubling the upper tail, clipped at 1.0.

    Assumes the null distribution is symmetric.
    """
    return min(1.0, 2.0 * p_value_upper(observed, distribution))


def p_value_two_tailed_abs(
    observed: float, distribution: Sequence[float] | np.ndarray
) -> float:
    """Two-tailed p-value by counting both tails: ``#{|d| >= |obs|} / n``."""
    return count_abs(observed, distribution) / len(distribution)


_TAIL_FUNCTIONS: dict[str, Callable[[float, np.ndarray], float]] = {
    "upper": p_value_upper,
    "lower": p_value_lower,
    "double": p_value_two_tailed_double,
    "both": p_value_two_tailed_abs,
}

_TAIL_COUNTS: dict[str, Callable[[float, np.ndarray], int]] = {
    "upper": count_upper,
    "lower": count_lower,
    "double": count_upper,
    "both": count_abs,
}


def check_tail(tail: str) -> str:
    """Validate a tail name.

    Raises:
        InputError: If *tail* is not one of :data:`TAILS`.
    """
    if tail not in _TAIL_FUNCTIONS:
        raise InputError(f"Unknown tail {tail!r}. Choose from: {list(TAILS)}")
    return tail


def compute_p_value(
    observed: float,
    distribution: Sequence[float] | np.ndarray,
    tail: str,
) -> float:
    """Dispatch to the p-value for an explicitly named *tail*.

    Args:
        observed: Observed statistic.
        distribution: Permutation distribution.
        tail: ``"upper"``, ``"lower"``, ``"double"`` (two-tailed by
            doubling) or ``"both"`` (two-tailed by both-tails counting).

    Raises:
        InputError: Unknown tail or empty distribution.
    """
    return _TAIL_FUNCTIONS[check_tail(tail)](observed, distribution)


def exceedance_count(
    observed: float,
    distribution: Sequence[float] | np.ndarray,
    tail: str,
) -> int:
    """Number of permuted statistics counted toward *tail*.

    For ``"double"`` this is the upper-tail count (before doubling).
    """
    return _TAIL_COUNTS[check_tail(tail)](observed, distribution)


def phipson_smyth(count: int, n: int) -> float:
    """Bias-corrected Monte Carlo p-value ``(b + 1) / (B + 1)``."""
    if n < 1:
        raise InputError("n must be positive.")
    return (count + 1) / (n + 1)


def clopper_pearson_interval(
    count: int,
    n: int,
    confidence: float = 0.95,
) -> tuple[float, float]:
    """Exact binomial confidence interval for the proportion ``count / n``.

    Args:
        count: Number of successes *b* (``0 <= b <= n``).
        n: Number of trials *B*.
        confidence: Two-sided confidence level in ``(0, 1)``.

    Returns:
        ``(lower, upper)`` bounds.

    Raises:
        InputError: For out-of-range arguments.
    """
    if n < 1 or not 0 <= count <= n:
        raise InputError(f"Need 0 <= count <= n and n >= 1, got count={count}, n={n}.")
    if not 0.0 < confidence < 1.0:
        raise InputError(f"confidence must lie in (0, 1), got {confidence}.")
    alpha = 1.0 - confidence
    lo = 0.0 if count == 0 else float(_sp_stats.beta.ppf(alpha / 2, count, n - count + 1))
    hi = 1.0 if count == n else float(_sp_stats.beta.ppf(1 - alpha / 2, count + 1, n - count))
    return lo, hi


def classical_p_value(dataset: Dataset) -> float:
    """Two-sided asymptotic p-value for comparison with the permutation test.

    * Two-sample data — Welch's unequal-variance *t*-test.
    * Regression data — *t*-test on the OLS slope (intercept included).

    Returns ``nan`` when the classical test is undefined for the data
    (for example a group with a single observation).
    """
    if dataset.kind == TWO_SAMPLE:
        first = dataset.values_for(dataset.levels[0])
        second = dataset.values_for(dataset.levels[1])
        if len(first) < 2 or len(second) < 2:
            return float("nan")
        return float(_sp_stats.ttest_ind(first, second, equal_var=False).pvalue)

    if len(dataset) < 3 or np.ptp(dataset.covariate) == 0:
        return float("nan")
    X_sm = sm.add_constant(dataset.covariate)
    sm_model = sm.OLS(dataset.response, X_sm).fit()
    return float(sm_model.pvalues[1])


def format_p_value(
    p: float,
    precision: int = 3,
    thresholds: tuple[float, float, float] = (0.05, 0.01, 0.001),
) -> str:
    """Format *p* with a significance marker, e.g. ``"0.012 (*)"``.

    Markers are ``(***)``, ``(**)``, ``(*)`` and ``(ns)`` for the three
    thresholds in *thresholds* (loosest first).
    """
    if p != p:  # nan check
        return "N/A"
    one, two, three = thresholds
    val = f"{np.round(p, precision):.{precision}f}"
    if p < three:
        return f"{val} (***)"
    if p < two:
        return f"{val} (**)"
    if p < one:
        return f"{val} (*)"
    return f"{val} (ns)"
