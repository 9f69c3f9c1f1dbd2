"""Sizing Monte Carlo permutation tests.

A Monte Carlo p-value ``p̂ = b / M`` is a binomial proportion with
standard error ``√(p(1 − p) / M)``.  Its coefficient of variation is
therefore::

    cv = SE / p = √((1 − p) / (p · M))

Solving for *M* gives the planner formula::

    M ≈ (1 − p) / (p · cv²)

e.g. ``p = 0.05`` estimated to within a 5% coefficient of variation
needs ``M ≈ 0.95 / (0.05 · 0.0025) = 7600`` draws.  The binomial
approximation is most useful for small *p*, where the count of
exceedances is what limits precision.
"""

from __future__ import annotations

import math

from scipy import stats as _sp_stats

from .exceptions import InputError


def _check_p(p: float) -> None:
    if not 0.0 < p < 1.0:
        raise InputError(f"p must lie strictly between 0 and 1, got {p}.")


def required_sample_count(p: float, cv: float) -> float:
    """Monte Carlo draws needed to estimate *p* with coefficient of variation *cv*.

    Args:
        p: Anticipated p-value (``0 < p < 1``).
        cv: Target coefficient of variation of the estimate (``> 0``).

    Returns:
        ``(1 − p) / (p · cv²)``.  Round up before using it as a count.

    Raises:
        InputError: For out-of-range arguments.
    """
    _check_p(p)
    if not cv > 0.0:
        raise InputError(f"cv must be positive, got {cv}.")
    return (1.0 - p) / (p * cv**2)


def monte_carlo_standard_error(p: float, n_samples: int) -> float:
    """Binomial standard error ``√(p(1 − p) / M)`` of a Monte Carlo p-value."""
    if n_samples < 1:
        raise InputError(f"n_samples must be positive, got {n_samples}.")
    if not 0.0 <= p <= 1.0:
        raise InputError(f"p must lie in [0, 1], got {p}.")
    return math.sqrt(p * (1.0 - p) / n_samples)


def monte_carlo_cv(p: float, n_samples: int) -> float:
    """Coefficient of variation ``SE / p`` of a Monte Carlo p-value."""
    _check_p(p)
    return monte_carlo_standard_error(p, n_samples) / p


def recommend_n_samples(
    p_hat: float,
    threshold: float,
    confidence: float = 0.95,
) -> int:
    """Smallest *M* whose interval around *p_hat* no longer straddles *threshold*.

    Uses the normal approximation to the binomial half-width,
    ``z_{1-α/2} √(p̂(1 − p̂) / M)``, and solves for *M* such that the
    half-width is at most ``|p_hat − threshold|``.

    The result is rounded up and clamped to ``[100, 10_000_000]``.
    """
    gap = abs(p_hat - threshold)
    if gap < 1e-12:
        return 10_000_000  # effectively tied
    z = _sp_stats.norm.ppf(1 - (1 - confidence) / 2)
    m_min = math.ceil((z**2) * p_hat * (1 - p_hat) / (gap**2))
    return max(100, min(m_min, 10_000_000))
