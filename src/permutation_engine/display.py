"""Formatted ASCII table display utilities for permutation test results.

These tables mirror the statsmodels summary style: a header panel
describing the data and the run, then a p-value panel placing every
tail convention next to the classical (asymptotic) p-value.

Seeing both two-tailed conventions side by side makes asymmetry in
the null distribution visible: when ``double`` and ``both`` disagree
noticeably, the distribution is skewed and doubling is not safe.

Plotting is deliberately left to the caller; the result object carries
the full distribution for that.
"""

from __future__ import annotations

import textwrap
from typing import TYPE_CHECKING

import numpy as np

from .planning import recommend_n_samples
from .pvalues import format_p_value

if TYPE_CHECKING:
    from ._results import PermutationTestResult

_WIDTH = 80
_THRESHOLDS = (0.05, 0.01, 0.001)


def _truncate(name: str, max_len: int) -> str:
    """Truncate *name* to *max_len*, appending ``'...'`` if needed."""
    if len(name) <= max_len:
        return name
    return name[: max_len - 3] + "..."


def _wrap(text: str, width: int = _WIDTH, indent: int = 2) -> str:
    """Word-wrap *text*, indenting continuation lines by *indent*."""
    return textwrap.fill(text, width=width, subsequent_indent=" " * indent)


def _title(title: str) -> None:
    print("=" * _WIDTH)
    for line in textwrap.wrap(title, width=_WIDTH - 2):
        print(f"{line:^{_WIDTH}}")
    print("=" * _WIDTH)


def _pair_row(left_label: str, left_value: object, right_label: str, right_value: object) -> None:
    col1, col2 = 40, 38
    left = f"{left_label:<18}{_truncate(str(left_value), col1 - 18):<{col1 - 18}}"
    right = f"{right_label:>{col2 - 13}} {_truncate(str(right_value), 12):>12}"
    print(f"{left}{right}")


def _threshold_straddled(lo: float, hi: float) -> float | None:
    for t in _THRESHOLDS:
        if lo < t < hi:
            return t
    return None


def print_results_table(
    result: PermutationTestResult,
    *,
    title: str = "Permutation Test Results",
    precision: int = 4,
) -> None:
    """Print a permutation test result as a formatted ASCII table.

    Args:
        result: Result returned by
            :func:`~permutation_engine.permutation_test`.
        title: Title for the output table.
        precision: Decimal places for p-values.
    """
    _title(title)

    _pair_row("Response:", result.response_name, "No. Records:", result.n_records)
    if result.levels is not None:
        groups = f"{result.levels[0]} vs {result.levels[1]}"
        _pair_row("Groups:", groups, "First Group Size:", result.group_size)
    else:
        _pair_row("Covariate:", result.predictor_name, "", "")
    _pair_row("Statistic:", result.statistic_name, "Observed:", f"{result.observed:.4f}")
    method = "Exact enumeration" if result.method == "exact" else "Monte Carlo"
    _pair_row("Method:", method, "Assignments:", f"{result.n_permutations:,}")
    if result.method == "monte_carlo":
        seed = result.random_state if result.random_state is not None else "N/A"
        _pair_row("Random State:", seed, "", "")

    print("-" * _WIDTH)
    print(f"{'P-value':<40}{'Value':>20}{'Tail':>20}")
    print("-" * _WIDTH)

    rows = [
        ("One-tailed (upper)", result.p_value_upper, "upper"),
        ("One-tailed (lower)", result.p_value_lower, "lower"),
        ("Two-tailed (doubled upper)", result.p_value_two_tailed_double, "double"),
        ("Two-tailed (both tails)", result.p_value_two_tailed_abs, "both"),
    ]
    for label, p, tail in rows:
        marker = "  <-" if tail == result.tail else ""
        print(f"{label:<40}{format_p_value(p, precision, _THRESHOLDS):>20}{tail:>16}{marker}")
    classical = format_p_value(result.classical_p_value, precision, _THRESHOLDS)
    classical_label = (
        "Classical (Welch t)" if result.levels is not None else "Classical (OLS slope t)"
    )
    print(f"{classical_label:<40}{classical:>20}{'two-sided':>20}")

    # ── Notes ──────────────────────────────────────────────────── #
    notes: list[str] = []
    ci = result.confidence_interval
    if ci is not None:
        lo, hi = ci
        pct = round(result.confidence_level * 100)
        notes.append(
            f"{pct}% Clopper-Pearson interval for the selected p-value: "
            f"[{lo:.{precision}f}, {hi:.{precision}f}]."
        )
        threshold = _threshold_straddled(lo, hi)
        if threshold is not None:
            m = recommend_n_samples(result.p_value, threshold, result.confidence_level)
            notes.append(
                f"The interval straddles {threshold}; consider "
                f"n_samples ≥ {m:,} to resolve it."
            )
    if not np.isclose(result.p_value_two_tailed_double, result.p_value_two_tailed_abs):
        notes.append(
            "The two two-tailed conventions disagree, so the null "
            "distribution is not symmetric about zero."
        )

    if notes:
        print("-" * _WIDTH)
        print("Notes")
        print("-" * _WIDTH)
        for note in notes:
            print(_wrap(f"  [!] {note}", indent=6))

    print("=" * _WIDTH)
    print(
        f"(***) p < {_THRESHOLDS[2]}   (**) p < {_THRESHOLDS[1]}   "
        f"(*) p < {_THRESHOLDS[0]}   (ns) p >= {_THRESHOLDS[0]}"
    )


def print_distribution_summary(
    result: PermutationTestResult,
    *,
    title: str = "Permutation Distribution",
    quantiles: tuple[float, ...] = (0.0, 0.025, 0.25, 0.5, 0.75, 0.975, 1.0),
) -> None:
    """Print moments and quantiles of the permutation distribution.

    A text companion to a histogram: where the observed statistic falls
    relative to the reference distribution.
    """
    dist = np.asarray(result.distribution, dtype=float)
    finite = dist[np.isfinite(dist)]

    _title(title)
    _pair_row("Assignments:", f"{len(dist):,}", "Observed:", f"{result.observed:.4f}")
    if finite.size:
        sd = finite.std(ddof=1) if finite.size > 1 else 0.0
        _pair_row("Mean:", f"{finite.mean():.4f}", "Std. Dev.:", f"{sd:.4f}")
        pctl = 100 * float(np.mean(finite <= result.observed))
        _pair_row(
            "Distinct Values:", len(np.unique(finite)), "Observed Pctl:", f"{pctl:.1f}"
        )
    print("-" * _WIDTH)
    print(f"{'Quantile':<40}{'Value':>40}")
    print("-" * _WIDTH)
    if finite.size:
        for q, v in zip(quantiles, np.quantile(finite, quantiles), strict=True):
            print(f"{q:<40.3f}{v:>40.4f}")
    else:
        print("No finite values.")
    print("=" * _WIDTH)
