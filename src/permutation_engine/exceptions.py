"""Exception types raised by the permutation engine.

Both exceptions subclass :class:`ValueError` so that callers which
already guard permutation calls with ``except ValueError`` keep
working.  They are raised synchronously to the immediate caller; the
engine never retries and never returns a partial distribution.
"""

from __future__ import annotations


class InputError(ValueError):
    """The dataset, partition size, or statistic cannot be used.

    Raised for an empty dataset, a partition size outside ``0 < k < N``,
    malformed arrays, unknown ``method``/``tail`` names, and whenever
    the caller-supplied statistic raises on a (relabelled) dataset.  In
    the last case the statistic's own exception is chained as
    ``__cause__``.
    """


class ComputeInfeasible(ValueError):
    """Exact enumeration would exceed the configured ceiling.

    Attributes:
        n_assignments: Number of label assignments the exact test
            would have to evaluate (``C(N, k)`` or ``N!``), or ``None``
            when counting was abandoned once the ceiling was passed.
        ceiling: The active enumeration ceiling.
    """

    def __init__(self, n_assignments: int | None, ceiling: int) -> None:
        self.n_assignments = n_assignments
        self.ceiling = ceiling
        if n_assignments is not None:
            needed = f"{n_assignments:,} label assignments"
        else:
            needed = "more label assignments than that"
        super().__init__(
            f"Exact enumeration is capped at {ceiling:,} label assignments "
            f"but requires {needed}.  Use method='monte_carlo' instead, or "
            f"raise the ceiling with set_max_enumeration()."
        )
