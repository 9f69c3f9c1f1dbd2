"""The immutable dataset a permutation test runs against.

A :class:`Dataset` is an ordered sequence of records.  Every record
carries a numeric response and exactly one of:

* a **group label** — the two-sample case.  Exactly two distinct
  levels must be present; the first level is "group 1" for the exact
  enumerator, and its size is the partition size *k*.
* a **covariate** — the regression case.  The covariate vector stays
  fixed while the response vector is reordered.

Relabelling never changes the multiset of response values, only which
label (or covariate) each value sits against:

* :meth:`Dataset.with_first_group` moves the first-level labels onto a
  chosen index set (exact two-sample enumeration).
* :meth:`Dataset.with_response_order` reorders the response vector
  against the fixed labels or covariate (Monte Carlo shuffles and
  exact regression orderings).

All arrays are copied on construction and marked read-only, so a
dataset cannot change during a run even if the caller mutates the
arrays it passed in.
"""

from __future__ import annotations

import copy
from collections.abc import Hashable, Sequence
from dataclasses import dataclass, field
from typing import Any

import numpy as np
import pandas as pd

from ._compat import DataFrameLike, _select_columns
from ._typing import ArrayLike
from .exceptions import InputError

TWO_SAMPLE = "two_sample"
REGRESSION = "regression"


def _frozen_numeric(values: ArrayLike, name: str) -> np.ndarray:
    """Copy *values* into a read-only, finite, 1-D float array."""
    try:
        arr = np.array(values, dtype=float)
    except (TypeError, ValueError) as exc:
        raise InputError(f"{name} must be numeric.") from exc
    if arr.ndim != 1:
        raise InputError(f"{name} must be one-dimensional, got shape {arr.shape}.")
    if not np.all(np.isfinite(arr)):
        raise InputError(f"{name} contains NaN or infinite values.")
    arr.setflags(write=False)
    return arr


@dataclass(frozen=True, eq=False)
class Dataset:
    """Ordered (response, group-or-covariate) records.

    Prefer the named constructors :meth:`two_sample`,
    :meth:`regression` and :meth:`from_frame` over calling the class
    directly.

    Attributes:
        response: Response values, shape ``(N,)``.
        groups: Group label per record (two-sample case), or ``None``.
        covariate: Covariate per record (regression case), or ``None``.
        levels: The two group levels in order; ``None`` for regression
            data.  Defaults to order of first appearance.
        response_name: Display name of the response.
        predictor_name: Display name of the grouping variable or
            covariate.

    Raises:
        InputError: If the dataset is empty, arrays disagree in length,
            values are non-finite, both or neither of *groups* and
            *covariate* are given, or the labels do not form exactly
            two levels.
    """

    response: np.ndarray
    groups: np.ndarray | None = None
    covariate: np.ndarray | None = None
    levels: tuple[Hashable, Hashable] | None = None
    response_name: str = "response"
    predictor_name: str = field(default="")

    def __post_init__(self) -> None:
        response = _frozen_numeric(self.response, "response")
        n = len(response)
        if n == 0:
            raise InputError("Dataset must contain at least one observation.")
        object.__setattr__(self, "response", response)

        if (self.groups is None) == (self.covariate is None):
            raise InputError(
                "Exactly one of 'groups' (two-sample) or 'covariate' "
                "(regression) must be supplied."
            )

        if self.covariate is not None:
            covariate = _frozen_numeric(self.covariate, "covariate")
            if len(covariate) != n:
                raise InputError(
                    f"covariate has {len(covariate)} values but response has {n}."
                )
            object.__setattr__(self, "covariate", covariate)
            object.__setattr__(self, "levels", None)
            if not self.predictor_name:
                object.__setattr__(self, "predictor_name", "covariate")
            return

        groups = np.array(self.groups, dtype=object)
        if groups.ndim != 1 or len(groups) != n:
            raise InputError(
                f"groups must be one-dimensional with {n} labels, "
                f"got shape {groups.shape}."
            )
        levels = self.levels
        if levels is None:
            levels = tuple(pd.unique(pd.Series(groups, dtype=object)))
        else:
            levels = tuple(levels)
        if len(levels) != 2 or levels[0] == levels[1]:
            raise InputError(
                f"Two-sample data needs exactly two group levels, got {list(levels)}."
            )
        unknown = set(groups.tolist()) - set(levels)
        if unknown:
            raise InputError(
                f"Group labels {sorted(map(str, unknown))} are not among the "
                f"levels {list(levels)}."
            )
        groups.setflags(write=False)
        object.__setattr__(self, "groups", groups)
        object.__setattr__(self, "levels", levels)
        if not self.predictor_name:
            object.__setattr__(self, "predictor_name", "group")

    # ---- Constructors --------------------------------------------

    @classmethod
    def two_sample(
        cls,
        first: ArrayLike,
        second: ArrayLike,
        *,
        labels: tuple[Hashable, Hashable] = ("first", "second"),
        response_name: str = "response",
        predictor_name: str = "group",
    ) -> Dataset:
        """Build a two-sample dataset from two response vectors.

        Records of *first* precede records of *second*, and
        ``labels[0]`` becomes the first level.

        Example::

            ants = Dataset.two_sample(
                [12, 9, 12, 10], [9, 6, 4, 6, 7, 10],
                labels=("field", "forest"),
            )
        """
        first_arr = np.ravel(np.asarray(first, dtype=float))
        second_arr = np.ravel(np.asarray(second, dtype=float))
        response = np.concatenate([first_arr, second_arr])
        groups = [labels[0]] * len(first_arr) + [labels[1]] * len(second_arr)
        return cls(
            response=response,
            groups=np.array(groups, dtype=object),
            levels=labels,
            response_name=response_name,
            predictor_name=predictor_name,
        )

    @classmethod
    def regression(
        cls,
        response: ArrayLike,
        covariate: ArrayLike,
        *,
        response_name: str = "response",
        predictor_name: str = "covariate",
    ) -> Dataset:
        """Build a regression dataset from paired response/covariate vectors."""
        return cls(
            response=np.ravel(np.asarray(response, dtype=float)),
            covariate=np.ravel(np.asarray(covariate, dtype=float)),
            response_name=response_name,
            predictor_name=predictor_name,
        )

    @classmethod
    def from_frame(
        cls,
        frame: DataFrameLike,
        *,
        response: str,
        group: str | None = None,
        covariate: str | None = None,
        levels: Sequence[Hashable] | None = None,
    ) -> Dataset:
        """Build a dataset from two columns of a pandas or Polars frame.

        Args:
            frame: Source table, one record per row.
            response: Name of the numeric response column.
            group: Name of the two-level grouping column (two-sample).
            covariate: Name of the numeric covariate column (regression).
            levels: Optional explicit level order for *group*.

        Raises:
            InputError: If a column is missing, or neither / both of
                *group* and *covariate* are given.
        """
        if (group is None) == (covariate is None):
            raise InputError("Pass exactly one of group= or covariate=.")
        predictor = group if group is not None else covariate
        try:
            y_col, x_col = _select_columns(frame, response, predictor)
        except KeyError as exc:
            raise InputError(str(exc.args[0])) from exc

        if group is not None:
            return cls(
                response=y_col.to_numpy(),
                groups=x_col.to_numpy(dtype=object),
                levels=tuple(levels) if levels is not None else None,
                response_name=response,
                predictor_name=group,
            )
        return cls(
            response=y_col.to_numpy(),
            covariate=x_col.to_numpy(),
            response_name=response,
            predictor_name=covariate,
        )

    # ---- Introspection -------------------------------------------

    def __len__(self) -> int:
        return len(self.response)

    @property
    def kind(self) -> str:
        """``"two_sample"`` or ``"regression"``."""
        return TWO_SAMPLE if self.groups is not None else REGRESSION

    @property
    def first_group_mask(self) -> np.ndarray:
        """Boolean mask of records carrying the first level."""
        self._require_two_sample("first_group_mask")
        return self.groups == self.levels[0]

    @property
    def group_size(self) -> int:
        """Number of records in the first level (*k*)."""
        return int(np.count_nonzero(self.first_group_mask))

    def values_for(self, level: Hashable) -> np.ndarray:
        """Response values of the records labelled *level*."""
        self._require_two_sample("values_for")
        if level not in self.levels:
            raise KeyError(level)
        return self.response[self.groups == level]

    def to_frame(self) -> pd.DataFrame:
        """Return the records as a two-column pandas DataFrame."""
        predictor = self.groups if self.groups is not None else self.covariate
        return pd.DataFrame(
            {self.response_name: self.response, self.predictor_name: predictor}
        )

    # ---- Relabelling ---------------------------------------------

    def with_first_group(self, indices: Sequence[int] | np.ndarray) -> Dataset:
        """Return a copy with *indices* labelled as the first level.

        Every other record is labelled as the second level.  Response
        values stay in place.
        """
        self._require_two_sample("with_first_group")
        mask = np.zeros(len(self), dtype=bool)
        mask[np.asarray(indices, dtype=np.intp)] = True
        first, second = self.levels
        groups = np.empty(len(self), dtype=object)
        # Levels may be of mixed type; fill element by element.
        for i, m in enumerate(mask):
            groups[i] = first if m else second
        groups.setflags(write=False)
        return self._derive(groups=groups)

    def with_response_order(self, order: Sequence[int] | np.ndarray) -> Dataset:
        """Return a copy whose response vector is ``response[order]``.

        Labels (or the covariate) stay fixed, so this reassigns values
        to records.  *order* must be a permutation of ``range(N)``.
        """
        response = self.response[np.asarray(order, dtype=np.intp)]
        response.setflags(write=False)
        return self._derive(response=response)

    # ---- Internals -----------------------------------------------

    def _derive(self, **changes: Any) -> Dataset:
        # Relabelled copies come from an already-validated dataset, so
        # they skip __post_init__; this keeps the per-assignment cost low.
        clone = copy.copy(self)
        for name, value in changes.items():
            object.__setattr__(clone, name, value)
        return clone

    def _require_two_sample(self, what: str) -> None:
        if self.groups is None:
            raise InputError(f"{what} is only defined for two-sample datasets.")
