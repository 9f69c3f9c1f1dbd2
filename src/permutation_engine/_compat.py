"""Frame compatibility layer for optional Polars support.

:meth:`Dataset.from_frame <permutation_engine.dataset.Dataset.from_frame>`
works on pandas.  A ``polars.DataFrame`` or ``polars.LazyFrame`` is
converted at the boundary, and only the requested columns are pulled
out, so the dataset constructors never touch a Polars object.

Polars is **not** a required dependency.  Without it, only pandas
frames are accepted.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, TypeAlias

import pandas as pd

if TYPE_CHECKING:
    import polars as pl

    DataFrameLike: TypeAlias = pd.DataFrame | pl.DataFrame | pl.LazyFrame
else:
    DataFrameLike: TypeAlias = pd.DataFrame

# Polars is optional.
try:
    import polars as pl

    _HAS_POLARS = True
except ImportError:
    _HAS_POLARS = False


def _to_pandas(frame: DataFrameLike) -> pd.DataFrame:
    """Return *frame* as pandas, collecting lazy Polars frames first."""
    if isinstance(frame, pd.DataFrame):
        return frame

    if _HAS_POLARS:
        if isinstance(frame, pl.LazyFrame):
            frame = frame.collect()
        if isinstance(frame, pl.DataFrame):
            return frame.to_pandas()

    accepted = "a pandas DataFrame"
    if _HAS_POLARS:
        accepted += " or Polars DataFrame/LazyFrame"
    raise TypeError(f"frame must be {accepted}, got {type(frame).__name__}.")


def _select_columns(frame: DataFrameLike, *columns: str) -> list[pd.Series]:
    """Pull *columns* out of *frame* as pandas Series, in order.

    Raises:
        TypeError: If *frame* is not a recognised DataFrame type.
        KeyError: If any column is missing.
    """
    df = _to_pandas(frame)
    missing = [c for c in columns if c not in df.columns]
    if missing:
        raise KeyError(
            f"Column(s) {missing} not found; available: {list(df.columns)}"
        )
    return [df[c] for c in columns]
