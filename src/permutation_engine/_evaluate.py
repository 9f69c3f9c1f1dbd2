"""Shared statistic-evaluation loop for the exact and Monte Carlo paths.

Both generators produce a stream of label assignments.  This module
cuts the stream into fixed-size chunks, evaluates the statistic on the
relabelled dataset for every assignment, and concatenates the chunk
results back in stream order.

Parallelism
-----------
With ``n_jobs == 1`` chunks are evaluated in a plain loop.  Otherwise
they are dispatched through ``joblib.Parallel(prefer="threads")``.
joblib returns results in submission order, so the output is identical
to the sequential path regardless of the worker count.  Threads (not
processes) are used because the statistic is an arbitrary callable
that may not pickle, and the dataset is shared read-only.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator
from itertools import islice
from typing import Any, TypeVar

import numpy as np
from joblib import Parallel, delayed

from .dataset import Dataset
from .exceptions import InputError
from .statistics import StatisticFunction, statistic_name

logger = logging.getLogger(__name__)

T = TypeVar("T")

CHUNK_SIZE = 2048
"""Assignments per chunk.  Also the Monte Carlo seed-spawning unit."""


def chunked(iterable: Iterable[T], size: int = CHUNK_SIZE) -> Iterator[list[T]]:
    """Yield successive lists of at most *size* items from *iterable*."""
    it = iter(iterable)
    while chunk := list(islice(it, size)):
        yield chunk


def evaluate_statistic(statistic: StatisticFunction, dataset: Dataset) -> float:
    """Call *statistic* on *dataset*, converting failures to ``InputError``."""
    try:
        return float(statistic(dataset))
    except Exception as exc:
        raise InputError(
            f"Statistic '{statistic_name(statistic)}' failed on a relabelled "
            f"dataset: {exc}"
        ) from exc


def evaluate_chunks(
    dataset: Dataset,
    statistic: StatisticFunction,
    relabel: Callable[[Dataset, Any], Dataset],
    chunks: Iterable[Iterable[Any]],
    *,
    n_jobs: int = 1,
) -> np.ndarray:
    """Evaluate *statistic* over every assignment in *chunks*.

    Args:
        dataset: The original dataset.
        statistic: Caller-supplied statistic.
        relabel: ``relabel(dataset, assignment)`` builds the relabelled
            dataset for one assignment.
        chunks: Iterable of assignment batches, consumed lazily.
        n_jobs: ``1`` for a sequential loop, anything else for joblib
            threads (``-1`` = all cores).

    Returns:
        Float array with one statistic per assignment, in stream order.

    Raises:
        InputError: If the statistic raises on any relabelled dataset.
    """

    def _run(chunk: Iterable[Any]) -> np.ndarray:
        return np.fromiter(
            (evaluate_statistic(statistic, relabel(dataset, a)) for a in chunk),
            dtype=float,
        )

    if n_jobs == 1:
        parts = [_run(chunk) for chunk in chunks]
    else:
        parts = Parallel(n_jobs=n_jobs, prefer="threads")(
            delayed(_run)(chunk) for chunk in chunks
        )

    logger.debug("Evaluated %d chunk(s) with n_jobs=%d", len(parts), n_jobs)
    if not parts:
        return np.empty(0, dtype=float)
    return np.concatenate(parts)
