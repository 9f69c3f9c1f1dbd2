"""Monte Carlo sampling of label assignments.

When exact enumeration is infeasible, the reference distribution is
approximated by *M* independent, uniformly random orderings of the
response vector against the fixed labels (or covariate).  Each draw is
a full shuffle — not a partition draw — so every one of the ``N!``
orderings is equally likely, and draws are made with replacement.

Vectorised generation
---------------------
A batch of orderings is produced in a single NumPy call::

    batch = np.tile(np.arange(N), (B, 1))
    rng.permuted(batch, axis=1, out=batch)

``Generator.permuted`` shuffles each row independently with a
Fisher–Yates pass at the C level — no Python loop per draw.

Reproducible streams
--------------------
The *M* draws are cut into chunks of
:data:`~permutation_engine._evaluate.CHUNK_SIZE`.  Chunk *i* gets its
own generator, the *i*-th child spawned from the caller's seed
(``Generator.spawn``, backed by ``SeedSequence``).  The chunk layout
depends only on *M*, never on ``n_jobs``, so:

* the same seed and *M* always give the same distribution, and
* a parallel run gives exactly the sequential result.

The process-global ``np.random`` state is never touched.
"""

from __future__ import annotations

import logging
import numbers
from collections.abc import Iterator

import numpy as np

from ._config import get_n_jobs
from ._evaluate import CHUNK_SIZE, evaluate_chunks
from ._typing import RandomState
from .dataset import Dataset
from .exceptions import InputError
from .statistics import StatisticFunction

logger = logging.getLogger(__name__)


def _check_sample_count(n_samples: int) -> int:
    if (
        isinstance(n_samples, bool)
        or not isinstance(n_samples, numbers.Integral)
        or n_samples < 1
    ):
        raise InputError(f"n_samples must be a positive integer, got {n_samples!r}.")
    return int(n_samples)


def iter_shuffle_chunks(
    n_records: int,
    n_samples: int,
    random_state: RandomState = None,
    chunk_size: int = CHUNK_SIZE,
) -> Iterator[np.ndarray]:
    """Yield ``(B_i, n_records)`` blocks of uniform random orderings.

    Block sizes sum to *n_samples*; every block but the last has
    *chunk_size* rows.  Block *i* is drawn from the *i*-th child
    generator of *random_state*.

    Raises:
        InputError: If *n_records* or *n_samples* is not positive.
    """
    if n_records < 1:
        raise InputError("Dataset must contain at least one observation.")
    n_samples = _check_sample_count(n_samples)

    n_chunks = -(-n_samples // chunk_size)
    children = np.random.default_rng(random_state).spawn(n_chunks)

    remaining = n_samples
    for rng in children:
        rows = min(chunk_size, remaining)
        batch = np.tile(np.arange(n_records, dtype=np.intp), (rows, 1))
        rng.permuted(batch, axis=1, out=batch)
        remaining -= rows
        yield batch


def generate_shuffles(
    n_records: int,
    n_samples: int,
    random_state: RandomState = None,
) -> np.ndarray:
    """Draw *n_samples* independent uniform orderings of ``range(n_records)``.

    This is the exact stream :func:`monte_carlo_distribution` evaluates
    for the same arguments.

    Args:
        n_records: Length of each ordering (*N*).
        n_samples: Number of draws (*M*).
        random_state: Seed (``int``), ``numpy.random.Generator``, or
            ``None`` for fresh OS entropy.

    Returns:
        Integer array of shape ``(n_samples, n_records)``.  Rows are
        not deduplicated and may include the identity.
    """
    return np.concatenate(list(iter_shuffle_chunks(n_records, n_samples, random_state)))


def monte_carlo_distribution(
    dataset: Dataset,
    statistic: StatisticFunction,
    n_samples: int,
    *,
    random_state: RandomState = None,
    n_jobs: int | None = None,
) -> np.ndarray:
    """Evaluate *statistic* on *n_samples* randomly reordered datasets.

    Args:
        dataset: Two-sample or regression dataset.
        statistic: ``(Dataset) -> float``.
        n_samples: Number of Monte Carlo draws (*M*).
        random_state: Seed or generator; see :func:`generate_shuffles`.
        n_jobs: Worker count override for this call.

    Returns:
        Array of length *n_samples*, in draw order.

    Raises:
        InputError: Bad sample count, or the statistic raised.
    """
    n_samples = _check_sample_count(n_samples)
    jobs = n_jobs if n_jobs is not None else get_n_jobs()
    logger.debug(
        "Monte Carlo sampling: kind=%s N=%d M=%d", dataset.kind, len(dataset), n_samples
    )
    return evaluate_chunks(
        dataset,
        statistic,
        Dataset.with_response_order,
        iter_shuffle_chunks(len(dataset), n_samples, random_state),
        n_jobs=jobs,
    )
