"""Process-level configuration for the permutation_engine package.

Two knobs are exposed:

* **Enumeration ceiling** — the largest number of label assignments
  (``C(N, k)`` for two-sample data, ``N!`` for regression data) an
  exact test may evaluate before :class:`~.exceptions.ComputeInfeasible`
  is raised.  The default, ``10! = 3_628_800``, admits every ordering
  of ten observations and nothing beyond.
* **Worker count** — default ``n_jobs`` for the statistic evaluation
  loop.  ``1`` runs sequentially; any other value fans out through
  ``joblib``.

Resolution order (first match wins):
    1. Programmatic override via :func:`set_max_enumeration` /
       :func:`set_n_jobs`.
    2. The ``PERMUTATION_ENGINE_MAX_ENUMERATION`` /
       ``PERMUTATION_ENGINE_N_JOBS`` environment variables.
    3. The built-in defaults.

Examples:
    Allow larger exact tests from the shell::

        export PERMUTATION_ENGINE_MAX_ENUMERATION=50000000

    Or programmatically::

        import permutation_engine
        permutation_engine.set_max_enumeration(50_000_000)

    Restore the default resolution order::

        permutation_engine.set_max_enumeration("auto")
"""

from __future__ import annotations

import math
import os

DEFAULT_MAX_ENUMERATION = math.factorial(10)
DEFAULT_N_JOBS = 1

_ENUMERATION_ENV = "PERMUTATION_ENGINE_MAX_ENUMERATION"
_N_JOBS_ENV = "PERMUTATION_ENGINE_N_JOBS"

# Sentinels indicating "no programmatic override has been set".
_max_enumeration_override: int | None = None
_n_jobs_override: int | None = None


def _read_env_int(name: str) -> int | None:
    """Parse an integer environment variable, ignoring blanks."""
    raw = os.environ.get(name, "").strip()
    if not raw:
        return None
    try:
        return int(raw.replace("_", ""))
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}.") from None


def get_max_enumeration() -> int:
    """Return the active exact-enumeration ceiling.

    Returns:
        Maximum number of label assignments an exact test may evaluate.
    """
    if _max_enumeration_override is not None:
        return _max_enumeration_override

    env = _read_env_int(_ENUMERATION_ENV)
    if env is not None and env > 0:
        return env

    return DEFAULT_MAX_ENUMERATION


def set_max_enumeration(value: int | str | None) -> None:
    """Override the exact-enumeration ceiling.

    Args:
        value: A positive integer, or ``"auto"`` / ``None`` to restore
            the default resolution order.

    Raises:
        ValueError: If *value* is not a positive integer.
    """
    global _max_enumeration_override
    if value is None or (isinstance(value, str) and value.strip().lower() == "auto"):
        _max_enumeration_override = None
        return
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ValueError(
            f"max_enumeration must be a positive integer or 'auto', got {value!r}."
        )
    _max_enumeration_override = value


def get_n_jobs() -> int:
    """Return the default worker count for statistic evaluation."""
    if _n_jobs_override is not None:
        return _n_jobs_override

    env = _read_env_int(_N_JOBS_ENV)
    if env is not None and env != 0:
        return env

    return DEFAULT_N_JOBS


def set_n_jobs(value: int | str | None) -> None:
    """Override the default worker count.

    Args:
        value: A non-zero integer (``-1`` means all cores, following
            joblib), or ``"auto"`` / ``None`` to restore the default
            resolution order.

    Raises:
        ValueError: If *value* is zero or not an integer.
    """
    global _n_jobs_override
    if value is None or (isinstance(value, str) and value.strip().lower() == "auto"):
        _n_jobs_override = None
        return
    if isinstance(value, bool) or not isinstance(value, int) or value == 0:
        raise ValueError(f"n_jobs must be a non-zero integer or 'auto', got {value!r}.")
    _n_jobs_override = value
