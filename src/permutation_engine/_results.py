"""Typed result object for permutation tests.

:class:`PermutationTestResult` is a frozen dataclass that provides:

* **Attribute access** — ``result.p_value``, ``result.distribution``.
* **Dict-like access** — ``result["p_value"]``, ``result.get("key")``,
  ``"key" in result`` for consumers that prefer bracket syntax.
* **Serialisation** — ``.to_dict()`` returns a plain ``dict[str, Any]``
  with all NumPy types converted to native Python.

The result is a snapshot of a completed run.  It keeps the full
permutation distribution so the caller can plot it; the engine itself
renders nothing.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import TYPE_CHECKING, Any, ClassVar

import numpy as np

if TYPE_CHECKING:
    from .dataset import Dataset

# ------------------------------------------------------------------ #
# Serialisation helper
# ------------------------------------------------------------------ #


def _numpy_to_python(obj: Any) -> Any:
    """Recursively convert NumPy scalars/arrays to Python-native types."""
    if isinstance(obj, np.ndarray):
        return obj.tolist()
    if isinstance(obj, np.bool_):
        return bool(obj)
    if isinstance(obj, np.integer):
        return int(obj)
    if isinstance(obj, np.floating):
        return float(obj)
    if isinstance(obj, dict):
        return {k: _numpy_to_python(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return type(obj)(_numpy_to_python(item) for item in obj)
    return obj


def _seed_to_python(seed: Any) -> int | None:
    # Generators are not serialisable; only integer seeds survive.
    if isinstance(seed, (int, np.integer)) and not isinstance(seed, bool):
        return int(seed)
    return None


# ------------------------------------------------------------------ #
# Dict-compatibility mixin
# ------------------------------------------------------------------ #


class _DictAccessMixin:
    """Read-only mapping view over a result dataclass.

    ``result["p_value"]``, ``result.get("p_value")`` and
    ``"p_value" in result`` see the dataclass fields plus any names in
    ``_EXTRA_KEYS``.  Methods and private attributes are not keys.
    """

    _SERIALIZERS: ClassVar[dict[str, Any]] = {
        "random_state": _seed_to_python,
        "levels": lambda levels: None if levels is None else [str(lv) for lv in levels],
    }
    _EXCLUDE_FROM_DICT: ClassVar[frozenset[str]] = frozenset({"dataset"})
    _EXTRA_KEYS: ClassVar[tuple[str, ...]] = ()

    def _keys(self) -> tuple[str, ...]:
        return tuple(f.name for f in fields(self)) + self._EXTRA_KEYS  # type: ignore[arg-type]

    def __getitem__(self, key: str) -> Any:
        if key not in self:
            raise KeyError(key)
        return getattr(self, key)

    def get(self, key: str, default: Any = None) -> Any:
        return getattr(self, key) if key in self else default

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and key in self._keys()

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serialisable dictionary.

        Every key except those in ``_EXCLUDE_FROM_DICT``; the
        distribution becomes a list of floats.
        """
        return {
            name: self._serialize(name)
            for name in self._keys()
            if name not in self._EXCLUDE_FROM_DICT
        }

    def _serialize(self, name: str) -> Any:
        value = getattr(self, name)
        serializer = self._SERIALIZERS.get(name)
        if serializer is not None:
            value = serializer(value)
        return _numpy_to_python(value)


# ------------------------------------------------------------------ #
# PermutationTestResult
# ------------------------------------------------------------------ #


@dataclass(frozen=True)
class PermutationTestResult(_DictAccessMixin):
    """Outcome of one permutation test run.

    Returned by :func:`~permutation_engine.permutation_test` and
    :meth:`~permutation_engine.PermutationEngine.run`.
    """

    _EXTRA_KEYS: ClassVar[tuple[str, ...]] = ("n_permutations",)

    method: str
    """``"exact"`` or ``"monte_carlo"``."""

    tail: str
    """Tail the caller asked for; selects :attr:`p_value`."""

    statistic_name: str
    """Display name of the statistic function."""

    observed: float
    """Statistic evaluated on the original labelling."""

    distribution: np.ndarray
    """Permutation distribution, one value per label assignment."""

    p_value: float
    """P-value for :attr:`tail`."""

    p_value_upper: float
    """``#{d >= obs} / n``."""

    p_value_lower: float
    """``#{d <= obs} / n``."""

    p_value_two_tailed_double: float
    """``min(1, 2 · p_value_upper)``."""

    p_value_two_tailed_abs: float
    """``#{|d| >= |obs|} / n``."""

    exceedance_count: int
    """Number of permuted statistics counted toward :attr:`tail`."""

    confidence_interval: tuple[float, float] | None
    """Clopper–Pearson interval for :attr:`p_value` (Monte Carlo only)."""

    confidence_level: float
    """Confidence level used for :attr:`confidence_interval`."""

    classical_p_value: float
    """Welch *t* / OLS slope *t* p-value, for comparison (may be ``nan``)."""

    random_state: Any
    """Seed the Monte Carlo run used (``None`` for exact runs)."""

    dataset_kind: str
    """``"two_sample"`` or ``"regression"``."""

    n_records: int
    """Number of records *N*."""

    group_size: int | None
    """First-level size *k* (two-sample data only)."""

    levels: tuple[Any, Any] | None
    """Group levels (two-sample data only)."""

    response_name: str
    predictor_name: str

    dataset: Dataset | None = None
    """The dataset the test ran on (not serialised)."""

    @property
    def n_permutations(self) -> int:
        """Length of :attr:`distribution`."""
        return int(len(self.distribution))
