"""Shared type aliases for the permutation_engine package."""

import numpy as np
import pandas as pd

# Array-like inputs accepted by the public API.
ArrayLike = np.ndarray | pd.Series | list | tuple

# Anything ``numpy.random.default_rng`` accepts as a seed.
RandomState = int | np.random.Generator | None
