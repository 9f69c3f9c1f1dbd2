"""permutation_engine — Exact and Monte Carlo permutation tests.

Builds the reference distribution of a caller-supplied test statistic
under relabelling of a two-sample or simple-regression dataset, either
by exhaustive enumeration of every label assignment (``C(N, k)``
partitions or ``N!`` orderings) or by seeded Monte Carlo shuffling,
and reports one-tailed and both two-tailed p-values.

Public API:
    .. autosummary::
        permutation_test
        PermutationEngine
        PermutationTestResult
        Dataset
        StatisticFunction
        difference_of_means
        difference_of_medians
        welch_t_statistic
        regression_slope
        pearson_correlation
        count_combinations
        iter_combinations
        exact_distribution
        generate_shuffles
        monte_carlo_distribution
        compute_p_value
        p_value_upper
        p_value_lower
        p_value_two_tailed_double
        p_value_two_tailed_abs
        clopper_pearson_interval
        classical_p_value
        required_sample_count
        monte_carlo_standard_error
        recommend_n_samples
        print_results_table
        print_distribution_summary
        get_max_enumeration
        set_max_enumeration
        get_n_jobs
        set_n_jobs
        InputError
        ComputeInfeasible
"""

from ._config import get_max_enumeration, get_n_jobs, set_max_enumeration, set_n_jobs
from ._results import PermutationTestResult
from .core import permutation_test
from .dataset import Dataset
from .display import print_distribution_summary, print_results_table
from .engine import PermutationEngine
from .enumeration import count_combinations, exact_distribution, iter_combinations
from .exceptions import ComputeInfeasible, InputError
from .planning import monte_carlo_standard_error, recommend_n_samples, required_sample_count
from .pvalues import (
    classical_p_value,
    clopper_pearson_interval,
    compute_p_value,
    p_value_lower,
    p_value_two_tailed_abs,
    p_value_two_tailed_double,
    p_value_upper,
)
from .sampling import generate_shuffles, monte_carlo_distribution
from .statistics import (
    StatisticFunction,
    difference_of_means,
    difference_of_medians,
    pearson_correlation,
    regression_slope,
    welch_t_statistic,
)

__all__ = [
    "permutation_test",
    "PermutationEngine",
    "PermutationTestResult",
    "Dataset",
    "StatisticFunction",
    "difference_of_means",
    "difference_of_medians",
    "welch_t_statistic",
    "regression_slope",
    "pearson_correlation",
    "count_combinations",
    "iter_combinations",
    "exact_distribution",
    "generate_shuffles",
    "monte_carlo_distribution",
    "compute_p_value",
    "p_value_upper",
    "p_value_lower",
    "p_value_two_tailed_double",
    "p_value_two_tailed_abs",
    "clopper_pearson_interval",
    "classical_p_value",
    "required_sample_count",
    "monte_carlo_standard_error",
    "recommend_n_samples",
    "print_results_table",
    "print_distribution_summary",
    "get_max_enumeration",
    "set_max_enumeration",
    "get_n_jobs",
    "set_n_jobs",
    "InputError",
    "ComputeInfeasible",
]

__version__ = "0.1.0"
