"""Tests for the pvalues module."""

import numpy as np
import pytest
from scipy import stats

from permutation_engine import Dataset
from permutation_engine.exceptions import InputError
from permutation_engine.pvalues import (
    classical_p_value,
    clopper_pearson_interval,
    compute_p_value,
    exceedance_count,
    format_p_value,
    p_value_lower,
    p_value_two_tailed_abs,
    p_value_two_tailed_double,
    p_value_upper,
    phipson_smyth,
)


class TestTailDefinitions:
    def test_simple_distribution(self):
        dist = [1.0, 2.0, 3.0, 4.0, 5.0]
        assert p_value_upper(4.0, dist) == pytest.approx(2 / 5)
        assert p_value_lower(4.0, dist) == pytest.approx(4 / 5)
        assert p_value_two_tailed_double(4.0, dist) == pytest.approx(4 / 5)
        assert p_value_two_tailed_abs(4.0, dist) == pytest.approx(2 / 5)

    def test_observed_counts_as_extreme(self):
        # Ties are counted: d >= obs includes d == obs.
        assert p_value_upper(3.0, [3.0, 3.0, 1.0, 0.0]) == pytest.approx(0.5)

    def test_double_clipped_at_one(self):
        dist = [1.0, 2.0, 3.0, 4.0]
        assert p_value_upper(1.0, dist) == 1.0
        assert p_value_two_tailed_double(1.0, dist) == 1.0
        assert p_value_two_tailed_double(2.5, dist) == 1.0

    def test_negative_observed_uses_magnitudes(self):
        dist = [-5.0, -3.0, 0.0, 3.0, 5.0]
        assert p_value_two_tailed_abs(-3.0, dist) == pytest.approx(4 / 5)

    def test_conventions_differ_on_skewed_distribution(self):
        dist = [-1.0, -1.0, -1.0, 5.0]
        assert p_value_two_tailed_double(4.0, dist) == pytest.approx(0.5)
        assert p_value_two_tailed_abs(4.0, dist) == pytest.approx(0.25)

    @pytest.mark.parametrize("seed", range(10))
    def test_double_is_twice_upper(self, seed):
        rng = np.random.default_rng(seed)
        dist = rng.standard_normal(rng.integers(5, 200))
        obs = float(rng.standard_normal())
        assert p_value_two_tailed_double(obs, dist) == min(
            1.0, 2 * p_value_upper(obs, dist)
        )

    def test_empty_distribution(self):
        with pytest.raises(InputError, match="empty"):
            p_value_upper(0.0, [])

    def test_two_dimensional_distribution(self):
        with pytest.raises(InputError, match="one-dimensional"):
            p_value_upper(0.0, np.zeros((2, 2)))


class TestDispatch:
    @pytest.mark.parametrize(
        ("tail", "func"),
        [
            ("upper", p_value_upper),
            ("lower", p_value_lower),
            ("double", p_value_two_tailed_double),
            ("both", p_value_two_tailed_abs),
        ],
    )
    def test_routes_to_named_tail(self, tail, func):
        dist = np.linspace(-2, 2, 41)
        assert compute_p_value(0.7, dist, tail) == func(0.7, dist)

    def test_unknown_tail(self):
        with pytest.raises(InputError, match="Unknown tail"):
            compute_p_value(0.0, [1.0], "two-sided")

    def test_exceedance_counts(self):
        dist = [-5.0, -3.0, 0.0, 3.0, 5.0]
        assert exceedance_count(3.0, dist, "upper") == 2
        assert exceedance_count(3.0, dist, "lower") == 4
        assert exceedance_count(3.0, dist, "double") == 2
        assert exceedance_count(3.0, dist, "both") == 4


class TestMonteCarloHelpers:
    def test_phipson_smyth(self):
        assert phipson_smyth(0, 99) == pytest.approx(0.01)
        assert phipson_smyth(99, 99) == pytest.approx(1.0)

    @pytest.mark.parametrize(("count", "n"), [(0, 100), (5, 100), (50, 100), (100, 100)])
    def test_clopper_pearson_matches_scipy(self, count, n):
        expected = stats.binomtest(count, n).proportion_ci(
            confidence_level=0.95, method="exact"
        )
        lo, hi = clopper_pearson_interval(count, n, 0.95)
        assert lo == pytest.approx(expected.low, abs=1e-10)
        assert hi == pytest.approx(expected.high, abs=1e-10)

    def test_clopper_pearson_contains_estimate(self):
        lo, hi = clopper_pearson_interval(37, 500)
        assert lo < 37 / 500 < hi

    def test_clopper_pearson_validation(self):
        with pytest.raises(InputError):
            clopper_pearson_interval(5, 0)
        with pytest.raises(InputError):
            clopper_pearson_interval(6, 5)
        with pytest.raises(InputError):
            clopper_pearson_interval(1, 5, confidence=1.0)


class TestClassicalPValue:
    def test_two_sample_is_welch(self, ants):
        expected = stats.ttest_ind(
            [12, 9, 12, 10], [9, 6, 4, 6, 7, 10], equal_var=False
        ).pvalue
        assert classical_p_value(ants) == pytest.approx(expected)

    def test_regression_is_slope_t_test(self, small_regression):
        expected = stats.linregress(
            small_regression.covariate, small_regression.response
        ).pvalue
        assert classical_p_value(small_regression) == pytest.approx(expected)

    def test_undefined_cases_are_nan(self):
        assert np.isnan(classical_p_value(Dataset.two_sample([1.0], [2.0, 3.0])))
        assert np.isnan(classical_p_value(Dataset.regression([1.0, 2.0], [0.0, 1.0])))


class TestFormatPValue:
    @pytest.mark.parametrize(
        ("p", "marker"),
        [(0.0001, "(***)"), (0.005, "(**)"), (0.03, "(*)"), (0.2, "(ns)")],
    )
    def test_markers(self, p, marker):
        assert format_p_value(p).endswith(marker)

    def test_precision(self):
        assert format_p_value(0.123456, precision=2) == "0.12 (ns)"

    def test_nan(self):
        assert format_p_value(float("nan")) == "N/A"
