"""Tests for the stock test statistics."""

import numpy as np
import pytest
from scipy import stats

from permutation_engine import Dataset
from permutation_engine.statistics import (
    StatisticFunction,
    difference_of_means,
    difference_of_medians,
    pearson_correlation,
    regression_slope,
    statistic_name,
    welch_t_statistic,
)

FIELD = [12, 9, 12, 10]
FOREST = [9, 6, 4, 6, 7, 10]


class TestTwoSampleStatistics:
    def test_difference_of_means(self, ants):
        # 43/4 - 42/6 = 10.75 - 7.0
        assert difference_of_means(ants) == pytest.approx(3.75)

    def test_difference_of_medians(self, ants):
        # median(9, 10, 12, 12) = 11; median(4, 6, 6, 7, 9, 10) = 6.5
        assert difference_of_medians(ants) == pytest.approx(4.5)

    def test_welch_matches_scipy(self, ants):
        expected = stats.ttest_ind(FIELD, FOREST, equal_var=False).statistic
        assert welch_t_statistic(ants) == pytest.approx(expected)

    def test_sign_follows_level_order(self):
        ds = Dataset.two_sample(FOREST, FIELD, labels=("forest", "field"))
        assert difference_of_means(ds) == pytest.approx(-3.75)

    def test_empty_group_raises(self):
        ds = Dataset(response=[1.0, 2.0], groups=["a", "a"], levels=("a", "b"))
        with pytest.raises(ValueError, match="at least one observation"):
            difference_of_means(ds)

    def test_welch_needs_two_per_group(self):
        ds = Dataset.two_sample([1.0], [2.0, 3.0])
        with pytest.raises(ValueError, match="two observations"):
            welch_t_statistic(ds)

    def test_welch_constant_groups(self):
        ds = Dataset.two_sample([1.0, 1.0], [2.0, 2.0])
        with pytest.raises(ValueError, match="constant"):
            welch_t_statistic(ds)

    def test_rejects_regression_data(self, small_regression):
        with pytest.raises(ValueError, match="grouped dataset"):
            difference_of_means(small_regression)


class TestRegressionStatistics:
    def test_slope_matches_polyfit(self, small_regression):
        expected = np.polyfit(small_regression.covariate, small_regression.response, 1)[0]
        assert regression_slope(small_regression) == pytest.approx(expected)

    def test_correlation_matches_numpy(self, small_regression):
        expected = np.corrcoef(small_regression.covariate, small_regression.response)[0, 1]
        assert pearson_correlation(small_regression) == pytest.approx(expected)

    def test_exact_line(self):
        ds = Dataset.regression([1.0, 3.0, 5.0, 7.0], [0.0, 1.0, 2.0, 3.0])
        assert regression_slope(ds) == pytest.approx(2.0)
        assert pearson_correlation(ds) == pytest.approx(1.0)

    def test_constant_covariate(self):
        ds = Dataset.regression([1.0, 2.0, 3.0], [5.0, 5.0, 5.0])
        with pytest.raises(ValueError, match="constant"):
            regression_slope(ds)
        with pytest.raises(ValueError, match="constant"):
            pearson_correlation(ds)

    def test_single_observation(self):
        ds = Dataset.regression([1.0], [2.0])
        with pytest.raises(ValueError, match="two observations"):
            regression_slope(ds)

    def test_rejects_grouped_data(self, ants):
        with pytest.raises(ValueError, match="covariate"):
            regression_slope(ants)


class TestProtocol:
    def test_plain_functions_satisfy_protocol(self):
        assert isinstance(difference_of_means, StatisticFunction)
        assert isinstance(lambda ds: 0.0, StatisticFunction)

    def test_callable_object_satisfies_protocol(self):
        class Trimmed:
            def __call__(self, dataset):
                return 0.0

        assert isinstance(Trimmed(), StatisticFunction)
        assert statistic_name(Trimmed()) == "Trimmed"

    def test_statistic_name(self):
        assert statistic_name(difference_of_means) == "difference_of_means"
