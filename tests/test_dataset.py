"""Tests for the Dataset record type."""

import dataclasses

import numpy as np
import pandas as pd
import pytest

from permutation_engine.dataset import REGRESSION, TWO_SAMPLE, Dataset
from permutation_engine.exceptions import InputError

FIELD = [12, 9, 12, 10]
FOREST = [9, 6, 4, 6, 7, 10]


class TestTwoSample:
    def test_layout(self, ants):
        assert ants.kind == TWO_SAMPLE
        assert len(ants) == 10
        assert ants.levels == ("field", "forest")
        assert ants.group_size == 4
        np.testing.assert_array_equal(ants.response, FIELD + FOREST)

    def test_values_for(self, ants):
        np.testing.assert_array_equal(ants.values_for("field"), FIELD)
        np.testing.assert_array_equal(ants.values_for("forest"), FOREST)

    def test_values_for_unknown_level(self, ants):
        with pytest.raises(KeyError):
            ants.values_for("meadow")

    def test_levels_default_to_first_appearance(self):
        ds = Dataset(response=[1.0, 2.0, 3.0], groups=["b", "a", "b"])
        assert ds.levels == ("b", "a")
        assert ds.group_size == 2

    def test_explicit_levels_may_leave_a_group_empty(self):
        ds = Dataset(response=[1.0, 2.0], groups=["a", "a"], levels=("a", "b"))
        assert ds.group_size == 2

    def test_three_levels_rejected(self):
        with pytest.raises(InputError, match="exactly two group levels"):
            Dataset(response=[1.0, 2.0, 3.0], groups=["a", "b", "c"])

    def test_one_level_rejected(self):
        with pytest.raises(InputError, match="exactly two group levels"):
            Dataset(response=[1.0, 2.0], groups=["a", "a"])

    def test_label_outside_levels_rejected(self):
        with pytest.raises(InputError, match="not among the levels"):
            Dataset(response=[1.0, 2.0, 3.0], groups=["a", "b", "c"], levels=("a", "b"))

    def test_length_mismatch_rejected(self):
        with pytest.raises(InputError, match="labels"):
            Dataset(response=[1.0, 2.0, 3.0], groups=["a", "b"])


class TestRegression:
    def test_layout(self, small_regression):
        assert small_regression.kind == REGRESSION
        assert small_regression.levels is None
        assert len(small_regression) == 6
        assert small_regression.predictor_name == "x"

    def test_length_mismatch_rejected(self):
        with pytest.raises(InputError, match="covariate has 2 values"):
            Dataset.regression([1.0, 2.0, 3.0], [1.0, 2.0])

    def test_group_only_helpers_rejected(self, small_regression):
        with pytest.raises(InputError, match="two-sample"):
            small_regression.group_size
        with pytest.raises(InputError, match="two-sample"):
            small_regression.with_first_group([0])


class TestValidation:
    def test_empty_rejected(self):
        with pytest.raises(InputError, match="at least one observation"):
            Dataset.two_sample([], [])

    def test_nan_rejected(self):
        with pytest.raises(InputError, match="NaN or infinite"):
            Dataset.two_sample([1.0, np.nan], [2.0])

    def test_non_numeric_rejected(self):
        with pytest.raises(InputError, match="numeric"):
            Dataset(response=["a", "b"], groups=["x", "y"])

    def test_both_predictors_rejected(self):
        with pytest.raises(InputError, match="Exactly one"):
            Dataset(response=[1.0, 2.0], groups=["a", "b"], covariate=[1.0, 2.0])

    def test_neither_predictor_rejected(self):
        with pytest.raises(InputError, match="Exactly one"):
            Dataset(response=[1.0, 2.0])


class TestImmutability:
    def test_arrays_read_only(self, ants):
        assert not ants.response.flags.writeable
        assert not ants.groups.flags.writeable
        with pytest.raises(ValueError):
            ants.response[0] = 99.0

    def test_fields_frozen(self, ants):
        with pytest.raises(dataclasses.FrozenInstanceError):
            ants.response = np.zeros(10)

    def test_input_arrays_copied(self):
        y = np.array([1.0, 2.0, 3.0, 4.0])
        x = np.array([0.0, 1.0, 2.0, 3.0])
        ds = Dataset.regression(y, x)
        y[0] = 100.0
        x[0] = 100.0
        assert ds.response[0] == 1.0
        assert ds.covariate[0] == 0.0


class TestRelabelling:
    def test_with_first_group(self, ants):
        relabelled = ants.with_first_group([0, 5, 6, 9])
        assert relabelled.group_size == 4
        np.testing.assert_array_equal(relabelled.response, ants.response)
        np.testing.assert_array_equal(relabelled.values_for("field"), [12, 6, 4, 10])
        # Original untouched.
        np.testing.assert_array_equal(ants.values_for("field"), FIELD)

    def test_mixed_type_levels(self):
        ds = Dataset.two_sample(FIELD, FOREST, labels=(1, "control"))
        relabelled = ds.with_first_group([0, 5, 6, 9])
        assert relabelled.groups.dtype == object
        assert relabelled.groups.tolist() == [
            1, "control", "control", "control", "control", 1, 1, "control", "control", 1
        ]
        np.testing.assert_array_equal(relabelled.values_for(1), [12, 6, 4, 10])
        assert not relabelled.groups.flags.writeable

    def test_with_response_order_conserves_values(self, small_regression):
        order = [5, 4, 3, 2, 1, 0]
        relabelled = small_regression.with_response_order(order)
        np.testing.assert_array_equal(relabelled.response, small_regression.response[::-1])
        np.testing.assert_array_equal(relabelled.covariate, small_regression.covariate)
        np.testing.assert_array_equal(
            np.sort(relabelled.response), np.sort(small_regression.response)
        )
        assert not relabelled.response.flags.writeable

    def test_relabelled_copy_keeps_metadata(self, ants):
        relabelled = ants.with_response_order(np.arange(10)[::-1])
        assert relabelled.levels == ants.levels
        assert relabelled.response_name == "colonies"
        assert relabelled.predictor_name == "place"


class TestFromFrame:
    def test_two_sample(self):
        df = pd.DataFrame(
            {"count": FIELD + FOREST, "place": ["field"] * 4 + ["forest"] * 6}
        )
        ds = Dataset.from_frame(df, response="count", group="place")
        assert ds.kind == TWO_SAMPLE
        assert ds.levels == ("field", "forest")
        assert ds.response_name == "count"
        assert ds.predictor_name == "place"

    def test_explicit_level_order(self):
        df = pd.DataFrame({"y": [1.0, 2.0, 3.0], "g": ["a", "b", "a"]})
        ds = Dataset.from_frame(df, response="y", group="g", levels=["b", "a"])
        assert ds.levels == ("b", "a")
        assert ds.group_size == 1

    def test_regression(self):
        df = pd.DataFrame({"rate": [1.0, 2.0, 2.5], "year": [2000, 2001, 2002]})
        ds = Dataset.from_frame(df, response="rate", covariate="year")
        assert ds.kind == REGRESSION
        np.testing.assert_array_equal(ds.covariate, [2000.0, 2001.0, 2002.0])

    def test_missing_column(self):
        df = pd.DataFrame({"y": [1.0, 2.0]})
        with pytest.raises(InputError, match="not found"):
            Dataset.from_frame(df, response="y", group="g")

    def test_needs_exactly_one_predictor(self):
        df = pd.DataFrame({"y": [1.0, 2.0], "g": ["a", "b"]})
        with pytest.raises(InputError, match="exactly one"):
            Dataset.from_frame(df, response="y")

    def test_round_trip_to_frame(self, ants):
        df = ants.to_frame()
        assert list(df.columns) == ["colonies", "place"]
        rebuilt = Dataset.from_frame(df, response="colonies", group="place")
        np.testing.assert_array_equal(rebuilt.response, ants.response)
        assert rebuilt.levels == ants.levels
