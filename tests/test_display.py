"""Tests for the ASCII table display helpers."""

import dataclasses

import pytest

from permutation_engine import (
    difference_of_means,
    permutation_test,
    print_distribution_summary,
    print_results_table,
    regression_slope,
)


@pytest.fixture()
def exact_ants(ants):
    return permutation_test(ants, difference_of_means, method="exact", tail="both")


class TestResultsTable:
    def test_header_and_rows(self, exact_ants, capsys):
        print_results_table(exact_ants)
        out = capsys.readouterr().out
        assert "Permutation Test Results" in out
        assert "colonies" in out
        assert "field vs forest" in out
        assert "Exact enumeration" in out
        assert "210" in out
        for label in ("upper", "lower", "doubled upper", "both tails"):
            assert label in out
        assert "Classical (Welch t)" in out

    def test_lines_fit_width(self, exact_ants, capsys):
        print_results_table(exact_ants)
        out = capsys.readouterr().out
        assert all(len(line) <= 80 for line in out.splitlines())

    def test_selected_tail_marked(self, exact_ants, capsys):
        print_results_table(exact_ants)
        marked = [line for line in capsys.readouterr().out.splitlines() if "<-" in line]
        assert len(marked) == 1
        assert "both tails" in marked[0]

    def test_significance_markers(self, exact_ants, capsys):
        print_results_table(exact_ants)
        out = capsys.readouterr().out
        # 8/210 for both tails.
        assert "0.0381 (*)" in out
        assert "(***) p < 0.001" in out

    def test_asymmetry_note(self, exact_ants, capsys):
        # 2 * 5/210 differs from 8/210.
        print_results_table(exact_ants)
        text = " ".join(capsys.readouterr().out.split())
        assert "not symmetric about zero" in text

    def test_no_interval_note_for_exact(self, exact_ants, capsys):
        print_results_table(exact_ants)
        assert "Clopper-Pearson" not in capsys.readouterr().out

    def test_monte_carlo_notes(self, small_regression, capsys):
        result = permutation_test(
            small_regression,
            regression_slope,
            method="monte_carlo",
            tail="upper",
            n_samples=400,
            random_state=11,
        )
        print_results_table(result, title="Slope test")
        out = capsys.readouterr().out
        assert "Slope test" in out
        assert "Monte Carlo" in out
        assert "Random State:" in out
        assert "95% Clopper-Pearson interval" in out
        assert "Classical (OLS slope t)" in out

    def test_missing_classical_p_value(self, exact_ants, capsys):
        result = dataclasses.replace(exact_ants, classical_p_value=float("nan"))
        print_results_table(result)
        classical = [
            line for line in capsys.readouterr().out.splitlines() if "Classical" in line
        ]
        assert "N/A" in classical[0]


class TestDistributionSummary:
    def test_quantiles(self, exact_ants, capsys):
        print_distribution_summary(exact_ants)
        out = capsys.readouterr().out
        assert "Permutation Distribution" in out
        assert "Quantile" in out
        assert "3.7500" in out
        assert "0.500" in out

    def test_no_finite_values(self, exact_ants, capsys):
        result = dataclasses.replace(
            exact_ants, distribution=exact_ants.distribution * float("nan")
        )
        print_distribution_summary(result)
        assert "No finite values." in capsys.readouterr().out
