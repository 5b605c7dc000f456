from __future__ import annotations

from math import isclose

from wealth_planner.core.projection import project
from wealth_planner.schemas.projection import InvestmentInputs


def test_zero_growth_accumulates_contributions_only():
    """
    With zero growth, balance should equal the starting amount plus cumulative contributions (no growth boost)
    """
    inputs = InvestmentInputs(
        startingAmount=1000.0,
        contributionAmount=100.0,
        contributionFrequency="monthly",
        annualGrowthRate=0.0,
        inflationRate=2.0,
        yearsToGrow=3,
    )

    rows = project(inputs).rows

    expected_totals = [2200.0, 3400.0, 4600.0]
    prev = 0.0
    for row, expected_total in zip(rows, expected_totals):
        assert isclose(row.contribution, 1200.0, abs_tol=0.01)
        assert isclose(row.growth, 0.0, abs_tol=0.0)
        assert isclose(row.balance, expected_total, abs_tol=0.01)
        assert isclose(row.totalContributions, expected_total, abs_tol=0.01)
        assert row.balance >= prev, "balance should not decrease without negative growth"
        prev = row.balance


def test_zero_growth_and_no_contributions_keep_balance_flat():
    inputs = InvestmentInputs(
        startingAmount=5000.0,
        contributionAmount=0.0,
        contributionFrequency="annual",
        annualGrowthRate=0.0,
        inflationRate=2.5,
        yearsToGrow=10,
    )

    summary = project(inputs)

    assert len(summary.rows) == 10
    #balance never moves; only the real value erodes
    for row in summary.rows:
        assert row.balance == 5000.0
        assert row.contribution == 0.0
    assert summary.rows[-1].realBalance < 5000.0
