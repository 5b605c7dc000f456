from __future__ import annotations

from wealth_planner.core.projection import project
from wealth_planner.schemas.projection import InvestmentInputs


def test_zero_inflation_keeps_real_balance_equal_to_nominal():
    """
    With zero inflation the deflator never moves, so every real balance equals its nominal balance.
    """
    inputs = InvestmentInputs(
        startingAmount=10000.0,
        contributionAmount=500.0,
        contributionFrequency="monthly",
        annualGrowthRate=7.0,
        inflationRate=0.0,
        yearsToGrow=25,
    )

    summary = project(inputs)

    assert summary.rows, "should include yearly rows"
    for row in summary.rows:
        assert row.realBalance == row.balance
    assert summary.finalRealBalance == summary.finalBalance
