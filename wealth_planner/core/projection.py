from __future__ import annotations

from typing import List

from wealth_planner.schemas.projection import (
    InvestmentInputs,
    ProjectionSummary,
    YearlySnapshot,
)

MONTHS_PER_YEAR = 12


def _contribution_for_month(inputs: InvestmentInputs, month: int) -> float:
    if inputs.contributionFrequency == "monthly":
        return inputs.contributionAmount
    # annual contributions land in the first month of each year
    return inputs.contributionAmount if month == 1 else 0.0


def project(inputs: InvestmentInputs) -> ProjectionSummary:
    """
    Build a year-by-year table by simulating every month of the horizon.

    Order of operations (per month):
      1) Add the contribution (monthly, or month 1 only for annual).
      2) Apply growth on the balance including that contribution.
      3) Grow the inflation factor, but only while the monthly rate is positive.

    Rates are split per month by simple division (annual / 100 / 12).
    One row is recorded at the end of each year; nothing is rounded.
    """
    monthly_growth_rate = inputs.annualGrowthRate / 100 / MONTHS_PER_YEAR
    monthly_inflation_rate = inputs.inflationRate / 100 / MONTHS_PER_YEAR

    balance = float(inputs.startingAmount)
    total_contributions = float(inputs.startingAmount)
    inflation_factor = 1.0

    rows: List[YearlySnapshot] = []
    for year in range(1, inputs.yearsToGrow + 1):
        contribution_this_year = 0.0
        growth_this_year = 0.0

        for month in range(1, MONTHS_PER_YEAR + 1):
            contribution = _contribution_for_month(inputs, month)
            if contribution > 0:
                balance += contribution
                contribution_this_year += contribution
                total_contributions += contribution

            growth = balance * monthly_growth_rate
            balance += growth
            growth_this_year += growth

            # zero or negative inflation leaves the factor alone
            if monthly_inflation_rate > 0:
                inflation_factor *= 1 + monthly_inflation_rate

        rows.append(
            YearlySnapshot(
                year=year,
                contribution=contribution_this_year,
                growth=growth_this_year,
                balance=balance,
                totalContributions=total_contributions,
                realBalance=balance / inflation_factor,
            )
        )

    final_balance = rows[-1].balance if rows else float(inputs.startingAmount)
    final_real_balance = rows[-1].realBalance if rows else final_balance

    return ProjectionSummary(
        rows=rows,
        finalBalance=final_balance,
        finalRealBalance=final_real_balance,
        totalContributions=total_contributions,
        totalGrowth=final_balance - total_contributions,
    )
