"""Data contracts for the growth projection."""

from __future__ import annotations

from typing import List, Literal

from pydantic import BaseModel, ConfigDict, Field

ContributionFrequency = Literal["monthly", "annual"]


class InvestmentInputs(BaseModel):
    """Assumptions the projection runs on. Rates are percentages (8 means 8%)."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    startingAmount: float = Field(ge=0)
    contributionAmount: float = Field(ge=0)
    contributionFrequency: ContributionFrequency = "monthly"
    annualGrowthRate: float
    inflationRate: float
    yearsToGrow: int

    def replace(self, field: str, value: object) -> "InvestmentInputs":
        """Return a validated copy with a single field swapped out."""
        data = self.model_dump()
        data[field] = value
        return InvestmentInputs.model_validate(data)


DEFAULT_INPUTS = InvestmentInputs(
    startingAmount=10000,
    contributionAmount=500,
    contributionFrequency="monthly",
    annualGrowthRate=8,
    inflationRate=2.5,
    yearsToGrow=20,
)


class YearlySnapshot(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    year: int = Field(ge=1)
    # contribution and growth are totals for this year only
    contribution: float
    growth: float
    balance: float
    totalContributions: float
    realBalance: float


class ProjectionSummary(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    rows: List[YearlySnapshot]
    finalBalance: float
    finalRealBalance: float
    totalContributions: float
    totalGrowth: float
