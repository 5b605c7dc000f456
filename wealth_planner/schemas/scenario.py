"""Data contracts for saved scenarios and the identity that owns them."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from wealth_planner.errors import ScenarioValidationError
from wealth_planner.schemas.projection import InvestmentInputs

MAX_NAME_LENGTH = 80


def utc_timestamp(moment: Optional[datetime] = None) -> str:
    """ISO-8601 UTC string with millisecond precision, e.g. 2024-05-01T12:00:00.000Z."""
    moment = moment or datetime.now(timezone.utc)
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def clean_scenario_name(raw: object) -> str:
    if not isinstance(raw, str) or not raw.strip():
        raise ScenarioValidationError("Scenario name is required.")
    return raw.strip()[:MAX_NAME_LENGTH]


class Scenario(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: str = Field(min_length=1)
    name: str = Field(min_length=1, max_length=MAX_NAME_LENGTH)
    createdAt: str
    inputs: InvestmentInputs


class ScenarioCreate(BaseModel):
    """Body of POST /api/scenarios."""

    model_config = ConfigDict(extra="forbid")

    name: str
    inputs: InvestmentInputs


class Identity(BaseModel):
    """Authenticated user as reported by the session provider."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    email: Optional[str] = None
    name: Optional[str] = None


class ScenarioPanel(BaseModel):
    """What the scenario list view renders."""

    scenarios: List[Scenario]
    loading: bool
    error: Optional[str] = None
    isAuthenticated: bool
