"""Failures raised by the scenario stores and the lifecycle controller."""

from __future__ import annotations

from typing import Optional


class ScenarioError(Exception):
    """Base class for recoverable scenario failures."""


class ScenarioValidationError(ScenarioError, ValueError):
    """Save payload rejected before it reaches a store (e.g. blank name)."""


class ScenarioLoadError(ScenarioError):
    """The remote scenario list could not be fetched."""


class ScenarioSaveError(ScenarioError):
    pass


class ScenarioDeleteError(ScenarioError):
    def __init__(self, scenario_id: str, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.scenario_id = scenario_id
        self.status_code = status_code


class TransportError(ScenarioError):
    """The HTTP request never produced a response."""
