from __future__ import annotations

import threading
from typing import Any, Dict, Optional

import pytest
from flask import Flask
from flask.testing import FlaskClient

from wealth_planner.app import create_app
from wealth_planner.core.transport import TransportResponse
from wealth_planner.schemas.projection import InvestmentInputs
from wealth_planner.schemas.scenario import Identity


class FlaskTransport:
    """Sends remote store requests to the app through the Flask test client.

    Set ``gate`` to an Event to hold requests until the test releases them.
    """

    def __init__(self, app: Flask):
        self.app = app
        self.gate: Optional[threading.Event] = None
        self.calls = []

    def request(
        self,
        method: str,
        path: str,
        payload: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> TransportResponse:
        self.calls.append((method, path))
        if self.gate is not None:
            assert self.gate.wait(5), "gated request was never released"
        client = self.app.test_client()
        resp = client.open(path, method=method, json=payload, headers=headers or {})
        return TransportResponse(resp.status_code, resp.get_data(as_text=True))


class StatusTransport:
    """Answers every request with a fixed status code."""

    def __init__(self, status_code: int, body: str = '{"error": "boom"}'):
        self.status_code = status_code
        self.body = body

    def request(self, method, path, payload=None, headers=None) -> TransportResponse:
        return TransportResponse(self.status_code, self.body)


@pytest.fixture()
def app(tmp_path) -> Flask:
    return create_app(
        {
            "TESTING": True,
            "DATABASE": str(tmp_path / "scenarios.sqlite"),
        }
    )


@pytest.fixture()
def client(app: Flask) -> FlaskClient:
    with app.test_client() as test_client:
        yield test_client


@pytest.fixture()
def transport(app: Flask) -> FlaskTransport:
    return FlaskTransport(app)


@pytest.fixture()
def alice() -> Identity:
    return Identity(id="user-alice", email="alice@example.com", name="Alice")


@pytest.fixture()
def bob() -> Identity:
    return Identity(id="user-bob", email="bob@example.com")


@pytest.fixture()
def sample_inputs() -> InvestmentInputs:
    return InvestmentInputs(
        startingAmount=25000,
        contributionAmount=1200,
        contributionFrequency="annual",
        annualGrowthRate=6,
        inflationRate=3,
        yearsToGrow=15,
    )


@pytest.fixture()
def status_transport():
    return StatusTransport
