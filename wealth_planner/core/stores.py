"""Scenario persistence behind one {list, save, delete} contract.

LocalScenarioStore keeps scenarios on the device, under a namespace derived
from the active identity. RemoteScenarioStore talks to the /api/scenarios
resource on behalf of an authenticated identity. Callers pick one with
``select_store`` whenever the identity changes and never branch on the
variant afterwards.
"""

from __future__ import annotations

import asyncio
import json
import logging
import math
import uuid
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from urllib.parse import quote

from wealth_planner.core.storage import KeyValueStorage, storage_namespace
from wealth_planner.core.transport import Transport, TransportResponse
from wealth_planner.errors import (
    ScenarioDeleteError,
    ScenarioLoadError,
    ScenarioSaveError,
    TransportError,
)
from wealth_planner.schemas.projection import InvestmentInputs
from wealth_planner.schemas.scenario import (
    Identity,
    MAX_NAME_LENGTH,
    Scenario,
    ScenarioCreate,
    clean_scenario_name,
    utc_timestamp,
)

logger = logging.getLogger(__name__)

MAX_LOCAL_SCENARIOS = 10
SCENARIOS_PATH = "/api/scenarios"


class ScenarioStore(ABC):
    # most entries the store retains; None means unbounded
    capacity: Optional[int] = None

    @abstractmethod
    async def list(self) -> List[Scenario]:
        """Return scenarios newest first."""

    @abstractmethod
    async def save(self, name: str, inputs: InvestmentInputs) -> Scenario:
        """Persist a new scenario and return the stored record."""

    @abstractmethod
    async def delete(self, scenario_id: str) -> None:
        ...


def _normalize_created_at(value: Any) -> str:
    # older payloads stored epoch milliseconds
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return utc_timestamp(datetime.fromtimestamp(value / 1000, tz=timezone.utc))
    if value is None:
        return utc_timestamp()
    return value


def _legacy_record(entry: Dict[str, Any]) -> Dict[str, Any]:
    """Bring an entry written by older clients in line with the Scenario model.

    Older clients kept names of any length and years as typed (e.g. 20.5,
    which only ever simulated 20 whole years).
    """
    record = dict(entry, createdAt=_normalize_created_at(entry.get("createdAt")))
    if isinstance(record.get("name"), str):
        record["name"] = record["name"][:MAX_NAME_LENGTH]
    inputs = record.get("inputs")
    if isinstance(inputs, dict):
        years = inputs.get("yearsToGrow")
        if isinstance(years, float) and math.isfinite(years):
            record["inputs"] = dict(inputs, yearsToGrow=math.floor(years))
    return record


class LocalScenarioStore(ScenarioStore):
    capacity = MAX_LOCAL_SCENARIOS

    def __init__(self, storage: KeyValueStorage, namespace: str):
        self.storage = storage
        self.namespace = namespace

    def _read(self) -> List[Scenario]:
        try:
            raw = self.storage.get(self.namespace)
            if raw is None:
                return []
            parsed = json.loads(raw)
            if not isinstance(parsed, list):
                raise ValueError("stored scenarios are not a list")
        except (ValueError, OSError) as exc:
            logger.warning("Failed to parse scenarios in %s: %s", self.namespace, exc)
            return []

        # one unreadable entry must not cost the user the rest
        scenarios: List[Scenario] = []
        for position, entry in enumerate(parsed):
            try:
                if not isinstance(entry, dict):
                    raise ValueError("stored scenario is not an object")
                scenarios.append(Scenario.model_validate(_legacy_record(entry)))
            except (ValueError, OverflowError, OSError) as exc:
                logger.warning(
                    "Skipping unreadable scenario %s in %s: %s", position, self.namespace, exc
                )
        return scenarios

    def _write(self, scenarios: List[Scenario]) -> None:
        raw = json.dumps([scenario.model_dump(mode="json") for scenario in scenarios])
        self.storage.set(self.namespace, raw)

    async def list(self) -> List[Scenario]:
        return self._read()

    async def save(self, name: str, inputs: InvestmentInputs) -> Scenario:
        scenario = Scenario(
            id=str(uuid.uuid4()),
            name=clean_scenario_name(name),
            createdAt=utc_timestamp(),
            inputs=inputs,
        )
        scenarios = [scenario, *self._read()][: self.capacity]
        try:
            self._write(scenarios)
        except OSError as exc:
            logger.error("Could not write scenarios to %s: %s", self.namespace, exc)
            raise ScenarioSaveError("Failed to save scenario") from exc
        return scenario

    async def delete(self, scenario_id: str) -> None:
        scenarios = [scenario for scenario in self._read() if scenario.id != scenario_id]
        try:
            self._write(scenarios)
        except OSError as exc:
            logger.error("Could not write scenarios to %s: %s", self.namespace, exc)
            raise ScenarioDeleteError(scenario_id, "Failed to delete scenario") from exc


class RemoteScenarioStore(ScenarioStore):
    def __init__(self, transport: Transport, identity: Identity):
        self.transport = transport
        self.identity = identity

    def _headers(self) -> Dict[str, str]:
        headers = {"X-User-Id": self.identity.id}
        if self.identity.email:
            headers["X-User-Email"] = self.identity.email
        if self.identity.name:
            headers["X-User-Name"] = self.identity.name
        return headers

    async def _request(
        self, method: str, path: str, payload: Optional[Dict[str, Any]] = None
    ) -> TransportResponse:
        return await asyncio.to_thread(
            self.transport.request, method, path, payload, self._headers()
        )

    async def list(self) -> List[Scenario]:
        try:
            response = await self._request("GET", SCENARIOS_PATH)
        except TransportError as exc:
            logger.error("Loading cloud scenarios failed: %s", exc)
            raise ScenarioLoadError("Failed to load cloud scenarios") from exc
        if not response.ok:
            logger.error("Loading cloud scenarios returned HTTP %s", response.status_code)
            raise ScenarioLoadError("Failed to load cloud scenarios")
        try:
            return [Scenario.model_validate(item) for item in response.json()]
        except (ValueError, TypeError) as exc:
            logger.error("Cloud scenarios payload was malformed: %s", exc)
            raise ScenarioLoadError("Failed to load cloud scenarios") from exc

    async def save(self, name: str, inputs: InvestmentInputs) -> Scenario:
        body = ScenarioCreate(name=clean_scenario_name(name), inputs=inputs)
        try:
            response = await self._request("POST", SCENARIOS_PATH, body.model_dump(mode="json"))
        except TransportError as exc:
            logger.error("Saving scenario failed: %s", exc)
            raise ScenarioSaveError("Failed to save scenario") from exc
        if not response.ok:
            logger.error("Saving scenario returned HTTP %s", response.status_code)
            raise ScenarioSaveError("Failed to save scenario")
        try:
            return Scenario.model_validate(response.json())
        except ValueError as exc:
            logger.error("Saved scenario payload was malformed: %s", exc)
            raise ScenarioSaveError("Failed to save scenario") from exc

    async def delete(self, scenario_id: str) -> None:
        path = f"{SCENARIOS_PATH}/{quote(scenario_id, safe='')}"
        try:
            response = await self._request("DELETE", path)
        except TransportError as exc:
            logger.error("Deleting scenario %s failed: %s", scenario_id, exc)
            raise ScenarioDeleteError(scenario_id, "Failed to delete scenario") from exc
        if not response.ok:
            logger.error("Deleting scenario %s returned HTTP %s", scenario_id, response.status_code)
            raise ScenarioDeleteError(
                scenario_id, "Failed to delete scenario", status_code=response.status_code
            )


def select_store(
    identity: Optional[Identity],
    storage: KeyValueStorage,
    transport: Optional[Transport] = None,
) -> ScenarioStore:
    """Pick the backend for the current identity.

    Signed-in users go to the remote resource when a transport is configured,
    otherwise they get a device store namespaced by their email.
    """
    if identity is not None and transport is not None:
        return RemoteScenarioStore(transport, identity)
    return LocalScenarioStore(storage, storage_namespace(identity))
