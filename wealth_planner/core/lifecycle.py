"""Owns the current inputs and the scenario list shown next to them.

The controller runs on a single asyncio event loop. Store calls are awaited,
so a save or a list fetch can still be outstanding when the identity changes
again; results are applied only if the generation they started in is still
the current one.
"""

from __future__ import annotations

import logging
import math
from enum import Enum
from typing import List, Optional, Tuple

from pydantic import ValidationError

from wealth_planner.core.projection import project
from wealth_planner.core.storage import KeyValueStorage
from wealth_planner.core.stores import ScenarioStore, select_store
from wealth_planner.core.transport import Transport
from wealth_planner.errors import (
    ScenarioDeleteError,
    ScenarioLoadError,
    ScenarioSaveError,
)
from wealth_planner.schemas.projection import (
    DEFAULT_INPUTS,
    InvestmentInputs,
    ProjectionSummary,
)
from wealth_planner.schemas.scenario import (
    Identity,
    Scenario,
    ScenarioPanel,
    clean_scenario_name,
)

logger = logging.getLogger(__name__)

LOAD_ERROR_MESSAGE = "Unable to load saved scenarios."
SAVE_ERROR_MESSAGE = "We couldn't save this scenario. Please try again in a moment."
DELETE_ERROR_MESSAGE = "Unable to delete this scenario right now."

NUMERIC_FIELDS = (
    "startingAmount",
    "contributionAmount",
    "annualGrowthRate",
    "inflationRate",
    "yearsToGrow",
)


class Mode(str, Enum):
    GUEST = "guest"
    AUTHENTICATED = "authenticated"


class Phase(str, Enum):
    UNINITIALIZED = "uninitialized"
    LOADING = "loading"
    READY = "ready"


class ScenarioController:
    def __init__(
        self,
        storage: KeyValueStorage,
        transport: Optional[Transport] = None,
        inputs: InvestmentInputs = DEFAULT_INPUTS,
    ):
        self.storage = storage
        self.transport = transport
        self._identity: Optional[Identity] = None
        self._store: Optional[ScenarioStore] = None
        self._phase = Phase.UNINITIALIZED
        self._generation = 0
        # generation of the save currently in flight, if any
        self._save_generation: Optional[int] = None
        self._scenarios: List[Scenario] = []
        self.load_error: Optional[str] = None
        self.error: Optional[str] = None
        self._set_inputs(inputs)

    # ---- read-only state ----

    @property
    def identity(self) -> Optional[Identity]:
        return self._identity

    @property
    def mode(self) -> Mode:
        return Mode.AUTHENTICATED if self._identity is not None else Mode.GUEST

    @property
    def phase(self) -> Phase:
        return self._phase

    @property
    def inputs(self) -> InvestmentInputs:
        return self._inputs

    @property
    def summary(self) -> ProjectionSummary:
        return self._summary

    @property
    def scenarios(self) -> Tuple[Scenario, ...]:
        return tuple(self._scenarios)

    @property
    def loading(self) -> bool:
        return self._phase is Phase.LOADING

    @property
    def saving(self) -> bool:
        return self._save_generation is not None

    @property
    def can_save(self) -> bool:
        return self._phase is Phase.READY and not self.saving

    def scenario_panel(self) -> ScenarioPanel:
        return ScenarioPanel(
            scenarios=list(self._scenarios),
            loading=self.loading,
            error=self.load_error,
            isAuthenticated=self.mode is Mode.AUTHENTICATED,
        )

    # ---- inputs ----

    def _set_inputs(self, inputs: InvestmentInputs) -> None:
        self._inputs = inputs
        self._summary = project(inputs)

    def update_input(self, field: str, raw_value: object) -> bool:
        """Apply a value typed into one of the numeric fields.

        Values that do not parse, or that the inputs model rejects, leave the
        previous inputs untouched. Returns whether anything changed.
        """
        if field not in NUMERIC_FIELDS:
            raise ValueError(f"Unknown input field {field!r}")
        try:
            value = float(raw_value)
        except (TypeError, ValueError):
            return False
        if not math.isfinite(value):
            return False
        if field == "yearsToGrow":
            if not value.is_integer():
                return False
            value = int(value)
        try:
            updated = self._inputs.replace(field, value)
        except ValidationError:
            return False
        self._set_inputs(updated)
        return True

    def set_frequency(self, frequency: str) -> bool:
        try:
            updated = self._inputs.replace("contributionFrequency", frequency)
        except ValidationError:
            return False
        self._set_inputs(updated)
        return True

    def reset_inputs(self) -> None:
        self._set_inputs(DEFAULT_INPUTS)

    # ---- mode transitions ----

    async def set_identity(self, identity: Optional[Identity]) -> None:
        """Switch to the store for ``identity`` (None means guest) and load it."""
        self._generation += 1
        generation = self._generation

        self._identity = identity
        self._scenarios = []
        self.load_error = None
        self.error = None
        self._save_generation = None
        self._store = select_store(identity, self.storage, self.transport)
        self._phase = Phase.LOADING
        logger.info("Loading scenarios in %s mode", self.mode.value)

        try:
            scenarios = await self._store.list()
        except ScenarioLoadError:
            scenarios = []
            if generation == self._generation:
                self.load_error = LOAD_ERROR_MESSAGE

        if generation != self._generation:
            logger.debug("Discarding scenario list from stale generation %s", generation)
            return
        self._scenarios = list(scenarios)
        self._phase = Phase.READY

    async def reload(self) -> None:
        await self.set_identity(self._identity)

    # ---- scenario operations ----

    async def save(self, name: str) -> Optional[Scenario]:
        """Save the current inputs under ``name``.

        Returns None when the save is refused (not ready, or another save is
        still in flight) or fails; failures set ``error``.
        """
        if not self.can_save:
            logger.debug("Refusing save while %s", "saving" if self.saving else self._phase.value)
            return None
        clean_scenario_name(name)

        generation = self._generation
        store = self._store
        self._save_generation = generation
        self.error = None
        try:
            scenario = await store.save(name, self._inputs)
        except ScenarioSaveError:
            if generation == self._generation:
                self.error = SAVE_ERROR_MESSAGE
            return None
        finally:
            if self._save_generation == generation:
                self._save_generation = None

        if generation != self._generation:
            return None
        self._scenarios = [scenario, *self._scenarios][: store.capacity]
        return scenario

    def load_into_inputs(self, scenario_id: str) -> bool:
        if self._phase is not Phase.READY:
            return False
        for scenario in self._scenarios:
            if scenario.id == scenario_id:
                self._set_inputs(scenario.inputs)
                return True
        return False

    async def delete(self, scenario_id: str, confirmed: bool = False) -> bool:
        """Delete a scenario the user has already confirmed removing."""
        if not confirmed or self._phase is not Phase.READY:
            return False

        generation = self._generation
        store = self._store
        self.error = None
        try:
            await store.delete(scenario_id)
        except ScenarioDeleteError:
            if generation == self._generation:
                self.error = DELETE_ERROR_MESSAGE
            return False

        if generation != self._generation:
            return False
        self._scenarios = [scenario for scenario in self._scenarios if scenario.id != scenario_id]
        return True
