"""HTTP routes for the Flask API."""

from http import HTTPStatus
from typing import Any, Dict, Optional

from flask import Blueprint, current_app, jsonify, request
from pydantic import ValidationError

from wealth_planner.core.projection import project
from wealth_planner.errors import ScenarioValidationError
from wealth_planner.schemas.projection import InvestmentInputs
from wealth_planner.schemas.scenario import Identity, Scenario, clean_scenario_name
from wealth_planner.server import repository

api_bp = Blueprint("api", __name__)


def _current_identity() -> Optional[Identity]:
    """Identity forwarded by the auth layer in front of this service."""
    user_id = request.headers.get("X-User-Id", "").strip()
    if not user_id:
        return None
    return Identity(
        id=user_id,
        email=request.headers.get("X-User-Email") or None,
        name=request.headers.get("X-User-Name") or None,
    )


def _unauthorized():
    return jsonify({"error": "Unauthorized"}), HTTPStatus.UNAUTHORIZED


@api_bp.errorhandler(ValidationError)
def _handle_validation_error(exc: ValidationError):
    """Convert Pydantic validation errors into JSON responses."""
    return jsonify({"detail": exc.errors(include_url=False)}), HTTPStatus.UNPROCESSABLE_ENTITY


@api_bp.errorhandler(ScenarioValidationError)
def _handle_scenario_validation_error(exc: ScenarioValidationError):
    return jsonify({"error": "Invalid payload"}), HTTPStatus.BAD_REQUEST


@api_bp.get("/health")
def health() -> Any:
    return jsonify({"status": "ok"})


@api_bp.post("/projection")
def projection() -> Any:
    """Year-by-year projection for a set of inputs."""
    raw_payload: Dict[str, Any] = request.get_json(force=True, silent=False)
    inputs = InvestmentInputs.model_validate(raw_payload)
    return jsonify(project(inputs).model_dump())


@api_bp.get("/scenarios")
def list_scenarios() -> Any:
    identity = _current_identity()
    if identity is None:
        return _unauthorized()
    records = repository.list_scenarios(current_app.config["DATABASE"], identity.id)
    return jsonify(records)


@api_bp.post("/scenarios")
def create_scenario() -> Any:
    identity = _current_identity()
    if identity is None:
        return _unauthorized()

    raw_payload = request.get_json(silent=True)
    if not isinstance(raw_payload, dict) or not isinstance(raw_payload.get("inputs"), dict):
        raise ScenarioValidationError("Scenario payload must include a name and inputs.")
    name = clean_scenario_name(raw_payload.get("name"))
    inputs = InvestmentInputs.model_validate(raw_payload["inputs"])

    record = repository.create_scenario(current_app.config["DATABASE"], identity.id, name, inputs)
    current_app.logger.info("Created scenario %s for user %s", record["id"], identity.id)
    return jsonify(Scenario.model_validate(record).model_dump(mode="json")), HTTPStatus.CREATED


@api_bp.delete("/scenarios/<scenario_id>")
def delete_scenario(scenario_id: str) -> Any:
    identity = _current_identity()
    if identity is None:
        return _unauthorized()
    deleted = repository.delete_scenario(current_app.config["DATABASE"], identity.id, scenario_id)
    if not deleted:
        return jsonify({"error": "Not found"}), HTTPStatus.NOT_FOUND
    current_app.logger.info("Deleted scenario %s for user %s", scenario_id, identity.id)
    return jsonify({"id": scenario_id})
