"""Application factory and app-wide configuration."""

import os
from typing import Any, Mapping, Optional

from flask import Flask
from flask_cors import CORS

from wealth_planner.app.api.routes import api_bp
from wealth_planner.server.repository import init_db

DEV_ORIGINS = [
    "http://localhost:3000",
    "http://localhost:5173",
    "http://127.0.0.1:3000",
    "http://127.0.0.1:5173",
]


def create_app(config: Optional[Mapping[str, Any]] = None) -> Flask:
    """Build the Flask app instance.

    Settings resolve in order: built-in defaults, WEALTH_PLANNER_* environment
    variables, then ``config``.
    """
    app = Flask(__name__, instance_relative_config=True)
    app.config.from_mapping(
        DATABASE=os.path.join(app.instance_path, "scenarios.sqlite"),
        CORS_ORIGINS=DEV_ORIGINS,
        LOG_LEVEL="INFO",
    )
    app.config.from_prefixed_env("WEALTH_PLANNER")
    if config:
        app.config.update(config)

    app.logger.setLevel(app.config["LOG_LEVEL"])

    CORS(
        app,
        resources={r"/api/*": {"origins": app.config["CORS_ORIGINS"]}},
        supports_credentials=True,
    )

    init_db(app.config["DATABASE"])
    app.register_blueprint(api_bp, url_prefix="/api")
    return app
