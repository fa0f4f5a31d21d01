"""
Application factory for the Jurusan (academic department) record service.

Usage::

    from jurusan import create_app
    app = create_app()           # Uses FLASK_ENV to pick config.
    app = create_app("testing")  # Explicit config for tests.
"""

import logging
import os

from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from .config import config_by_name
from .extensions import db, migrate


def create_app(config_name: str | None = None) -> Flask:
    """
    Create and configure the Flask application.

    Args:
        config_name: One of 'development', 'testing', or 'production'.
                     Defaults to the FLASK_ENV environment variable,
                     falling back to 'development'.

    Returns:
        A fully configured Flask application instance.
    """
    # Resolve the configuration class.
    if config_name is None:
        config_name = os.environ.get("FLASK_ENV", "development")
    config_class = config_by_name.get(config_name)
    if config_class is None:
        raise ValueError(
            f"Unknown config '{config_name}'. "
            f"Valid options: {list(config_by_name.keys())}"
        )

    app = Flask(__name__)
    app.config.from_object(config_class)
    app.json.sort_keys = app.config["JSON_SORT_KEYS"]

    if config_name == "production":
        config_class.validate_production_secrets(app.config)

    # -- Initialize extensions ---------------------------------------------
    _register_extensions(app)

    # -- Register blueprints -----------------------------------------------
    _register_blueprints(app)

    # -- Register error handlers -------------------------------------------
    _register_error_handlers(app)

    # -- Register custom CLI commands --------------------------------------
    _register_cli_commands(app)

    # -- Configure logging -------------------------------------------------
    _configure_logging(app)

    return app


def _register_extensions(app: Flask) -> None:
    """Bind all Flask extensions to the application instance."""
    db.init_app(app)
    migrate.init_app(app, db)

    # Imported here so the model is registered on db.metadata before
    # Alembic autogenerate or db.create_all() inspects it.
    from . import models  # noqa: F401  pylint: disable=import-outside-toplevel,unused-import


def _register_blueprints(app: Flask) -> None:
    """
    Import and register each blueprint with its URL prefix.

    Blueprints are imported inside this function to avoid circular
    imports — models and services can safely import ``db`` from
    extensions at module level.
    """
    # pylint: disable=import-outside-toplevel

    # Main blueprint: index and health check.
    from .blueprints.main import bp as main_bp

    app.register_blueprint(main_bp)

    # Departments: Jurusan record CRUD API.
    from .blueprints.departments import bp as departments_bp

    app.register_blueprint(departments_bp, url_prefix="/api")


def _error_envelope(message: str, status_code: int):
    """Build the ``{"errors": {"message": [...]}}`` JSON response."""
    return jsonify({"errors": {"message": [message]}}), status_code


def _register_error_handlers(app: Flask) -> None:
    """Render framework-level HTTP errors in the API error envelope."""

    @app.errorhandler(404)
    def not_found(error):  # pylint: disable=unused-argument
        """Handle 404 Not Found errors."""
        return _error_envelope("Resource not found.", 404)

    @app.errorhandler(405)
    def method_not_allowed(error):  # pylint: disable=unused-argument
        """Handle 405 Method Not Allowed errors."""
        return _error_envelope("Method not allowed.", 405)

    @app.errorhandler(HTTPException)
    def http_error(error):
        """Handle any other HTTP error raised by Werkzeug (e.g., bad JSON)."""
        return _error_envelope(error.description or error.name, error.code)

    @app.errorhandler(500)
    def internal_error(error):  # pylint: disable=unused-argument
        """Handle 500 Internal Server Error."""
        db.session.rollback()
        return _error_envelope("Internal server error.", 500)


def _register_cli_commands(app: Flask) -> None:
    """Register custom Flask CLI commands (e.g., flask db-check)."""
    from .cli import register_commands  # pylint: disable=import-outside-toplevel

    register_commands(app)


def _configure_logging(app: Flask) -> None:
    """
    Set up application logging.

    The level comes from ``LOG_LEVEL``.  In debug mode SQLAlchemy's
    engine logger is turned down to warnings.
    """
    log_level = app.config.get("LOG_LEVEL", "INFO")
    logging.basicConfig(level=getattr(logging, log_level, logging.INFO))

    # Quiet down noisy libraries in development.
    if app.debug:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
