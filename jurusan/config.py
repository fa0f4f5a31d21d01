"""
Application configuration classes.

Each class represents a deployment environment. The factory function
``create_app`` in ``jurusan/__init__.py`` selects the appropriate config
based on the FLASK_ENV environment variable.

Connection strings default to SQLite files so the service runs without
external infrastructure.  Point ``DATABASE_URL`` at MySQL or PostgreSQL
(any SQLAlchemy URL) for real deployments.
"""

import logging
import os

# Module-level logger for startup warnings emitted by config classes.
_logger = logging.getLogger(__name__)

# Sentinel for detecting unset SECRET_KEY in production.
_DEFAULT_SECRET_KEY = "dev-secret-change-me"


class BaseConfig:
    """
    Shared configuration values inherited by all environments.

    Secrets and connection strings are loaded from environment variables
    so they never appear in source control.
    """

    # -- Flask core --------------------------------------------------------
    SECRET_KEY: str = os.environ.get("SECRET_KEY", _DEFAULT_SECRET_KEY)

    # Keep response keys in insertion order (draw, recordsTotal, ...).
    JSON_SORT_KEYS: bool = False

    # -- SQLAlchemy --------------------------------------------------------
    SQLALCHEMY_DATABASE_URI: str = os.environ.get(
        "DATABASE_URL", "sqlite:///jurusan.db"
    )
    SQLALCHEMY_TRACK_MODIFICATIONS: bool = False

    # Echo SQL statements to the log for debugging (override per env).
    SQLALCHEMY_ECHO: bool = False

    # -- Department records ------------------------------------------------
    # Prefix and zero-pad width of generated record IDs (J-001, J-002, ...).
    DEPARTMENT_ID_PREFIX: str = "J-"
    DEPARTMENT_ID_WIDTH: int = 3

    # -- Logging -----------------------------------------------------------
    LOG_LEVEL: str = os.environ.get("LOG_LEVEL", "INFO")

    @classmethod
    def validate_production_secrets(cls, app_config: dict) -> None:
        """
        Verify that all required settings are sane for production.

        Called by ``create_app()`` when ``config_name == 'production'``.

        Raises:
            RuntimeError: If SECRET_KEY is still the insecure default.
        """
        if app_config.get("SECRET_KEY") == _DEFAULT_SECRET_KEY:
            raise RuntimeError(
                "SECRET_KEY must be set to a secure random value in production."
            )

        # SQLite is fine for a demo box but not for concurrent writers.
        if app_config.get("SQLALCHEMY_DATABASE_URI", "").startswith("sqlite"):
            _logger.warning(
                "Production is running on SQLite. Set DATABASE_URL to a "
                "server database for concurrent use."
            )

        if app_config.get("LOG_LEVEL", "").upper() == "DEBUG":
            _logger.warning(
                "LOG_LEVEL=DEBUG is not recommended in production: "
                "SQL statements may appear in logs."
            )


class DevelopmentConfig(BaseConfig):
    """Development environment: verbose logging, SQL echo enabled."""

    DEBUG: bool = True
    SQLALCHEMY_ECHO: bool = True
    LOG_LEVEL: str = os.environ.get("LOG_LEVEL", "DEBUG")


class TestingConfig(BaseConfig):
    """
    Testing environment: in-memory SQLite unless TEST_DATABASE_URL is set.

    Tests create and drop the schema around every test function.
    """

    TESTING: bool = True
    SQLALCHEMY_DATABASE_URI: str = os.environ.get(
        "TEST_DATABASE_URL", "sqlite:///:memory:"
    )
    LOG_LEVEL: str = "DEBUG"


class ProductionConfig(BaseConfig):
    """
    Production environment: strict settings, no debug output.

    The application factory calls ``validate_production_secrets()`` at
    startup and will refuse to launch if SECRET_KEY is the default.
    """

    DEBUG: bool = False
    SQLALCHEMY_ECHO: bool = False
    LOG_LEVEL: str = os.environ.get("LOG_LEVEL", "WARNING")


# Lookup dict used by the application factory.
config_by_name: dict[str, type[BaseConfig]] = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
}
