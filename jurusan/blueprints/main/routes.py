"""
Routes for the main blueprint — service index and health check.
"""

from flask import url_for
from sqlalchemy import text

from jurusan.blueprints.main import bp
from jurusan.extensions import db


@bp.route("/")
def index():
    """Describe the service and where the department API lives."""
    return {
        "service": "jurusan",
        "departments": url_for("departments.list_departments"),
    }


@bp.route("/health")
def health_check():
    """
    Health check endpoint for monitoring and load balancers.

    Returns 200 if the app is running and can reach the database.
    """
    try:
        db.session.execute(text("SELECT 1"))
        return {"status": "healthy", "database": "connected"}, 200
    except Exception as exc:  # pylint: disable=broad-except
        return {"status": "unhealthy", "database": str(exc)}, 503
