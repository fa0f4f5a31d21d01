"""
Model package — imports all models so Alembic and SQLAlchemy can
discover them automatically when ``flask db`` commands are run.
"""

from jurusan.models.department import (  # noqa: F401
    STATUS_ACTIVE,
    STATUS_INACTIVE,
    STATUSES,
    Department,
)
