"""
Pytest configuration and shared fixtures.

Provides a test application, a clean database per test, and a test
client.  Uses the ``testing`` configuration, which points at an
in-memory SQLite database unless TEST_DATABASE_URL is set.
"""

import pytest

from jurusan import create_app
from jurusan.extensions import db as _db


@pytest.fixture(scope="session")
def app():
    """
    Create a Flask application configured for testing.

    The app is created once per test session with an application
    context held open for the entire session.
    """
    app = create_app("testing")

    with app.app_context():
        yield app


@pytest.fixture(scope="function")
def db_session(app):  # pylint: disable=redefined-outer-name
    """
    Provide a clean database session for each test function.

    The schema is created before the test and dropped afterwards, so
    every test starts from an empty jurusan table and ID sequence.
    """
    _db.create_all()

    yield _db.session

    _db.session.remove()
    _db.drop_all()


@pytest.fixture(scope="function")
def client(app, db_session):  # pylint: disable=redefined-outer-name,unused-argument
    """
    Provide a Flask test client backed by a clean database.

    Usage in tests::

        def test_list(client):
            response = client.get("/api/departments")
            assert response.status_code == 200
    """
    with app.test_client() as test_client:
        yield test_client
