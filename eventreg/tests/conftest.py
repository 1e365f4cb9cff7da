import pytest
from unittest.mock import MagicMock

from eventreg.gateway.server import create_app

TEST_CONFIG = {
    "TESTING": True,
    "JWT_SECRET": "test_secret",
    "TOKEN_LIFETIME": 3600,
}


@pytest.fixture
def app():
    # No DATABASE_URL: the pool is skipped and get_db is patched per test
    return create_app(dict(TEST_CONFIG))


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def mock_db(mocker):
    """
    Mocks the database connection and cursor used by the data access layer.
    """
    mock_conn = MagicMock()
    mock_cursor = MagicMock()

    # Setup the context manager for connection
    mock_conn.__enter__.return_value = mock_conn
    mock_conn.__exit__.return_value = None

    # Setup the context manager for cursor
    mock_cursor.__enter__.return_value = mock_cursor
    mock_cursor.__exit__.return_value = None

    # Connect cursor to connection
    mock_conn.cursor.return_value = mock_cursor

    mocker.patch("eventreg.database.queries.get_db", return_value=mock_conn)

    return mock_conn, mock_cursor


@pytest.fixture
def alice():
    return {"id": 1, "name": "Alice", "username": "alice", "password_hash": "x", "is_admin": False}


@pytest.fixture
def bob():
    return {"id": 2, "name": "Bob", "username": "bob", "password_hash": "x", "is_admin": False}


@pytest.fixture
def admin():
    return {"id": 9, "name": "Admin", "username": "admin", "password_hash": "x", "is_admin": True}


@pytest.fixture
def login_as(mocker):
    """
    Bypass token checks in both blueprints and act as the given user.
    """

    def _login(user):
        for module in ("eventreg.auth_service.routes", "eventreg.events_service.routes"):
            mocker.patch(f"{module}.verify_token_from_request", return_value=(user, None, None))

    return _login
