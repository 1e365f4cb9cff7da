import pytest
from flask import Flask

from eventreg.database import db_connection
from eventreg.gateway.config import load_config
from eventreg.gateway.server import create_app


def test_index_lists_routes(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.get_json()["events"] == "/events/"


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.get_json() == {"status": "ok"}


def test_unknown_route_is_json_404(client):
    response = client.get("/nope")
    assert response.status_code == 404
    assert response.get_json() == {"error": "Not found"}


def test_wrong_method_is_json_405(client):
    response = client.put("/events/1", json={})
    assert response.status_code == 405


def test_unhandled_exception_hides_details(mocker):
    app = create_app({"JWT_SECRET": "test_secret"})
    mocker.patch(
        "eventreg.database.queries.list_events",
        side_effect=ValueError("secret internals"),
    )

    response = app.test_client().get("/events/")

    assert response.status_code == 500
    assert response.get_json() == {"error": "Internal server error"}
    assert "secret internals" not in response.get_data(as_text=True)


def test_load_config_requires_secret_and_database(monkeypatch, mocker):
    mocker.patch("eventreg.gateway.config.load_dotenv")
    monkeypatch.delenv("JWT_SECRET", raising=False)
    monkeypatch.setenv("DATABASE_URL", "postgresql://localhost/events")

    with pytest.raises(RuntimeError, match="JWT_SECRET"):
        load_config()

    monkeypatch.setenv("JWT_SECRET", "s3cret")
    monkeypatch.delenv("DATABASE_URL")

    with pytest.raises(RuntimeError, match="DATABASE_URL"):
        load_config()


def test_load_config_defaults(monkeypatch, mocker):
    mocker.patch("eventreg.gateway.config.load_dotenv")
    monkeypatch.setenv("JWT_SECRET", "s3cret")
    monkeypatch.setenv("DATABASE_URL", "postgresql://localhost/events")
    for name in ("TOKEN_LIFETIME", "HOST", "PORT", "CORS_ORIGINS"):
        monkeypatch.delenv(name, raising=False)

    config = load_config()

    assert config["TOKEN_LIFETIME"] == 20000
    assert config["HOST"] == "127.0.0.1"
    assert config["PORT"] == 3000
    assert config["CORS_ORIGINS"] == ["*"]


def test_init_pool_attaches_pool_to_app(mocker):
    pool_cls = mocker.patch("eventreg.database.db_connection.ThreadedConnectionPool")
    mocker.patch("eventreg.database.db_connection.atexit")
    app = Flask(__name__)
    app.config.update(DATABASE_URL="postgresql://localhost/events", DB_POOL_MIN=1, DB_POOL_MAX=5)

    db_connection.init_pool(app)

    assert app.extensions[db_connection.POOL_KEY] is pool_cls.return_value
    assert pool_cls.call_args.args == (1, 5, "postgresql://localhost/events")


def test_get_db_commits_and_returns_connection(mocker):
    pool = mocker.Mock()
    conn = pool.getconn.return_value
    app = Flask(__name__)
    app.extensions[db_connection.POOL_KEY] = pool

    with app.app_context():
        with db_connection.get_db() as borrowed:
            assert borrowed is conn

    conn.commit.assert_called_once()
    conn.rollback.assert_not_called()
    pool.putconn.assert_called_once_with(conn)


def test_get_db_rolls_back_on_error(mocker):
    pool = mocker.Mock()
    conn = pool.getconn.return_value
    app = Flask(__name__)
    app.extensions[db_connection.POOL_KEY] = pool

    with app.app_context():
        with pytest.raises(ValueError):
            with db_connection.get_db():
                raise ValueError("boom")

    conn.rollback.assert_called_once()
    conn.commit.assert_not_called()
    pool.putconn.assert_called_once_with(conn)


def test_get_db_without_pool(app):
    with app.app_context():
        with pytest.raises(RuntimeError):
            with db_connection.get_db():
                pass
