"""
API gateway: combines the users and events blueprints.
This is the entrypoint for running the service.
"""

import logging
import sys
from typing import Any, Dict, Optional

from flask import Flask, jsonify
from flask_cors import CORS
from werkzeug.exceptions import BadRequest, HTTPException, InternalServerError

from eventreg.database.db_connection import init_pool
from eventreg.gateway.config import load_config


def register_error_handlers(app: Flask) -> None:
    """
    JSON error responses for framework-level failures.
    Internal details are logged, never returned to the client.
    """

    @app.errorhandler(BadRequest)
    def bad_request(error: BadRequest):
        return jsonify({"error": "Invalid json"}), 400

    @app.errorhandler(404)
    def not_found(error: HTTPException):
        return jsonify({"error": "Not found"}), 404

    @app.errorhandler(405)
    def method_not_allowed(error: HTTPException):
        return jsonify({"error": "Method not allowed"}), 405

    @app.errorhandler(InternalServerError)
    def internal_error(error: InternalServerError):
        original = getattr(error, "original_exception", None)
        logging.error("Unhandled exception", exc_info=original or error)
        return jsonify({"error": "Internal server error"}), 500


def create_app(config: Optional[Dict[str, Any]] = None) -> Flask:
    """
    Application factory for creating the Flask app.

    Args:
        config (dict, optional): Explicit configuration. When omitted the
            environment is read with load_config().

    Returns:
        Flask: The configured Flask application.
    """
    app = Flask(__name__)
    app.config.update(config if config is not None else load_config())

    CORS(app, resources={
        r"/*": {
            "origins": app.config.get("CORS_ORIGINS", "*"),
            "methods": ["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
            "allow_headers": ["Content-Type", "Authorization"],
        }
    })

    init_pool(app)

    # --- REGISTER BLUEPRINTS ---
    from eventreg.auth_service.routes import users_bp
    from eventreg.events_service.routes import events_bp

    app.register_blueprint(users_bp, url_prefix="/users")
    app.register_blueprint(events_bp, url_prefix="/events")

    register_error_handlers(app)

    # --- BASIC HEALTH CHECKPOINTS ---
    @app.route("/")
    def index():
        """
        Root URL lists the main entry points.
        """
        return jsonify({
            "register": "/users/register",
            "login": "/users/login",
            "me": "/users/me",
            "events": "/events/",
        }), 200

    @app.route("/health")
    def health():
        return jsonify({"status": "ok"}), 200

    return app


def main() -> None:
    # Basic console logging during API requests
    logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(asctime)s - %(message)s")

    try:
        app = create_app()
    except RuntimeError as e:
        logging.error(f"Startup failed: {e}")
        sys.exit(1)

    host = app.config["HOST"]
    port = app.config["PORT"]
    logging.info(f"Server running at http://{host}:{port}/events")
    app.run(host=host, port=port)


if __name__ == "__main__":
    main()
