#!/usr/bin/env python3
"""
Theme Library Web API

Flask app exposing library CRUD and the export/import engine.
"""

import logging
from typing import Optional

from flask import Flask, jsonify

from config import get_settings, setup_logging
from repositories import (
    Repository,
    StoreError,
    DuplicateNameError,
    MissingReferenceError,
    EntityNotFoundError,
)
from routes import library_bp, transfer_bp
from transfer import (
    TransferError,
    SessionError,
    SessionBusyError,
    InvalidTransitionError,
    UnknownConflictError,
    SessionRegistry,
)

logger = logging.getLogger(__name__)


def _error(error: Exception, status: int):
    code = getattr(error, "code", "ERROR")
    return jsonify({"error": str(error), "code": code}), status


def register_error_handlers(app: Flask) -> None:
    """Map engine and store errors to JSON responses."""

    @app.errorhandler(TransferError)
    def handle_transfer_error(e):
        return jsonify(e.to_dict()), 400

    @app.errorhandler(SessionError)
    def handle_session_error(e):
        if isinstance(e, UnknownConflictError):
            return _error(e, 404)
        status = 409 if isinstance(e, (SessionBusyError, InvalidTransitionError)) else 400
        return _error(e, status)

    @app.errorhandler(StoreError)
    def handle_store_error(e):
        if isinstance(e, EntityNotFoundError):
            return _error(e, 404)
        if isinstance(e, (DuplicateNameError, MissingReferenceError)):
            return _error(e, 409)
        logger.error("Store error: %s", e)
        return _error(e, 500)


def create_app(repository: Optional[Repository] = None) -> Flask:
    """Build the Flask app. `repository` overrides the configured backend."""
    app = Flask(__name__)
    app.config["REPOSITORY"] = repository
    app.extensions["import_sessions"] = SessionRegistry()

    app.register_blueprint(library_bp)
    app.register_blueprint(transfer_bp)
    register_error_handlers(app)

    @app.route("/")
    def index():
        """Service description."""
        return jsonify({
            "service": "theme-library",
            "endpoints": sorted(
                rule.rule for rule in app.url_map.iter_rules() if rule.rule.startswith("/api/")
            ),
        })

    return app


app = create_app()


if __name__ == "__main__":
    setup_logging()
    port = get_settings().web_port
    print("\n" + "="*60)
    print("  Theme Library Web API")
    print("="*60)
    print(f"  Listening on http://localhost:{port}")
    print("="*60 + "\n")
    app.run(debug=True, port=port)
