"""
Shared route helpers.
"""

from flask import current_app, request

from repositories import Repository, get_repository
from transfer import TransferService, SessionRegistry


def get_repo() -> Repository:
    """Repository for this app (overridable through app.config['REPOSITORY'])."""
    return current_app.config.get("REPOSITORY") or get_repository()


def get_service() -> TransferService:
    return TransferService(get_repo())


def get_sessions() -> SessionRegistry:
    return current_app.extensions["import_sessions"]


def read_snapshot_payload() -> bytes:
    """
    Snapshot bytes from a request.

    Accepts a multipart upload (`file`), a JSON body with `jsonData`
    (string), or a raw JSON body.
    """
    if "file" in request.files:
        return request.files["file"].read()

    body = request.get_json(silent=True)
    if isinstance(body, dict) and isinstance(body.get("jsonData"), str):
        return body["jsonData"].encode("utf-8")

    return request.get_data()


def json_body() -> dict:
    body = request.get_json(silent=True)
    return body if isinstance(body, dict) else {}
