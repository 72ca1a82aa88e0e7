"""
Library CRUD routes - themes, theme groups, extracts.

Thin plumbing over the repository; constraint violations surface as
StoreError and are mapped to HTTP by the app's error handlers.
"""

from flask import jsonify, request
from pydantic import ValidationError

from models import Theme, ThemeGroup, Extract
from repositories import EntityNotFoundError
from . import library_bp
from .helpers import get_repo, json_body


def _bad_request(error: ValidationError):
    return jsonify({"error": str(error), "code": "INVALID_INPUT"}), 400


def _fields(data: dict, *names: str) -> dict:
    """Only the given keys, dropping nulls so model defaults apply."""
    return {k: data[k] for k in names if data.get(k) is not None}


@library_bp.route("/api/themes")
def list_themes():
    """List themes with their derived extract counts."""
    library = get_repo().read_all()
    return jsonify([
        {**t.model_dump(mode="json"), "extract_count": library.extract_count(t.id)}
        for t in library.themes
    ])


@library_bp.route("/api/themes", methods=["POST"])
def create_theme():
    data = json_body()
    try:
        theme = Theme.model_validate(_fields(data, "name", "description", "color"))
    except ValidationError as e:
        return _bad_request(e)

    created = get_repo().themes.create(theme)
    return jsonify(created.model_dump(mode="json")), 201


@library_bp.route("/api/themes/<theme_id>", methods=["DELETE"])
def delete_theme(theme_id):
    if not get_repo().themes.delete(theme_id):
        raise EntityNotFoundError("theme", theme_id)
    return jsonify({"success": True})


@library_bp.route("/api/theme-groups")
def list_theme_groups():
    library = get_repo().read_all()
    return jsonify([
        {**g.model_dump(mode="json"), "extract_count": library.group_extract_count(g)}
        for g in library.theme_groups
    ])


@library_bp.route("/api/theme-groups", methods=["POST"])
def create_theme_group():
    data = json_body()
    try:
        group = ThemeGroup.model_validate(_fields(data, "name", "description", "color", "theme_ids"))
    except ValidationError as e:
        return _bad_request(e)

    created = get_repo().theme_groups.create(group)
    return jsonify(created.model_dump(mode="json")), 201


@library_bp.route("/api/theme-groups/<group_id>", methods=["DELETE"])
def delete_theme_group(group_id):
    if not get_repo().theme_groups.delete(group_id):
        raise EntityNotFoundError("theme group", group_id)
    return jsonify({"success": True})


@library_bp.route("/api/extracts")
def list_extracts():
    """List extracts, optionally filtered by ?theme_id=."""
    repo = get_repo()
    theme_id = request.args.get("theme_id")
    extracts = repo.extracts.for_theme(theme_id) if theme_id else repo.extracts.list()
    return jsonify([e.model_dump(mode="json") for e in extracts])


@library_bp.route("/api/extracts", methods=["POST"])
def create_extract():
    data = json_body()
    # Owned by the video builder, never set through this route
    data.pop("is_used_in_video", None)
    data.pop("id", None)
    try:
        extract = Extract.model_validate(data)
    except ValidationError as e:
        return _bad_request(e)

    created = get_repo().extracts.create(extract)
    return jsonify(created.model_dump(mode="json")), 201


@library_bp.route("/api/extracts/<extract_id>", methods=["DELETE"])
def delete_extract(extract_id):
    if not get_repo().extracts.delete(extract_id):
        raise EntityNotFoundError("extract", extract_id)
    return jsonify({"success": True})
