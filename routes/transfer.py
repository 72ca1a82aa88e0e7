"""
Transfer API routes - export, import preview/execute, import sessions.

Stateless endpoints mirror the engine boundary one to one. The session
endpoints run the same calls through an ImportSession so a client can
follow the upload -> preview -> conflicts -> import workflow.
"""

from flask import jsonify, request, Response
from pydantic import ValidationError

from models import ExportKind, ConflictResolution
from . import transfer_bp
from .helpers import get_service, get_sessions, read_snapshot_payload, json_body


@transfer_bp.route("/api/export/<kind>", methods=["GET", "POST"])
def export(kind):
    """
    Export a selection.

    ids come from ?ids=a,b or a JSON body {"ids": [...]}. With
    ?download=1 the snapshot itself is returned as an attachment.
    """
    try:
        export_kind = ExportKind(kind)
    except ValueError:
        return jsonify({"error": f"Unknown export kind: {kind}", "code": "INVALID_INPUT"}), 400

    ids = json_body().get("ids")
    if ids is None and request.args.get("ids"):
        ids = [i for i in request.args["ids"].split(",") if i]

    result = get_service().export_selection(export_kind, ids or [])

    if request.args.get("download"):
        return Response(
            result.data,
            mimetype="application/json",
            headers={"Content-Disposition": f'attachment; filename="{result.file_name}"'},
        )

    return jsonify({
        "data": result.data.decode("utf-8"),
        "fileName": result.file_name,
        "metadata": result.metadata.to_wire(),
    })


@transfer_bp.route("/api/import/preview", methods=["POST"])
def preview():
    preview = get_service().preview_import(read_snapshot_payload())
    return jsonify(preview.to_wire())


def _parse_resolutions(raw) -> list[ConflictResolution]:
    return [ConflictResolution.model_validate(r) for r in (raw or [])]


@transfer_bp.route("/api/import/execute", methods=["POST"])
def execute():
    """Body: {"jsonData": "...", "conflictResolutions": [...]}"""
    body = json_body()
    try:
        resolutions = _parse_resolutions(body.get("conflictResolutions"))
    except ValidationError as e:
        return jsonify({"error": str(e), "code": "INVALID_INPUT"}), 400

    result = get_service().execute_import(read_snapshot_payload(), resolutions)
    return jsonify(result.to_wire())


# === Import sessions ===

def _session_or_404(session_id):
    session = get_sessions().get(session_id)
    if session is None:
        return None, (jsonify({"error": "Session not found", "code": "NOT_FOUND"}), 404)
    return session, None


@transfer_bp.route("/api/import/sessions", methods=["POST"])
def open_session():
    """Upload a file: opens a session already in PREVIEW."""
    sessions = get_sessions()
    session = sessions.open(get_service())
    file_name = request.files["file"].filename if "file" in request.files else json_body().get("fileName")
    try:
        session.load(read_snapshot_payload(), file_name)
    except Exception:
        sessions.close(session.id)
        raise
    return jsonify(session.to_dict()), 201


@transfer_bp.route("/api/import/sessions/<session_id>")
def get_session(session_id):
    session, error = _session_or_404(session_id)
    if error:
        return error
    return jsonify(session.to_dict())


@transfer_bp.route("/api/import/sessions/<session_id>/conflicts", methods=["POST"])
def open_conflicts(session_id):
    session, error = _session_or_404(session_id)
    if error:
        return error
    session.open_conflicts()
    return jsonify(session.to_dict())


@transfer_bp.route("/api/import/sessions/<session_id>/preview", methods=["POST"])
def back_to_preview(session_id):
    session, error = _session_or_404(session_id)
    if error:
        return error
    session.back_to_preview()
    return jsonify(session.to_dict())


@transfer_bp.route("/api/import/sessions/<session_id>/resolutions", methods=["PUT"])
def set_resolutions(session_id):
    """Body: {"resolutions": [{"originalId", "resolution", "type"?}]}"""
    session, error = _session_or_404(session_id)
    if error:
        return error
    try:
        for r in _parse_resolutions(json_body().get("resolutions")):
            session.set_resolution(r.original_id, r.resolution, r.type)
    except ValidationError as e:
        return jsonify({"error": str(e), "code": "INVALID_INPUT"}), 400
    return jsonify(session.to_dict())


@transfer_bp.route("/api/import/sessions/<session_id>/execute", methods=["POST"])
def execute_session(session_id):
    session, error = _session_or_404(session_id)
    if error:
        return error
    session.start_import()
    payload = session.to_dict()
    # Finished sessions are not kept once the result is handed out
    get_sessions().discard(session.id)
    return jsonify(payload)


@transfer_bp.route("/api/import/sessions/<session_id>", methods=["DELETE"])
def close_session(session_id):
    if not get_sessions().close(session_id):
        return jsonify({"error": "Session not found", "code": "NOT_FOUND"}), 404
    return jsonify({"success": True})
