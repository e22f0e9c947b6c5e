"""
Discourse session API routes.

Each action maps to one state-machine transition. Guards that do not hold
come back as 400/404/409 with an error message; provider failures never
surface here, they only degrade node content.
"""

from flask import jsonify

from weitblick import classify
from weitblick.errors import WeitblickError
from . import discourse_bp
from .helpers import (
    registry,
    run_async,
    load_credentials,
    get_json,
    error_response,
    session_payload,
)


def _session_or_404(session_id: str):
    session = registry.get(session_id)
    if session is None:
        return None, (jsonify({"error": "Session not found"}), 404)
    # Pick up credential changes made since the session was created
    session.credentials = load_credentials()
    return session, None


@discourse_bp.route("/api/classify", methods=["POST"])
def classify_text():
    """Classify text without starting a session."""
    text = str(get_json().get("text") or "")
    return jsonify(classify(text).to_dict())


@discourse_bp.route("/api/sessions", methods=["POST"])
def create_session():
    data = get_json()
    try:
        session_id, session = registry.create(
            credentials=load_credentials(),
            strategy=data.get("strategy"),
        )
    except ValueError as e:
        return error_response(e)
    return jsonify(session_payload(session_id, session)), 201


@discourse_bp.route("/api/sessions/<session_id>")
def get_session(session_id: str):
    session, missing = _session_or_404(session_id)
    if missing:
        return missing
    return jsonify(session_payload(session_id, session))


@discourse_bp.route("/api/sessions/<session_id>", methods=["DELETE"])
def delete_session(session_id: str):
    if not registry.delete(session_id):
        return jsonify({"error": "Session not found"}), 404
    return jsonify({"status": "deleted"})


@discourse_bp.route("/api/sessions/<session_id>/start", methods=["POST"])
def start_session(session_id: str):
    """Submit the idea and generate the level-0 nodes."""
    session, missing = _session_or_404(session_id)
    if missing:
        return missing

    data = get_json()
    try:
        nodes = run_async(session.start(data.get("idea", ""), mode=data.get("mode", "perspectives")))
    except (WeitblickError, ValueError) as e:
        return error_response(e)

    payload = session_payload(session_id, session)
    payload["created"] = [n.id for n in nodes]
    return jsonify(payload)


@discourse_bp.route("/api/sessions/<session_id>/select", methods=["POST"])
def select_node(session_id: str):
    session, missing = _session_or_404(session_id)
    if missing:
        return missing
    try:
        session.select(get_json().get("node_id", ""))
    except WeitblickError as e:
        return error_response(e)
    return jsonify(session_payload(session_id, session))


@discourse_bp.route("/api/sessions/<session_id>/quintessence", methods=["POST"])
def generate_quintessence(session_id: str):
    session, missing = _session_or_404(session_id)
    if missing:
        return missing

    level = get_json().get("level")
    try:
        level = int(level) if level is not None else None
    except (TypeError, ValueError):
        return error_response(ValueError(f"Invalid level: {level!r}"))
    try:
        node = run_async(session.generate_quintessence(level))
    except (WeitblickError, ValueError) as e:
        return error_response(e)

    payload = session_payload(session_id, session)
    payload["created"] = [node.id]
    return jsonify(payload)


@discourse_bp.route("/api/sessions/<session_id>/think-forward", methods=["POST"])
def think_forward(session_id: str):
    session, missing = _session_or_404(session_id)
    if missing:
        return missing

    try:
        nodes = run_async(session.think_forward(get_json().get("node_id")))
    except WeitblickError as e:
        return error_response(e)

    payload = session_payload(session_id, session)
    payload["created"] = [n.id for n in nodes]
    return jsonify(payload)


@discourse_bp.route("/api/sessions/<session_id>/reset", methods=["POST"])
def reset_session(session_id: str):
    session, missing = _session_or_404(session_id)
    if missing:
        return missing
    session.reset()
    return jsonify(session_payload(session_id, session))


@discourse_bp.route("/api/sessions/<session_id>/cancel", methods=["POST"])
def cancel_session(session_id: str):
    """Stop waiting on providers; the running transition finishes with fallback text."""
    session, missing = _session_or_404(session_id)
    if missing:
        return missing
    session.cancel()
    return jsonify(session_payload(session_id, session))
