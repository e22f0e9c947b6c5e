"""
Compass API routes - the guided four-phase questionnaire.
"""

from flask import jsonify

from weitblick import start_compass, answer_phase
from weitblick.compass import compass_to_dict
from weitblick.classify import detect_language
from weitblick.errors import CompassError
from . import compass_bp
from .helpers import registry, get_json


@compass_bp.route("/api/compass", methods=["POST"])
def create_compass():
    data = get_json()
    idea = str(data.get("idea") or "")
    language = str(data.get("language") or "") or detect_language(idea).value
    try:
        run = start_compass(idea, language)
    except CompassError as e:
        return jsonify({"error": str(e)}), 400
    registry.add_compass(run)
    return jsonify(compass_to_dict(run)), 201


@compass_bp.route("/api/compass/<run_id>")
def get_compass(run_id: str):
    run = registry.get_compass(run_id)
    if run is None:
        return jsonify({"error": "Not found"}), 404
    return jsonify(compass_to_dict(run))


@compass_bp.route("/api/compass/<run_id>/answer", methods=["POST"])
def answer_compass(run_id: str):
    run = registry.get_compass(run_id)
    if run is None:
        return jsonify({"error": "Not found"}), 404
    try:
        analysis = answer_phase(run, get_json().get("answer", ""))
    except CompassError as e:
        return jsonify({"error": str(e)}), 400

    data = compass_to_dict(run)
    data["analysis"] = analysis.model_dump()
    return jsonify(data)
