"""
Credential API routes - store, inspect and remove provider keys.

Secrets are accepted but never returned; responses carry only configured
flags and masked keys.
"""

from flask import jsonify

from models import ProviderId, PROVIDER_LABELS
from repositories import get_credential_store
from weitblick.errors import InvalidCredential
from . import credentials_bp
from .helpers import get_json


def _status() -> dict:
    masked = get_credential_store().load().masked()
    for provider in ProviderId:
        masked[provider.value]["label"] = PROVIDER_LABELS[provider]
    return masked


def _provider_or_none(provider: str):
    try:
        return ProviderId(provider)
    except ValueError:
        return None


@credentials_bp.route("/api/credentials")
def get_credentials():
    return jsonify(_status())


@credentials_bp.route("/api/credentials/<provider>", methods=["PUT"])
def set_credential(provider: str):
    pid = _provider_or_none(provider)
    if pid is None:
        return jsonify({"error": f"Unknown provider: {provider}"}), 404

    key = get_json().get("key", "")
    try:
        get_credential_store().set(pid, key)
    except InvalidCredential as e:
        return jsonify({"error": str(e)}), 400
    return jsonify({"status": "saved", "credentials": _status()})


@credentials_bp.route("/api/credentials/<provider>", methods=["DELETE"])
def remove_credential(provider: str):
    pid = _provider_or_none(provider)
    if pid is None:
        return jsonify({"error": f"Unknown provider: {provider}"}), 404

    removed = get_credential_store().remove(pid)
    return jsonify({"status": "removed" if removed else "absent", "credentials": _status()})
