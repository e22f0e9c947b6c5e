"""
Shared helpers for the API routes.
"""

import asyncio
import threading
import uuid
from typing import Optional

from flask import jsonify, request

from models import CompassRun, Perspective, PERSPECTIVE_DESCRIPTIONS
from repositories import get_credential_store
from weitblick import DiscourseSession
from weitblick.errors import (
    WeitblickError,
    AnalysisInFlight,
    UnknownNode,
    TransitionRejected,
)


class SessionRegistry:
    """
    In-process registry of interactive sessions.

    Sessions live only as long as the server process; nothing but the
    credential store is persisted.
    """

    def __init__(self):
        self._sessions: dict[str, DiscourseSession] = {}
        self._compass: dict[str, CompassRun] = {}
        self._lock = threading.Lock()

    def create(self, **kwargs) -> tuple[str, DiscourseSession]:
        session_id = uuid.uuid4().hex[:16]
        session = DiscourseSession(**kwargs)
        with self._lock:
            self._sessions[session_id] = session
        return session_id, session

    def get(self, session_id: str) -> Optional[DiscourseSession]:
        with self._lock:
            return self._sessions.get(session_id)

    def delete(self, session_id: str) -> bool:
        with self._lock:
            session = self._sessions.pop(session_id, None)
        if session:
            session.reset()
            session.close()
        return session is not None

    def add_compass(self, run: CompassRun) -> None:
        with self._lock:
            self._compass[run.id] = run

    def get_compass(self, run_id: str) -> Optional[CompassRun]:
        with self._lock:
            return self._compass.get(run_id)

    def clear(self) -> None:
        with self._lock:
            sessions = list(self._sessions.values())
            self._sessions.clear()
            self._compass.clear()
        for session in sessions:
            session.close()


registry = SessionRegistry()


def run_async(coro):
    """Run a transition coroutine to completion from a sync view."""
    return asyncio.run(coro)


def load_credentials():
    """Fresh credentials for each analysis so key changes apply immediately."""
    return get_credential_store().load()


def get_json() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def error_response(error: Exception):
    """Map an application error to a JSON error response."""
    if isinstance(error, AnalysisInFlight):
        status = 409
    elif isinstance(error, UnknownNode):
        status = 404
    elif isinstance(error, (TransitionRejected, WeitblickError, ValueError)):
        status = 400
    else:
        raise error
    return jsonify({"error": str(error), "type": type(error).__name__}), status


def session_payload(session_id: str, session: DiscourseSession) -> dict:
    data = session.state.to_dict()
    for node in data["nodes"]:
        if node["perspective_name"]:
            node["description"] = PERSPECTIVE_DESCRIPTIONS[Perspective(node["perspective_name"])][session.language]
    data["id"] = session_id
    data["can_generate_quintessence"] = (
        not session.state.is_empty and session.can_generate_quintessence()
    )
    data["current_level"] = session.current_level()
    return data
