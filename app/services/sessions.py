"""Server-side session tokens kept in the ``sessions`` collection.

The collection maps an opaque token to ``{"userId": ...}``. Sessions carry no
expiry: a token stays valid until it is revoked by logout.
"""

from __future__ import annotations

import logging
import secrets

from ..db.store import RecordStore

logger = logging.getLogger(__name__)

TOKEN_BYTES = 16


def _token_hint(session_id: str) -> str:
    return session_id[:6] + "..."


class SessionManager:
    def __init__(self, store: RecordStore) -> None:
        self.store = store

    def _new_token(self, sessions: dict) -> str:
        token = secrets.token_urlsafe(TOKEN_BYTES)
        while token in sessions:
            token = secrets.token_urlsafe(TOKEN_BYTES)
        return token

    def create(self, user_id: str) -> str:
        with self.store.locked():
            sessions = self.store.read()
            session_id = self._new_token(sessions)
            sessions[session_id] = {"userId": user_id}
            self.store.write(sessions)
        logger.info(
            "session.created",
            extra={"extra_data": {"user_id": user_id, "session": _token_hint(session_id)}},
        )
        return session_id

    def resolve(self, session_id: str | None) -> dict | None:
        """Return the session record for ``session_id`` or ``None``."""

        if not session_id:
            return None
        session = self.store.read().get(session_id)
        if not session or not session.get("userId"):
            return None
        return session

    def revoke(self, session_id: str | None) -> None:
        if not session_id:
            return
        with self.store.locked():
            sessions = self.store.read()
            if sessions.pop(session_id, None) is None:
                return
            self.store.write(sessions)
        logger.info("session.revoked", extra={"extra_data": {"session": _token_hint(session_id)}})
