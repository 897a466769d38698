from __future__ import annotations

import logging
import secrets

import bcrypt

from ..core.errors import ConflictError, NotFoundError, UnauthorizedError, ValidationError
from ..db.store import RecordStore
from ..schemas.auth import UserOut, UserRecord
from .sessions import SessionManager

logger = logging.getLogger(__name__)

# bcrypt only looks at the first 72 bytes of its input.
BCRYPT_MAX_BYTES = 72


def hash_password(plain: str, rounds: int) -> str:
    return bcrypt.hashpw(plain.encode("utf-8"), bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    secret = plain.encode("utf-8")
    # Nothing over the bcrypt input limit was ever hashed, so it cannot match.
    if len(secret) > BCRYPT_MAX_BYTES:
        return False
    return bcrypt.checkpw(secret, hashed.encode("utf-8"))


def _require_credentials(username: str | None, password: str | None) -> None:
    if not username or not password:
        raise ValidationError("Username and password are required")


def _public(record: UserRecord) -> UserOut:
    return UserOut(id=record.id, username=record.username)


class IdentityService:
    """Sign-up and login on top of the ``users`` collection."""

    def __init__(self, store: RecordStore, sessions: SessionManager, *, rounds: int = 10) -> None:
        self.store = store
        self.sessions = sessions
        self.rounds = rounds

    def _find(self, users: list[dict], username: str) -> UserRecord | None:
        for raw in users:
            if raw.get("username") == username:
                return UserRecord.model_validate(raw)
        return None

    def register(self, username: str | None, password: str | None) -> tuple[UserOut, str]:
        """Create a user and open a first session for it.

        Raises ``ValidationError`` for blank fields and ``ConflictError`` when
        the username is taken (exact, case-sensitive match).
        """

        _require_credentials(username, password)
        if len(password.encode("utf-8")) > BCRYPT_MAX_BYTES:
            raise ValidationError(f"Password must be at most {BCRYPT_MAX_BYTES} bytes")

        with self.store.locked():
            users = self.store.read()
            if self._find(users, username) is not None:
                raise ConflictError("Username already taken")
            record = UserRecord(
                id=secrets.token_urlsafe(16),
                username=username,
                password_hash=hash_password(password, self.rounds),
            )
            users.append(record.model_dump(by_alias=True))
            self.store.write(users)

        logger.info("user.registered", extra={"extra_data": {"user_id": record.id}})
        session_id = self.sessions.create(record.id)
        return _public(record), session_id

    def authenticate(self, username: str | None, password: str | None) -> tuple[UserOut, str]:
        """Check credentials and open an additional session for the user."""

        _require_credentials(username, password)
        record = self._find(self.store.read(), username)
        if record is None:
            raise NotFoundError("User not found")
        if not verify_password(password, record.password_hash):
            logger.info("user.auth_failed", extra={"extra_data": {"user_id": record.id}})
            raise UnauthorizedError("Incorrect password")

        logger.info("user.authenticated", extra={"extra_data": {"user_id": record.id}})
        session_id = self.sessions.create(record.id)
        return _public(record), session_id

    def get_user(self, user_id: str) -> UserOut | None:
        for raw in self.store.read():
            if raw.get("id") == user_id:
                return _public(UserRecord.model_validate(raw))
        return None
