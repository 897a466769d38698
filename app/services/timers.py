"""Per-user timers stored in the ``timers`` collection.

Times are epoch milliseconds. A timer starts active and is stopped exactly
once; stopping fills in ``end`` and ``duration`` and the record never changes
again.
"""

from __future__ import annotations

import logging
import secrets
import time

from ..core.errors import ConflictError, ForbiddenError, ValidationError
from ..db.store import RecordStore
from ..schemas.timer import Timer

logger = logging.getLogger(__name__)


def now_ms() -> int:
    return time.time_ns() // 1_000_000


class TimerService:
    def __init__(self, store: RecordStore, clock=now_ms) -> None:
        self.store = store
        self.clock = clock

    def list(self, user_id: str, is_active: bool) -> list[Timer]:
        """Return the user's timers whose active flag equals ``is_active``, in stored order."""

        return [
            Timer.model_validate(raw)
            for raw in self.store.read()
            if raw.get("userId") == user_id and raw.get("isActive") is is_active
        ]

    def get(self, user_id: str, timer_id: str) -> Timer:
        for raw in self.store.read():
            if raw.get("id") == timer_id and raw.get("userId") == user_id:
                return Timer.model_validate(raw)
        raise ForbiddenError()

    def start(self, user_id: str, description: str | None) -> Timer:
        if not description:
            raise ValidationError("Description is required")
        timer = Timer(
            id=secrets.token_urlsafe(16),
            user_id=user_id,
            description=description,
            start=self.clock(),
            is_active=True,
            progress=0,
        )
        with self.store.locked():
            timers = self.store.read()
            timers.append(timer.to_record())
            self.store.write(timers)
        logger.info("timer.started", extra={"extra_data": {"user_id": user_id, "timer_id": timer.id}})
        return timer

    def stop(self, user_id: str, timer_id: str) -> Timer:
        """Stop one of the user's active timers.

        Unknown ids and other users' timers both raise ``ForbiddenError`` so a
        caller cannot probe for timers it does not own. A timer that is already
        stopped raises ``ConflictError`` and is left untouched.
        """

        with self.store.locked():
            timers = self.store.read()
            record = next(
                (t for t in timers if t.get("id") == timer_id and t.get("userId") == user_id),
                None,
            )
            if record is None:
                raise ForbiddenError()
            if not record.get("isActive"):
                raise ConflictError("Timer already stopped")
            end = self.clock()
            record["isActive"] = False
            record["end"] = end
            record["duration"] = end - record["start"]
            self.store.write(timers)

        logger.info(
            "timer.stopped",
            extra={"extra_data": {"user_id": user_id, "timer_id": timer_id, "duration_ms": record["duration"]}},
        )
        return Timer.model_validate(record)
