from __future__ import annotations

from functools import cached_property, lru_cache
from pathlib import Path

from ..core.config import settings
from ..db.store import SESSIONS, TIMERS, USERS, build_stores
from ..services.identity import IdentityService
from ..services.sessions import SessionManager
from ..services.timers import TimerService


class Container:
    """Wires the collections under ``data_dir`` to the services using them."""

    def __init__(self, data_dir: str | Path, *, bcrypt_rounds: int = 10) -> None:
        self.data_dir = Path(data_dir)
        self.bcrypt_rounds = bcrypt_rounds
        self.stores = build_stores(self.data_dir)

    @cached_property
    def sessions(self) -> SessionManager:
        return SessionManager(self.stores[SESSIONS])

    @cached_property
    def identity(self) -> IdentityService:
        return IdentityService(self.stores[USERS], self.sessions, rounds=self.bcrypt_rounds)

    @cached_property
    def timers(self) -> TimerService:
        return TimerService(self.stores[TIMERS])


@lru_cache(maxsize=1)
def get_container() -> Container:
    """FastAPI dependency returning the process-wide container."""

    return Container(settings.DATA_DIR, bcrypt_rounds=settings.BCRYPT_ROUNDS)
