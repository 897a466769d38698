from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from ..deps.auth import AuthContext, require_session
from ..deps.container import Container, get_container
from ..schemas.timer import Timer, TimerCreate

router = APIRouter(prefix="/api/timers", tags=["timers"])


@router.get("", response_model=list[Timer], response_model_exclude_none=True)
def api_list_timers(
    is_active: Optional[str] = Query(None, alias="isActive"),
    auth: AuthContext = Depends(require_session),
    container: Container = Depends(get_container),
):
    # Only the literal "true" selects running timers; anything else lists stopped ones.
    return container.timers.list(auth.user_id, is_active == "true")


@router.post("", response_model=Timer, response_model_exclude_none=True, status_code=status.HTTP_201_CREATED)
def api_start_timer(
    payload: Optional[TimerCreate] = None,
    auth: AuthContext = Depends(require_session),
    container: Container = Depends(get_container),
):
    description = payload.description if payload else None
    return container.timers.start(auth.user_id, description)


@router.post("/{timer_id}/stop", response_model=Timer, response_model_exclude_none=True)
def api_stop_timer(
    timer_id: str,
    auth: AuthContext = Depends(require_session),
    container: Container = Depends(get_container),
):
    return container.timers.stop(auth.user_id, timer_id)
