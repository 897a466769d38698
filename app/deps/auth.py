from __future__ import annotations

from fastapi import Depends, Request

from ..core.config import settings
from ..core.errors import UnauthorizedError
from ..middlewares import principal_ctx_var
from .container import Container, get_container


class AuthContext:
    def __init__(self, *, session_id: str, user_id: str) -> None:
        self.session_id = session_id
        self.user_id = user_id


def _set_principal(request: Request, principal: str) -> None:
    principal_ctx_var.set(principal)
    request.state.principal = principal


def require_session(request: Request, container: Container = Depends(get_container)) -> AuthContext:
    """Gate for protected routes: the session cookie must map to a user."""

    session_id = request.cookies.get(settings.SESSION_COOKIE_NAME)
    session = container.sessions.resolve(session_id)
    if session is None:
        raise UnauthorizedError()
    user_id = session["userId"]
    _set_principal(request, user_id)
    return AuthContext(session_id=session_id, user_id=user_id)
