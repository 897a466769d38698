from __future__ import annotations

import json

from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError as SchemaError

from ..core.config import settings
from ..core.errors import UnauthorizedError, ValidationError
from ..deps.auth import AuthContext, require_session
from ..deps.container import Container, get_container
from ..schemas.auth import AuthResponse, CredentialsRequest, LogoutResponse, UserOut

router = APIRouter(tags=["auth"])

FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")

# Advertise both body encodings since the payload is parsed by hand.
_CREDENTIALS_BODY = {
    "requestBody": {
        "content": {
            "application/json": {"schema": CredentialsRequest.model_json_schema()},
            "application/x-www-form-urlencoded": {"schema": CredentialsRequest.model_json_schema()},
        }
    }
}


async def read_credentials(request: Request) -> CredentialsRequest:
    """Accept login forms as well as JSON clients."""

    content_type = (request.headers.get("content-type") or "").lower()
    if content_type.startswith(FORM_CONTENT_TYPES):
        form = await request.form()
        data = {key: form.get(key) for key in ("username", "password") if key in form}
    else:
        body = await request.body()
        if not body.strip():
            data = {}
        else:
            try:
                data = json.loads(body)
            except ValueError as exc:
                raise ValidationError("Request body is not valid JSON") from exc
    if not isinstance(data, dict):
        raise ValidationError("Request body must be an object")
    try:
        return CredentialsRequest.model_validate(data)
    except SchemaError as exc:
        raise RequestValidationError(exc.errors()) from exc


def _set_session_cookie(response: Response, session_id: str) -> None:
    # No max_age/expires: the browser keeps it until logout or its own session ends.
    response.set_cookie(
        settings.SESSION_COOKIE_NAME,
        session_id,
        httponly=True,
        samesite="strict",
        secure=settings.SESSION_COOKIE_SECURE,
    )


def _clear_session_cookie(response: Response) -> None:
    response.delete_cookie(
        settings.SESSION_COOKIE_NAME,
        httponly=True,
        samesite="strict",
        secure=settings.SESSION_COOKIE_SECURE,
    )


@router.post(
    "/signup",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create an account",
    openapi_extra=_CREDENTIALS_BODY,
)
def signup(
    response: Response,
    payload: CredentialsRequest = Depends(read_credentials),
    container: Container = Depends(get_container),
):
    user, session_id = container.identity.register(payload.username, payload.password)
    _set_session_cookie(response, session_id)
    return AuthResponse(user=user)


@router.post("/login", response_model=AuthResponse, summary="Open a session", openapi_extra=_CREDENTIALS_BODY)
def login(
    response: Response,
    payload: CredentialsRequest = Depends(read_credentials),
    container: Container = Depends(get_container),
):
    user, session_id = container.identity.authenticate(payload.username, payload.password)
    _set_session_cookie(response, session_id)
    return AuthResponse(user=user)


@router.api_route("/logout", methods=["GET", "POST"], response_model=LogoutResponse, summary="End the current session")
def logout(
    response: Response,
    auth: AuthContext = Depends(require_session),
    container: Container = Depends(get_container),
):
    container.sessions.revoke(auth.session_id)
    _clear_session_cookie(response)
    return LogoutResponse()


@router.get("/api/me", response_model=UserOut, summary="Current user")
def current_user(
    auth: AuthContext = Depends(require_session),
    container: Container = Depends(get_container),
):
    user = container.identity.get_user(auth.user_id)
    if user is None:
        # The session points at a user that no longer exists.
        raise UnauthorizedError()
    return user
