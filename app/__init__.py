"""Application wiring for the time tracker.

Builds the FastAPI instance, plugs in the request-id middleware, the auth and
timer routers, and the JSON error handlers. Storage is a set of JSON files
under ``settings.DATA_DIR``; see ``app.db.store``.
"""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from .core.config import settings
from .core.errors import AppError, app_error_handler, http_exception_handler, validation_exception_handler
from .middlewares import RequestIdMiddleware
from .routers import api_auth as api_auth_router
from .routers import api_timers as api_timers_router

app = FastAPI(title=settings.APP_NAME)

app.add_middleware(RequestIdMiddleware)

# Signup/login/logout live at the root, timers under /api/timers.
app.include_router(api_auth_router.router)
app.include_router(api_timers_router.router)

app.add_exception_handler(AppError, app_error_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)


__all__ = ["app"]
