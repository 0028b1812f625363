"""FastAPI exception handler that renders decorated errors as JSON responses."""

from __future__ import annotations

import logging
from typing import Awaitable, Callable, cast

from fastapi import FastAPI, Request, Response, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from resperr.core.config import Settings
from resperr.core.errors import status_code, user_message_status

ExceptionHandlerCallable = Callable[[Request, Exception], Awaitable[Response]]

logger = logging.getLogger("resperr.handlers")


def register_exception_handlers(app: FastAPI) -> None:
    """Render every unhandled exception from its status code and user message."""

    app.add_exception_handler(
        Exception,
        cast(ExceptionHandlerCallable, resperr_exception_handler),
    )


async def resperr_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    code = status_code(exc)
    if code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.exception(
            "Unhandled exception during request",
            exc_info=(exc.__class__, exc, exc.__traceback__),
            extra={"status_code": code, "path": request.url.path},
        )
    else:
        logger.info(
            "Request failed: %s",
            exc,
            extra={"status_code": code, "path": request.url.path},
        )
    return error_response(exc)


def error_response(exc: BaseException | None, *, settings: Settings | None = None) -> JSONResponse:
    """Return a JSONResponse whose status and body are derived from the error chain."""
    body = build_error_payload(exc, settings=settings)
    return JSONResponse(
        content=jsonable_encoder(body),
        status_code=status_code(exc, settings=settings),
    )


def build_error_payload(
    exc: BaseException | None,
    *,
    settings: Settings | None = None,
) -> dict[str, dict[str, object]]:
    error_section: dict[str, object] = {
        "status": status_code(exc, settings=settings),
        "message": user_message_status(exc, settings=settings),
    }
    return {"error": error_section}


__all__ = [
    "build_error_payload",
    "error_response",
    "register_exception_handlers",
    "resperr_exception_handler",
]
