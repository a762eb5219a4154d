# recipe_genie/app/handlers.py
"""
Maps the error taxonomy to HTTP responses, once, for every route.
Body shape: {"success": false, "message": ..., "errors"?: [...], "error"?: ...}
"""
from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from recipe_genie.app.domain.errors import (
    InputValidationError,
    RecipeGenieError,
    ResponseParseError,
    StorageValidationError,
    UpstreamError,
)

log = logging.getLogger("http")

GENERATION_FAILED = "Failed to generate recipes"
SERVER_ERROR = "Server error"


def _body(message: str, **extra) -> dict:
    body = {"success": False, "message": message}
    body.update({k: v for k, v in extra.items() if v})
    return body


async def handle_app_error(request: Request, exc: RecipeGenieError) -> JSONResponse:
    route = f"{request.method} {request.url.path}"
    if isinstance(exc, StorageValidationError):
        log.warning("http.storage_validation route=%s errors=%s", route, exc.errors)
        body = _body(exc.message, errors=exc.errors)
    elif isinstance(exc, InputValidationError):
        log.warning("http.bad_request route=%s message=%s", route, exc.message)
        body = _body(exc.message, errors=exc.errors if len(exc.errors) > 1 else None)
    elif isinstance(exc, ResponseParseError):
        log.error("http.parse_fail route=%s raw=%r", route, exc.raw_text, exc_info=exc)
        body = _body(GENERATION_FAILED, error=exc.message)
    elif isinstance(exc, UpstreamError):
        log.error("http.upstream_fail route=%s", route, exc_info=exc)
        body = _body(GENERATION_FAILED, error=exc.message)
    elif exc.status_code >= 500:
        log.error("http.fail route=%s", route, exc_info=exc)
        body = _body(SERVER_ERROR, error=exc.message)
    else:
        log.warning("http.%d route=%s message=%s", exc.status_code, route, exc.message)
        body = _body(exc.message)
    return JSONResponse(status_code=exc.status_code, content=body)


async def handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = []
    for err in exc.errors():
        loc = [str(p) for p in err.get("loc", ()) if p != "body"]
        errors.append(f"{'.'.join(loc) or 'body'}: {err.get('msg')}")
    log.warning("http.invalid_body route=%s %s errors=%s", request.method, request.url.path, errors)
    return JSONResponse(status_code=400, content=_body("Invalid request", errors=errors))


async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
    log.exception("http.unexpected route=%s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content=_body(SERVER_ERROR, error=str(exc)))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RecipeGenieError, handle_app_error)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, handle_request_validation)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, handle_unexpected)
