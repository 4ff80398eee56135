from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Base error carrying the HTTP status and machine-readable code it renders as."""

    status_code = 500
    code = "server_error"
    default_message = "Server error"

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        status_code: Optional[int] = None,
        code: Optional[str] = None,
        extra: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        if code is not None:
            self.code = code
        self.extra = extra or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {"success": False, "error": self.code, "message": self.message, **self.extra}


class Unauthenticated(AppError):
    status_code = 401
    code = "unauthenticated"
    default_message = "Not authorized"


class InvalidArgument(AppError):
    status_code = 400
    code = "invalid_argument"
    default_message = "Invalid request"


class NotFound(AppError):
    status_code = 404
    code = "not_found"
    default_message = "Not found"


class Conflict(AppError):
    status_code = 409
    code = "conflict"
    default_message = "Already exists"


class AlreadyOwned(AppError):
    status_code = 400
    code = "already_owned"
    default_message = "Already owned"


class InsufficientFunds(AppError):
    status_code = 400
    code = "insufficient_funds"
    default_message = "Insufficient coins"


class UpstreamUnavailable(AppError):
    status_code = 500
    code = "upstream_unavailable"
    default_message = "Language model unavailable"


class UpstreamParseFailure(AppError):
    status_code = 500
    code = "upstream_parse_failure"
    default_message = "Failed to parse model output"

    def __init__(self, message: Optional[str] = None, *, raw: str = "", **kwargs: Any) -> None:
        self.raw = raw
        extra = kwargs.pop("extra", None) or {}
        extra.setdefault("raw", raw)
        super().__init__(message, extra=extra, **kwargs)


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(AppError)
    async def handle_app_error(request: Request, exc: AppError) -> JSONResponse:
        return JSONResponse(exc.to_dict(), status_code=exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        error = InvalidArgument("Malformed request body", extra={"details": jsonable_errors(exc)})
        return JSONResponse(error.to_dict(), status_code=error.status_code)

    @app.exception_handler(SQLAlchemyError)
    async def handle_database_error(request: Request, exc: SQLAlchemyError) -> JSONResponse:
        logger.exception("Database error on %s %s", request.method, request.url.path)
        return JSONResponse(AppError().to_dict(), status_code=500)


def jsonable_errors(exc: RequestValidationError) -> list:
    return [{"loc": list(err.get("loc", ())), "msg": err.get("msg", "")} for err in exc.errors()]
