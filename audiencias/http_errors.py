"""Maps engine errors onto the ``{success: false, message}`` envelope."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PydanticValidationError

from audiencias.domain.errors import (
    Aborted,
    ConflictError,
    NotFoundError,
    SchedulingError,
    StorageError,
    ValidationError,
)
from audiencias.domain.schemas import ErrorResponse

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR: dict[type[SchedulingError], int] = {
    ValidationError: 400,
    NotFoundError: 404,
    ConflictError: 409,
    StorageError: 500,
    Aborted: 503,
}


def error_response(message: str, status_code: int) -> JSONResponse:
    body = ErrorResponse(message=message).model_dump(by_alias=True, exclude_none=True)
    return JSONResponse(body, status_code=status_code)


def status_for(exc: SchedulingError) -> int:
    for error_type in type(exc).__mro__:
        if error_type in _STATUS_BY_ERROR:
            return _STATUS_BY_ERROR[error_type]
    return 500


def _describe(errors: list[dict]) -> str:
    parts = []
    for error in errors:
        location = ".".join(str(p) for p in error.get("loc", ()) if p not in ("body", "query"))
        parts.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    return "; ".join(parts) or "Requisição inválida"


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(SchedulingError)
    async def scheduling_error_handler(
        request: Request, exc: SchedulingError
    ) -> JSONResponse:
        status_code = status_for(exc)
        if status_code >= 500:
            logger.error(
                "%s %s failed: %s",
                request.method,
                request.url.path,
                exc.message,
                exc_info=exc,
            )
        else:
            logger.info(
                "%s %s rejected (%d): %s",
                request.method,
                request.url.path,
                status_code,
                exc.message,
            )
        return error_response(exc.message, status_code)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return error_response(_describe(exc.errors()), 422)

    @app.exception_handler(PydanticValidationError)
    async def model_validation_handler(
        request: Request, exc: PydanticValidationError
    ) -> JSONResponse:
        return error_response(_describe(exc.errors()), 422)
