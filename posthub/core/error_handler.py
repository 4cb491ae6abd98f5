from __future__ import annotations

import logging
import traceback
from http import HTTPStatus
from typing import Any, Dict, Optional, Tuple

from fastapi.responses import JSONResponse

from posthub.core.errors import (
    VALIDATION_MESSAGE,
    ApplicationError,
    ErrorKind,
    NotFoundError,
    ValidationError,
)
from posthub.core.logging import get_logger
from posthub.schemas import ErrorResponse, ValidationErrorResponse


INTERNAL_ERROR_CODE = "INTERNAL_SERVER_ERROR"
GENERIC_MESSAGE = "An unexpected error occurred. Please try again later."

SEVERITY_BY_KIND: Dict[ErrorKind, int] = {
    ErrorKind.VALIDATION: logging.INFO,
    ErrorKind.NOT_FOUND: logging.WARNING,
    ErrorKind.UNAUTHORIZED: logging.WARNING,
    ErrorKind.BAD_REQUEST: logging.WARNING,
}


def severity_for(exc: BaseException) -> int:
    """Log level for an error: by kind for taxonomy errors, ERROR otherwise."""
    if isinstance(exc, ApplicationError):
        return SEVERITY_BY_KIND[exc.kind]
    return logging.ERROR


def _stack_trace(exc: BaseException) -> str:
    return "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))


def render(payload: ErrorResponse) -> Dict[str, Any]:
    body = payload.model_dump(mode="json", by_alias=True)
    if body.get("additionalData") is None:
        body.pop("additionalData", None)
    return body


class ErrorResponder:
    """Single terminal point turning any raised error into a log record and
    a structured JSON response.

    ``is_development`` gates disclosure of raw messages and stack traces for
    errors outside the taxonomy.
    """

    def __init__(self, *, is_development: bool, logger: Optional[logging.Logger] = None) -> None:
        self.is_development = is_development
        self.log = logger or get_logger("posthub.errors")

    def build(self, exc: BaseException, trace_id: str) -> Tuple[int, ErrorResponse]:
        if isinstance(exc, ValidationError):
            return exc.status_code, ValidationErrorResponse(
                error_code=exc.error_code,
                message=VALIDATION_MESSAGE,
                trace_id=trace_id,
                validation_errors=exc.validation_errors,
            )

        if isinstance(exc, ApplicationError):
            return exc.status_code, ErrorResponse(
                error_code=exc.error_code,
                message=exc.message,
                trace_id=trace_id,
                additional_data=exc.additional_data,
            )

        if self.is_development:
            return HTTPStatus.INTERNAL_SERVER_ERROR, ErrorResponse(
                error_code=INTERNAL_ERROR_CODE,
                message=str(exc),
                trace_id=trace_id,
                additional_data={"StackTrace": _stack_trace(exc)},
            )
        return HTTPStatus.INTERNAL_SERVER_ERROR, ErrorResponse(
            error_code=INTERNAL_ERROR_CODE,
            message=GENERIC_MESSAGE,
            trace_id=trace_id,
        )

    def log_error(self, exc: BaseException, trace_id: str) -> None:
        level = severity_for(exc)
        kind = type(exc).__name__
        self.log.log(
            level,
            "request failed: %s",
            exc,
            exc_info=exc if level >= logging.ERROR else None,
            extra={"trace_id": trace_id, "error_kind": kind},
        )

    def respond(self, exc: BaseException, trace_id: str) -> JSONResponse:
        self.log_error(exc, trace_id)
        status_code, payload = self.build(exc, trace_id)
        return JSONResponse(status_code=int(status_code), content=render(payload))

    def respond_http_status(self, status_code: int, detail: Any, trace_id: str) -> JSONResponse:
        """Shape framework-raised HTTP errors (unknown route, wrong method...)."""
        try:
            status = HTTPStatus(status_code)
            code, phrase = status.name, status.phrase
        except ValueError:
            code, phrase = "HTTP_ERROR", "HTTP error"
        message = detail if isinstance(detail, str) else phrase
        if status_code == HTTPStatus.NOT_FOUND:
            return self.respond(NotFoundError(message), trace_id)
        self.log.warning(
            "http error status=%s", status_code,
            extra={"trace_id": trace_id, "error_kind": "HTTPException"},
        )
        payload = ErrorResponse(error_code=code, message=message, trace_id=trace_id)
        return JSONResponse(status_code=status_code, content=render(payload))
