from __future__ import annotations

import time
import uuid
from contextlib import asynccontextmanager
from typing import Any, Dict

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from posthub.api import register_routes
from posthub.core.config import get_settings
from posthub.core.error_handler import ErrorResponder
from posthub.core.errors import ApplicationError
from posthub.core.logging import get_logger, log_context, setup_logging
from posthub.core.validation import validation_error_from
from posthub.db.store import make_store

log = get_logger("posthub.main")


def _trace_id(request: Request) -> str:
    return getattr(request.state, "trace_id", None) or str(uuid.uuid4())


def _responder(request: Request) -> ErrorResponder:
    return request.app.state.error_responder


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    setup_logging(settings.LOG_LEVEL)

    app.state.settings = settings
    app.state.store = make_store(settings.STORAGE, settings.SQLITE_PATH)
    app.state.error_responder = ErrorResponder(is_development=settings.is_development)

    log.info(
        "startup ok | env=%s storage=%s token_ttl_min=%s",
        settings.APP_ENV,
        settings.STORAGE,
        settings.TOKEN_TTL_MINUTES,
    )
    try:
        yield
    finally:
        log.info("shutdown ok")


app = FastAPI(title="PostHub API", version="1.0", lifespan=lifespan)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_routes(app)


@app.middleware("http")
async def request_context(request: Request, call_next):
    header = request.app.state.settings.TRACE_ID_HEADER
    tid = request.headers.get(header) or str(uuid.uuid4())
    request.state.trace_id = tid

    t0 = time.perf_counter()
    with log_context(trace_id=tid, user_id="-"):
        try:
            response = await call_next(request)
        except Exception as exc:
            # Anything the exception handlers below did not claim ends up here.
            response = _responder(request).respond(exc, tid)
        finally:
            dt_ms = int((time.perf_counter() - t0) * 1000)
            log.debug("request %s %s done in %sms", request.method, request.url.path, dt_ms)

    response.headers[header] = tid
    return response


@app.exception_handler(ApplicationError)
async def app_error_handler(request: Request, exc: ApplicationError):
    return _responder(request).respond(exc, _trace_id(request))


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    return _responder(request).respond(validation_error_from(exc), _trace_id(request))


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return _responder(request).respond_http_status(exc.status_code, exc.detail, _trace_id(request))


@app.get("/health")
async def health(request: Request) -> Dict[str, Any]:
    return {
        "status": "ok",
        "service": "posthub-api",
        "env": request.app.state.settings.APP_ENV,
        "storage": request.app.state.settings.STORAGE,
    }
