from __future__ import annotations

import logging
import sys
from contextlib import contextmanager
from contextvars import ContextVar, Token
from typing import Dict, Iterator, List, Optional, Tuple


trace_id_var: ContextVar[str] = ContextVar("trace_id", default="-")
user_id_var: ContextVar[str] = ContextVar("user_id", default="-")

_CONTEXT_VARS: Dict[str, ContextVar[str]] = {
    "trace_id": trace_id_var,
    "user_id": user_id_var,
}

# Record attributes the format needs that only some call sites pass via extra.
_RECORD_DEFAULTS: Dict[str, str] = {"error_kind": "-"}

LOG_FORMAT = (
    "%(asctime)s | %(levelname)s | %(name)s"
    " | trace=%(trace_id)s user=%(user_id)s kind=%(error_kind)s | %(message)s"
)


class ContextFilter(logging.Filter):
    """Stamp records with the request context the format refers to.

    Attributes already present on the record (passed through ``extra``)
    are kept as they are.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        for attr, var in _CONTEXT_VARS.items():
            if not hasattr(record, attr):
                setattr(record, attr, var.get())
        for attr, default in _RECORD_DEFAULTS.items():
            if not hasattr(record, attr):
                setattr(record, attr, default)
        return True


def set_log_context(*, trace_id: Optional[str] = None, user_id: Optional[str] = None) -> None:
    if trace_id is not None:
        trace_id_var.set(trace_id)
    if user_id is not None:
        user_id_var.set(user_id)


@contextmanager
def log_context(*, trace_id: Optional[str] = None, user_id: Optional[str] = None) -> Iterator[None]:
    """Bind trace/user ids for the duration of the block, then restore them."""
    tokens: List[Tuple[ContextVar[str], Token]] = []
    for var, value in ((trace_id_var, trace_id), (user_id_var, user_id)):
        if value is not None:
            tokens.append((var, var.set(value)))
    try:
        yield
    finally:
        for var, token in reversed(tokens):
            var.reset(token)


def build_handler(stream=None) -> logging.Handler:
    handler = logging.StreamHandler(stream or sys.stdout)
    handler.addFilter(ContextFilter())
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    return handler


def setup_logging(level: str = "INFO") -> None:
    lvl = logging.getLevelName(level.upper())
    if not isinstance(lvl, int):
        lvl = logging.INFO

    root = logging.getLogger()
    root.setLevel(lvl)
    # Replace handlers to avoid duplicated logs under reload.
    root.handlers = [build_handler()]

    logging.getLogger("uvicorn.access").setLevel(max(lvl, logging.INFO))


def get_logger(name: str = "posthub") -> logging.Logger:
    return logging.getLogger(name)
