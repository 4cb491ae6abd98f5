from __future__ import annotations

from typing import Any, Dict, List, Mapping, Sequence

from fastapi.exceptions import RequestValidationError

from posthub.core.errors import ValidationError


# Leading loc element FastAPI adds to say where a value was bound from.
_LOCATIONS = {"body", "query", "path", "header", "cookie"}


def field_name(loc: Sequence[Any]) -> str:
    parts = list(loc)
    if parts and parts[0] in _LOCATIONS:
        parts = parts[1:]
        # A malformed JSON body reports the character offset as the only loc item.
        if len(parts) == 1 and isinstance(parts[0], int):
            parts = []
    return ".".join(str(p) for p in parts) or "body"


def collect_field_errors(errors: Sequence[Mapping[str, Any]]) -> Dict[str, List[str]]:
    """Group binding errors by field, keeping detection order and duplicates."""
    grouped: Dict[str, List[str]] = {}
    for err in errors:
        name = field_name(err.get("loc") or ())
        grouped.setdefault(name, []).append(str(err.get("msg") or "Invalid value"))
    return grouped


def enforce_model_state(errors: Sequence[Mapping[str, Any]]) -> None:
    """Raise ValidationError when request binding reported any field errors."""
    grouped = collect_field_errors(errors)
    if grouped:
        raise ValidationError(grouped)


def validation_error_from(exc: RequestValidationError) -> ValidationError:
    return ValidationError(collect_field_errors(exc.errors()))
