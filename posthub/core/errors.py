from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from http import HTTPStatus
from typing import Any, ClassVar, Dict, List, Mapping, Optional, Sequence


VALIDATION_MESSAGE = "One or more validation errors occurred"


class ErrorKind(str, Enum):
    NOT_FOUND = "NOT_FOUND"
    UNAUTHORIZED = "UNAUTHORIZED"
    BAD_REQUEST = "BAD_REQUEST"
    VALIDATION = "VALIDATION_ERROR"


STATUS_BY_KIND: Dict[ErrorKind, int] = {
    ErrorKind.NOT_FOUND: HTTPStatus.NOT_FOUND,
    ErrorKind.UNAUTHORIZED: HTTPStatus.FORBIDDEN,
    ErrorKind.BAD_REQUEST: HTTPStatus.BAD_REQUEST,
    ErrorKind.VALIDATION: HTTPStatus.UNPROCESSABLE_ENTITY,
}


@dataclass(eq=False)
class ApplicationError(Exception):
    """A classified application error surfaced to clients as JSON.

    The family is closed: the four variants below are the only kinds the
    error responder knows how to shape, so new subclasses are refused.
    """

    message: str
    additional_data: Optional[Dict[str, Any]] = None

    kind: ClassVar[ErrorKind]

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if cls.__module__ != __name__:
            raise TypeError(f"{cls.__name__}: ApplicationError variants are fixed")

    def __post_init__(self) -> None:
        if type(self) is ApplicationError:
            raise TypeError("ApplicationError is abstract; raise one of its variants")

    @property
    def status_code(self) -> int:
        return int(STATUS_BY_KIND[self.kind])

    @property
    def error_code(self) -> str:
        return self.kind.value

    def __str__(self) -> str:
        return self.message


@dataclass(eq=False)
class NotFoundError(ApplicationError):
    kind: ClassVar[ErrorKind] = ErrorKind.NOT_FOUND

    @classmethod
    def for_resource(cls, resource_type: str, resource_id: int) -> "NotFoundError":
        return cls(
            message=f"{resource_type} with ID {resource_id} not found",
            additional_data={"ResourceType": resource_type, "Id": resource_id},
        )


@dataclass(eq=False)
class UnauthorizedError(ApplicationError):
    message: str = "Unauthorized access"

    kind: ClassVar[ErrorKind] = ErrorKind.UNAUTHORIZED


@dataclass(eq=False)
class BadRequestError(ApplicationError):
    kind: ClassVar[ErrorKind] = ErrorKind.BAD_REQUEST


class ValidationError(ApplicationError):
    kind: ClassVar[ErrorKind] = ErrorKind.VALIDATION

    def __init__(self, validation_errors: Mapping[str, Sequence[str]]) -> None:
        errors: Dict[str, List[str]] = {
            field: list(messages) for field, messages in validation_errors.items()
        }
        super().__init__(message=VALIDATION_MESSAGE, additional_data={"Errors": errors})
        self.validation_errors = errors
