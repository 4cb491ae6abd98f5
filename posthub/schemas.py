from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _not_blank(v: str) -> str:
    v2 = (v or "").strip()
    if not v2:
        raise ValueError("must not be empty")
    return v2


class ApiModel(BaseModel):
    """Base for wire models: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# ---- Errors ----


class ErrorResponse(ApiModel):
    error_code: str
    message: str
    timestamp: datetime = Field(default_factory=_utcnow)
    trace_id: str
    additional_data: Optional[Dict[str, Any]] = None


class ValidationErrorResponse(ErrorResponse):
    validation_errors: Dict[str, List[str]] = Field(default_factory=dict)


# ---- Comments ----


class CreateCommentDto(ApiModel):
    body: str = Field(..., max_length=200)

    @field_validator("body")
    @classmethod
    def _body_strip(cls, v: str) -> str:
        return _not_blank(v)


class EditCommentDto(CreateCommentDto):
    pass


class ReadCommentDto(ApiModel):
    id: int
    body: str
    post_id: int
    creation_time: datetime


# ---- Posts ----


class CreatePostDto(ApiModel):
    title: str = Field(..., max_length=100)
    body: str = Field(..., max_length=200)

    @field_validator("title", "body")
    @classmethod
    def _strip(cls, v: str) -> str:
        return _not_blank(v)


class EditPostDto(CreatePostDto):
    pass


class ReadPostDto(ApiModel):
    id: int
    title: str
    body: str
    creation_time: datetime
    comments: List[ReadCommentDto] = Field(default_factory=list)


# ---- Users ----


class RegisterUserDto(ApiModel):
    email: str = Field(..., max_length=254, pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    username: str = Field(..., min_length=3, max_length=64)
    password: str = Field(..., min_length=8, max_length=128)
    confirm_password: str

    @field_validator("username")
    @classmethod
    def _username_strip(cls, v: str) -> str:
        return _not_blank(v)


class LoginUserDto(ApiModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class TokenDto(ApiModel):
    token: str
    expires_at: datetime
