# blog_api/core/errors.py
"""
Typed outcomes of the authorization, visibility and token layers.

Every failure the core can detect is raised as an ``ApiError`` subclass; the
application renders them as ``{"detail": {"code", "message", ["errors"]}}``
with the matching HTTP status. Anything else (store connectivity, unexpected
constraint violations) propagates untouched.
"""
from contextlib import contextmanager
from typing import Optional

from tortoise.exceptions import IntegrityError


class ApiError(Exception):
    status_code: int = 400
    code: str = "BAD_REQUEST"
    message: str = "Bad request"

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        code: Optional[str] = None,
        errors: Optional[dict[str, list[str]]] = None,
    ):
        self.message = message or self.message
        self.code = code or self.code
        self.errors = errors
        super().__init__(self.message)

    def to_detail(self) -> dict:
        detail = {"code": self.code, "message": self.message}
        if self.errors:
            detail["errors"] = self.errors
        return detail


class ValidationFailed(ApiError):
    """Malformed input or a uniqueness clash (422)."""

    status_code = 422
    code = "VALIDATION_FAILED"
    message = "The given data was invalid."

    @classmethod
    def for_field(cls, field: str, message: str) -> "ValidationFailed":
        return cls(message, errors={field: [message]})


class Unauthenticated(ApiError):
    status_code = 401
    code = "AUTH_REQUIRED"
    message = "Unauthenticated."


class TokenNotFound(Unauthenticated):
    code = "AUTH_INVALID_TOKEN"
    message = "Invalid token."


class TokenExpired(Unauthenticated):
    code = "AUTH_TOKEN_EXPIRED"
    message = "Token has expired."


class Forbidden(ApiError):
    status_code = 403
    code = "FORBIDDEN"
    message = "This action is unauthorized."


class NotFound(ApiError):
    status_code = 404
    code = "NOT_FOUND"
    message = "Resource not found."

    @classmethod
    def resource(cls, kind: str) -> "NotFound":
        return cls(f"{kind.capitalize()} not found.", code=f"{kind.upper()}_NOT_FOUND")


@contextmanager
def unique_violation(field: str):
    """
    Report a unique-constraint clash on ``field`` as a 422, like the
    pre-insert uniqueness checks do.
    """
    try:
        yield
    except IntegrityError as exc:
        raise ValidationFailed.for_field(field, f"The {field} has already been taken.") from exc
