"""Errors raised while handling a request."""

from pydantic import ValidationError


class MsfError(Exception):
    """Application error whose status, message and errors are returned as-is."""

    def __init__(
        self,
        status_code: int = 500,
        message: str = "Internal Server Error",
        errors: list[dict] | None = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.errors = errors


def is_msf_error(error: object) -> bool:
    """True for ``MsfError`` and for look-alikes raised by another copy of the library."""
    if isinstance(error, MsfError):
        return True
    return (
        type(error).__name__ == "MsfError"
        and isinstance(getattr(error, "status_code", None), int)
        and isinstance(getattr(error, "message", None), str)
    )


def validation_errors(exc: ValidationError) -> list[dict]:
    """Field-scoped issues of a pydantic error, reduced to JSON-safe ``type``/``loc``/``msg``."""
    return [
        {"type": err["type"], "loc": list(err["loc"]), "msg": err["msg"]}
        for err in exc.errors(include_url=False)
    ]


class RequestValidationError(Exception):
    """The query string or body of a request did not match its schema."""

    def __init__(self, errors: list[dict]):
        super().__init__("Request validation failed.")
        self.errors = errors

    @classmethod
    def from_pydantic(cls, exc: ValidationError) -> "RequestValidationError":
        return cls(validation_errors(exc))
