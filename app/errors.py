"""Structured error helpers for API responses.

Every failure the API reports is an ``ApiError`` tagged with an ``ErrorKind``.
The kind decides the HTTP status, the stable machine-readable code, whether the
error is logged, and whether its detail is shown to the caller.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Dict

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)


class ErrorKind(str, Enum):
    """Closed set of error kinds the API can report."""

    DATABASE = "database"
    VALIDATION = "validation"
    AUTHENTICATION = "authentication"
    AUTHORIZATION = "authorization"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    RATE_LIMIT = "rate_limit"
    EXTERNAL_SERVICE = "external_service"
    INTERNAL = "internal"
    TOKEN = "token"
    SERIALIZATION = "serialization"


STATUS_CODES: Dict[ErrorKind, int] = {
    ErrorKind.DATABASE: 500,
    ErrorKind.VALIDATION: 400,
    ErrorKind.AUTHENTICATION: 401,
    ErrorKind.AUTHORIZATION: 403,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.CONFLICT: 409,
    ErrorKind.RATE_LIMIT: 429,
    ErrorKind.EXTERNAL_SERVICE: 502,
    ErrorKind.INTERNAL: 500,
    ErrorKind.TOKEN: 401,
    ErrorKind.SERIALIZATION: 400,
}

ERROR_CODES: Dict[ErrorKind, str] = {
    ErrorKind.DATABASE: "DATABASE_ERROR",
    ErrorKind.VALIDATION: "VALIDATION_ERROR",
    ErrorKind.AUTHENTICATION: "AUTHENTICATION_ERROR",
    ErrorKind.AUTHORIZATION: "AUTHORIZATION_ERROR",
    ErrorKind.NOT_FOUND: "NOT_FOUND",
    ErrorKind.CONFLICT: "CONFLICT",
    ErrorKind.RATE_LIMIT: "RATE_LIMIT_EXCEEDED",
    ErrorKind.EXTERNAL_SERVICE: "EXTERNAL_SERVICE_ERROR",
    ErrorKind.INTERNAL: "INTERNAL_ERROR",
    ErrorKind.TOKEN: "TOKEN_ERROR",
    ErrorKind.SERIALIZATION: "SERIALIZATION_ERROR",
}

# Labels used when rendering the full error for logs.
LABELS: Dict[ErrorKind, str] = {
    ErrorKind.DATABASE: "Database error",
    ErrorKind.VALIDATION: "Validation error",
    ErrorKind.AUTHENTICATION: "Authentication failed",
    ErrorKind.AUTHORIZATION: "Authorization failed",
    ErrorKind.NOT_FOUND: "Resource not found",
    ErrorKind.CONFLICT: "Conflict",
    ErrorKind.RATE_LIMIT: "Rate limit exceeded",
    ErrorKind.EXTERNAL_SERVICE: "External service error",
    ErrorKind.INTERNAL: "Internal server error",
    ErrorKind.TOKEN: "Token error",
    ErrorKind.SERIALIZATION: "Serialization error",
}

# System faults: logged in full, never shown to the caller.
GENERIC_MESSAGES: Dict[ErrorKind, str] = {
    ErrorKind.DATABASE: "A database error occurred. Please try again later.",
    ErrorKind.EXTERNAL_SERVICE: "An external service is temporarily unavailable.",
    ErrorKind.INTERNAL: "An internal error occurred. Please try again later.",
}


def build_error_payload(code: str, message: str, status: int) -> Dict[str, Any]:
    return {"error": {"code": code, "message": message, "status": status}}


class ApiError(Exception):
    """Application-scoped error for standardized API responses."""

    def __init__(self, kind: ErrorKind, detail: str):
        super().__init__(detail)
        self.kind = kind
        self.detail = detail

    def __str__(self) -> str:
        return f"{LABELS[self.kind]}: {self.detail}"

    def __repr__(self) -> str:
        return f"ApiError(kind={self.kind.name}, detail={self.detail!r})"

    def status_code(self) -> int:
        return STATUS_CODES[self.kind]

    def error_code(self) -> str:
        """Stable code for client-side branching."""
        return ERROR_CODES[self.kind]

    def should_log(self) -> bool:
        """Only system faults are logged; client mistakes are not."""
        return self.kind in GENERIC_MESSAGES

    def user_message(self) -> str:
        """Message safe to return to the caller."""
        return GENERIC_MESSAGES.get(self.kind, self.detail)

    def to_payload(self) -> Dict[str, Any]:
        return build_error_payload(self.error_code(), self.user_message(), self.status_code())

    def to_response(self) -> JSONResponse:
        """Render the error as a JSON response, logging system faults first."""
        status_code = self.status_code()
        if self.should_log():
            logger.error(
                "API error: %s",
                self,
                extra={
                    "error_kind": self.kind.value,
                    "error_code": self.error_code(),
                    "status": status_code,
                    "detail": self.detail,
                },
            )
        return JSONResponse(status_code=status_code, content=self.to_payload())

    # Helpers for common error scenarios

    @classmethod
    def validation(cls, message: str) -> "ApiError":
        return cls(ErrorKind.VALIDATION, message)

    @classmethod
    def not_found(cls, resource: str) -> "ApiError":
        return cls(ErrorKind.NOT_FOUND, f"{resource} not found")

    @classmethod
    def unauthorized(cls, message: str) -> "ApiError":
        return cls(ErrorKind.AUTHENTICATION, message)

    @classmethod
    def forbidden(cls, message: str) -> "ApiError":
        return cls(ErrorKind.AUTHORIZATION, message)

    @classmethod
    def conflict(cls, message: str) -> "ApiError":
        return cls(ErrorKind.CONFLICT, message)

    @classmethod
    def internal(cls, message: str) -> "ApiError":
        return cls(ErrorKind.INTERNAL, message)

    @classmethod
    def database(cls, message: str) -> "ApiError":
        return cls(ErrorKind.DATABASE, message)


async def app_error_handler(_: Request, exc: ApiError) -> JSONResponse:
    return exc.to_response()


async def request_validation_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    first = errors[0] if errors else {}
    if first.get("type") == "json_invalid":
        error = ApiError(ErrorKind.SERIALIZATION, "Request body is not valid JSON")
    else:
        location = ".".join(str(part) for part in first.get("loc", ())[1:])
        message = first.get("msg", "Invalid request")
        error = ApiError.validation(f"{location}: {message}" if location else message)
    return error.to_response()


async def database_error_handler(_: Request, exc: SQLAlchemyError) -> JSONResponse:
    return ApiError.database(str(exc)).to_response()


def register_exception_handlers(app: FastAPI) -> None:
    """Route every error the API can raise through ``ApiError``."""
    app.add_exception_handler(ApiError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(SQLAlchemyError, database_error_handler)
