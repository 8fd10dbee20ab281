"""
Custom exception classes and FastAPI exception handlers.

Every failure the API reports carries a stable ``kind`` (the class-level
name clients can switch on) next to the human readable ``detail``.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from app.config import settings

log = logging.getLogger(__name__)


class AppException(Exception):
    """Base application exception."""

    kind = "AppError"

    def __init__(self, status_code: int, detail: str):
        super().__init__(detail)
        self.status_code = status_code
        self.detail = detail


# ── 400 ──────────────────────────────────────────────────

class BadRequestException(AppException):
    kind = "BadRequest"

    def __init__(self, detail: str = "Bad request"):
        super().__init__(status_code=400, detail=detail)


class MissingCredentials(BadRequestException):
    kind = "MissingCredentials"

    def __init__(self, detail: str = "Missing details"):
        super().__init__(detail)


class MissingFields(BadRequestException):
    kind = "MissingFields"

    def __init__(self, detail: str = "Please provide all required fields"):
        super().__init__(detail)


class InvalidRole(BadRequestException):
    kind = "InvalidRole"

    def __init__(self, detail: str = "Invalid role specified"):
        super().__init__(detail)


class PasswordTooLong(BadRequestException):
    kind = "PasswordTooLong"

    def __init__(self, detail: str = "Password cannot be longer than 72 bytes"):
        super().__init__(detail)


# ── 401 ──────────────────────────────────────────────────

class UnauthorizedException(AppException):
    kind = "Unauthorized"

    def __init__(self, detail: str = "Unauthorized"):
        super().__init__(status_code=401, detail=detail)


class InvalidCredentials(UnauthorizedException):
    kind = "InvalidCredentials"

    def __init__(self, detail: str = "Invalid credentials"):
        super().__init__(detail)


class InvalidToken(UnauthorizedException):
    kind = "InvalidToken"

    def __init__(self, detail: str = "Invalid token"):
        super().__init__(detail)


class ExpiredToken(UnauthorizedException):
    kind = "ExpiredToken"

    def __init__(self, detail: str = "Token expired"):
        super().__init__(detail)


class Unauthenticated(UnauthorizedException):
    kind = "Unauthenticated"

    def __init__(self, detail: str = "No token provided, authorization denied"):
        super().__init__(detail)


# ── 403 ──────────────────────────────────────────────────

class ForbiddenException(AppException):
    kind = "Forbidden"

    def __init__(self, detail: str = "Forbidden"):
        super().__init__(status_code=403, detail=detail)


class AccountDeactivated(ForbiddenException):
    kind = "AccountDeactivated"

    def __init__(self, detail: str = "Account is deactivated. Please contact administrator."):
        super().__init__(detail)


class InsufficientRole(ForbiddenException):
    kind = "InsufficientRole"

    def __init__(self, detail: str = "Insufficient role"):
        super().__init__(detail)


class NotOwner(ForbiddenException):
    kind = "NotOwner"

    def __init__(self, detail: str = "You don't have permission to modify this site"):
        super().__init__(detail)


# ── 404 / 409 / 503 ──────────────────────────────────────

class NotFoundException(AppException):
    kind = "NotFound"

    def __init__(self, resource: str = "Resource"):
        super().__init__(status_code=404, detail=f"{resource} not found")


class PrincipalNotFound(AppException):
    """
    The user behind a login attempt or a token does not exist.

    Login reports it as 404; a token whose subject vanished is a 401.
    """

    kind = "PrincipalNotFound"

    def __init__(self, detail: str = "User not found", status_code: int = 404):
        super().__init__(status_code=status_code, detail=detail)


class ConflictException(AppException):
    kind = "Conflict"

    def __init__(self, detail: str = "Resource already exists"):
        super().__init__(status_code=409, detail=detail)


class DuplicateKey(ConflictException):
    kind = "DuplicateKey"


class StoreUnavailable(AppException):
    kind = "StoreUnavailable"

    def __init__(self, detail: str = "Data store unavailable"):
        super().__init__(status_code=503, detail=detail)


def _error_body(kind: str, detail: str) -> dict:
    return {"success": False, "kind": kind, "detail": detail}


def register_exception_handlers(app: FastAPI) -> None:
    """Register custom exception handlers on the FastAPI app."""

    @app.exception_handler(AppException)
    async def app_exception_handler(request: Request, exc: AppException):
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(exc.kind, exc.detail),
        )

    @app.exception_handler(SQLAlchemyError)
    async def store_exception_handler(request: Request, exc: SQLAlchemyError):
        log.error("Store failure on %s %s: %s", request.method, request.url.path, exc)
        err = StoreUnavailable()
        return JSONResponse(
            status_code=err.status_code,
            content=_error_body(err.kind, err.detail),
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        log.exception("Unhandled error on %s %s", request.method, request.url.path)
        body = _error_body("ServerError", "Internal server error")
        if settings.DEBUG:
            body["error"] = str(exc)
        return JSONResponse(status_code=500, content=body)
