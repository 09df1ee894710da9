import functools
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Generic, TypeVar, Union

from fastapi import status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from omnitrackr.config import settings

logger = logging.getLogger("omnitrackr.result")

T = TypeVar("T")


class ErrorCode(str, Enum):
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_JSON = "INVALID_JSON"
    UNAUTHORIZED = "UNAUTHORIZED"
    INVALID_SESSION = "INVALID_SESSION"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    METHOD_NOT_ALLOWED = "METHOD_NOT_ALLOWED"
    DUPLICATE_NAME = "DUPLICATE_NAME"
    DUPLICATE_USERNAME = "DUPLICATE_USERNAME"
    DUPLICATE_EMAIL = "DUPLICATE_EMAIL"
    DATABASE_ERROR = "DATABASE_ERROR"
    SERVER_ERROR = "SERVER_ERROR"


STATUS_CODES = {
    ErrorCode.VALIDATION_ERROR: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_JSON: status.HTTP_400_BAD_REQUEST,
    ErrorCode.UNAUTHORIZED: status.HTTP_401_UNAUTHORIZED,
    ErrorCode.INVALID_SESSION: status.HTTP_401_UNAUTHORIZED,
    ErrorCode.INVALID_CREDENTIALS: status.HTTP_401_UNAUTHORIZED,
    ErrorCode.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    ErrorCode.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.METHOD_NOT_ALLOWED: status.HTTP_405_METHOD_NOT_ALLOWED,
    ErrorCode.DUPLICATE_NAME: status.HTTP_409_CONFLICT,
    ErrorCode.DUPLICATE_USERNAME: status.HTTP_409_CONFLICT,
    ErrorCode.DUPLICATE_EMAIL: status.HTTP_409_CONFLICT,
    ErrorCode.DATABASE_ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorCode.SERVER_ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


class ServiceError(Exception):
    """Raised inside services; turned into an ``Err`` by ``service_result``."""

    def __init__(self, code: ErrorCode, message: str, details: list | None = None):
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or []


@dataclass(frozen=True)
class Ok(Generic[T]):
    data: T

    @property
    def success(self) -> bool:
        return True


@dataclass(frozen=True)
class Err:
    code: ErrorCode
    message: str
    details: list = field(default_factory=list)

    @property
    def success(self) -> bool:
        return False

    @classmethod
    def from_exception(cls, exc: ServiceError) -> "Err":
        return cls(exc.code, exc.message, exc.details)


Result = Union[Ok[Any], Err]


def service_result(func):
    """Wrap an async service call taking ``db`` first so it returns ``Ok``/``Err``.

    Storage failures roll the session back and come out as DATABASE_ERROR;
    the driver message is only exposed when DEBUG is on.
    """

    @functools.wraps(func)
    async def wrapper(db, *args, **kwargs) -> Result:
        try:
            return Ok(await func(db, *args, **kwargs))
        except ServiceError as exc:
            await db.rollback()
            return Err.from_exception(exc)
        except SQLAlchemyError as exc:
            await db.rollback()
            logger.exception("Database error in %s", func.__qualname__)
            details = [str(exc)] if settings.DEBUG else []
            return Err(ErrorCode.DATABASE_ERROR, "Database operation failed", details)

    return wrapper


def success_body(data: Any) -> dict:
    return {"success": True, "data": data}


def error_body(code: ErrorCode, message: str, details: list | None = None) -> dict:
    return {
        "success": False,
        "error": {"code": ErrorCode(code).value, "message": message, "details": details or []},
    }


def error_response(code: ErrorCode, message: str, details: list | None = None, headers: dict | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=STATUS_CODES[ErrorCode(code)],
        content=jsonable_encoder(error_body(code, message, details)),
        headers=headers,
    )


def to_response(result: Result, status_code: int = status.HTTP_200_OK) -> JSONResponse:
    if isinstance(result, Err):
        return error_response(result.code, result.message, result.details)
    return JSONResponse(status_code=status_code, content=jsonable_encoder(success_body(result.data)))
