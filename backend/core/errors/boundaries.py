"""Error Boundary Mappers

Provides module boundary error mapping for clean error propagation.
Each module has a single error type at its boundary (AppError inside a
Result); driver, parser and filesystem exceptions are mapped here.
"""
from __future__ import annotations

import json
from abc import ABC, abstractmethod
from functools import wraps
from typing import Any, Awaitable, Callable, Generic, TypeVar

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import (
    IntegrityError,
    OperationalError,
    SQLAlchemyError,
)

from .types import (
    AppError,
    ErrorCode,
    ErrorContext,
    Err,
    Ok,
    Result,
)
from .builders import (
    db_connection_failed,
    duplicate_key,
    empty_array,
    file_not_found,
    file_read_error,
    foreign_key_violation,
    internal_error,
    invalid_json,
    invalid_type,
    required_field,
    schema_mismatch,
    transaction_failed,
    validation_error,
)

T = TypeVar("T")

_FRAGMENT_LIMIT = 200


class AppErrorException(Exception):
    """Exception wrapper for AppError.

    Raised inside a store transaction to abort it; the boundary decorator
    unwraps it back into ``Err(error)`` after the rollback.
    """

    def __init__(self, error: AppError):
        self.error = error
        super().__init__(str(error))


class ErrorMapper(ABC, Generic[T]):
    """Abstract base for error mappers at module boundaries."""

    @abstractmethod
    def map_error(self, error: AppError) -> AppError:
        """Map internal error to boundary error."""

    @abstractmethod
    def map_exception(self, exc: Exception) -> AppError:
        """Map a raised exception to a boundary error."""

    def map_result(self, result: Result[T, AppError]) -> Result[T, AppError]:
        """Map errors in Result while preserving success values."""
        match result:
            case Ok(_):
                return result
            case Err(e):
                return Err(self.map_error(e))


class DatabaseErrorMapper(ErrorMapper[T]):
    """Maps store-layer errors to clean application errors.

    Distinguishes errors we raised ourselves (AppErrorException, carrying
    validation or invariant codes) from errors the storage engine raised.
    """

    def __init__(self, origin: str = "database"):
        self.origin = origin

    def map_error(self, error: AppError) -> AppError:
        """Attach origin to errors that do not carry one yet."""
        if error.context.origin:
            return error
        return error.with_context(origin=self.origin)

    def map_exception(self, exc: Exception) -> AppError:
        """Map an exception raised inside an engine operation to AppError."""
        if isinstance(exc, AppErrorException):
            return self.map_error(exc.error)
        if isinstance(exc, FileNotFoundError):
            return file_not_found(exc.filename or "", origin=self.origin, cause=exc).error
        if isinstance(exc, UnicodeDecodeError):
            return file_read_error(None, str(exc), origin=self.origin, cause=exc).error
        if isinstance(exc, OSError):
            return file_read_error(exc.filename, exc.strerror or str(exc), origin=self.origin, cause=exc).error
        if isinstance(exc, IntegrityError):
            return self._map_integrity_error(exc)
        if isinstance(exc, OperationalError):
            return self._map_operational_error(exc)
        if isinstance(exc, SQLAlchemyError):
            return transaction_failed(str(exc), origin=self.origin, cause=exc).error

        return internal_error(
            f"Unexpected error: {exc}",
            origin=self.origin,
            cause=exc,
        ).error

    def _map_integrity_error(self, exc: IntegrityError) -> AppError:
        """Map integrity constraint violations."""
        message = str(exc.orig) if exc.orig else str(exc)
        lowered = message.lower()

        if "unique constraint" in lowered:
            return duplicate_key(message, origin=self.origin, cause=exc).error
        if "foreign key" in lowered:
            return foreign_key_violation(message, origin=self.origin, cause=exc).error

        return AppError(
            code=ErrorCode.E4013_CHECK_CONSTRAINT,
            message=f"Constraint violation: {message}",
            context=ErrorContext(origin=self.origin),
            cause=exc,
        )

    def _map_operational_error(self, exc: OperationalError) -> AppError:
        """Map operational/connection errors."""
        message = str(exc.orig) if exc.orig else str(exc)
        lowered = message.lower()

        if "no such table" in lowered or "no such column" in lowered:
            return schema_mismatch(message, origin=self.origin, cause=exc).error
        if "unable to open" in lowered or "connect" in lowered:
            return db_connection_failed(message, origin=self.origin).error

        return transaction_failed(message, origin=self.origin, cause=exc).error


class RecordErrorMapper(ErrorMapper[T]):
    """Maps pydantic decode errors of a single input line to AppError.

    Only the first error is reported: one malformed line aborts the whole
    import, so the caller needs the location, not an exhaustive list.
    """

    def __init__(self, origin: str = "validation"):
        self.origin = origin

    def map_error(self, error: AppError) -> AppError:
        if error.context.origin:
            return error
        return error.with_context(origin=self.origin)

    def map_exception(self, exc: Exception) -> AppError:
        if isinstance(exc, PydanticValidationError):
            return self.map_validation_error(exc)
        return internal_error(str(exc), origin=self.origin, cause=exc).error

    def map_validation_error(self, exc: PydanticValidationError, line: int | None = None) -> AppError:
        """Categorize the first pydantic error as missing field, wrong type, empty array or bad JSON."""
        first = exc.errors()[0]
        field = ".".join(str(loc) for loc in first.get("loc", ())) or "<record>"
        err_type = first.get("type", "")
        fragment = _fragment(first.get("input"))

        if err_type == "json_invalid":
            error = invalid_json(first.get("msg", "malformed line"), line=line, origin=self.origin).error
        elif err_type == "missing":
            error = required_field(field, line=line, fragment=fragment, origin=self.origin).error
        elif err_type == "too_short":
            error = empty_array(field, line=line, origin=self.origin).error
        elif err_type.endswith("_type") or err_type.endswith("_parsing"):
            expected = err_type.removesuffix("_type").removesuffix("_parsing")
            error = invalid_type(field, expected, line=line, fragment=fragment, origin=self.origin).error
        else:
            error = validation_error(
                f"{field}: {first.get('msg', 'invalid value')}",
                field=field,
                line=line,
                fragment=fragment,
                error_type=err_type,
                origin=self.origin,
            ).error
        return AppError(
            code=error.code,
            message=error.message,
            context=error.context,
            metadata=error.metadata,
            cause=exc,
        )


def _fragment(value: Any) -> str | None:
    if value is None:
        return None
    try:
        text = json.dumps(value, ensure_ascii=False)
    except (TypeError, ValueError):
        text = repr(value)
    return text[:_FRAGMENT_LIMIT]


def map_errors(mapper: ErrorMapper[T]):
    """Decorator to map errors at function boundaries.

    The wrapped coroutine may return a Result or raise; either way the
    caller receives a Result.

    Usage:
        @map_errors(DatabaseErrorMapper("queue"))
        async def blacklist(self, lemma: str) -> Result[None, AppError]:
            ...
    """
    def decorator(fn: Callable[..., Awaitable[Result[T, AppError]]]):
        @wraps(fn)
        async def wrapper(*args, **kwargs) -> Result[T, AppError]:
            try:
                result = await fn(*args, **kwargs)
                return mapper.map_result(result)
            except Exception as e:
                return Err(mapper.map_exception(e))
        return wrapper
    return decorator


def map_db_errors(origin: str = "database"):
    """Convenience decorator for store error mapping.

    Usage:
        @map_db_errors("lemmatizer")
        async def lemmatize(self, text: str) -> Result[LemmatizeStats, AppError]:
            ...
    """
    return map_errors(DatabaseErrorMapper(origin))
