"""Monadic Error Handling Types

Implements Result/Either types for deterministic, composable error
propagation. Every public engine operation returns a Result so callers at
the UI or HTTP boundary can render a concise message instead of a raw
driver exception.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Generic, NoReturn, TypeVar, Union, final
from uuid import uuid4

T = TypeVar("T")
E = TypeVar("E", bound="AppError")


class ErrorCode(Enum):
    """Hierarchical error code taxonomy.

    E2xxx: Validation / record shape errors
    E4xxx: Store errors (the database rejected the operation)
    E5xxx: Business logic errors (our own invariants)
    E6xxx: Resource errors (files)
    E9xxx: Internal/Unknown errors
    """
    # Validation (E2xxx)
    E2000_VALIDATION_GENERIC = 2000
    E2001_REQUIRED_FIELD_MISSING = 2001
    E2002_INVALID_FORMAT = 2002
    E2003_OUT_OF_RANGE = 2003
    E2004_INVALID_TYPE = 2004
    E2006_EMPTY_ARRAY = 2006
    E2021_INVALID_JSON = 2021

    # Store (E4xxx)
    E4000_DATABASE_GENERIC = 4000
    E4001_CONNECTION_FAILED = 4001
    E4003_TRANSACTION_FAILED = 4003
    E4010_NOT_FOUND = 4010
    E4011_DUPLICATE_KEY = 4011
    E4012_FOREIGN_KEY_VIOLATION = 4012
    E4013_CHECK_CONSTRAINT = 4013
    E4021_SCHEMA_MISMATCH = 4021

    # Business Logic (E5xxx)
    E5000_BUSINESS_GENERIC = 5000
    E5004_INVARIANT_VIOLATED = 5004

    # Resource (E6xxx)
    E6000_RESOURCE_GENERIC = 6000
    E6001_FILE_NOT_FOUND = 6001
    E6002_FILE_READ_ERROR = 6002
    E6003_FILE_WRITE_ERROR = 6003

    # Internal (E9xxx)
    E9000_INTERNAL_GENERIC = 9000
    E9001_UNEXPECTED_ERROR = 9001

    @property
    def http_status(self) -> int:
        """Map error code to appropriate HTTP status."""
        code = self.value
        if 2000 <= code < 2100:
            return 422
        if code == 4010:
            return 404
        if 4011 <= code < 4020:
            return 409
        if 4000 <= code < 4100:
            return 503
        if 5000 <= code < 5100:
            return 409
        if code == 6001:
            return 404
        return 500

    @property
    def category(self) -> str:
        """Human-readable error category."""
        code = self.value
        if 2000 <= code < 3000:
            return "validation"
        if 4000 <= code < 5000:
            return "database"
        if 5000 <= code < 6000:
            return "business"
        if 6000 <= code < 7000:
            return "resource"
        return "internal"


@dataclass(frozen=True, slots=True)
class ErrorContext:
    """Immutable context for error tracing and debugging."""
    correlation_id: str = field(default_factory=lambda: str(uuid4())[:8])
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    origin: str = ""
    request_id: str | None = None


@dataclass(frozen=True, slots=True)
class AppError:
    """Base application error with full context.

    All errors carry:
    - Typed error code from taxonomy
    - Human-readable message
    - Structured metadata for debugging (line numbers, JSON fragments, ...)
    - Tracing context
    - Optional cause for error chaining
    """
    code: ErrorCode
    message: str
    context: ErrorContext = field(default_factory=ErrorContext)
    metadata: dict = field(default_factory=dict)
    cause: Exception | None = None

    def with_context(self, **kwargs) -> AppError:
        """Create new error with updated context."""
        new_ctx = ErrorContext(
            correlation_id=kwargs.get("correlation_id") or self.context.correlation_id,
            timestamp=self.context.timestamp,
            origin=kwargs.get("origin", self.context.origin),
            request_id=kwargs.get("request_id", self.context.request_id),
        )
        return AppError(
            code=self.code,
            message=self.message,
            context=new_ctx,
            metadata=self.metadata,
            cause=self.cause,
        )

    def to_dict(self) -> dict:
        """Serialize error for API responses."""
        return {
            "error": {
                "code": self.code.name,
                "code_num": self.code.value,
                "message": self.message,
                "category": self.code.category,
                "correlation_id": self.context.correlation_id,
                "timestamp": self.context.timestamp.isoformat(),
                "metadata": self.metadata,
            }
        }

    def __str__(self) -> str:
        return f"[{self.code.name}] {self.message}"


@final
@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Success variant of Result monad."""
    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        """Extract the value. Safe because Ok always contains a value."""
        return self.value

    def unwrap_err(self) -> NoReturn:
        raise ValueError(f"Called unwrap_err on Ok: {self.value!r}")


@final
@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """Failure variant of Result monad."""
    error: E

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self) -> NoReturn:
        """Raises because Err has no value to unwrap."""
        raise ValueError(f"Called unwrap on Err: {self.error}")

    def unwrap_err(self) -> E:
        """Extract the error."""
        return self.error


# Type alias for Result monad
Result = Union[Ok[T], Err[E]]

