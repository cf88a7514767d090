"""Monadic Error Handling System

Type-safe error handling inspired by Haskell's Either monad and Rust's
Result type.

Key components:
- Result[T, E]: Monadic container for success/failure
- AppError: Base error type with full context
- ErrorCode: Hierarchical error code taxonomy
- Builder functions: Ergonomic error construction

Usage:
    from core.errors import Ok, Err, Result, AppError, out_of_range

    async def page(offset: int) -> Result[list[str], AppError]:
        if offset < 0:
            return out_of_range("offset", offset, min_val=0, origin="queue")
        return Ok(await fetch(offset))

    match await page(0):
        case Ok(lemmas):
            render(lemmas)
        case Err(error):
            log.error(error.message, code=error.code.name)
"""
from .types import (
    # Core types
    Result,
    Ok,
    Err,
    AppError,
    ErrorCode,
    ErrorContext,
)

from .builders import (
    # Validation (E2xxx)
    validation_error,
    required_field,
    invalid_type,
    empty_array,
    invalid_json,
    out_of_range,
    # Store (E4xxx)
    db_error,
    duplicate_key,
    foreign_key_violation,
    schema_mismatch,
    db_connection_failed,
    transaction_failed,
    # Business (E5xxx)
    invariant_violated,
    # Resource (E6xxx)
    resource_error,
    file_not_found,
    file_read_error,
    file_write_error,
    # Internal (E9xxx)
    internal_error,
)

from .boundaries import (
    AppErrorException,
    ErrorMapper,
    DatabaseErrorMapper,
    RecordErrorMapper,
    map_errors,
    map_db_errors,
)

__all__ = [
    # Core types
    "Result",
    "Ok",
    "Err",
    "AppError",
    "ErrorCode",
    "ErrorContext",
    # Validation (E2xxx)
    "validation_error",
    "required_field",
    "invalid_type",
    "empty_array",
    "invalid_json",
    "out_of_range",
    # Store (E4xxx)
    "db_error",
    "duplicate_key",
    "foreign_key_violation",
    "schema_mismatch",
    "db_connection_failed",
    "transaction_failed",
    # Business (E5xxx)
    "invariant_violated",
    # Resource (E6xxx)
    "resource_error",
    "file_not_found",
    "file_read_error",
    "file_write_error",
    # Internal (E9xxx)
    "internal_error",
    # Boundaries
    "AppErrorException",
    "ErrorMapper",
    "DatabaseErrorMapper",
    "RecordErrorMapper",
    "map_errors",
    "map_db_errors",
]
