"""Domain-Specific Error Builders

Ergonomic constructors for typed errors across all domains.
Each builder creates AppError with appropriate code and context.
"""
from pathlib import Path

from .types import AppError, ErrorCode, ErrorContext, Err


# =============================================================================
# Validation / Record Shape Errors (E2xxx)
# =============================================================================

def validation_error(
    message: str,
    *,
    code: ErrorCode = ErrorCode.E2000_VALIDATION_GENERIC,
    field: str | None = None,
    line: int | None = None,
    fragment: str | None = None,
    origin: str = "",
    **metadata,
) -> Err[AppError]:
    """Create validation error.

    ``line`` is the 1-based line of the input file, ``fragment`` the
    offending JSON value (truncated).
    """
    meta = {"field": field, "line": line, "fragment": fragment, **metadata}
    if line is not None:
        message = f"line {line}: {message}"
    return Err(AppError(
        code=code,
        message=message,
        context=ErrorContext(origin=origin),
        metadata={k: v for k, v in meta.items() if v is not None},
    ))


def required_field(
    field: str, line: int | None = None, fragment: str | None = None, origin: str = ""
) -> Err[AppError]:
    return validation_error(
        f"Required field '{field}' is missing",
        code=ErrorCode.E2001_REQUIRED_FIELD_MISSING,
        field=field,
        line=line,
        fragment=fragment,
        origin=origin,
    )


def invalid_type(
    field: str,
    expected: str,
    line: int | None = None,
    fragment: str | None = None,
    origin: str = "",
) -> Err[AppError]:
    return validation_error(
        f"Field '{field}' has the wrong type: expected {expected}",
        code=ErrorCode.E2004_INVALID_TYPE,
        field=field,
        line=line,
        fragment=fragment,
        expected=expected,
        origin=origin,
    )


def empty_array(
    field: str, line: int | None = None, origin: str = ""
) -> Err[AppError]:
    return validation_error(
        f"Array '{field}' is empty",
        code=ErrorCode.E2006_EMPTY_ARRAY,
        field=field,
        line=line,
        origin=origin,
    )


def invalid_json(
    message: str, line: int | None = None, fragment: str | None = None, origin: str = ""
) -> Err[AppError]:
    return validation_error(
        f"Invalid JSON: {message}",
        code=ErrorCode.E2021_INVALID_JSON,
        line=line,
        fragment=fragment,
        origin=origin,
    )


def out_of_range(
    field: str,
    value: int | float,
    min_val: int | float | None = None,
    max_val: int | float | None = None,
    origin: str = "",
) -> Err[AppError]:
    bounds = []
    if min_val is not None:
        bounds.append(f">= {min_val}")
    if max_val is not None:
        bounds.append(f"<= {max_val}")
    return validation_error(
        f"Value {value} for '{field}' out of range ({', '.join(bounds)})",
        code=ErrorCode.E2003_OUT_OF_RANGE,
        field=field,
        value=str(value),
        origin=origin,
    )


# =============================================================================
# Store Errors (E4xxx)
# =============================================================================

def db_error(
    message: str,
    *,
    code: ErrorCode = ErrorCode.E4000_DATABASE_GENERIC,
    table: str | None = None,
    origin: str = "",
    cause: Exception | None = None,
    **metadata,
) -> Err[AppError]:
    """Create store error."""
    meta = {"table": table, **metadata}
    return Err(AppError(
        code=code,
        message=message,
        context=ErrorContext(origin=origin),
        metadata={k: v for k, v in meta.items() if v is not None},
        cause=cause,
    ))


def duplicate_key(reason: str, origin: str = "", cause: Exception | None = None) -> Err[AppError]:
    return db_error(
        f"Duplicate key: {reason}",
        code=ErrorCode.E4011_DUPLICATE_KEY,
        origin=origin,
        cause=cause,
    )


def foreign_key_violation(reason: str, origin: str = "", cause: Exception | None = None) -> Err[AppError]:
    return db_error(
        f"Referenced row does not exist: {reason}",
        code=ErrorCode.E4012_FOREIGN_KEY_VIOLATION,
        origin=origin,
        cause=cause,
    )


def schema_mismatch(reason: str, origin: str = "", cause: Exception | None = None) -> Err[AppError]:
    return db_error(
        f"Store schema is missing or outdated: {reason}",
        code=ErrorCode.E4021_SCHEMA_MISMATCH,
        origin=origin,
        cause=cause,
    )


def db_connection_failed(reason: str = "", origin: str = "") -> Err[AppError]:
    msg = "Database connection failed"
    if reason:
        msg += f": {reason}"
    return db_error(
        msg,
        code=ErrorCode.E4001_CONNECTION_FAILED,
        origin=origin,
    )


def transaction_failed(reason: str = "", origin: str = "", cause: Exception | None = None) -> Err[AppError]:
    msg = "Database transaction failed"
    if reason:
        msg += f": {reason}"
    return db_error(
        msg,
        code=ErrorCode.E4003_TRANSACTION_FAILED,
        origin=origin,
        cause=cause,
    )


# =============================================================================
# Business Logic Errors (E5xxx)
# =============================================================================

def invariant_violated(invariant: str, origin: str = "", **metadata) -> Err[AppError]:
    return Err(AppError(
        code=ErrorCode.E5004_INVARIANT_VIOLATED,
        message=f"Invariant violated: {invariant}",
        context=ErrorContext(origin=origin),
        metadata=metadata,
    ))


# =============================================================================
# Resource Errors (E6xxx)
# =============================================================================

def resource_error(
    message: str,
    *,
    code: ErrorCode = ErrorCode.E6000_RESOURCE_GENERIC,
    path: str | Path | None = None,
    origin: str = "",
    cause: Exception | None = None,
) -> Err[AppError]:
    """Create file/resource error."""
    return Err(AppError(
        code=code,
        message=message,
        context=ErrorContext(origin=origin),
        metadata={"path": str(path)} if path is not None else {},
        cause=cause,
    ))


def file_not_found(path: str | Path, origin: str = "", cause: Exception | None = None) -> Err[AppError]:
    return resource_error(
        f"File not found: {path}",
        code=ErrorCode.E6001_FILE_NOT_FOUND,
        path=path,
        origin=origin,
        cause=cause,
    )


def file_read_error(
    path: str | Path | None, reason: str = "", origin: str = "", cause: Exception | None = None
) -> Err[AppError]:
    msg = f"Error reading file: {path}" if path is not None else "Error reading file"
    if reason:
        msg += f" ({reason})"
    return resource_error(
        msg,
        code=ErrorCode.E6002_FILE_READ_ERROR,
        path=path,
        origin=origin,
        cause=cause,
    )


def file_write_error(
    path: str | Path, reason: str = "", origin: str = "", cause: Exception | None = None
) -> Err[AppError]:
    msg = f"Error writing file: {path}"
    if reason:
        msg += f" ({reason})"
    return resource_error(
        msg,
        code=ErrorCode.E6003_FILE_WRITE_ERROR,
        path=path,
        origin=origin,
        cause=cause,
    )


# =============================================================================
# Internal Errors (E9xxx)
# =============================================================================

def internal_error(
    message: str,
    *,
    code: ErrorCode = ErrorCode.E9001_UNEXPECTED_ERROR,
    origin: str = "",
    cause: Exception | None = None,
    **metadata,
) -> Err[AppError]:
    """Create internal/unexpected error."""
    return Err(AppError(
        code=code,
        message=message,
        context=ErrorContext(origin=origin),
        metadata=metadata,
        cause=cause,
    ))
