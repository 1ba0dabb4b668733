"""
Error Hierarchy: Structured, Fail-Fast Exceptions

Design Principles:
    - Malformed input is fatal to the whole build (no partial dual index)
    - Never swallow errors; chain the underlying cause
    - Carry machine-readable context for structured logging

Each error type includes:
    - Unique error code for programmatic handling
    - Human-readable message
    - Context dict (line number, offending token, ...)
    - Optional cause for root cause analysis

Normal outcomes are not errors: an empty profile yields an empty neighbor
stream, and NaN similarity values are passed through unmodified.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional


# =============================================================================
# ERROR CODE ENUMERATION
# =============================================================================
class ErrorCode(Enum):
    """
    Canonical error codes.

    Ranges:
        1000-1999: Input parsing / index resolution errors
        2000-2999: Query errors
        3000-3999: State errors
        5000-5999: Configuration errors
    """
    # Parse errors (1xxx)
    PARSE_MALFORMED_RECORD = 1001
    PARSE_INVALID_TOKEN = 1002
    PARSE_INVALID_WEIGHT = 1003
    PARSE_UNKNOWN_ID = 1004
    PARSE_INDEX_OUT_OF_RANGE = 1005

    # Query errors (2xxx)
    QUERY_NOT_INDEXED = 2001
    QUERY_INDEX_OUT_OF_RANGE = 2002

    # State errors (3xxx)
    STATE_FINALIZED = 3001
    STATE_NOT_FINALIZED = 3002

    # Configuration errors (5xxx)
    CONFIG_INVALID = 5001


# =============================================================================
# BASE ERROR CLASS
# =============================================================================
@dataclass(eq=False)
class FastRecError(Exception):
    """
    Base class for all fastrec errors.

    Subclasses add convenience constructors; callers catch by class.
    """

    code: ErrorCode
    message: str
    cause: Optional[Exception] = None
    context: dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __post_init__(self) -> None:
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Serialize for logging."""
        return {
            "code": self.code.name,
            "code_value": self.code.value,
            "message": self.message,
            "context": self.context,
            "cause": repr(self.cause) if self.cause else None,
            "timestamp": self.timestamp.isoformat(),
        }

    def __str__(self) -> str:
        return f"[{self.code.name}] {self.message}"


# =============================================================================
# PARSE ERRORS
# =============================================================================
@dataclass(eq=False)
class ParseError(FastRecError):
    """Record could not be turned into (user index, item index, weight)."""

    @classmethod
    def malformed_record(cls, position: int, record: object) -> ParseError:
        return cls(
            code=ErrorCode.PARSE_MALFORMED_RECORD,
            message=f"Record {position}: expected user and item fields",
            context={"position": position, "record": repr(record)[:200]},
        )

    @classmethod
    def invalid_token(
        cls,
        field_name: str,
        token: Any,
        cause: Optional[Exception] = None,
    ) -> ParseError:
        return cls(
            code=ErrorCode.PARSE_INVALID_TOKEN,
            message=f"Cannot parse {field_name} token {token!r}",
            cause=cause,
            context={"field": field_name, "token": token},
        )

    @classmethod
    def invalid_weight(
        cls,
        token: Any,
        reason: str,
        cause: Optional[Exception] = None,
    ) -> ParseError:
        return cls(
            code=ErrorCode.PARSE_INVALID_WEIGHT,
            message=f"Invalid weight {token!r}: {reason}",
            cause=cause,
            context={"token": token, "reason": reason},
        )

    @classmethod
    def unknown_id(cls, field_name: str, raw_id: Any) -> ParseError:
        """Raw identifier not present in the supplied index collaborator."""
        return cls(
            code=ErrorCode.PARSE_UNKNOWN_ID,
            message=f"Unknown {field_name} id {raw_id!r}",
            context={"field": field_name, "raw_id": raw_id},
        )

    @classmethod
    def index_out_of_range(cls, field_name: str, idx: int, count: int) -> ParseError:
        return cls(
            code=ErrorCode.PARSE_INDEX_OUT_OF_RANGE,
            message=f"{field_name} index {idx} outside [0, {count})",
            context={"field": field_name, "idx": idx, "count": count},
        )

    def at_position(self, position: int) -> ParseError:
        """Same error annotated with the record (or input line) it came from."""
        return ParseError(
            code=self.code,
            message=f"Record {position}: {self.message}",
            cause=self.cause,
            context={**self.context, "position": position},
            timestamp=self.timestamp,
        )


# =============================================================================
# QUERY ERRORS
# =============================================================================
@dataclass(eq=False)
class QueryError(FastRecError):
    """Query against a structure that cannot answer it."""

    @classmethod
    def not_indexed(cls, idx: int) -> QueryError:
        return cls(
            code=ErrorCode.QUERY_NOT_INDEXED,
            message=f"Index {idx} was excluded by the build filter",
            context={"idx": idx},
        )

    @classmethod
    def out_of_range(cls, idx: int, count: int) -> QueryError:
        return cls(
            code=ErrorCode.QUERY_INDEX_OUT_OF_RANGE,
            message=f"Index {idx} outside [0, {count})",
            context={"idx": idx, "count": count},
        )


# =============================================================================
# STATE ERRORS
# =============================================================================
@dataclass(eq=False)
class InvalidStateError(FastRecError):
    """Operation not allowed in the object's current lifecycle state."""

    @classmethod
    def finalized(cls, operation: str) -> InvalidStateError:
        return cls(
            code=ErrorCode.STATE_FINALIZED,
            message=f"Cannot {operation} after finalize()",
            context={"operation": operation},
        )

    @classmethod
    def not_finalized(cls, operation: str) -> InvalidStateError:
        return cls(
            code=ErrorCode.STATE_NOT_FINALIZED,
            message=f"Cannot {operation} before finalize()",
            context={"operation": operation},
        )


# =============================================================================
# CONFIGURATION ERRORS
# =============================================================================
@dataclass(eq=False)
class ConfigError(FastRecError):
    """Invalid configuration value."""

    @classmethod
    def invalid(cls, param: str, value: Any, reason: str) -> ConfigError:
        return cls(
            code=ErrorCode.CONFIG_INVALID,
            message=f"Invalid config '{param}': {reason}",
            context={"param": param, "value": value, "reason": reason},
        )


# =============================================================================
# EXPORTS
# =============================================================================
__all__ = [
    "ErrorCode",
    "FastRecError",
    "ParseError",
    "QueryError",
    "InvalidStateError",
    "ConfigError",
]
