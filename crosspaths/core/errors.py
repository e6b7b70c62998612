"""Error Hierarchy — typed, categorized exceptions for all crossing-engine failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Domain errors (400-level) are caller mistakes; storage errors (500-level) are infrastructure
    - to_response() produces the REST envelope used by the global handlers
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with CrossPathsError base: FastAPI global handler catches all
    - WriteFailure and LookupFailure are fatal for record_visit; PairUpdateFailure is
      collected per pair and never aborts sibling pairs
    - ErrorContext as dataclass: observability fields without coupling to logging
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    RESOURCE_NOT_FOUND = "resource_not_found"
    DATABASE = "database"
    INTERNAL = "internal"
    CONFLICT = "conflict"


@dataclass
class ErrorContext:
    """Context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    user_id: str | None = None
    venue_id: str | None = None
    pair: tuple[str, str] | None = None
    debug_info: dict[str, Any] | None = None
    retry_after_ms: int | None = None


class CrossPathsError(Exception):
    """Base exception for all crossing-engine errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "user_id": self.context.user_id,
                    "venue_id": self.context.venue_id,
                    "pair": list(self.context.pair) if self.context.pair else None,
                    "retry_after_ms": self.context.retry_after_ms,
                },
            }
        }


# ─── Domain Errors (400-level) ──────────────────────────────────

class InvalidPairError(CrossPathsError):
    """Two identical user ids cannot form a pair."""
    def __init__(
        self, user_id: str, context: ErrorContext | None = None,
        message: str | None = None,
    ):
        super().__init__(
            message or f"User '{user_id}' cannot cross paths with themselves",
            "INVALID_PAIR", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.user_id = user_id


class ResourceNotFoundError(CrossPathsError):
    """Requested resource does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class VenueNotFoundError(ResourceNotFoundError):
    """No venue registered under the given id or name."""
    def __init__(self, lookup: str, context: ErrorContext | None = None):
        super().__init__("Venue", lookup, context)


class VenueConflictError(CrossPathsError):
    """Venue id or name already registered."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "VENUE_CONFLICT", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, context, 409,
        )


# ─── Storage Errors (500-level) ─────────────────────────────────

class DatabaseError(CrossPathsError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation


class WriteFailure(CrossPathsError):
    """The visit could not be durably recorded. Fatal for record_visit."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            f"Visit write failed: {message}",
            "VISIT_WRITE_FAILED", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )


class LookupFailure(CrossPathsError):
    """Other visitors of a venue could not be enumerated. Fatal for record_visit."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            f"Visitor lookup failed: {message}",
            "VISITOR_LOOKUP_FAILED", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )


class PairUpdateFailure(CrossPathsError):
    """A single pair's counter or relationship update failed. Non-fatal."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            f"Pair update failed: {message}",
            "PAIR_UPDATE_FAILED", ErrorCategory.DATABASE,
            ErrorSeverity.WARNING, context, 503,
        )


class UnsupportedDialectError(CrossPathsError):
    """Atomic upserts are only implemented for PostgreSQL and SQLite."""
    def __init__(self, dialect: str, context: ErrorContext | None = None):
        super().__init__(
            f"No atomic upsert available for dialect '{dialect}'",
            "UNSUPPORTED_DIALECT", ErrorCategory.INTERNAL,
            ErrorSeverity.CRITICAL, context, 500,
        )
        self.dialect = dialect
