"""Specific error types for cypher-dsl."""

from typing import Any

from .base import (
    ApplicationError,
    ConstructionErrorDetails,
    DatabaseErrorDetails,
    ErrorCode,
    ErrorLevel,
    ValidationErrorDetails,
)


class QueryConstructionError(ApplicationError):
    """Structural misuse of the builder API.

    Raised when a clause is added in a state that does not allow it, when a
    pattern is incomplete, or when an incomplete statement is built.
    """

    def __init__(
        self,
        message: str,
        details: ConstructionErrorDetails | dict | None = None,
        code: ErrorCode = ErrorCode.QUERY_CONSTRUCTION,
    ):
        super().__init__(
            message=message,
            code=code,
            level=ErrorLevel.ERROR,
            details=details
            or ConstructionErrorDetails(source="query_builder", operation="construct"),
        )


class InvalidValueError(ApplicationError):
    """A value passed to a builder call cannot be represented."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        actual_value: Any = None,
        constraint: str | None = None,
        expected_type: str | None = None,
        operation: str = "construct",
    ):
        super().__init__(
            message=message,
            code=ErrorCode.INVALID_INPUT,
            level=ErrorLevel.ERROR,
            details=ValidationErrorDetails(
                source="query_builder",
                operation=operation,
                field=field,
                actual_value=repr(actual_value) if actual_value is not None else None,
                constraint=constraint,
                expected_type=expected_type,
            ),
        )


class QueryExecutionError(ApplicationError):
    """The execution collaborator rejected or failed to run a query."""

    def __init__(self, message: str, details: DatabaseErrorDetails | None = None):
        super().__init__(
            message=message,
            code=ErrorCode.DB_QUERY,
            level=ErrorLevel.ERROR,
            details=details
            or DatabaseErrorDetails(
                source="executor",
                operation="execute",
                service_name="neo4j",
            ),
        )
