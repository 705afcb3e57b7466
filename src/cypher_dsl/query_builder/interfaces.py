"""Interfaces for handing built statements to an execution backend.

The builder only produces ``(query, parameters)`` pairs; anything that can run
such a pair satisfies ``QueryExecutor``.
"""

from collections.abc import Callable
from typing import Any, Protocol, TypeVar, runtime_checkable

# Generic type variable for query results
T = TypeVar("T")

ResultTransformer = Callable[[Any], T]


@runtime_checkable
class QueryExecutor(Protocol):
    """Protocol for executing rendered Cypher statements."""

    async def execute(self, query: str, parameters: dict[str, Any]) -> list[Any]:
        """Execute a query.

        Args:
            query: Rendered Cypher text
            parameters: Values for the placeholders used in the query

        Returns:
            The records produced by the query
        """
        ...


@runtime_checkable
class BuildableQuery(Protocol):
    """Protocol for complete statements that can be rendered and executed."""

    def build(self) -> tuple[str, dict[str, Any]]:
        """Render the statement.

        Returns:
            Tuple of (query text, parameter values)
        """
        ...
