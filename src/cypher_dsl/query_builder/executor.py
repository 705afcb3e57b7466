"""Neo4j execution adapter.

This module runs built statements through the async Neo4j driver. It is the
only part of the package that performs I/O.
"""

from typing import Any

from neo4j import AsyncDriver, AsyncGraphDatabase, Query
from neo4j.exceptions import Neo4jError

from cypher_dsl.core.base import DatabaseErrorDetails, ErrorLevel
from cypher_dsl.core.config import Settings, get_settings
from cypher_dsl.core.decorators import with_error_handling
from cypher_dsl.core.errors import QueryExecutionError
from cypher_dsl.core.logging import get_logger

from .interfaces import ResultTransformer

logger = get_logger(__name__)


def to_execution_error(error: Exception) -> QueryExecutionError:
    """Wrap a driver failure in a QueryExecutionError."""
    return QueryExecutionError(
        f"Query execution failed: {error}",
        details=DatabaseErrorDetails(
            source="executor",
            operation="execute",
            service_name="neo4j",
            neo4j_code=error.code if isinstance(error, Neo4jError) else None,
        ),
    )


def create_neo4j_driver(settings: Settings | None = None) -> AsyncDriver:
    """Create a Neo4j async driver from settings.

    Args:
        settings: Connection settings, the process-wide settings when omitted

    Returns:
        AsyncDriver: Unconnected driver; the caller owns it and must close it
    """
    settings = settings or get_settings()
    logger.info("Creating Neo4j driver", extra={"uri": settings.neo4j_uri})
    return AsyncGraphDatabase.driver(
        settings.neo4j_uri,
        auth=(settings.neo4j_user, settings.neo4j_password.get_secret_value()),
    )


class Neo4jQueryExecutor:
    """Runs ``(query, parameters)`` pairs in a Neo4j driver session.

    Example:
        ```python
        driver = create_neo4j_driver()
        executor = Neo4jQueryExecutor(driver)
        records = await match(node("n")).returns(identifier("n")).execute(executor)
        ```
    """

    def __init__(
        self,
        driver: AsyncDriver,
        database: str | None = None,
        timeout: float | None = None,
        result_transformer: ResultTransformer | None = None,
    ) -> None:
        """Initialize the executor.

        Args:
            driver: Neo4j AsyncDriver
            database: Target database, the server default when omitted
            timeout: Per-transaction timeout in seconds
            result_transformer: Optional function applied to every record
        """
        self.driver = driver
        self.database = database
        self.timeout = timeout
        self.result_transformer = result_transformer

    @classmethod
    def from_settings(cls, driver: AsyncDriver, settings: Settings | None = None) -> "Neo4jQueryExecutor":
        settings = settings or get_settings()
        return cls(driver, database=settings.neo4j_database, timeout=settings.query_timeout)

    @with_error_handling(error_level=ErrorLevel.ERROR, convert=to_execution_error)
    async def execute(self, query: str, parameters: dict[str, Any]) -> list[Any]:
        """Execute a query and collect its records.

        Args:
            query: Rendered Cypher text
            parameters: Values for the placeholders in the query

        Returns:
            List of records, transformed if a transformer was configured

        Raises:
            QueryExecutionError: If the driver reports a failure
        """
        logger.debug(
            "Executing Cypher statement",
            extra={"query": query, "parameter_names": sorted(parameters), "database": self.database},
        )
        session_kwargs: dict[str, Any] = {}
        if self.database is not None:
            session_kwargs["database"] = self.database

        async with self.driver.session(**session_kwargs) as session:
            result = await session.run(Query(query, timeout=self.timeout), parameters)
            records = [record async for record in result]

        logger.debug("Cypher statement returned", extra={"record_count": len(records)})
        if self.result_transformer is not None:
            return [self.result_transformer(record) for record in records]
        return records
