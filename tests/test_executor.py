"""Tests for the Neo4j execution adapter, using an in-memory fake driver."""

import asyncio
from typing import Any

import pytest
from neo4j import AsyncDriver
from structlog.testing import capture_logs

from cypher_dsl import (
    Neo4jQueryExecutor,
    QueryExecutor,
    create_neo4j_driver,
    match,
    node,
    param,
)
from cypher_dsl.core.base import ErrorCode
from cypher_dsl.core.config import Settings
from cypher_dsl.core.errors import QueryExecutionError
from cypher_dsl.query_builder.executor import to_execution_error


class FakeResult:
    def __init__(self, records: list[Any]) -> None:
        self._records = records

    def __aiter__(self):
        return self._iterate()

    async def _iterate(self):
        for record in self._records:
            yield record


class FakeSession:
    def __init__(self, driver: "FakeDriver") -> None:
        self.driver = driver

    async def __aenter__(self) -> "FakeSession":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        self.driver.closed_sessions += 1

    async def run(self, query: Any, parameters: dict[str, Any]) -> FakeResult:
        self.driver.runs.append((query, parameters))
        if self.driver.error is not None:
            raise self.driver.error
        return FakeResult(self.driver.records)


class FakeDriver:
    def __init__(self, records: list[Any] | None = None, error: Exception | None = None) -> None:
        self.records = records or []
        self.error = error
        self.runs: list[tuple[Any, dict[str, Any]]] = []
        self.session_kwargs: list[dict[str, Any]] = []
        self.closed_sessions = 0

    def session(self, **kwargs: Any) -> FakeSession:
        self.session_kwargs.append(kwargs)
        return FakeSession(self)


class RecordingExecutor:
    def __init__(self, records: list[Any]) -> None:
        self.records = records
        self.calls: list[tuple[str, dict[str, Any]]] = []

    async def execute(self, query: str, parameters: dict[str, Any]) -> list[Any]:
        self.calls.append((query, parameters))
        return self.records


class TestNeo4jQueryExecutor:
    def test_runs_query_with_parameters(self):
        driver = FakeDriver(records=[{"n": 1}, {"n": 2}])
        executor = Neo4jQueryExecutor(driver, timeout=5.0)
        records = asyncio.run(executor.execute("MATCH (n) RETURN n", {"a": 1}))
        assert records == [{"n": 1}, {"n": 2}]
        query, parameters = driver.runs[0]
        assert query.text == "MATCH (n) RETURN n"
        assert query.timeout == 5.0
        assert parameters == {"a": 1}
        assert driver.session_kwargs == [{}]
        assert driver.closed_sessions == 1

    def test_database_is_passed_to_session(self):
        driver = FakeDriver()
        asyncio.run(Neo4jQueryExecutor(driver, database="movies").execute("RETURN 1", {}))
        assert driver.session_kwargs == [{"database": "movies"}]

    def test_result_transformer(self):
        driver = FakeDriver(records=[{"n": 1}, {"n": 2}])
        executor = Neo4jQueryExecutor(driver, result_transformer=lambda record: record["n"])
        assert asyncio.run(executor.execute("MATCH (n) RETURN n", {})) == [1, 2]

    def test_driver_failure_is_wrapped(self):
        driver = FakeDriver(error=RuntimeError("connection refused"))
        executor = Neo4jQueryExecutor(driver)
        with capture_logs(), pytest.raises(QueryExecutionError) as exc_info:
            asyncio.run(executor.execute("RETURN 1", {}))
        error = exc_info.value
        assert error.code == ErrorCode.DB_QUERY
        assert isinstance(error.__cause__, RuntimeError)
        assert driver.closed_sessions == 1

    def test_from_settings(self):
        settings = Settings(neo4j_database="movies", query_timeout=2.5)
        executor = Neo4jQueryExecutor.from_settings(FakeDriver(), settings)
        assert executor.database == "movies"
        assert executor.timeout == 2.5

    def test_satisfies_protocol(self):
        assert isinstance(Neo4jQueryExecutor(FakeDriver()), QueryExecutor)

    def test_error_conversion_without_server_code(self):
        error = to_execution_error(RuntimeError("boom"))
        assert "boom" in error.message
        assert error.details.neo4j_code is None
        assert error.details.service_name == "neo4j"


class TestBuilderExecution:
    def test_execute_passes_built_statement(self, n):
        executor = RecordingExecutor(records=[{"n": "x"}])
        query = match(node("n")).where(n.property("name").eq(param("name"))).returns(n).parameters(name="A")
        records = asyncio.run(query.execute(executor))
        assert records == [{"n": "x"}]
        assert executor.calls == [('MATCH (n) WHERE n.name={name} RETURN n', {"name": "A"})]

    def test_execute_with_transformer(self, n):
        executor = RecordingExecutor(records=[{"n": 1}, {"n": 2}])
        query = match(node("n")).returns(n)
        assert asyncio.run(query.execute(executor, result_transformer=lambda record: record["n"] * 10)) == [10, 20]

    def test_execute_through_neo4j_executor(self, n):
        driver = FakeDriver(records=[{"n": 1}])
        query = match(node("n")).returns(n)
        assert asyncio.run(query.execute(Neo4jQueryExecutor(driver))) == [{"n": 1}]
        assert driver.runs[0][0].text == "MATCH (n) RETURN n"


class TestDriverFactory:
    def test_creates_async_driver(self):
        driver = create_neo4j_driver(Settings(neo4j_uri="bolt://localhost:7687"))
        try:
            assert isinstance(driver, AsyncDriver)
        finally:
            asyncio.run(driver.close())
