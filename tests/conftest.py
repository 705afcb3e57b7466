"""Shared fixtures for the cypher-dsl test suite."""

import pytest
import structlog

from cypher_dsl import identifier
from cypher_dsl.core.config import get_settings


@pytest.fixture
def n():
    """The ``n`` identifier used throughout the reference queries."""
    return identifier("n")


@pytest.fixture
def a():
    return identifier("a")


@pytest.fixture
def b():
    return identifier("b")


@pytest.fixture
def c():
    return identifier("c")


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch):
    """Isolate tests from the process environment and the cached settings."""
    for name in ("CYPHER_DSL_WARN_ON_UNBOUND_PARAMETERS", "CYPHER_DSL_LOG_LEVEL", "CYPHER_DSL_NEO4J_DATABASE"):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def reset_structlog():
    """Restore structlog's default configuration after a test reconfigures it."""
    yield
    structlog.reset_defaults()
