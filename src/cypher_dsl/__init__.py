"""Fluent, immutable Cypher statement builder and renderer."""

from .core import ApplicationError, InvalidValueError, QueryConstructionError, QueryExecutionError
from .query_builder import *  # noqa: F403
from .query_builder import __all__ as _query_builder_all

__all__ = [
    "ApplicationError",
    "InvalidValueError",
    "QueryConstructionError",
    "QueryExecutionError",
    *_query_builder_all,
]
