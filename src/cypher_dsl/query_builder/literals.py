"""Literal and identifier formatting for Cypher text.

Every name that ends up in a query as an identifier (variables, labels,
relationship types, property keys, map keys and aliases) goes through
``quote_identifier``; every scalar value goes through ``format_value``.
"""

import math
import re
from decimal import Decimal
from typing import Any, Final

from cypher_dsl.core.errors import InvalidValueError

_UNQUOTED_IDENTIFIER: Final = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
_PARAMETER_NAME: Final = re.compile(r"^(?:[A-Za-z_][A-Za-z0-9_]*|[0-9]+)$")
_FUNCTION_NAME: Final = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(?:\.[A-Za-z_][A-Za-z0-9_]*)*$")

RESERVED_KEYWORDS: Final[frozenset[str]] = frozenset(
    {
        # Clauses
        "START",
        "MATCH",
        "OPTIONAL",
        "WHERE",
        "WITH",
        "RETURN",
        "CREATE",
        "UNIQUE",
        "MERGE",
        "ON",
        "SET",
        "REMOVE",
        "DELETE",
        "DETACH",
        "FOREACH",
        "ORDER",
        "BY",
        "SKIP",
        "LIMIT",
        "UNION",
        "UNWIND",
        "CALL",
        "YIELD",
        # Sub-clause keywords
        "AS",
        "DISTINCT",
        "ALL",
        "ASC",
        "ASCENDING",
        "DESC",
        "DESCENDING",
        # Operators and literals
        "AND",
        "OR",
        "XOR",
        "NOT",
        "IN",
        "IS",
        "NULL",
        "TRUE",
        "FALSE",
        "STARTS",
        "ENDS",
        "CONTAINS",
        "CASE",
        "WHEN",
        "THEN",
        "ELSE",
        "END",
    }
)


def is_reserved(name: str) -> bool:
    """Check whether a name collides with a Cypher keyword (case-insensitive)."""
    return name.upper() in RESERVED_KEYWORDS


def validate_name(name: Any, field: str = "name") -> str:
    """Ensure a name is a non-empty string.

    Args:
        name: Candidate identifier, label or type name
        field: Name of the argument, used in the error

    Returns:
        The name unchanged

    Raises:
        InvalidValueError: If the name is not a non-empty string
    """
    if not isinstance(name, str) or not name:
        raise InvalidValueError(
            f"{field} must be a non-empty string, got {name!r}",
            field=field,
            actual_value=name,
            constraint="non-empty string",
        )
    return name


def validate_parameter_name(name: Any) -> str:
    """Ensure a parameter name can be written as a ``{name}`` placeholder."""
    validate_name(name, field="parameter name")
    if not _PARAMETER_NAME.match(name):
        raise InvalidValueError(
            f"Malformed parameter name {name!r}",
            field="parameter name",
            actual_value=name,
            constraint=_PARAMETER_NAME.pattern,
        )
    return name


def validate_function_name(name: Any) -> str:
    """Ensure a function name can be written bare, namespaces included (``apoc.coll.sum``)."""
    validate_name(name, field="function name")
    if not _FUNCTION_NAME.match(name):
        raise InvalidValueError(
            f"Malformed function name {name!r}",
            field="function name",
            actual_value=name,
            constraint=_FUNCTION_NAME.pattern,
        )
    return name


def quote_identifier(name: str) -> str:
    """Render a name as a Cypher identifier.

    Names made only of identifier characters that are not keywords are
    emitted bare; anything else is wrapped in backticks, with embedded
    backticks doubled.

    Example:
        ```python
        quote_identifier("n")                # n
        quote_identifier("TYPE WITH SPACE")  # `TYPE WITH SPACE`
        quote_identifier("match")            # `match`
        ```
    """
    if _UNQUOTED_IDENTIFIER.match(name) and not is_reserved(name):
        return name
    return "`" + name.replace("`", "``") + "`"


def escape_string(value: str) -> str:
    """Escape backslashes and double quotes for a double-quoted literal."""
    return value.replace("\\", "\\\\").replace('"', '\\"')


def format_string(value: str) -> str:
    return '"' + escape_string(value) + '"'


def format_number(value: int | float | Decimal) -> str:
    """Render a number.

    Integers never get a decimal point; floats use the shortest representation
    that round-trips, so ``3.141592`` stays ``3.141592``; Decimals keep their
    exact textual precision.

    Raises:
        InvalidValueError: For NaN and infinite values, which have no literal form
    """
    if isinstance(value, bool):
        raise InvalidValueError("Booleans are not numbers", field="value", actual_value=value)
    if isinstance(value, int):
        return str(value)
    if isinstance(value, Decimal):
        if not value.is_finite():
            raise InvalidValueError(
                f"Cannot render non-finite number {value}",
                field="value",
                actual_value=value,
                constraint="finite",
            )
        return str(value)
    if math.isnan(value) or math.isinf(value):
        raise InvalidValueError(
            f"Cannot render non-finite number {value}",
            field="value",
            actual_value=value,
            constraint="finite",
        )
    return repr(value)


def literal_kind(value: Any) -> str:
    """Classify a Python scalar as one of the Cypher literal kinds.

    Raises:
        InvalidValueError: If the value has no literal representation
    """
    # bool must be checked before int
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, int):
        return "integer"
    if isinstance(value, float):
        format_number(value)
        return "float"
    if isinstance(value, Decimal):
        format_number(value)
        return "decimal"
    if isinstance(value, str):
        return "string"
    raise InvalidValueError(
        f"Unsupported literal type {type(value).__name__}",
        field="value",
        actual_value=value,
        expected_type="str | int | float | Decimal | bool | None",
    )


def format_value(value: Any) -> str:
    """Render a Python scalar as a Cypher literal."""
    kind = literal_kind(value)
    if kind == "null":
        return "null"
    if kind == "boolean":
        return "true" if value else "false"
    if kind == "string":
        return format_string(value)
    return format_number(value)
