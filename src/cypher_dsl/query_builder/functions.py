"""Function, aggregate and predicate factories.

Names that collide with Python builtins or keywords carry a trailing
underscore (``not_``, ``sum_``, ``range_``); the rendered function name is
the plain Cypher one.
"""

from typing import Any

from .expressions import (
    Distinct,
    Expression,
    FunctionCall,
    Identifier,
    IterableExpression,
    Reduction,
    UnaryOp,
    UnaryOperator,
    Wildcard,
    construct,
    to_expression,
    to_identifier,
)


def function(name: str, *arguments: Any) -> FunctionCall:
    """Call an arbitrary function by name.

    Example:
        ```python
        function("toUpper", identifier("n").property("name"))  # toUpper(n.name)
        ```
    """
    return construct(
        FunctionCall,
        function_name=name,
        arguments=tuple(to_expression(argument) for argument in arguments),
    )


def distinct(expression: Any) -> Distinct:
    """``DISTINCT expr``, e.g. ``count(distinct(b.property("eyes")))``."""
    return Distinct(expression=to_expression(expression))


# Boolean


def not_(expression: Any) -> UnaryOp:
    return UnaryOp(operator=UnaryOperator.NOT, operand=to_expression(expression))


def and_(first: Any, *others: Any) -> Expression:
    return to_expression(first).and_(*others)


def or_(first: Any, *others: Any) -> Expression:
    return to_expression(first).or_(*others)


def xor(left: Any, right: Any) -> Expression:
    return to_expression(left).xor(right)


def is_null(expression: Any) -> UnaryOp:
    return to_expression(expression).is_null()


def is_not_null(expression: Any) -> UnaryOp:
    return to_expression(expression).is_not_null()


def exists(expression: Any) -> FunctionCall:
    return function("exists", expression)


def has(expression: Any) -> FunctionCall:
    """Legacy property existence check, ``has(n.prop)``."""
    return function("has", expression)


# Aggregates


def count(expression: Any = None) -> FunctionCall:
    """``count(*)`` without an argument, ``count(expr)`` otherwise."""
    return function("count", Wildcard() if expression is None else expression)


def sum_(expression: Any) -> FunctionCall:
    return function("sum", expression)


def avg(expression: Any) -> FunctionCall:
    return function("avg", expression)


def min_(expression: Any) -> FunctionCall:
    return function("min", expression)


def max_(expression: Any) -> FunctionCall:
    return function("max", expression)


def collect(expression: Any) -> FunctionCall:
    return function("collect", expression)


# Graph and collection functions


def id_(expression: Any) -> FunctionCall:
    return function("id", expression)


def type_(relationship: Any) -> FunctionCall:
    return function("type", relationship)


def labels(node: Any) -> FunctionCall:
    return function("labels", node)


def keys(expression: Any) -> FunctionCall:
    return function("keys", expression)


def nodes(path: Any) -> FunctionCall:
    return function("nodes", path)


def relationships(path: Any) -> FunctionCall:
    return function("relationships", path)


def length(expression: Any) -> FunctionCall:
    return function("length", expression)


def size(expression: Any) -> FunctionCall:
    return function("size", expression)


def head(expression: Any) -> FunctionCall:
    return function("head", expression)


def last(expression: Any) -> FunctionCall:
    return function("last", expression)


def tail(expression: Any) -> FunctionCall:
    return function("tail", expression)


def coalesce(*expressions: Any) -> FunctionCall:
    return function("coalesce", *expressions)


def timestamp() -> FunctionCall:
    return function("timestamp")


def range_(start: Any, end: Any, step: Any = None) -> FunctionCall:
    """``range(start,end)`` or ``range(start,end,step)``."""
    if step is None:
        return function("range", start, end)
    return function("range", start, end, step)


# Math


def abs_(expression: Any) -> FunctionCall:
    return function("abs", expression)


def round_(expression: Any) -> FunctionCall:
    return function("round", expression)


def sqrt(expression: Any) -> FunctionCall:
    return function("sqrt", expression)


def sign(expression: Any) -> FunctionCall:
    return function("sign", expression)


# Iterable predicates and comprehensions


def _iterable(
    name: str,
    variable: str | Identifier,
    source: Any,
    predicate: Any = None,
    transform: Any = None,
) -> IterableExpression:
    return construct(
        IterableExpression,
        function_name=name,
        variable=to_identifier(variable),
        source=to_expression(source),
        predicate=None if predicate is None else to_expression(predicate),
        transform=None if transform is None else to_expression(transform),
    )


def all_(variable: str | Identifier, source: Any, predicate: Any) -> IterableExpression:
    """``all(x IN source WHERE predicate)``."""
    return _iterable("all", variable, source, predicate=predicate)


def any_(variable: str | Identifier, source: Any, predicate: Any) -> IterableExpression:
    return _iterable("any", variable, source, predicate=predicate)


def none(variable: str | Identifier, source: Any, predicate: Any) -> IterableExpression:
    return _iterable("none", variable, source, predicate=predicate)


def single(variable: str | Identifier, source: Any, predicate: Any) -> IterableExpression:
    return _iterable("single", variable, source, predicate=predicate)


def filter_(variable: str | Identifier, source: Any, predicate: Any) -> IterableExpression:
    """``filter(x IN source WHERE predicate)``."""
    return _iterable("filter", variable, source, predicate=predicate)


def extract(variable: str | Identifier, source: Any, transform: Any) -> IterableExpression:
    """``extract(x IN source|transform)``."""
    return _iterable("extract", variable, source, transform=transform)


def reduce(
    accumulator: str | Identifier,
    initial: Any,
    variable: str | Identifier,
    source: Any,
    transform: Any,
) -> Reduction:
    """``reduce(acc=initial,x IN source|transform)``."""
    return construct(
        Reduction,
        accumulator=to_identifier(accumulator),
        initial=to_expression(initial),
        variable=to_identifier(variable),
        source=to_expression(source),
        transform=to_expression(transform),
    )


def concat(first: Any, *others: Any) -> Expression:
    """String concatenation of several operands with ``+``."""
    result = to_expression(first)
    for other in others:
        result = result.concat(other)
    return result


__all__ = [
    "abs_",
    "all_",
    "and_",
    "any_",
    "avg",
    "coalesce",
    "collect",
    "concat",
    "count",
    "distinct",
    "exists",
    "extract",
    "filter_",
    "function",
    "has",
    "head",
    "id_",
    "is_not_null",
    "is_null",
    "keys",
    "labels",
    "last",
    "length",
    "max_",
    "min_",
    "nodes",
    "none",
    "not_",
    "or_",
    "range_",
    "reduce",
    "relationships",
    "round_",
    "sign",
    "single",
    "size",
    "sqrt",
    "sum_",
    "tail",
    "timestamp",
    "type_",
    "xor",
]
