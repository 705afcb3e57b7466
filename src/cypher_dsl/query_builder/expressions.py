"""Expression model for Cypher statements.

Expressions are immutable pydantic models. Equality and hashing are
structural, so two independently built trees with the same shape compare
equal and render to the same text. Fluent methods (and the arithmetic and
boolean operators) always return new nodes.

Example:
    ```python
    n = identifier("n")
    predicate = n.property("age").lt(30).and_(n.property("name").eq("Tobias"))
    ```
"""

from collections.abc import Iterable, Mapping
from enum import Enum, IntEnum
from typing import Any, NamedTuple, TypeVar

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator, model_validator

from cypher_dsl.core.errors import InvalidValueError

from .literals import literal_kind, validate_function_name, validate_name, validate_parameter_name

M = TypeVar("M", bound=BaseModel)


def construct(model: type[M], **fields: Any) -> M:
    """Build a model, reporting type mismatches as InvalidValueError."""
    try:
        return model(**fields)
    except ValidationError as e:
        error = e.errors()[0]
        raise InvalidValueError(
            f"Invalid value for {model.__name__}: {error['msg']}",
            field=".".join(str(part) for part in error["loc"]) or None,
            actual_value=error.get("input"),
        ) from e


class Precedence(IntEnum):
    """Binding strength of an expression, loosest first."""

    LOWEST = 0
    OR = 1
    XOR = 2
    AND = 3
    NOT = 4
    COMPARISON = 5
    ADDITIVE = 6
    MULTIPLICATIVE = 7
    POWER = 8
    UNARY = 9
    ATOM = 10


class Associativity(str, Enum):
    LEFT = "left"
    RIGHT = "right"
    NONE = "none"


class OperatorInfo(NamedTuple):
    symbol: str
    precedence: Precedence
    associativity: Associativity
    associative: bool = False
    spaced: bool = False


class BinaryOperator(str, Enum):
    """Binary operator kinds."""

    OR = "or"
    XOR = "xor"
    AND = "and"
    EQ = "eq"
    NE = "ne"
    LT = "lt"
    GT = "gt"
    LTE = "lte"
    GTE = "gte"
    REGEXP = "regexp"
    IN = "in"
    STARTS_WITH = "starts_with"
    ENDS_WITH = "ends_with"
    CONTAINS = "contains"
    ADD = "add"
    CONCAT = "concat"
    SUBTRACT = "subtract"
    MULTIPLY = "multiply"
    DIVIDE = "divide"
    MODULO = "modulo"
    POWER = "power"

    @property
    def info(self) -> OperatorInfo:
        return BINARY_OPERATORS[self]

    @property
    def is_boolean(self) -> bool:
        return self in (BinaryOperator.OR, BinaryOperator.XOR, BinaryOperator.AND)


_L = Associativity.LEFT
_N = Associativity.NONE

BINARY_OPERATORS: dict[BinaryOperator, OperatorInfo] = {
    BinaryOperator.OR: OperatorInfo("or", Precedence.OR, _L, associative=True, spaced=True),
    BinaryOperator.XOR: OperatorInfo("xor", Precedence.XOR, _L, associative=True, spaced=True),
    BinaryOperator.AND: OperatorInfo("and", Precedence.AND, _L, associative=True, spaced=True),
    BinaryOperator.EQ: OperatorInfo("=", Precedence.COMPARISON, _N),
    BinaryOperator.NE: OperatorInfo("<>", Precedence.COMPARISON, _N),
    BinaryOperator.LT: OperatorInfo("<", Precedence.COMPARISON, _N),
    BinaryOperator.GT: OperatorInfo(">", Precedence.COMPARISON, _N),
    BinaryOperator.LTE: OperatorInfo("<=", Precedence.COMPARISON, _N),
    BinaryOperator.GTE: OperatorInfo(">=", Precedence.COMPARISON, _N),
    BinaryOperator.REGEXP: OperatorInfo("=~", Precedence.COMPARISON, _N),
    BinaryOperator.IN: OperatorInfo("IN", Precedence.COMPARISON, _N, spaced=True),
    BinaryOperator.STARTS_WITH: OperatorInfo("STARTS WITH", Precedence.COMPARISON, _N, spaced=True),
    BinaryOperator.ENDS_WITH: OperatorInfo("ENDS WITH", Precedence.COMPARISON, _N, spaced=True),
    BinaryOperator.CONTAINS: OperatorInfo("CONTAINS", Precedence.COMPARISON, _N, spaced=True),
    BinaryOperator.ADD: OperatorInfo("+", Precedence.ADDITIVE, _L, associative=True),
    BinaryOperator.CONCAT: OperatorInfo("+", Precedence.ADDITIVE, _L, associative=True),
    BinaryOperator.SUBTRACT: OperatorInfo("-", Precedence.ADDITIVE, _L),
    BinaryOperator.MULTIPLY: OperatorInfo("*", Precedence.MULTIPLICATIVE, _L, associative=True),
    BinaryOperator.DIVIDE: OperatorInfo("/", Precedence.MULTIPLICATIVE, _L),
    BinaryOperator.MODULO: OperatorInfo("%", Precedence.MULTIPLICATIVE, _L),
    BinaryOperator.POWER: OperatorInfo("^", Precedence.POWER, Associativity.RIGHT),
}


class UnaryOperator(str, Enum):
    """Unary operator kinds.

    ``NOT`` renders call-like as ``not(x)``; the null checks are postfix.
    """

    NOT = "not"
    NEGATE = "negate"
    IS_NULL = "is_null"
    IS_NOT_NULL = "is_not_null"


class Order(str, Enum):
    ASCENDING = "ASCENDING"
    DESCENDING = "DESCENDING"


ASCENDING = Order.ASCENDING
DESCENDING = Order.DESCENDING


class Expression(BaseModel):
    """Base class of every expression node."""

    model_config = ConfigDict(frozen=True)

    # Comparison

    def eq(self, other: Any) -> "BinaryOp":
        return _binary(BinaryOperator.EQ, self, other)

    def ne(self, other: Any) -> "BinaryOp":
        return _binary(BinaryOperator.NE, self, other)

    def lt(self, other: Any) -> "BinaryOp":
        return _binary(BinaryOperator.LT, self, other)

    def gt(self, other: Any) -> "BinaryOp":
        return _binary(BinaryOperator.GT, self, other)

    def lte(self, other: Any) -> "BinaryOp":
        return _binary(BinaryOperator.LTE, self, other)

    def gte(self, other: Any) -> "BinaryOp":
        return _binary(BinaryOperator.GTE, self, other)

    def regexp(self, pattern: Any, case_sensitive: bool = True) -> "BinaryOp":
        """Regular expression match, ``x=~"pattern"``.

        Args:
            pattern: Regular expression as a string or an expression
            case_sensitive: When False the pattern is prefixed with ``(?i)``
        """
        if not case_sensitive:
            if isinstance(pattern, str):
                pattern = "(?i)" + pattern
            else:
                pattern = _binary(BinaryOperator.CONCAT, Literal(value="(?i)"), pattern)
        return _binary(BinaryOperator.REGEXP, self, pattern)

    def in_(self, collection: Any) -> "BinaryOp":
        return _binary(BinaryOperator.IN, self, collection)

    def starts_with(self, prefix: Any) -> "BinaryOp":
        return _binary(BinaryOperator.STARTS_WITH, self, prefix)

    def ends_with(self, suffix: Any) -> "BinaryOp":
        return _binary(BinaryOperator.ENDS_WITH, self, suffix)

    def contains(self, substring: Any) -> "BinaryOp":
        return _binary(BinaryOperator.CONTAINS, self, substring)

    def is_null(self) -> "UnaryOp":
        return UnaryOp(operator=UnaryOperator.IS_NULL, operand=self)

    def is_not_null(self) -> "UnaryOp":
        return UnaryOp(operator=UnaryOperator.IS_NOT_NULL, operand=self)

    # Boolean

    def and_(self, *others: Any) -> "Expression":
        return _chain(BinaryOperator.AND, self, others)

    def or_(self, *others: Any) -> "Expression":
        return _chain(BinaryOperator.OR, self, others)

    def xor(self, other: Any) -> "BinaryOp":
        return _binary(BinaryOperator.XOR, self, other)

    def not_(self) -> "UnaryOp":
        return UnaryOp(operator=UnaryOperator.NOT, operand=self)

    # Arithmetic

    def add(self, other: Any) -> "BinaryOp":
        return _binary(BinaryOperator.ADD, self, other)

    def concat(self, other: Any) -> "BinaryOp":
        """String concatenation, rendered with ``+``."""
        return _binary(BinaryOperator.CONCAT, self, other)

    def subtract(self, other: Any) -> "BinaryOp":
        return _binary(BinaryOperator.SUBTRACT, self, other)

    def multiply(self, other: Any) -> "BinaryOp":
        return _binary(BinaryOperator.MULTIPLY, self, other)

    def divide(self, other: Any) -> "BinaryOp":
        return _binary(BinaryOperator.DIVIDE, self, other)

    def mod(self, other: Any) -> "BinaryOp":
        return _binary(BinaryOperator.MODULO, self, other)

    def power(self, other: Any) -> "BinaryOp":
        return _binary(BinaryOperator.POWER, self, other)

    def negate(self) -> "UnaryOp":
        return UnaryOp(operator=UnaryOperator.NEGATE, operand=self)

    # Access

    def property(self, key: str) -> "PropertyAccess":
        """Property access, ``n.key``."""
        return PropertyAccess(target=self, key=key)

    def label(self, name: str) -> "Labeled":
        """Label expression, ``n:Name``, for SET/REMOVE and label predicates."""
        return Labeled(target=self, label_names=(name,))

    def labels(self, *names: str) -> "Labeled":
        return Labeled(target=self, label_names=names)

    # Projection and ordering

    def as_(self, alias: str) -> "ProjectionItem":
        return ProjectionItem(expression=self, alias=alias)

    def asc(self) -> "OrderItem":
        return OrderItem(expression=self, order=Order.ASCENDING)

    def desc(self) -> "OrderItem":
        return OrderItem(expression=self, order=Order.DESCENDING)

    # Python operators

    def __and__(self, other: Any) -> "Expression":
        return self.and_(other)

    def __or__(self, other: Any) -> "Expression":
        return self.or_(other)

    def __invert__(self) -> "UnaryOp":
        return self.not_()

    def __neg__(self) -> "UnaryOp":
        return self.negate()

    def __add__(self, other: Any) -> "BinaryOp":
        return self.add(other)

    def __radd__(self, other: Any) -> "BinaryOp":
        return _binary(BinaryOperator.ADD, other, self)

    def __sub__(self, other: Any) -> "BinaryOp":
        return self.subtract(other)

    def __rsub__(self, other: Any) -> "BinaryOp":
        return _binary(BinaryOperator.SUBTRACT, other, self)

    def __mul__(self, other: Any) -> "BinaryOp":
        return self.multiply(other)

    def __rmul__(self, other: Any) -> "BinaryOp":
        return _binary(BinaryOperator.MULTIPLY, other, self)

    def __truediv__(self, other: Any) -> "BinaryOp":
        return self.divide(other)

    def __rtruediv__(self, other: Any) -> "BinaryOp":
        return _binary(BinaryOperator.DIVIDE, other, self)

    def __mod__(self, other: Any) -> "BinaryOp":
        return self.mod(other)

    def __pow__(self, other: Any) -> "BinaryOp":
        return self.power(other)


class Literal(Expression):
    """A scalar value: string, number, boolean or null.

    ``kind`` is derived from the Python type so ``1``, ``1.0`` and ``True``
    remain structurally distinct.
    """

    value: Any = None
    kind: str = "null"

    @model_validator(mode="before")
    @classmethod
    def _classify(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {**data, "kind": literal_kind(data.get("value"))}
        return data


class Parameter(Expression):
    """Placeholder for an externally supplied value, ``{name}``."""

    name: str

    @field_validator("name")
    @classmethod
    def _check_name(cls, name: str) -> str:
        return validate_parameter_name(name)


class Identifier(Expression):
    """A variable name."""

    name: str

    @field_validator("name")
    @classmethod
    def _check_name(cls, name: str) -> str:
        return validate_name(name, field="identifier")


class PropertyAccess(Expression):
    target: Expression
    key: str

    @field_validator("key")
    @classmethod
    def _check_key(cls, key: str) -> str:
        return validate_name(key, field="property key")


class FunctionCall(Expression):
    """``function_name(arg1,arg2,...)``."""

    function_name: str
    arguments: tuple[Expression, ...] = ()

    @field_validator("function_name")
    @classmethod
    def _check_name(cls, function_name: str) -> str:
        return validate_function_name(function_name)


class UnaryOp(Expression):
    operator: UnaryOperator
    operand: Expression


class BinaryOp(Expression):
    operator: BinaryOperator
    left: Expression
    right: Expression


class Collection(Expression):
    """List literal, ``[e1,e2]``."""

    elements: tuple[Expression, ...] = ()


class MapEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    key: str
    value: Expression

    @field_validator("key")
    @classmethod
    def _check_key(cls, key: str) -> str:
        return validate_name(key, field="map key")


class MapLiteral(Expression):
    """Map literal, ``{k1:v1,k2:v2}``, keeping insertion order."""

    entries: tuple[MapEntry, ...] = ()

    @model_validator(mode="after")
    def _check_unique_keys(self) -> "MapLiteral":
        seen: set[str] = set()
        for entry in self.entries:
            if entry.key in seen:
                raise InvalidValueError(
                    f"Duplicate map key {entry.key!r}",
                    field="map key",
                    actual_value=entry.key,
                    constraint="unique keys",
                )
            seen.add(entry.key)
        return self


class Labeled(Expression):
    """``n:Label1:Label2``."""

    target: Expression
    label_names: tuple[str, ...]

    @field_validator("label_names")
    @classmethod
    def _check_labels(cls, label_names: tuple[str, ...]) -> tuple[str, ...]:
        if not label_names:
            raise InvalidValueError("At least one label is required", field="labels", constraint="non-empty")
        for name in label_names:
            validate_name(name, field="label")
        return label_names


class Wildcard(Expression):
    """``*``, as in ``RETURN *`` and ``count(*)``."""


class Distinct(Expression):
    """``DISTINCT expr``, used inside aggregate functions."""

    expression: Expression


class IterableExpression(Expression):
    """Quantifier or comprehension over a collection.

    Renders ``name(var IN source WHERE predicate)`` or
    ``name(var IN source|transform)``.
    """

    function_name: str
    variable: Identifier
    source: Expression
    predicate: Expression | None = None
    transform: Expression | None = None

    @field_validator("function_name")
    @classmethod
    def _check_name(cls, function_name: str) -> str:
        return validate_function_name(function_name)

    @model_validator(mode="after")
    def _check_body(self) -> "IterableExpression":
        if self.predicate is None and self.transform is None:
            raise InvalidValueError(
                f"{self.function_name}() needs a predicate or a transform",
                field=self.function_name,
                constraint="predicate or transform",
            )
        return self


class Reduction(Expression):
    """``reduce(acc=initial,var IN source|transform)``."""

    accumulator: Identifier
    initial: Expression
    variable: Identifier
    source: Expression
    transform: Expression


class ProjectionItem(BaseModel):
    """An expression in RETURN or WITH, optionally aliased (``expr AS alias``)."""

    model_config = ConfigDict(frozen=True)

    expression: Expression
    alias: str | None = None

    @field_validator("alias")
    @classmethod
    def _check_alias(cls, alias: str | None) -> str | None:
        return None if alias is None else validate_name(alias, field="alias")


class OrderItem(BaseModel):
    """An ORDER BY entry; ascending order is implied and not rendered."""

    model_config = ConfigDict(frozen=True)

    expression: Expression
    order: Order = Order.ASCENDING


def to_expression(value: Any) -> Expression:
    """Coerce a Python value into an expression.

    Expressions pass through unchanged; lists and tuples become collections,
    mappings become map literals and scalars become literals.
    """
    if isinstance(value, Expression):
        return value
    if isinstance(value, list | tuple):
        return Collection(elements=tuple(to_expression(item) for item in value))
    if isinstance(value, Mapping):
        return map_of(value)
    return construct(Literal, value=value)


def to_identifier(value: "str | Identifier") -> Identifier:
    if isinstance(value, Identifier):
        return value
    return Identifier(name=validate_name(value, field="identifier"))


def _binary(operator: BinaryOperator, left: Any, right: Any) -> BinaryOp:
    return BinaryOp(operator=operator, left=to_expression(left), right=to_expression(right))


def _chain(operator: BinaryOperator, first: Expression, others: Iterable[Any]) -> Expression:
    result: Expression = first
    for other in others:
        result = _binary(operator, result, other)
    return result


# Factories


def literal(value: Any) -> Literal:
    """A literal value; strings are quoted and escaped when rendered."""
    return construct(Literal, value=value)


def identifier(name: str) -> Identifier:
    return to_identifier(name)


def identifiers(*names: str) -> tuple[Identifier, ...]:
    return tuple(to_identifier(name) for name in names)


def param(name: str) -> Parameter:
    """A ``{name}`` parameter placeholder."""
    return construct(Parameter, name=name)


def collection(*values: Any) -> Collection:
    return Collection(elements=tuple(to_expression(value) for value in values))


def value(key: str, val: Any) -> MapEntry:
    """A single map entry, for node/relationship property maps."""
    return MapEntry(key=key, value=to_expression(val))


def map_of(entries: Mapping[str, Any] | Iterable[MapEntry] = (), **kwargs: Any) -> MapLiteral:
    """Build a map literal from a mapping, map entries or keyword arguments."""
    items: list[MapEntry] = []
    if isinstance(entries, Mapping):
        items.extend(value(key, val) for key, val in entries.items())
    else:
        items.extend(entries)
    items.extend(value(key, val) for key, val in kwargs.items())
    return MapLiteral(entries=tuple(items))


def as_(expression: Any, alias: str) -> ProjectionItem:
    """Alias an expression in RETURN/WITH, ``expr AS alias``."""
    return ProjectionItem(expression=to_expression(expression), alias=alias)


def order(expression: Any, direction: Order = Order.ASCENDING) -> OrderItem:
    return OrderItem(expression=to_expression(expression), order=direction)


def wildcard() -> Wildcard:
    """``*``: every bound identifier in RETURN/WITH, or all rows in ``count(*)``."""
    return Wildcard()
