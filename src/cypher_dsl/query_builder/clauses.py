"""Clause model for Cypher statements.

Each clause is an immutable pydantic model tagged with the ``ClauseType`` the
assembler checks against its ordering table. Value-level problems (empty
pattern lists, negative paging amounts, incomplete paths) are rejected here,
when the clause is constructed.
"""

from collections.abc import Iterable
from enum import Enum
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from cypher_dsl.core.errors import InvalidValueError

from .expressions import (
    Expression,
    Identifier,
    Labeled,
    Literal,
    OrderItem,
    Parameter,
    ProjectionItem,
    PropertyAccess,
    construct,
    to_expression,
    to_identifier,
)
from .literals import validate_name
from .patterns import NamedPath, Pattern, PatternPath, require_complete
from .state import ClauseType


def _require_items(items: tuple[Any, ...], field: str) -> tuple[Any, ...]:
    if not items:
        raise InvalidValueError(
            f"{field} needs at least one item",
            field=field,
            constraint="non-empty",
        )
    return items


def _require_patterns(patterns: tuple[Pattern, ...], clause: str) -> tuple[Pattern, ...]:
    _require_items(patterns, clause)
    for pattern in patterns:
        require_complete(pattern, clause=clause)
    return patterns


# Start lookups


class EntityKind(str, Enum):
    NODE = "node"
    RELATIONSHIP = "relationship"


class StartLookup(BaseModel):
    """One ``identifier=node(...)`` / ``identifier=relationship(...)`` lookup.

    Exactly one source is used: explicit ids, a parameter holding ids, an
    index lookup (``index`` + ``key`` + ``value``), an index query
    (``index`` + ``query``), or none of them for every entity (``node(*)``).
    """

    model_config = ConfigDict(frozen=True)

    identifier: Identifier
    entity: EntityKind = EntityKind.NODE
    ids: tuple[int, ...] = ()
    parameter: Parameter | None = None
    index: str | None = None
    key: str | None = None
    value: Expression | None = None
    query: Literal | Parameter | None = None

    @field_validator("ids")
    @classmethod
    def _check_ids(cls, ids: tuple[int, ...]) -> tuple[int, ...]:
        for entity_id in ids:
            if entity_id < 0:
                raise InvalidValueError(
                    f"Entity ids must be non-negative, got {entity_id}",
                    field="ids",
                    actual_value=entity_id,
                    constraint=">= 0",
                )
        return ids

    @model_validator(mode="after")
    def _check_source(self) -> "StartLookup":
        if self.index is None:
            if self.key is not None or self.value is not None or self.query is not None:
                raise InvalidValueError("Index lookups need an index name", field="index")
            if self.ids and self.parameter is not None:
                raise InvalidValueError("Use either ids or a parameter, not both", field="ids")
            return self
        validate_name(self.index, field="index")
        if self.ids or self.parameter is not None:
            raise InvalidValueError("Index lookups do not take ids", field="ids")
        if self.query is None and (self.key is None or self.value is None):
            raise InvalidValueError(
                "Index lookups need either a key and value or a query",
                field="index",
                constraint="key+value or query",
            )
        if self.query is not None and self.key is not None:
            raise InvalidValueError("Use either a key lookup or a query, not both", field="query")
        return self


def _ids(name: str | Identifier, entity: EntityKind, ids: tuple[int, ...]) -> StartLookup:
    if not ids:
        raise InvalidValueError(
            f"At least one {entity.value} id is required",
            field="ids",
            constraint="non-empty",
        )
    return construct(StartLookup, identifier=to_identifier(name), entity=entity, ids=ids)


def nodes_by_id(name: str | Identifier, *ids: int) -> StartLookup:
    """``name=node(id1,id2)``."""
    return _ids(name, EntityKind.NODE, ids)


def relationships_by_id(name: str | Identifier, *ids: int) -> StartLookup:
    """``name=relationship(id1,id2)``."""
    return _ids(name, EntityKind.RELATIONSHIP, ids)


def nodes_by_parameter(name: str | Identifier, parameter: str) -> StartLookup:
    """``name=node({parameter})``."""
    return construct(StartLookup, identifier=to_identifier(name), parameter=construct(Parameter, name=parameter))


def relationships_by_parameter(name: str | Identifier, parameter: str) -> StartLookup:
    return construct(
        StartLookup,
        identifier=to_identifier(name),
        entity=EntityKind.RELATIONSHIP,
        parameter=construct(Parameter, name=parameter),
    )


def all_nodes(name: str | Identifier) -> StartLookup:
    """``name=node(*)``."""
    return construct(StartLookup, identifier=to_identifier(name))


def all_relationships(name: str | Identifier) -> StartLookup:
    return construct(StartLookup, identifier=to_identifier(name), entity=EntityKind.RELATIONSHIP)


def lookup(name: str | Identifier, index: str, key: str, value: Any) -> StartLookup:
    """Exact index lookup, ``name=node:index(key="value")``."""
    return construct(StartLookup, identifier=to_identifier(name), index=index, key=key, value=to_expression(value))


def relationship_lookup(name: str | Identifier, index: str, key: str, value: Any) -> StartLookup:
    """``name=relationship:index(key="value")``."""
    return construct(
        StartLookup,
        identifier=to_identifier(name),
        entity=EntityKind.RELATIONSHIP,
        index=index,
        key=key,
        value=to_expression(value),
    )


def index_query(name: str | Identifier, index: str, query: str) -> StartLookup:
    """Index query string, ``name=node:index("key:value")``."""
    return construct(StartLookup, identifier=to_identifier(name), index=index, query=construct(Literal, value=query))


def index_query_by_parameter(name: str | Identifier, index: str, parameter: str) -> StartLookup:
    """``name=node:index({parameter})``."""
    return construct(
        StartLookup,
        identifier=to_identifier(name),
        index=index,
        query=construct(Parameter, name=parameter),
    )


# Clauses


class Clause(BaseModel):
    """Base class of every clause."""

    model_config = ConfigDict(frozen=True)

    clause_type: ClassVar[ClauseType]

    @property
    def kind(self) -> ClauseType:
        return self.clause_type


class StartClause(Clause):
    clause_type: ClassVar[ClauseType] = ClauseType.START

    lookups: tuple[StartLookup, ...]

    @field_validator("lookups")
    @classmethod
    def _check_lookups(cls, lookups: tuple[StartLookup, ...]) -> tuple[StartLookup, ...]:
        return _require_items(lookups, "START")


class MatchClause(Clause):
    clause_type: ClassVar[ClauseType] = ClauseType.MATCH

    patterns: tuple[PatternPath | NamedPath, ...]
    optional: bool = False

    @property
    def kind(self) -> ClauseType:
        return ClauseType.OPTIONAL_MATCH if self.optional else ClauseType.MATCH

    @field_validator("patterns")
    @classmethod
    def _check_patterns(cls, patterns: tuple[Pattern, ...]) -> tuple[Pattern, ...]:
        return _require_patterns(patterns, "MATCH")


class WhereClause(Clause):
    clause_type: ClassVar[ClauseType] = ClauseType.WHERE

    predicate: Expression


class WithClause(Clause):
    clause_type: ClassVar[ClauseType] = ClauseType.WITH

    items: tuple[ProjectionItem, ...]
    distinct: bool = False

    @field_validator("items")
    @classmethod
    def _check_items(cls, items: tuple[ProjectionItem, ...]) -> tuple[ProjectionItem, ...]:
        return _require_items(items, "WITH")


class CreateClause(Clause):
    clause_type: ClassVar[ClauseType] = ClauseType.CREATE

    patterns: tuple[PatternPath | NamedPath, ...]

    @field_validator("patterns")
    @classmethod
    def _check_patterns(cls, patterns: tuple[Pattern, ...]) -> tuple[Pattern, ...]:
        return _require_patterns(patterns, "CREATE")


class CreateUniqueClause(Clause):
    clause_type: ClassVar[ClauseType] = ClauseType.CREATE_UNIQUE

    patterns: tuple[PatternPath | NamedPath, ...]

    @field_validator("patterns")
    @classmethod
    def _check_patterns(cls, patterns: tuple[Pattern, ...]) -> tuple[Pattern, ...]:
        return _require_patterns(patterns, "CREATE UNIQUE")


class PropertyAssignment(BaseModel):
    """``target=value`` in SET, e.g. ``n.name="Michael"`` or ``n={props}``."""

    model_config = ConfigDict(frozen=True)

    target: PropertyAccess | Identifier
    value: Expression


SetItem = PropertyAssignment | Labeled
RemoveItem = PropertyAccess | Labeled


def set_property(target: PropertyAccess | Identifier, value: Any) -> PropertyAssignment:
    """Assignment for SET and MERGE ... ON CREATE/ON MATCH.

    Example:
        ```python
        set_property(identifier("n").property("name"), "Michael")  # n.name="Michael"
        ```
    """
    if not isinstance(target, PropertyAccess | Identifier):
        raise InvalidValueError(
            "Only properties and identifiers can be assigned",
            field="target",
            actual_value=target,
            expected_type="PropertyAccess | Identifier",
        )
    return PropertyAssignment(target=target, value=to_expression(value))


class MergeClause(Clause):
    """``MERGE pattern`` with optional ``ON CREATE SET`` / ``ON MATCH SET`` actions.

    ON CREATE renders before ON MATCH regardless of call order.
    """

    clause_type: ClassVar[ClauseType] = ClauseType.MERGE

    pattern: PatternPath | NamedPath
    on_create: tuple[SetItem, ...] = ()
    on_match: tuple[SetItem, ...] = ()

    @field_validator("pattern")
    @classmethod
    def _check_pattern(cls, pattern: Pattern) -> Pattern:
        return require_complete(pattern, clause="MERGE")


class SetClause(Clause):
    clause_type: ClassVar[ClauseType] = ClauseType.SET

    items: tuple[SetItem, ...]

    @field_validator("items")
    @classmethod
    def _check_items(cls, items: tuple[SetItem, ...]) -> tuple[SetItem, ...]:
        return _require_items(items, "SET")


class RemoveClause(Clause):
    clause_type: ClassVar[ClauseType] = ClauseType.REMOVE

    items: tuple[RemoveItem, ...]

    @field_validator("items")
    @classmethod
    def _check_items(cls, items: tuple[RemoveItem, ...]) -> tuple[RemoveItem, ...]:
        return _require_items(items, "REMOVE")


class DeleteClause(Clause):
    clause_type: ClassVar[ClauseType] = ClauseType.DELETE

    items: tuple[Expression, ...]
    detach: bool = False

    @field_validator("items")
    @classmethod
    def _check_items(cls, items: tuple[Expression, ...]) -> tuple[Expression, ...]:
        return _require_items(items, "DELETE")


class ForeachClause(Clause):
    """``FOREACH(variable in source| clause1,clause2)``.

    Built fluently: ``for_each("n", nodes(p)).set(...)``; every call returns
    a new clause with the nested clause appended.
    """

    clause_type: ClassVar[ClauseType] = ClauseType.FOREACH

    variable: Identifier
    source: Expression
    clauses: tuple["UpdatingClause", ...] = ()

    def _then(self, clause: "UpdatingClause") -> "ForeachClause":
        return ForeachClause(variable=self.variable, source=self.source, clauses=self.clauses + (clause,))

    def set(self, *items: SetItem) -> "ForeachClause":
        return self._then(SetClause(items=items))

    def remove(self, *items: RemoveItem) -> "ForeachClause":
        return self._then(RemoveClause(items=items))

    def create(self, *patterns: Pattern) -> "ForeachClause":
        return self._then(CreateClause(patterns=patterns))

    def create_unique(self, *patterns: Pattern) -> "ForeachClause":
        return self._then(CreateUniqueClause(patterns=patterns))

    def merge(self, pattern: Pattern) -> "ForeachClause":
        return self._then(MergeClause(pattern=pattern))

    def delete(self, *items: Any) -> "ForeachClause":
        return self._then(DeleteClause(items=tuple(to_expression(item) for item in items)))

    def detach_delete(self, *items: Any) -> "ForeachClause":
        return self._then(DeleteClause(items=tuple(to_expression(item) for item in items), detach=True))

    def for_each(self, nested: "ForeachClause") -> "ForeachClause":
        return self._then(nested)


UpdatingClause = (
    CreateClause | CreateUniqueClause | MergeClause | SetClause | RemoveClause | DeleteClause | ForeachClause
)
ForeachClause.model_rebuild()


def for_each(variable: str | Identifier, source: Any) -> ForeachClause:
    """Start a FOREACH clause over ``source``, binding each element to ``variable``."""
    return ForeachClause(variable=to_identifier(variable), source=to_expression(source))


class ReturnClause(Clause):
    clause_type: ClassVar[ClauseType] = ClauseType.RETURN

    items: tuple[ProjectionItem, ...]
    distinct: bool = False

    @field_validator("items")
    @classmethod
    def _check_items(cls, items: tuple[ProjectionItem, ...]) -> tuple[ProjectionItem, ...]:
        return _require_items(items, "RETURN")


class OrderByClause(Clause):
    clause_type: ClassVar[ClauseType] = ClauseType.ORDER_BY

    items: tuple[OrderItem, ...]

    @field_validator("items")
    @classmethod
    def _check_items(cls, items: tuple[OrderItem, ...]) -> tuple[OrderItem, ...]:
        return _require_items(items, "ORDER BY")


def _check_amount(amount: int | Parameter, clause: str) -> int | Parameter:
    if isinstance(amount, Parameter):
        return amount
    if isinstance(amount, bool) or amount < 0:
        raise InvalidValueError(
            f"{clause} needs a non-negative integer or a parameter, got {amount!r}",
            field=clause,
            actual_value=amount,
            constraint=">= 0",
        )
    return amount


class SkipClause(Clause):
    clause_type: ClassVar[ClauseType] = ClauseType.SKIP

    amount: int | Parameter

    @field_validator("amount", mode="before")
    @classmethod
    def _check(cls, amount: Any) -> Any:
        return _check_amount(amount, "SKIP") if isinstance(amount, int | Parameter) else amount


class LimitClause(Clause):
    clause_type: ClassVar[ClauseType] = ClauseType.LIMIT

    amount: int | Parameter

    @field_validator("amount", mode="before")
    @classmethod
    def _check(cls, amount: Any) -> Any:
        return _check_amount(amount, "LIMIT") if isinstance(amount, int | Parameter) else amount


AnyClause = (
    StartClause
    | MatchClause
    | WhereClause
    | WithClause
    | UpdatingClause
    | ReturnClause
    | OrderByClause
    | SkipClause
    | LimitClause
)


# Conversion helpers used by the assembler


def to_projection(item: Any) -> ProjectionItem:
    if isinstance(item, ProjectionItem):
        return item
    return ProjectionItem(expression=to_expression(item))


def to_projections(items: Iterable[Any]) -> tuple[ProjectionItem, ...]:
    """Flatten projection arguments; tuples from ``identifiers()`` are expanded."""
    result: list[ProjectionItem] = []
    for item in items:
        if isinstance(item, tuple):
            result.extend(to_projection(inner) for inner in item)
        else:
            result.append(to_projection(item))
    return tuple(result)


def to_order_item(item: Any) -> OrderItem:
    if isinstance(item, OrderItem):
        return item
    return OrderItem(expression=to_expression(item))


def to_amount(amount: int | str | Parameter) -> int | Parameter:
    """SKIP/LIMIT amount: a number, or a parameter given by name or object."""
    if isinstance(amount, str):
        return construct(Parameter, name=amount)
    return amount
