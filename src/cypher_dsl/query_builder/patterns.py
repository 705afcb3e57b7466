"""Pattern builders for Cypher queries.

Patterns are immutable. A path is built left to right and every fluent call
returns a new path; modifiers such as ``label``, ``values``, ``as_`` and
``hops`` apply to the last element.

Example:
    ```python
    pattern = node("a").out("KNOWS").hops(1, 3).as_("r").node("x")
    # (a)-[r:KNOWS*1..3]->(x)
    ```
"""

from collections.abc import Mapping
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from cypher_dsl.core.base import ConstructionErrorDetails, ErrorCode
from cypher_dsl.core.errors import InvalidValueError, QueryConstructionError

from .expressions import (
    Expression,
    Identifier,
    MapEntry,
    MapLiteral,
    Parameter,
    construct,
    map_of,
    to_identifier,
)
from .literals import validate_name


class Direction(str, Enum):
    """Relationship direction relative to the element on its left.

    ``NONE`` and ``BOTH`` both render the undirected ``--`` or ``-[...]-``.
    """

    NONE = "none"
    OUT = "out"
    IN = "in"
    BOTH = "both"


class ShortestPathMode(str, Enum):
    NONE = "none"
    SHORTEST = "shortestPath"
    ALL_SHORTEST = "allShortestPaths"


class HopRange(BaseModel):
    """Variable-length bounds of a relationship.

    Both bounds missing renders ``*``; ``exact`` renders ``*n`` and requires
    equal bounds.
    """

    model_config = ConfigDict(frozen=True)

    minimum: int | None = None
    maximum: int | None = None
    exact: bool = False

    @field_validator("minimum", "maximum")
    @classmethod
    def _check_bound(cls, bound: int | None) -> int | None:
        if bound is not None and bound < 0:
            raise InvalidValueError(
                f"Hop bounds must be non-negative, got {bound}",
                field="hops",
                actual_value=bound,
                constraint=">= 0",
            )
        return bound

    @model_validator(mode="after")
    def _check_range(self) -> "HopRange":
        if self.minimum is not None and self.maximum is not None and self.minimum > self.maximum:
            raise QueryConstructionError(
                f"Minimum hops {self.minimum} exceeds maximum hops {self.maximum}",
                details=ConstructionErrorDetails(
                    source="query_builder",
                    operation="hops",
                    clause="MATCH",
                ),
            )
        if self.exact and (self.minimum is None or self.minimum != self.maximum):
            raise QueryConstructionError("An exact hop count needs equal bounds")
        return self


class NodePattern(BaseModel):
    """``(identifier:Label1:Label2 {properties})``, every part optional."""

    model_config = ConfigDict(frozen=True)

    identifier: Identifier | None = None
    label_names: tuple[str, ...] = ()
    properties: MapLiteral | Parameter | None = None

    @field_validator("label_names")
    @classmethod
    def _check_labels(cls, label_names: tuple[str, ...]) -> tuple[str, ...]:
        for name in label_names:
            validate_name(name, field="label")
        return label_names


class RelationshipPattern(BaseModel):
    """``-[identifier:T1|T2*hops {properties}]->`` and its shorter forms."""

    model_config = ConfigDict(frozen=True)

    identifier: Identifier | None = None
    types: tuple[str, ...] = ()
    direction: Direction = Direction.NONE
    hops: HopRange | None = None
    properties: MapLiteral | Parameter | None = None

    @field_validator("types")
    @classmethod
    def _check_types(cls, types: tuple[str, ...]) -> tuple[str, ...]:
        for name in types:
            validate_name(name, field="relationship type")
        return types


PatternElement = NodePattern | RelationshipPattern


def _evolve(model: BaseModel, **changes: Any) -> Any:
    return construct(type(model), **{**dict(model), **changes})


def _type_name(value: "str | Identifier") -> str:
    return value.name if isinstance(value, Identifier) else validate_name(value, field="relationship type")


def _properties(entries: tuple[Any, ...], kwargs: dict[str, Any]) -> MapLiteral | Parameter:
    if len(entries) == 1 and not kwargs:
        only = entries[0]
        if isinstance(only, Parameter | MapLiteral):
            return only
        if isinstance(only, Mapping):
            return map_of(only)
    for entry in entries:
        if not isinstance(entry, MapEntry):
            raise InvalidValueError(
                f"Expected map entries created with value(), got {type(entry).__name__}",
                field="values",
                actual_value=entry,
                expected_type="MapEntry",
            )
    return map_of(entries, **kwargs)


class PatternPath(BaseModel):
    """A chain of alternating node and relationship patterns."""

    model_config = ConfigDict(frozen=True)

    elements: tuple[PatternElement, ...] = ()

    @property
    def is_complete(self) -> bool:
        """A path is usable in a clause when it starts and ends with a node."""
        return (
            len(self.elements) % 2 == 1
            and isinstance(self.elements[0], NodePattern)
            and isinstance(self.elements[-1], NodePattern)
        )

    def _last(self) -> PatternElement:
        if not self.elements:
            raise QueryConstructionError("Pattern has no elements to modify")
        return self.elements[-1]

    def _replace_last(self, element: PatternElement) -> "PatternPath":
        return PatternPath(elements=self.elements[:-1] + (element,))

    def _append(self, element: PatternElement) -> "PatternPath":
        previous = self.elements[-1] if self.elements else None
        if isinstance(element, NodePattern) and isinstance(previous, NodePattern):
            raise QueryConstructionError(
                "Two nodes must be connected by a relationship",
                details=ConstructionErrorDetails(source="query_builder", operation="node"),
            )
        if isinstance(element, RelationshipPattern) and not isinstance(previous, NodePattern):
            raise QueryConstructionError(
                "A relationship must follow a node",
                details=ConstructionErrorDetails(source="query_builder", operation="relationship"),
            )
        return PatternPath(elements=self.elements + (element,))

    def _last_node(self, operation: str) -> NodePattern:
        last = self._last()
        if not isinstance(last, NodePattern):
            raise QueryConstructionError(
                f"{operation}() applies to a node, the pattern ends with a relationship",
                details=ConstructionErrorDetails(source="query_builder", operation=operation),
            )
        return last

    def _last_relationship(self, operation: str) -> RelationshipPattern:
        last = self._last()
        if not isinstance(last, RelationshipPattern):
            raise QueryConstructionError(
                f"{operation}() applies to a relationship, the pattern ends with a node",
                details=ConstructionErrorDetails(source="query_builder", operation=operation),
            )
        return last

    # Elements

    def node(self, name: "str | Identifier | None" = None) -> "PatternPath":
        """Append a node, optionally bound to an identifier."""
        return self._append(construct(NodePattern, identifier=None if name is None else to_identifier(name)))

    def related(self, direction: Direction, *types: "str | Identifier") -> "PatternPath":
        """Append a relationship with an explicit direction and optional types."""
        return self._append(
            construct(RelationshipPattern, direction=direction, types=tuple(_type_name(t) for t in types))
        )

    def out(self, *types: "str | Identifier") -> "PatternPath":
        """Outgoing relationship, ``-->`` or ``-[:TYPE]->``."""
        return self.related(Direction.OUT, *types)

    def in_(self, *types: "str | Identifier") -> "PatternPath":
        """Incoming relationship, ``<--`` or ``<-[:TYPE]-``."""
        return self.related(Direction.IN, *types)

    def both(self, *types: "str | Identifier") -> "PatternPath":
        """Undirected relationship, ``--`` or ``-[:TYPE]-``."""
        return self.related(Direction.NONE, *types)

    # Modifiers of the last element

    def as_(self, name: "str | Identifier") -> "PatternPath":
        """Bind the last element to an identifier."""
        return self._replace_last(_evolve(self._last(), identifier=to_identifier(name)))

    def label(self, name: str) -> "PatternPath":
        return self.labels(name)

    def labels(self, *names: str) -> "PatternPath":
        last = self._last_node("labels")
        return self._replace_last(_evolve(last, label_names=last.label_names + tuple(names)))

    def values(self, *entries: Any, **kwargs: Any) -> "PatternPath":
        """Set the property map of the last element.

        Accepts ``value(key, val)`` entries, a mapping, keyword arguments, or a
        single parameter standing for the whole map.

        Example:
            ```python
            node("n").values(value("name", "Andres"))  # (n {name:"Andres"})
            node("n").values(param("props"))           # (n {props})
            ```
        """
        return self._replace_last(_evolve(self._last(), properties=_properties(entries, kwargs)))

    def hops(self, minimum: int | None = None, maximum: int | None = None) -> "PatternPath":
        """Variable-length bounds; either side may be left open."""
        last = self._last_relationship("hops")
        hops = construct(HopRange, minimum=minimum, maximum=maximum)
        return self._replace_last(_evolve(last, hops=hops))

    def hop(self, count: int) -> "PatternPath":
        """Exact path length, ``*count``."""
        last = self._last_relationship("hop")
        hops = construct(HopRange, minimum=count, maximum=count, exact=True)
        return self._replace_last(_evolve(last, hops=hops))

    def as_predicate(self) -> "PatternPredicate":
        """Use the pattern as a WHERE predicate, ``WHERE (a)<--(b)``."""
        return PatternPredicate(pattern=require_complete(self))


class NamedPath(BaseModel):
    """``name=pattern``, optionally wrapped in a shortest-path function."""

    model_config = ConfigDict(frozen=True)

    path: PatternPath
    name: Identifier | None = None
    mode: ShortestPathMode = ShortestPathMode.NONE


class PatternPredicate(Expression):
    """A pattern used as a boolean expression."""

    pattern: PatternPath


Pattern = PatternPath | NamedPath


def require_complete(pattern: Pattern, clause: str = "MATCH") -> Pattern:
    """Reject paths that do not start and end with a node.

    Raises:
        QueryConstructionError: If the path is empty or dangles a relationship
    """
    path = pattern.path if isinstance(pattern, NamedPath) else pattern
    if not isinstance(path, PatternPath) or not path.is_complete:
        raise QueryConstructionError(
            f"Incomplete pattern in {clause}: a path must start and end with a node",
            details=ConstructionErrorDetails(
                source="query_builder",
                operation="pattern",
                clause=clause,
            ),
            code=ErrorCode.PATTERN_INCOMPLETE,
        )
    return pattern


def node(name: "str | Identifier | None" = None) -> PatternPath:
    """Start a path with a node.

    Example:
        ```python
        node("n").label("Movie")  # (n:Movie)
        node()                    # ()
        ```
    """
    return PatternPath().node(name)


def path(name: "str | Identifier", pattern: Pattern) -> NamedPath:
    """Bind a pattern (or shortest-path search) to a path identifier."""
    if isinstance(pattern, NamedPath):
        return construct(NamedPath, path=pattern.path, name=to_identifier(name), mode=pattern.mode)
    return construct(NamedPath, path=pattern, name=to_identifier(name))


def shortest_path(pattern: PatternPath) -> NamedPath:
    return NamedPath(path=require_complete(pattern), mode=ShortestPathMode.SHORTEST)


def all_shortest_paths(pattern: PatternPath) -> NamedPath:
    return NamedPath(path=require_complete(pattern), mode=ShortestPathMode.ALL_SHORTEST)
