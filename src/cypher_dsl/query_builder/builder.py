"""Fluent Cypher statement assembler.

Every builder is immutable: each call validates the new clause against the
``CypherQueryState`` ordering table and returns a new builder whose class
exposes only the calls that may legally follow. Only complete builders (those
ending in RETURN, its ordering/paging tail, or an updating clause) can be
built, rendered or executed.

Example:
    ```python
    query, params = (
        start(nodes_by_id("n", 3, 1))
        .where(n.property("age").lt(30))
        .returns(identifier("n"))
        .build()
    )
    ```
"""

from collections.abc import Callable
from typing import Any, NamedTuple, Self, TypeVar

from structlog.typing import FilteringBoundLogger

from cypher_dsl.core.base import ConstructionErrorDetails
from cypher_dsl.core.config import get_settings
from cypher_dsl.core.errors import InvalidValueError, QueryConstructionError
from cypher_dsl.core.logging import get_logger

from .clauses import (
    Clause,
    CreateClause,
    CreateUniqueClause,
    DeleteClause,
    ForeachClause,
    LimitClause,
    MatchClause,
    MergeClause,
    OrderByClause,
    RemoveClause,
    ReturnClause,
    SetClause,
    SkipClause,
    StartClause,
    StartLookup,
    WhereClause,
    WithClause,
    to_amount,
    to_order_item,
    to_projections,
)
from .expressions import Expression, Parameter, construct, to_expression
from .interfaces import QueryExecutor
from .literals import validate_parameter_name
from .patterns import Pattern, PatternPath
from .renderer import render, render_with_parameters
from .state import ClauseType, CypherQueryState
from .statement import Statement, UnionLink

logger: FilteringBoundLogger = get_logger(name=__name__)

B = TypeVar("B", bound="_QueryBuilder")
T = TypeVar("T")


class _Segment(NamedTuple):
    """A finished sub-statement and how it joins the next one."""

    clauses: tuple[Clause, ...]
    union_all: bool


class _QueryBuilder:
    """Shared immutable core of all builder states."""

    def __init__(
        self,
        clauses: tuple[Clause, ...] = (),
        state: CypherQueryState | None = None,
        parameters: dict[str, Any] | None = None,
        segments: tuple[_Segment, ...] = (),
    ) -> None:
        self._clauses = clauses
        self._state = state or CypherQueryState()
        self._parameters: dict[str, Any] = dict(parameters or {})
        self._segments = segments

    def _copy(self, cls: type[B], **changes: Any) -> B:
        fields: dict[str, Any] = {
            "clauses": self._clauses,
            "state": self._state,
            "parameters": self._parameters,
            "segments": self._segments,
        }
        fields.update(changes)
        return cls(**fields)

    def _append(self, clause: Clause, cls: type[B]) -> B:
        state = self._state.add_clause(clause.kind)
        return self._copy(cls, clauses=self._clauses + (clause,), state=state)

    def _replace_last(self, clause: Clause, cls: type[B]) -> B:
        previous = CypherQueryState(self._state.clauses[:-1])
        state = previous.add_clause(clause.kind)
        return self._copy(cls, clauses=self._clauses[:-1] + (clause,), state=state)

    @property
    def state(self) -> CypherQueryState:
        return self._state

    @property
    def clauses(self) -> tuple[Clause, ...]:
        """Clauses of the current sub-statement."""
        return self._clauses

    def parameters(self, **values: Any) -> Self:
        """Supply values for ``{name}`` placeholders.

        Values accumulate across UNION segments and later values win.
        """
        for name in values:
            validate_parameter_name(name)
        return self._copy(type(self), parameters={**self._parameters, **values})

    def parameter(self, name: str, value: Any) -> Self:
        validate_parameter_name(name)
        return self._copy(type(self), parameters={**self._parameters, name: value})

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._state!r})"


# Clause factories shared by the builder states


def _match(patterns: tuple[Pattern, ...], optional: bool = False) -> MatchClause:
    return construct(MatchClause, patterns=patterns, optional=optional)


def _predicate(predicate: Any) -> Expression:
    if isinstance(predicate, PatternPath):
        return predicate.as_predicate()
    return to_expression(predicate)


class _ReadingMixin(_QueryBuilder):
    def match(self, *patterns: Pattern) -> "ReadingQuery":
        """Add a MATCH clause; several patterns are comma-joined."""
        return self._append(_match(patterns), ReadingQuery)

    def optional_match(self, *patterns: Pattern) -> "ReadingQuery":
        return self._append(_match(patterns, optional=True), ReadingQuery)

    def where(self, predicate: Any) -> "ReadingQuery":
        """Add a WHERE clause.

        Args:
            predicate: Boolean expression, or a pattern used as a predicate
        """
        return self._append(construct(WhereClause, predicate=_predicate(predicate)), ReadingQuery)


class _ProjectingMixin(_QueryBuilder):
    def with_(self, *items: Any) -> "ReadingQuery":
        """Add a WITH clause, starting a new reading phase."""
        return self._append(construct(WithClause, items=to_projections(items)), ReadingQuery)

    def with_distinct(self, *items: Any) -> "ReadingQuery":
        return self._append(
            construct(WithClause, items=to_projections(items), distinct=True),
            ReadingQuery,
        )

    def returns(self, *items: Any) -> "ReturningQuery":
        """Add a RETURN clause.

        Args:
            *items: Expressions, ``expr.as_("alias")`` projections, tuples from
                ``identifiers()``, or ``wildcard()`` for ``RETURN *``
        """
        return self._append(construct(ReturnClause, items=to_projections(items)), ReturningQuery)

    def returns_distinct(self, *items: Any) -> "ReturningQuery":
        return self._append(
            construct(ReturnClause, items=to_projections(items), distinct=True),
            ReturningQuery,
        )


class _UpdatingMixin(_QueryBuilder):
    def create(self, *patterns: Pattern) -> "UpdatingQuery":
        return self._append(construct(CreateClause, patterns=patterns), UpdatingQuery)

    def create_unique(self, *patterns: Pattern) -> "UpdatingQuery":
        return self._append(construct(CreateUniqueClause, patterns=patterns), UpdatingQuery)

    def merge(self, pattern: Pattern) -> "MergingQuery":
        return self._append(construct(MergeClause, pattern=pattern), MergingQuery)

    def set(self, *items: Any) -> "UpdatingQuery":
        """Add a SET clause of ``set_property(...)`` assignments and label expressions."""
        return self._append(construct(SetClause, items=items), UpdatingQuery)

    def remove(self, *items: Any) -> "UpdatingQuery":
        return self._append(construct(RemoveClause, items=items), UpdatingQuery)

    def delete(self, *items: Any) -> "UpdatingQuery":
        expressions = tuple(to_expression(item) for item in items)
        return self._append(construct(DeleteClause, items=expressions), UpdatingQuery)

    def detach_delete(self, *items: Any) -> "UpdatingQuery":
        expressions = tuple(to_expression(item) for item in items)
        return self._append(construct(DeleteClause, items=expressions, detach=True), UpdatingQuery)

    def for_each(self, clause: ForeachClause) -> "UpdatingQuery":
        """Add a FOREACH clause built with ``for_each(variable, source)``."""
        if not clause.clauses:
            raise QueryConstructionError(
                "FOREACH needs at least one nested clause",
                details=ConstructionErrorDetails(source="query_builder", operation="for_each", clause="FOREACH"),
            )
        return self._append(clause, UpdatingQuery)


class _CompleteMixin(_QueryBuilder):
    """Calls available once the statement can be rendered."""

    def statement(self) -> Statement:
        """Assemble the statement tree, including any UNION segments."""
        self._state.validate_query_complete()
        result = construct(Statement, clauses=self._clauses)
        for segment in reversed(self._segments):
            result = construct(
                Statement,
                clauses=segment.clauses,
                union=UnionLink(all=segment.union_all, statement=result),
            )
        return result

    def render(self) -> str:
        return render(self.statement())

    def build(self) -> tuple[str, dict[str, Any]]:
        """Render the statement together with its parameter values.

        Returns:
            Tuple of (query text, parameter values)
        """
        text, names = render_with_parameters(self.statement())
        parameters = dict(self._parameters)
        missing = names - parameters.keys()
        if missing and get_settings().warn_on_unbound_parameters:
            logger.warning(
                "Statement references parameters without values",
                extra={"missing": sorted(missing)},
            )
        logger.debug(
            "Built Cypher statement",
            extra={"query": text, "parameter_names": sorted(names)},
        )
        return text, parameters

    async def execute(
        self,
        executor: QueryExecutor,
        result_transformer: Callable[[Any], T] | None = None,
    ) -> list[Any]:
        """Build the statement and run it through an executor.

        Args:
            executor: Anything implementing ``QueryExecutor``
            result_transformer: Optional function applied to every record

        Returns:
            The records, transformed if a transformer was given
        """
        query, parameters = self.build()
        records = await executor.execute(query, parameters)
        if result_transformer is None:
            return records
        return [result_transformer(record) for record in records]

    def __str__(self) -> str:
        return self.render()


class _UnionMixin(_QueryBuilder):
    def union(self) -> "UnionQuery":
        """Join the next sub-statement with ``UNION``."""
        state = self._state.add_clause(ClauseType.UNION)
        segments = self._segments + (_Segment(self._clauses, False),)
        return self._copy(UnionQuery, clauses=(), state=state, segments=segments)

    def union_all(self) -> "UnionQuery":
        return self.union().all()


class ReadingQuery(_ReadingMixin, _ProjectingMixin, _UpdatingMixin):
    """After START, MATCH, WHERE or WITH."""

    def optional(self) -> "ReadingQuery":
        """Turn the preceding MATCH into an OPTIONAL MATCH."""
        last = self._clauses[-1] if self._clauses else None
        if not isinstance(last, MatchClause):
            raise QueryConstructionError(
                "optional() must directly follow a MATCH clause",
                details=ConstructionErrorDetails(
                    source="query_builder",
                    operation="optional",
                    clause="OPTIONAL MATCH",
                    previous_clause=None if self._state.current_clause is None else self._state.current_clause.keyword,
                ),
            )
        return self._replace_last(_match(last.patterns, optional=True), ReadingQuery)


class UpdatingQuery(_UpdatingMixin, _ProjectingMixin, _CompleteMixin):
    """After CREATE, CREATE UNIQUE, SET, REMOVE, DELETE or FOREACH."""


class MergingQuery(UpdatingQuery):
    """After MERGE; ON CREATE / ON MATCH actions attach to that MERGE."""

    def _merge_clause(self) -> MergeClause:
        last = self._clauses[-1] if self._clauses else None
        if not isinstance(last, MergeClause):
            raise QueryConstructionError(
                "ON CREATE and ON MATCH must directly follow a MERGE clause",
                details=ConstructionErrorDetails(
                    source="query_builder",
                    operation="merge_action",
                    clause="MERGE",
                ),
            )
        return last

    def on_create(self, *items: Any) -> "MergingQuery":
        """Add ``ON CREATE SET`` assignments; repeated calls accumulate."""
        merge = self._merge_clause()
        updated = construct(
            MergeClause,
            pattern=merge.pattern,
            on_create=merge.on_create + items,
            on_match=merge.on_match,
        )
        return self._replace_last(updated, MergingQuery)

    def on_match(self, *items: Any) -> "MergingQuery":
        """Add ``ON MATCH SET`` assignments; repeated calls accumulate."""
        merge = self._merge_clause()
        updated = construct(
            MergeClause,
            pattern=merge.pattern,
            on_create=merge.on_create,
            on_match=merge.on_match + items,
        )
        return self._replace_last(updated, MergingQuery)


class _LimitMixin(_QueryBuilder):
    def limit(self, amount: int | str | Parameter) -> "LimitedQuery":
        """``LIMIT n`` or ``LIMIT {name}`` when given a parameter name."""
        return self._append(construct(LimitClause, amount=to_amount(amount)), LimitedQuery)


class _SkipMixin(_LimitMixin):
    def skip(self, amount: int | str | Parameter) -> "SkippedQuery":
        """``SKIP n`` or ``SKIP {name}`` when given a parameter name."""
        return self._append(construct(SkipClause, amount=to_amount(amount)), SkippedQuery)


class ReturningQuery(_SkipMixin, _CompleteMixin, _UnionMixin):
    """After RETURN."""

    def order_by(self, *items: Any) -> "OrderedQuery":
        """Add ORDER BY; plain expressions sort ascending, use ``expr.desc()`` otherwise."""
        order_items = tuple(to_order_item(item) for item in items)
        return self._append(construct(OrderByClause, items=order_items), OrderedQuery)


class OrderedQuery(_SkipMixin, _CompleteMixin, _UnionMixin):
    """After ORDER BY."""


class SkippedQuery(_LimitMixin, _CompleteMixin, _UnionMixin):
    """After SKIP."""


class LimitedQuery(_CompleteMixin, _UnionMixin):
    """After LIMIT."""


class _StartingMixin(_QueryBuilder):
    def start(self, *lookups: StartLookup) -> ReadingQuery:
        return self._append(construct(StartClause, lookups=lookups), ReadingQuery)

    def match(self, *patterns: Pattern) -> ReadingQuery:
        return self._append(_match(patterns), ReadingQuery)

    def optional_match(self, *patterns: Pattern) -> ReadingQuery:
        return self._append(_match(patterns, optional=True), ReadingQuery)


class UnionQuery(_StartingMixin):
    """After UNION; the next sub-statement starts here."""

    def all(self) -> "UnionQuery":
        """Make the pending union a ``UNION ALL``."""
        *earlier, last = self._segments
        return self._copy(UnionQuery, segments=(*earlier, last._replace(union_all=True)))


class _InitialQuery(_StartingMixin):
    """Empty statement; the entry points below start from here."""

    def create(self, *patterns: Pattern) -> UpdatingQuery:
        return self._append(construct(CreateClause, patterns=patterns), UpdatingQuery)

    def create_unique(self, *patterns: Pattern) -> UpdatingQuery:
        return self._append(construct(CreateUniqueClause, patterns=patterns), UpdatingQuery)

    def merge(self, pattern: Pattern) -> MergingQuery:
        return self._append(construct(MergeClause, pattern=pattern), MergingQuery)


def start(*lookups: StartLookup) -> ReadingQuery:
    """Begin a statement with START.

    Example:
        ```python
        start(nodes_by_id("n", 1)).returns(identifier("n"))  # START n=node(1) RETURN n
        ```
    """
    return _InitialQuery().start(*lookups)


def match(*patterns: Pattern) -> ReadingQuery:
    """Begin a statement with MATCH."""
    return _InitialQuery().match(*patterns)


def optional_match(*patterns: Pattern) -> ReadingQuery:
    return _InitialQuery().optional_match(*patterns)


def create(*patterns: Pattern) -> UpdatingQuery:
    """Begin a statement with CREATE."""
    return _InitialQuery().create(*patterns)


def create_unique(*patterns: Pattern) -> UpdatingQuery:
    return _InitialQuery().create_unique(*patterns)


def merge(pattern: Pattern) -> MergingQuery:
    """Begin a statement with MERGE."""
    return _InitialQuery().merge(pattern)
