"""State management for the Cypher statement assembler.

This module provides the clause-ordering table that keeps assembled
statements grammatically valid. States are immutable: adding a clause returns
a new state.
"""

from enum import Enum, auto
from typing import ClassVar

from cypher_dsl.core.base import ConstructionErrorDetails, ErrorCode
from cypher_dsl.core.errors import QueryConstructionError


class ClauseType(Enum):
    """Enum for Cypher clause types."""

    # Reading
    START = auto()
    MATCH = auto()
    OPTIONAL_MATCH = auto()
    WHERE = auto()
    WITH = auto()

    # Data manipulation
    CREATE = auto()
    CREATE_UNIQUE = auto()
    MERGE = auto()
    SET = auto()
    REMOVE = auto()
    DELETE = auto()
    FOREACH = auto()

    # Projection
    RETURN = auto()
    ORDER_BY = auto()
    SKIP = auto()
    LIMIT = auto()

    UNION = auto()

    @property
    def keyword(self) -> str:
        return self.name.replace("_", " ")


_READING: frozenset[ClauseType] = frozenset({ClauseType.MATCH, ClauseType.OPTIONAL_MATCH})

UPDATING_CLAUSES: frozenset[ClauseType] = frozenset(
    {
        ClauseType.CREATE,
        ClauseType.CREATE_UNIQUE,
        ClauseType.MERGE,
        ClauseType.SET,
        ClauseType.REMOVE,
        ClauseType.DELETE,
        ClauseType.FOREACH,
    }
)

_PROJECTING: frozenset[ClauseType] = frozenset({ClauseType.WITH, ClauseType.RETURN})


class CypherQueryState:
    """Clause sequence of one sub-statement plus the ordering rules.

    A sub-statement starts with START, MATCH, OPTIONAL MATCH or an updating
    clause. MATCH and WITH may repeat and each may be followed by one WHERE;
    updating clauses repeat in call order; RETURN may be followed by ORDER BY,
    SKIP and LIMIT in that order, and a returning statement may be joined to
    the next one with UNION.
    """

    _VALID_START_CLAUSES: ClassVar[frozenset[ClauseType]] = frozenset(
        {
            ClauseType.START,
            ClauseType.MATCH,
            ClauseType.OPTIONAL_MATCH,
            ClauseType.CREATE,
            ClauseType.CREATE_UNIQUE,
            ClauseType.MERGE,
        }
    )

    _VALID_AFTER: ClassVar[dict[ClauseType, frozenset[ClauseType]]] = {
        # START may be followed by a WHERE on the looked-up entities
        ClauseType.START: _READING | {ClauseType.WHERE} | _PROJECTING | UPDATING_CLAUSES,
        ClauseType.MATCH: _READING | {ClauseType.WHERE} | _PROJECTING | UPDATING_CLAUSES,
        ClauseType.OPTIONAL_MATCH: _READING | {ClauseType.WHERE} | _PROJECTING | UPDATING_CLAUSES,
        ClauseType.WHERE: _READING | _PROJECTING | UPDATING_CLAUSES,
        # WITH opens a new reading phase
        ClauseType.WITH: _READING | {ClauseType.WHERE} | _PROJECTING | UPDATING_CLAUSES,
        ClauseType.CREATE: UPDATING_CLAUSES | _PROJECTING,
        ClauseType.CREATE_UNIQUE: UPDATING_CLAUSES | _PROJECTING,
        ClauseType.MERGE: UPDATING_CLAUSES | _PROJECTING,
        ClauseType.SET: UPDATING_CLAUSES | _PROJECTING,
        ClauseType.REMOVE: UPDATING_CLAUSES | _PROJECTING,
        ClauseType.DELETE: UPDATING_CLAUSES | _PROJECTING,
        ClauseType.FOREACH: UPDATING_CLAUSES | _PROJECTING,
        ClauseType.RETURN: frozenset(
            {ClauseType.ORDER_BY, ClauseType.SKIP, ClauseType.LIMIT, ClauseType.UNION}
        ),
        ClauseType.ORDER_BY: frozenset({ClauseType.SKIP, ClauseType.LIMIT, ClauseType.UNION}),
        ClauseType.SKIP: frozenset({ClauseType.LIMIT, ClauseType.UNION}),
        ClauseType.LIMIT: frozenset({ClauseType.UNION}),
        # After UNION, a new sub-statement starts
        ClauseType.UNION: frozenset({ClauseType.START}) | _READING,
    }

    _COMPLETING: ClassVar[frozenset[ClauseType]] = UPDATING_CLAUSES | {
        ClauseType.RETURN,
        ClauseType.ORDER_BY,
        ClauseType.SKIP,
        ClauseType.LIMIT,
    }

    def __init__(self, clauses: tuple[ClauseType, ...] = ()) -> None:
        self._clauses = clauses

    @property
    def clauses(self) -> tuple[ClauseType, ...]:
        return self._clauses

    @property
    def current_clause(self) -> ClauseType | None:
        """Get the most recently added clause type."""
        if not self._clauses:
            return None
        return self._clauses[-1]

    @property
    def is_complete(self) -> bool:
        """A statement is complete once it ends in a projection tail or an update."""
        return self.current_clause in self._COMPLETING

    def allowed(self) -> frozenset[ClauseType]:
        """Clause types that may be added next."""
        current = self.current_clause
        if current is None:
            return self._VALID_START_CLAUSES
        return self._VALID_AFTER.get(current, frozenset())

    def can_add(self, clause_type: ClauseType) -> bool:
        return clause_type in self.allowed()

    def add_clause(self, clause_type: ClauseType) -> "CypherQueryState":
        """Return the state that results from adding a clause.

        Args:
            clause_type: The type of clause to add

        Returns:
            A new state; this one is unchanged

        Raises:
            QueryConstructionError: If the clause cannot follow the current one
        """
        self.validate_can_add(clause_type)
        return CypherQueryState(self._clauses + (clause_type,))

    def validate_can_add(self, clause_type: ClauseType) -> None:
        """Validate that a clause can be added.

        Raises:
            QueryConstructionError: If the clause cannot be added
        """
        allowed = self.allowed()
        if clause_type in allowed:
            return
        current = self.current_clause
        valid_next = sorted(clause.keyword for clause in allowed)
        if current is None:
            message = f"Statement must start with one of: {', '.join(valid_next)}, got {clause_type.keyword}"
        else:
            message = (
                f"Cannot add {clause_type.keyword} after {current.keyword}, "
                f"valid options are: {', '.join(valid_next) or 'none'}"
            )
        raise QueryConstructionError(
            message,
            details=ConstructionErrorDetails(
                source="query_builder",
                operation="add_clause",
                clause=clause_type.keyword,
                previous_clause=None if current is None else current.keyword,
                allowed=valid_next,
            ),
            code=ErrorCode.CLAUSE_ORDER,
        )

    def validate_query_complete(self) -> None:
        """Validate that the statement can be built.

        Raises:
            QueryConstructionError: If the statement does not end in RETURN,
                its ordering/paging tail, or an updating clause
        """
        if not self.is_complete:
            last = "nothing" if self.current_clause is None else self.current_clause.keyword
            raise QueryConstructionError(
                f"Statement is incomplete: it ends with {last}",
                details=ConstructionErrorDetails(
                    source="query_builder",
                    operation="build",
                    previous_clause=None if self.current_clause is None else self.current_clause.keyword,
                    allowed=sorted(clause.keyword for clause in self.allowed()),
                ),
            )

    def __repr__(self) -> str:
        return f"CypherQueryState({' '.join(clause.keyword for clause in self._clauses)})"
