"""Statement tree: ordered clauses, optionally joined to a following statement by UNION."""

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from cypher_dsl.core.errors import InvalidValueError

from .clauses import AnyClause
from .state import ClauseType, CypherQueryState


class Statement(BaseModel):
    """One sub-statement. Clause order is checked against ``CypherQueryState`` on construction."""

    model_config = ConfigDict(frozen=True)

    clauses: tuple[AnyClause, ...]
    union: "UnionLink | None" = None

    @field_validator("clauses")
    @classmethod
    def _check_clauses(cls, clauses: tuple[AnyClause, ...]) -> tuple[AnyClause, ...]:
        if not clauses:
            raise InvalidValueError("A statement needs at least one clause", field="clauses", constraint="non-empty")
        return clauses

    @model_validator(mode="after")
    def _check_order(self) -> "Statement":
        state = CypherQueryState()
        for clause in self.clauses:
            state = state.add_clause(clause.kind)
        state.validate_query_complete()
        if self.union is not None:
            state.add_clause(ClauseType.UNION).validate_can_add(self.union.statement.clauses[0].kind)
        return self


class UnionLink(BaseModel):
    """``UNION`` (or ``UNION ALL``) followed by the next sub-statement."""

    model_config = ConfigDict(frozen=True)

    all: bool = False
    statement: Statement


Statement.model_rebuild()
