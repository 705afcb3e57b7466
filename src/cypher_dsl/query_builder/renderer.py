"""Render statement trees into Cypher text.

Rendering is a single top-down pass. A ``CypherRenderer`` instance collects
the names of the parameter placeholders it writes, so the same pass yields
both the text and the parameters it references.

Example:
    ```python
    text = render(statement)
    text, parameter_names = render_with_parameters(statement)
    ```
"""

from collections.abc import Callable
from typing import Any, ClassVar

from cypher_dsl.core.errors import InvalidValueError

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
    PropertyAssignment,
    RemoveClause,
    ReturnClause,
    SetClause,
    SkipClause,
    StartClause,
    StartLookup,
    WhereClause,
    WithClause,
)
from .expressions import (
    Associativity,
    BinaryOp,
    BinaryOperator,
    Collection,
    Distinct,
    Expression,
    FunctionCall,
    Identifier,
    IterableExpression,
    Labeled,
    Literal,
    MapLiteral,
    Order,
    OrderItem,
    Parameter,
    Precedence,
    ProjectionItem,
    PropertyAccess,
    Reduction,
    UnaryOp,
    UnaryOperator,
    Wildcard,
)
from .literals import format_value, quote_identifier
from .patterns import (
    Direction,
    HopRange,
    NamedPath,
    NodePattern,
    PatternPath,
    PatternPredicate,
    RelationshipPattern,
    ShortestPathMode,
)
from .statement import Statement


def precedence_of(expression: Expression) -> Precedence:
    """Binding strength of an expression as seen by its parent."""
    if isinstance(expression, BinaryOp):
        return expression.operator.info.precedence
    if isinstance(expression, UnaryOp):
        if expression.operator is UnaryOperator.NOT:
            # not(...) carries its own parentheses
            return Precedence.ATOM
        if expression.operator is UnaryOperator.NEGATE:
            return Precedence.UNARY
        return Precedence.COMPARISON
    if isinstance(expression, Literal) and expression.kind in ("integer", "float", "decimal"):
        return Precedence.UNARY if expression.value < 0 else Precedence.ATOM
    return Precedence.ATOM


def needs_parentheses(child: Expression, parent: BinaryOperator, is_right: bool) -> bool:
    """Whether an operand must be parenthesized under a binary operator.

    Args:
        child: The operand
        parent: Operator the operand belongs to
        is_right: True for the right operand

    Returns:
        True when the operand binds looser than the parent requires
    """
    info = parent.info
    if (
        isinstance(child, BinaryOp)
        and child.operator.is_boolean
        and parent.is_boolean
        and child.operator is not parent
    ):
        return True
    child_precedence = precedence_of(child)
    if child_precedence != info.precedence:
        return child_precedence < info.precedence
    if info.precedence is Precedence.COMPARISON:
        return False
    if info.associativity is Associativity.RIGHT:
        return not is_right
    if not is_right:
        return False
    return not (info.associative and isinstance(child, BinaryOp) and child.operator is parent)


class CypherRenderer:
    """Single-pass renderer for statements, clauses, patterns and expressions."""

    _EXPRESSIONS: ClassVar[dict[type, str]] = {
        Literal: "_literal",
        Parameter: "_parameter",
        Identifier: "_identifier",
        PropertyAccess: "_property_access",
        FunctionCall: "_function_call",
        UnaryOp: "_unary",
        BinaryOp: "_binary",
        Collection: "_collection",
        MapLiteral: "_map",
        Labeled: "_labeled",
        Wildcard: "_wildcard",
        Distinct: "_distinct",
        IterableExpression: "_iterable",
        Reduction: "_reduction",
        PatternPredicate: "_pattern_predicate",
    }

    _CLAUSES: ClassVar[dict[type, str]] = {
        StartClause: "_start",
        MatchClause: "_match",
        WhereClause: "_where",
        WithClause: "_with",
        CreateClause: "_create",
        CreateUniqueClause: "_create_unique",
        MergeClause: "_merge",
        SetClause: "_set",
        RemoveClause: "_remove",
        DeleteClause: "_delete",
        ForeachClause: "_foreach",
        ReturnClause: "_return",
        OrderByClause: "_order_by",
        SkipClause: "_skip",
        LimitClause: "_limit",
    }

    def __init__(self) -> None:
        self.parameter_names: set[str] = set()

    def _dispatch(self, table: dict[type, str], node: Any) -> str:
        method_name = table.get(type(node))
        if method_name is None:
            raise InvalidValueError(
                f"Cannot render {type(node).__name__}",
                field="node",
                actual_value=type(node).__name__,
                operation="render",
            )
        method: Callable[[Any], str] = getattr(self, method_name)
        return method(node)

    # Statements and clauses

    def statement(self, statement: Statement) -> str:
        parts = [self.clause(clause) for clause in statement.clauses]
        text = " ".join(parts)
        if statement.union is not None:
            keyword = " UNION ALL " if statement.union.all else " UNION "
            text += keyword + self.statement(statement.union.statement)
        return text

    def clause(self, clause: Clause) -> str:
        return self._dispatch(self._CLAUSES, clause)

    def _start(self, clause: StartClause) -> str:
        return "START " + ",".join(self._lookup(lookup) for lookup in clause.lookups)

    def _lookup(self, lookup: StartLookup) -> str:
        head = self._identifier(lookup.identifier) + "=" + lookup.entity.value
        if lookup.index is not None:
            if lookup.query is not None:
                body = self.expression(lookup.query)
            else:
                body = quote_identifier(lookup.key or "") + "=" + self.expression(lookup.value)
            return f"{head}:{quote_identifier(lookup.index)}({body})"
        if lookup.parameter is not None:
            return f"{head}({self._parameter(lookup.parameter)})"
        if lookup.ids:
            return f"{head}({','.join(str(entity_id) for entity_id in lookup.ids)})"
        return f"{head}(*)"

    def _match(self, clause: MatchClause) -> str:
        keyword = "OPTIONAL MATCH " if clause.optional else "MATCH "
        return keyword + self._patterns(clause.patterns)

    def _where(self, clause: WhereClause) -> str:
        return "WHERE " + self.expression(clause.predicate)

    def _with(self, clause: WithClause) -> str:
        return "WITH " + ("DISTINCT " if clause.distinct else "") + self._projections(clause.items)

    def _create(self, clause: CreateClause) -> str:
        return "CREATE " + self._patterns(clause.patterns)

    def _create_unique(self, clause: CreateUniqueClause) -> str:
        return "CREATE UNIQUE " + self._patterns(clause.patterns)

    def _merge(self, clause: MergeClause) -> str:
        text = "MERGE " + self.pattern(clause.pattern)
        if clause.on_create:
            text += " ON CREATE SET " + self._set_items(clause.on_create)
        if clause.on_match:
            text += " ON MATCH SET " + self._set_items(clause.on_match)
        return text

    def _set(self, clause: SetClause) -> str:
        return "SET " + self._set_items(clause.items)

    def _set_items(self, items: tuple[Any, ...]) -> str:
        rendered = []
        for item in items:
            if isinstance(item, PropertyAssignment):
                rendered.append(self.expression(item.target) + "=" + self.expression(item.value))
            else:
                rendered.append(self.expression(item))
        return ",".join(rendered)

    def _remove(self, clause: RemoveClause) -> str:
        return "REMOVE " + ",".join(self.expression(item) for item in clause.items)

    def _delete(self, clause: DeleteClause) -> str:
        keyword = "DETACH DELETE " if clause.detach else "DELETE "
        return keyword + ",".join(self.expression(item) for item in clause.items)

    def _foreach(self, clause: ForeachClause) -> str:
        body = ",".join(self.clause(inner) for inner in clause.clauses)
        return f"FOREACH({self._identifier(clause.variable)} in {self.expression(clause.source)}| {body})"

    def _return(self, clause: ReturnClause) -> str:
        return "RETURN " + ("DISTINCT " if clause.distinct else "") + self._projections(clause.items)

    def _order_by(self, clause: OrderByClause) -> str:
        return "ORDER BY " + ",".join(self._order_item(item) for item in clause.items)

    def _order_item(self, item: OrderItem) -> str:
        text = self.expression(item.expression)
        if item.order is Order.DESCENDING:
            text += " DESCENDING"
        return text

    def _skip(self, clause: SkipClause) -> str:
        return "SKIP " + self._amount(clause.amount)

    def _limit(self, clause: LimitClause) -> str:
        return "LIMIT " + self._amount(clause.amount)

    def _amount(self, amount: int | Parameter) -> str:
        if isinstance(amount, Parameter):
            return self._parameter(amount)
        return str(amount)

    def _projections(self, items: tuple[ProjectionItem, ...]) -> str:
        return ",".join(self._projection(item) for item in items)

    def _projection(self, item: ProjectionItem) -> str:
        text = self.expression(item.expression)
        if item.alias is not None:
            text += " AS " + quote_identifier(item.alias)
        return text

    # Patterns

    def _patterns(self, patterns: tuple[PatternPath | NamedPath, ...]) -> str:
        return ",".join(self.pattern(pattern) for pattern in patterns)

    def pattern(self, pattern: PatternPath | NamedPath) -> str:
        if isinstance(pattern, NamedPath):
            return self._named_path(pattern)
        return "".join(
            self._node(element) if isinstance(element, NodePattern) else self._relationship(element)
            for element in pattern.elements
        )

    def _named_path(self, named: NamedPath) -> str:
        text = self.pattern(named.path)
        if named.mode is not ShortestPathMode.NONE:
            text = f"{named.mode.value}({text})"
        if named.name is not None:
            text = self._identifier(named.name) + "=" + text
        return text

    def _properties(self, properties: MapLiteral | Parameter) -> str:
        return self.expression(properties)

    def _node(self, node: NodePattern) -> str:
        text = "" if node.identifier is None else self._identifier(node.identifier)
        text += "".join(":" + quote_identifier(label) for label in node.label_names)
        if node.properties is not None:
            text += (" " if text else "") + self._properties(node.properties)
        return f"({text})"

    def _relationship(self, relationship: RelationshipPattern) -> str:
        body = "" if relationship.identifier is None else self._identifier(relationship.identifier)
        if relationship.types:
            body += ":" + "|".join(quote_identifier(name) for name in relationship.types)
        if relationship.hops is not None:
            body += self._hops(relationship.hops)
        if relationship.properties is not None:
            body += (" " if body else "") + self._properties(relationship.properties)
        direction = relationship.direction
        left = "<-" if direction is Direction.IN else "-"
        right = "->" if direction is Direction.OUT else "-"
        if not body:
            return left + right
        return f"{left}[{body}]{right}"

    def _hops(self, hops: HopRange) -> str:
        if hops.exact:
            return f"*{hops.minimum}"
        if hops.minimum is None and hops.maximum is None:
            return "*"
        minimum = "" if hops.minimum is None else str(hops.minimum)
        maximum = "" if hops.maximum is None else str(hops.maximum)
        return f"*{minimum}..{maximum}"

    # Expressions

    def expression(self, expression: Expression) -> str:
        return self._dispatch(self._EXPRESSIONS, expression)

    def _literal(self, literal: Literal) -> str:
        return format_value(literal.value)

    def _parameter(self, parameter: Parameter) -> str:
        self.parameter_names.add(parameter.name)
        return "{" + parameter.name + "}"

    def _identifier(self, identifier: Identifier) -> str:
        return quote_identifier(identifier.name)

    def _atom(self, expression: Expression) -> str:
        text = self.expression(expression)
        return text if precedence_of(expression) is Precedence.ATOM else f"({text})"

    def _property_access(self, access: PropertyAccess) -> str:
        return self._atom(access.target) + "." + quote_identifier(access.key)

    def _function_call(self, call: FunctionCall) -> str:
        return call.function_name + "(" + ",".join(self.expression(arg) for arg in call.arguments) + ")"

    def _unary(self, unary: UnaryOp) -> str:
        operand = self.expression(unary.operand)
        if unary.operator is UnaryOperator.NOT:
            return f"not({operand})"
        if unary.operator is UnaryOperator.NEGATE:
            if precedence_of(unary.operand) <= Precedence.UNARY:
                operand = f"({operand})"
            return "-" + operand
        if precedence_of(unary.operand) <= Precedence.COMPARISON:
            operand = f"({operand})"
        suffix = " is null" if unary.operator is UnaryOperator.IS_NULL else " is not null"
        return operand + suffix

    def _operand(self, child: Expression, parent: BinaryOperator, is_right: bool) -> str:
        text = self.expression(child)
        if needs_parentheses(child, parent, is_right):
            return f"({text})"
        # a-(-1), never a--1
        if is_right and text.startswith("-") and parent.info.precedence is Precedence.ADDITIVE:
            return f"({text})"
        return text

    def _binary(self, binary: BinaryOp) -> str:
        info = binary.operator.info
        left = self._operand(binary.left, binary.operator, is_right=False)
        right = self._operand(binary.right, binary.operator, is_right=True)
        operator = f" {info.symbol} " if info.spaced else info.symbol
        return left + operator + right

    def _collection(self, collection: Collection) -> str:
        return "[" + ",".join(self.expression(element) for element in collection.elements) + "]"

    def _map(self, map_literal: MapLiteral) -> str:
        entries = (
            quote_identifier(entry.key) + ":" + self.expression(entry.value) for entry in map_literal.entries
        )
        return "{" + ",".join(entries) + "}"

    def _labeled(self, labeled: Labeled) -> str:
        return self._atom(labeled.target) + "".join(":" + quote_identifier(name) for name in labeled.label_names)

    def _wildcard(self, wildcard: Wildcard) -> str:
        return "*"

    def _distinct(self, distinct: Distinct) -> str:
        return "DISTINCT " + self.expression(distinct.expression)

    def _iterable(self, iterable: IterableExpression) -> str:
        text = f"{iterable.function_name}({self._identifier(iterable.variable)} IN {self.expression(iterable.source)}"
        if iterable.predicate is not None:
            text += " WHERE " + self.expression(iterable.predicate)
        if iterable.transform is not None:
            text += "|" + self.expression(iterable.transform)
        return text + ")"

    def _reduction(self, reduction: Reduction) -> str:
        return (
            f"reduce({self._identifier(reduction.accumulator)}={self.expression(reduction.initial)},"
            f"{self._identifier(reduction.variable)} IN {self.expression(reduction.source)}"
            f"|{self.expression(reduction.transform)})"
        )

    def _pattern_predicate(self, predicate: PatternPredicate) -> str:
        return self.pattern(predicate.pattern)


def render(statement: Statement) -> str:
    """Render a statement tree as one line of Cypher text."""
    return CypherRenderer().statement(statement)


def render_with_parameters(statement: Statement) -> tuple[str, frozenset[str]]:
    """Render a statement and report the parameter names it references.

    Returns:
        Tuple of (query text, names of the ``{name}`` placeholders written)
    """
    renderer = CypherRenderer()
    text = renderer.statement(statement)
    return text, frozenset(renderer.parameter_names)


def render_expression(expression: Expression) -> str:
    """Render a standalone expression, mostly useful for debugging and tests."""
    return CypherRenderer().expression(expression)


def render_pattern(pattern: PatternPath | NamedPath) -> str:
    return CypherRenderer().pattern(pattern)
