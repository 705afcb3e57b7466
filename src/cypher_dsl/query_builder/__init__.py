"""Cypher statement builder.

This package provides an immutable, fluent interface for building Cypher
statements and rendering them to text.
"""

from .builder import (
    LimitedQuery,
    MergingQuery,
    OrderedQuery,
    ReadingQuery,
    ReturningQuery,
    SkippedQuery,
    UnionQuery,
    UpdatingQuery,
    create,
    create_unique,
    match,
    merge,
    optional_match,
    start,
)
from .clauses import (
    ForeachClause,
    PropertyAssignment,
    StartLookup,
    all_nodes,
    all_relationships,
    for_each,
    index_query,
    index_query_by_parameter,
    lookup,
    nodes_by_id,
    nodes_by_parameter,
    relationship_lookup,
    relationships_by_id,
    relationships_by_parameter,
    set_property,
)
from .executor import Neo4jQueryExecutor, create_neo4j_driver
from .expressions import (
    ASCENDING,
    DESCENDING,
    BinaryOperator,
    Expression,
    Identifier,
    Literal,
    MapEntry,
    Order,
    Parameter,
    Precedence,
    UnaryOperator,
    as_,
    collection,
    identifier,
    identifiers,
    literal,
    map_of,
    order,
    param,
    value,
    wildcard,
)
from .functions import (
    abs_,
    all_,
    and_,
    any_,
    avg,
    coalesce,
    collect,
    concat,
    count,
    distinct,
    exists,
    extract,
    filter_,
    function,
    has,
    head,
    id_,
    is_not_null,
    is_null,
    keys,
    labels,
    last,
    length,
    max_,
    min_,
    nodes,
    none,
    not_,
    or_,
    range_,
    reduce,
    relationships,
    round_,
    sign,
    single,
    size,
    sqrt,
    sum_,
    tail,
    timestamp,
    type_,
    xor,
)
from .interfaces import BuildableQuery, QueryExecutor
from .patterns import (
    Direction,
    NamedPath,
    PatternPath,
    ShortestPathMode,
    all_shortest_paths,
    node,
    path,
    shortest_path,
)
from .renderer import render, render_expression, render_pattern, render_with_parameters
from .state import ClauseType, CypherQueryState
from .statement import Statement, UnionLink

__all__ = [
    "ASCENDING",
    "DESCENDING",
    "BinaryOperator",
    "BuildableQuery",
    "ClauseType",
    "CypherQueryState",
    "Direction",
    "Expression",
    "ForeachClause",
    "Identifier",
    "LimitedQuery",
    "Literal",
    "MapEntry",
    "MergingQuery",
    "NamedPath",
    "Neo4jQueryExecutor",
    "Order",
    "OrderedQuery",
    "Parameter",
    "PatternPath",
    "Precedence",
    "PropertyAssignment",
    "QueryExecutor",
    "ReadingQuery",
    "ReturningQuery",
    "ShortestPathMode",
    "SkippedQuery",
    "StartLookup",
    "Statement",
    "UnaryOperator",
    "UnionLink",
    "UnionQuery",
    "UpdatingQuery",
    "abs_",
    "all_",
    "all_nodes",
    "all_relationships",
    "all_shortest_paths",
    "and_",
    "any_",
    "as_",
    "avg",
    "coalesce",
    "collect",
    "collection",
    "concat",
    "count",
    "create",
    "create_neo4j_driver",
    "create_unique",
    "distinct",
    "exists",
    "extract",
    "filter_",
    "for_each",
    "function",
    "has",
    "head",
    "id_",
    "identifier",
    "identifiers",
    "index_query",
    "index_query_by_parameter",
    "is_not_null",
    "is_null",
    "keys",
    "labels",
    "last",
    "length",
    "literal",
    "lookup",
    "map_of",
    "match",
    "max_",
    "merge",
    "min_",
    "node",
    "nodes",
    "nodes_by_id",
    "nodes_by_parameter",
    "none",
    "not_",
    "optional_match",
    "or_",
    "order",
    "param",
    "path",
    "range_",
    "reduce",
    "relationship_lookup",
    "relationships",
    "relationships_by_id",
    "relationships_by_parameter",
    "render",
    "render_expression",
    "render_pattern",
    "render_with_parameters",
    "round_",
    "set_property",
    "shortest_path",
    "sign",
    "single",
    "size",
    "sqrt",
    "start",
    "sum_",
    "tail",
    "timestamp",
    "type_",
    "value",
    "wildcard",
    "xor",
]
