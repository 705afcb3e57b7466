"""End-to-end rendering of complete statements against known Cypher text."""

import pytest

from cypher_dsl import (
    abs_,
    all_,
    all_nodes,
    all_shortest_paths,
    any_,
    as_,
    avg,
    coalesce,
    collect,
    count,
    create,
    create_unique,
    distinct,
    exists,
    extract,
    filter_,
    for_each,
    head,
    id_,
    identifier,
    identifiers,
    index_query,
    index_query_by_parameter,
    last,
    length,
    literal,
    lookup,
    match,
    max_,
    merge,
    min_,
    node,
    nodes,
    nodes_by_id,
    none,
    param,
    path,
    range_,
    relationship_lookup,
    relationships,
    relationships_by_id,
    round_,
    set_property,
    shortest_path,
    sign,
    single,
    sqrt,
    start,
    sum_,
    tail,
    type_,
    value,
    wildcard,
)

n = identifier("n")
a = identifier("a")
b = identifier("b")
x = identifier("x")


class TestStart:
    """START lookups by id, parameter and index."""

    def test_node_by_id(self):
        assert str(start(nodes_by_id("n", 1)).returns(n)) == "START n=node(1) RETURN n"

    def test_relationship_by_id(self):
        query = start(relationships_by_id("r", 0)).returns(identifier("r"))
        assert str(query) == "START r=relationship(0) RETURN r"

    def test_several_ids(self):
        assert str(start(nodes_by_id("n", 1, 2, 3)).returns(n)) == "START n=node(1,2,3) RETURN n"

    def test_all_nodes(self):
        assert str(start(all_nodes("n")).returns(n)) == "START n=node(*) RETURN n"

    def test_index_lookup(self):
        query = start(lookup("n", "nodes", "name", "A")).returns(n)
        assert str(query) == 'START n=node:nodes(name="A") RETURN n'

    def test_relationship_index_lookup(self):
        query = start(relationship_lookup("r", "rels", "name", "Andres")).returns(identifier("r"))
        assert str(query) == 'START r=relationship:rels(name="Andres") RETURN r'

    def test_index_query(self):
        query = start(index_query("n", "nodes", "name:A")).returns(n)
        assert str(query) == 'START n=node:nodes("name:A") RETURN n'

    def test_index_query_by_parameter(self):
        query = start(index_query_by_parameter("n", "nodes", "paramName")).returns(n)
        assert str(query) == "START n=node:nodes({paramName}) RETURN n"

    def test_multiple_lookups(self):
        query = start(nodes_by_id("a", 1), nodes_by_id("b", 2)).returns(a, b)
        assert str(query) == "START a=node(1),b=node(2) RETURN a,b"

    def test_unusual_identifier(self):
        odd = identifier("This isn't a common identifier")
        query = start(nodes_by_id(odd, 1)).returns(odd.property("happy"))
        assert str(query) == (
            "START `This isn't a common identifier`=node(1) "
            "RETURN `This isn't a common identifier`.happy"
        )


class TestMatch:
    def test_related_nodes(self):
        query = start(nodes_by_id("n", 3)).match(node("n").both().node("x")).returns(x)
        assert str(query) == "START n=node(3) MATCH (n)--(x) RETURN x"

    def test_multiple_relationship_types(self):
        query = start(nodes_by_id("n", 3)).match(node("n").out("BLOCKS", "KNOWS").node("x")).returns(x)
        assert str(query) == "START n=node(3) MATCH (n)-[:BLOCKS|KNOWS]->(x) RETURN x"

    def test_multiple_relationships(self):
        query = (
            start(nodes_by_id("a", 3))
            .match(node("a").out("KNOWS").node("b").out("KNOWS").node("c"))
            .returns(identifiers("a", "b", "c"))
        )
        assert str(query) == "START a=node(3) MATCH (a)-[:KNOWS]->(b)-[:KNOWS]->(c) RETURN a,b,c"

    def test_variable_length(self):
        query = (
            start(nodes_by_id("a", 3), nodes_by_id("x", 2, 4))
            .match(node("a").out("KNOWS").hops(1, 3).as_("r").node("x"))
            .returns(identifier("r"))
        )
        assert str(query) == "START a=node(3),x=node(2,4) MATCH (a)-[r:KNOWS*1..3]->(x) RETURN r"

    def test_named_paths(self):
        query = (
            start(nodes_by_id("a", 3))
            .match(
                path("p1", node("a").out("KNOWS").hops(0, 1).node("b")),
                path("p2", node("b").out("BLOCKS").hops(0, 1).node("c")),
            )
            .returns(a, b, identifier("c"), length(identifier("p1")), length(identifier("p2")))
        )
        assert str(query) == (
            "START a=node(3) MATCH p1=(a)-[:KNOWS*0..1]->(b),p2=(b)-[:BLOCKS*0..1]->(c) "
            "RETURN a,b,c,length(p1),length(p2)"
        )

    def test_optional(self):
        query = start(nodes_by_id("a", 2)).match(node("a").out().node("x")).optional().returns(identifiers("a", "x"))
        assert str(query) == "START a=node(2) OPTIONAL MATCH (a)-->(x) RETURN a,x"

    def test_optional_match_entry_point(self):
        query = start(nodes_by_id("a", 3)).optional_match(node("a").out("LOVES").as_("r").node()).returns(
            a, identifier("r")
        )
        assert str(query) == "START a=node(3) OPTIONAL MATCH (a)-[r:LOVES]->() RETURN a,r"

    def test_shortest_path(self):
        query = (
            start(nodes_by_id("d", 1), nodes_by_id("e", 2))
            .match(path("p", shortest_path(node("d").out().hops(None, 15).node("e"))))
            .returns(identifier("p"))
        )
        assert str(query) == "START d=node(1),e=node(2) MATCH p=shortestPath((d)-[*..15]->(e)) RETURN p"

    def test_all_shortest_paths(self):
        query = (
            start(nodes_by_id("d", 1), nodes_by_id("e", 2))
            .match(path("p", all_shortest_paths(node("d").out().hops(None, 15).node("e"))))
            .returns(identifier("p"))
        )
        assert str(query) == "START d=node(1),e=node(2) MATCH p=allShortestPaths((d)-[*..15]->(e)) RETURN p"

    def test_labels_and_properties(self):
        query = match(
            node("charlie").label("Person").values(value("name", "Charlie Sheen")).both().node("movie").label("Movie")
        ).returns(identifier("movie"))
        assert str(query) == 'MATCH (charlie:Person {name:"Charlie Sheen"})--(movie:Movie) RETURN movie'


class TestWhere:
    def test_boolean_operations(self):
        query = (
            start(nodes_by_id("n", 3, 1))
            .where(
                n.property("age").lt(30).and_(n.property("name").eq("Tobias")).or_(
                    n.property("name").eq("Tobias").not_()
                )
            )
            .returns(n)
        )
        assert str(query) == (
            'START n=node(3,1) WHERE (n.age<30 and n.name="Tobias") or not(n.name="Tobias") RETURN n'
        )

    def test_regular_expression_on_type(self):
        r = identifier("r")
        query = start(nodes_by_id("n", 3)).match(node("n").out().as_("r").node()).where(
            type_(r).regexp("K.*")
        ).returns(r)
        assert str(query) == 'START n=node(3) MATCH (n)-[r]->() WHERE type(r)=~"K.*" RETURN r'

    def test_property_exists(self):
        query = start(nodes_by_id("n", 3, 1)).where(exists(n.property("belt"))).returns(n)
        assert str(query) == "START n=node(3,1) WHERE exists(n.belt) RETURN n"

    def test_null_check_after_optional_match(self):
        r = identifier("r")
        query = (
            start(nodes_by_id("a", 1), nodes_by_id("b", 3, 2))
            .optional_match(node("a").in_().as_("r").node("b"))
            .where(r.is_null())
            .returns(b)
        )
        assert str(query) == "START a=node(1),b=node(3,2) OPTIONAL MATCH (a)<-[r]-(b) WHERE r is null RETURN b"

    def test_pattern_as_predicate(self):
        query = start(nodes_by_id("a", 1), nodes_by_id("b", 3, 2)).where(node("a").in_().node("b")).returns(b)
        assert str(query) == "START a=node(1),b=node(3,2) WHERE (a)<--(b) RETURN b"

    def test_in_collection(self):
        query = start(nodes_by_id("a", 3, 1, 2)).where(a.property("name").in_(["Peter", "Tobias"])).returns(a)
        assert str(query) == 'START a=node(3,1,2) WHERE a.name IN ["Peter","Tobias"] RETURN a'

    def test_where_between_match_and_create(self):
        query = (
            match(node("a").label("Person"), node("b").label("Person"))
            .where(a.property("name").eq("Node A").and_(b.property("name").eq("Node B")))
            .create(node("a").out("RELTYPE").as_("r").node("b"))
            .returns(identifier("r"))
        )
        assert str(query) == (
            'MATCH (a:Person),(b:Person) WHERE a.name="Node A" and b.name="Node B" '
            "CREATE (a)-[r:RELTYPE]->(b) RETURN r"
        )

    @pytest.mark.parametrize(
        ("factory", "name"),
        [(all_, "all"), (none, "none"), (single, "single")],
    )
    def test_quantified_predicates(self, factory, name):
        query = (
            start(nodes_by_id("a", 3), nodes_by_id("b", 1))
            .match(path("p", node("a").out().hops(1, 3).node("b")))
            .where(factory(x, nodes(identifier("p")), x.property("age").gt(30)))
            .returns(identifier("p"))
        )
        assert str(query) == (
            f"START a=node(3),b=node(1) MATCH p=(a)-[*1..3]->(b) WHERE {name}(x IN nodes(p) WHERE x.age>30) RETURN p"
        )

    def test_any(self):
        query = start(nodes_by_id("a", 2)).where(any_(x, a.property("array"), x.eq("one"))).returns(a)
        assert str(query) == 'START a=node(2) WHERE any(x IN a.array WHERE x="one") RETURN a'


class TestReturn:
    def test_wildcard(self):
        query = start(nodes_by_id("a", 1)).match(path("p", node("a").out().as_("r").node("b"))).returns(wildcard())
        assert str(query) == "START a=node(1) MATCH p=(a)-[r]->(b) RETURN *"

    def test_alias(self):
        query = start(nodes_by_id("a", 1)).returns(as_(a.property("age"), "SomethingTotallyDifferent"))
        assert str(query) == "START a=node(1) RETURN a.age AS SomethingTotallyDifferent"

    def test_distinct(self):
        query = start(nodes_by_id("a", 1)).match(node("a").out().node("b")).returns_distinct(b)
        assert str(query) == "START a=node(1) MATCH (a)-->(b) RETURN DISTINCT b"

    def test_count_all(self):
        query = start(nodes_by_id("n", 2)).match(node("n").out().node("x")).returns(n, count())
        assert str(query) == "START n=node(2) MATCH (n)-->(x) RETURN n,count(*)"

    def test_count_distinct(self):
        query = start(nodes_by_id("a", 2)).match(node("a").out().node("b")).returns(
            count(distinct(b.property("eyes")))
        )
        assert str(query) == "START a=node(2) MATCH (a)-->(b) RETURN count(DISTINCT b.eyes)"

    @pytest.mark.parametrize(
        ("factory", "name"),
        [(sum_, "sum"), (avg, "avg"), (max_, "max"), (min_, "min"), (collect, "collect")],
    )
    def test_aggregates(self, factory, name):
        query = start(nodes_by_id("n", 2, 3, 4)).returns(factory(n.property("property")))
        assert str(query) == f"START n=node(2,3,4) RETURN {name}(n.property)"

    def test_scalar_functions(self):
        query = start(nodes_by_id("a", 3, 4, 5)).returns(id_(a))
        assert str(query) == "START a=node(3,4,5) RETURN id(a)"
        query = start(nodes_by_id("a", 3)).returns(coalesce(a.property("hairColour"), a.property("eyes")))
        assert str(query) == "START a=node(3) RETURN coalesce(a.hairColour,a.eyes)"

    def test_collection_functions(self):
        array = a.property("array")
        assert str(start(nodes_by_id("a", 2)).returns(array, head(array))) == (
            "START a=node(2) RETURN a.array,head(a.array)"
        )
        assert str(start(nodes_by_id("a", 2)).returns(array, last(array))) == (
            "START a=node(2) RETURN a.array,last(a.array)"
        )
        assert str(start(nodes_by_id("a", 2)).returns(array, tail(array))) == (
            "START a=node(2) RETURN a.array,tail(a.array)"
        )
        assert str(start(nodes_by_id("a", 2)).returns(array, filter_(x, array, length(x).eq(3)))) == (
            "START a=node(2) RETURN a.array,filter(x IN a.array WHERE length(x)=3)"
        )

    def test_path_functions(self):
        p = identifier("p")
        base = start(nodes_by_id("a", 3), nodes_by_id("c", 2)).match(
            path("p", node("a").out().node("b").out().node("c"))
        )
        assert str(base.returns(nodes(p))) == "START a=node(3),c=node(2) MATCH p=(a)-->(b)-->(c) RETURN nodes(p)"
        assert str(base.returns(relationships(p))) == (
            "START a=node(3),c=node(2) MATCH p=(a)-->(b)-->(c) RETURN relationships(p)"
        )

    def test_extract(self):
        query = (
            start(nodes_by_id("a", 3), nodes_by_id("b", 4), nodes_by_id("c", 1))
            .match(path("p", node("a").out().node("b").out().node("c")))
            .returns(extract("n", nodes(identifier("p")), n.property("age")))
        )
        assert str(query) == (
            "START a=node(3),b=node(4),c=node(1) MATCH p=(a)-->(b)-->(c) RETURN extract(n IN nodes(p)|n.age)"
        )

    def test_math_functions(self):
        c = identifier("c")
        query = start(nodes_by_id("a", 3), nodes_by_id("c", 2)).returns(
            a.property("age"), c.property("age"), abs_(a.property("age") - c.property("age"))
        )
        assert str(query) == "START a=node(3),c=node(2) RETURN a.age,c.age,abs(a.age-c.age)"
        assert str(start(nodes_by_id("a", 1)).returns(round_(3.141592))) == "START a=node(1) RETURN round(3.141592)"
        assert str(start(nodes_by_id("a", 1)).returns(sqrt(256))) == "START a=node(1) RETURN sqrt(256)"
        assert str(start(nodes_by_id("a", 1)).returns(sign(-17), sign(0.1))) == (
            "START a=node(1) RETURN sign(-17),sign(0.1)"
        )
        assert str(start(nodes_by_id("a", 1)).returns(range_(0, 10), range_(2, 18, 3))) == (
            "START a=node(1) RETURN range(0,10),range(2,18,3)"
        )


class TestOrderingAndPaging:
    def test_order_by(self):
        query = start(nodes_by_id("n", 3, 1, 2)).returns(n).order_by(n.property("age"), n.property("name"))
        assert str(query) == "START n=node(3,1,2) RETURN n ORDER BY n.age,n.name"

    def test_descending(self):
        query = start(nodes_by_id("n", 3, 1, 2)).returns(n).order_by(n.property("name").desc())
        assert str(query) == "START n=node(3,1,2) RETURN n ORDER BY n.name DESCENDING"

    def test_skip_and_limit(self):
        query = start(nodes_by_id("n", 3, 4, 5, 1, 2)).returns(n).order_by(n.property("name")).skip(1).limit(2)
        assert str(query) == "START n=node(3,4,5,1,2) RETURN n ORDER BY n.name SKIP 1 LIMIT 2"

    def test_parameterized_paging(self):
        query = (
            start(nodes_by_id("n", 3, 4, 5, 1, 2))
            .returns(n)
            .order_by(n.property("name"))
            .skip("skipParam")
            .limit(param("limitParam"))
        )
        assert str(query) == "START n=node(3,4,5,1,2) RETURN n ORDER BY n.name SKIP {skipParam} LIMIT {limitParam}"

    def test_limit_without_order(self):
        assert str(start(nodes_by_id("n", 3, 4, 5, 1, 2)).returns(n).limit(3)) == (
            "START n=node(3,4,5,1,2) RETURN n LIMIT 3"
        )


class TestWith:
    def test_with_then_where(self):
        other = identifier("otherPerson")
        query = (
            start(nodes_by_id("david", 1))
            .match(node("david").out().as_("otherPerson").node())
            .with_(other, as_(count(), "foaf"))
            .where(identifier("foaf").gt(literal(1)))
            .returns(other)
        )
        assert str(query) == (
            "START david=node(1) MATCH (david)-[otherPerson]->() WITH otherPerson,count(*) AS foaf "
            "WHERE foaf>1 RETURN otherPerson"
        )


class TestUpdating:
    def test_create_node(self):
        assert str(create(node("n"))) == "CREATE (n)"

    def test_create_with_properties(self):
        query = create(node("n").values(value("name", "Andres"), value("title", "Developer")))
        assert str(query) == 'CREATE (n {name:"Andres",title:"Developer"})'

    def test_create_with_labels(self):
        assert str(create(node("n").label("Person"))) == "CREATE (n:Person)"
        assert str(create(node("n").labels("Person", "Swedish"))) == "CREATE (n:Person:Swedish)"

    def test_create_with_parameter_map(self):
        assert str(create(node("node").values(param("props")))) == "CREATE (node {props})"

    def test_create_relationship_with_expression_property(self):
        query = (
            start(nodes_by_id("a", 1), nodes_by_id("b", 2))
            .create(
                node("a")
                .out(identifier("REL"))
                .values(value("name", a.property("name").concat("<->").concat(b.property("name"))))
                .as_("r")
                .node(b)
            )
            .returns(identifier("r"))
        )
        assert str(query) == (
            'START a=node(1),b=node(2) CREATE (a)-[r:REL {name:a.name+"<->"+b.name}]->(b) RETURN r'
        )

    def test_create_full_path(self):
        query = create(
            node("andres")
            .values(value("name", "Andres"))
            .out("WORKS_AT")
            .node(identifier("neo"))
            .in_("WORKS_AT")
            .node("michael")
            .values(value("name", "Michael"))
        ).returns(identifier("andres"), identifier("michael"))
        assert str(query) == (
            'CREATE (andres {name:"Andres"})-[:WORKS_AT]->(neo)<-[:WORKS_AT]-(michael {name:"Michael"}) '
            "RETURN andres,michael"
        )

    def test_consecutive_creates(self):
        charlie = node("charlie").label("Person").values(value("name", "Charlie Sheen"))
        martin = node("martin").label("Person").values(value("name", "Martin Sheen"))
        query = (
            match(charlie, martin)
            .create(
                node("charlie")
                .out("X")
                .values(value("blocked", False))
                .node()
                .label("Unblocked")
                .in_("X")
                .values(value("blocked", False))
                .node("martin")
            )
            .create(
                node("charlie")
                .out("X")
                .values(value("blocked", True))
                .node()
                .label("Blocked")
                .in_("X")
                .values(value("blocked", False))
                .node("martin")
            )
        )
        assert str(query) == (
            'MATCH (charlie:Person {name:"Charlie Sheen"}),(martin:Person {name:"Martin Sheen"}) '
            "CREATE (charlie)-[:X {blocked:false}]->(:Unblocked)<-[:X {blocked:false}]-(martin) "
            "CREATE (charlie)-[:X {blocked:true}]->(:Blocked)<-[:X {blocked:false}]-(martin)"
        )

    def test_create_unique(self):
        query = (
            start(nodes_by_id("root", 2))
            .create_unique(node("root").both("X").as_("r").values(value("since", "forever")).node())
            .returns(identifier("r"))
        )
        assert str(query) == 'START root=node(2) CREATE UNIQUE (root)-[r:X {since:"forever"}]-() RETURN r'

    def test_create_unique_several_patterns(self):
        query = (
            start(nodes_by_id("root", 2))
            .create_unique(node("root").out("FOO").node("x"), node("root").out("BAR").node("x"))
            .returns(x)
        )
        assert str(query) == "START root=node(2) CREATE UNIQUE (root)-[:FOO]->(x),(root)-[:BAR]->(x) RETURN x"

    def test_create_unique_entry_point(self):
        assert str(create_unique(node("a").out("R").node("b"))) == "CREATE UNIQUE (a)-[:R]->(b)"

    def test_merge(self):
        assert str(merge(node("n"))) == "MERGE (n)"
        query = merge(node("a").values(value("name", "Andres"))).returns(a)
        assert str(query) == 'MERGE (a {name:"Andres"}) RETURN a'

    def test_merge_after_start(self):
        query = (
            start(nodes_by_id("root", 2))
            .merge(node("root").out("X").node("leaf").values(value("name", "D")))
            .returns(identifier("leaf"))
        )
        assert str(query) == 'START root=node(2) MERGE (root)-[:X]->(leaf {name:"D"}) RETURN leaf'

    def test_delete(self):
        assert str(start(nodes_by_id("n", 4)).delete(n)) == "START n=node(4) DELETE n"
        query = start(nodes_by_id("n", 3)).match(node("n").both().as_("r").node()).delete(n, identifier("r"))
        assert str(query) == "START n=node(3) MATCH (n)-[r]-() DELETE n,r"

    def test_detach_delete(self):
        assert str(match(node("n").label("Temp")).detach_delete(n)) == "MATCH (n:Temp) DETACH DELETE n"

    def test_remove(self):
        andres = identifier("andres")
        query = start(nodes_by_id("andres", 3)).remove(andres.property("age")).returns(andres)
        assert str(query) == "START andres=node(3) REMOVE andres.age RETURN andres"

    def test_remove_labels_and_property(self):
        query = start(nodes_by_id(n, 1)).remove(n.labels("Swedish Guy", "German Guy"), n.property("name"))
        assert str(query) == "START n=node(1) REMOVE n:`Swedish Guy`:`German Guy`,n.name"

    def test_set_property(self):
        query = start(nodes_by_id("n", 2)).set(set_property(n.property("surname"), "Taylor")).returns(n)
        assert str(query) == 'START n=node(2) SET n.surname="Taylor" RETURN n'

    def test_set_labels_and_property(self):
        query = start(nodes_by_id(n, 1)).set(
            n.labels("Swedish Guy", "German Guy"), set_property(n.property("name"), literal("Michael"))
        )
        assert str(query) == 'START n=node(1) SET n:`Swedish Guy`:`German Guy`,n.name="Michael"'

    def test_set_label(self):
        assert str(start(nodes_by_id(n, 1)).set(n.label("Swedish"))) == "START n=node(1) SET n:Swedish"


class TestMerge:
    keanu = identifier("keanu")

    def merge_keanu(self):
        return merge(node(self.keanu).label("Person").values(value("name", "Keanu Reeves")))

    def test_on_create(self):
        query = self.merge_keanu().on_create(set_property(self.keanu.property("movie"), "Matrix"))
        assert str(query) == 'MERGE (keanu:Person {name:"Keanu Reeves"}) ON CREATE SET keanu.movie="Matrix"'

    def test_on_match(self):
        query = self.merge_keanu().on_match(set_property(self.keanu.property("movie"), "Matrix"))
        assert str(query) == 'MERGE (keanu:Person {name:"Keanu Reeves"}) ON MATCH SET keanu.movie="Matrix"'

    def test_on_create_and_on_match(self):
        query = (
            self.merge_keanu()
            .on_create(set_property(self.keanu.property("movie"), "Matrix"))
            .on_match(
                set_property(self.keanu.property("movie"), "Matrix"),
                set_property(self.keanu.property("found"), True),
            )
            .returns(self.keanu)
        )
        assert str(query) == (
            'MERGE (keanu:Person {name:"Keanu Reeves"}) ON CREATE SET keanu.movie="Matrix" '
            'ON MATCH SET keanu.movie="Matrix",keanu.found=true RETURN keanu'
        )


class TestForeach:
    def test_set_property(self):
        query = (
            start(nodes_by_id("begin", 2), nodes_by_id("end", 1))
            .match(path("p", node("begin").out().node("end")))
            .for_each(for_each("n", nodes(identifier("p"))).set(set_property(n.property("marked"), True)))
        )
        assert str(query) == (
            "START begin=node(2),end=node(1) MATCH p=(begin)-->(end) FOREACH(n in nodes(p)| SET n.marked=true)"
        )

    def test_set_property_and_label(self):
        query = (
            start(nodes_by_id("begin", 2), nodes_by_id("end", 1))
            .match(path("p", node("begin").out().node("end")))
            .for_each(
                for_each(n, nodes(identifier("p"))).set(
                    set_property(n.property("marked"), literal(True)), n.label("Person")
                )
            )
        )
        assert str(query) == (
            "START begin=node(2),end=node(1) MATCH p=(begin)-->(end) "
            "FOREACH(n in nodes(p)| SET n.marked=true,n:Person)"
        )

    def test_several_nested_clauses(self):
        clause = for_each("n", nodes(identifier("p"))).remove(n.property("tmp")).set(n.label("Seen"))
        query = match(path("p", node("a").out().node("b"))).for_each(clause)
        assert str(query) == "MATCH p=(a)-->(b) FOREACH(n in nodes(p)| REMOVE n.tmp,SET n:Seen)"


class TestUnion:
    def actors(self):
        return match(node("n").label("Actor")).returns(as_(n.property("name"), "name"))

    def test_union(self):
        query = self.actors().union().match(node("n").label("Movie")).returns(as_(n.property("title"), "name"))
        assert str(query) == "MATCH (n:Actor) RETURN n.name AS name UNION MATCH (n:Movie) RETURN n.title AS name"

    def test_union_all(self):
        query = self.actors().union().all().match(node("n").label("Movie")).returns(as_(n.property("title"), "name"))
        assert str(query) == (
            "MATCH (n:Actor) RETURN n.name AS name UNION ALL MATCH (n:Movie) RETURN n.title AS name"
        )

    def test_union_all_shorthand(self):
        query = self.actors().union_all().match(node("n").label("Movie")).returns(as_(n.property("title"), "name"))
        assert "UNION ALL" in str(query)

    def test_three_way_union(self):
        query = (
            match(node("a")).returns(a)
            .union()
            .match(node("b")).returns(b)
            .union_all()
            .start(nodes_by_id("c", 1)).returns(identifier("c"))
        )
        assert str(query) == "MATCH (a) RETURN a UNION MATCH (b) RETURN b UNION ALL START c=node(1) RETURN c"
