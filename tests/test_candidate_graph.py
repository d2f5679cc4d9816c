import networkx as nx

from ngram_qa.core.candidate_graph import CandidateGraph
from ngram_qa.search_algorithms.bounded_expansion import BoundedExpansion

from .conftest import StubRelationLookup


def test_add_node_merges_on_content():
    graph = CandidateGraph()
    first = graph.add_node("E", explanation=1, coverage={0})
    second = graph.add_node("E", explanation=2, coverage={2, 3})

    assert first is second
    assert len(graph) == 1
    assert second.explanation == 2
    assert second.coverage == frozenset({0, 2, 3})


def test_add_node_keeps_larger_explanation_regardless_of_order():
    graph = CandidateGraph()
    graph.add_node("E", explanation=3, coverage={0, 1, 2})
    node = graph.add_node("E", explanation=1, coverage={4})
    assert node.explanation == 3


def test_capacity_drops_new_nodes():
    graph = CandidateGraph(max_nodes=2)
    assert graph.add_node("A", 1) is not None
    assert graph.add_node("B", 1) is not None
    assert graph.add_node("C", 1) is None
    assert graph.is_full()
    # Merging into an existing node still works when full
    assert graph.add_node("A", 2).explanation == 2
    assert "C" not in graph


def test_add_edge_deduplicates():
    graph = CandidateGraph()
    a = graph.add_node("A", 1)
    b = graph.add_node("B", 1)
    assert graph.add_edge(a, b, "r") is not None
    assert graph.add_edge(a, b, "r") is None
    assert graph.add_edge(a, b, "s") is not None
    assert len(graph.get_edges()) == 2


def test_expand_through_matched_relation():
    graph = CandidateGraph()
    person = graph.add_node("Person", explanation=2, coverage={1, 2})
    graph.add_node("spouse", explanation=1, coverage={3}, is_relation=True)

    touched, edges = graph.expand(person, {("spouse", "Partner"), ("knows", "Friend")})

    partner = graph.get_node("Partner")
    assert [n.content for n in touched] == ["Partner"]
    assert partner.coverage == frozenset({1, 2, 3})
    assert partner.explanation == 3
    assert partner.derived
    # Unmatched relation leading to an unknown entity is not followed
    assert "Friend" not in graph
    assert [(graph.get_nodes()[e.source].content, e.relation) for e in edges] == [("Person", "spouse")]


def test_expand_joins_independent_explanations():
    graph = CandidateGraph()
    a = graph.add_node("A", explanation=2, coverage={0, 1})
    b = graph.add_node("B", explanation=2, coverage={2, 3})

    touched, _ = graph.expand(a, {("related", "B")})

    assert touched == [b]
    assert b.coverage == frozenset({0, 1, 2, 3})
    assert b.explanation == 4


def test_expand_ignores_overlapping_coverage():
    graph = CandidateGraph()
    a = graph.add_node("A", explanation=2, coverage={0, 1})
    graph.add_node("B", explanation=1, coverage={1})
    graph.add_node("r", explanation=1, coverage={0}, is_relation=True)

    touched, edges = graph.expand(a, {("related", "B"), ("r", "C")})
    assert touched == []
    assert edges == []


def test_expand_skips_relation_nodes_and_self_loops():
    graph = CandidateGraph()
    rel = graph.add_node("r", 1, {0}, is_relation=True)
    assert graph.expand(rel, {("x", "Y")}) == ([], [])

    a = graph.add_node("A", 1, {1})
    assert graph.expand(a, {("r", "A")}) == ([], [])


def test_expand_uses_relation_lookup_when_no_neighbors_given():
    lookup = StubRelationLookup({"A": {("r", "B")}}, relations={"r"})
    graph = CandidateGraph(lookup)
    a = graph.add_node("A", 1, {0})
    graph.add_node("r", 1, {1}, is_relation=True)

    graph.expand(a)
    assert lookup.calls == ["A"]
    assert graph.get_node("B").coverage == frozenset({0, 1})


def test_connected_nodes_require_full_coverage():
    graph = CandidateGraph()
    graph.add_node("A", 1, {0})
    graph.add_node("r", 1, {1}, is_relation=True)
    assert graph.covered_positions() == frozenset({0, 1})
    assert graph.connected_nodes() == []

    a = graph.get_node("A")
    graph.expand(a, {("r", "B")})
    assert [n.content for n in graph.connected_nodes()] == ["B"]


def test_to_networkx_export():
    graph = CandidateGraph()
    a = graph.add_node("A", 2, {0, 1})
    graph.add_node("r", 1, {2}, is_relation=True)
    graph.expand(a, {("r", "B")})

    G = graph.to_networkx()
    assert isinstance(G, nx.MultiDiGraph)
    assert G.nodes["B"]["coverage"] == "0,1,2"
    assert G.nodes["B"]["explanation"] == 3
    assert G.nodes["r"]["is_relation"] is True
    assert list(G.edges(data="relation")) == [("A", "B", "r")]


def test_cyclic_knowledge_graph_terminates():
    # A <-> B cycle with an unrelated target that is never reached
    lookup = StubRelationLookup({
        "A": {("r", "B")},
        "B": {("r", "A")},
    }, relations={"r"})
    graph = CandidateGraph(lookup)
    graph.add_node("A", 1, {0})
    graph.add_node("r", 1, {1}, is_relation=True)
    graph.add_node("Z", 1, {2})

    stats = BoundedExpansion(lookup, max_depth=10, max_nodes=100).expand(graph)

    assert not stats.connected
    assert stats.rounds < 10
    assert not stats.bound_hit
    assert graph.stats is stats
