"""Relation lookup over an in-memory networkx knowledge graph"""

from typing import Iterable, Set, Tuple

import networkx as nx

from ..core.base_relation_lookup import BaseRelationLookup


class GraphRelationLookup(BaseRelationLookup):
    """
    One-hop lookup in a networkx graph whose edges carry a 'relation' attribute

    Edges are followed in both directions, as in the knowledge-graph BFS:
    for the triple (Melinda_Gates, birthPlace, Dallas) both Melinda_Gates and
    Dallas see each other through birthPlace.
    """

    def __init__(self, graph: nx.DiGraph):
        """
        Initialize lookup

        Args:
            graph: NetworkX DiGraph or MultiDiGraph of the knowledge base
        """
        self.graph = graph
        self.relations = {
            data.get('relation')
            for _, _, data in graph.edges(data=True)
            if data.get('relation')
        }

    @classmethod
    def from_triples(cls, triples: Iterable[Tuple[str, str, str]]) -> 'GraphRelationLookup':
        """
        Build a lookup from (subject, relation, object) triples

        A MultiDiGraph keeps parallel edges, e.g. two relations between the
        same pair of entities.
        """
        graph = nx.MultiDiGraph()
        for s, r, o in triples:
            graph.add_edge(s, o, relation=r)
        return cls(graph)

    def neighbors(self, entity: str) -> Set[Tuple[str, str]]:
        if entity not in self.graph:
            return set()

        found = set()
        # Outgoing edges (successors)
        for _, succ, data in self.graph.out_edges(entity, data=True):
            found.add((data.get('relation', ''), succ))
        # Incoming edges (predecessors)
        for pred, _, data in self.graph.in_edges(entity, data=True):
            found.add((data.get('relation', ''), pred))
        return found

    def is_relation(self, identifier: str) -> bool:
        return identifier in self.relations

    def __repr__(self):
        return (f"GraphRelationLookup(nodes={self.graph.number_of_nodes()}, "
                f"edges={self.graph.number_of_edges()}, relations={len(self.relations)})")
