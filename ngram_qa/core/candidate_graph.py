"""Per-question candidate graph"""

import logging
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, List, Optional, Set, Tuple

import networkx as nx

from .base_relation_lookup import BaseRelationLookup

logger = logging.getLogger(__name__)


@dataclass
class Node:
    """
    Candidate entity (or relation) discovered while answering a question

    explanation is the evidence strength: the word count of the longest
    n-gram that produced the node, or for expanded nodes the number of
    question words their derivation accounts for. coverage holds the
    question token positions the node is connected to.
    """
    index: int
    content: str
    explanation: int
    coverage: FrozenSet[int] = frozenset()
    is_relation: bool = False
    derived: bool = False

    def __repr__(self):
        kind = "relation" if self.is_relation else "entity"
        return f"Node({self.content!r}, {kind}, explanation={self.explanation}, coverage={sorted(self.coverage)})"


@dataclass(frozen=True)
class Edge:
    """Directed relation between two nodes, referenced by arena index"""
    source: int
    target: int
    relation: str


@dataclass
class ExpansionStats:
    """Bookkeeping of one expansion run"""
    rounds: int = 0
    nodes_expanded: int = 0
    connected: bool = False
    bound_hit: bool = False


class CandidateGraph:
    """
    Directed graph of candidate nodes built for a single question

    Nodes live in an arena (a list) and are found by content through a
    content -> index map, so merges are O(1) and edges only hold indices.
    The knowledge graph may contain cycles; the arena does not care.
    """

    def __init__(
        self,
        relation_lookup: Optional[BaseRelationLookup] = None,
        max_nodes: Optional[int] = None
    ):
        """
        Initialize an empty graph

        Args:
            relation_lookup: Knowledge-base lookup used by expand() when no
                neighbors are passed in
            max_nodes: Capacity; contents beyond it are dropped (None = unbounded)
        """
        self.relation_lookup = relation_lookup
        self.max_nodes = max_nodes
        self.stats = ExpansionStats()
        self._nodes: List[Node] = []
        self._index: Dict[str, int] = {}
        self._edges: List[Edge] = []
        self._edge_set: Set[Edge] = set()
        self._capacity_logged = False

    # ------------------------------------------------------------------
    # Nodes and edges
    # ------------------------------------------------------------------

    def add_node(
        self,
        content: str,
        explanation: int,
        coverage: Iterable[int] = (),
        is_relation: bool = False
    ) -> Optional[Node]:
        """
        Add a node for a direct dictionary hit, merging on equal content

        A merged node keeps the larger explanation, so the outcome does not
        depend on the order in which n-grams are matched.

        Returns:
            The new or merged node, or None if the graph is full
        """
        coverage = frozenset(coverage)
        node = self.get_node(content)
        if node is not None:
            node.explanation = max(node.explanation, explanation)
            node.coverage = node.coverage | coverage
            node.is_relation = node.is_relation or is_relation
            return node
        return self._create(content, explanation, coverage, is_relation, derived=False)

    def add_edge(self, source: Node, target: Node, relation: str) -> Optional[Edge]:
        """Record an edge; returns None if it already exists"""
        edge = Edge(source.index, target.index, relation)
        if edge in self._edge_set:
            return None
        self._edge_set.add(edge)
        self._edges.append(edge)
        return edge

    def _create(self, content, explanation, coverage, is_relation, derived) -> Optional[Node]:
        if self.is_full():
            if not self._capacity_logged:
                logger.info("Candidate graph reached %d nodes, dropping new nodes", self.max_nodes)
                self._capacity_logged = True
            return None
        node = Node(len(self._nodes), content, explanation, coverage, is_relation, derived)
        self._nodes.append(node)
        self._index[content] = node.index
        return node

    def _join(self, content: str, coverage: FrozenSet[int]) -> Tuple[Optional[Node], bool]:
        """
        Merge expansion evidence covering `coverage` into the node for content

        Returns:
            (node, touched) where touched means created or coverage grew
        """
        node = self.get_node(content)
        if node is None:
            node = self._create(content, len(coverage), coverage, is_relation=False, derived=True)
            return node, node is not None

        merged = node.coverage | coverage
        if node.coverage.isdisjoint(coverage):
            # Two independent explanations of the same entity
            node.explanation = max(node.explanation, len(merged))
        else:
            node.explanation = max(node.explanation, len(coverage))

        touched = merged != node.coverage
        node.coverage = merged
        return node, touched

    def get_node(self, content: str) -> Optional[Node]:
        index = self._index.get(content)
        return self._nodes[index] if index is not None else None

    def get_nodes(self) -> List[Node]:
        return list(self._nodes)

    def get_edges(self) -> List[Edge]:
        return list(self._edges)

    def entity_nodes(self) -> List[Node]:
        return [node for node in self._nodes if not node.is_relation]

    def is_full(self) -> bool:
        return self.max_nodes is not None and len(self._nodes) >= self.max_nodes

    def covered_positions(self) -> FrozenSet[int]:
        """Question positions explained by any direct dictionary hit"""
        positions = set()
        for node in self._nodes:
            if not node.derived:
                positions |= node.coverage
        return frozenset(positions)

    def connected_nodes(self, target: Optional[FrozenSet[int]] = None) -> List[Node]:
        """Entity nodes whose coverage touches every position in target"""
        if target is None:
            target = self.covered_positions()
        return [node for node in self.entity_nodes() if target <= node.coverage]

    # ------------------------------------------------------------------
    # Expansion
    # ------------------------------------------------------------------

    def expand(
        self,
        node: Node,
        neighbors: Optional[Iterable[Tuple[str, str]]] = None
    ) -> Tuple[List[Node], List[Edge]]:
        """
        Connect a node to its knowledge-base neighbors

        For every (relation, neighbor) pair:
        - if the question matched the relation itself (a relation node with
          coverage disjoint from the node's), the neighbor becomes a node
          explaining both spans;
        - else if the neighbor is already an entity node explaining a
          disjoint span, the two explanations are joined.

        Args:
            node: Entity node to expand (relation nodes are ignored)
            neighbors: Pre-fetched (relation, neighbor) pairs; fetched from
                relation_lookup when None

        Returns:
            (touched_nodes, new_edges): nodes created or whose coverage grew,
            and edges recorded by this call
        """
        if node.is_relation:
            return [], []

        if neighbors is None:
            if self.relation_lookup is None:
                return [], []
            neighbors = self.relation_lookup.safe_neighbors(node.content)

        touched: Dict[int, Node] = {}
        new_edges = []

        for relation, neighbor in sorted(neighbors):
            if neighbor == node.content:
                continue

            relation_node = self.get_node(relation)
            existing = self.get_node(neighbor)

            if (relation_node is not None and relation_node.is_relation
                    and relation_node.coverage.isdisjoint(node.coverage)):
                coverage = node.coverage | relation_node.coverage
            elif (existing is not None and not existing.is_relation
                    and existing.coverage.isdisjoint(node.coverage)):
                coverage = node.coverage
            else:
                continue

            target, grew = self._join(neighbor, coverage)
            if target is None:
                continue
            if grew:
                touched[target.index] = target
            edge = self.add_edge(node, target, relation)
            if edge is not None:
                new_edges.append(edge)

        return [touched[i] for i in sorted(touched)], new_edges

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------

    def to_networkx(self) -> nx.MultiDiGraph:
        """Copy of the graph as a networkx MultiDiGraph keyed by content"""
        graph = nx.MultiDiGraph()
        for node in self._nodes:
            graph.add_node(
                node.content,
                explanation=node.explanation,
                coverage=",".join(str(p) for p in sorted(node.coverage)),
                is_relation=node.is_relation,
                derived=node.derived
            )
        for edge in self._edges:
            graph.add_edge(
                self._nodes[edge.source].content,
                self._nodes[edge.target].content,
                relation=edge.relation
            )
        return graph

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, content: str) -> bool:
        return content in self._index

    def __repr__(self):
        return f"CandidateGraph(nodes={len(self._nodes)}, edges={len(self._edges)})"
