"""Bounded breadth-first expansion of the candidate graph"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Set, Tuple

from ..config import Config
from ..core.base_relation_lookup import BaseRelationLookup
from ..core.base_search import BaseSearch
from ..core.candidate_graph import CandidateGraph, ExpansionStats, Node

logger = logging.getLogger(__name__)


class BoundedExpansion(BaseSearch):
    """
    Round-based expansion until the question spans are connected

    Round 0 frontier: every entity node matched directly by the dictionary.
    Each round expands the frontier; the next frontier holds the nodes that
    were created or whose coverage grew. Expansion stops as soon as one
    entity node covers every matched question position, or when a bound is
    reached:
    - max_depth rounds have run
    - the graph holds max_nodes nodes
    - the frontier is empty

    For "birthplace bill gates wife":
        Round 1: Bill_Gates --spouse--> Melinda_Gates   (covers "bill gates wife")
        Round 2: Melinda_Gates --birthPlace--> Dallas   (covers all four words)
    """

    def __init__(
        self,
        relation_lookup: BaseRelationLookup,
        max_depth: int = Config.MAX_EXPANSION_DEPTH,
        max_nodes: Optional[int] = Config.MAX_GRAPH_NODES,
        max_workers: int = Config.MAX_WORKERS
    ):
        """
        Initialize bounded expansion

        Args:
            relation_lookup: Knowledge-base one-hop lookup
            max_depth: Maximum number of expansion rounds
            max_nodes: Maximum graph size (None = unbounded)
            max_workers: Parallel neighbor lookups per round (1 = sequential)
        """
        super().__init__(relation_lookup)
        self.max_depth = max_depth
        self.max_nodes = max_nodes
        self.max_workers = max_workers

    def expand(self, graph: CandidateGraph) -> ExpansionStats:
        stats = ExpansionStats()
        graph.stats = stats
        if self.max_nodes is not None and (graph.max_nodes is None or graph.max_nodes > self.max_nodes):
            graph.max_nodes = self.max_nodes

        target = graph.covered_positions()
        frontier = [node for node in graph.get_nodes() if not node.is_relation]

        if graph.connected_nodes(target):
            stats.connected = True
            return stats

        executor = ThreadPoolExecutor(max_workers=self.max_workers) if self.max_workers > 1 else None
        try:
            while frontier and stats.rounds < self.max_depth:
                neighbor_sets = self._fetch(frontier, executor)

                touched = {}
                for node, neighbors in zip(frontier, neighbor_sets):
                    if graph.is_full():
                        stats.bound_hit = True
                        break
                    new_nodes, _ = graph.expand(node, neighbors)
                    stats.nodes_expanded += 1
                    for new_node in new_nodes:
                        touched[new_node.index] = new_node

                stats.rounds += 1

                if graph.connected_nodes(target):
                    stats.connected = True
                    break
                if graph.is_full():
                    stats.bound_hit = True
                    break

                frontier = [touched[i] for i in sorted(touched) if not touched[i].is_relation]
            else:
                if frontier:
                    stats.bound_hit = True
        finally:
            if executor is not None:
                executor.shutdown(wait=True)

        logger.debug(
            "Expansion finished after %d rounds: %d nodes expanded, graph %r, connected=%s, bound_hit=%s",
            stats.rounds, stats.nodes_expanded, graph, stats.connected, stats.bound_hit
        )
        return stats

    def _fetch(
        self,
        frontier: List[Node],
        executor: Optional[ThreadPoolExecutor]
    ) -> List[Set[Tuple[str, str]]]:
        """Neighbor sets of the frontier nodes, in frontier order"""
        contents = [node.content for node in frontier]
        if executor is not None and len(contents) > 1:
            return list(executor.map(self.relation_lookup.safe_neighbors, contents))
        return [self.relation_lookup.safe_neighbors(content) for content in contents]
