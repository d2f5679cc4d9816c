"""Base class for candidate graph expansion strategies"""

from abc import ABC, abstractmethod

from .base_relation_lookup import BaseRelationLookup
from .candidate_graph import CandidateGraph, ExpansionStats


class BaseSearch(ABC):
    """Abstract base class for candidate graph expansion"""

    def __init__(self, relation_lookup: BaseRelationLookup):
        """
        Initialize expansion strategy

        Args:
            relation_lookup: Knowledge-base one-hop lookup
        """
        self.relation_lookup = relation_lookup

    @abstractmethod
    def expand(self, graph: CandidateGraph) -> ExpansionStats:
        """
        Grow the graph from its direct dictionary hits

        Metrics are returned (and stored on graph.stats) rather than kept on
        the strategy, so one instance can serve concurrent questions.

        Args:
            graph: Candidate graph holding the direct hits of one question

        Returns:
            ExpansionStats of this run
        """
        pass
