"""Base class for knowledge-base relation lookup"""

import logging
from abc import ABC, abstractmethod
from typing import Set, Tuple

logger = logging.getLogger(__name__)


class BaseRelationLookup(ABC):
    """Abstract base class for one-hop relation lookup in a knowledge base"""

    @abstractmethod
    def neighbors(self, entity: str) -> Set[Tuple[str, str]]:
        """
        Find everything reachable from an entity in one hop

        Args:
            entity: Entity identifier

        Returns:
            Set of (relation_id, neighbor_entity_id) pairs
        """
        pass

    @abstractmethod
    def is_relation(self, identifier: str) -> bool:
        """
        Check whether an identifier names a relation rather than an entity

        Args:
            identifier: Identifier returned by a dictionary lookup

        Returns:
            True if the identifier is a relation of this knowledge base
        """
        pass

    def safe_neighbors(self, entity: str) -> Set[Tuple[str, str]]:
        """neighbors() that logs failures and returns an empty set instead of raising"""
        try:
            return set(self.neighbors(entity))
        except Exception as e:
            logger.warning("Relation lookup failed for %s: %s", entity, e)
            return set()
