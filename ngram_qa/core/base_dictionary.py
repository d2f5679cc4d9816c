"""Base class for surface-form dictionaries"""

from abc import ABC, abstractmethod
from typing import Optional, Set


class BaseDictionary(ABC):
    """
    Abstract base class for surface-form dictionaries

    A dictionary maps a normalized phrase (one or more words) to the set of
    entity identifiers it may refer to.
    """

    @abstractmethod
    def get(self, phrase: str) -> Optional[Set[str]]:
        """
        Look up the entity identifiers for a phrase

        Args:
            phrase: N-gram text (matched case-insensitively)

        Returns:
            Set of entity identifiers, or an empty set / None on a miss
        """
        pass

    @abstractmethod
    def add(self, surface_form: str, entity: str):
        """
        Add one (surface form, entity) pair

        Args:
            surface_form: Alias text, normalized before it is stored
            entity: Entity identifier, stored as-is
        """
        pass

    def commit(self):
        """Make pending additions visible to get() (no-op for in-memory backends)"""
        pass

    def close(self):
        """Release resources held by the dictionary"""
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False
