"""Exact in-memory surface-form dictionary"""

from typing import Dict, ItemsView, Iterable, Optional, Set, Tuple

from ..core.base_dictionary import BaseDictionary
from ..utils.text import normalize_phrase


class HashMapDictionary(BaseDictionary):
    """
    Dictionary backed by a plain dict of normalized surface form -> identifiers

    Lookups must match a stored key exactly (after lower-casing), which makes
    this backend deterministic and the natural choice for tests.
    """

    def __init__(self, source: Optional[Iterable[Tuple[str, str]]] = None):
        """
        Initialize dictionary

        Args:
            source: Optional iterable of (entity, surface_form) pairs to import
        """
        self._entries: Dict[str, Set[str]] = {}
        if source is not None:
            self.put_all(source)

    def get(self, phrase: str) -> Optional[Set[str]]:
        """
        Return the identifiers for a phrase, or None if there is no such key
        """
        return self._entries.get(normalize_phrase(phrase))

    def add(self, surface_form: str, entity: str):
        key = normalize_phrase(surface_form)
        if not key:
            return
        self._entries.setdefault(key, set()).add(entity)

    def put_all(self, source: Iterable[Tuple[str, str]]) -> int:
        """Add every (entity, surface_form) pair of an import source"""
        from .builder import DictionaryBuilder
        return DictionaryBuilder.add_all(self, source)

    def entries(self) -> ItemsView[str, Set[str]]:
        """View of (surface form key, identifiers) pairs"""
        return self._entries.items()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, phrase: str) -> bool:
        return normalize_phrase(phrase) in self._entries
