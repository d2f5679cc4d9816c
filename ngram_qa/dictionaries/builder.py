"""Populate dictionaries from import sources"""

import logging
from typing import Iterable, Tuple

from ..core.base_dictionary import BaseDictionary
from ..core.errors import ImportSourceError
from .hash_map_dictionary import HashMapDictionary

logger = logging.getLogger(__name__)


class DictionaryBuilder:
    """Fill a dictionary with the (entity, surface_form) pairs of a source"""

    @staticmethod
    def build(source: Iterable[Tuple[str, str]]) -> HashMapDictionary:
        """
        Build a new exact dictionary from a source

        Args:
            source: Iterable of (entity, surface_form) pairs

        Returns:
            HashMapDictionary holding every pair read before the source ended
            (or failed)
        """
        dictionary = HashMapDictionary()
        DictionaryBuilder.add_all(dictionary, source)
        return dictionary

    @staticmethod
    def add_all(dictionary: BaseDictionary, source: Iterable[Tuple[str, str]]) -> int:
        """
        Add every pair of a source to an existing dictionary

        Surface forms are normalized by the dictionary and identifiers are
        unioned into the existing set for the key, so importing a pair twice
        changes nothing. A read failure or a malformed pair stops the
        import; everything added before it stays in the dictionary.

        Args:
            dictionary: Dictionary to extend
            source: Iterable of (entity, surface_form) pairs

        Returns:
            Number of pairs read from the source
        """
        count = 0
        try:
            for entity, surface_form in source:
                dictionary.add(surface_form, entity)
                count += 1
        except (OSError, UnicodeDecodeError, ValueError, ImportSourceError) as e:
            logger.error("Import from %r stopped after %d pairs: %s", source, count, e)
        finally:
            dictionary.commit()

        logger.debug("Imported %d surface form pairs", count)
        return count
