"""Surface-form dictionary backends"""

import logging
from pathlib import Path
from typing import Iterable, Optional, Tuple, Union

from ..config import Config
from ..core.base_dictionary import BaseDictionary
from .builder import DictionaryBuilder
from .fuzzy_index_dictionary import FuzzyIndexDictionary
from .hash_map_dictionary import HashMapDictionary
from .tsv_import import TsvImportSource, parse_tsv_lines

logger = logging.getLogger(__name__)

BACKENDS = ("hashmap", "fuzzy")


def create_dictionary(
    backend: str = Config.DICTIONARY_BACKEND,
    source: Optional[Iterable[Tuple[str, str]]] = None,
    index_path: Union[str, Path] = Config.INDEX_PATH,
    **kwargs
) -> BaseDictionary:
    """
    Create the dictionary backend selected by configuration

    Args:
        backend: "hashmap" (exact, in memory) or "fuzzy" (approximate index)
        source: Iterable of (entity, surface_form) pairs to import
        index_path: Index location for the fuzzy backend
        **kwargs: Extra FuzzyIndexDictionary options (max_edits, max_results, stop_words)

    Returns:
        Dictionary instance
    """
    logger.info("Creating %s dictionary", backend)
    if backend == "hashmap":
        return HashMapDictionary(source)
    if backend == "fuzzy":
        return FuzzyIndexDictionary(source, index_path=index_path, **kwargs)
    raise ValueError(f"Unknown dictionary backend '{backend}', expected one of {BACKENDS}")


__all__ = [
    'BACKENDS',
    'DictionaryBuilder',
    'FuzzyIndexDictionary',
    'HashMapDictionary',
    'TsvImportSource',
    'create_dictionary',
    'parse_tsv_lines',
]
