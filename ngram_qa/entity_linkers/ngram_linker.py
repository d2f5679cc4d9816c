"""Dictionary-based n-gram entity linker"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Sequence, Set, Union

from ..config import Config
from ..core.base_dictionary import BaseDictionary
from ..core.base_entity_linker import BaseEntityLinker
from ..core.errors import DictionaryClosedError
from ..utils.text import tokenize
from .ngram_segmenter import NGramMatch, NGramSegmenter

logger = logging.getLogger(__name__)


class NGramLinker(BaseEntityLinker):
    """
    Link question n-grams to dictionary entries, longest span first

    Keyword questions have no markup around their entities ("birthplace bill
    gates wife"), so every span is a potential mention; the segmenter decides
    which spans get looked up.
    """

    def __init__(
        self,
        dictionary: BaseDictionary,
        segmenter: Optional[NGramSegmenter] = None,
        max_workers: int = Config.MAX_WORKERS
    ):
        """
        Initialize n-gram linker

        Args:
            dictionary: Surface-form dictionary (exact or approximate)
            segmenter: Span generator (default: NGramSegmenter)
            max_workers: Parallel dictionary lookups per span length (1 = sequential)
        """
        self.dictionary = dictionary
        self.segmenter = segmenter or NGramSegmenter()
        self.max_workers = max_workers

    def extract_and_link(self, question: Union[str, Sequence[str]]) -> List[NGramMatch]:
        """
        Match the question's n-grams against the dictionary

        Args:
            question: Question text (e.g., "birthplace bill gates wife") or tokens

        Returns:
            Accepted matches; empty for a blank question
        """
        tokens = tokenize(question) if isinstance(question, str) else list(question)
        if not tokens:
            return []

        if self.max_workers > 1:
            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                matches = self.segmenter.segment(tokens, self._lookup, executor=executor)
        else:
            matches = self.segmenter.segment(tokens, self._lookup)

        logger.debug("Linked %s -> %s", tokens, [m.ngram.text for m in matches])
        return matches

    def _lookup(self, phrase: str) -> Set[str]:
        try:
            return set(self.dictionary.get(phrase) or ())
        except DictionaryClosedError:
            raise
        except Exception as e:
            logger.warning("Dictionary lookup failed for '%s': %s", phrase, e)
            return set()
