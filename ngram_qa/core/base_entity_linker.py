"""Base class for entity linking"""

from abc import ABC, abstractmethod
from typing import List, Sequence, Union

from ..entity_linkers.ngram_segmenter import NGramMatch


class BaseEntityLinker(ABC):
    """Abstract base class for entity linking"""

    @abstractmethod
    def extract_and_link(self, question: Union[str, Sequence[str]]) -> List[NGramMatch]:
        """
        Find the question spans that name known entities or relations

        Args:
            question: Question text or its tokens

        Returns:
            List of n-gram matches with their candidate identifiers
        """
        pass
