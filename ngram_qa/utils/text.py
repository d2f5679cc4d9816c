"""Text normalization shared by dictionaries and the segmenter"""

import re
from typing import List

_STRIP_CHARS = "?!.,;:\"'"
_TERM_PATTERN = re.compile(r"\w+")


def normalize_phrase(text: str) -> str:
    """Lower-case a surface form and collapse internal whitespace"""
    return " ".join(text.lower().split())


def tokenize(question: str) -> List[str]:
    """
    Split a question into lower-cased words

    Surrounding punctuation is stripped from each word and empty words are
    dropped, so a blank question yields an empty list.

    Example:
        >>> tokenize("Birthplace Bill Gates' wife?")
        ['birthplace', 'bill', 'gates', 'wife']
    """
    tokens = []
    for word in question.lower().split():
        word = word.strip(_STRIP_CHARS)
        if word:
            tokens.append(word)
    return tokens


def index_terms(text: str) -> List[str]:
    """Terms stored in (and queried against) the approximate index"""
    return _TERM_PATTERN.findall(text.lower())
