"""Longest-match-first n-gram segmentation"""

from concurrent.futures import Executor
from dataclasses import dataclass
from typing import Callable, FrozenSet, Iterable, Iterator, List, Optional, Sequence, Tuple


@dataclass(frozen=True)
class NGram:
    """Contiguous word span of a question, end exclusive"""
    start: int
    end: int
    words: Tuple[str, ...]

    @property
    def text(self) -> str:
        return " ".join(self.words)

    @property
    def positions(self) -> FrozenSet[int]:
        """Token indices covered by this span"""
        return frozenset(range(self.start, self.end))

    def __len__(self) -> int:
        return self.end - self.start

    def __repr__(self):
        return f"NGram('{self.text}', {self.start}:{self.end})"


@dataclass(frozen=True)
class NGramMatch:
    """An n-gram together with the identifiers the dictionary returned for it"""
    ngram: NGram
    candidates: FrozenSet[str]


class NGramSegmenter:
    """
    Decompose a tokenized question into n-grams, longest first

    For "birthplace bill gates wife" the spans are offered as:
        length 4: "birthplace bill gates wife"
        length 3: "birthplace bill gates", "bill gates wife"
        length 2: "birthplace bill", "bill gates", "gates wife"
        length 1: "birthplace", "bill", "gates", "wife"
    """

    def spans(self, tokens: Sequence[str]) -> Iterator[NGram]:
        """All contiguous spans, longest first and left to right within a length"""
        for length in range(len(tokens), 0, -1):
            yield from self._spans_of_length(tokens, length)

    def _spans_of_length(self, tokens: Sequence[str], length: int) -> Iterator[NGram]:
        for start in range(len(tokens) - length + 1):
            yield NGram(start, start + length, tuple(tokens[start:start + length]))

    def segment(
        self,
        tokens: Sequence[str],
        lookup: Callable[[str], Optional[Iterable[str]]],
        executor: Optional[Executor] = None
    ) -> List[NGramMatch]:
        """
        Greedy maximal-munch matching of spans against a lookup function

        A span whose lookup returns a non-empty result consumes its words;
        spans overlapping consumed words are never looked up afterwards. Without
        an executor spans are looked up one at a time. With an executor the
        remaining spans of one length are looked up in parallel and consumption
        is applied left to right, which yields the same matches.

        Args:
            tokens: Question words
            lookup: Function from n-gram text to identifiers (None/empty = miss)
            executor: Optional executor for parallel lookups

        Returns:
            Matches in the order they were accepted
        """
        consumed = [False] * len(tokens)
        matches = []

        for length in range(len(tokens), 0, -1):
            level = [
                ngram for ngram in self._spans_of_length(tokens, length)
                if not any(consumed[ngram.start:ngram.end])
            ]
            if not level:
                continue

            prefetched = None
            if executor is not None and len(level) > 1:
                prefetched = list(executor.map(lookup, [ngram.text for ngram in level]))

            for i, ngram in enumerate(level):
                if any(consumed[ngram.start:ngram.end]):
                    continue
                candidates = prefetched[i] if prefetched is not None else lookup(ngram.text)
                if candidates:
                    matches.append(NGramMatch(ngram, frozenset(candidates)))
                    for position in range(ngram.start, ngram.end):
                        consumed[position] = True

        return matches
