from concurrent.futures import ThreadPoolExecutor

import pytest

from ngram_qa.core.errors import DictionaryClosedError
from ngram_qa.dictionaries import FuzzyIndexDictionary
from ngram_qa.entity_linkers.ngram_linker import NGramLinker
from ngram_qa.entity_linkers.ngram_segmenter import NGram, NGramSegmenter

from .conftest import DBO, DBR


class RecordingLookup:
    """Dictionary stand-in that remembers every looked-up phrase"""

    def __init__(self, entries):
        self.entries = entries
        self.calls = []

    def __call__(self, phrase):
        self.calls.append(phrase)
        return self.entries.get(phrase)


def test_spans_longest_first_left_to_right():
    tokens = ["a", "b", "c"]
    spans = [s.text for s in NGramSegmenter().spans(tokens)]
    assert spans == ["a b c", "a b", "b c", "a", "b", "c"]


def test_ngram_positions():
    ngram = NGram(1, 3, ("bill", "gates"))
    assert ngram.text == "bill gates"
    assert ngram.positions == frozenset({1, 2})
    assert len(ngram) == 2


def test_segment_consumes_matched_words():
    lookup = RecordingLookup({"bill gates": {"BG"}, "birthplace": {"BP"}, "wife": {"SP"}})
    matches = NGramSegmenter().segment(["birthplace", "bill", "gates", "wife"], lookup)

    assert [(m.ngram.text, set(m.candidates)) for m in matches] == [
        ("bill gates", {"BG"}),
        ("birthplace", {"BP"}),
        ("wife", {"SP"}),
    ]
    # Spans overlapping "bill gates" are not looked up after it matched
    assert lookup.calls == [
        "birthplace bill gates wife",
        "birthplace bill gates",
        "bill gates wife",
        "birthplace bill",
        "bill gates",
        "birthplace",
        "wife",
    ]


def test_leftmost_span_wins_within_a_length():
    lookup = RecordingLookup({"a b": {"AB"}, "b c": {"BC"}})
    matches = NGramSegmenter().segment(["a", "b", "c"], lookup)
    assert [m.ngram.text for m in matches] == ["a b"]


def test_no_backtracking_after_a_long_match():
    # Matching "new york" prevents "york city" even if that would cover more
    lookup = RecordingLookup({"new york": {"NY"}, "york city": {"YC"}, "new": {"N"}})
    matches = NGramSegmenter().segment(["new", "york", "city"], lookup)
    assert [m.ngram.text for m in matches] == ["new york"]


def test_empty_result_is_a_miss():
    lookup = RecordingLookup({"a": set(), "b": {"B"}})
    matches = NGramSegmenter().segment(["a", "b"], lookup)
    assert [m.ngram.text for m in matches] == ["b"]


def test_empty_tokens():
    lookup = RecordingLookup({})
    assert NGramSegmenter().segment([], lookup) == []
    assert lookup.calls == []


def test_parallel_segmentation_matches_sequential():
    entries = {"bill gates": {"BG"}, "gates wife": {"GW"}, "birthplace": {"BP"}, "wife": {"SP"}, "bill": {"B"}}
    tokens = ["birthplace", "bill", "gates", "wife"]

    sequential = NGramSegmenter().segment(tokens, RecordingLookup(entries))
    with ThreadPoolExecutor(max_workers=4) as executor:
        parallel = NGramSegmenter().segment(tokens, RecordingLookup(entries), executor=executor)

    assert parallel == sequential
    assert [m.ngram.text for m in parallel] == ["bill gates", "birthplace", "wife"]


def test_linker_tokenizes_and_links(dictionary):
    matches = NGramLinker(dictionary).extract_and_link("Birthplace Bill Gates' wife?")
    assert {m.ngram.text: set(m.candidates) for m in matches} == {
        "bill gates": {DBR + "Bill_Gates"},
        "birthplace": {DBO + "birthPlace"},
        "wife": {DBO + "spouse"},
    }


def test_linker_blank_question(dictionary):
    assert NGramLinker(dictionary).extract_and_link("  ?  ") == []


def test_linker_survives_failing_dictionary(caplog):
    class BrokenDictionary:
        def get(self, phrase):
            raise RuntimeError("index unavailable")

    assert NGramLinker(BrokenDictionary()).extract_and_link("bill gates") == []
    assert "Dictionary lookup failed" in caplog.text


def test_linker_closed_dictionary_raises():
    dictionary = FuzzyIndexDictionary([("E1", "bill gates")], index_path=":memory:")
    dictionary.close()

    with pytest.raises(DictionaryClosedError):
        NGramLinker(dictionary).extract_and_link("bill gates")
    with pytest.raises(DictionaryClosedError):
        NGramLinker(dictionary, max_workers=2).extract_and_link("bill gates")


def test_linker_parallel_workers(dictionary):
    sequential = NGramLinker(dictionary).extract_and_link("music by elton john current production minskoff theatre")
    parallel = NGramLinker(dictionary, max_workers=4).extract_and_link(
        "music by elton john current production minskoff theatre"
    )
    assert parallel == sequential
    assert [m.ngram.text for m in parallel] == ["music by", "elton john", "current production", "minskoff theatre"]
