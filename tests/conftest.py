from pathlib import Path

import pytest

from ngram_qa.answer_selector import AnswerSelector
from ngram_qa.dictionaries import DictionaryBuilder, TsvImportSource
from ngram_qa.knowledge_base import GraphRelationLookup
from ngram_qa.utils.loader import load_kb_triples

RESOURCES = Path(__file__).parent / "resources"
TSV_FILE = RESOURCES / "en_surface_forms_small.tsv"
KB_FILE = RESOURCES / "kb_small.txt"
QA_FILE = RESOURCES / "qa_small.txt"

DBR = "http://dbpedia.org/resource/"
DBO = "http://dbpedia.org/ontology/"


@pytest.fixture
def dictionary():
    return DictionaryBuilder.build(TsvImportSource(TSV_FILE))


@pytest.fixture
def relation_lookup():
    return GraphRelationLookup(load_kb_triples(KB_FILE))


@pytest.fixture
def selector(dictionary, relation_lookup):
    return AnswerSelector(dictionary, relation_lookup)


class StubRelationLookup:
    """In-memory relation lookup for graph tests: {entity: {(relation, neighbor)}}"""

    def __init__(self, neighbors, relations=()):
        self._neighbors = neighbors
        self._relations = set(relations)
        self.calls = []

    def neighbors(self, entity):
        self.calls.append(entity)
        return set(self._neighbors.get(entity, ()))

    def is_relation(self, identifier):
        return identifier in self._relations

    def safe_neighbors(self, entity):
        return self.neighbors(entity)
