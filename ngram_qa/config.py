"""Configuration for n-gram QA system"""

import os
from pathlib import Path


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    return int(value) if value else default


class Config:
    # Base paths
    BASE_DIR = Path(__file__).parent.parent
    DATA_DIR = Path(os.getenv("NGRAM_QA_DATA_DIR", BASE_DIR / "data"))
    RESULTS_DIR = BASE_DIR / "results"

    # Dictionary sources
    SURFACE_FORMS_PATH = os.getenv("NGRAM_QA_SURFACE_FORMS", str(DATA_DIR / "en_surface_forms.tsv"))
    INDEX_PATH = os.getenv("NGRAM_QA_INDEX_PATH", str(DATA_DIR / "index" / "surface_forms.sqlite"))

    # Knowledge base
    KB_TRIPLES_PATH = os.getenv("NGRAM_QA_KB_TRIPLES", str(DATA_DIR / "kb.txt"))
    GRAPH_PATH = os.getenv("NGRAM_QA_GRAPH_PATH", str(DATA_DIR / "graph.pkl"))

    # QA dataset (question[TAB]answer1|answer2)
    QA_DATASET_PATH = os.getenv("NGRAM_QA_DATASET", str(DATA_DIR / "qa_test.txt"))

    # Dictionary backend: "hashmap" (exact) or "fuzzy" (approximate index)
    DICTIONARY_BACKEND = os.getenv("NGRAM_QA_DICTIONARY", "hashmap")

    # Approximate matching
    FUZZY_MAX_EDITS = _env_int("NGRAM_QA_FUZZY_MAX_EDITS", 1)
    FUZZY_MAX_RESULTS = _env_int("NGRAM_QA_FUZZY_MAX_RESULTS", 100)  # hits read from the index per query
    STOP_WORDS = frozenset(["the", "of", "on", "in", "for", "at", "to"])

    # Candidate graph expansion bounds
    MAX_EXPANSION_DEPTH = _env_int("NGRAM_QA_MAX_DEPTH", 4)
    MAX_GRAPH_NODES = _env_int("NGRAM_QA_MAX_NODES", 5000)

    # ThreadPoolExecutor workers for dictionary and relation lookups (1 = sequential)
    MAX_WORKERS = _env_int("NGRAM_QA_MAX_WORKERS", 1)

    # Remote knowledge base
    SPARQL_ENDPOINT = os.getenv("NGRAM_QA_SPARQL_ENDPOINT", "https://dbpedia.org/sparql")
    SPARQL_TIMEOUT_SECONDS = _env_int("NGRAM_QA_SPARQL_TIMEOUT", 30)
    SPARQL_RESULT_LIMIT = _env_int("NGRAM_QA_SPARQL_LIMIT", 1000)
    RELATION_PREFIXES = (
        "http://dbpedia.org/ontology/",
        "http://dbpedia.org/property/",
    )

    # Logging
    LOG_LEVEL = os.getenv("NGRAM_QA_LOG_LEVEL", "INFO")
