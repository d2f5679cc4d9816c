"""Approximate surface-form dictionary on an SQLite term index"""

import logging
import math
import sqlite3
import threading
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Set, Tuple, Union

from rapidfuzz import fuzz, process
from rapidfuzz.distance import Levenshtein

from ..config import Config
from ..core.base_dictionary import BaseDictionary
from ..core.errors import DictionaryClosedError, DictionaryConstructionError
from ..utils.text import index_terms, normalize_phrase

logger = logging.getLogger(__name__)

_SCHEMA = """
    CREATE TABLE IF NOT EXISTS entries (
        id INTEGER PRIMARY KEY,
        key TEXT NOT NULL,
        uri TEXT NOT NULL,
        length INTEGER NOT NULL,
        UNIQUE (key, uri)
    );
    CREATE TABLE IF NOT EXISTS postings (
        term TEXT NOT NULL,
        entry_id INTEGER NOT NULL REFERENCES entries(id) ON DELETE CASCADE,
        position INTEGER NOT NULL
    );
    CREATE INDEX IF NOT EXISTS idx_postings_term ON postings(term);
"""

_QUERY_TERMS_TABLE = """
    CREATE TEMP TABLE IF NOT EXISTS query_terms (
        word_offset INTEGER NOT NULL,
        term TEXT NOT NULL,
        weight REAL NOT NULL
    )
"""

# Ordered, gap-free span: word i of the query must hit the entry at
# start + i. Per (entry, start, word) the best term weight counts; a start
# survives when all words hit; an entry keeps its best start.
_SPAN_QUERY = """
    SELECT e.key, e.uri, e.length, MAX(spans.score)
    FROM (
        SELECT entry_id, start, SUM(best) AS score, COUNT(*) AS matched
        FROM (
            SELECT p.entry_id, p.position - q.word_offset AS start, q.word_offset, MAX(q.weight) AS best
            FROM temp.query_terms q
            JOIN postings p ON p.term = q.term
            GROUP BY p.entry_id, start, q.word_offset
        )
        GROUP BY entry_id, start
        HAVING matched = ?
    ) AS spans
    JOIN entries e ON e.id = spans.entry_id
    GROUP BY e.id
"""


def term_similarity(word: str, term: str, distance: int) -> float:
    """
    Weight of a query word matched against an index term

    String similarity scaled down by the edit distance: an exact term scores
    1.0, every extra edit lowers the weight, and the weight is never negative.
    """
    return (fuzz.ratio(word, term) / 100.0) / (1 + distance)


class FuzzyIndexDictionary(BaseDictionary):
    """
    Approximate dictionary tolerant of spelling and inflection noise

    Every surface form is stored as an entry whose words are indexed with
    their positions. A phrase matches an entry when each of its words is
    within max_edits of an entry term and the matched terms appear in the
    entry in the same order with no gap between them.

    The SQLite connection is opened in __init__ and released by close();
    use the dictionary as a context manager to close it on all exit paths.
    """

    def __init__(
        self,
        source: Optional[Iterable[Tuple[str, str]]] = None,
        index_path: Union[str, Path] = Config.INDEX_PATH,
        max_edits: int = Config.FUZZY_MAX_EDITS,
        max_results: int = Config.FUZZY_MAX_RESULTS,
        stop_words: Iterable[str] = Config.STOP_WORDS
    ):
        """
        Open (and if needed populate) the index

        Args:
            source: Iterable of (entity, surface_form) pairs, imported only
                when the index file does not exist yet
            index_path: SQLite file holding the index (":memory:" for a
                throwaway index); its directory must exist
            max_edits: Maximum Levenshtein distance per word
            max_results: Maximum number of ranked hits read per query
            stop_words: Phrases answered with an empty set without searching

        Raises:
            DictionaryConstructionError: If the index cannot be opened
        """
        self.index_path = str(index_path)
        self.max_edits = max_edits
        self.max_results = max_results
        self.stop_words = frozenset(stop_words)
        self._lock = threading.RLock()
        self._vocabulary: List[str] = []
        self._conn: Optional[sqlite3.Connection] = None

        index_exists = self.index_path != ":memory:" and Path(self.index_path).exists()

        try:
            self._conn = sqlite3.connect(self.index_path, check_same_thread=False)
            self._conn.execute("PRAGMA foreign_keys = ON")
            self._conn.executescript(_SCHEMA)
            self._conn.commit()
            self._refresh_vocabulary()
        except sqlite3.Error as e:
            if self._conn is not None:
                self._conn.close()
                self._conn = None
            raise DictionaryConstructionError(f"Cannot open index at {self.index_path}: {e}") from e

        if source is not None and not index_exists:
            self.put_all(source)

        logger.debug("Loaded fuzzy dictionary from %s with %d entries", self.index_path, len(self))

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def get(self, phrase: str) -> Set[str]:
        """
        Return the identifiers of all entries matching the phrase

        Returns an empty set for stop words, for phrases without a match and
        when the index query fails.
        """
        if phrase.strip().lower() in self.stop_words:
            return set()

        words = index_terms(phrase)
        if not words:
            return set()

        with self._lock:
            conn = self._connection()
            try:
                hits = self._search(conn, words)
            except sqlite3.Error as e:
                logger.error("Index query failed for %r: %s", phrase, e)
                return set()

        # Keep only entries matched as a whole, not surface forms that merely contain the phrase
        return {uri for key, uri, _ in hits if len(index_terms(key)) == len(words)}

    def search(self, phrase: str) -> List[Tuple[str, str, float]]:
        """
        Ranked (key, uri, score) hits for a phrase, before the whole-key filter

        Useful for inspecting why a phrase resolved the way it did.
        """
        words = index_terms(phrase)
        if not words:
            return []
        with self._lock:
            return self._search(self._connection(), words)

    def _search(self, conn: sqlite3.Connection, words: List[str]) -> List[Tuple[str, str, float]]:
        # For each query word: matching vocabulary term -> weight
        expansions: List[Dict[str, float]] = []
        for word in words:
            matches = process.extract(
                word,
                self._vocabulary,
                scorer=Levenshtein.distance,
                score_cutoff=self.max_edits,
                limit=None
            )
            if not matches:
                return []
            expansions.append({
                term: term_similarity(word, term, int(distance))
                for term, distance, _ in matches
            })

        # Expanded terms go into a temp table so the number of terms and
        # postings never counts against SQLite's bound-variable limit
        was_in_transaction = conn.in_transaction
        conn.execute(_QUERY_TERMS_TABLE)
        conn.execute("DELETE FROM temp.query_terms")
        conn.executemany(
            "INSERT INTO temp.query_terms (word_offset, term, weight) VALUES (?, ?, ?)",
            [
                (offset, term, weight)
                for offset, weights in enumerate(expansions)
                for term, weight in weights.items()
            ]
        )
        try:
            rows = conn.execute(_SPAN_QUERY, (len(words),)).fetchall()
        finally:
            conn.execute("DELETE FROM temp.query_terms")
            # End only a transaction opened here; pending add() calls wait for commit()
            if not was_in_transaction:
                conn.commit()

        hits = [
            (key, uri, score / len(words) / math.sqrt(length))
            for key, uri, length, score in rows
        ]
        hits.sort(key=lambda hit: (-hit[2], hit[0], hit[1]))
        return hits[:self.max_results]

    # ------------------------------------------------------------------
    # Indexing
    # ------------------------------------------------------------------

    def add(self, surface_form: str, entity: str):
        key = normalize_phrase(surface_form)
        terms = index_terms(key)
        if not terms:
            return

        with self._lock:
            conn = self._connection()
            cursor = conn.execute(
                "INSERT OR IGNORE INTO entries (key, uri, length) VALUES (?, ?, ?)",
                (key, entity, len(terms))
            )
            if cursor.rowcount == 0:
                return  # pair already indexed
            conn.executemany(
                "INSERT INTO postings (term, entry_id, position) VALUES (?, ?, ?)",
                [(term, cursor.lastrowid, position) for position, term in enumerate(terms)]
            )

    def commit(self):
        """Commit pending additions and refresh the term vocabulary"""
        with self._lock:
            self._connection().commit()
            self._refresh_vocabulary()

    def put_all(self, source: Iterable[Tuple[str, str]]) -> int:
        """Index every (entity, surface_form) pair of an import source"""
        from .builder import DictionaryBuilder

        logger.debug("Starting indexing for %r", source)
        count = DictionaryBuilder.add_all(self, source)
        logger.debug("Number of entries added: %d, total in index: %d", count, len(self))
        return count

    def clear_index(self):
        """Delete all entries from the index"""
        with self._lock:
            conn = self._connection()
            conn.execute("DELETE FROM postings")
            conn.execute("DELETE FROM entries")
            conn.commit()
            self._refresh_vocabulary()

    def _refresh_vocabulary(self):
        rows = self._conn.execute("SELECT DISTINCT term FROM postings ORDER BY term").fetchall()
        self._vocabulary = [row[0] for row in rows]

    # ------------------------------------------------------------------
    # Resource handling
    # ------------------------------------------------------------------

    @property
    def closed(self) -> bool:
        return self._conn is None

    def _connection(self) -> sqlite3.Connection:
        if self._conn is None:
            raise DictionaryClosedError(f"Dictionary at {self.index_path} is closed")
        return self._conn

    def close(self):
        """Close the index; later calls are no-ops"""
        with self._lock:
            if self._conn is None:
                return
            try:
                self._conn.commit()
                self._conn.close()
            except sqlite3.Error as e:
                logger.error("Error while closing index %s: %s", self.index_path, e)
            finally:
                self._conn = None
                self._vocabulary = []

    def __len__(self) -> int:
        with self._lock:
            return self._connection().execute("SELECT COUNT(*) FROM entries").fetchone()[0]

    def __repr__(self):
        state = "closed" if self.closed else "open"
        return f"FuzzyIndexDictionary(index_path='{self.index_path}', {state})"
