"""Answer selection over the per-question candidate graph"""

import logging
import time
from typing import List, Optional, Set, Tuple, Union

from .config import Config
from .core.answer_result import AnswerResult
from .core.base_dictionary import BaseDictionary
from .core.base_relation_lookup import BaseRelationLookup
from .core.base_search import BaseSearch
from .core.candidate_graph import CandidateGraph, Node
from .core.question import Question
from .entity_linkers.ngram_linker import NGramLinker
from .entity_linkers.ngram_segmenter import NGramMatch
from .search_algorithms.bounded_expansion import BoundedExpansion
from .utils.text import tokenize

logger = logging.getLogger(__name__)


class AnswerSelector:
    """
    Answer keyword questions from a dictionary and a knowledge base

    Pipeline per question:
    1. Tokenize; a blank question has no answer (None)
    2. Link n-grams to dictionary entries, longest first
    3. Put one node per candidate identifier into a fresh candidate graph
    4. Expand the graph through the knowledge base until the matched spans
       are connected (or a bound is hit)
    5. Return the best-explained entity node(s)

    Every call builds and owns its own graph, so one selector can answer
    questions from several threads at once as long as the dictionary and
    the relation lookup allow concurrent reads.
    """

    def __init__(
        self,
        dictionary: BaseDictionary,
        relation_lookup: BaseRelationLookup,
        search_algo: Optional[BaseSearch] = None,
        max_depth: int = Config.MAX_EXPANSION_DEPTH,
        max_nodes: Optional[int] = Config.MAX_GRAPH_NODES,
        max_workers: int = Config.MAX_WORKERS
    ):
        """
        Initialize answer selector

        Args:
            dictionary: Surface-form dictionary
            relation_lookup: Knowledge-base one-hop lookup
            search_algo: Expansion strategy (default: BoundedExpansion with
                the given bounds)
            max_depth: Maximum expansion rounds
            max_nodes: Maximum candidate graph size
            max_workers: Threads for dictionary and relation lookups
        """
        self.dictionary = dictionary
        self.relation_lookup = relation_lookup
        self.entity_linker = NGramLinker(dictionary, max_workers=max_workers)
        self.search_algo = search_algo or BoundedExpansion(
            relation_lookup,
            max_depth=max_depth,
            max_nodes=max_nodes,
            max_workers=max_workers
        )
        self.max_nodes = max_nodes

    def answer(self, question: str) -> Optional[Set[str]]:
        """
        Answer a question

        Args:
            question: Keyword question (e.g., "birthplace bill gates wife")

        Returns:
            None for an empty or whitespace-only question, otherwise the set
            of answer identifiers (empty if nothing could be resolved, e.g.
            for "?!")
        """
        if not question.split():
            return None
        graph, _ = self._build_graph(tokenize(question))
        return self.select(graph)

    def get_graph_for(self, question: str) -> CandidateGraph:
        """
        Build and return the expanded candidate graph of a question

        Meant for inspection and debugging; a blank question yields an
        empty graph.
        """
        graph, _ = self._build_graph(tokenize(question))
        return graph

    def run(self, question: Question) -> AnswerResult:
        """
        Answer a dataset question and collect metrics for evaluation

        Args:
            question: Question object with ground truth answers

        Returns:
            AnswerResult with predicted answers and graph metrics
        """
        start_time = time.time()

        if not question.text.split():
            return AnswerResult(
                question_id=question.question_id,
                question_text=question.text,
                predicted_answers=None,
                ground_truth_answers=question.ground_truth_answers,
                metadata={'error': 'empty_question'}
            )

        graph, matches = self._build_graph(question.tokens)
        answers = self.select(graph)
        stats = graph.stats

        return AnswerResult(
            question_id=question.question_id,
            question_text=question.text,
            predicted_answers=sorted(answers),
            ground_truth_answers=question.ground_truth_answers,
            graph_size=len(graph),
            nodes_expanded=stats.nodes_expanded,
            expansion_rounds=stats.rounds,
            connected=stats.connected,
            bound_hit=stats.bound_hit,
            search_time_ms=(time.time() - start_time) * 1000,
            linked_ngrams={m.ngram.text: sorted(m.candidates) for m in matches}
        )

    def _build_graph(self, tokens: List[str]) -> Tuple[CandidateGraph, List[NGramMatch]]:
        graph = CandidateGraph(self.relation_lookup, max_nodes=self.max_nodes)
        if not tokens:
            return graph, []

        matches = self.entity_linker.extract_and_link(tokens)
        for match in matches:
            for content in sorted(match.candidates):
                graph.add_node(
                    content,
                    explanation=len(match.ngram),
                    coverage=match.ngram.positions,
                    is_relation=self._is_relation(content)
                )

        if not matches:
            logger.debug("No dictionary match for %s", tokens)
            return graph, matches

        self.search_algo.expand(graph)
        return graph, matches

    def _is_relation(self, identifier: str) -> bool:
        try:
            return self.relation_lookup.is_relation(identifier)
        except Exception as e:
            logger.warning("Relation check failed for %s: %s", identifier, e)
            return False

    @staticmethod
    def select(graph: CandidateGraph) -> Set[str]:
        """
        Pick the answer from an expanded graph

        Candidates are entity nodes connected to every matched question span;
        if there are none (a bound stopped the expansion) all entity nodes
        compete. All nodes tied at the highest explanation are returned.
        """
        candidates: List[Node] = graph.connected_nodes() or graph.entity_nodes()
        if not candidates:
            return set()

        best = max(node.explanation for node in candidates)
        return {node.content for node in candidates if node.explanation == best}
