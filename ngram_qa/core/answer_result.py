"""Answer result data structure"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class AnswerResult:
    """Answer produced for one question, with graph metrics"""
    question_id: Optional[int]
    question_text: str
    predicted_answers: Optional[List[str]]  # None for a blank question
    ground_truth_answers: List[str]

    # Graph metrics
    graph_size: int = 0
    nodes_expanded: int = 0
    expansion_rounds: int = 0
    connected: bool = False
    bound_hit: bool = False
    search_time_ms: float = 0.0

    # Matched n-grams (text -> candidate identifiers)
    linked_ngrams: Dict[str, List[str]] = field(default_factory=dict)

    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def success(self) -> bool:
        return bool(self.predicted_answers)

    def _overlap(self) -> int:
        return len(set(self.predicted_answers or ()) & set(self.ground_truth_answers))

    @property
    def is_correct(self) -> bool:
        """Check if any predicted answer matches ground truth"""
        return self._overlap() > 0

    @property
    def precision(self) -> float:
        """|predicted ∩ ground_truth| / |predicted|"""
        predicted = set(self.predicted_answers or ())
        return self._overlap() / len(predicted) if predicted else 0.0

    @property
    def recall(self) -> float:
        """|predicted ∩ ground_truth| / |ground_truth|"""
        expected = set(self.ground_truth_answers)
        return self._overlap() / len(expected) if expected else 0.0

    @property
    def f1_score(self) -> float:
        p, r = self.precision, self.recall
        return 2 * p * r / (p + r) if p + r > 0 else 0.0

    @property
    def num_correct(self) -> int:
        """True positives"""
        return self._overlap()

    @property
    def num_incorrect(self) -> int:
        """False positives"""
        return len(set(self.predicted_answers or ()) - set(self.ground_truth_answers))

    @property
    def num_missed(self) -> int:
        """False negatives"""
        return len(set(self.ground_truth_answers) - set(self.predicted_answers or ()))

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization"""
        return {
            'question_id': self.question_id,
            'question_text': self.question_text,
            'predicted_answers': self.predicted_answers,
            'ground_truth_answers': self.ground_truth_answers,
            'is_correct': self.is_correct,
            'precision': self.precision,
            'recall': self.recall,
            'f1_score': self.f1_score,
            'graph_size': self.graph_size,
            'nodes_expanded': self.nodes_expanded,
            'expansion_rounds': self.expansion_rounds,
            'connected': self.connected,
            'bound_hit': self.bound_hit,
            'search_time_ms': self.search_time_ms,
            'success': self.success,
            'linked_ngrams': self.linked_ngrams,
            'metadata': self.metadata
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2)
