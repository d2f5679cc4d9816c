"""Question data structure"""

from dataclasses import dataclass, field
from typing import List, Optional

from ..utils.text import tokenize


@dataclass
class Question:
    """Represents a keyword question, optionally with its expected answers"""
    text: str
    ground_truth_answers: List[str] = field(default_factory=list)
    question_id: Optional[int] = None

    @classmethod
    def from_line(cls, line: str, question_id: int) -> 'Question':
        """
        Parse a line from a QA dataset

        Format: question[TAB]answer1|answer2|...
        Example: "birthplace bill gates wife\thttp://dbpedia.org/resource/Dallas"
        """
        parts = line.strip().split('\t')
        if len(parts) != 2 or not parts[0].strip():
            raise ValueError(f"Invalid line format: {line}")

        return cls(
            text=parts[0].strip(),
            ground_truth_answers=[a.strip() for a in parts[1].split('|') if a.strip()],
            question_id=question_id
        )

    @property
    def tokens(self) -> List[str]:
        return tokenize(self.text)

    def __repr__(self):
        return f"Question(id={self.question_id}, text='{self.text[:50]}')"
