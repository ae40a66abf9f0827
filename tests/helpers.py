"""Shared builders for tests."""
from typing import Any, Dict, List, Optional

ADMIN_HEADERS = {"X-Admin-Secret": "test-admin-secret"}


def make_quiz(correct: Optional[List[int]] = None, prefix: str = "Question") -> Dict[str, Any]:
    """Build a valid 10-question quiz dict; ``correct`` sets each correct index."""
    correct = correct if correct is not None else [i % 4 for i in range(10)]
    return {
        "questions": [
            {
                "question": f"{prefix} {i + 1}?",
                "answers": [f"Answer {i + 1}{letter}" for letter in "ABCD"],
                "correct_index": index,
                "rationale": f"Because {index}",
            }
            for i, index in enumerate(correct)
        ]
    }


def words(count: int) -> str:
    return " ".join(f"word{i}" for i in range(count))


class FakeGenerator:
    """Stands in for the LLM generator; returns a canned quiz or raises."""

    def __init__(self, quiz: Any = None, error: Optional[Exception] = None) -> None:
        self.quiz = quiz if quiz is not None else make_quiz()
        self.error = error
        self.calls: List[str] = []

    async def generate_quiz(self, source_text: str) -> Any:
        self.calls.append(source_text)
        if self.error is not None:
            raise self.error
        return self.quiz

