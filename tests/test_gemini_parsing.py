import asyncio
import json

import pytest

from app.schemas.quiz import Quiz
from app.services.gemini_service import GeminiService
from tests.helpers import make_quiz


@pytest.fixture
def service() -> GeminiService:
    return GeminiService()


def test_plain_json_is_parsed(service) -> None:
    raw = json.dumps(make_quiz())
    parsed = service._parse_quiz_response(raw)  # noqa: SLF001

    assert Quiz.model_validate(parsed).questions[1].correct_index == 1


def test_markdown_fences_and_preamble_are_stripped(service) -> None:
    raw = "```json\nHere is your quiz:\n" + json.dumps(make_quiz()) + "\n```"
    parsed = service._parse_quiz_response(raw)  # noqa: SLF001

    assert len(parsed["questions"]) == 10


def test_key_variants_and_decoration_are_normalized(service) -> None:
    raw = json.dumps({
        "_Questions_": [
            {
                "**question**": "**What is chlorophyll?**",
                "options": [".A pigment", "_A sugar_", "A gas", 42],
                "correct_answer": "A",
                "explanation": "It absorbs light.",
            }
        ]
    })
    parsed = service._parse_quiz_response(raw)  # noqa: SLF001

    question = parsed["questions"][0]
    assert question == {
        "question": "What is chlorophyll?",
        "answers": ["A pigment", "A sugar", "A gas", "42"],
        "correct_index": 0,
        "rationale": "It absorbs light.",
    }


def test_digit_string_index_is_converted(service) -> None:
    raw = json.dumps({"questions": [{"question": "Q?", "answers": ["a", "b", "c", "d"], "correctIndex": "2"}]})
    parsed = service._parse_quiz_response(raw)  # noqa: SLF001

    assert parsed["questions"][0]["correct_index"] == 2


def test_integral_float_index_is_converted(service) -> None:
    raw = '{"questions": [{"question": "Q?", "answers": ["a", "b", "c", "d"], "correct_index": 2.0}]}'
    parsed = service._parse_quiz_response(raw)  # noqa: SLF001

    correct = parsed["questions"][0]["correct_index"]
    assert correct == 2
    assert type(correct) is int


def test_fractional_float_index_is_left_for_validation(service) -> None:
    raw = '{"questions": [{"question": "Q?", "answers": ["a", "b", "c", "d"], "correct_index": 1.5}]}'
    parsed = service._parse_quiz_response(raw)  # noqa: SLF001

    assert parsed["questions"][0]["correct_index"] == 1.5


def test_invalid_json_raises(service) -> None:
    with pytest.raises(ValueError):
        service._parse_quiz_response("I could not create a quiz, sorry.")  # noqa: SLF001


def test_missing_question_list_raises(service) -> None:
    with pytest.raises(ValueError):
        service._parse_quiz_response(json.dumps({"title": "Quiz"}))  # noqa: SLF001


def test_empty_source_text_rejected_before_calling_model(service) -> None:
    with pytest.raises(ValueError):
        asyncio.run(service.generate_quiz("   "))


def test_oversized_source_text_rejected(service) -> None:
    with pytest.raises(ValueError):
        asyncio.run(service.generate_quiz("x" * (GeminiService.MAX_SOURCE_CHARS + 1)))


def test_prompt_embeds_text_and_seed(service) -> None:
    prompt = service._create_quiz_prompt("Plants convert light.", "abcd1234")  # noqa: SLF001

    assert "Plants convert light." in prompt
    assert "abcd1234" in prompt
    assert "EXACTLY 10" in prompt
