"""
Gemini AI service for quiz generation
The model output is untrusted: it is cleaned here and validated by the caller
"""
import google.generativeai as genai
from app.config import settings
from app.schemas.quiz import QUESTION_COUNT, ANSWERS_PER_QUESTION
import json
import logging
import re
import secrets
from typing import Any, Dict

logger = logging.getLogger(__name__)

# Configure Gemini API
genai.configure(api_key=settings.GEMINI_API_KEY)

_HTML_TAG = re.compile(r"<[^>]*>")
_DECORATION = re.compile(r"^[_*]+|[_*]+$")
_LEADING_DOTS = re.compile(r"^\s*\.+\s*")

# Normalized key (lowercase letters only) -> canonical field name
_QUESTION_KEYS = {
    "question": "question",
    "text": "question",
    "prompt": "question",
    "answers": "answers",
    "options": "answers",
    "choices": "answers",
    "correctindex": "correct_index",
    "correctanswer": "correct_index",
    "correctanswerindex": "correct_index",
    "correct": "correct_index",
    "rationale": "rationale",
    "explanation": "rationale",
    "justification": "rationale",
}


def _normalize_key(key: str) -> str:
    return re.sub(r"[^a-z]", "", _HTML_TAG.sub("", key).lower())


def _clean_string(value: str) -> str:
    return _DECORATION.sub("", value.strip()).strip()


class GeminiService:
    """Service for Gemini quiz generation"""
    
    # (128k context tokens - 10k reserved) * ~4 characters per token
    MAX_SOURCE_CHARS = (128_000 - 10_000) * 4
    
    def __init__(self):
        self.model = genai.GenerativeModel(
            settings.GEMINI_MODEL,
            generation_config={
                "temperature": 0.5,
                "response_mime_type": "application/json",
            },
        )
    
    async def generate_quiz(self, source_text: str) -> Dict[str, Any]:
        """
        Generate a 10-question multiple-choice quiz from material text
        
        Args:
            source_text: Transcript or document text
            
        Returns:
            Cleaned quiz dictionary {"questions": [...]}, not yet validated
            
        Raises:
            ValueError: empty/oversized text or unparseable response
        """
        if not source_text or not source_text.strip():
            raise ValueError("Source text is empty")
        
        if len(source_text) > self.MAX_SOURCE_CHARS:
            raise ValueError(
                f"Source text too long ({len(source_text)} chars, maximum {self.MAX_SOURCE_CHARS})"
            )
        
        # Random seed steers the model towards different parts of the text on each call
        seed = secrets.token_hex(4)
        prompt = self._create_quiz_prompt(source_text, seed)
        
        try:
            response = await self.model.generate_content_async(
                prompt,
                request_options={"timeout": settings.QUIZ_GENERATION_TIMEOUT},
            )
        except Exception as e:
            logger.error(f"Gemini quiz generation call failed: {str(e)}")
            raise
        
        return self._parse_quiz_response(response.text)
    
    def _create_quiz_prompt(self, source_text: str, seed: str) -> str:
        """Create structured prompt for quiz generation"""
        
        return f"""
You are an expert educator writing a quiz that checks whether a student understood the material below.

REQUIREMENTS:
1. Generate EXACTLY {QUESTION_COUNT} multiple-choice questions
2. Each question has EXACTLY {ANSWERS_PER_QUESTION} answers, only one of them correct
3. Add a 2-3 sentence rationale explaining the correct answer
4. Questions must test UNDERSTANDING of the material, not trivia about how it was made

RANDOM ID: {seed} - use it to pick varied topics from the text.

Return ONLY valid JSON in this exact format (no markdown, no preamble):

{{
  "questions": [
    {{
      "question": "Question text?",
      "answers": ["First answer", "Second answer", "Third answer", "Fourth answer"],
      "correct_index": 0,
      "rationale": "Why this answer is correct"
    }}
  ]
}}

Plain keys and plain text only: no underscores, asterisks or HTML around keys or values, no leading dots in answers.

SOURCE TEXT:
\"\"\"
{source_text}
\"\"\"
"""
    
    def _parse_quiz_response(self, response_text: str) -> Dict[str, Any]:
        """Parse Gemini's quiz response into the canonical quiz shape"""
        cleaned = (response_text or "").strip()
        
        # Remove markdown code blocks
        if cleaned.startswith("```json"):
            cleaned = cleaned[7:].strip()
        elif cleaned.startswith("```"):
            cleaned = cleaned[3:].strip()
        if cleaned.endswith("```"):
            cleaned = cleaned[:-3].strip()
        
        first_brace = cleaned.find("{")
        last_brace = cleaned.rfind("}")
        if first_brace != -1 and last_brace > first_brace:
            cleaned = cleaned[first_brace:last_brace + 1]
        
        try:
            data = json.loads(cleaned)
        except json.JSONDecodeError as e:
            logger.error(f"Failed to parse quiz JSON: {str(e)}")
            logger.error(f"Response text: {cleaned[:500]}")
            raise ValueError(f"Quiz response is not valid JSON: {str(e)}") from e
        
        if not isinstance(data, dict):
            raise ValueError("Quiz response is not a JSON object")
        
        questions = None
        for key, value in data.items():
            if _normalize_key(key) in ("questions", "quiz"):
                questions = value
                break
        
        if not isinstance(questions, list):
            logger.error(f"Quiz response has no question list, keys: {list(data.keys())}")
            raise ValueError("Quiz response has no question list")
        
        return {"questions": [self._normalize_question(q) for q in questions]}
    
    def _normalize_question(self, raw: Any) -> Any:
        """Map key spellings to canonical names and strip markdown decoration"""
        if not isinstance(raw, dict):
            return raw
        
        question: Dict[str, Any] = {}
        for key, value in raw.items():
            canonical = _QUESTION_KEYS.get(_normalize_key(key))
            if canonical is None or canonical in question:
                continue
            question[canonical] = value
        
        if isinstance(question.get("question"), str):
            question["question"] = _clean_string(question["question"])
        
        answers = question.get("answers")
        if isinstance(answers, list):
            question["answers"] = [
                _LEADING_DOTS.sub("", _clean_string(str(answer))) if answer is not None else ""
                for answer in answers
            ]
        
        correct = question.get("correct_index")
        if isinstance(correct, str):
            correct = correct.strip()
            if len(correct) == 1 and correct.upper() in "ABCD":
                # Convert letter to index
                question["correct_index"] = ord(correct.upper()) - ord("A")
            elif correct.isdigit():
                question["correct_index"] = int(correct)
        elif isinstance(correct, float) and correct.is_integer():
            # JSON numbers such as 2.0
            question["correct_index"] = int(correct)
        
        rationale = question.get("rationale")
        if rationale is not None and not isinstance(rationale, str):
            question["rationale"] = str(rationale)
        elif isinstance(rationale, str):
            question["rationale"] = _clean_string(rationale)
        
        return question


# Global instance
gemini_service = GeminiService()
