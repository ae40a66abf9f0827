"""
Domain errors raised by the quiz and material services.

Each error knows its API error code and HTTP status; the handler in
app.main turns them into JSON responses.
"""
from datetime import datetime
from typing import Any, Dict, Optional


class QuizServiceError(Exception):
    """Base class for errors surfaced to the caller"""

    error_code = "quiz_service_error"
    status_code = 400

    def extra(self) -> Dict[str, Any]:
        return {}


class MaterialNotFound(QuizServiceError):
    """Material id does not resolve"""

    error_code = "material_not_found"
    status_code = 404

    def __init__(self, material_id):
        self.material_id = material_id
        super().__init__(f"Material {material_id} not found")


class CooldownActive(QuizServiceError):
    """A failed attempt happened less than the cooldown window ago"""

    error_code = "cooldown_active"
    status_code = 429

    def __init__(self, remaining_seconds: int, last_attempt: Optional[datetime] = None):
        self.remaining_seconds = remaining_seconds
        self.last_attempt = last_attempt
        super().__init__(f"You must wait {remaining_seconds}s before the next attempt")

    def extra(self) -> Dict[str, Any]:
        return {
            "remaining_seconds": self.remaining_seconds,
            "last_attempt": self.last_attempt.isoformat() if self.last_attempt else None,
        }


class QuizGenerationFailed(QuizServiceError):
    """Generator errored, timed out or returned a malformed quiz"""

    error_code = "quiz_generation_failed"
    status_code = 502

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__("Could not generate the quiz. Please try again.")


class AnswerCountMismatch(QuizServiceError):
    error_code = "answer_count_mismatch"
    status_code = 400

    def __init__(self, expected: int, actual: int):
        self.expected = expected
        self.actual = actual
        super().__init__(f"Expected {expected} answers, got {actual}")

    def extra(self) -> Dict[str, Any]:
        return {"expected": self.expected, "actual": self.actual}


class AttemptStorageError(QuizServiceError):
    """The attempt could not be durably recorded; the result is not final"""

    error_code = "attempt_not_saved"
    status_code = 503

    def __init__(self, material_id):
        self.material_id = material_id
        super().__init__("Could not save the quiz result. Please try again.")


class InvalidMaterialContent(QuizServiceError):
    error_code = "invalid_material"
    status_code = 400

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(reason)
