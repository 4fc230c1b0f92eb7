"""
Validation of quiz and question payloads.

Each ``clean_*`` function returns a dict of sanitized values ready to be
assigned to a model, or raises ``ValidationError`` with a readable message.
"""
from quizmaster.common.errors import ValidationError
from quizmaster.quiz.models import OPTION_COUNT
from quizmaster.security import InputValidator, sanitize_input


TITLE_MIN_LENGTH = 3
TITLE_MAX_LENGTH = 200
TIME_LIMIT_MIN = 1
TIME_LIMIT_MAX = 180
QUESTION_TEXT_MIN_LENGTH = 10


def _is_int(value) -> bool:
    # bool is a subclass of int; true/false must not pass as 1/0
    return isinstance(value, int) and not isinstance(value, bool)


def clean_title(value) -> str:
    if not isinstance(value, str):
        raise ValidationError("Title is required")
    title = sanitize_input(value)
    if not InputValidator.validate_length(title, TITLE_MIN_LENGTH, TITLE_MAX_LENGTH):
        raise ValidationError(
            f"Title must be between {TITLE_MIN_LENGTH} and {TITLE_MAX_LENGTH} characters"
        )
    return title


def clean_description(value):
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError("Description must be a string")
    return sanitize_input(value) or None


def clean_time_limit(value) -> int:
    if not _is_int(value):
        raise ValidationError("Time limit must be an integer number of minutes")
    if value < TIME_LIMIT_MIN:
        raise ValidationError(f"Time limit must be at least {TIME_LIMIT_MIN} minute")
    if value > TIME_LIMIT_MAX:
        raise ValidationError(f"Time limit must not exceed {TIME_LIMIT_MAX} minutes")
    return value


def clean_published(value) -> bool:
    if not isinstance(value, bool):
        raise ValidationError("published must be a boolean")
    return value


def clean_question(data, position: int) -> dict:
    """
    Validate one question draft.

    Args:
        data: The raw question object from the request
        position: Zero-based index in the submitted list, used for messages
            and as the default ``order``
    """
    label = f"Question {position + 1}"
    if not isinstance(data, dict):
        raise ValidationError(f"{label} must be an object")

    text = data.get("text")
    if not isinstance(text, str) or len(sanitize_input(text)) < QUESTION_TEXT_MIN_LENGTH:
        raise ValidationError(
            f"{label}: text must be at least {QUESTION_TEXT_MIN_LENGTH} characters"
        )

    options = data.get("options")
    if not isinstance(options, list) or len(options) != OPTION_COUNT:
        raise ValidationError(f"{label}: must have exactly {OPTION_COUNT} options")
    cleaned_options = []
    for option in options:
        if not isinstance(option, str) or not sanitize_input(option):
            raise ValidationError(f"{label}: options must be non-empty strings")
        cleaned_options.append(sanitize_input(option))

    correct_option = data.get("correct_option")
    if not _is_int(correct_option) or not 0 <= correct_option < OPTION_COUNT:
        raise ValidationError(
            f"{label}: correct_option must be an integer between 0 and {OPTION_COUNT - 1}"
        )

    explanation = data.get("explanation")
    if explanation is not None and not isinstance(explanation, str):
        raise ValidationError(f"{label}: explanation must be a string")

    order = data.get("order", position)
    if not _is_int(order) or order < 0:
        raise ValidationError(f"{label}: order must be a non-negative integer")

    return {
        "text": sanitize_input(text),
        "options": cleaned_options,
        "correct_option": correct_option,
        "explanation": sanitize_input(explanation) or None,
        "order": order,
    }


def clean_questions(value) -> list[dict]:
    if not isinstance(value, list) or not value:
        raise ValidationError("A quiz must have at least one question")
    return [clean_question(item, idx) for idx, item in enumerate(value)]


def clean_quiz_draft(data) -> dict:
    """Validate a full quiz draft for creation."""
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return {
        "title": clean_title(data.get("title")),
        "description": clean_description(data.get("description")),
        "time_limit": clean_time_limit(data.get("time_limit")),
        "published": clean_published(data.get("published", False)),
        "questions": clean_questions(data.get("questions")),
    }


def clean_quiz_patch(data) -> dict:
    """
    Validate a partial update. Only keys present in ``data`` are returned;
    ``questions`` present means the question set is replaced.
    """
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")

    cleaners = {
        "title": clean_title,
        "description": clean_description,
        "time_limit": clean_time_limit,
        "published": clean_published,
        "questions": clean_questions,
    }
    return {key: cleaner(data[key]) for key, cleaner in cleaners.items() if key in data}
