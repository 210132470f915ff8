"""
Question Sanitizer
Decodes the HTML character references Open Trivia DB puts in its text
"""
import re
import logging
from typing import Any, Dict

from quizi.models.quiz_sessions import TriviaQuestion

logger = logging.getLogger(__name__)

ENTITY_PATTERN = re.compile(r"&(#[xX]?[0-9a-fA-F]+|[a-zA-Z]+);")

NAMED_ENTITIES = {
    "quot": '"',
    "amp": "&",
    "apos": "'",
    "lt": "<",
    "gt": ">",
    "nbsp": " ",
}

MAX_CODE_POINT = 0x10FFFF
SURROGATE_MIN, SURROGATE_MAX = 0xD800, 0xDFFF


def _replace_entity(match: "re.Match[str]") -> str:
    entity = match.group(1)

    if entity[0] == "#":
        is_hex = entity[1:2] in ("x", "X")
        digits = entity[2:] if is_hex else entity[1:]
        try:
            code = int(digits, 16 if is_hex else 10)
        except ValueError:
            return match.group(0)
        if code > MAX_CODE_POINT or SURROGATE_MIN <= code <= SURROGATE_MAX:
            return match.group(0)
        return chr(code)

    return NAMED_ENTITIES.get(entity, match.group(0))


def decode_html_entities(text: Any) -> Any:
    """
    Decode numeric (&#39; &#x27;) and a small set of named references

    Unknown references are left as-is. Non-string or empty input is returned
    unchanged.
    """
    if not text or not isinstance(text, str):
        return text
    return ENTITY_PATTERN.sub(_replace_entity, text)


def sanitize_question(raw: Dict[str, Any]) -> TriviaQuestion:
    """
    Build a decoded TriviaQuestion from a raw provider record

    Decodes category, question, correct_answer and every incorrect answer.
    type and difficulty are stored exactly as supplied.

    Raises:
        pydantic.ValidationError: If question or correct_answer is missing
    """
    incorrect = raw.get("incorrect_answers")
    if isinstance(incorrect, list):
        incorrect = [decode_html_entities(a) for a in incorrect]

    data = {
        "question": decode_html_entities(raw.get("question")),
        "correct_answer": decode_html_entities(raw.get("correct_answer")),
        "incorrect_answers": incorrect,
    }
    for key in ("category", "type", "difficulty"):
        value = raw.get(key)
        if isinstance(value, str):
            data[key] = decode_html_entities(value) if key == "category" else value

    return TriviaQuestion(**data)
