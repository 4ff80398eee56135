"""Tolerant extraction of JSON arrays from free-form model output.

The model is asked for a JSON array but frequently wraps it in prose or
markdown fences, or returns something that is not JSON at all. Parsing is
split into two pure stages so each can be exercised without the network:

* ``extract_json_array`` finds an array-shaped substring (or ``None``);
* ``parse_records`` decodes it, raising ``ParseFailed`` on invalid JSON.

``parse_quiz`` and ``parse_suggestions`` combine both stages for the two
prompts the backend sends.
"""
from __future__ import annotations

import json
import logging
import re
import secrets
from typing import Any, Dict, List, Optional

from greenquest.errors import UpstreamParseFailure

logger = logging.getLogger(__name__)

OPTION_COUNT = 4
OPTION_PLACEHOLDER = "None of the above"

_ARRAY_OF_OBJECTS = re.compile(r"\[\s*\{[\s\S]*\}\s*\]")


class ExtractionFailed(UpstreamParseFailure):
    code = "extraction_failed"
    default_message = "No JSON array found in model output"


class ParseFailed(UpstreamParseFailure):
    code = "parse_failed"
    default_message = "Failed to parse JSON from model output"


def extract_json_array(text: str) -> Optional[str]:
    if not text:
        return None
    match = _ARRAY_OF_OBJECTS.search(text)
    if match:
        return match.group(0)
    start = text.find("[")
    end = text.rfind("]") + 1
    if start != -1 and end > start:
        return text[start:end]
    return None


def parse_records(fragment: str, raw: Optional[str] = None) -> List[Any]:
    raw = fragment if raw is None else raw
    try:
        records = json.loads(fragment)
    except json.JSONDecodeError as exc:
        raise ParseFailed(f"Failed to parse JSON from model output: {exc.msg}", raw=raw) from exc
    if not isinstance(records, list):
        raise ParseFailed("Model output is not a JSON array", raw=raw)
    return records


def _is_option_index(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and 0 <= value < OPTION_COUNT


def _same_text(left: Any, right: Any) -> bool:
    return isinstance(left, str) and isinstance(right, str) and left.strip() == right.strip()


def normalize_question(item: Dict[str, Any], index: int) -> Dict[str, Any]:
    question = dict(item)
    if not question.get("id"):
        question["id"] = f"q{index}_{secrets.token_hex(2)}"

    options = question.get("options")
    if not isinstance(options, list):
        incorrect = question.get("incorrect")
        incorrect = list(incorrect) if isinstance(incorrect, list) else []
        options = (incorrect[:3] + [question.get("correct") or ""])[:OPTION_COUNT]
    else:
        options = list(options)

    if not _is_option_index(question.get("answerIndex")):
        correct = question.get("correct")
        candidates = enumerate(options[:OPTION_COUNT])
        position = next((i for i, option in candidates if _same_text(option, correct)), -1)
        question["answerIndex"] = position if position >= 0 else 0

    while len(options) < OPTION_COUNT:
        options.append(OPTION_PLACEHOLDER)
    question["options"] = options[:OPTION_COUNT]
    return question


def parse_quiz(text: str) -> List[Dict[str, Any]]:
    fragment = extract_json_array(text)
    if fragment is None:
        logger.warning("No quiz array in model output: %.200s", text)
        raise ExtractionFailed(raw=text)
    try:
        records = parse_records(fragment, raw=text)
    except ParseFailed:
        logger.error("Quiz parse error, raw: %.500s", text)
        raise
    if not all(isinstance(record, dict) for record in records):
        raise ParseFailed("Quiz entries must be JSON objects", raw=text)
    return [normalize_question(record, index) for index, record in enumerate(records)]


def parse_suggestions(text: str) -> List[Any]:
    """DIY ideas are passed through as-is; failures become one diagnostic entry."""
    fragment = extract_json_array(text)
    if fragment is None:
        logger.warning("No suggestion array in model output: %.200s", text)
        return [{"error": "Could not parse suggestions", "raw": text}]
    try:
        return parse_records(fragment, raw=text)
    except ParseFailed:
        logger.warning("Suggestion parse error, raw: %.500s", text)
        return [{"error": "JSON parse error", "raw": text}]
