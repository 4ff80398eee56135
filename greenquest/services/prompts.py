from __future__ import annotations

from typing import Any

MIN_QUIZ_QUESTIONS = 3
MAX_QUIZ_QUESTIONS = 20
DEFAULT_QUIZ_QUESTIONS = 5


def clamp_quiz_count(count: Any) -> int:
    if count is None or count == "" or isinstance(count, bool):
        n = DEFAULT_QUIZ_QUESTIONS
    else:
        try:
            n = int(count)
        except (TypeError, ValueError):
            n = DEFAULT_QUIZ_QUESTIONS
    return max(MIN_QUIZ_QUESTIONS, min(MAX_QUIZ_QUESTIONS, n))


def quiz_prompt(count: int) -> str:
    return (
        f"Generate {count} multiple-choice questions about recycling, waste sorting, and eco-friendly habits. "
        "For each question provide a JSON object with keys: id (short unique), question (string), "
        "options (array of 4 strings), answerIndex (0-3). "
        "Ensure questions vary in difficulty and cover different topics; do not repeat questions or answers. "
        "Output a JSON array."
    )


def diy_prompt(items: str) -> str:
    return (
        f"I have these items: {items}.\n\n"
        "Suggest 3-5 DIY eco-friendly projects I can make from these items.\n"
        "For each suggestion, provide:\n"
        "1. Project name\n"
        "2. Description (1-2 sentences)\n"
        "3. Usability score (1-10): how practical/useful is it?\n"
        "4. Eco-friendly score (1-10): how environmentally friendly?\n"
        "5. Fun score (1-10): how enjoyable/interesting?\n\n"
        "Format as JSON array with fields: name, description, usability, ecoFriendly, fun"
    )
