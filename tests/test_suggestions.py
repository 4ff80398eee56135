import json

import pytest

from greenquest.services.suggestions import (
    OPTION_PLACEHOLDER,
    ExtractionFailed,
    ParseFailed,
    extract_json_array,
    normalize_question,
    parse_quiz,
    parse_records,
    parse_suggestions,
)

QUESTIONS = [
    {"id": "q1", "question": "Which bin takes glass?", "options": ["Blue", "Green", "Black", "Brown"], "answerIndex": 1},
    {"id": "q2", "question": "Can pizza boxes be composted?", "options": ["Yes", "No", "Only lids", "Never"], "answerIndex": 0},
]


def test_well_formed_array_round_trips():
    assert parse_quiz(json.dumps(QUESTIONS)) == QUESTIONS


def test_array_embedded_in_prose():
    text = "Sure! Here is your quiz:\n```json\n" + json.dumps(QUESTIONS, indent=2) + "\n```\nGood luck!"
    assert parse_quiz(text) == QUESTIONS


def test_extraction_falls_back_to_outer_brackets():
    assert extract_json_array("numbers: [1, 2, 3] done") == "[1, 2, 3]"


@pytest.mark.parametrize("text", ["", "No quiz today.", "{\"question\": \"loose object\"}", "] backwards ["])
def test_no_array_fails_extraction(text):
    assert extract_json_array(text) is None
    with pytest.raises(ExtractionFailed) as info:
        parse_quiz(text)
    assert info.value.raw == text


def test_invalid_json_is_a_parse_failure():
    text = "Here: [{question: 'unquoted'}]"
    with pytest.raises(ParseFailed) as info:
        parse_quiz(text)
    assert info.value.raw == text
    assert info.value.to_dict()["raw"] == text


def test_parse_records_requires_a_list():
    with pytest.raises(ParseFailed):
        parse_records('{"a": 1}')


def test_quiz_entries_must_be_objects():
    with pytest.raises(ParseFailed):
        parse_quiz("[1, 2, 3]")


def test_missing_id_is_generated():
    question = normalize_question({"question": "?", "options": ["a", "b", "c", "d"], "answerIndex": 2}, 3)
    assert question["id"].startswith("q3_")
    assert question["answerIndex"] == 2


def test_options_built_from_incorrect_and_correct():
    question = normalize_question({"question": "?", "incorrect": ["a", "b", "c", "x"], "correct": "d"}, 0)
    assert question["options"] == ["a", "b", "c", "d"]
    assert question["answerIndex"] == 3


def test_short_options_are_padded_and_correct_matched():
    question = normalize_question({"id": "q", "options": ["paper", " glass "], "correct": "glass"}, 0)
    assert question["options"] == ["paper", " glass ", OPTION_PLACEHOLDER, OPTION_PLACEHOLDER]
    assert question["answerIndex"] == 1


def test_unmatched_correct_defaults_to_first_option():
    question = normalize_question({"id": "q", "options": ["a", "b", "c", "d"], "correct": "z"}, 0)
    assert question["answerIndex"] == 0


def test_extra_options_are_truncated():
    question = normalize_question({"id": "q", "options": list("abcdef"), "answerIndex": 0}, 0)
    assert question["options"] == ["a", "b", "c", "d"]


def test_normalize_does_not_mutate_input():
    item = {"question": "?", "options": ["a"]}
    normalize_question(item, 0)
    assert item == {"question": "?", "options": ["a"]}


def test_suggestions_pass_through():
    ideas = [{"name": "Jar lamp", "description": "A lamp.", "usability": 7, "ecoFriendly": 9, "fun": 8}]
    assert parse_suggestions("Ideas:\n" + json.dumps(ideas)) == ideas


def test_suggestions_failures_become_diagnostics():
    assert parse_suggestions("nothing useful") == [{"error": "Could not parse suggestions", "raw": "nothing useful"}]
    broken = "[{name: jar}]"
    assert parse_suggestions(broken) == [{"error": "JSON parse error", "raw": broken}]


def test_non_finite_answer_index_is_rederived():
    text = '[{"id": "q", "options": ["a", "b", "c", "d"], "correct": "c", "answerIndex": NaN}]'
    assert parse_quiz(text)[0]["answerIndex"] == 2


@pytest.mark.parametrize("answer_index", [7, -1, 1.5, "2", True, None])
def test_invalid_answer_index_is_rederived(answer_index):
    item = {"id": "q", "options": ["a", "b", "c", "d"], "correct": "b", "answerIndex": answer_index}
    assert normalize_question(item, 0)["answerIndex"] == 1


def test_correct_beyond_fourth_option_falls_back_to_first():
    item = {"id": "q", "options": list("abcdef"), "correct": "f"}
    assert normalize_question(item, 0)["answerIndex"] == 0
