import json

import pytest

from parsers import (
    Structured,
    Unrecoverable,
    decode_array,
    decode_object,
    is_analysis,
    is_feedback,
    is_question_list,
    strip_fences,
)

OBJ = {"readinessScore": 72, "roadmap": [{"month": 1, "title": "Graphs"}], "nested": {"ok": True}}
OBJ_TEXT = json.dumps(OBJ, indent=2)


@pytest.mark.parametrize("wrapped", [
    f"```json\n{OBJ_TEXT}\n```",
    f"```JSON\n{OBJ_TEXT}\n```",
    f"```\n{OBJ_TEXT}\n```",
    f"  ```json {OBJ_TEXT}```  ",
])
def test_fenced_object_is_recovered(wrapped):
    result = decode_object(wrapped)
    assert isinstance(result, Structured)
    assert result.value == OBJ
    assert result.strategy == "direct"


def test_object_inside_prose_uses_balanced_scan():
    text = 'Sure! Here\'s your result: {"score": 7, "feedback": "Good"} Hope that helps!'
    result = decode_object(text)
    assert result.ok
    assert result.value == {"score": 7, "feedback": "Good"}
    assert result.strategy == "balanced"


def test_balanced_scan_stops_at_first_complete_object():
    text = 'first {"a": {"b": 1}} then {"c": 2}'
    assert decode_object(text).value == {"a": {"b": 1}}


def test_brace_inside_string_falls_through_to_greedy_span():
    # the '}' inside the string closes the balanced scan early; the greedy span still parses
    text = 'Result: {"tip": "use a dict}"} done'
    result = decode_object(text)
    assert result.value == {"tip": "use a dict}"}
    assert result.strategy == "greedy"


@pytest.mark.parametrize("text", ["", "   ", "\n\t", None, "not json at all"])
def test_unusable_input_is_unrecoverable(text):
    result = decode_object(text)
    assert isinstance(result, Unrecoverable)
    assert result.original_text == (text or "")
    assert result.reason


def test_truncated_object_is_unrecoverable():
    text = '{"score": 7, "feedback": "Go'
    result = decode_object(text)
    assert not result.ok
    assert result.original_text == text


def test_decode_is_idempotent():
    text = 'Here: {"score": 3} and more'
    assert decode_object(text) == decode_object(text)
    bad = "nothing here"
    assert decode_object(bad) == decode_object(bad)


def test_direct_parse_accepts_any_json_value():
    # shape is the caller's problem
    assert decode_object("[1, 2]").value == [1, 2]


def test_decode_array_fenced_and_prose():
    questions = [{"question": "Design a URL shortener", "type": "system_design", "difficulty": "hard"}]
    fenced = "```json\n" + json.dumps(questions) + "\n```"
    assert decode_array(fenced).value == questions

    prose = "Here are your questions:\n" + json.dumps(questions) + "\nGood luck!"
    result = decode_array(prose)
    assert result.value == questions
    assert result.strategy == "balanced"


def test_decode_array_nested_brackets():
    text = 'list: [[1, 2], [3]] end'
    assert decode_array(text).value == [[1, 2], [3]]


def test_decode_array_truncated_is_unrecoverable():
    assert not decode_array('[{"question": "Why').ok


def test_strip_fences():
    assert strip_fences("```markdown\n# Jane Doe\n```") == "# Jane Doe"
    assert strip_fences("plain") == "plain"
    assert strip_fences(None) == ""


def test_shape_checks():
    assert is_analysis({"readinessScore": 72, "roadmap": []})
    assert is_analysis({"readinessScore": 72.5, "roadmap": []})
    assert not is_analysis({"readinessScore": "72", "roadmap": []})
    assert not is_analysis({"readinessScore": True, "roadmap": []})
    assert not is_analysis({"readinessScore": 72})
    assert not is_analysis([])

    assert is_question_list([{"question": "q"}])
    assert not is_question_list([])
    assert not is_question_list({"question": "q"})

    assert is_feedback({"score": 0})
    assert not is_feedback({"feedback": "ok"})


def test_fenced_object_equals_plain_structured():
    assert decode_object(f"```json\n{OBJ_TEXT}\n```") == Structured(OBJ)


def test_deep_nesting_is_unrecoverable_not_an_error():
    deep_array = "[" * 100000 + "]" * 100000
    deep_object = '{"a":' * 5000 + "1" + "}" * 5000
    assert isinstance(decode_array(deep_array), Unrecoverable)
    assert isinstance(decode_object(deep_object), Unrecoverable)


@pytest.mark.parametrize("literal", ["NaN", "Infinity", "-Infinity"])
def test_non_json_constants_are_rejected(literal):
    result = decode_object('{"readinessScore": %s, "roadmap": []}' % literal)
    assert isinstance(result, Unrecoverable)


def test_text_glued_to_closing_fence_is_kept():
    assert strip_fences("```\nRewritten resume\n```Thanks") == "Rewritten resume\nThanks"
    assert strip_fences("```python\nprint(1)\n```") == "print(1)"


def test_language_tag_inside_json_string_survives():
    text = '```json\n{"tip": "wrap code in ```python blocks"}\n```'
    assert decode_object(text).value == {"tip": "wrap code in python blocks"}
