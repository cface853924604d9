"""normalize_reply precedence tests"""

import pytest

from src.workflow_relay.normalizer import normalize_reply


def test_string_is_returned_verbatim():
    assert normalize_reply("hello") == "hello"
    assert normalize_reply("") == ""


def test_response_beats_content_and_message():
    data = {"message": "m", "content": "c", "response": "r"}
    assert normalize_reply(data) == "r"


def test_content_beats_message():
    assert normalize_reply({"message": "m", "content": "c"}) == "c"


def test_message_used_when_nothing_better():
    assert normalize_reply({"message": "m", "other": "x"}) == "m"


def test_empty_preferred_field_is_skipped():
    assert normalize_reply({"response": "", "content": "c"}) == "c"


def test_first_non_empty_string_field_in_key_order():
    assert normalize_reply({"foo": "", "bar": "bar-val"}) == "bar-val"


def test_whitespace_only_strings_are_skipped():
    assert normalize_reply({"a": "   ", "b": 3, "c": "text"}) == "text"


def test_scan_returns_value_untrimmed():
    assert normalize_reply({"output": "  padded  "}) == "  padded  "


def test_json_fallback_when_no_string_field():
    assert normalize_reply({"count": 3, "ok": True}) == '{"count":3,"ok":true}'


def test_fallback_keeps_non_ascii():
    assert normalize_reply({"items": ["é"]}) == '{"items":["é"]}'


def test_success_true_still_scans():
    assert normalize_reply({"success": True, "output": "done"}) == "done"


def test_success_false_with_error():
    assert normalize_reply({"success": False, "error": "x"}) == "Error: x"


def test_success_false_without_error():
    assert normalize_reply({"success": False}) == "Error: Unknown error from AI service"


def test_success_false_ignores_other_strings():
    assert normalize_reply({"success": False, "note": "ignored"}) == (
        "Error: Unknown error from AI service"
    )


def test_success_false_still_prefers_response():
    assert normalize_reply({"success": False, "response": "r", "error": "x"}) == "r"


def test_success_zero_is_not_false():
    assert normalize_reply({"success": 0, "output": "ok"}) == "ok"


def test_non_string_preferred_field_is_rendered():
    assert normalize_reply({"response": {"text": "hi"}}) == '{"text":"hi"}'
    assert normalize_reply({"content": 7}) == "7"


@pytest.mark.parametrize("data", [None, 42, 3.5, True])
def test_scalars_have_no_response(data):
    assert normalize_reply(data) == "No response from AI assistant"


def test_array_scans_string_elements():
    assert normalize_reply([{"output": "x"}, "", "first"]) == "first"


def test_array_without_strings_is_serialized():
    assert normalize_reply([{"output": "x"}]) == '[{"output":"x"}]'
