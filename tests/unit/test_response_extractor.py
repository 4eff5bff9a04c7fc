import json

from ltb.extractor import extract_json, find_balanced_object


def test_ext_001_fenced_json_block_wins_over_surrounding_prose() -> None:
    reply = "\n".join(
        [
            "Here is the analysis {not json}:",
            "```json",
            '{"objectName": "PROG1", "documentation": {"description": "uses {braces}"}}',
            "```",
            "Let me know if you need {anything} else.",
        ]
    )

    extracted = extract_json(reply)

    assert extracted == (
        '{"objectName": "PROG1", "documentation": {"description": "uses {braces}"}}'
    )


def test_ext_002_fence_label_is_case_insensitive() -> None:
    reply = 'Result:\n```JSON\n{"a": 1}\n```'

    assert extract_json(reply) == '{"a": 1}'


def test_ext_003_raw_json_reply_is_returned_whole() -> None:
    reply = '{"objectName": "A", "documentation": {"actions": [{"type": "x"}]}}'

    assert extract_json(reply) == reply


def test_ext_004_prose_prefix_returns_first_balanced_object_with_nesting() -> None:
    reply = (
        'Sure. {"outer": {"inner": {"deep": 1}}, "list": [{"x": 2}]} '
        'and later {"other": true}'
    )

    extracted = extract_json(reply)

    assert extracted == '{"outer": {"inner": {"deep": 1}}, "list": [{"x": 2}]}'
    assert json.loads(extracted)["outer"]["inner"]["deep"] == 1


def test_ext_005_braces_and_escaped_quotes_inside_strings_do_not_affect_depth() -> None:
    reply = 'Answer: {"text": "a } b { c \\" } still string", "n": 1} trailing }'

    extracted = extract_json(reply)

    assert extracted == '{"text": "a } b { c \\" } still string", "n": 1}'
    assert json.loads(extracted) == {"text": 'a } b { c " } still string', "n": 1}


def test_ext_006_reply_without_braces_returns_none() -> None:
    assert extract_json("I could not analyze this program.") is None
    assert extract_json("") is None


def test_ext_007_unterminated_object_returns_none() -> None:
    assert find_balanced_object('prefix {"a": {"b": 1}') is None


def test_ext_008_unclosed_fence_falls_back_to_brace_scan() -> None:
    reply = 'Partial:\n```json\n{"objectName": "X"}\n'

    assert extract_json(reply) == '{"objectName": "X"}'


def test_ext_009_unlabeled_fence_is_handled_by_brace_scan() -> None:
    reply = '```\n{"objectType": "Report"}\n```'

    assert extract_json(reply) == '{"objectType": "Report"}'


def test_ext_010_triple_backticks_inside_fenced_string_value_are_kept() -> None:
    inner = (
        '{"objectName": "PROG1", "documentation": '
        '{"description": "Run ```PRINT``` first, then {close}."}}'
    )
    reply = f"Analysis:\n```json\n{inner}\n```\nDone."

    extracted = extract_json(reply)

    assert extracted == inner
    assert json.loads(extracted)["documentation"]["description"] == (
        "Run ```PRINT``` first, then {close}."
    )


def test_ext_011_scan_starts_at_given_offset() -> None:
    text = '{"first": 1} then {"second": {"n": 2}}'

    assert find_balanced_object(text, start=5) == '{"second": {"n": 2}}'
