"""
Tests for best-effort JSON extraction from model output.

Covers the strategy order (fenced block, bracketed span, whole text, raw
carrier) and that extraction never raises on malformed text.
"""

import pytest

from bfflix.agents.recommendation.extraction import extract_json, is_raw_carrier


class TestFencedBlock:
    """```json fenced blocks win over everything else."""

    def test_fenced_array_with_commentary(self):
        text = (
            "Here are your picks!\n"
            "```json\n"
            '[{"title": "Dark", "type": "tv", "reason": "twisty", "matchScore": 91}]\n'
            "```\n"
            "Enjoy."
        )

        assert extract_json(text) == [
            {"title": "Dark", "type": "tv", "reason": "twisty", "matchScore": 91}
        ]

    def test_fence_tag_is_case_insensitive(self):
        assert extract_json('```JSON\n{"a": 1}\n```') == {"a": 1}

    def test_fenced_block_preferred_over_earlier_brackets(self):
        text = 'Note [draft]\n```json\n{"type": "conversation", "message": "Hi"}\n```'

        assert extract_json(text) == {"type": "conversation", "message": "Hi"}

    def test_invalid_fenced_block_falls_through_to_bracketed_span(self):
        text = '```json\nnot json at all\n```'

        # No brackets and no valid JSON anywhere
        assert extract_json(text) == {"raw": text}


class TestBracketedSpan:
    """The earliest opening bracket decides between object and array."""

    def test_object_inside_prose(self):
        text = 'Sure thing: {"type": "conversation", "message": "Trending or genre?"} hope that helps'

        assert extract_json(text) == {"type": "conversation", "message": "Trending or genre?"}

    def test_array_inside_prose(self):
        text = 'Picks: [{"title": "Up"}, {"title": "Coco"}] (both great)'

        assert extract_json(text) == [{"title": "Up"}, {"title": "Coco"}]

    def test_array_before_nested_objects_is_kept_as_array(self):
        text = 'Result [{"title": "Up", "meta": {"year": 2009}}]'

        assert extract_json(text) == [{"title": "Up", "meta": {"year": 2009}}]

    def test_span_is_greedy_to_last_closing_bracket(self):
        # Two separate objects make the greedy span invalid JSON
        text = '{"a": 1} and {"b": 2}'

        assert extract_json(text) == {"raw": text}


class TestWholeTextAndRaw:
    def test_whole_text_scalar(self):
        assert extract_json("  42 ") == 42

    def test_whole_text_string_literal(self):
        assert extract_json('"just a string"') == "just a string"

    def test_plain_prose_becomes_raw_carrier(self):
        assert extract_json("  I could not think of anything.  ") == {
            "raw": "I could not think of anything."
        }

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_empty_input_is_raw_empty(self, value):
        assert extract_json(value) == {"raw": ""}

    def test_truncated_json_never_raises(self):
        text = '[{"title": "Dark", "type": "tv"'

        assert extract_json(text) == {"raw": text}


class TestIdempotence:
    """Re-extracting an extracted value gives the same value back."""

    @pytest.mark.parametrize("text", [
        '```json\n[{"title": "Up"}]\n```',
        'prefix {"message": "hi"} suffix',
        "no json here",
        "",
    ])
    def test_extract_twice_is_stable(self, text):
        once = extract_json(text)

        assert extract_json(once) == once


class TestIsRawCarrier:
    def test_raw_carrier(self):
        assert is_raw_carrier({"raw": "text"}) is True

    def test_other_values(self):
        assert is_raw_carrier({"raw": "x", "extra": 1}) is False
        assert is_raw_carrier([{"raw": "x"}]) is False
        assert is_raw_carrier("raw") is False
