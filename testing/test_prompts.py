"""Unit tests for prompt building and response parsing."""

import pytest

from core.analysis.errors import MalformedResponseError
from core.analysis.parsing import extract_json_object, strip_code_fences
from core.analysis.prompts import (
    DEFAULT_MAX_CONTENT_CHARS,
    SUMMARY_SCHEMA,
    TRUNCATION_MARKER,
    build_prompt,
    truncate_content,
)


class TestTruncateContent:
    def test_short_content_unchanged(self):
        assert truncate_content("short text") == "short text"

    def test_exact_limit_not_marked(self):
        content = "x" * DEFAULT_MAX_CONTENT_CHARS
        assert truncate_content(content) == content

    def test_long_content_cut_and_marked(self):
        content = "a" * 9000
        result = truncate_content(content)
        assert result == "a" * 8000 + TRUNCATION_MARKER
        assert result.endswith("[Content truncated for analysis]")


class TestBuildPrompt:
    def test_contains_title_content_and_schema(self):
        prompt = build_prompt("The body of the paper.", "A Study of Things")
        assert "Title: A Study of Things" in prompt
        assert "Content: The body of the paper." in prompt
        assert SUMMARY_SCHEMA in prompt

    def test_states_extraction_rules(self):
        prompt = build_prompt("body", "title")
        assert "5-8 source references" in prompt
        assert "0.0-1.0" in prompt

    def test_truncates_long_content(self):
        prompt = build_prompt("b" * 10000, "title")
        assert "b" * 8000 + TRUNCATION_MARKER in prompt
        assert "b" * 8001 not in prompt

    def test_custom_limit(self):
        prompt = build_prompt("c" * 100, "title", max_chars=10)
        assert "c" * 10 + TRUNCATION_MARKER in prompt

    def test_deterministic(self):
        assert build_prompt("same", "t") == build_prompt("same", "t")


class TestStripCodeFences:
    def test_json_fence(self):
        assert strip_code_fences('```json\n{"a": 1}\n```') == '{"a": 1}'

    def test_plain_fence(self):
        assert strip_code_fences('```\n{"a": 1}\n```') == '{"a": 1}'

    def test_json_fence_with_preamble(self):
        text = 'Here is the analysis:\n```json\n{"a": 1}\n```\nThanks'
        assert strip_code_fences(text) == '{"a": 1}'

    def test_no_fence(self):
        assert strip_code_fences('  {"a": 1}  ') == '{"a": 1}'


class TestExtractJsonObject:
    def test_parses_object(self):
        assert extract_json_object('```json\n{"content": "x"}\n```') == {"content": "x"}

    def test_invalid_json_raises(self):
        with pytest.raises(MalformedResponseError) as exc_info:
            extract_json_object("not json at all", provider="openai")
        assert exc_info.value.provider == "openai"

    def test_array_rejected(self):
        with pytest.raises(MalformedResponseError):
            extract_json_object("[1, 2, 3]")

    def test_scalar_rejected(self):
        with pytest.raises(MalformedResponseError):
            extract_json_object('"just a string"')
