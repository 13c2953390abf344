"""Tests for model output cleanup and resume decoding."""

import json

import pytest

from resume_tailor.errors import GenerationFailed, MalformedExtraction
from resume_tailor.normalizer import (
    normalize_tailored,
    parse_resume_record,
    strip_code_fences,
)


@pytest.mark.parametrize(
    "wrapped",
    [
        '```json\n{"a": 1}\n```',
        '```JSON\n{"a": 1}\n```',
        '```\n{"a": 1}\n```',
        '  \n```json\n{"a": 1}\n```\n  ',
        '```json {"a": 1}```',
        '{"a": 1}',
    ],
)
def test_strip_code_fences(wrapped):
    assert strip_code_fences(wrapped) == '{"a": 1}'


def test_strip_leaves_inner_backticks():
    text = "```markdown\n# Title\nUse `go test` here\n```"
    assert strip_code_fences(text) == "# Title\nUse `go test` here"


def test_unfenced_text_only_trimmed():
    assert strip_code_fences("  # Jane\n\n") == "# Jane"


# ============================================================================
# EXTRACTION
# ============================================================================


@pytest.mark.parametrize(
    "template",
    ["{body}", "```json\n{body}\n```", "```\n{body}\n```", "\n\n```json\n{body}\n```\n"],
)
def test_fenced_and_unfenced_parse_identically(template, jane_json):
    body = json.dumps(jane_json, indent=2)
    record = parse_resume_record(template.replace("{body}", body))
    assert record.to_wire() == jane_json


@pytest.mark.parametrize(
    "raw",
    ["", "not json", '{"title": "x"', "```json\n{title: 'x'}\n```", "Here is your JSON: {}"],
)
def test_invalid_json_raises_malformed(raw):
    with pytest.raises(MalformedExtraction) as exc_info:
        parse_resume_record(raw)
    assert exc_info.value.raw_text == raw


@pytest.mark.parametrize("raw", ["[]", '"a string"', "42", "null"])
def test_non_object_raises_malformed(raw):
    with pytest.raises(MalformedExtraction):
        parse_resume_record(raw)


def test_wrong_field_type_raises_malformed():
    with pytest.raises(MalformedExtraction) as exc_info:
        parse_resume_record('{"title": 7, "personalInfo": "Jane"}')
    assert "title" in exc_info.value.details["fields"]


def test_missing_fields_default_to_empty():
    record = parse_resume_record('{"title": "Resume"}')
    assert record.title == "Resume"
    assert record.personal_info.name == ""
    assert record.skills == ""


def test_nulls_become_empty_strings():
    record = parse_resume_record(
        '{"summary": null, "personalInfo": {"name": "Jane", "phone": null}, "projects": null}'
    )
    assert record.summary == ""
    assert record.personal_info.phone == ""
    assert record.projects == ""


def test_skill_array_joined():
    record = parse_resume_record('{"skills": ["Go", " SQL ", ""]}')
    assert record.skills == "Go, SQL"


def test_unknown_keys_ignored():
    record = parse_resume_record('{"title": "R", "certifications": ["AWS"]}')
    assert "certifications" not in record.to_wire()


# ============================================================================
# TAILORING
# ============================================================================


def test_tailored_text_passes_through():
    text = "# Jane Doe\n\n## Summary\nGo engineer."
    assert normalize_tailored(text) == text


def test_tailored_fence_removed():
    assert normalize_tailored("```markdown\n# Jane\n```") == "# Jane"


def test_empty_tailored_output_fails():
    with pytest.raises(GenerationFailed):
        normalize_tailored("```\n```")


def test_deeply_nested_reply_raises_malformed():
    raw = "[" * 100000 + "]" * 100000
    with pytest.raises(MalformedExtraction) as exc_info:
        parse_resume_record(raw)
    assert exc_info.value.raw_text == raw
