"""
Cleanup and decoding of raw model output.

Handles both JSON and markdown-wrapped responses.
"""

import json
import re

from pydantic import ValidationError

from .errors import GenerationFailed, MalformedExtraction
from .models import ResumeRecord

_OPENING_FENCE = re.compile(r"^```[A-Za-z0-9_+-]*[ \t]*\n?")
_CLOSING_FENCE = re.compile(r"\n?[ \t]*```$")


def strip_code_fences(text: str) -> str:
    """
    Remove a surrounding triple-backtick fence, tagged ``json`` or untagged.

    Text that does not start with a fence is only trimmed.
    """
    text = text.strip()
    if text.startswith("```"):
        text = _OPENING_FENCE.sub("", text, count=1)
        text = _CLOSING_FENCE.sub("", text, count=1)
        text = text.strip()
    return text


def parse_resume_record(raw_text: str) -> ResumeRecord:
    """
    Decode extraction output into a ResumeRecord.

    Args:
        raw_text: Completion text as returned by the model

    Returns:
        Validated resume record

    Raises:
        MalformedExtraction: If the text is not a JSON object of the expected shape
    """
    content = strip_code_fences(raw_text)

    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise MalformedExtraction(
            f"Failed to parse resume: model returned invalid JSON ({e.msg}). Please try again.",
            raw_text=raw_text,
        ) from e
    except RecursionError as e:
        raise MalformedExtraction(
            "Failed to parse resume: model returned JSON nested too deeply. Please try again.",
            raw_text=raw_text,
        ) from e

    if not isinstance(data, dict):
        raise MalformedExtraction(
            f"Failed to parse resume: expected a JSON object, got {type(data).__name__}. Please try again.",
            raw_text=raw_text,
        )

    try:
        return ResumeRecord.model_validate(data)
    except ValidationError as e:
        fields = sorted({".".join(str(p) for p in err["loc"]) for err in e.errors()})
        raise MalformedExtraction(
            "Failed to parse resume: unexpected field types. Please try again.",
            raw_text=raw_text,
            details={"fields": fields},
        ) from e


def normalize_tailored(raw_text: str) -> str:
    """Return the tailored markdown with any wrapping fence removed."""
    content = strip_code_fences(raw_text)
    if not content:
        raise GenerationFailed(
            "The AI service returned an empty response. Please try again."
        )
    return content
