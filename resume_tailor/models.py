"""
Data models for resume extraction and tailoring.

Field names on the wire are camelCase (``personalInfo``) to match what the
browser client sends and what the extraction prompt asks the model for.
"""

from typing import Any

from pydantic import BaseModel, Field, field_validator


class Identity(BaseModel):
    """Authenticated caller, supplied explicitly to every operation."""

    user_id: str = Field(min_length=1)


class PersonalInfo(BaseModel):
    """Contact block of a resume."""

    name: str = ""
    email: str = ""
    phone: str = ""
    location: str = ""

    @field_validator("*", mode="before")
    @classmethod
    def _none_to_empty(cls, v: Any) -> Any:
        return "" if v is None else v


class ResumeRecord(BaseModel):
    """
    Canonical structured resume.

    ``experience``, ``education`` and ``projects`` are semi-structured text
    blocks (one entry per paragraph, ``-`` bullets), ``skills`` is a
    comma-separated list.
    """

    title: str = ""
    personal_info: PersonalInfo = Field(
        default_factory=PersonalInfo, alias="personalInfo"
    )
    summary: str = ""
    experience: str = ""
    education: str = ""
    skills: str = ""
    projects: str = ""

    class Config:
        populate_by_name = True
        extra = "ignore"

    @field_validator(
        "title", "summary", "experience", "education", "projects", mode="before"
    )
    @classmethod
    def _none_to_empty(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("personal_info", mode="before")
    @classmethod
    def _none_to_default(cls, v: Any) -> Any:
        return {} if v is None else v

    @field_validator("skills", mode="before")
    @classmethod
    def _join_skill_list(cls, v: Any) -> Any:
        # Models occasionally answer with a JSON array instead of a string.
        if v is None:
            return ""
        if isinstance(v, list) and all(isinstance(s, str) for s in v):
            return ", ".join(s.strip() for s in v if s.strip())
        return v

    def to_wire(self) -> dict[str, Any]:
        """Dump using the camelCase wire names."""
        return self.model_dump(by_alias=True)


class UploadedDocument(BaseModel):
    """A file received from the client, before encoding."""

    content: bytes
    content_type: str | None = None
    filename: str | None = None

    @property
    def size(self) -> int:
        return len(self.content)


class EncodedDocument(BaseModel):
    """Base64 payload ready to be sent inline to the generation service."""

    data: str
    mime_type: str
    size: int
