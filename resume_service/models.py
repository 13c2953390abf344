import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel
from sqlalchemy import JSON, Column, DateTime, ForeignKey, String, Text
from sqlalchemy.orm import relationship

from resume_tailor.errors import ErrorCode
from resume_tailor.models import PersonalInfo, ResumeRecord

from .database import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ==========================
# SQLALCHEMY MODELS (DB)
# ==========================


class Resume(Base):
    __tablename__ = "resumes"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String, index=True, nullable=False)
    title = Column(Text, nullable=False)

    # {"name", "email", "phone", "location"}
    personal_info = Column(JSON, nullable=False)

    summary = Column(Text, nullable=False)
    experience = Column(Text, nullable=False)
    education = Column(Text, nullable=False)
    skills = Column(Text, nullable=False)
    projects = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )

    # Relationships
    tailored_resumes = relationship(
        "TailoredResume",
        back_populates="resume",
        cascade="all, delete-orphan",
    )

    def apply_record(self, record: ResumeRecord) -> None:
        """Replace every content column with the values from ``record``."""
        self.title = record.title
        self.personal_info = record.personal_info.model_dump()
        self.summary = record.summary
        self.experience = record.experience
        self.education = record.education
        self.skills = record.skills
        self.projects = record.projects or ""

    def to_record(self) -> ResumeRecord:
        return ResumeRecord(
            title=self.title,
            personal_info=PersonalInfo.model_validate(self.personal_info or {}),
            summary=self.summary,
            experience=self.experience,
            education=self.education,
            skills=self.skills,
            projects=self.projects,
        )


class TailoredResume(Base):
    """One tailoring attempt. Rows are never updated."""

    __tablename__ = "tailored_resumes"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    resume_id = Column(
        String, ForeignKey("resumes.id", ondelete="CASCADE"), index=True, nullable=False
    )
    user_id = Column(String, index=True, nullable=False)
    job_description = Column(Text, nullable=False)
    tailored_content = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    # Relationships
    resume = relationship("Resume", back_populates="tailored_resumes")


# ==========================
# PYDANTIC MODELS (API)
# ==========================


class CamelModel(BaseModel):
    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


class ResumeResponse(CamelModel):
    id: str
    user_id: str
    title: str
    personal_info: PersonalInfo
    summary: str
    experience: str
    education: str
    skills: str
    projects: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class TailoredResumeResponse(CamelModel):
    id: str
    resume_id: str
    user_id: str
    job_description: str
    tailored_content: str
    created_at: datetime


class TailorRequest(CamelModel):
    """
    Tailoring request.

    With ``resumeId`` the stored resume is used and the result is saved to
    its history; otherwise ``resume`` must be supplied and nothing is stored.
    """

    resume: Optional[ResumeRecord] = None
    resume_id: Optional[str] = None
    job_description: str = Field(min_length=1)


class TailorResponse(BaseModel):
    tailoredResume: str
    tailoringId: Optional[str] = None


class TailoredResumeCreate(CamelModel):
    resume_id: str
    job_description: str = Field(min_length=1)
    tailored_content: str = Field(min_length=1)


# --- Errors / System ---
class ErrorResponse(BaseModel):
    """Standard error response format."""

    error_code: ErrorCode
    message: str
    details: Optional[Dict[str, Any]] = None
    timestamp: datetime = Field(default_factory=utcnow)
    request_id: Optional[str] = None


class HealthCheckResponse(BaseModel):
    status: str
    timestamp: datetime = Field(default_factory=utcnow)
    version: str


class DeleteResponse(BaseModel):
    success: bool = True


ResumeListResponse = List[ResumeResponse]
TailoredResumeListResponse = List[TailoredResumeResponse]
