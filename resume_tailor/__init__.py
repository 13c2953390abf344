"""
AI Resume Tailor

Extract structured resumes from uploaded documents and rewrite them for
specific job descriptions.
"""

from .client import GenerationClient
from .config import TailorConfig
from .errors import (
    ErrorCode,
    GenerationFailed,
    InvalidFile,
    InvalidRequest,
    MalformedExtraction,
    PipelineError,
    ResumeNotFound,
    ServerMisconfigured,
    Unauthenticated,
)
from .models import Identity, PersonalInfo, ResumeRecord, UploadedDocument
from .pipeline import ResumePipeline

__version__ = "1.0.0"

__all__ = [
    "ResumePipeline",
    "TailorConfig",
    "GenerationClient",
    "Identity",
    "PersonalInfo",
    "ResumeRecord",
    "UploadedDocument",
    "ErrorCode",
    "PipelineError",
    "Unauthenticated",
    "InvalidFile",
    "InvalidRequest",
    "ResumeNotFound",
    "ServerMisconfigured",
    "GenerationFailed",
    "MalformedExtraction",
]
