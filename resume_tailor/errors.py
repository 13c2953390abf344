"""
Error taxonomy for the extraction and tailoring pipeline.

Every failure that leaves the pipeline is one of these exceptions, each with a
stable ``code`` the HTTP layer renders and a status code it maps to.
"""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorCode(str, Enum):
    """Stable error codes for API responses."""

    UNAUTHENTICATED = "unauthenticated"
    INVALID_FILE = "invalid_file"
    INVALID_REQUEST = "invalid_request"
    NOT_FOUND = "not_found"
    SERVER_MISCONFIGURED = "server_misconfigured"
    GENERATION_FAILED = "generation_failed"
    MALFORMED_EXTRACTION = "malformed_extraction"


class PipelineError(Exception):
    """Base class for terminal pipeline failures."""

    code: ErrorCode = ErrorCode.GENERATION_FAILED
    status_code: int = 500

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class Unauthenticated(PipelineError):
    """No authenticated identity accompanied the request."""

    code = ErrorCode.UNAUTHENTICATED
    status_code = 401


class InvalidFile(PipelineError):
    """Uploaded file (or tailoring input) failed validation."""

    code = ErrorCode.INVALID_FILE
    status_code = 400


class InvalidRequest(PipelineError):
    """Request input other than the file failed validation."""

    code = ErrorCode.INVALID_REQUEST
    status_code = 400


class ResumeNotFound(PipelineError):
    """Resume does not exist or belongs to another identity."""

    code = ErrorCode.NOT_FOUND
    status_code = 404


class ServerMisconfigured(PipelineError):
    """A required external credential is missing."""

    code = ErrorCode.SERVER_MISCONFIGURED
    status_code = 500


class GenerationFailed(PipelineError):
    """The generation service errored, timed out, or returned nothing."""

    code = ErrorCode.GENERATION_FAILED
    status_code = 500


class MalformedExtraction(PipelineError):
    """Model output could not be decoded as a resume record."""

    code = ErrorCode.MALFORMED_EXTRACTION
    status_code = 500

    def __init__(
        self,
        message: str,
        raw_text: str = "",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, details)
        self.raw_text = raw_text
