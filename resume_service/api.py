"""
Resume Tailor API.

Owner-scoped CRUD for stored resumes and tailoring history, plus the two
generation endpoints:

- POST /parse   upload a document, get a structured resume back
- POST /tailor  rewrite a resume for a job description
"""

import uuid
from datetime import datetime, timezone
from functools import lru_cache
from typing import Optional

import structlog
from fastapi import Depends, FastAPI, File, Request, UploadFile
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
from starlette.middleware.base import BaseHTTPMiddleware

from resume_tailor import __version__
from resume_tailor.config import TailorConfig
from resume_tailor.errors import (
    ErrorCode,
    InvalidFile,
    InvalidRequest,
    MalformedExtraction,
    PipelineError,
    ResumeNotFound,
)
from resume_tailor.models import Identity, ResumeRecord, UploadedDocument
from resume_tailor.pipeline import ResumePipeline

from .auth import require_identity
from .database import Base, engine, get_db
from .logging_config import configure_logging
from .models import (
    DeleteResponse,
    ErrorResponse,
    HealthCheckResponse,
    ResumeListResponse,
    ResumeResponse,
    TailoredResumeCreate,
    TailoredResumeListResponse,
    TailoredResumeResponse,
    TailorRequest,
    TailorResponse,
)
from .settings import settings
from .store import ResumeStore

configure_logging(settings.log_level, settings.log_json)
logger = structlog.get_logger()

# How much of an unparseable model reply is echoed back to the client.
RAW_PREVIEW_CHARS = 500


# ============================================================================
# MIDDLEWARE
# ============================================================================


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Add unique request ID to each request for tracking."""

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        )
        logger.info("Request started")

        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id

        logger.info("Request finished", status_code=response.status_code)
        return response


# ============================================================================
# FASTAPI APP SETUP
# ============================================================================

app = FastAPI(
    title="Resume Tailor API",
    description="Store resumes and tailor them to job descriptions",
    version=__version__,
)

app.add_middleware(RequestIDMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
def startup_event():
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables ready")


# ============================================================================
# DEPENDENCIES
# ============================================================================


@lru_cache
def get_pipeline() -> ResumePipeline:
    """Shared pipeline; it holds configuration only."""
    return ResumePipeline(TailorConfig.from_env())


def get_store(db: Session = Depends(get_db)) -> ResumeStore:
    return ResumeStore(db)


# ============================================================================
# EXCEPTION HANDLERS
# ============================================================================


def _error_response(
    request: Request,
    status_code: int,
    error_code: ErrorCode,
    message: str,
    details: Optional[dict] = None,
) -> JSONResponse:
    body = ErrorResponse(
        error_code=error_code,
        message=message,
        details=details or None,
        request_id=getattr(request.state, "request_id", None),
    )
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


@app.exception_handler(PipelineError)
async def pipeline_error_handler(request: Request, exc: PipelineError):
    """Render pipeline and store failures consistently."""
    details = dict(exc.details)
    if isinstance(exc, MalformedExtraction) and exc.raw_text:
        details["raw_preview"] = exc.raw_text[:RAW_PREVIEW_CHARS]

    if exc.status_code >= 500:
        logger.error("Request failed", error_code=exc.code.value, error=exc.message)
    else:
        logger.info("Request rejected", error_code=exc.code.value, error=exc.message)

    return _error_response(request, exc.status_code, exc.code, exc.message, details)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Handle malformed request bodies."""
    fields = sorted(
        {".".join(str(p) for p in err["loc"] if p != "body") for err in exc.errors()}
    )
    logger.info("Request rejected", error_code=ErrorCode.INVALID_REQUEST.value, fields=fields)
    return _error_response(
        request,
        400,
        ErrorCode.INVALID_REQUEST,
        "Invalid request body",
        {"fields": fields},
    )


# ============================================================================
# SYSTEM ENDPOINTS
# ============================================================================


@app.get("/health", response_model=HealthCheckResponse)
def health_check():
    """Health check endpoint for frontend and orchestration."""
    return HealthCheckResponse(
        status="healthy",
        timestamp=datetime.now(timezone.utc),
        version=__version__,
    )


# ============================================================================
# GENERATION ENDPOINTS
# ============================================================================


@app.post("/parse", response_model=ResumeRecord, response_model_by_alias=True)
def parse_resume(
    file: Optional[UploadFile] = File(None),
    identity: Identity = Depends(require_identity),
    pipeline: ResumePipeline = Depends(get_pipeline),
):
    """Extract a structured resume from an uploaded PDF, DOCX, DOC or TXT file."""
    if file is None:
        raise InvalidFile("No file provided")

    # One byte past the limit is enough to reject an oversize upload.
    content = file.file.read(pipeline.config.max_upload_bytes + 1)

    upload = UploadedDocument(
        content=content, content_type=file.content_type, filename=file.filename
    )
    return pipeline.extract_resume(identity, upload)


@app.post("/tailor", response_model=TailorResponse)
def tailor_resume(
    request: TailorRequest,
    identity: Identity = Depends(require_identity),
    pipeline: ResumePipeline = Depends(get_pipeline),
    store: ResumeStore = Depends(get_store),
):
    """
    Generate a tailored resume for a job description.

    When ``resumeId`` is given the stored resume is used and the result is
    appended to its tailoring history in the same request.
    """
    if request.resume_id:
        tailored, record = pipeline.tailor_and_record(
            identity, store, request.resume_id, request.job_description
        )
        return TailorResponse(tailoredResume=tailored, tailoringId=record.id)

    if request.resume is None:
        raise InvalidRequest("Either resume or resumeId is required.")

    tailored = pipeline.tailor_resume(identity, request.resume, request.job_description)
    return TailorResponse(tailoredResume=tailored)


# ============================================================================
# RESUME ENDPOINTS
# ============================================================================


@app.post("/resumes", response_model=ResumeResponse, status_code=201)
def create_resume(
    record: ResumeRecord,
    identity: Identity = Depends(require_identity),
    store: ResumeStore = Depends(get_store),
):
    resume = store.create_resume(identity, record)
    logger.info("Resume created", resume_id=resume.id)
    return resume


@app.get("/resumes", response_model=ResumeListResponse)
def list_resumes(
    identity: Identity = Depends(require_identity),
    store: ResumeStore = Depends(get_store),
):
    """List the caller's resumes, most recently updated first."""
    return store.list_resumes(identity)


@app.get("/resumes/{resume_id}", response_model=ResumeResponse)
def get_resume(
    resume_id: str,
    identity: Identity = Depends(require_identity),
    store: ResumeStore = Depends(get_store),
):
    resume = store.get_resume(identity, resume_id)
    if resume is None:
        raise ResumeNotFound("Not found", details={"resume_id": resume_id})
    return resume


@app.put("/resumes/{resume_id}", response_model=ResumeResponse)
def update_resume(
    resume_id: str,
    record: ResumeRecord,
    identity: Identity = Depends(require_identity),
    store: ResumeStore = Depends(get_store),
):
    """Replace the full content of a resume."""
    resume = store.update_resume(identity, resume_id, record)
    if resume is None:
        raise ResumeNotFound("Not found", details={"resume_id": resume_id})
    logger.info("Resume updated", resume_id=resume_id)
    return resume


@app.delete("/resumes/{resume_id}", response_model=DeleteResponse)
def delete_resume(
    resume_id: str,
    identity: Identity = Depends(require_identity),
    store: ResumeStore = Depends(get_store),
):
    """Delete a resume together with its tailoring history."""
    if not store.delete_resume(identity, resume_id):
        raise ResumeNotFound("Not found", details={"resume_id": resume_id})
    logger.info("Resume deleted", resume_id=resume_id)
    return DeleteResponse()


# ============================================================================
# TAILORING HISTORY ENDPOINTS
# ============================================================================


@app.post(
    "/tailored-resumes", response_model=TailoredResumeResponse, status_code=201
)
def save_tailored_resume(
    request: TailoredResumeCreate,
    identity: Identity = Depends(require_identity),
    store: ResumeStore = Depends(get_store),
):
    """Save a tailoring result produced by an earlier /tailor call."""
    return store.create_tailoring(
        identity,
        resume_id=request.resume_id,
        job_description=request.job_description,
        tailored_content=request.tailored_content,
    )


@app.get("/tailored-resumes", response_model=TailoredResumeListResponse)
def list_tailored_resumes(
    resume_id: Optional[str] = None,
    identity: Identity = Depends(require_identity),
    store: ResumeStore = Depends(get_store),
):
    return store.list_tailorings(identity, resume_id=resume_id)
