"""
Pipeline orchestrator for resume extraction and tailoring.

Each operation runs encode -> prompt -> generate -> normalize exactly once.
There are no retries and no partial results: any failure aborts the request
with a PipelineError.
"""

import logging
from contextlib import contextmanager
from typing import Any, Iterator, Optional, Protocol, Tuple

from .client import GenerationClient
from .config import TailorConfig
from .encoder import encode_document
from .errors import (
    GenerationFailed,
    InvalidRequest,
    MalformedExtraction,
    PipelineError,
    ResumeNotFound,
    Unauthenticated,
)
from .models import Identity, ResumeRecord, UploadedDocument
from .normalizer import normalize_tailored, parse_resume_record
from .prompts import PromptBuilder

logger = logging.getLogger(__name__)


class TailoringStore(Protocol):
    """Persistence operations the tailoring flow needs from the store."""

    def get_resume_record(
        self, identity: Identity, resume_id: str
    ) -> Optional[ResumeRecord]: ...

    def create_tailoring(
        self,
        identity: Identity,
        resume_id: str,
        job_description: str,
        tailored_content: str,
    ) -> Any: ...


class ResumePipeline:
    """Main orchestrator for resume extraction and tailoring."""

    def __init__(
        self,
        config: TailorConfig,
        client: Optional[GenerationClient] = None,
    ):
        self.config = config
        self.prompts = PromptBuilder()
        # Built per call from config unless injected, so requests share nothing.
        self._client = client

    def _get_client(self) -> GenerationClient:
        if self._client is not None:
            return self._client
        return GenerationClient.from_config(self.config)

    @staticmethod
    def _require_identity(identity: Optional[Identity]) -> Identity:
        if identity is None or not identity.user_id:
            raise Unauthenticated("Unauthorized")
        return identity

    @contextmanager
    def _boundary(self, operation: str, identity: Optional[Identity]) -> Iterator[None]:
        """Log failures once and convert unexpected errors to GenerationFailed."""
        user_id = identity.user_id if identity else None
        try:
            yield
        except PipelineError as e:
            logger.warning(
                f"{operation} failed for user={user_id}: [{e.code.value}] {e.message}"
            )
            raise
        except Exception as e:
            logger.exception(f"{operation} failed unexpectedly for user={user_id}")
            raise GenerationFailed(
                "Something went wrong while generating. Please try again.",
                details={"error": type(e).__name__},
            ) from e

    # ==========================
    # EXTRACTION
    # ==========================

    def extract_resume(
        self, identity: Optional[Identity], upload: UploadedDocument
    ) -> ResumeRecord:
        """
        Parse an uploaded resume document into a structured record.

        Args:
            identity: Authenticated caller
            upload: Raw file as received from the client

        Returns:
            The extracted ResumeRecord

        Raises:
            Unauthenticated, InvalidFile, ServerMisconfigured,
            GenerationFailed, MalformedExtraction
        """
        with self._boundary("extract_resume", identity):
            self._require_identity(identity)

            # Validation happens before the client exists.
            encoded = encode_document(upload, self.config.max_upload_bytes)
            prompt = self.prompts.extraction_prompt()

            raw_text = self._get_client().generate(prompt, attachment=encoded)

            try:
                record = parse_resume_record(raw_text)
            except MalformedExtraction:
                logger.debug(f"Unparseable extraction output: {raw_text!r}")
                raise

            logger.info(
                f"Extracted resume '{record.title}' for user={identity.user_id} "
                f"from {encoded.mime_type} ({encoded.size} bytes)"
            )
            return record

    # ==========================
    # TAILORING
    # ==========================

    def tailor_resume(
        self,
        identity: Optional[Identity],
        resume: ResumeRecord,
        job_description: str,
    ) -> str:
        """
        Generate a job-tailored rewrite of a resume.

        Args:
            identity: Authenticated caller
            resume: Structured resume to rewrite
            job_description: Free-text job posting

        Returns:
            Tailored resume in markdown

        Raises:
            Unauthenticated, InvalidRequest, ServerMisconfigured, GenerationFailed
        """
        with self._boundary("tailor_resume", identity):
            self._require_identity(identity)

            if not job_description or not job_description.strip():
                raise InvalidRequest("A job description is required.")

            prompt = self.prompts.tailoring_prompt(resume, job_description)
            raw_text = self._get_client().generate(prompt)
            tailored = normalize_tailored(raw_text)

            logger.info(
                f"Tailored resume '{resume.title}' for user={identity.user_id} "
                f"({len(tailored)} chars)"
            )
            return tailored

    def tailor_and_record(
        self,
        identity: Optional[Identity],
        store: TailoringStore,
        resume_id: str,
        job_description: str,
    ) -> Tuple[str, Any]:
        """
        Tailor a stored resume and append the result to its tailoring history.

        Returns:
            (tailored markdown, the persisted tailoring record)

        Raises:
            ResumeNotFound: If the resume is missing or owned by someone else
        """
        identity = self._require_identity(identity)

        resume = store.get_resume_record(identity, resume_id)
        if resume is None:
            raise ResumeNotFound("Not found", details={"resume_id": resume_id})

        tailored = self.tailor_resume(identity, resume, job_description)

        record = store.create_tailoring(
            identity,
            resume_id=resume_id,
            job_description=job_description,
            tailored_content=tailored,
        )
        return tailored, record
