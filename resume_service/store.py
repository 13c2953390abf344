"""
Owner-scoped persistence for resumes and their tailoring history.

Every query filters on the caller's user id, so a record owned by someone
else looks exactly like a missing one.
"""

from typing import List, Optional

from sqlalchemy import desc
from sqlalchemy.orm import Session

from resume_tailor.errors import ResumeNotFound
from resume_tailor.models import Identity, ResumeRecord

from .models import Resume, TailoredResume


class ResumeStore:
    """CRUD over resumes and append-only tailoring records."""

    def __init__(self, db: Session):
        self.db = db

    # ==========================
    # RESUMES
    # ==========================

    def create_resume(self, identity: Identity, record: ResumeRecord) -> Resume:
        resume = Resume(user_id=identity.user_id)
        resume.apply_record(record)
        self.db.add(resume)
        self.db.commit()
        self.db.refresh(resume)
        return resume

    def list_resumes(self, identity: Identity) -> List[Resume]:
        """Resumes owned by ``identity``, most recently updated first."""
        return (
            self.db.query(Resume)
            .filter(Resume.user_id == identity.user_id)
            .order_by(desc(Resume.updated_at))
            .all()
        )

    def get_resume(self, identity: Identity, resume_id: str) -> Optional[Resume]:
        return (
            self.db.query(Resume)
            .filter(Resume.id == resume_id, Resume.user_id == identity.user_id)
            .first()
        )

    def get_resume_record(
        self, identity: Identity, resume_id: str
    ) -> Optional[ResumeRecord]:
        resume = self.get_resume(identity, resume_id)
        return resume.to_record() if resume else None

    def update_resume(
        self, identity: Identity, resume_id: str, record: ResumeRecord
    ) -> Optional[Resume]:
        """Full-document replace. Returns None if the resume is not the caller's."""
        resume = self.get_resume(identity, resume_id)
        if resume is None:
            return None

        resume.apply_record(record)
        self.db.commit()
        self.db.refresh(resume)
        return resume

    def delete_resume(self, identity: Identity, resume_id: str) -> bool:
        """Delete a resume and, by cascade, its tailoring records."""
        resume = self.get_resume(identity, resume_id)
        if resume is None:
            return False

        self.db.delete(resume)
        self.db.commit()
        return True

    # ==========================
    # TAILORINGS
    # ==========================

    def create_tailoring(
        self,
        identity: Identity,
        resume_id: str,
        job_description: str,
        tailored_content: str,
    ) -> TailoredResume:
        """
        Append a tailoring record to one of the caller's resumes.

        Raises:
            ResumeNotFound: If the parent resume is not the caller's
        """
        if self.get_resume(identity, resume_id) is None:
            raise ResumeNotFound("Not found", details={"resume_id": resume_id})

        tailoring = TailoredResume(
            resume_id=resume_id,
            user_id=identity.user_id,
            job_description=job_description,
            tailored_content=tailored_content,
        )
        self.db.add(tailoring)
        self.db.commit()
        self.db.refresh(tailoring)
        return tailoring

    def list_tailorings(
        self, identity: Identity, resume_id: Optional[str] = None
    ) -> List[TailoredResume]:
        """Tailoring records owned by ``identity``, newest first."""
        query = self.db.query(TailoredResume).filter(
            TailoredResume.user_id == identity.user_id
        )
        if resume_id is not None:
            query = query.filter(TailoredResume.resume_id == resume_id)
        return query.order_by(desc(TailoredResume.created_at)).all()
