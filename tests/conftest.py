"""Shared fixtures for the resume tailor test suite."""

import json
import os

# Keep the service off Postgres and its logs readable while testing.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("LOG_JSON", "false")

import pytest
from fastapi.testclient import TestClient
from langchain_core.language_models.fake_chat_models import FakeListChatModel
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from resume_service.api import app, get_pipeline
from resume_service.database import Base, build_engine, get_db
from resume_service.store import ResumeStore
from resume_tailor.client import GenerationClient
from resume_tailor.config import TailorConfig
from resume_tailor.models import Identity, ResumeRecord
from resume_tailor.pipeline import ResumePipeline

JANE_JSON = {
    "title": "Engineer Resume",
    "personalInfo": {
        "name": "Jane Doe",
        "email": "jane@x.com",
        "phone": "",
        "location": "",
    },
    "summary": "",
    "experience": "",
    "education": "",
    "skills": "Go, SQL",
    "projects": "",
}


@pytest.fixture
def jane_json():
    return json.loads(json.dumps(JANE_JSON))


@pytest.fixture
def jane_record(jane_json):
    return ResumeRecord.model_validate(jane_json)


@pytest.fixture
def sample_record():
    """A fuller resume as a user would enter it manually."""
    return ResumeRecord(
        title="Backend Engineer Resume",
        personal_info={
            "name": "Jane Doe",
            "email": "jane@example.com",
            "phone": "555-0100",
            "location": "Austin, TX",
        },
        summary="Backend engineer with six years of Go and PostgreSQL.",
        experience=(
            "Acme Corp — Senior Engineer (2020 – Present)\n"
            "- Cut p99 latency by 40%\n"
            "- Led migration to Kubernetes"
        ),
        education="BS Computer Science — UT Austin (2017)",
        skills="Go, SQL, Kubernetes",
        projects="",
    )


@pytest.fixture
def identity():
    return Identity(user_id="user_a")


@pytest.fixture
def other_identity():
    return Identity(user_id="user_b")


@pytest.fixture
def config():
    return TailorConfig(google_api_key="test-key")


def make_client(*responses: str) -> GenerationClient:
    """Generation client backed by a fake chat model with canned replies."""
    return GenerationClient(FakeListChatModel(responses=list(responses)), "fake")


@pytest.fixture
def fake_client_factory():
    return make_client


# ==========================
# DATABASE
# ==========================


@pytest.fixture
def engine():
    engine = build_engine("sqlite://", poolclass=StaticPool)
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def store(db_session):
    return ResumeStore(db_session)


# ==========================
# HTTP
# ==========================


@pytest.fixture
def pipeline_holder(config):
    """Mutable slot so a test can swap the pipeline the API uses."""
    return {"pipeline": ResumePipeline(config, client=make_client("# unused"))}


@pytest.fixture
def api_client(session_factory, pipeline_holder):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_pipeline] = lambda: pipeline_holder["pipeline"]
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    return {"X-User-Id": "user_a"}


@pytest.fixture
def other_headers():
    return {"X-User-Id": "user_b"}
