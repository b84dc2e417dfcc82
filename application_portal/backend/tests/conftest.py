import os
import sys
from datetime import datetime

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import fitz
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from portal.core.config import settings
from portal.db.database import Base, get_db
from portal.db import models
from portal.main import app


def build_pdf(pages: int = 2, text: str = "Sample resume") -> bytes:
    """A small real PDF with one line of text per page."""
    doc = fitz.open()
    for i in range(pages):
        page = doc.new_page()
        page.insert_text((72, 72), f"{text} page {i + 1}")
    data = doc.tobytes()
    doc.close()
    return data


def pdf_text(pdf_bytes: bytes) -> str:
    with fitz.open(stream=pdf_bytes, filetype="pdf") as doc:
        return "\n".join(page.get_text() for page in doc)


def flat_text(pdf_bytes: bytes) -> str:
    """Extracted text with every whitespace run collapsed, so wrapped lines compare as prose."""
    return " ".join(pdf_text(pdf_bytes).split())


def pdf_page_count(pdf_bytes: bytes) -> int:
    with fitz.open(stream=pdf_bytes, filetype="pdf") as doc:
        return doc.page_count


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "UPLOAD_DIR", str(tmp_path / "uploads"))
    monkeypatch.setattr(settings, "GENERATED_DIR", str(tmp_path / "uploads" / "generated"))
    monkeypatch.setattr(settings, "SECRET_KEY", "test-secret-key")
    monkeypatch.setattr(settings, "ALGORITHM", "HS256")
    monkeypatch.setattr(settings, "REQUIRE_SIGNED_DOWNLOADS", True)
    monkeypatch.setattr(settings, "SUBMISSION_COOLDOWN_MINUTES", 0)
    monkeypatch.setattr(settings, "PDF_GENERATOR", "full")


@pytest.fixture
def db_session(tmp_path):
    engine = create_engine(
        f"sqlite:///{tmp_path / 'test.db'}",
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def client(db_session):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def sample_pdf_bytes() -> bytes:
    return build_pdf(pages=2)


@pytest.fixture
def make_submission():
    """Factory for unsaved submissions with deterministic content."""
    def _make(**overrides) -> models.UserSubmission:
        fields = dict(
            id="0123456789abcdef0123456789abcdef",
            first_name="Ada",
            last_name="Lovelace",
            email="ada@example.com",
            phone=None,
            job_description="Analytical engine programmer responsible for writing notes on Bernoulli numbers.",
            uploaded_file_path=None,
            uploaded_file_name=None,
            status="processing",
            created_at=datetime(2026, 10, 19, 14, 30),
        )
        fields.update(overrides)
        return models.UserSubmission(**fields)

    return _make


@pytest.fixture
def form_fields():
    return {
        "first_name": "Ada",
        "last_name": "Lovelace",
        "email": "Ada@Example.com",
        "phone": "+44 (20) 7946-0000",
        "job_description": "Senior analyst working on difference and analytical engines.",
    }
