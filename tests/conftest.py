import os

# Must be set before questify.config is imported
os.environ["DATABASE_URL"] = "sqlite://"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from questify.database import models  # noqa: F401
from questify.database.database import Base, get_db
from questify.generation.schemas import QuestionPaper
from questify.main import create_app


# Common test fixtures
@pytest.fixture
def session_factory():
    """Fresh in-memory SQLite database per test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    yield factory
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(session_factory):
    """TestClient with get_db bound to the test database."""
    app = create_app()

    def _get_test_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _get_test_db
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def api_key(monkeypatch):
    monkeypatch.setenv("GEMINI_API_KEY", "test-key")
    monkeypatch.delenv("GOOGLE_API_KEY", raising=False)
    return "test-key"


@pytest.fixture
def no_api_key(monkeypatch):
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.delenv("GOOGLE_API_KEY", raising=False)


@pytest.fixture
def auth_headers(client):
    """Sign up a user and return its Authorization header."""
    response = client.post("/api/auth/signup", json={"email": "student@example.com", "password": "secret123"})
    assert response.status_code == 201
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture
def sample_paper_data() -> dict:
    return {
        "title": "Questify - Practice Paper",
        "domainInfo": "School - Class 6",
        "instructions": "Attempt all questions.",
        "sections": [
            {
                "type": "MCQs",
                "questions": [
                    {
                        "id": 1,
                        "text": "2+2=?",
                        "options": ["3", "4", "5", "6"],
                        "marks": 1,
                        "answer": "4",
                    }
                ],
            }
        ],
    }


@pytest.fixture
def sample_paper(sample_paper_data) -> QuestionPaper:
    return QuestionPaper.model_validate(sample_paper_data)
