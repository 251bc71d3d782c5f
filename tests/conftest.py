"""Shared test fixtures for the quiz funnel."""
import os
import tempfile

# funnel.config reads these at import time
_TMP_DIR = tempfile.mkdtemp(prefix="funnel_tests_")
os.environ.setdefault("DB_DIR", _TMP_DIR)
os.environ.setdefault("DATABASE_URL", f"sqlite:///{_TMP_DIR}/funnel.db")

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import funnel.models.db  # noqa: F401
from funnel.app import app
from funnel.database import Base, get_db
from funnel.models.db.response import QuizResponse
from funnel.models.quizzes import QuizDefinition
from funnel.services import quiz_service
from funnel.services.auth_service import create_access_token, create_user


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    yield session
    session.close()


@pytest.fixture
def client(engine):
    testing_session = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    def override_get_db():
        session = testing_session()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def admin_headers(db) -> dict[str, str]:
    user = create_user(db, "admin@example.com", "s3cret-pass")
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


@pytest.fixture
def quiz_data() -> dict:
    """Six-slide funnel; the info slide only shows for the 'energy' goal."""
    return {
        "slug": "gut-health",
        "name": "Gut Health Quiz",
        "description": "Find the right plan",
        "settings": {"allowBack": True},
        "slides": [
            {
                "id": "goal",
                "type": "text-choice",
                "content": {
                    "headline": "What is your main goal?",
                    "options": [
                        {"id": "lose", "text": "Lose weight"},
                        {"id": "energy", "text": "More energy"},
                    ],
                },
            },
            {
                "id": "symptoms",
                "type": "multi-select",
                "content": {
                    "headline": "Select all that apply",
                    "buttonText": "Continue",
                    "options": [
                        {"id": "bloat", "text": "Bloating"},
                        {"id": "fatigue", "text": "Fatigue"},
                        {"id": "cravings", "text": "Cravings"},
                    ],
                },
            },
            {
                "id": "energy-info",
                "type": "info",
                "content": {"headline": "Energy starts in the gut", "buttonText": "Continue"},
                "conditionalLogic": {"showIf": {"slideId": "goal", "optionId": "energy"}},
            },
            {
                "id": "analyzing",
                "type": "loading",
                "content": {
                    "headline": "Analyzing your answers...",
                    "items": [
                        {"text": "Processing responses...", "duration": 100},
                        {"text": "Preparing your report..."},
                    ],
                },
            },
            {
                "id": "results",
                "type": "results",
                "content": {"headline": "Your Results", "buttonText": "See my plan"},
            },
            {
                "id": "offer",
                "type": "offer",
                "content": {
                    "headline": "Special Offer Just For You",
                    "bullets": ["Benefit 1"],
                    "offerText": "Get 50% OFF today only!",
                    "ctaText": "Claim Your Discount",
                    "ctaUrl": "https://shop.example.com/checkout",
                    "buttonText": "Finish",
                },
            },
        ],
    }


@pytest.fixture
def quiz_definition(quiz_data) -> QuizDefinition:
    return QuizDefinition.model_validate(quiz_data)


@pytest.fixture
def stored_quiz(db, quiz_data):
    return quiz_service.import_quiz(db, {**quiz_data, "status": "published"})


@pytest.fixture
def make_response():
    """Build a transient QuizResponse row for analytics tests."""
    started = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)

    def _make(session_id, slide_ids, current_slide, minutes=None):
        response = QuizResponse(
            quiz_id="quiz-1",
            session_id=session_id,
            current_slide=current_slide,
            started_at=started,
            completed_at=started + timedelta(minutes=minutes) if minutes is not None else None,
        )
        response.answers = [
            {"slideId": slide_id, "slideType": "", "selectedOptions": ["x"], "timestamp": 0}
            for slide_id in slide_ids
        ]
        return response

    return _make
