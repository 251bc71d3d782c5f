"""Quiz endpoints: public player lookup and admin listing."""
from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session as DbSession

from funnel.database import get_db
from funnel.dependencies.auth import get_current_user
from funnel.models import QuizDefinition, QuizSummary
from funnel.models.db.user import User
from funnel.services.quiz_service import get_published_quiz, list_quizzes, to_definition
from funnel.utils import validate_id

router = APIRouter(prefix="/api/quizzes", tags=["quizzes"])


@router.get("", response_model=list[QuizSummary])
def get_quizzes(
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[DbSession, Depends(get_db)],
) -> list[QuizSummary]:
    """List all quizzes with slide and response counts."""
    return list_quizzes(db)


@router.get("/by-slug/{slug}", response_model=QuizDefinition)
def get_quiz_by_slug(
    slug: str,
    db: Annotated[DbSession, Depends(get_db)],
) -> QuizDefinition:
    """Get a published quiz with its ordered slides (public)."""
    slug = validate_id("slug", slug)
    return to_definition(get_published_quiz(db, slug))
