"""Funnel analytics endpoints."""
from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.responses import Response
from sqlalchemy.orm import Session as DbSession

from funnel.database import get_db
from funnel.dependencies.auth import get_current_user
from funnel.models import QuizAnalytics
from funnel.models.db.user import User
from funnel.services.analytics_service import build_quiz_analytics, export_responses_csv
from funnel.services.quiz_service import get_quiz, to_definition
from funnel.services.response_service import list_responses
from funnel.utils import epoch_ms, validate_id

router = APIRouter(prefix="/api/quizzes/{quiz_id}/analytics", tags=["analytics"])


@router.get("", response_model=QuizAnalytics)
def get_analytics(
    quiz_id: str,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[DbSession, Depends(get_db)],
) -> QuizAnalytics:
    """Completion stats and per-slide funnel for a quiz."""
    quiz_id = validate_id("quizId", quiz_id)
    definition = to_definition(get_quiz(db, quiz_id))
    return build_quiz_analytics(definition, list_responses(db, quiz_id))


@router.get("/export")
def export_analytics(
    quiz_id: str,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[DbSession, Depends(get_db)],
) -> Response:
    """Download all responses as CSV."""
    quiz_id = validate_id("quizId", quiz_id)
    definition = to_definition(get_quiz(db, quiz_id))
    content = export_responses_csv(definition, list_responses(db, quiz_id))
    filename = f"{definition.slug}-responses-{epoch_ms()}.csv"
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
