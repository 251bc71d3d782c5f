"""Quiz response (session progress) endpoints."""
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, Response, status
from sqlalchemy.orm import Session as DbSession

from funnel.database import get_db
from funnel.dependencies.auth import get_current_user
from funnel.models import QuizResponseOut, ResponsePayload
from funnel.models.db.user import User
from funnel.services.quiz_service import get_quiz
from funnel.services.response_service import client_ip, list_responses, save_response
from funnel.utils import validate_id

router = APIRouter(prefix="/api/quizzes/{quiz_id}/responses", tags=["responses"])


@router.post("", response_model=QuizResponseOut)
def record_response(
    quiz_id: str,
    payload: ResponsePayload,
    request: Request,
    response: Response,
    db: Annotated[DbSession, Depends(get_db)],
) -> QuizResponseOut:
    """Create or update the response of a session (public).

    Returns 201 when the session is seen for the first time, 200 otherwise.
    """
    quiz_id = validate_id("quizId", quiz_id)
    get_quiz(db, quiz_id)

    stored, created = save_response(
        db,
        quiz_id,
        payload,
        user_agent=request.headers.get("user-agent"),
        ip_address=client_ip(request.headers.get("x-forwarded-for")),
    )
    response.status_code = status.HTTP_201_CREATED if created else status.HTTP_200_OK
    return QuizResponseOut.model_validate(stored)


@router.get("", response_model=list[QuizResponseOut])
def get_responses(
    quiz_id: str,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[DbSession, Depends(get_db)],
    limit: int | None = Query(None, ge=1, le=1000),
    offset: int = Query(0, ge=0),
) -> list[QuizResponseOut]:
    """List responses for a quiz, newest first."""
    quiz_id = validate_id("quizId", quiz_id)
    get_quiz(db, quiz_id)
    return [
        QuizResponseOut.model_validate(item)
        for item in list_responses(db, quiz_id, limit=limit, offset=offset)
    ]
