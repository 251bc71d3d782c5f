"""Service layer for quiz responses."""
import logging

from fastapi import HTTPException
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session as DBSession

from funnel.models.db.response import QuizResponse
from funnel.models.responses import ResponsePayload
from funnel.utils import utc_now, validate_id

log = logging.getLogger(__name__)


def client_ip(forwarded_for: str | None) -> str | None:
    """First address of an X-Forwarded-For header."""
    if not forwarded_for:
        return None
    first = forwarded_for.split(",")[0].strip()
    return first or None


def get_response(db: DBSession, quiz_id: str, session_id: str) -> QuizResponse | None:
    """Get the response of one session for a quiz."""
    return db.execute(
        select(QuizResponse).where(
            QuizResponse.quiz_id == quiz_id,
            QuizResponse.session_id == session_id,
        )
    ).scalar_one_or_none()


def _apply_progress(response: QuizResponse, payload: ResponsePayload) -> None:
    response.current_slide = payload.currentSlide
    response.answers = [answer.model_dump() for answer in payload.answers]
    if payload.completed and response.completed_at is None:
        response.completed_at = utc_now()


def save_response(
    db: DBSession,
    quiz_id: str,
    payload: ResponsePayload,
    user_agent: str | None = None,
    ip_address: str | None = None,
) -> tuple[QuizResponse, bool]:
    """
    Create or update the response for (quiz, session).

    The client always sends the full answer list, so an update replaces
    answers and position. Completion time is set once, on the first save
    flagged as completed. When another request created the row first, the
    save falls back to updating it.

    Returns:
        Tuple of (response, created)
    """
    if not payload.sessionId:
        raise HTTPException(status_code=400, detail="Session ID is required")
    session_id = validate_id("sessionId", payload.sessionId)

    response = get_response(db, quiz_id, session_id)
    created = response is None

    if response is None:
        response = QuizResponse(
            quiz_id=quiz_id,
            session_id=session_id,
            user_agent=user_agent,
            ip_address=ip_address,
        )
        _apply_progress(response, payload)
        db.add(response)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            log.info("Response %s for quiz %s already exists, updating", session_id, quiz_id)
            response = get_response(db, quiz_id, session_id)
            if response is None:
                raise
            created = False

    if not created:
        _apply_progress(response, payload)
        db.commit()

    db.refresh(response)
    log.debug(
        "%s response %s for quiz %s at slide %s",
        "Created" if created else "Updated",
        session_id,
        quiz_id,
        response.current_slide,
    )
    return response, created


def list_responses(
    db: DBSession,
    quiz_id: str,
    limit: int | None = None,
    offset: int = 0,
) -> list[QuizResponse]:
    """All responses for a quiz, newest first."""
    query = (
        select(QuizResponse)
        .where(QuizResponse.quiz_id == quiz_id)
        .order_by(QuizResponse.started_at.desc(), QuizResponse.id.desc())
        .offset(offset)
    )
    if limit is not None:
        query = query.limit(limit)
    return list(db.execute(query).scalars().all())

