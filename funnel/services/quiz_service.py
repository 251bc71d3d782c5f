"""Service layer for quiz definitions."""
import logging
import uuid
from typing import Any

from fastapi import HTTPException
from pydantic import ValidationError
from sqlalchemy import func, select
from sqlalchemy.orm import Session as DBSession, selectinload

from funnel.errors import InvalidQuizError
from funnel.models.db.quiz import Quiz, QuizSlide, QuizStatus
from funnel.models.db.response import QuizResponse
from funnel.models.quizzes import (
    QuizDefinition,
    QuizSettings,
    QuizSummary,
    Slide,
    SlideType,
)

log = logging.getLogger(__name__)


def _short_id() -> str:
    return uuid.uuid4().hex[:7]


def default_first_slide() -> Slide:
    """Starter slide every new quiz gets."""
    return Slide.model_validate(
        {
            "id": _short_id(),
            "type": SlideType.TEXT_CHOICE.value,
            "content": {
                "headline": "Welcome to your quiz!",
                "subheadline": "Click to edit this slide",
                "options": [
                    {"id": "1", "text": "Option 1"},
                    {"id": "2", "text": "Option 2"},
                    {"id": "3", "text": "Option 3"},
                ],
            },
        }
    )


def get_quiz(db: DBSession, quiz_id: str) -> Quiz:
    """Get quiz by ID with slides loaded, or 404."""
    quiz = db.execute(
        select(Quiz).options(selectinload(Quiz.slides)).where(Quiz.id == quiz_id)
    ).scalar_one_or_none()
    if quiz is None:
        raise HTTPException(status_code=404, detail="Quiz not found")
    return quiz


def get_quiz_by_slug(db: DBSession, slug: str) -> Quiz | None:
    """Get quiz by slug regardless of status."""
    return db.execute(
        select(Quiz).options(selectinload(Quiz.slides)).where(Quiz.slug == slug)
    ).scalar_one_or_none()


def get_published_quiz(db: DBSession, slug: str) -> Quiz:
    """Get a published quiz by slug for the public player.

    Raises:
        HTTPException: 404 when missing, or when it exists but is not published.
    """
    quiz = get_quiz_by_slug(db, slug)
    if quiz is None:
        raise HTTPException(status_code=404, detail="Quiz not found")
    if not quiz.is_published:
        log.info("Quiz %s requested but status is %s", slug, quiz.status)
        raise HTTPException(
            status_code=404,
            detail={"error": "Quiz exists but is not published", "status": quiz.status},
        )
    return quiz


def to_definition(quiz: Quiz) -> QuizDefinition:
    """Convert a stored quiz into the player-facing definition."""
    settings = {**QuizSettings().model_dump(), **quiz.settings}
    slides = [
        {
            "id": slide.slide_id,
            "type": slide.type,
            "content": slide.content,
            "conditionalLogic": slide.conditional_logic,
        }
        for slide in sorted(quiz.slides, key=lambda item: item.slide_order)
    ]
    return QuizDefinition.model_validate(
        {
            "id": quiz.id,
            "slug": quiz.slug,
            "name": quiz.name,
            "description": quiz.description,
            "status": quiz.status,
            "settings": settings,
            "slides": slides,
        }
    )


def list_quizzes(db: DBSession) -> list[QuizSummary]:
    """List all quizzes, newest first, with slide and response counts."""
    slide_counts = dict(
        db.execute(
            select(QuizSlide.quiz_id, func.count(QuizSlide.id)).group_by(QuizSlide.quiz_id)
        ).all()
    )
    response_counts = dict(
        db.execute(
            select(QuizResponse.quiz_id, func.count(QuizResponse.id)).group_by(
                QuizResponse.quiz_id
            )
        ).all()
    )
    quizzes = db.execute(select(Quiz).order_by(Quiz.created_at.desc())).scalars().all()
    return [
        QuizSummary(
            id=quiz.id,
            slug=quiz.slug,
            name=quiz.name,
            description=quiz.description,
            status=quiz.status,
            settings=quiz.settings,
            slideCount=slide_counts.get(quiz.id, 0),
            responseCount=response_counts.get(quiz.id, 0),
        )
        for quiz in quizzes
    ]


def create_quiz(
    db: DBSession,
    name: str,
    slug: str,
    description: str | None = None,
    settings: dict[str, Any] | None = None,
    with_default_slide: bool = True,
) -> Quiz:
    """Create a draft quiz, optionally seeded with a starter slide."""
    name = (name or "").strip()
    slug = (slug or "").strip()
    if not name or not slug:
        raise HTTPException(status_code=400, detail="Name and slug are required")
    if get_quiz_by_slug(db, slug) is not None:
        raise HTTPException(status_code=400, detail="A quiz with this slug already exists")

    quiz = Quiz(
        name=name,
        slug=slug,
        description=description or None,
        status=QuizStatus.DRAFT.value,
    )
    quiz.settings = settings or QuizSettings().model_dump()
    db.add(quiz)
    db.flush()

    if with_default_slide:
        _add_slides(db, quiz, [default_first_slide()])

    db.commit()
    db.refresh(quiz)
    log.info("Created quiz %s (%s)", quiz.slug, quiz.id)
    return quiz


def _add_slides(db: DBSession, quiz: Quiz, slides: list[Slide]) -> None:
    for index, slide in enumerate(slides):
        row = QuizSlide(
            quiz_id=quiz.id,
            slide_id=slide.id,
            slide_order=index,
            type=slide.type.value,
        )
        row.content = slide.content.model_dump(exclude_none=True)
        row.conditional_logic = (
            slide.conditionalLogic.model_dump(exclude_none=True)
            if slide.conditionalLogic and slide.conditionalLogic.showIf
            else None
        )
        db.add(row)


def replace_slides(db: DBSession, quiz: Quiz, slides: list[Slide]) -> Quiz:
    """Replace all slides of a quiz, keeping the given order."""
    quiz.slides.clear()
    db.flush()
    _add_slides(db, quiz, slides)
    db.commit()
    db.expire(quiz, ["slides"])
    return quiz


def set_status(db: DBSession, quiz: Quiz, status: QuizStatus) -> Quiz:
    """Change publication status."""
    quiz.status = QuizStatus(status).value
    db.commit()
    db.refresh(quiz)
    log.info("Quiz %s is now %s", quiz.slug, quiz.status)
    return quiz


def dangling_references(definition: QuizDefinition) -> list[str]:
    """Describe showIf rules that can never be satisfied.

    A rule must point at an earlier slide and at one of its options;
    anything else leaves the referencing slide permanently hidden.
    """
    problems: list[str] = []
    seen: dict[str, Slide] = {}
    for slide in definition.slides:
        logic = slide.conditionalLogic
        if logic and logic.showIf:
            target = seen.get(logic.showIf.slideId)
            if target is None:
                problems.append(
                    f"slide {slide.id} depends on {logic.showIf.slideId}, "
                    "which is not an earlier slide"
                )
            elif logic.showIf.optionId not in target.option_ids():
                problems.append(
                    f"slide {slide.id} depends on option {logic.showIf.optionId} "
                    f"missing from slide {target.id}"
                )
        seen[slide.id] = slide
    return problems


def parse_definition(data: dict[str, Any]) -> QuizDefinition:
    """Validate a raw quiz definition."""
    try:
        return QuizDefinition.model_validate(data)
    except ValidationError as exc:
        raise InvalidQuizError(str(exc)) from exc


def import_quiz(db: DBSession, data: dict[str, Any]) -> Quiz:
    """Create or update a quiz (matched by slug) from a JSON definition."""
    definition = parse_definition(data)
    for problem in dangling_references(definition):
        log.warning("Quiz %s: %s", definition.slug, problem)

    quiz = get_quiz_by_slug(db, definition.slug)
    if quiz is None:
        quiz = create_quiz(
            db,
            definition.name,
            definition.slug,
            definition.description,
            definition.settings.model_dump(),
            with_default_slide=not definition.slides,
        )
    else:
        quiz.name = definition.name
        quiz.description = definition.description
        quiz.settings = definition.settings.model_dump()
        log.info("Updating quiz %s (%s)", quiz.slug, quiz.id)

    if definition.slides:
        replace_slides(db, quiz, definition.slides)
    # Re-importing a file without a status keeps the quiz live
    if "status" in definition.model_fields_set and quiz.status != definition.status.value:
        set_status(db, quiz, definition.status)
    db.commit()
    return get_quiz(db, quiz.id)
