"""
Quiz and QuizSlide database models for quiz funnels.
"""

from __future__ import annotations

import enum
import json
import uuid
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

import sqlalchemy as sa
from sqlalchemy import ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from funnel.database import Base

if TYPE_CHECKING:
    from funnel.models.db.response import QuizResponse


class QuizStatus(str, enum.Enum):
    """Publication status of a quiz."""

    DRAFT = "draft"
    PUBLISHED = "published"
    ARCHIVED = "archived"


def _new_id() -> str:
    return uuid.uuid4().hex


def _load_json(raw: str | None, default: Any) -> Any:
    if not raw:
        return default
    try:
        return json.loads(raw)
    except (json.JSONDecodeError, TypeError):
        return default


class Quiz(Base):
    """
    Quiz funnel record.
    Holds display settings; slides live in quiz_slides ordered by slide_order.
    """

    __tablename__ = "quizzes"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=_new_id)
    slug: Mapped[str] = mapped_column(String(200), unique=True, index=True, nullable=False)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(
        String(20), default=QuizStatus.DRAFT.value, nullable=False, index=True
    )

    # Settings (stored as JSON string)
    settings_json: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    # Relationships
    slides: Mapped[list["QuizSlide"]] = relationship(
        "QuizSlide",
        back_populates="quiz",
        cascade="all, delete-orphan",
        order_by="QuizSlide.slide_order",
    )
    responses: Mapped[list["QuizResponse"]] = relationship(
        "QuizResponse", back_populates="quiz", cascade="all, delete-orphan"
    )

    @property
    def settings(self) -> dict[str, Any]:
        """Parse settings from JSON."""
        return _load_json(self.settings_json, {})

    @settings.setter
    def settings(self, value: dict[str, Any] | None) -> None:
        """Serialize settings to JSON."""
        self.settings_json = json.dumps(value) if value else None

    @property
    def is_published(self) -> bool:
        return self.status == QuizStatus.PUBLISHED.value

    def __repr__(self) -> str:
        return f"<Quiz(id={self.id}, slug='{self.slug}', status='{self.status}')>"


class QuizSlide(Base):
    """
    One slide of a quiz funnel.
    The content shape depends on the slide type.
    """

    __tablename__ = "quiz_slides"

    # Slide ids are chosen by the quiz author and referenced by answers,
    # so the primary key is a surrogate and slide_id is unique per quiz.
    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    quiz_id: Mapped[str] = mapped_column(
        ForeignKey("quizzes.id", ondelete="CASCADE"), nullable=False, index=True
    )
    slide_id: Mapped[str] = mapped_column(String(64), nullable=False)
    slide_order: Mapped[int] = mapped_column(nullable=False)
    type: Mapped[str] = mapped_column(String(32), nullable=False)

    content_json: Mapped[str | None] = mapped_column(Text, nullable=True)
    conditional_logic_json: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        UniqueConstraint("quiz_id", "slide_id", name="uq_quiz_slide"),
    )

    quiz: Mapped["Quiz"] = relationship("Quiz", back_populates="slides")

    @property
    def content(self) -> dict[str, Any]:
        """Parse content from JSON."""
        return _load_json(self.content_json, {})

    @content.setter
    def content(self, value: dict[str, Any] | None) -> None:
        """Serialize content to JSON."""
        self.content_json = json.dumps(value) if value else None

    @property
    def conditional_logic(self) -> dict[str, Any] | None:
        """Parse conditional display rule from JSON."""
        return _load_json(self.conditional_logic_json, None)

    @conditional_logic.setter
    def conditional_logic(self, value: dict[str, Any] | None) -> None:
        """Serialize conditional display rule to JSON."""
        self.conditional_logic_json = json.dumps(value) if value else None
