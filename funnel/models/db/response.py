"""
QuizResponse database model: one row per (quiz, session).
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

import sqlalchemy as sa
from sqlalchemy import ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from funnel.database import Base

if TYPE_CHECKING:
    from funnel.models.db.quiz import Quiz


class QuizResponse(Base):
    """
    Respondent progress through a quiz.
    Answers are the full ordered list sent by the client on every save.
    """

    __tablename__ = "quiz_responses"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    quiz_id: Mapped[str] = mapped_column(
        ForeignKey("quizzes.id", ondelete="CASCADE"), nullable=False, index=True
    )
    session_id: Mapped[str] = mapped_column(String(128), nullable=False, index=True)

    answers_json: Mapped[str | None] = mapped_column(Text, nullable=True)
    current_slide: Mapped[int] = mapped_column(default=0, nullable=False)

    started_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
    completed_at: Mapped[datetime | None] = mapped_column(
        sa.DateTime(timezone=True), nullable=True
    )

    # Request metadata captured on first save
    user_agent: Mapped[str | None] = mapped_column(String(512), nullable=True)
    ip_address: Mapped[str | None] = mapped_column(String(64), nullable=True)

    __table_args__ = (
        UniqueConstraint("quiz_id", "session_id", name="uq_quiz_session"),
    )

    quiz: Mapped["Quiz"] = relationship("Quiz", back_populates="responses")

    @property
    def answers(self) -> list[dict[str, Any]]:
        """Parse answers from JSON."""
        if not self.answers_json:
            return []
        try:
            value = json.loads(self.answers_json)
        except (json.JSONDecodeError, TypeError):
            return []
        return value if isinstance(value, list) else []

    @answers.setter
    def answers(self, value: list[dict[str, Any]] | None) -> None:
        """Serialize answers to JSON."""
        self.answers_json = json.dumps(value or [])

    @property
    def is_completed(self) -> bool:
        return self.completed_at is not None
