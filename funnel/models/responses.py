"""Response-related Pydantic models."""
from datetime import datetime

from pydantic import BaseModel, Field


class Answer(BaseModel):
    """Options picked on one slide."""

    slideId: str = Field(..., min_length=1)
    slideType: str = ""
    selectedOptions: list[str] = Field(default_factory=list)
    timestamp: int = 0  # epoch milliseconds


class ResponsePayload(BaseModel):
    """Progress save sent by the player after every step."""

    sessionId: str | None = None
    answers: list[Answer] = Field(default_factory=list)
    currentSlide: int = Field(0, ge=0)
    completed: bool = False


class QuizResponseOut(BaseModel):
    """Stored response as returned by the API."""

    id: int
    quiz_id: str
    session_id: str
    answers: list[dict[str, object]]
    current_slide: int
    started_at: datetime
    completed_at: datetime | None
    user_agent: str | None
    ip_address: str | None

    class Config:
        from_attributes = True
