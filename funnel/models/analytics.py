"""Analytics Pydantic models."""
from pydantic import BaseModel


class FunnelStep(BaseModel):
    """Reach and drop-off at one slide."""

    slideId: str
    slideIndex: int
    label: str
    reached: int
    dropOff: int
    dropOffRate: int
    percentage: int


class ResponseProgress(BaseModel):
    sessionId: str
    startedAt: str
    progress: int
    status: str


class QuizAnalytics(BaseModel):
    """Aggregate funnel statistics for one quiz."""

    quizId: str
    totalResponses: int
    completedResponses: int
    completionRate: int
    avgTimeToCompleteMinutes: int
    funnel: list[FunnelStep]
    recentResponses: list[ResponseProgress]
