"""Pydantic models."""
from funnel.models.analytics import FunnelStep, QuizAnalytics, ResponseProgress
from funnel.models.articles import (
    ArticleIn,
    ArticleOut,
    ArticleTracking,
    Comment,
    TrackingConfig,
)
from funnel.models.auth import TokenResponse, UserLogin, UserResponse
from funnel.models.quizzes import (
    ConditionalLogic,
    QuizDefinition,
    QuizSettings,
    QuizSummary,
    ShowIf,
    Slide,
    SlideContent,
    SlideOption,
    SlideType,
)
from funnel.models.responses import Answer, QuizResponseOut, ResponsePayload

__all__ = [
    "Answer",
    "ArticleIn",
    "ArticleOut",
    "ArticleTracking",
    "Comment",
    "ConditionalLogic",
    "FunnelStep",
    "QuizAnalytics",
    "QuizDefinition",
    "QuizResponseOut",
    "QuizSettings",
    "QuizSummary",
    "ResponsePayload",
    "ResponseProgress",
    "ShowIf",
    "Slide",
    "SlideContent",
    "SlideOption",
    "SlideType",
    "TokenResponse",
    "TrackingConfig",
    "UserLogin",
    "UserResponse",
]
