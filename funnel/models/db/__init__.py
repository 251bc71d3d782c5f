"""Database models."""
from funnel.models.db.user import User
from funnel.models.db.quiz import Quiz, QuizSlide, QuizStatus
from funnel.models.db.response import QuizResponse
from funnel.models.db.article import Article, GlobalConfig

__all__ = [
    "User",
    "Quiz",
    "QuizSlide",
    "QuizStatus",
    "QuizResponse",
    "Article",
    "GlobalConfig",
]
