"""API route modules."""
from funnel.routes import analytics, articles, auth, quizzes, responses

__all__ = ["analytics", "articles", "auth", "quizzes", "responses"]
