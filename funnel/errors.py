"""Domain errors raised by the quiz funnel runtime."""


class FunnelError(Exception):
    """Base class for quiz funnel errors."""


class InvalidQuizError(FunnelError):
    """Quiz definition failed validation."""


class InvalidSelectionError(FunnelError):
    """Selected options do not fit the current slide."""


class QuizCompletedError(FunnelError):
    """The session has already moved past the last slide."""


class InvalidArticleError(FunnelError):
    """Article definition failed validation."""
