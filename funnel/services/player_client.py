"""HTTP client used by the terminal player to talk to the quiz API."""
from __future__ import annotations

import logging

import requests

from funnel.config import PLAYER_TIMEOUT_SECONDS
from funnel.models.quizzes import QuizDefinition
from funnel.services.sequencer import ProgressCallback, SessionState
from funnel.services.session_service import LocalSessionStore

log = logging.getLogger(__name__)


class QuizNotAvailable(Exception):
    """The API has no published quiz for the slug."""


class FunnelApiClient:
    def __init__(self, base_url: str, timeout: int = PLAYER_TIMEOUT_SECONDS):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers.update({"Accept": "application/json"})

    def fetch_quiz(self, slug: str) -> QuizDefinition:
        response = self.session.get(
            f"{self.base_url}/api/quizzes/by-slug/{slug}", timeout=self.timeout
        )
        if response.status_code == 404:
            detail = response.json().get("detail")
            if isinstance(detail, dict):
                detail = detail.get("error")
            raise QuizNotAvailable(detail or "Quiz not found")
        response.raise_for_status()
        return QuizDefinition.model_validate(response.json())

    def save_progress(self, quiz_id: str, state: SessionState, completed: bool) -> dict:
        payload = state.to_dict()
        payload["completed"] = completed
        response = self.session.post(
            f"{self.base_url}/api/quizzes/{quiz_id}/responses",
            json=payload,
            timeout=self.timeout,
        )
        response.raise_for_status()
        return response.json()


def progress_saver(
    store: LocalSessionStore,
    slug: str,
    client: FunnelApiClient,
    quiz_id: str,
) -> ProgressCallback:
    """Build a callback that saves locally first, then to the API.

    The server copy is best effort: a failed request is logged and the
    respondent keeps going on the local copy.
    """

    def save(state: SessionState, completed: bool) -> None:
        store.save(slug, state)
        try:
            client.save_progress(quiz_id, state, completed)
        except requests.RequestException as exc:
            log.warning("Failed to save progress for %s: %s", state.session_id, exc)

    return save
