"""Client-side quiz session bookkeeping."""
import json
import logging
import secrets
import string
from pathlib import Path

from pydantic import ValidationError

from funnel.services.sequencer import SessionState
from funnel.utils import epoch_ms, read_json_file, validate_id, write_json_file

log = logging.getLogger(__name__)

_BASE36 = string.digits + string.ascii_lowercase


def generate_session_id() -> str:
    """New session id: quiz_<epoch ms>_<7 base-36 chars>."""
    suffix = "".join(secrets.choice(_BASE36) for _ in range(7))
    return f"quiz_{epoch_ms()}_{suffix}"


def session_key(slug: str) -> str:
    """Storage key of the session for a quiz slug."""
    return f"quiz_session_{slug}"


class LocalSessionStore:
    """Keeps one in-progress session per quiz slug as JSON files in a directory."""

    def __init__(self, directory: Path):
        self.directory = Path(directory)

    def _path(self, slug: str) -> Path:
        slug = validate_id("slug", slug)
        return self.directory / f"{session_key(slug)}.json"

    def load(self, slug: str) -> SessionState | None:
        path = self._path(slug)
        try:
            data = read_json_file(path, None)
            if not isinstance(data, dict) or not data.get("sessionId"):
                return None
            return SessionState.from_dict(data)
        except (json.JSONDecodeError, ValidationError) as exc:
            log.warning("Ignoring unreadable session file %s: %s", path, exc)
            return None

    def save(self, slug: str, state: SessionState) -> None:
        write_json_file(self._path(slug), state.to_dict())

    def clear(self, slug: str) -> None:
        self._path(slug).unlink(missing_ok=True)

    def get_or_create(self, slug: str) -> SessionState:
        """Resume the stored session for a quiz or start a new one."""
        state = self.load(slug)
        if state is not None:
            log.debug("Resuming session %s for %s", state.session_id, slug)
            return state
        state = SessionState(session_id=generate_session_id())
        self.save(slug, state)
        log.info("Started session %s for %s", state.session_id, slug)
        return state
