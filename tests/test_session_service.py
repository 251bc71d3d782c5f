import logging
import re
from pathlib import Path

import pytest
from fastapi import HTTPException

from funnel.models.responses import Answer
from funnel.services.sequencer import SessionState
from funnel.services.session_service import (
    LocalSessionStore,
    generate_session_id,
    session_key,
)


def test_generate_session_id_format() -> None:
    session_id = generate_session_id()
    assert re.fullmatch(r"quiz_\d{13}_[0-9a-z]{7}", session_id)
    assert generate_session_id() != session_id


def test_session_key() -> None:
    assert session_key("gut-health") == "quiz_session_gut-health"


def test_get_or_create_persists_new_session(tmp_path: Path) -> None:
    store = LocalSessionStore(tmp_path)
    state = store.get_or_create("gut-health")

    assert (tmp_path / "quiz_session_gut-health.json").exists()
    assert store.get_or_create("gut-health").session_id == state.session_id


def test_save_and_load_keeps_answers_and_position(tmp_path: Path) -> None:
    store = LocalSessionStore(tmp_path)
    state = SessionState(
        session_id="quiz_1_abcdefg",
        answers=[Answer(slideId="goal", slideType="text-choice", selectedOptions=["lose"], timestamp=5)],
        current_slide=1,
    )
    store.save("gut-health", state)

    loaded = store.load("gut-health")
    assert loaded == state


def test_clear_starts_fresh(tmp_path: Path) -> None:
    store = LocalSessionStore(tmp_path)
    first = store.get_or_create("gut-health")
    store.clear("gut-health")
    store.clear("gut-health")

    assert store.load("gut-health") is None
    assert store.get_or_create("gut-health").session_id != first.session_id


def test_load_ignores_file_without_session_id(tmp_path: Path) -> None:
    (tmp_path / "quiz_session_gut-health.json").write_text('{"answers": []}', encoding="utf-8")
    assert LocalSessionStore(tmp_path).load("gut-health") is None


def test_slug_cannot_escape_directory(tmp_path: Path) -> None:
    with pytest.raises(HTTPException):
        LocalSessionStore(tmp_path).load("../other")


@pytest.mark.parametrize(
    "content",
    [
        '{"sessionId": "quiz_1_abcdefg", "answ',
        '{"sessionId": "quiz_1_abcdefg", "answers": [{"slideId": "goal", "selectedOptions": 5}]}',
    ],
)
def test_unreadable_session_file_starts_new_session(tmp_path: Path, content: str, caplog) -> None:
    (tmp_path / "quiz_session_gut-health.json").write_text(content, encoding="utf-8")
    store = LocalSessionStore(tmp_path)

    with caplog.at_level(logging.WARNING, logger="funnel.services.session_service"):
        assert store.load("gut-health") is None
    assert "Ignoring unreadable session file" in caplog.text

    state = store.get_or_create("gut-health")
    assert store.load("gut-health").session_id == state.session_id
