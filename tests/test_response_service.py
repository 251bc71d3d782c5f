import pytest
from fastapi import HTTPException

from funnel.models.responses import Answer, ResponsePayload
from funnel.services.response_service import client_ip, list_responses, save_response


def _payload(**overrides) -> ResponsePayload:
    data = {"sessionId": "quiz_1_abcdefg", "answers": [], "currentSlide": 0}
    data.update(overrides)
    return ResponsePayload.model_validate(data)


def test_first_save_creates_response(db, stored_quiz) -> None:
    response, created = save_response(
        db, stored_quiz.id, _payload(), user_agent="pytest", ip_address="10.0.0.1"
    )

    assert created is True
    assert response.session_id == "quiz_1_abcdefg"
    assert response.user_agent == "pytest"
    assert response.ip_address == "10.0.0.1"
    assert response.completed_at is None


def test_second_save_updates_same_row(db, stored_quiz) -> None:
    first, _ = save_response(db, stored_quiz.id, _payload())
    answers = [Answer(slideId="goal", slideType="text-choice", selectedOptions=["lose"], timestamp=1)]
    second, created = save_response(
        db, stored_quiz.id, _payload(answers=answers, currentSlide=1), user_agent="other"
    )

    assert created is False
    assert second.id == first.id
    assert second.current_slide == 1
    assert second.answers[0]["selectedOptions"] == ["lose"]
    assert second.user_agent is None
    assert len(list_responses(db, stored_quiz.id)) == 1


def test_completion_time_is_kept_from_first_completion(db, stored_quiz) -> None:
    done, _ = save_response(db, stored_quiz.id, _payload(currentSlide=6, completed=True))
    completed_at = done.completed_at
    assert completed_at is not None

    again, _ = save_response(db, stored_quiz.id, _payload(currentSlide=6, completed=True))
    assert again.completed_at == completed_at


def test_session_id_is_required(db, stored_quiz) -> None:
    with pytest.raises(HTTPException) as exc:
        save_response(db, stored_quiz.id, ResponsePayload())
    assert exc.value.detail == "Session ID is required"


def test_sessions_are_scoped_per_quiz(db, stored_quiz, quiz_data) -> None:
    from funnel.services import quiz_service

    other = quiz_service.import_quiz(db, {**quiz_data, "slug": "other"})
    save_response(db, stored_quiz.id, _payload())
    _, created = save_response(db, other.id, _payload())
    assert created is True


def test_client_ip_takes_first_forwarded_address() -> None:
    assert client_ip("203.0.113.5, 10.0.0.1") == "203.0.113.5"
    assert client_ip(None) is None
    assert client_ip("") is None


def test_concurrent_first_save_updates_existing_row(db, stored_quiz, monkeypatch: pytest.MonkeyPatch) -> None:
    from funnel.services import response_service

    existing, _ = save_response(db, stored_quiz.id, _payload(), user_agent="first")
    real_get_response = response_service.get_response
    lookups: list[str] = []

    def stale_lookup(db, quiz_id, session_id):
        # The first lookup misses the row another request just inserted
        lookups.append(session_id)
        if len(lookups) == 1:
            return None
        return real_get_response(db, quiz_id, session_id)

    monkeypatch.setattr(response_service, "get_response", stale_lookup)

    response, created = save_response(db, stored_quiz.id, _payload(currentSlide=2), user_agent="second")

    assert created is False
    assert response.id == existing.id
    assert response.current_slide == 2
    assert response.user_agent == "first"
    assert len(list_responses(db, stored_quiz.id)) == 1
