import csv
import io

from funnel.models.db.article import Article


def _progress(session_id: str = "quiz_1_abcdefg", **overrides) -> dict:
    payload = {"sessionId": session_id, "answers": [], "currentSlide": 0, "completed": False}
    payload.update(overrides)
    return payload


def test_health(client) -> None:
    assert client.get("/api/health").json() == {"status": "ok"}


def test_published_quiz_by_slug(client, stored_quiz) -> None:
    response = client.get("/api/quizzes/by-slug/gut-health")

    assert response.status_code == 200
    body = response.json()
    assert body["id"] == stored_quiz.id
    assert body["status"] == "published"
    assert [slide["id"] for slide in body["slides"]][:3] == ["goal", "symptoms", "energy-info"]
    assert body["slides"][2]["conditionalLogic"]["showIf"] == {"slideId": "goal", "optionId": "energy"}


def test_draft_quiz_is_not_served(client, db, quiz_data) -> None:
    from funnel.services import quiz_service

    quiz_service.import_quiz(db, quiz_data)
    response = client.get("/api/quizzes/by-slug/gut-health")

    assert response.status_code == 404
    assert response.json()["detail"] == {
        "error": "Quiz exists but is not published",
        "status": "draft",
    }
    assert client.get("/api/quizzes/by-slug/unknown").status_code == 404


def test_progress_save_creates_then_updates(client, stored_quiz) -> None:
    url = f"/api/quizzes/{stored_quiz.id}/responses"
    first = client.post(
        url,
        json=_progress(),
        headers={"User-Agent": "player/1.0", "X-Forwarded-For": "203.0.113.5, 10.0.0.1"},
    )
    assert first.status_code == 201
    assert first.json()["ip_address"] == "203.0.113.5"
    assert first.json()["user_agent"] == "player/1.0"

    answers = [{"slideId": "goal", "slideType": "text-choice", "selectedOptions": ["lose"], "timestamp": 1}]
    second = client.post(url, json=_progress(answers=answers, currentSlide=1))
    assert second.status_code == 200
    assert second.json()["id"] == first.json()["id"]
    assert second.json()["current_slide"] == 1
    assert second.json()["completed_at"] is None

    done = client.post(url, json=_progress(answers=answers, currentSlide=6, completed=True))
    assert done.json()["completed_at"] is not None


def test_progress_save_validation(client, stored_quiz) -> None:
    url = f"/api/quizzes/{stored_quiz.id}/responses"
    assert client.post(url, json={"answers": []}).status_code == 400
    assert client.post(url, json=_progress(currentSlide=-1)).status_code == 422
    assert client.post("/api/quizzes/missing/responses", json=_progress()).status_code == 404


def test_admin_endpoints_require_token(client, stored_quiz) -> None:
    assert client.get("/api/quizzes").status_code == 401
    assert client.get(f"/api/quizzes/{stored_quiz.id}/responses").status_code == 401
    assert client.get(f"/api/quizzes/{stored_quiz.id}/analytics").status_code == 401
    bad = {"Authorization": "Bearer not-a-token"}
    assert client.get("/api/quizzes", headers=bad).status_code == 401


def test_admin_lists_quizzes_and_responses(client, stored_quiz, admin_headers) -> None:
    client.post(f"/api/quizzes/{stored_quiz.id}/responses", json=_progress("first"))
    client.post(f"/api/quizzes/{stored_quiz.id}/responses", json=_progress("second"))

    quizzes = client.get("/api/quizzes", headers=admin_headers).json()
    assert quizzes[0]["slug"] == "gut-health"
    assert quizzes[0]["responseCount"] == 2

    listed = client.get(
        f"/api/quizzes/{stored_quiz.id}/responses",
        params={"limit": 1},
        headers=admin_headers,
    ).json()
    assert len(listed) == 1


def test_analytics_and_export(client, stored_quiz, admin_headers) -> None:
    url = f"/api/quizzes/{stored_quiz.id}/responses"
    answers = [{"slideId": "goal", "slideType": "text-choice", "selectedOptions": ["energy"], "timestamp": 1}]
    client.post(url, json=_progress("a", answers=answers, currentSlide=1))
    client.post(url, json=_progress("b"))

    report = client.get(f"/api/quizzes/{stored_quiz.id}/analytics", headers=admin_headers).json()
    assert report["totalResponses"] == 2
    assert report["completionRate"] == 0
    assert report["funnel"][0]["reached"] == 2
    assert report["funnel"][1]["reached"] == 1
    assert report["funnel"][1]["percentage"] == 50

    export = client.get(f"/api/quizzes/{stored_quiz.id}/analytics/export", headers=admin_headers)
    assert export.status_code == 200
    assert export.headers["content-type"].startswith("text/csv")
    assert 'filename="gut-health-responses-' in export.headers["content-disposition"]
    rows = list(csv.reader(io.StringIO(export.text)))
    assert len(rows) == 3
    assert {rows[1][0], rows[2][0]} == {"a", "b"}


def test_login_and_me(client, admin_headers) -> None:
    login = client.post(
        "/api/auth/login",
        json={"email": "Admin@Example.com", "password": "s3cret-pass"},
    )
    assert login.status_code == 200
    token = login.json()["access_token"]

    me = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.json()["email"] == "admin@example.com"

    wrong = client.post("/api/auth/login", json={"email": "admin@example.com", "password": "nope"})
    assert wrong.status_code == 401


def test_article_and_config(client, db) -> None:
    db.add(Article(slug="gut-secret", title="The Gut Secret", cta_url="https://example.com/quiz"))
    db.commit()

    article = client.get("/api/articles/gut-secret").json()
    assert article["title"] == "The Gut Secret"
    assert article["ctaUrl"] == "https://example.com/quiz"
    assert article["keyTakeaways"] == []
    assert client.get("/api/articles/nope").status_code == 404

    config = client.get("/api/config").json()
    assert "defaultPixelId" in config


def test_article_cta_keeps_landing_query_params(client, db) -> None:
    db.add(Article(slug="gut-secret", title="The Gut Secret", cta_url="https://example.com/quiz?ref=article"))
    db.add(Article(slug="no-cta", title="No CTA"))
    db.commit()

    article = client.get(
        "/api/articles/gut-secret",
        params={"utm_source": "fb", "ref": "ad"},
    ).json()
    assert article["ctaUrl"] == "https://example.com/quiz?ref=article&utm_source=fb"

    assert client.get("/api/articles/no-cta", params={"utm_source": "fb"}).json()["ctaUrl"] is None
