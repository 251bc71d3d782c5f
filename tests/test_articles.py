import pytest
from fastapi import HTTPException

from funnel.config import DEFAULT_CTA_URL, DEFAULT_PIXEL_ID
from funnel.errors import InvalidArticleError
from funnel.models.articles import ArticleTracking
from funnel.models.db.article import Article, GlobalConfig
from funnel.services.article_service import (
    get_article,
    import_article,
    preserve_query_params,
    resolve_tracking_config,
    set_tracking_config,
    to_article_out,
)


@pytest.fixture
def article(db) -> Article:
    article = Article(
        slug="gut-secret",
        title="The Gut Secret",
        author="Dr. Jane Smith",
        cta_text="Take the quiz",
        cta_url="https://example.com/quiz/gut-health",
        sticky_cta_enabled=True,
        sticky_cta_price="$39",
    )
    article.key_takeaways = ["Fiber matters", "Sleep matters"]
    article.comments = [{"id": "c1", "author": "Ann", "content": "Helpful", "likes": 4}]
    db.add(article)
    db.add(Article(slug="plain", title="Plain article"))
    db.commit()
    return article


def test_get_article_missing(db) -> None:
    with pytest.raises(HTTPException) as exc:
        get_article(db, "missing")
    assert exc.value.status_code == 404


def test_to_article_out_uses_reader_field_names(db, article) -> None:
    out = to_article_out(get_article(db, "gut-secret"))

    assert out.ctaText == "Take the quiz"
    assert out.stickyCTAEnabled is True
    assert out.stickyCTAPrice == "$39"
    assert out.keyTakeaways == ["Fiber matters", "Sleep matters"]
    assert out.comments[0].likes == 4
    assert out.comments[0].avatar == ""


def test_tracking_config_defaults_without_config_row(db, article) -> None:
    config = resolve_tracking_config(db)
    assert config.defaultPixelId == DEFAULT_PIXEL_ID
    assert config.defaultCtaUrl == DEFAULT_CTA_URL
    assert config.articles == {}


def test_tracking_config_lists_overriding_articles(db, article) -> None:
    db.add(GlobalConfig(id=1, default_pixel_id="999", default_cta_url="https://example.com"))
    db.add(Article(slug="pixel-only", title="Pixel", pixel_id="123"))
    db.commit()

    config = resolve_tracking_config(db)

    assert config.defaultPixelId == "999"
    assert set(config.articles) == {"gut-secret", "pixel-only"}
    assert config.articles["pixel-only"].pixelId == "123"
    assert config.articles["pixel-only"].ctaUrl is None


def test_preserve_query_params_appends_missing_keys() -> None:
    url = preserve_query_params(
        "https://shop.example.com/checkout?utm_source=site",
        {"utm_source": "fb", "fbclid": "abc"},
    )
    assert url == "https://shop.example.com/checkout?utm_source=site&fbclid=abc"


@pytest.mark.parametrize("url", ["#offer", "javascript:void(0)", ""])
def test_preserve_query_params_leaves_non_links(url: str) -> None:
    assert preserve_query_params(url, {"utm_source": "fb"}) == url


def test_preserve_query_params_keeps_fragment() -> None:
    url = preserve_query_params("https://example.com/page#top", {"a": "1"})
    assert url == "https://example.com/page?a=1#top"


def test_import_article_creates_row(db) -> None:
    article = import_article(
        db,
        {
            "slug": "new-story",
            "title": "A New Story",
            "ctaUrl": "https://example.com/quiz",
            "stickyCTAEnabled": True,
            "keyTakeaways": ["One"],
            "comments": [{"id": "c1", "author": "Bo", "content": "Nice"}],
        },
    )

    assert article.id is not None
    assert article.cta_url == "https://example.com/quiz"
    assert article.sticky_cta_enabled is True
    assert article.key_takeaways == ["One"]
    assert article.comments == [
        {"id": "c1", "author": "Bo", "avatar": "", "content": "Nice", "time": "", "likes": 0}
    ]


def test_import_article_updates_only_given_fields(db, article) -> None:
    updated = import_article(db, {"slug": "gut-secret", "title": "Renamed", "comments": []})

    assert updated.id == article.id
    assert updated.title == "Renamed"
    assert updated.author == "Dr. Jane Smith"
    assert updated.cta_url == "https://example.com/quiz/gut-health"
    assert updated.key_takeaways == ["Fiber matters", "Sleep matters"]
    assert updated.comments == []


def test_import_article_rejects_missing_title(db) -> None:
    with pytest.raises(InvalidArticleError):
        import_article(db, {"slug": "no-title"})


def test_set_tracking_config_creates_and_updates_row(db, article) -> None:
    config = set_tracking_config(db, default_pixel_id="555")
    assert config.defaultPixelId == "555"
    assert config.defaultCtaUrl == DEFAULT_CTA_URL

    config = set_tracking_config(
        db,
        default_cta_url="https://example.com/offer",
        articles={
            "plain": ArticleTracking(pixelId="777"),
            "missing": ArticleTracking(pixelId="1"),
        },
    )
    assert config.defaultPixelId == "555"
    assert config.defaultCtaUrl == "https://example.com/offer"
    assert config.articles["plain"].pixelId == "777"
    assert "missing" not in config.articles
    assert db.get(GlobalConfig, 1).default_pixel_id == "555"
