"""Service layer for advertorial articles and tracking config."""
import logging
from typing import Any, Iterable, Mapping
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from fastapi import HTTPException
from pydantic import ValidationError
from sqlalchemy import or_, select
from sqlalchemy.orm import Session as DBSession

from funnel.config import DEFAULT_CTA_URL, DEFAULT_PIXEL_ID
from funnel.errors import InvalidArticleError
from funnel.models.articles import ArticleIn, ArticleOut, ArticleTracking, TrackingConfig
from funnel.models.db.article import Article, GlobalConfig

log = logging.getLogger(__name__)

GLOBAL_CONFIG_ID = 1

# Reader field name -> Article column
ARTICLE_COLUMNS = {
    "title": "title",
    "subtitle": "subtitle",
    "content": "content",
    "author": "author",
    "reviewer": "reviewer",
    "date": "date",
    "image": "image",
    "ctaText": "cta_text",
    "ctaTitle": "cta_title",
    "ctaDescription": "cta_description",
    "ctaUrl": "cta_url",
    "pixelId": "pixel_id",
    "stickyCTAEnabled": "sticky_cta_enabled",
    "stickyCTAText": "sticky_cta_text",
    "stickyCTAPrice": "sticky_cta_price",
    "stickyCTAOriginalPrice": "sticky_cta_original_price",
    "stickyCTAProductName": "sticky_cta_product_name",
    "articleTheme": "article_theme",
}


def get_article(db: DBSession, slug: str) -> Article:
    """Get article by slug, or 404."""
    article = db.execute(select(Article).where(Article.slug == slug)).scalar_one_or_none()
    if article is None:
        raise HTTPException(status_code=404, detail="Article not found")
    return article


def to_article_out(article: Article) -> ArticleOut:
    """Map the snake_case row onto the camelCase reader payload."""
    return ArticleOut(
        slug=article.slug,
        title=article.title,
        subtitle=article.subtitle,
        content=article.content,
        author=article.author,
        reviewer=article.reviewer,
        date=article.date,
        image=article.image,
        ctaText=article.cta_text,
        ctaTitle=article.cta_title,
        ctaDescription=article.cta_description,
        ctaUrl=article.cta_url,
        pixelId=article.pixel_id,
        keyTakeaways=article.key_takeaways,
        comments=article.comments,
        stickyCTAEnabled=article.sticky_cta_enabled,
        stickyCTAText=article.sticky_cta_text,
        stickyCTAPrice=article.sticky_cta_price,
        stickyCTAOriginalPrice=article.sticky_cta_original_price,
        stickyCTAProductName=article.sticky_cta_product_name,
        articleTheme=article.article_theme,
    )


def resolve_tracking_config(db: DBSession) -> TrackingConfig:
    """Global pixel/CTA defaults plus articles that override them."""
    config = db.get(GlobalConfig, GLOBAL_CONFIG_ID)
    if config is None:
        log.debug("No global config row; using built-in tracking defaults")
        return TrackingConfig(defaultPixelId=DEFAULT_PIXEL_ID, defaultCtaUrl=DEFAULT_CTA_URL)

    rows = db.execute(
        select(Article.slug, Article.pixel_id, Article.cta_url).where(
            or_(Article.pixel_id.is_not(None), Article.cta_url.is_not(None))
        )
    ).all()
    overrides = {
        slug: ArticleTracking(pixelId=pixel_id, ctaUrl=cta_url)
        for slug, pixel_id, cta_url in rows
        if pixel_id or cta_url
    }
    return TrackingConfig(
        defaultPixelId=config.default_pixel_id,
        defaultCtaUrl=config.default_cta_url,
        articles=overrides,
    )


def _apply_article_fields(article: Article, data: ArticleIn, fields: Iterable[str]) -> None:
    for name in fields:
        value = getattr(data, name)
        if name == "keyTakeaways":
            article.key_takeaways = value
        elif name == "comments":
            article.comments = [comment.model_dump(exclude_none=True) for comment in value]
        elif name in ARTICLE_COLUMNS:
            setattr(article, ARTICLE_COLUMNS[name], value)


def import_article(db: DBSession, data: dict[str, Any]) -> Article:
    """Create or update an article (matched by slug) from a JSON definition.

    On update only the keys present in the definition are changed.
    """
    try:
        definition = ArticleIn.model_validate(data)
    except ValidationError as exc:
        raise InvalidArticleError(str(exc)) from exc

    article = db.execute(
        select(Article).where(Article.slug == definition.slug)
    ).scalar_one_or_none()
    if article is None:
        article = Article(slug=definition.slug, title=definition.title)
        db.add(article)
        fields = set(ArticleIn.model_fields)
        log.info("Creating article %s", definition.slug)
    else:
        fields = set(definition.model_fields_set)
        log.info("Updating article %s", definition.slug)

    fields.discard("slug")
    _apply_article_fields(article, definition, fields)
    db.commit()
    db.refresh(article)
    return article


def set_tracking_config(
    db: DBSession,
    default_pixel_id: str | None = None,
    default_cta_url: str | None = None,
    articles: Mapping[str, ArticleTracking] | None = None,
) -> TrackingConfig:
    """
    Update the global pixel/CTA defaults and per-article overrides.

    Arguments left as None keep their stored value. Overrides for unknown
    article slugs are skipped.
    """
    config = db.get(GlobalConfig, GLOBAL_CONFIG_ID)
    if config is None:
        config = GlobalConfig(
            id=GLOBAL_CONFIG_ID,
            default_pixel_id=DEFAULT_PIXEL_ID,
            default_cta_url=DEFAULT_CTA_URL,
        )
        db.add(config)
    if default_pixel_id is not None:
        config.default_pixel_id = default_pixel_id
    if default_cta_url is not None:
        config.default_cta_url = default_cta_url

    for slug, tracking in (articles or {}).items():
        article = db.execute(select(Article).where(Article.slug == slug)).scalar_one_or_none()
        if article is None:
            log.warning("Skipping tracking override for unknown article %s", slug)
            continue
        article.pixel_id = tracking.pixelId
        article.cta_url = tracking.ctaUrl

    db.commit()
    log.info("Tracking defaults: pixel %s, CTA %s", config.default_pixel_id, config.default_cta_url)
    return resolve_tracking_config(db)


def preserve_query_params(url: str, params: Mapping[str, str]) -> str:
    """
    Carry landing-page query parameters (utm_*, fbclid, ...) over to an
    outbound link. Keys already on the link win; anchors and javascript:
    links are returned untouched.
    """
    if not url or not params or url.startswith("#") or url.lower().startswith("javascript:"):
        return url

    parts = urlsplit(url)
    query = parse_qsl(parts.query, keep_blank_values=True)
    existing = {key for key, _ in query}
    for key, value in params.items():
        if key not in existing:
            query.append((key, value))
            existing.add(key)
    return urlunsplit(parts._replace(query=urlencode(query)))
