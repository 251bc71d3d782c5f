"""Article and tracking config endpoints (read-only)."""
from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session as DbSession

from funnel.database import get_db
from funnel.models import ArticleOut, TrackingConfig
from funnel.services.article_service import (
    get_article,
    preserve_query_params,
    resolve_tracking_config,
    to_article_out,
)
from funnel.utils import validate_id

router = APIRouter(prefix="/api", tags=["articles"])


@router.get("/articles/{slug}", response_model=ArticleOut)
def read_article(
    slug: str,
    request: Request,
    db: Annotated[DbSession, Depends(get_db)],
) -> ArticleOut:
    """Get an article by slug.

    Query parameters of the landing URL (utm_*, fbclid, ...) are carried
    over to the CTA link.
    """
    slug = validate_id("slug", slug)
    article = to_article_out(get_article(db, slug))
    if article.ctaUrl:
        article.ctaUrl = preserve_query_params(article.ctaUrl, dict(request.query_params))
    return article


@router.get("/config", response_model=TrackingConfig)
def read_tracking_config(
    db: Annotated[DbSession, Depends(get_db)],
) -> TrackingConfig:
    """Pixel and CTA defaults with per-article overrides."""
    return resolve_tracking_config(db)
