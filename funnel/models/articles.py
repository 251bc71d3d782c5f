"""Article-related Pydantic models."""
from pydantic import BaseModel, Field


class Comment(BaseModel):
    """Social-proof comment shown under an article."""

    id: str
    author: str
    avatar: str = ""
    content: str
    time: str = ""
    likes: int = 0
    hasReplies: bool | None = None
    isLiked: bool | None = None


class ArticleOut(BaseModel):
    """Article as served to the reader page."""

    slug: str
    title: str
    subtitle: str | None = None
    content: str | None = None
    author: str | None = None
    reviewer: str | None = None
    date: str | None = None
    image: str | None = None
    ctaText: str | None = None
    ctaTitle: str | None = None
    ctaDescription: str | None = None
    ctaUrl: str | None = None
    pixelId: str | None = None
    keyTakeaways: list[str] = Field(default_factory=list)
    comments: list[Comment] = Field(default_factory=list)
    stickyCTAEnabled: bool = False
    stickyCTAText: str | None = None
    stickyCTAPrice: str | None = None
    stickyCTAOriginalPrice: str | None = None
    stickyCTAProductName: str | None = None
    articleTheme: str | None = None


class ArticleTracking(BaseModel):
    pixelId: str | None = None
    ctaUrl: str | None = None


class TrackingConfig(BaseModel):
    """Pixel and CTA defaults plus per-article overrides."""

    defaultPixelId: str | None
    defaultCtaUrl: str | None
    articles: dict[str, ArticleTracking] = Field(default_factory=dict)


class ArticleIn(ArticleOut):
    """Article definition loaded from a JSON file."""

    slug: str = Field(..., min_length=1, max_length=200)
    title: str = Field(..., min_length=1, max_length=500)
