"""Article and GlobalConfig database models."""
from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from funnel.database import Base


class Article(Base):
    """Advertorial article addressed by slug."""

    __tablename__ = "articles"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    slug: Mapped[str] = mapped_column(String(200), unique=True, index=True, nullable=False)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    subtitle: Mapped[str | None] = mapped_column(Text, nullable=True)
    content: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Byline
    author: Mapped[str | None] = mapped_column(String(200), nullable=True)
    reviewer: Mapped[str | None] = mapped_column(String(200), nullable=True)
    date: Mapped[str | None] = mapped_column(String(64), nullable=True)
    image: Mapped[str | None] = mapped_column(String(1000), nullable=True)

    # Call to action
    cta_text: Mapped[str | None] = mapped_column(String(200), nullable=True)
    cta_title: Mapped[str | None] = mapped_column(String(500), nullable=True)
    cta_description: Mapped[str | None] = mapped_column(Text, nullable=True)
    cta_url: Mapped[str | None] = mapped_column(String(1000), nullable=True)

    # Sticky CTA bar
    sticky_cta_enabled: Mapped[bool] = mapped_column(default=False, nullable=False)
    sticky_cta_text: Mapped[str | None] = mapped_column(String(200), nullable=True)
    sticky_cta_price: Mapped[str | None] = mapped_column(String(64), nullable=True)
    sticky_cta_original_price: Mapped[str | None] = mapped_column(String(64), nullable=True)
    sticky_cta_product_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    article_theme: Mapped[str | None] = mapped_column(String(64), nullable=True)

    # Tracking
    pixel_id: Mapped[str | None] = mapped_column(String(64), nullable=True)

    key_takeaways_json: Mapped[str | None] = mapped_column(Text, nullable=True)
    comments_json: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=False
    )

    @property
    def key_takeaways(self) -> list[str]:
        if not self.key_takeaways_json:
            return []
        try:
            return json.loads(self.key_takeaways_json)
        except (json.JSONDecodeError, TypeError):
            return []

    @key_takeaways.setter
    def key_takeaways(self, value: list[str] | None) -> None:
        self.key_takeaways_json = json.dumps(value) if value else None

    @property
    def comments(self) -> list[dict[str, Any]]:
        if not self.comments_json:
            return []
        try:
            return json.loads(self.comments_json)
        except (json.JSONDecodeError, TypeError):
            return []

    @comments.setter
    def comments(self, value: list[dict[str, Any]] | None) -> None:
        self.comments_json = json.dumps(value) if value else None

    def __repr__(self) -> str:
        return f"<Article(id={self.id}, slug='{self.slug}')>"


class GlobalConfig(Base):
    """Site-wide tracking defaults. A single row with id 1."""

    __tablename__ = "global_config"

    id: Mapped[int] = mapped_column(primary_key=True)
    default_pixel_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    default_cta_url: Mapped[str | None] = mapped_column(String(1000), nullable=True)
