"""
Article data models for the Articles Service.
"""

import re
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


SLUG_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_-]*$")


def is_valid_slug(slug: str) -> bool:
    """Return True when the slug is URL-safe and usable as a key suffix."""
    return bool(slug) and SLUG_PATTERN.match(slug) is not None


class Article(BaseModel):
    """Canonical article record as published by the content API."""

    model_config = ConfigDict(extra="ignore")

    id: int = Field(..., description="Stable numeric identifier")
    slug: str = Field(..., description="Unique, URL-safe lookup key")
    title: str
    description: Optional[str] = None
    body: str = Field(..., description="Full content, never part of the summary")
    author_full_name: Optional[str] = None
    cover_img_src: Optional[str] = None
    cover_img_alt: Optional[str] = None
    is_active: bool
    # Dates stay as the upstream strings so cached bytes match the source.
    published_date: str
    created_at: str
    updated_at: str

    @field_validator("slug")
    @classmethod
    def slug_must_be_url_safe(cls, value: str) -> str:
        if not is_valid_slug(value):
            raise ValueError(f"slug {value!r} is not URL-safe")
        return value

    def to_summary(self) -> "ArticleSummary":
        """Project this article onto the list-view fields."""
        return ArticleSummary(
            id=self.id,
            slug=self.slug,
            title=self.title,
            description=self.description,
            cover_img_src=self.cover_img_src,
            cover_img_alt=self.cover_img_alt,
            published_date=self.published_date,
        )


class ArticleSummary(BaseModel):
    """Reduced projection of an article used by the list endpoint."""

    id: int
    slug: str
    title: str
    description: Optional[str] = None
    cover_img_src: Optional[str] = None
    cover_img_alt: Optional[str] = None
    published_date: str


class ArticleSet(BaseModel):
    """The complete article collection returned by one upstream call."""

    model_config = ConfigDict(extra="ignore")

    articles: List[Article]

    @model_validator(mode="after")
    def slugs_must_be_unique(self) -> "ArticleSet":
        seen = set()
        duplicates = []
        for article in self.articles:
            if article.slug in seen:
                duplicates.append(article.slug)
            seen.add(article.slug)
        if duplicates:
            raise ValueError(f"duplicate slugs in article set: {sorted(set(duplicates))}")
        return self

    @property
    def slugs(self) -> List[str]:
        return [article.slug for article in self.articles]

    def summaries(self) -> List[ArticleSummary]:
        """Summary projection, in input order."""
        return [article.to_summary() for article in self.articles]
