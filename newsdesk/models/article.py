"""Article models for the unprocessed -> processed rewrite workflow."""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import Field, field_validator

from .base import DBModel

DISCLAIMER = (
    "This is a summary of publicly available news. Content rewritten for clarity. "
    "Click source link for full article."
)


class ArticleState(str, Enum):
    """Lifecycle of a fetched article.

    PENDING -> PROCESSED is the only transition. Inserting the processed row
    and flipping the flag are two writes, so a crash between them can leave a
    PENDING article whose processed row already exists; the unique link on
    the processed store turns the retry into a no-op.
    """

    PENDING = "pending"
    PROCESSED = "processed"


class InvalidTransitionError(Exception):
    """Raised when an article is moved out of a terminal state."""


class UnprocessedArticle(DBModel):
    """Deduplicated, classified feed item awaiting rewriting."""

    source_name: str = Field(..., description="Feed source name")
    source_url: Optional[str] = Field(None, description="Feed URL of the source")
    title: str = Field(..., description="Original title")
    link: str = Field(..., description="Canonical article URL, unique across the corpus")
    guid: Optional[str] = Field(None, description="Feed guid")
    description: str = Field("", description="Raw description/summary (may be HTML)")
    content: str = Field("", description="Raw full content (may be HTML)")
    published_at: Optional[datetime] = Field(None, description="Publication timestamp")
    image_url: Optional[str] = Field(None, description="Resolved image URL (re-hosted or original)")
    original_image_url: Optional[str] = Field(None, description="Image URL before re-hosting")
    image_attribution: Optional[str] = Field(None, description="Attribution for stock photos")
    image_downloaded: bool = Field(False, description="Whether the image was re-hosted")
    stock_image_source: Optional[str] = Field(None, description="Stock provider, if used")
    categories: List[str] = Field(default_factory=lambda: ["general"], description="Category keys")
    language: str = Field("mr", description="Language tag")
    fetched_at: datetime = Field(..., description="When the item was fetched")
    processed: bool = Field(False, description="Whether a processed article exists")
    processed_at: Optional[datetime] = Field(None, description="When the flag was flipped")

    @field_validator("categories")
    @classmethod
    def validate_categories(cls, v: List[str]) -> List[str]:
        """Keep first-seen order, drop repeats, never empty."""
        ordered = list(dict.fromkeys(c for c in v if c))
        return ordered or ["general"]

    @property
    def state(self) -> ArticleState:
        """Current lifecycle state."""
        return ArticleState.PROCESSED if self.processed else ArticleState.PENDING

    def mark_processed(self, when: datetime) -> None:
        """Move PENDING -> PROCESSED."""
        if self.processed:
            raise InvalidTransitionError(f"Article {self.id} is already processed")
        self.processed = True
        self.processed_at = when

    @property
    def raw_body(self) -> str:
        """Best available body text, still possibly HTML."""
        return self.content or self.description or ""


class ProcessedArticle(DBModel):
    """Rewritten, publishable form of an unprocessed article."""

    unprocessed_id: int = Field(..., description="Originating unprocessed article id")
    source_name: str = Field(..., description="Feed source name")
    source_url: Optional[str] = Field(None, description="Feed URL of the source")
    title: str = Field(..., description="Rewritten title")
    original_title: str = Field(..., description="Original title")
    rewritten_description: str = Field(..., description="Rewritten body")
    original_description: str = Field("", description="Original description")
    link: str = Field(..., description="Source article URL")
    guid: Optional[str] = Field(None, description="Feed guid")
    image_url: Optional[str] = Field(None, description="Image URL")
    original_image_url: Optional[str] = Field(None, description="Image URL before re-hosting")
    categories: List[str] = Field(default_factory=lambda: ["general"], description="Category keys")
    language: str = Field("mr", description="Language tag")
    published_at: Optional[datetime] = Field(None, description="Publication timestamp")
    processed_at: datetime = Field(..., description="When the rewrite happened")
    is_title_rewritten: bool = Field(False, description="Whether the title differs from the original")
    disclaimer: str = Field(DISCLAIMER, description="Attribution disclaimer")
