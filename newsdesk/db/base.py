"""Article store interface."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from ..models import ProcessedArticle, UnprocessedArticle


class ArticleStore(ABC):
    """Persistent store for unprocessed, processed and fetch-log records.

    Implementations raise DuplicateArticleError on unique-link violations and
    StoreError on any other failure.
    """

    @abstractmethod
    def fetch_log_exists(self, source_name: str, link: str) -> bool:
        """Whether the source already yielded this link."""

    @abstractmethod
    def link_exists(self, link: str) -> bool:
        """Whether any unprocessed or processed article references the link."""

    @abstractmethod
    def insert_unprocessed(self, article: UnprocessedArticle) -> UnprocessedArticle:
        """Insert a new article and return it with its id."""

    @abstractmethod
    def upsert_fetch_log(self, source_name: str, link: str, fetched_at: Optional[datetime] = None) -> None:
        """Record that the source yielded the link. Idempotent."""

    @abstractmethod
    def oldest_pending(self, category: Optional[str] = None) -> Optional[UnprocessedArticle]:
        """Oldest article by fetch time that has not been processed."""

    @abstractmethod
    def count_pending(self, category: Optional[str] = None) -> int:
        """Number of articles not yet processed."""

    @abstractmethod
    def insert_processed(self, article: ProcessedArticle) -> ProcessedArticle:
        """Insert a rewritten article and return it with its id."""

    @abstractmethod
    def mark_processed(self, unprocessed_id: int, processed_at: datetime) -> bool:
        """Flip the processed flag. Returns False if it was already set."""

    @abstractmethod
    def get_unprocessed(self, unprocessed_id: int) -> Optional[UnprocessedArticle]:
        """Look up an unprocessed article by id."""
