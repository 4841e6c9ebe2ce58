"""Pending-article queue consumed by the rewrite stage."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from ..db import ArticleStore
from ..models import UnprocessedArticle


class PendingQueue(ABC):
    """Source of articles awaiting rewrite."""

    @abstractmethod
    def claim(self, category: Optional[str] = None) -> Optional[UnprocessedArticle]:
        """Oldest pending article, optionally within a category."""

    @abstractmethod
    def remaining(self, category: Optional[str] = None) -> int:
        """Pending articles left for the same filter."""

    @abstractmethod
    def complete(self, unprocessed_id: int, processed_at: datetime) -> bool:
        """Mark an article processed. False if it already was."""


class StorePendingQueue(PendingQueue):
    """Pending queue read straight from the article store.

    Claiming does not lock: two concurrent workers may pick the same article,
    and the unique link on processed articles keeps only one result.
    """

    def __init__(self, store: ArticleStore) -> None:
        self.store = store

    def claim(self, category: Optional[str] = None) -> Optional[UnprocessedArticle]:
        return self.store.oldest_pending(category)

    def remaining(self, category: Optional[str] = None) -> int:
        return self.store.count_pending(category)

    def complete(self, unprocessed_id: int, processed_at: datetime) -> bool:
        return self.store.mark_processed(unprocessed_id, processed_at)
