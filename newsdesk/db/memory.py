"""In-process article store."""

import threading
from datetime import datetime, timezone
from typing import Dict, List, Optional, Set, Tuple

from ..models import FetchLogEntry, ProcessedArticle, UnprocessedArticle
from .base import ArticleStore
from .errors import DuplicateArticleError


class MemoryArticleStore(ArticleStore):
    """Article store held in memory, with the same uniqueness rules as Postgres."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.unprocessed: Dict[int, UnprocessedArticle] = {}
        self.processed: Dict[int, ProcessedArticle] = {}
        self.fetch_log: Dict[Tuple[str, str], FetchLogEntry] = {}
        self._unprocessed_links: Set[str] = set()
        self._processed_links: Set[str] = set()
        self._next_unprocessed_id = 1
        self._next_processed_id = 1

    def fetch_log_exists(self, source_name: str, link: str) -> bool:
        with self._lock:
            return (source_name, link) in self.fetch_log

    def link_exists(self, link: str) -> bool:
        with self._lock:
            return link in self._unprocessed_links or link in self._processed_links

    def insert_unprocessed(self, article: UnprocessedArticle) -> UnprocessedArticle:
        with self._lock:
            if article.link in self._unprocessed_links:
                raise DuplicateArticleError(article.link)
            stored = article.model_copy(update={"id": self._next_unprocessed_id}, deep=True)
            self._next_unprocessed_id += 1
            self.unprocessed[stored.id] = stored
            self._unprocessed_links.add(stored.link)
            return stored.model_copy(deep=True)

    def upsert_fetch_log(self, source_name: str, link: str, fetched_at: Optional[datetime] = None) -> None:
        with self._lock:
            key = (source_name, link)
            if key not in self.fetch_log:
                self.fetch_log[key] = FetchLogEntry(
                    source_name=source_name,
                    link=link,
                    fetched_at=fetched_at or datetime.now(timezone.utc),
                )

    def _pending(self, category: Optional[str]) -> List[UnprocessedArticle]:
        return [
            a
            for a in self.unprocessed.values()
            if not a.processed and (not category or category in a.categories)
        ]

    def oldest_pending(self, category: Optional[str] = None) -> Optional[UnprocessedArticle]:
        with self._lock:
            pending = self._pending(category)
            if not pending:
                return None
            oldest = min(pending, key=lambda a: (a.fetched_at, a.id))
            return oldest.model_copy(deep=True)

    def count_pending(self, category: Optional[str] = None) -> int:
        with self._lock:
            return len(self._pending(category))

    def insert_processed(self, article: ProcessedArticle) -> ProcessedArticle:
        with self._lock:
            if article.link in self._processed_links:
                raise DuplicateArticleError(article.link, table="processed_articles")
            stored = article.model_copy(update={"id": self._next_processed_id}, deep=True)
            self._next_processed_id += 1
            self.processed[stored.id] = stored
            self._processed_links.add(stored.link)
            return stored.model_copy(deep=True)

    def mark_processed(self, unprocessed_id: int, processed_at: datetime) -> bool:
        with self._lock:
            article = self.unprocessed.get(unprocessed_id)
            if article is None or article.processed:
                return False
            article.mark_processed(processed_at)
            return True

    def get_unprocessed(self, unprocessed_id: int) -> Optional[UnprocessedArticle]:
        with self._lock:
            article = self.unprocessed.get(unprocessed_id)
            return article.model_copy(deep=True) if article else None

    def processed_for(self, unprocessed_id: int) -> List[ProcessedArticle]:
        """Processed rows that reference an unprocessed article."""
        with self._lock:
            return [p for p in self.processed.values() if p.unprocessed_id == unprocessed_id]
