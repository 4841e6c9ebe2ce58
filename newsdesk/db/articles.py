"""PostgreSQL article store."""

from datetime import datetime, timezone
from typing import Any, Dict, Optional

import psycopg
from psycopg import errors as pg_errors

from ..models import ProcessedArticle, UnprocessedArticle
from .base import ArticleStore
from .connection import get_connection
from .errors import DuplicateArticleError, StoreError

UNPROCESSED_COLUMNS = (
    "source_name",
    "source_url",
    "title",
    "link",
    "guid",
    "description",
    "content",
    "published_at",
    "image_url",
    "original_image_url",
    "image_attribution",
    "image_downloaded",
    "stock_image_source",
    "categories",
    "language",
    "fetched_at",
    "processed",
    "processed_at",
)

PROCESSED_COLUMNS = (
    "unprocessed_id",
    "source_name",
    "source_url",
    "title",
    "original_title",
    "rewritten_description",
    "original_description",
    "link",
    "guid",
    "image_url",
    "original_image_url",
    "categories",
    "language",
    "published_at",
    "processed_at",
    "is_title_rewritten",
    "disclaimer",
)


def _insert_sql(table: str, columns: tuple) -> str:
    names = ", ".join(columns)
    placeholders = ", ".join(["%s"] * len(columns))
    return f"INSERT INTO {table} ({names}) VALUES ({placeholders}) RETURNING id"


def _pending_filter(category: Optional[str]) -> tuple:
    if category:
        return "processed = FALSE AND %s = ANY(categories)", (category,)
    return "processed = FALSE", ()


class PostgresArticleStore(ArticleStore):
    """Article store backed by PostgreSQL."""

    def __init__(self, db_config: Dict[str, Any]) -> None:
        """Initialize with a database config dict (see Config.get_db_config)."""
        self.db_config = db_config

    def fetch_log_exists(self, source_name: str, link: str) -> bool:
        try:
            with get_connection(self.db_config) as conn:
                with conn.cursor() as cur:
                    cur.execute(
                        "SELECT 1 FROM fetch_log WHERE source_name = %s AND link = %s LIMIT 1",
                        (source_name, link),
                    )
                    return cur.fetchone() is not None
        except psycopg.Error as e:
            raise StoreError(f"Fetch log lookup failed: {e}") from e

    def link_exists(self, link: str) -> bool:
        try:
            with get_connection(self.db_config) as conn:
                with conn.cursor() as cur:
                    cur.execute(
                        """
                        SELECT EXISTS (SELECT 1 FROM unprocessed_articles WHERE link = %s)
                            OR EXISTS (SELECT 1 FROM processed_articles WHERE link = %s) AS found
                        """,
                        (link, link),
                    )
                    row = cur.fetchone()
                    return bool(row and row["found"])
        except psycopg.Error as e:
            raise StoreError(f"Link lookup failed: {e}") from e

    def insert_unprocessed(self, article: UnprocessedArticle) -> UnprocessedArticle:
        data = article.model_dump(include=set(UNPROCESSED_COLUMNS))
        try:
            with get_connection(self.db_config) as conn:
                with conn.cursor() as cur:
                    cur.execute(
                        _insert_sql("unprocessed_articles", UNPROCESSED_COLUMNS),
                        tuple(data[c] for c in UNPROCESSED_COLUMNS),
                    )
                    article_id = cur.fetchone()["id"]
                conn.commit()
        except pg_errors.UniqueViolation as e:
            raise DuplicateArticleError(article.link) from e
        except psycopg.Error as e:
            raise StoreError(f"Insert failed for {article.link}: {e}") from e
        return article.model_copy(update={"id": article_id})

    def upsert_fetch_log(self, source_name: str, link: str, fetched_at: Optional[datetime] = None) -> None:
        fetched_at = fetched_at or datetime.now(timezone.utc)
        try:
            with get_connection(self.db_config) as conn:
                with conn.cursor() as cur:
                    cur.execute(
                        """
                        INSERT INTO fetch_log (source_name, link, fetched_at)
                        VALUES (%s, %s, %s)
                        ON CONFLICT (source_name, link) DO NOTHING
                        """,
                        (source_name, link, fetched_at),
                    )
                conn.commit()
        except psycopg.Error as e:
            raise StoreError(f"Fetch log write failed: {e}") from e

    def oldest_pending(self, category: Optional[str] = None) -> Optional[UnprocessedArticle]:
        where, params = _pending_filter(category)
        try:
            with get_connection(self.db_config) as conn:
                with conn.cursor() as cur:
                    cur.execute(
                        f"SELECT * FROM unprocessed_articles WHERE {where} ORDER BY fetched_at ASC, id ASC LIMIT 1",
                        params,
                    )
                    row = cur.fetchone()
        except psycopg.Error as e:
            raise StoreError(f"Pending lookup failed: {e}") from e
        return UnprocessedArticle.model_validate(row) if row else None

    def count_pending(self, category: Optional[str] = None) -> int:
        where, params = _pending_filter(category)
        try:
            with get_connection(self.db_config) as conn:
                with conn.cursor() as cur:
                    cur.execute(f"SELECT COUNT(*) AS n FROM unprocessed_articles WHERE {where}", params)
                    return cur.fetchone()["n"]
        except psycopg.Error as e:
            raise StoreError(f"Pending count failed: {e}") from e

    def insert_processed(self, article: ProcessedArticle) -> ProcessedArticle:
        data = article.model_dump(include=set(PROCESSED_COLUMNS))
        try:
            with get_connection(self.db_config) as conn:
                with conn.cursor() as cur:
                    cur.execute(
                        _insert_sql("processed_articles", PROCESSED_COLUMNS),
                        tuple(data[c] for c in PROCESSED_COLUMNS),
                    )
                    article_id = cur.fetchone()["id"]
                conn.commit()
        except pg_errors.UniqueViolation as e:
            raise DuplicateArticleError(article.link, table="processed_articles") from e
        except psycopg.Error as e:
            raise StoreError(f"Insert failed for processed {article.link}: {e}") from e
        return article.model_copy(update={"id": article_id})

    def mark_processed(self, unprocessed_id: int, processed_at: datetime) -> bool:
        try:
            with get_connection(self.db_config) as conn:
                with conn.cursor() as cur:
                    cur.execute(
                        """
                        UPDATE unprocessed_articles
                        SET processed = TRUE, processed_at = %s
                        WHERE id = %s AND processed = FALSE
                        """,
                        (processed_at, unprocessed_id),
                    )
                    updated = cur.rowcount
                conn.commit()
        except psycopg.Error as e:
            raise StoreError(f"Flag update failed for {unprocessed_id}: {e}") from e
        return updated == 1

    def get_unprocessed(self, unprocessed_id: int) -> Optional[UnprocessedArticle]:
        try:
            with get_connection(self.db_config) as conn:
                with conn.cursor() as cur:
                    cur.execute("SELECT * FROM unprocessed_articles WHERE id = %s", (unprocessed_id,))
                    row = cur.fetchone()
        except psycopg.Error as e:
            raise StoreError(f"Lookup failed for {unprocessed_id}: {e}") from e
        return UnprocessedArticle.model_validate(row) if row else None
