"""Database management and article stores."""

from .articles import PostgresArticleStore
from .base import ArticleStore
from .connection import build_conninfo, close_connection_pool, get_connection, get_connection_pool
from .errors import DuplicateArticleError, StoreError
from .init import init_database, validate_connection
from .memory import MemoryArticleStore

__all__ = [
    "ArticleStore",
    "DuplicateArticleError",
    "MemoryArticleStore",
    "PostgresArticleStore",
    "StoreError",
    "build_conninfo",
    "close_connection_pool",
    "get_connection",
    "get_connection_pool",
    "init_database",
    "validate_connection",
]
