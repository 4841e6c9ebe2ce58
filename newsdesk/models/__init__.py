"""Data models for the news desk."""

from .article import (
    DISCLAIMER,
    ArticleState,
    InvalidTransitionError,
    ProcessedArticle,
    UnprocessedArticle,
)
from .fetch_log import FetchLogEntry

__all__ = [
    "DISCLAIMER",
    "ArticleState",
    "FetchLogEntry",
    "InvalidTransitionError",
    "ProcessedArticle",
    "UnprocessedArticle",
]
