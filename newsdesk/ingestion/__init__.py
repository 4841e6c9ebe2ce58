"""Feed ingestion."""

from .models import Enclosure, FeedResult, RawItem
from .rss_fetcher import FeedClient, RSSFetcher, parse_entry, print_feed_summary

__all__ = [
    "Enclosure",
    "FeedClient",
    "FeedResult",
    "RSSFetcher",
    "RawItem",
    "parse_entry",
    "print_feed_summary",
]
