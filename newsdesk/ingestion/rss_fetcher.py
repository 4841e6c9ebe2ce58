"""RSS feed fetcher with concurrent retrieval."""

import asyncio
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, List, Optional

import feedparser
import httpx
from pydantic import ValidationError
from rich.console import Console

from ..config import SourceConfig
from .models import Enclosure, FeedResult, RawItem

console = Console()


class FeedClient(ABC):
    """Retrieves and parses feeds into raw items."""

    @abstractmethod
    def fetch_feeds_sync(self, sources: List[SourceConfig]) -> List[FeedResult]:
        """Fetch every source, returning one result per source in input order."""


def _parse_time(entry: Any) -> Optional[datetime]:
    """Publication time from feedparser's UTC time tuples."""
    for field in ("published_parsed", "updated_parsed"):
        parsed = entry.get(field)
        if parsed:
            try:
                return datetime(*parsed[:6], tzinfo=timezone.utc)
            except (TypeError, ValueError):
                continue
    return None


def _first_url(media: Any) -> Optional[str]:
    """First url attribute of a media:* list."""
    for element in media or []:
        url = element.get("url")
        if url:
            return url
    return None


def _first_enclosure(entry: Any) -> Optional[Enclosure]:
    for enclosure in entry.get("enclosures") or []:
        url = enclosure.get("href") or enclosure.get("url")
        if url:
            return Enclosure(url=url, type=enclosure.get("type"))
    return None


def parse_entry(entry: Any, source_name: str) -> RawItem:
    """Convert a feedparser entry into a RawItem."""
    content = ""
    for part in entry.get("content") or []:
        if part.get("value"):
            content = part["value"]
            break

    return RawItem(
        title=(entry.get("title") or "").strip(),
        link=(entry.get("link") or "").strip(),
        guid=entry.get("id"),
        description=entry.get("summary") or entry.get("description") or "",
        content=content,
        published=_parse_time(entry),
        media_thumbnail=_first_url(entry.get("media_thumbnail")),
        media_content=_first_url(entry.get("media_content")),
        enclosure=_first_enclosure(entry),
        source_name=source_name,
    )


class RSSFetcher(FeedClient):
    """Fetch and parse RSS feeds."""

    def __init__(
        self,
        timeout: float = 30.0,
        max_concurrent: int = 5,
        user_agent: str = "Mozilla/5.0 (News Aggregator)",
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """Initialize RSS fetcher."""
        self.timeout = timeout
        self.max_concurrent = max_concurrent
        self.user_agent = user_agent
        self.transport = transport

    async def fetch_feed(self, client: httpx.AsyncClient, source: SourceConfig) -> FeedResult:
        """Fetch and parse a single feed; failures are returned, not raised."""

        def failed(error: str) -> FeedResult:
            return FeedResult(source_name=source.name, source_url=source.url, success=False, error=error)

        try:
            response = await client.get(source.url)
            response.raise_for_status()
        except httpx.TimeoutException:
            return failed("Request timed out")
        except httpx.HTTPError as e:
            return failed(f"HTTP error: {e}")

        feed = feedparser.parse(response.content)

        # Recoverable parser complaints are fine as long as entries came through
        if feed.bozo and not feed.entries:
            return failed(f"Invalid feed: {feed.bozo_exception}")

        items = []
        for entry in feed.entries:
            try:
                items.append(parse_entry(entry, source.name))
            except ValidationError as e:
                console.print(f"[yellow]{source.name}: skipping malformed entry: {e.error_count()} error(s)[/yellow]")

        return FeedResult(
            source_name=source.name,
            source_url=source.url,
            success=True,
            items=items,
            item_count=len(items),
        )

    async def fetch_all_feeds(self, sources: List[SourceConfig]) -> List[FeedResult]:
        """Fetch all feeds concurrently over one client, keeping input order."""
        if not sources:
            return []

        semaphore = asyncio.Semaphore(self.max_concurrent)

        async with httpx.AsyncClient(
            timeout=self.timeout,
            follow_redirects=True,
            headers={"User-Agent": self.user_agent},
            transport=self.transport,
        ) as client:

            async def fetch_with_semaphore(source: SourceConfig) -> FeedResult:
                async with semaphore:
                    return await self.fetch_feed(client, source)

            return list(await asyncio.gather(*(fetch_with_semaphore(s) for s in sources)))

    def fetch_feeds_sync(self, sources: List[SourceConfig]) -> List[FeedResult]:
        """Synchronous wrapper for fetch_all_feeds."""
        return asyncio.run(self.fetch_all_feeds(sources))


def print_feed_summary(results: List[FeedResult]) -> None:
    """Print summary of feed fetch results."""
    total_items = sum(r.item_count for r in results)
    successful = sum(1 for r in results if r.success)
    failed = len(results) - successful

    console.print("\n[bold]Feed Summary:[/bold]")
    console.print(f"  Sources fetched: {len(results)}")
    console.print(f"  Successful: [green]{successful}[/green]")
    console.print(f"  Failed: [red]{failed}[/red]")
    console.print(f"  Total items: {total_items}")

    if failed > 0:
        console.print("\n[bold red]Failed feeds:[/bold red]")
        for result in results:
            if not result.success:
                console.print(f"  - {result.source_name}: {result.error}")
