"""Fetch orchestrator: feeds -> classified, deduplicated unprocessed articles."""

import math
from datetime import datetime
from typing import Callable, Dict, List, Optional

import pendulum
from pydantic import BaseModel, Field
from rich.console import Console

from ..classification import ContentClassifier
from ..config import SourceConfig
from ..db import ArticleStore, DuplicateArticleError, StoreError
from ..images import ImageResolution, ImageResolver
from ..ingestion import FeedClient, RawItem
from ..models import UnprocessedArticle
from ..text import clean_title, is_http_url, strip_html
from .dedup import Deduplicator

console = Console()


def utc_now() -> datetime:
    return pendulum.now("UTC")


class FetchReport(BaseModel):
    """Counts and outcomes of one fetch run."""

    fetched: int = Field(0, description="New unprocessed articles persisted")
    duplicates: int = Field(0, description="Items whose link already exists anywhere")
    source_duplicates: int = Field(0, description="Items this source yielded before")
    missing_link: int = Field(0, description="Items without a link")
    invalid_link: int = Field(0, description="Items whose link is not an absolute http(s) URL")
    non_target_language: int = Field(0, description="Items failing the language test")
    category_mismatch: int = Field(0, description="Items outside the requested category")
    blocked: int = Field(0, description="Items skipped by strict filtering as blocked")
    off_topic: int = Field(0, description="Items skipped by strict filtering as off topic")
    errors: int = Field(0, description="Items lost to store errors")
    per_source: Dict[str, int] = Field(default_factory=dict, description="Persisted articles per source")
    failed_sources: List[str] = Field(default_factory=list, description="Sources whose feed could not be read")
    warnings: List[str] = Field(default_factory=list, description="Non-fatal failures")
    articles: List[UnprocessedArticle] = Field(default_factory=list, description="Persisted articles")

    @property
    def skipped(self) -> int:
        return (
            self.duplicates
            + self.source_duplicates
            + self.missing_link
            + self.invalid_link
            + self.non_target_language
            + self.category_mismatch
            + self.blocked
            + self.off_topic
        )


class FetchOrchestrator:
    """Runs one fetch pass over a set of sources.

    Feeds are retrieved concurrently by the feed client. Items are then
    evaluated source by source in configured order and, within a source, in
    feed order, so per-source limits always keep the first accepted items.
    """

    def __init__(
        self,
        store: ArticleStore,
        feed_client: FeedClient,
        classifier: ContentClassifier,
        image_resolver: Optional[ImageResolver] = None,
        strict_filter: bool = False,
        language: str = "mr",
        now: Callable[[], datetime] = utc_now,
    ) -> None:
        self.store = store
        self.feed_client = feed_client
        self.classifier = classifier
        self.image_resolver = image_resolver
        self.strict_filter = strict_filter
        self.language = language
        self.now = now
        self.dedup = Deduplicator(store)

    def fetch_all(
        self,
        sources: List[SourceConfig],
        per_source_limit: Optional[int] = None,
        total_limit: int = 6,
        category: Optional[str] = None,
    ) -> FetchReport:
        """Fetch, filter and persist up to total_limit new articles."""
        report = FetchReport()
        if not sources or total_limit <= 0:
            return report

        if per_source_limit is None:
            per_source_limit = math.ceil(total_limit / len(sources))

        console.print(
            f"[bold]Fetching {len(sources)} sources[/bold] "
            f"(per source: {per_source_limit}, total: {total_limit}"
            f"{', category: ' + category if category else ''})"
        )

        results = {r.source_name: r for r in self.feed_client.fetch_feeds_sync(sources)}

        for source in sources:
            if report.fetched >= total_limit:
                break

            result = results.get(source.name)
            if result is None or not result.success:
                error = result.error if result else "no result"
                message = f"Source {source.name} failed: {error}"
                console.print(f"[red]{message}[/red]")
                report.failed_sources.append(source.name)
                report.warnings.append(message)
                continue

            console.print(f"\n[cyan]{source.name}[/cyan]: {result.item_count} items")
            accepted = 0
            for item in result.items:
                if accepted >= per_source_limit or report.fetched >= total_limit:
                    break
                article = self._process_item(item, source, category, report)
                if article is not None:
                    accepted += 1
                    report.fetched += 1
                    report.articles.append(article)

            report.per_source[source.name] = accepted

        print_fetch_report(report)
        return report

    def _process_item(
        self,
        item: RawItem,
        source: SourceConfig,
        category: Optional[str],
        report: FetchReport,
    ) -> Optional[UnprocessedArticle]:
        """Apply the checks in order; persist and return the article if it passes."""
        link = (item.link or "").strip()
        if not link:
            report.missing_link += 1
            return None
        if not is_http_url(link):
            console.print(f"  [dim][invalid-link] {link[:80]}[/dim]")
            report.invalid_link += 1
            return None

        if self.dedup.was_fetched_from_source(source.name, link, report.warnings):
            console.print(f"  [dim][source-dup] {link}[/dim]")
            report.source_duplicates += 1
            return None

        if self.dedup.is_global_duplicate(link, report.warnings):
            console.print(f"  [dim][global-dup] {link}[/dim]")
            report.duplicates += 1
            return None

        title = clean_title(item.title)
        description = strip_html(item.description) or strip_html(item.content)
        classification = self.classifier.classify(title, description)

        if not classification.is_target_language:
            console.print(f"  [dim][not-target-language] {title[:60]}[/dim]")
            report.non_target_language += 1
            return None

        if category and category not in classification.categories:
            console.print(f"  [dim][cat-mismatch] {title[:60]} {classification.categories}[/dim]")
            report.category_mismatch += 1
            return None

        if classification.blocked:
            if self.strict_filter:
                console.print(f"  [dim][blocked] {title[:60]}[/dim]")
                report.blocked += 1
                return None
            console.print(
                f"  [yellow]Sensitive keywords {classification.blocked_keywords} in: {title[:60]}[/yellow]"
            )

        if self.strict_filter and not classification.on_topic:
            console.print(f"  [dim][off-topic] {title[:60]}[/dim]")
            report.off_topic += 1
            return None

        image = ImageResolution()
        if self.image_resolver is not None:
            image = self.image_resolver.resolve(item, classification.categories)
            report.warnings.extend(image.warnings)

        article = UnprocessedArticle(
            source_name=source.name,
            source_url=source.url,
            title=title,
            link=link,
            guid=item.guid,
            description=item.description,
            content=item.content,
            published_at=item.published,
            image_url=image.url,
            original_image_url=image.original_url,
            image_attribution=image.attribution,
            image_downloaded=image.was_downloaded,
            stock_image_source=image.source if image.attribution else None,
            categories=classification.categories,
            language=self.language,
            fetched_at=self.now(),
        )

        try:
            saved = self.store.insert_unprocessed(article)
        except DuplicateArticleError:
            console.print(f"  [dim][global-dup] {link} (inserted concurrently)[/dim]")
            report.duplicates += 1
            return None
        except StoreError as e:
            message = f"Could not save {link}: {e}"
            console.print(f"  [red]{message}[/red]")
            report.errors += 1
            report.warnings.append(message)
            return None

        self.dedup.mark_fetched(source.name, link, report.warnings)
        console.print(f"  [green]+[/green] {title[:70]} {classification.categories}")
        return saved


def print_fetch_report(report: FetchReport) -> None:
    """Print summary of a fetch run."""
    console.print("\n[bold]Fetch Summary:[/bold]")
    console.print(f"  New articles: [green]{report.fetched}[/green]")
    console.print(f"  Duplicates: {report.duplicates} (source: {report.source_duplicates})")
    console.print(f"  Not target language: {report.non_target_language}")
    if report.missing_link or report.invalid_link:
        console.print(f"  Missing or invalid links: {report.missing_link + report.invalid_link}")
    if report.category_mismatch:
        console.print(f"  Category mismatch: {report.category_mismatch}")
    if report.blocked or report.off_topic:
        console.print(f"  Filtered: {report.blocked} blocked, {report.off_topic} off topic")
    if report.errors:
        console.print(f"  Store errors: [red]{report.errors}[/red]")
    if report.failed_sources:
        console.print(f"  Failed sources: [red]{', '.join(report.failed_sources)}[/red]")
