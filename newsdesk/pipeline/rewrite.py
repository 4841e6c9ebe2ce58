"""Rewrite stage: pending unprocessed article -> processed article."""

from datetime import datetime
from typing import Callable, List, Optional

from pydantic import BaseModel, Field
from rich.console import Console

from ..db import ArticleStore, DuplicateArticleError, StoreError
from ..generation import ArticleRewriter, GenerationError
from ..models import ProcessedArticle, UnprocessedArticle
from ..text import strip_html, truncate
from .orchestrator import utc_now
from .queue import PendingQueue, StorePendingQueue

console = Console()

BODY_FALLBACK_CHARS = 500
TITLE_FALLBACK_CHARS = 200


class ProcessResult(BaseModel):
    """Outcome of one rewrite step."""

    processed: bool = Field(..., description="Whether a new processed article was stored")
    remaining: Optional[int] = Field(0, description="Pending articles left for the same filter; None if unknown")
    unprocessed_id: Optional[int] = Field(None, description="Article that was picked")
    article: Optional[ProcessedArticle] = Field(None, description="Stored processed article")
    recovered: bool = Field(False, description="An earlier partial run was completed instead")
    warnings: List[str] = Field(default_factory=list, description="Non-fatal failures")


class RewriteStage:
    """Rewrites one pending article per call.

    Storing the processed article and flipping the processed flag are two
    writes. If the flag write is lost, the next call picks the same article,
    hits the unique link on processed articles and only flips the flag.
    """

    def __init__(
        self,
        store: ArticleStore,
        rewriter: ArticleRewriter,
        queue: Optional[PendingQueue] = None,
        now: Callable[[], datetime] = utc_now,
    ) -> None:
        self.store = store
        self.rewriter = rewriter
        self.queue = queue or StorePendingQueue(store)
        self.now = now

    def process_one(self, category: Optional[str] = None) -> ProcessResult:
        """Rewrite the oldest pending article, optionally within a category."""
        pending = self.queue.claim(category)
        if pending is None:
            return ProcessResult(processed=False, remaining=self.queue.remaining(category))

        console.print(f"[cyan]Processing[/cyan] #{pending.id}: {pending.title[:70]}")
        warnings: List[str] = []
        processed_at = self.now()
        article = self.build_processed(pending, processed_at, warnings)

        try:
            saved = self.store.insert_processed(article)
        except DuplicateArticleError:
            message = f"Article #{pending.id} already has a processed version; marking it processed"
            console.print(f"  [yellow]{message}[/yellow]")
            warnings.append(message)
            recovered = self._complete(pending.id, processed_at, warnings)
            return ProcessResult(
                processed=False,
                remaining=self._remaining(category, warnings),
                unprocessed_id=pending.id,
                recovered=recovered,
                warnings=warnings,
            )
        except StoreError as e:
            message = f"Could not save processed article #{pending.id}: {e}"
            console.print(f"  [red]{message}[/red]")
            warnings.append(message)
            return ProcessResult(
                processed=False,
                remaining=self._remaining(category, warnings),
                unprocessed_id=pending.id,
                warnings=warnings,
            )

        self._complete(pending.id, processed_at, warnings)
        remaining = self._remaining(category, warnings)
        console.print(f"  [green]Done[/green]: {saved.title[:70]} ({_count(remaining)} remaining)")
        return ProcessResult(
            processed=True,
            remaining=remaining,
            unprocessed_id=pending.id,
            article=saved,
            warnings=warnings,
        )

    def process_batch(self, count: int, category: Optional[str] = None) -> List[ProcessResult]:
        """Run up to count steps, stopping when nothing is pending or no progress is made."""
        results: List[ProcessResult] = []
        for _ in range(count):
            result = self.process_one(category)
            results.append(result)
            if not result.processed and not result.recovered:
                break
            if result.remaining == 0:
                break
        return results

    def build_processed(
        self, pending: UnprocessedArticle, processed_at: datetime, warnings: List[str]
    ) -> ProcessedArticle:
        """Rewrite title and body; each falls back to the original on failure."""
        clean_content = strip_html(pending.raw_body)

        try:
            body = self.rewriter.rewrite_body(pending.title, clean_content, pending.source_name)
        except GenerationError as e:
            message = f"Body rewrite failed for #{pending.id}: {e}"
            console.print(f"  [yellow]{message}[/yellow]")
            warnings.append(message)
            body = clean_content[:BODY_FALLBACK_CHARS] + "..." if clean_content else pending.title

        try:
            title = self.rewriter.rewrite_title(pending.title, clean_content)
        except GenerationError as e:
            message = f"Title rewrite failed for #{pending.id}: {e}"
            console.print(f"  [yellow]{message}[/yellow]")
            warnings.append(message)
            title = truncate(pending.title, TITLE_FALLBACK_CHARS)

        return ProcessedArticle(
            unprocessed_id=pending.id,
            source_name=pending.source_name,
            source_url=pending.source_url,
            title=title,
            original_title=pending.title,
            rewritten_description=body,
            original_description=pending.description,
            link=pending.link,
            guid=pending.guid,
            image_url=pending.image_url or pending.original_image_url,
            original_image_url=pending.original_image_url,
            categories=pending.categories,
            language=pending.language,
            published_at=pending.published_at,
            processed_at=processed_at,
            is_title_rewritten=title != pending.title,
        )

    def _complete(self, unprocessed_id: int, processed_at: datetime, warnings: List[str]) -> bool:
        try:
            return self.queue.complete(unprocessed_id, processed_at)
        except StoreError as e:
            message = f"Could not mark #{unprocessed_id} processed: {e}"
            console.print(f"  [red]{message}[/red]")
            warnings.append(message)
            return False

    def _remaining(self, category: Optional[str], warnings: List[str]) -> Optional[int]:
        """Pending count after a write; None when the store cannot answer."""
        try:
            return self.queue.remaining(category)
        except StoreError as e:
            message = f"Could not count pending articles: {e}"
            console.print(f"  [yellow]{message}[/yellow]")
            warnings.append(message)
            return None


def _count(remaining: Optional[int]) -> str:
    return "unknown" if remaining is None else str(remaining)
