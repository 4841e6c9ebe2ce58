"""Per-source and global duplicate checks."""

from typing import List, Optional

from rich.console import Console

from ..db import ArticleStore, StoreError

console = Console()


class Deduplicator:
    """Duplicate checks backed by the article store.

    Lookups fail open: a store error is reported and the link is treated as
    new. The unique link constraint on the store catches anything that slips
    through.
    """

    def __init__(self, store: ArticleStore) -> None:
        self.store = store

    def was_fetched_from_source(self, source_name: str, link: str, warnings: Optional[List[str]] = None) -> bool:
        try:
            return self.store.fetch_log_exists(source_name, link)
        except StoreError as e:
            _report(f"Fetch log check failed for {link}: {e}", warnings)
            return False

    def is_global_duplicate(self, link: str, warnings: Optional[List[str]] = None) -> bool:
        try:
            return self.store.link_exists(link)
        except StoreError as e:
            _report(f"Duplicate check failed for {link}: {e}", warnings)
            return False

    def mark_fetched(self, source_name: str, link: str, warnings: Optional[List[str]] = None) -> bool:
        """Best-effort fetch log write; call only after the article is persisted."""
        try:
            self.store.upsert_fetch_log(source_name, link)
            return True
        except StoreError as e:
            _report(f"Could not mark {link} as fetched: {e}", warnings)
            return False


def _report(message: str, warnings: Optional[List[str]]) -> None:
    console.print(f"  [yellow]{message}[/yellow]")
    if warnings is not None:
        warnings.append(message)
