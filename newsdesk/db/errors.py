"""Store error types."""


class StoreError(Exception):
    """Raised when the article store cannot complete an operation."""


class DuplicateArticleError(StoreError):
    """Raised when an insert violates a unique link constraint."""

    def __init__(self, link: str, table: str = "unprocessed_articles") -> None:
        super().__init__(f"Duplicate link in {table}: {link}")
        self.link = link
        self.table = table
