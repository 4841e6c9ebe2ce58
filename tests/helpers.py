"""Item builders and collaborator stubs shared by the tests."""

from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional

from newsdesk.config import SourceConfig
from newsdesk.ingestion import FeedClient, FeedResult, RawItem
from newsdesk.models import UnprocessedArticle

MARATHI_TITLE = "पुण्यात क्रिकेट स्पर्धा सुरू"
MARATHI_DESCRIPTION = "<p>पुणे शहरात आजपासून जिल्हास्तरीय क्रिकेट स्पर्धेला सुरुवात झाली.</p>"
ENGLISH_TITLE = "Stock markets close higher"
ENGLISH_DESCRIPTION = "Benchmark indices ended the session with strong gains."

BASE_TIME = datetime(2024, 5, 1, 6, 0, tzinfo=timezone.utc)


def make_item(link: str, source_name: str = "TV9 Marathi", **fields) -> RawItem:
    """Feed item in Marathi unless overridden."""
    data = {
        "title": MARATHI_TITLE,
        "description": MARATHI_DESCRIPTION,
        "link": link,
        "source_name": source_name,
    }
    data.update(fields)
    return RawItem(**data)


def make_unprocessed(link: str, minutes: int = 0, **fields) -> UnprocessedArticle:
    """Unprocessed article fetched `minutes` after BASE_TIME."""
    data = {
        "source_name": "TV9 Marathi",
        "source_url": "https://www.tv9marathi.com/feed",
        "title": MARATHI_TITLE,
        "link": link,
        "description": MARATHI_DESCRIPTION,
        "categories": ["pune", "sports"],
        "fetched_at": BASE_TIME + timedelta(minutes=minutes),
    }
    data.update(fields)
    return UnprocessedArticle(**data)


class StubFeedClient(FeedClient):
    """Returns canned feed results keyed by source name."""

    def __init__(self, items: Dict[str, List[RawItem]], failing: Optional[Dict[str, str]] = None) -> None:
        self.items = items
        self.failing = failing or {}
        self.requested: List[str] = []

    def fetch_feeds_sync(self, sources: List[SourceConfig]) -> List[FeedResult]:
        results = []
        for source in sources:
            self.requested.append(source.name)
            if source.name in self.failing:
                results.append(
                    FeedResult(
                        source_name=source.name,
                        source_url=source.url,
                        success=False,
                        error=self.failing[source.name],
                    )
                )
                continue
            items = self.items.get(source.name, [])
            results.append(
                FeedResult(
                    source_name=source.name,
                    source_url=source.url,
                    success=True,
                    items=items,
                    item_count=len(items),
                )
            )
        return results
