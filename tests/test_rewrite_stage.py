"""Tests for the rewrite stage."""

import random
from datetime import timedelta
from unittest.mock import Mock

import pytest

from newsdesk.db import StoreError
from newsdesk.generation import ArticleRewriter, GenerationError, MockTextGenerator, RateLimitedError, RetryPolicy
from newsdesk.models import DISCLAIMER, ProcessedArticle
from newsdesk.pipeline import RewriteStage, StorePendingQueue
from tests.helpers import BASE_TIME, MARATHI_TITLE, make_unprocessed

PROCESSED_AT = BASE_TIME + timedelta(hours=2)


def make_stage(store, responses=None, sleeps=None):
    generator = MockTextGenerator(responses)
    policy = RetryPolicy(sleep=(sleeps if sleeps is not None else []).append, rng=random.Random(1))
    stage = RewriteStage(store, ArticleRewriter(generator, policy), now=lambda: PROCESSED_AT)
    return stage, generator


class TestProcessOne:
    def test_nothing_pending(self, store):
        stage, generator = make_stage(store)

        result = stage.process_one()

        assert result.processed is False
        assert result.remaining == 0
        assert generator.calls == []

    def test_rewrites_oldest_pending_article(self, store):
        store.insert_unprocessed(make_unprocessed("https://x/new", minutes=30))
        old = store.insert_unprocessed(make_unprocessed("https://x/old", minutes=1, image_url="https://cdn/i.jpg"))
        stage, generator = make_stage(store, ["पुन्हा लिहिलेली बातमी", '"पुण्यात नवी क्रिकेट स्पर्धा"'])

        result = stage.process_one()

        assert result.processed is True
        assert result.remaining == 1
        assert result.unprocessed_id == old.id
        article = result.article
        assert article.title == "पुण्यात नवी क्रिकेट स्पर्धा"
        assert article.original_title == MARATHI_TITLE
        assert article.rewritten_description == "पुन्हा लिहिलेली बातमी"
        assert article.link == "https://x/old"
        assert article.image_url == "https://cdn/i.jpg"
        assert article.categories == ["pune", "sports"]
        assert article.is_title_rewritten is True
        assert article.disclaimer == DISCLAIMER
        assert article.processed_at == PROCESSED_AT
        assert store.get_unprocessed(old.id).processed is True
        assert store.get_unprocessed(old.id).processed_at == PROCESSED_AT

    def test_markup_is_stripped_before_generation(self, store):
        store.insert_unprocessed(make_unprocessed("https://x/1", content="<div><b>पूर्ण</b> बातमी</div>"))
        stage, generator = make_stage(store)

        stage.process_one()

        assert "पूर्ण बातमी" in generator.calls[0]
        assert "<b>" not in generator.calls[0]

    def test_category_filter(self, store):
        store.insert_unprocessed(make_unprocessed("https://x/mumbai", categories=["mumbai"]))
        pune = store.insert_unprocessed(make_unprocessed("https://x/pune", minutes=5, categories=["pune"]))
        stage, _ = make_stage(store)

        result = stage.process_one("pune")

        assert result.unprocessed_id == pune.id
        assert result.remaining == 0
        assert stage.process_one("pune").processed is False
        assert store.count_pending() == 1

    def test_body_failure_falls_back_to_truncated_content(self, store):
        long_content = "बातमी " * 200
        store.insert_unprocessed(make_unprocessed("https://x/1", content=long_content))
        stage, _ = make_stage(store, [GenerationError("service down"), "नवीन शीर्षक"])

        result = stage.process_one()

        assert result.processed is True
        body = result.article.rewritten_description
        assert body.endswith("...")
        assert len(body) == 503
        assert result.article.title == "नवीन शीर्षक"
        assert any("Body rewrite failed" in w for w in result.warnings)

    def test_title_failure_keeps_original_title(self, store):
        store.insert_unprocessed(make_unprocessed("https://x/1"))
        stage, _ = make_stage(store, ["नवीन मजकूर", GenerationError("timeout")])

        result = stage.process_one()

        assert result.article.title == MARATHI_TITLE
        assert result.article.is_title_rewritten is False
        assert result.article.rewritten_description == "नवीन मजकूर"

    def test_exhausted_rate_limits_fall_back_without_aborting(self, store):
        store.insert_unprocessed(make_unprocessed("https://x/1", content="", description=""))
        sleeps = []
        stage, _ = make_stage(store, [RateLimitedError("429")] * 8, sleeps)

        result = stage.process_one()

        assert result.processed is True
        assert result.article.rewritten_description == MARATHI_TITLE
        assert result.article.title == MARATHI_TITLE
        assert len(sleeps) == 6
        assert len(result.warnings) == 2


class TestIdempotence:
    def test_existing_processed_row_only_flips_flag(self, store):
        pending = store.insert_unprocessed(make_unprocessed("https://x/1"))
        store.insert_processed(
            ProcessedArticle(
                unprocessed_id=pending.id,
                source_name=pending.source_name,
                title="पहिले शीर्षक",
                original_title=pending.title,
                rewritten_description="पहिला मजकूर",
                link=pending.link,
                processed_at=BASE_TIME,
            )
        )
        stage, _ = make_stage(store)

        result = stage.process_one()

        assert result.processed is False
        assert result.recovered is True
        assert result.remaining == 0
        assert store.get_unprocessed(pending.id).processed is True
        assert len(store.processed_for(pending.id)) == 1
        assert store.processed_for(pending.id)[0].title == "पहिले शीर्षक"

    def test_lost_flag_write_is_healed_on_next_run(self, store):
        pending = store.insert_unprocessed(make_unprocessed("https://x/1"))
        stage, _ = make_stage(store)
        store.mark_processed = Mock(side_effect=StoreError("connection reset"))

        first = stage.process_one()

        assert first.processed is True
        assert any("Could not mark" in w for w in first.warnings)
        assert store.get_unprocessed(pending.id).processed is False

        del store.mark_processed
        second = stage.process_one()

        assert second.processed is False
        assert second.recovered is True
        assert len(store.processed_for(pending.id)) == 1
        assert stage.process_one().remaining == 0

    def test_processed_insert_error_is_reported(self, store):
        store.insert_unprocessed(make_unprocessed("https://x/1"))
        stage, _ = make_stage(store)
        store.insert_processed = Mock(side_effect=StoreError("disk full"))

        result = stage.process_one()

        assert result.processed is False
        assert result.remaining == 1
        assert "disk full" in result.warnings[0]

    def test_count_failure_after_write_still_returns_result(self, store):
        pending = store.insert_unprocessed(make_unprocessed("https://x/1"))
        store.insert_unprocessed(make_unprocessed("https://x/2", minutes=5))
        stage, _ = make_stage(store)
        store.count_pending = Mock(side_effect=StoreError("down"))

        result = stage.process_one()

        assert result.processed is True
        assert result.remaining is None
        assert result.article.link == "https://x/1"
        assert any("Could not count pending" in w for w in result.warnings)
        assert store.get_unprocessed(pending.id).processed is True

    def test_batch_continues_when_count_is_unknown(self, store):
        for i in range(2):
            store.insert_unprocessed(make_unprocessed(f"https://x/{i}", minutes=i))
        stage, _ = make_stage(store)
        store.count_pending = Mock(side_effect=StoreError("down"))

        results = stage.process_batch(2)

        assert [r.processed for r in results] == [True, True]


class TestProcessBatch:
    def test_drains_pending_articles(self, store):
        for i in range(3):
            store.insert_unprocessed(make_unprocessed(f"https://x/{i}", minutes=i))
        stage, _ = make_stage(store)

        results = stage.process_batch(5)

        assert [r.processed for r in results] == [True, True, True]
        assert results[-1].remaining == 0
        assert [r.article.link for r in results] == ["https://x/0", "https://x/1", "https://x/2"]

    def test_respects_count(self, store):
        for i in range(3):
            store.insert_unprocessed(make_unprocessed(f"https://x/{i}", minutes=i))
        stage, _ = make_stage(store)

        results = stage.process_batch(2)

        assert len(results) == 2
        assert results[-1].remaining == 1

    def test_stops_when_no_progress(self, store):
        store.insert_unprocessed(make_unprocessed("https://x/1"))
        stage, _ = make_stage(store)
        store.insert_processed = Mock(side_effect=StoreError("disk full"))

        assert len(stage.process_batch(5)) == 1


def test_custom_queue_is_used(store):
    queue = Mock(spec=StorePendingQueue)
    queue.claim.return_value = None
    queue.remaining.return_value = 7
    stage = RewriteStage(store, ArticleRewriter(MockTextGenerator()), queue=queue)

    result = stage.process_one("sports")

    queue.claim.assert_called_once_with("sports")
    assert result.remaining == 7


@pytest.mark.parametrize("category", [None, "pune"])
def test_remaining_counts_same_filter(store, category):
    store.insert_unprocessed(make_unprocessed("https://x/1", categories=["pune"]))
    store.insert_unprocessed(make_unprocessed("https://x/2", minutes=1, categories=["mumbai"]))
    stage, _ = make_stage(store)

    result = stage.process_one(category)

    assert result.remaining == (1 if category is None else 0)
