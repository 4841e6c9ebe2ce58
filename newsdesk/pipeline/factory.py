"""Wire pipeline stages from configuration."""

from typing import Optional

from ..classification import CategoryCatalog, ContentClassifier, default_tables
from ..config import Config
from ..db import ArticleStore, PostgresArticleStore
from ..generation import ArticleRewriter, RetryPolicy, build_text_generator
from ..images import ImageResolver, S3ObjectStorage, build_stock_providers
from ..ingestion import RSSFetcher
from .orchestrator import FetchOrchestrator
from .rewrite import RewriteStage


def build_store(config: Config) -> ArticleStore:
    return PostgresArticleStore(config.get_db_config())


def build_image_resolver(config: Config) -> Optional[ImageResolver]:
    """Image resolver, or None when image handling is disabled."""
    images = config.config.images
    if not images.enabled:
        return None
    return ImageResolver(
        catalog=CategoryCatalog(default_tables()),
        storage=S3ObjectStorage.from_config(config.get_object_storage_config()),
        stock_providers=build_stock_providers(config.get_stock_keys(), timeout=config.config.stock.timeout),
        timeout=images.timeout,
        user_agent=images.user_agent,
        key_prefix=images.key_prefix,
    )


def build_fetch_orchestrator(
    config: Config,
    store: Optional[ArticleStore] = None,
    strict_filter: Optional[bool] = None,
) -> FetchOrchestrator:
    fetch = config.config.fetch
    return FetchOrchestrator(
        store=store or build_store(config),
        feed_client=RSSFetcher(timeout=fetch.timeout, max_concurrent=fetch.max_concurrent),
        classifier=ContentClassifier(default_tables()),
        image_resolver=build_image_resolver(config),
        strict_filter=fetch.strict_filter if strict_filter is None else strict_filter,
        language=fetch.language,
    )


def build_rewrite_stage(config: Config, store: Optional[ArticleStore] = None) -> RewriteStage:
    """Rewrite stage for the configured provider.

    Raises GenerationConfigError when the provider cannot be built.
    """
    llm_config = config.get_llm_config()
    rewriter = ArticleRewriter(build_text_generator(llm_config), RetryPolicy.from_config(llm_config))
    return RewriteStage(store=store or build_store(config), rewriter=rewriter)
