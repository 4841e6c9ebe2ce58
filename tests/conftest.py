"""Shared fixtures."""

import pytest

from newsdesk.classification import CategoryCatalog, ContentClassifier, default_tables
from newsdesk.config import SourceConfig
from newsdesk.db import MemoryArticleStore


@pytest.fixture
def tables():
    return default_tables()


@pytest.fixture
def classifier(tables):
    return ContentClassifier(tables)


@pytest.fixture
def catalog(tables):
    return CategoryCatalog(tables)


@pytest.fixture
def store():
    return MemoryArticleStore()


@pytest.fixture
def source():
    return SourceConfig(name="TV9 Marathi", url="https://www.tv9marathi.com/feed")
