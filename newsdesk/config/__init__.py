"""Configuration management for the news desk."""

from .loader import Config, load_config, load_sources, save_config, save_sources, select_sources
from .models import (
    ConfigModel,
    FetchConfig,
    ImageConfig,
    LLMConfig,
    ObjectStorageConfig,
    PostgresConfig,
    SourceConfig,
    StockConfig,
)

__all__ = [
    "Config",
    "ConfigModel",
    "FetchConfig",
    "ImageConfig",
    "LLMConfig",
    "ObjectStorageConfig",
    "PostgresConfig",
    "SourceConfig",
    "StockConfig",
    "load_config",
    "load_sources",
    "save_config",
    "save_sources",
    "select_sources",
]
