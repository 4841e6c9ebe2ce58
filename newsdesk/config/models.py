"""Configuration models."""

from typing import Optional

from pydantic import BaseModel, Field


class PostgresConfig(BaseModel):
    """Postgres configuration."""

    host: str = Field("localhost", description="Database host")
    port: int = Field(5432, description="Database port")
    database: str = Field("newsdesk", description="Database name")
    user: str = Field("newsdesk_user", description="Database user")
    password: Optional[str] = Field(None, description="Database password")
    password_env: Optional[str] = Field(None, description="Environment variable for password")
    pool_min_size: int = Field(1, description="Connections kept open", ge=1)
    pool_max_size: int = Field(10, description="Upper bound on pooled connections", ge=1)


class LLMConfig(BaseModel):
    """Text-generation provider configuration."""

    provider: str = Field("openai", description="LLM provider (openai, mock)")
    model: str = Field("gpt-4o-mini", description="Model name")
    api_key_env: Optional[str] = Field("OPENAI_API_KEY", description="Environment variable for API key")
    api_key: Optional[str] = Field(None, description="API key (prefer api_key_env)")
    base_url: Optional[str] = Field(None, description="Base URL for an OpenAI-compatible API")
    timeout: float = Field(60.0, description="Request timeout in seconds", gt=0)
    max_retries: int = Field(3, description="Retries after a rate-limit response", ge=0, le=10)
    base_delay: float = Field(2.0, description="First backoff delay in seconds", ge=0)
    max_jitter: float = Field(2.0, description="Upper bound of random jitter in seconds", ge=0)


class FetchConfig(BaseModel):
    """Fetch run defaults."""

    total_limit: int = Field(6, description="Max articles accepted per run", ge=1, le=1000)
    per_source_limit: Optional[int] = Field(
        None, description="Max articles per source (default: total split evenly)", ge=1
    )
    max_concurrent: int = Field(5, description="Concurrent feed retrievals", ge=1, le=50)
    timeout: float = Field(30.0, description="Feed retrieval timeout in seconds", gt=0)
    strict_filter: bool = Field(False, description="Skip blocked and off-topic items")
    language: str = Field("mr", description="Language tag stored on articles")


class ImageConfig(BaseModel):
    """Image re-hosting configuration."""

    enabled: bool = Field(True, description="Resolve and re-host images")
    timeout: float = Field(10.0, description="Image download timeout in seconds", gt=0)
    key_prefix: str = Field("news-images", description="Object key prefix")
    user_agent: str = Field("Mozilla/5.0 (News Aggregator)", description="Download user agent")


class ObjectStorageConfig(BaseModel):
    """S3-compatible object storage (e.g. Cloudflare R2)."""

    bucket: Optional[str] = Field(None, description="Bucket name")
    endpoint_url: Optional[str] = Field(None, description="S3 endpoint URL")
    public_url: Optional[str] = Field(None, description="Public base URL for uploaded objects")
    region: str = Field("auto", description="Region name")
    access_key_env: str = Field("R2_ACCESS_KEY_ID", description="Environment variable for access key")
    secret_key_env: str = Field("R2_SECRET_ACCESS_KEY", description="Environment variable for secret key")


class StockConfig(BaseModel):
    """Stock photo providers."""

    unsplash_key_env: str = Field("UNSPLASH_ACCESS_KEY", description="Environment variable for Unsplash key")
    pexels_key_env: str = Field("PEXELS_API_KEY", description="Environment variable for Pexels key")
    timeout: float = Field(8.0, description="Search timeout in seconds", gt=0)


class ConfigModel(BaseModel):
    """Main configuration model."""

    postgres: PostgresConfig = Field(default_factory=PostgresConfig)
    llm: LLMConfig = Field(default_factory=LLMConfig)
    fetch: FetchConfig = Field(default_factory=FetchConfig)
    images: ImageConfig = Field(default_factory=ImageConfig)
    object_storage: ObjectStorageConfig = Field(default_factory=ObjectStorageConfig)
    stock: StockConfig = Field(default_factory=StockConfig)


class SourceConfig(BaseModel):
    """Feed source from sources.yaml."""

    name: str = Field(..., description="Source name")
    url: str = Field(..., description="Feed URL")
    enabled: bool = Field(True, description="Whether source is enabled")
