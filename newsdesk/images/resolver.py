"""Image resolution: find an image for an item and re-host it."""

import re
import secrets
import time
from pathlib import PurePosixPath
from typing import List, Optional, Sequence, Tuple
from urllib.parse import urlparse

import httpx
from pydantic import BaseModel, Field
from rich.console import Console

from ..classification import CategoryCatalog
from ..ingestion.models import RawItem
from .errors import ImageDownloadError, ImageError, StockPhotoError
from .extract import ImageCandidate, extract_feed_image
from .stock import StockPhotoProvider
from .storage import ObjectStorage

console = Console()

CONTENT_TYPE_EXTENSIONS = {
    "image/jpeg": ".jpg",
    "image/jpg": ".jpg",
    "image/pjpeg": ".jpg",
    "image/png": ".png",
    "image/gif": ".gif",
    "image/webp": ".webp",
    "image/avif": ".avif",
    "image/svg+xml": ".svg",
}

URL_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif", ".webp", ".avif", ".svg"}

DEFAULT_CONTENT_TYPE = "image/jpeg"

_NON_SLUG = re.compile(r"[^a-z0-9]+")


class ImageResolution(BaseModel):
    """Outcome of resolving an image for one item."""

    url: Optional[str] = Field(None, description="URL to publish: re-hosted if possible, else the original")
    original_url: Optional[str] = Field(None, description="URL the image was found at")
    attribution: Optional[str] = Field(None, description="Credit line for stock photos")
    was_downloaded: bool = Field(False, description="Whether the image was re-hosted")
    source: Optional[str] = Field(None, description="Where the image was found")
    warnings: List[str] = Field(default_factory=list, description="Non-fatal failures along the way")


def source_slug(source_name: str) -> str:
    """Path-safe form of a source name."""
    slug = _NON_SLUG.sub("-", source_name.lower()).strip("-")
    return slug or "news"


def file_extension(content_type: str, url: str) -> str:
    """Extension from the content type, else from the URL path, else .jpg."""
    mime = content_type.split(";")[0].strip().lower()
    if mime in CONTENT_TYPE_EXTENSIONS:
        return CONTENT_TYPE_EXTENSIONS[mime]
    suffix = PurePosixPath(urlparse(url).path).suffix.lower()
    if suffix in URL_EXTENSIONS:
        return ".jpg" if suffix == ".jpeg" else suffix
    return ".jpg"


class ImageResolver:
    """Ordered fallback chain followed by download and re-host.

    Every failure is non-fatal: it is logged, recorded as a warning, and the
    next fallback is tried. Re-hosting failures keep the original URL.
    """

    def __init__(
        self,
        catalog: CategoryCatalog,
        storage: Optional[ObjectStorage] = None,
        stock_providers: Sequence[StockPhotoProvider] = (),
        timeout: float = 10.0,
        user_agent: str = "Mozilla/5.0 (News Aggregator)",
        key_prefix: str = "news-images",
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.catalog = catalog
        self.storage = storage
        self.stock_providers = list(stock_providers)
        self.timeout = timeout
        self.user_agent = user_agent
        self.key_prefix = key_prefix.strip("/")
        self.transport = transport

    def resolve(self, item: RawItem, categories: List[str]) -> ImageResolution:
        """Find an image for item and re-host it when storage is available."""
        warnings: List[str] = []

        candidate = extract_feed_image(item)
        if candidate is None:
            candidate = self.search_stock(categories, warnings)

        if candidate is None:
            console.print(f"  [dim]No image found for {item.link}[/dim]")
            return ImageResolution(warnings=warnings)

        resolution = ImageResolution(
            url=candidate.url,
            original_url=candidate.url,
            attribution=candidate.attribution,
            source=candidate.source,
            warnings=warnings,
        )

        if self.storage is None:
            return resolution

        try:
            hosted_url = self.rehost(candidate.url, item.source_name)
        except ImageError as e:
            message = f"Image re-host failed, using original URL: {e}"
            console.print(f"  [yellow]{message}[/yellow]")
            warnings.append(message)
            return resolution

        resolution.url = hosted_url
        resolution.was_downloaded = True
        return resolution

    def search_stock(self, categories: List[str], warnings: List[str]) -> Optional[ImageCandidate]:
        """Try each stock provider in order."""
        query = self.catalog.search_term(categories)
        for provider in self.stock_providers:
            if not provider.enabled:
                continue
            try:
                photo = provider.search(query)
            except StockPhotoError as e:
                message = str(e)
                console.print(f"  [yellow]{message}[/yellow]")
                warnings.append(message)
                continue
            if photo is not None:
                console.print(f"  [cyan]Stock photo from {photo.provider} for '{query}'[/cyan]")
                return ImageCandidate(url=photo.url, source=photo.provider, attribution=photo.attribution)
        return None

    def download(self, url: str) -> Tuple[bytes, str]:
        """Fetch image bytes and their content type."""
        if not url.startswith(("http://", "https://")):
            raise ImageDownloadError(f"Not an http(s) URL: {url}")
        try:
            with httpx.Client(
                timeout=self.timeout,
                follow_redirects=True,
                headers={"User-Agent": self.user_agent},
                transport=self.transport,
            ) as client:
                response = client.get(url)
                response.raise_for_status()
        except httpx.HTTPError as e:
            raise ImageDownloadError(f"Download of {url} failed: {e}") from e

        if not response.content:
            raise ImageDownloadError(f"Empty image body from {url}")
        content_type = response.headers.get("content-type") or DEFAULT_CONTENT_TYPE
        return response.content, content_type

    def build_key(self, source_name: str, content_type: str, url: str) -> str:
        """<prefix>/<source-slug>/<millis>-<random><ext>"""
        timestamp = int(time.time() * 1000)
        suffix = secrets.token_hex(5)
        ext = file_extension(content_type, url)
        return f"{self.key_prefix}/{source_slug(source_name)}/{timestamp}-{suffix}{ext}"

    def rehost(self, url: str, source_name: str) -> str:
        """Download url and upload it to object storage."""
        data, content_type = self.download(url)
        key = self.build_key(source_name, content_type, url)
        return self.storage.put(key, data, content_type.split(";")[0].strip())
