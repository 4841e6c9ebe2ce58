"""Stock photo search providers."""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

import httpx
from pydantic import BaseModel, Field

from .errors import StockPhotoError


class StockPhoto(BaseModel):
    """A stock photo search hit."""

    url: str = Field(..., description="Image URL")
    attribution: str = Field(..., description="Credit line")
    provider: str = Field(..., description="Provider name")


class StockPhotoProvider(ABC):
    """Searches a stock photo service."""

    name: str = "stock"
    endpoint: str = ""

    def __init__(
        self,
        api_key: Optional[str],
        timeout: float = 8.0,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.api_key = api_key
        self.timeout = timeout
        self.transport = transport

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    def search(self, query: str) -> Optional[StockPhoto]:
        """First landscape photo for query; None when disabled or nothing found."""
        if not self.enabled:
            return None
        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                response = client.get(self.endpoint, params=self.params(query), headers=self.headers())
                response.raise_for_status()
                payload = response.json()
        except httpx.HTTPError as e:
            raise StockPhotoError(f"{self.name} search failed: {e}") from e
        except ValueError as e:
            raise StockPhotoError(f"{self.name} returned invalid JSON: {e}") from e
        if not isinstance(payload, dict):
            raise StockPhotoError(f"{self.name} returned an unexpected payload: {type(payload).__name__}")
        try:
            return self.parse(payload)
        except (AttributeError, TypeError, ValueError) as e:
            raise StockPhotoError(f"{self.name} returned a malformed result: {e}") from e

    def params(self, query: str) -> Dict[str, Any]:
        return {"query": query, "per_page": 1, "orientation": "landscape"}

    @abstractmethod
    def headers(self) -> Dict[str, str]:
        """Authentication headers."""

    @abstractmethod
    def parse(self, payload: Dict[str, Any]) -> Optional[StockPhoto]:
        """Pick the first usable photo from a search response."""


class UnsplashProvider(StockPhotoProvider):
    """Unsplash search API."""

    name = "unsplash"
    endpoint = "https://api.unsplash.com/search/photos"

    def headers(self) -> Dict[str, str]:
        return {"Authorization": f"Client-ID {self.api_key}"}

    def parse(self, payload: Dict[str, Any]) -> Optional[StockPhoto]:
        results = payload.get("results") or []
        photo = results[0] if isinstance(results, list) and results else None
        if not isinstance(photo, dict):
            return None
        urls = photo.get("urls") or {}
        url = urls.get("regular") or urls.get("small")
        if not url:
            return None
        author = (photo.get("user") or {}).get("name") or "Unknown"
        return StockPhoto(url=url, attribution=f"Photo by {author} on Unsplash", provider=self.name)


class PexelsProvider(StockPhotoProvider):
    """Pexels search API."""

    name = "pexels"
    endpoint = "https://api.pexels.com/v1/search"

    def headers(self) -> Dict[str, str]:
        return {"Authorization": self.api_key or ""}

    def parse(self, payload: Dict[str, Any]) -> Optional[StockPhoto]:
        photos = payload.get("photos") or []
        photo = photos[0] if isinstance(photos, list) and photos else None
        if not isinstance(photo, dict):
            return None
        src = photo.get("src") or {}
        url = src.get("large") or src.get("medium")
        if not url:
            return None
        author = photo.get("photographer") or "Unknown"
        return StockPhoto(url=url, attribution=f"Photo by {author} on Pexels", provider=self.name)


def build_stock_providers(
    keys: Dict[str, Optional[str]],
    timeout: float = 8.0,
    transport: Optional[httpx.BaseTransport] = None,
) -> List[StockPhotoProvider]:
    """Providers in search order: Unsplash first, then Pexels."""
    return [
        UnsplashProvider(keys.get("unsplash"), timeout=timeout, transport=transport),
        PexelsProvider(keys.get("pexels"), timeout=timeout, transport=transport),
    ]
