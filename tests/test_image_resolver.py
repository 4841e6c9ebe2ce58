"""Tests for image extraction, stock search and re-hosting."""

from unittest.mock import Mock

import httpx
import pytest

from newsdesk.images import (
    ImageResolver,
    MemoryObjectStorage,
    ObjectStorageError,
    PexelsProvider,
    UnsplashProvider,
    extract_feed_image,
    file_extension,
    source_slug,
)
from newsdesk.ingestion import Enclosure
from tests.helpers import make_item

PNG_BYTES = b"\x89PNG\r\n\x1a\n fake"

UNSPLASH_HIT = {
    "results": [
        {"urls": {"regular": "https://images.unsplash.com/photo-1", "small": "https://images.unsplash.com/s"},
         "user": {"name": "Asha Patil"}}
    ]
}
PEXELS_HIT = {
    "photos": [
        {"src": {"large": "https://images.pexels.com/photo-2", "medium": "https://images.pexels.com/m"},
         "photographer": "Ravi Joshi"}
    ]
}


def image_transport(status=200, content_type="image/png", requests=None):
    def handler(request: httpx.Request) -> httpx.Response:
        if requests is not None:
            requests.append(request)
        return httpx.Response(status, content=PNG_BYTES, headers={"content-type": content_type})

    return httpx.MockTransport(handler)


def stock_transport(routes, requests=None):
    """routes: host -> (status, json payload)"""

    def handler(request: httpx.Request) -> httpx.Response:
        if requests is not None:
            requests.append(request)
        status, payload = routes[request.url.host]
        return httpx.Response(status, json=payload)

    return httpx.MockTransport(handler)


class TestExtractFeedImage:
    def test_inline_image_wins_over_thumbnail(self):
        item = make_item(
            "https://x/1",
            content='<p>बातमी</p><img src="https://x/a.jpg">',
            media_thumbnail="https://x/thumb.jpg",
        )

        candidate = extract_feed_image(item)

        assert candidate.url == "https://x/a.jpg"
        assert candidate.source == "inline"

    def test_description_image_when_content_has_none(self):
        item = make_item("https://x/1", content="<p>no image</p>", description='<img src="https://x/d.jpg">')
        assert extract_feed_image(item).url == "https://x/d.jpg"

    def test_thumbnail_before_media_content(self):
        item = make_item(
            "https://x/1",
            media_thumbnail="https://x/thumb.jpg",
            media_content="https://x/media.jpg",
        )
        assert extract_feed_image(item).source == "media_thumbnail"

    def test_media_content_before_enclosure(self):
        item = make_item(
            "https://x/1",
            media_content="https://x/media.jpg",
            enclosure=Enclosure(url="https://x/enc.jpg", type="image/jpeg"),
        )
        assert extract_feed_image(item).url == "https://x/media.jpg"

    def test_enclosure_must_be_an_image(self):
        audio = make_item("https://x/1", enclosure=Enclosure(url="https://x/a.mp3", type="audio/mpeg"))
        image = make_item("https://x/2", enclosure=Enclosure(url="https://x/e.jpg", type="image/jpeg"))

        assert extract_feed_image(audio) is None
        assert extract_feed_image(image).source == "enclosure"


class TestRehosting:
    def test_without_storage_uses_original_url(self, catalog):
        resolver = ImageResolver(catalog)
        item = make_item("https://x/1", content='<img src="https://x/a.jpg">', media_thumbnail="https://x/t.jpg")

        result = resolver.resolve(item, ["pune"])

        assert result.url == "https://x/a.jpg"
        assert result.was_downloaded is False

    def test_rehosts_to_namespaced_key(self, catalog):
        storage = MemoryObjectStorage(public_url="https://cdn.test")
        resolver = ImageResolver(catalog, storage=storage, transport=image_transport())
        item = make_item("https://x/1", media_thumbnail="https://x/thumb")

        result = resolver.resolve(item, ["pune"])

        assert result.was_downloaded is True
        assert result.original_url == "https://x/thumb"
        assert result.url.startswith("https://cdn.test/news-images/tv9-marathi/")
        assert result.url.endswith(".png")
        key = result.url[len("https://cdn.test/"):]
        assert storage.objects[key] == (PNG_BYTES, "image/png")

    def test_sends_user_agent(self, catalog):
        requests = []
        resolver = ImageResolver(
            catalog,
            storage=MemoryObjectStorage(),
            transport=image_transport(requests=requests),
            user_agent="Mozilla/5.0 (News Aggregator)",
        )
        resolver.resolve(make_item("https://x/1", media_thumbnail="https://x/t.jpg"), [])

        assert requests[0].headers["user-agent"] == "Mozilla/5.0 (News Aggregator)"

    def test_download_failure_keeps_original_url(self, catalog):
        resolver = ImageResolver(catalog, storage=MemoryObjectStorage(), transport=image_transport(status=404))
        item = make_item("https://x/1", media_thumbnail="https://x/t.jpg")

        result = resolver.resolve(item, ["pune"])

        assert result.url == "https://x/t.jpg"
        assert result.was_downloaded is False
        assert result.warnings

    def test_upload_failure_keeps_original_url(self, catalog):
        storage = Mock()
        storage.put.side_effect = ObjectStorageError("bucket unavailable")
        resolver = ImageResolver(catalog, storage=storage, transport=image_transport())
        item = make_item("https://x/1", media_thumbnail="https://x/t.jpg")

        result = resolver.resolve(item, ["pune"])

        assert result.url == "https://x/t.jpg"
        assert result.was_downloaded is False
        assert "bucket unavailable" in result.warnings[0]

    def test_non_http_url_is_not_downloaded(self, catalog):
        requests = []
        resolver = ImageResolver(catalog, storage=MemoryObjectStorage(), transport=image_transport(requests=requests))
        item = make_item("https://x/1", content='<img src="/relative/a.jpg">')

        result = resolver.resolve(item, [])

        assert result.url == "/relative/a.jpg"
        assert requests == []


class TestStockFallback:
    def test_uses_search_term_of_first_category(self, catalog):
        requests = []
        transport = stock_transport({"api.unsplash.com": (200, UNSPLASH_HIT)}, requests)
        resolver = ImageResolver(catalog, stock_providers=[UnsplashProvider("key", transport=transport)])

        result = resolver.resolve(make_item("https://x/1"), ["sports", "pune"])

        assert result.url == "https://images.unsplash.com/photo-1"
        assert result.attribution == "Photo by Asha Patil on Unsplash"
        assert result.source == "unsplash"
        assert requests[0].url.params["query"] == "cricket sports stadium"
        assert requests[0].headers["authorization"] == "Client-ID key"

    def test_secondary_provider_after_primary_failure(self, catalog):
        transport = stock_transport({
            "api.unsplash.com": (500, {"errors": ["boom"]}),
            "api.pexels.com": (200, PEXELS_HIT),
        })
        providers = [UnsplashProvider("u", transport=transport), PexelsProvider("p", transport=transport)]
        resolver = ImageResolver(catalog, stock_providers=providers)

        result = resolver.resolve(make_item("https://x/1"), [])

        assert result.url == "https://images.pexels.com/photo-2"
        assert result.attribution == "Photo by Ravi Joshi on Pexels"
        assert len(result.warnings) == 1

    def test_secondary_provider_after_empty_result(self, catalog):
        transport = stock_transport({
            "api.unsplash.com": (200, {"results": []}),
            "api.pexels.com": (200, PEXELS_HIT),
        })
        providers = [UnsplashProvider("u", transport=transport), PexelsProvider("p", transport=transport)]

        result = ImageResolver(catalog, stock_providers=providers).resolve(make_item("https://x/1"), [])

        assert result.source == "pexels"
        assert result.warnings == []

    def test_every_fallback_failing_yields_no_image(self, catalog):
        transport = stock_transport({
            "api.unsplash.com": (503, {}),
            "api.pexels.com": (200, {"photos": []}),
        })
        providers = [UnsplashProvider("u", transport=transport), PexelsProvider("p", transport=transport)]

        result = ImageResolver(catalog, stock_providers=providers).resolve(make_item("https://x/1"), ["pune"])

        assert result.url is None
        assert result.original_url is None
        assert result.was_downloaded is False

    def test_provider_without_key_is_skipped(self, catalog):
        requests = []
        transport = stock_transport({}, requests)
        providers = [UnsplashProvider(None, transport=transport), PexelsProvider("", transport=transport)]

        result = ImageResolver(catalog, stock_providers=providers).resolve(make_item("https://x/1"), [])

        assert result.url is None
        assert requests == []

    def test_non_object_payloads_fall_through_as_warnings(self, catalog):
        transport = stock_transport({
            "api.unsplash.com": (200, []),
            "api.pexels.com": (200, ["unexpected"]),
        })
        providers = [UnsplashProvider("u", transport=transport), PexelsProvider("p", transport=transport)]

        result = ImageResolver(catalog, stock_providers=providers).resolve(make_item("https://x/1"), [])

        assert result.url is None
        assert len(result.warnings) == 2

    def test_malformed_hits_are_skipped(self, catalog):
        transport = stock_transport({
            "api.unsplash.com": (200, {"results": ["not-a-photo"]}),
            "api.pexels.com": (200, {"photos": [{"src": "flat-string", "photographer": "X"}]}),
        })
        providers = [UnsplashProvider("u", transport=transport), PexelsProvider("p", transport=transport)]

        result = ImageResolver(catalog, stock_providers=providers).resolve(make_item("https://x/1"), [])

        assert result.url is None
        assert len(result.warnings) == 1


@pytest.mark.parametrize(
    "content_type,url,expected",
    [
        ("image/png", "https://x/a", ".png"),
        ("image/webp; charset=binary", "https://x/a.jpg", ".webp"),
        ("application/octet-stream", "https://x/a.gif", ".gif"),
        ("application/octet-stream", "https://x/a.JPEG", ".jpg"),
        ("application/octet-stream", "https://x/a", ".jpg"),
    ],
)
def test_file_extension(content_type, url, expected):
    assert file_extension(content_type, url) == expected


def test_source_slug():
    assert source_slug("TV9 Marathi") == "tv9-marathi"
    assert source_slug("Saam TV!") == "saam-tv"
    assert source_slug("लोकमत") == "news"
