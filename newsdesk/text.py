"""Text helpers for feed fields."""

import re
from typing import Optional
from urllib.parse import urlparse

from lxml import etree
from lxml import html as lxml_html

_WHITESPACE = re.compile(r"\s+")
_TAG = re.compile(r"<[^>]*>")
_PUBLISHER_SUFFIX = re.compile(r"( - |\|).*$")


def _fragment(markup: str):
    return lxml_html.fragment_fromstring(markup, create_parent="div")


def strip_html(markup: Optional[str]) -> str:
    """Plain text of an HTML fragment with entities decoded and whitespace collapsed."""
    if not markup or not markup.strip():
        return ""
    try:
        text = " ".join(_fragment(markup).itertext())
    except (etree.ParserError, ValueError):
        text = _TAG.sub(" ", markup)
    return _WHITESPACE.sub(" ", text).strip()


def first_image_src(markup: Optional[str]) -> Optional[str]:
    """src of the first <img> in an HTML fragment."""
    if not markup or "<img" not in markup.lower():
        return None
    try:
        root = _fragment(markup)
    except (etree.ParserError, ValueError):
        return None
    for img in root.iter("img"):
        src = (img.get("src") or "").strip()
        if src:
            return src
    return None


def truncate(text: str, limit: int, suffix: str = "...") -> str:
    """Cut text to limit characters, marking the cut."""
    if len(text) <= limit:
        return text
    return text[:limit].rstrip() + suffix


def clean_title(title: Optional[str]) -> str:
    """Drop a trailing publisher suffix (" - Site" or "| Site") from a feed title."""
    title = (title or "").strip()
    cleaned = _PUBLISHER_SUFFIX.sub("", title).strip()
    return cleaned or title


def is_http_url(link: Optional[str]) -> bool:
    """True for absolute http(s) URLs with a host."""
    if not link:
        return False
    try:
        parsed = urlparse(link)
    except ValueError:
        return False
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)
