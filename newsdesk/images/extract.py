"""Image candidates carried by the feed item itself."""

from typing import Optional

from pydantic import BaseModel, Field

from ..ingestion.models import RawItem
from ..text import first_image_src


class ImageCandidate(BaseModel):
    """An image URL and where it was found."""

    url: str = Field(..., description="Image URL")
    source: str = Field(..., description="inline, media_thumbnail, media_content, enclosure or a stock provider")
    attribution: Optional[str] = Field(None, description="Credit line, for stock photos")


def extract_feed_image(item: RawItem) -> Optional[ImageCandidate]:
    """First image found in the item, in fallback order.

    Inline <img> in content then description, media thumbnail, media content,
    then an enclosure declared as an image.
    """
    for markup in (item.content, item.description):
        src = first_image_src(markup)
        if src:
            return ImageCandidate(url=src, source="inline")

    if item.media_thumbnail:
        return ImageCandidate(url=item.media_thumbnail, source="media_thumbnail")

    if item.media_content:
        return ImageCandidate(url=item.media_content, source="media_content")

    enclosure = item.enclosure
    if enclosure and enclosure.url and (enclosure.type or "").lower().startswith("image/"):
        return ImageCandidate(url=enclosure.url, source="enclosure")

    return None
