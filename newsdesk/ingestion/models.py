"""Data models for ingestion."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class Enclosure(BaseModel):
    """Feed enclosure."""

    url: str = Field(..., description="Enclosure URL")
    type: Optional[str] = Field(None, description="Declared MIME type")


class RawItem(BaseModel):
    """Parsed feed item."""

    title: str = Field("", description="Item title")
    link: str = Field("", description="Item URL")
    guid: Optional[str] = Field(None, description="Feed guid")
    description: str = Field("", description="Summary/description, possibly HTML")
    content: str = Field("", description="Full content (content:encoded), possibly HTML")
    published: Optional[datetime] = Field(None, description="Publication date")
    media_thumbnail: Optional[str] = Field(None, description="media:thumbnail URL")
    media_content: Optional[str] = Field(None, description="media:content URL")
    enclosure: Optional[Enclosure] = Field(None, description="First enclosure")
    source_name: str = Field(..., description="Source name")


class FeedResult(BaseModel):
    """Result of fetching a feed."""

    source_name: str = Field(..., description="Source name")
    source_url: str = Field(..., description="Feed URL")
    success: bool = Field(..., description="Whether fetch was successful")
    items: list[RawItem] = Field(default_factory=list, description="Parsed feed items in feed order")
    error: Optional[str] = Field(None, description="Error message if failed")
    item_count: int = Field(0, description="Number of items fetched")
