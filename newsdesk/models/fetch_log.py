"""Fetch log model."""

from datetime import datetime

from pydantic import BaseModel, Field


class FetchLogEntry(BaseModel):
    """Records that a source has already yielded a link."""

    source_name: str = Field(..., description="Feed source name")
    link: str = Field(..., description="Article URL")
    fetched_at: datetime = Field(..., description="When the link was first logged")
