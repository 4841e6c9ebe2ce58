"""Base model for stored records."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class DBModel(BaseModel):
    """Row-backed model; id and audit timestamps are set by the store."""

    model_config = ConfigDict(from_attributes=True)

    id: Optional[int] = Field(None, description="Primary key")
    created_at: Optional[datetime] = Field(None, description="Row creation time")
    updated_at: Optional[datetime] = Field(None, description="Last row update")
