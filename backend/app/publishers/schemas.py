from datetime import datetime
from typing import Optional

from pydantic import Field

from ..models import CustomModel


class PublisherCreate(CustomModel):
    name: str = Field(..., min_length=1, max_length=255, json_schema_extra={"example": "Daily Star"})
    logo: Optional[str] = Field(None, max_length=1024)


class PublisherOut(CustomModel):
    id: int
    name: str
    logo: Optional[str] = None
    created_at: Optional[datetime] = None


class PublisherArticleCount(CustomModel):
    publisher: Optional[str] = None
    count: int
