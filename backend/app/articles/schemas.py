# backend/app/articles/schemas.py
from ..models import CustomModel
from .models import ArticleStatus
from pydantic import Field, field_validator
from typing import Optional, List
from datetime import datetime

class LabeledValue(CustomModel):
    """react-select 형식의 {value, label} 쌍 (publisher, tags)"""
    value: str = Field(..., min_length=1, max_length=255)
    label: str = Field(..., min_length=1, max_length=255)

class ArticleCreate(CustomModel):
    title: str = Field(..., min_length=1, max_length=500)
    description: str = Field(..., min_length=1)
    image: Optional[str] = Field(None, max_length=1024)
    publisher: Optional[LabeledValue] = None
    tags: List[LabeledValue] = Field(default_factory=list)
    author_name: Optional[str] = Field(None, max_length=100)
    author_photo: Optional[str] = Field(None, max_length=1024)

    @field_validator("title")
    @classmethod
    def _strip_title(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("title must not be blank")
        return v

class ArticleUpdate(CustomModel):
    """부분 수정(merge-patch). 전달된 필드만 반영됩니다."""
    title: Optional[str] = Field(None, min_length=1, max_length=500)
    description: Optional[str] = Field(None, min_length=1)
    image: Optional[str] = Field(None, max_length=1024)
    publisher: Optional[LabeledValue] = None
    tags: Optional[List[LabeledValue]] = None
    is_exclusive: Optional[bool] = None

class ModerationRequest(CustomModel):
    # status 누락은 스키마 오류가 아닌 "status required" 로 응답합니다.
    status: Optional[ArticleStatus] = None
    decline_reason: Optional[str] = Field(None, max_length=2000)

class ArticleOut(CustomModel):
    id: int
    title: str
    description: str
    image: Optional[str] = None
    author_name: Optional[str] = None
    author_email: str
    author_photo: Optional[str] = None
    publisher: Optional[LabeledValue] = None
    tags: List[LabeledValue] = Field(default_factory=list)
    status: ArticleStatus
    decline_reason: Optional[str] = None
    views: int = 0
    is_premium: bool = False
    is_exclusive: bool = False
    created_at: Optional[datetime] = None

class ArticleListResponse(CustomModel):
    total: int = Field(..., description="근사치 전체 기사 수 (필터/페이지 무관)")
    articles: List[ArticleOut]

class ModerationResponse(CustomModel):
    message: str
    status: ArticleStatus

class ViewResponse(CustomModel):
    message: str
    views: int

class PremiumResponse(CustomModel):
    message: str
    is_premium: bool

class DeleteResponse(CustomModel):
    deleted_count: int
