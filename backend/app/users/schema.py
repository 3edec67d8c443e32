from pydantic import EmailStr, Field
from typing import List, Literal, Optional
from datetime import datetime

from ..models import CustomModel

class UserBase(CustomModel):
    email: EmailStr = Field(..., json_schema_extra={"example": "reader@example.com"})
    name: Optional[str] = Field(None, max_length=100, json_schema_extra={"example": "Jane Reader"})
    photo: Optional[str] = Field(None, max_length=1024)

class UserCreate(UserBase):
    pass

class UserUpdate(CustomModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    photo: Optional[str] = Field(None, max_length=1024)

class PremiumUpdate(CustomModel):
    # null 을 보내면 프리미엄을 명시적으로 해제합니다.
    premium_info: Optional[datetime] = Field(..., json_schema_extra={"example": "2026-12-31T00:00:00Z"})

class UserPublic(UserBase):
    id: int
    role: Literal["user", "admin"] = "user"
    premium_info: Optional[datetime] = None
    created_at: Optional[datetime] = None

class UserCreateResult(CustomModel):
    message: Optional[str] = None
    inserted_id: Optional[int] = None

class UserListResponse(CustomModel):
    total: int
    users: List[UserPublic]

class RoleResponse(CustomModel):
    role: str

class UserStats(CustomModel):
    total_users: int
    normal_users: int
    premium_users: int
