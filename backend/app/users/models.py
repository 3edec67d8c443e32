# backend/app/users/models.py
from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.sql import func
from ..database import Base

class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100))
    email = Column(String(255), unique=True, index=True, nullable=False)
    photo = Column(String(1024))
    role = Column(String(50), default="user", nullable=False)
    # 프리미엄 만료 시각 (UTC). 과거 값은 만료로 간주되어 다음 인증 요청 때 NULL 로 정리됩니다.
    premium_info = Column(DateTime(timezone=True), nullable=True, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self) -> str:
        return f"User(id={self.id}, email={self.email!r}, role={self.role!r}, premium_info={self.premium_info!r})"
    def __str__(self) -> str:
        return f"{self.name} ({self.email})"
