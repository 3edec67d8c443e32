# backend/app/payments/models.py
from sqlalchemy import Column, Integer, String, DateTime, JSON
from sqlalchemy.sql import func
from ..database import Base

class Payment(Base):
    """결제 완료 기록. 한 번 쓰고 수정/삭제하지 않습니다."""
    __tablename__ = "payments"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), nullable=False, index=True)
    details = Column(JSON, nullable=False)  # 게이트웨이가 돌려준 금액/통화/상태 등 클라이언트 전달값 그대로
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self) -> str:
        return f"Payment(id={self.id}, email={self.email!r})"
