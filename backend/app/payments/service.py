import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import Payment

logger = logging.getLogger(__name__)


async def record_payment(db: AsyncSession, email: str, details: Dict[str, Any]) -> Payment:
    payment = Payment(email=email, details=details)
    db.add(payment)
    await db.commit()
    await db.refresh(payment)
    logger.info(f"Recorded payment #{payment.id} for {email}")
    return payment


async def list_payments(db: AsyncSession, email: str) -> List[Payment]:
    result = await db.execute(
        select(Payment).where(Payment.email == email).order_by(Payment.id.desc())
    )
    return list(result.scalars().all())


async def latest_payment_at(db: AsyncSession, email: str) -> Optional[datetime]:
    """email 의 가장 최근 결제 기록 시각 (없으면 None)."""
    result = await db.execute(select(func.max(Payment.created_at)).where(Payment.email == email))
    return result.scalar_one_or_none()
