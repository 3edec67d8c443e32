import logging
from typing import List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import Publisher
from .schemas import PublisherCreate

logger = logging.getLogger(__name__)


async def create_publisher(db: AsyncSession, data: PublisherCreate) -> Publisher:
    publisher = Publisher(name=data.name.strip(), logo=data.logo)
    db.add(publisher)
    await db.commit()
    await db.refresh(publisher)
    logger.info(f"Created publisher {publisher.name!r}")
    return publisher


async def list_publishers(db: AsyncSession) -> List[Publisher]:
    result = await db.execute(select(Publisher).order_by(Publisher.id))
    return list(result.scalars().all())
