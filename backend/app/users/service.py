import logging
from datetime import datetime
from typing import List, Optional, Tuple

from fastapi import HTTPException, status
from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import estimated_count
from ..models import as_utc, utcnow
from .models import User as UserModel
from .schema import UserCreate, UserUpdate

logger = logging.getLogger(__name__)


async def create_user_if_absent(user_data: UserCreate, db: AsyncSession) -> Tuple[Optional[UserModel], bool]:
    """이메일 기준 멱등 생성. (user, created) 를 반환합니다."""
    existing_user = await get_user_by_email(user_data.email, db)
    if existing_user:
        return existing_user, False

    db_user = UserModel(
        name=user_data.name,
        email=user_data.email,
        photo=user_data.photo,
        role="user",
    )
    db.add(db_user)
    await db.commit()
    await db.refresh(db_user)
    logger.info(f"Created user {db_user.email}")
    return db_user, True

async def get_users(db: AsyncSession, skip: int = 0, limit: int = 10) -> Tuple[int, List[UserModel]]:
    """사용자 목록을 페이지네이션하여 조회합니다. total 은 근사치입니다."""
    total = await estimated_count(db, UserModel)
    result = await db.execute(
        select(UserModel)
        .order_by(UserModel.id)
        .offset(skip)
        .limit(limit)
    )
    return total, list(result.scalars().all())

async def update_user(db: AsyncSession, db_user: UserModel, user_in: UserUpdate) -> UserModel:
    """사용자 프로필을 수정합니다. 명시적으로 전달된 필드만 업데이트합니다."""
    update_data = user_in.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        setattr(db_user, field, value)

    await db.commit()
    await db.refresh(db_user)
    return db_user

async def set_premium(db: AsyncSession, email: str, premium_info: Optional[datetime]) -> UserModel:
    """프리미엄 만료 시각을 설정하거나(None 이면) 해제합니다."""
    user = await get_user_by_email(email, db)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="user not found")
    user.premium_info = as_utc(premium_info) if premium_info is not None else None
    await db.commit()
    await db.refresh(user)
    logger.info(f"Premium info for {email} set to {user.premium_info}")
    return user

async def clear_expired_premium(db: AsyncSession, email: str, now: Optional[datetime] = None) -> bool:
    """만료된(과거) premium_info 를 NULL 로 정리합니다. 정리했으면 True."""
    now = now or utcnow()
    result = await db.execute(
        update(UserModel)
        .where(
            UserModel.email == email,
            UserModel.premium_info.is_not(None),
            UserModel.premium_info <= now,
        )
        .values(premium_info=None)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount:
        await db.commit()
        logger.info(f"Premium expired for {email}; cleared")
        return True
    return False

async def make_admin(db: AsyncSession, user_id: int) -> UserModel:
    user = await get_user_by_id(user_id, db)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="user not found")
    user.role = "admin"
    await db.commit()
    await db.refresh(user)
    logger.info(f"User {user.email} promoted to admin")
    return user

async def get_role(email: str, db: AsyncSession) -> str:
    user = await get_user_by_email(email, db)
    return user.role if user and user.role else "user"

async def user_stats(db: AsyncSession, now: Optional[datetime] = None) -> dict:
    """전체(근사치) / 일반(premium_info 없음) / 프리미엄(만료 전) 사용자 수."""
    now = now or utcnow()
    total = await estimated_count(db, UserModel)
    normal = (await db.execute(
        select(func.count()).select_from(UserModel).where(UserModel.premium_info.is_(None))
    )).scalar_one()
    premium = (await db.execute(
        select(func.count()).select_from(UserModel).where(UserModel.premium_info > now)
    )).scalar_one()
    return {"total_users": total, "normal_users": normal, "premium_users": premium}


async def get_user_by_id(user_id: int, db: AsyncSession) -> Optional[UserModel]:
    result = await db.execute(select(UserModel).where(UserModel.id == user_id))
    return result.scalar_one_or_none()

async def get_user_by_email(email: str, db: AsyncSession) -> Optional[UserModel]:
    result = await db.execute(
        select(UserModel)
        .where(UserModel.email == email)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()

async def get_or_create_admin(db: AsyncSession, *, email: str, name: str | None = None) -> UserModel:
    """관리자 계정을 만들거나 기존 사용자를 관리자로 승격합니다 (manage.py 용)."""
    user = await get_user_by_email(email, db)
    if user is None:
        user = UserModel(name=name or email.split("@")[0], email=email, role="admin")
        db.add(user)
    else:
        user.role = "admin"
        if name:
            user.name = name
    await db.commit()
    await db.refresh(user)
    return user
