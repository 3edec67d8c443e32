import logging
from datetime import datetime
from typing import Optional

from fastapi import HTTPException, status
from sqlalchemy import delete, exists, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ..auth import policy
from ..auth.service import Principal
from ..models import utcnow
from ..users import service as user_service
from .models import Article, ArticleStatus, ArticleTag
from .schemas import ArticleCreate, ArticleUpdate, ModerationRequest

logger = logging.getLogger(__name__)

ARTICLE_NOT_FOUND = "article not found"


async def get_article(db: AsyncSession, article_id: int) -> Article:
    """Article ID로 단일 Article 조회"""
    result = await db.execute(
        select(Article)
        .where(Article.id == article_id)
        .execution_options(populate_existing=True)
    )
    article = result.scalar_one_or_none()
    if not article:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=ARTICLE_NOT_FOUND)
    return article


async def has_article_by_author(db: AsyncSession, email: str) -> bool:
    result = await db.execute(select(exists().where(Article.author_email == email)))
    return bool(result.scalar())


async def submit_article(
    db: AsyncSession,
    principal: Principal,
    data: ArticleCreate,
    now: Optional[datetime] = None,
) -> Article:
    """기사 제출 (pending, views=0).

    일반 사용자는 기사 1건까지만 제출할 수 있습니다. 존재 여부 확인과 insert 가
    하나의 트랜잭션이 아니므로, 같은 사용자의 동시 제출 두 건이 모두 통과할 수 있습니다.
    """
    now = now or utcnow()
    user = await user_service.get_user_by_email(principal.email, db)
    has_existing = await has_article_by_author(db, principal.email) if user else False

    decision = policy.authorize_submission(principal, user, has_existing_article=has_existing, now=now)
    if not decision.allowed:
        logger.info(f"Submission denied for {principal.email}: {decision.reason}")
        code = status.HTTP_404_NOT_FOUND if decision.reason == policy.USER_NOT_FOUND else status.HTTP_403_FORBIDDEN
        raise HTTPException(status_code=code, detail=decision.reason)

    article = Article(
        title=data.title,
        description=data.description,
        image=data.image,
        author_name=data.author_name or user.name,
        author_email=principal.email,
        author_photo=data.author_photo or user.photo,
        publisher_value=data.publisher.value if data.publisher else None,
        publisher_label=data.publisher.label if data.publisher else None,
        status=ArticleStatus.PENDING,
        views=0,
        is_premium=False,
        is_exclusive=False,
        tags=[ArticleTag(value=t.value, label=t.label) for t in data.tags],
    )
    db.add(article)
    await db.commit()
    logger.info(f"Article #{article.id} submitted by {principal.email}")
    return await get_article(db, article.id)


async def moderate_article(db: AsyncSession, article_id: int, body: ModerationRequest) -> ArticleStatus:
    """관리자 승인/거절. 거절 사유는 declined 상태일 때만 저장됩니다."""
    if body.status is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="status required")

    decline_reason = body.decline_reason if body.status == ArticleStatus.DECLINED else None
    result = await db.execute(
        update(Article)
        .where(Article.id == article_id)
        .values(status=body.status, decline_reason=decline_reason)
    )
    if result.rowcount == 0:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=ARTICLE_NOT_FOUND)
    await db.commit()
    logger.info(f"Article #{article_id} moderated: {body.status.value}")
    return body.status


async def record_view(db: AsyncSession, article_id: int) -> int:
    """조회수 +1. DB 의 원자적 증가 연산을 사용합니다."""
    result = await db.execute(
        update(Article)
        .where(Article.id == article_id)
        .values(views=Article.views + 1)
    )
    if result.rowcount == 0:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=ARTICLE_NOT_FOUND)
    await db.commit()
    views = (await db.execute(select(Article.views).where(Article.id == article_id))).scalar_one()
    return views


async def promote_premium(db: AsyncSession, article_id: int) -> None:
    # 이미 true 여도 성공 (멱등)
    result = await db.execute(
        update(Article)
        .where(Article.id == article_id)
        .values(is_premium=True)
    )
    if result.rowcount == 0:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=ARTICLE_NOT_FOUND)
    await db.commit()
    logger.info(f"Article #{article_id} promoted to premium")


async def delete_article(db: AsyncSession, article_id: int) -> int:
    """하드 삭제. 없는 ID 도 성공이며 삭제 건수(0)를 돌려줍니다."""
    await db.execute(delete(ArticleTag).where(ArticleTag.article_id == article_id))
    result = await db.execute(
        delete(Article)
        .where(Article.id == article_id)
        .execution_options(synchronize_session=False)
    )
    await db.commit()
    if result.rowcount:
        logger.info(f"Article #{article_id} deleted")
    return result.rowcount


async def update_article_fields(db: AsyncSession, article: Article, patch: ArticleUpdate) -> Article:
    """명시적으로 전달된 필드만 병합합니다."""
    update_data = patch.model_dump(exclude_unset=True)

    if "publisher" in update_data:
        publisher = patch.publisher
        article.publisher_value = publisher.value if publisher else None
        article.publisher_label = publisher.label if publisher else None
        update_data.pop("publisher")
    if "tags" in update_data:
        article.tags = [ArticleTag(value=t.value, label=t.label) for t in (patch.tags or [])]
        update_data.pop("tags")

    for field, value in update_data.items():
        if value is None and field in ("title", "description", "is_exclusive"):
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"{field} cannot be null")
        setattr(article, field, value)

    await db.commit()
    return await get_article(db, article.id)
