"""기사 목록/랭킹 조회 (읽기 전용 뷰)."""
from typing import List, Optional, Sequence, Tuple

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import estimated_count
from .models import Article, ArticleStatus, ArticleTag

TRENDING_LIMIT = 6
LATEST_LIMIT = 6
EXCLUSIVE_LIMIT = 10


async def _scalars(db: AsyncSession, stmt) -> List[Article]:
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def trending(db: AsyncSession, limit: int = TRENDING_LIMIT) -> List[Article]:
    """조회수 내림차순. 동률이면 먼저 작성된 기사가 앞에 옵니다. 상태 무관."""
    stmt = (
        select(Article)
        .order_by(Article.views.desc(), Article.created_at.asc(), Article.id.asc())
        .limit(limit)
    )
    return await _scalars(db, stmt)


async def latest(db: AsyncSession, limit: int = LATEST_LIMIT) -> List[Article]:
    stmt = (
        select(Article)
        .where(Article.status == ArticleStatus.APPROVED)
        .order_by(Article.created_at.desc(), Article.id.desc())
        .limit(limit)
    )
    return await _scalars(db, stmt)


async def exclusive(db: AsyncSession, limit: int = EXCLUSIVE_LIMIT) -> List[Article]:
    # 입력 순서(id) 기준
    stmt = (
        select(Article)
        .where(Article.is_exclusive.is_(True))
        .order_by(Article.id.asc())
        .limit(limit)
    )
    return await _scalars(db, stmt)


async def premium(db: AsyncSession) -> List[Article]:
    stmt = (
        select(Article)
        .where(Article.is_premium.is_(True), Article.status == ArticleStatus.APPROVED)
        .order_by(Article.created_at.desc(), Article.id.desc())
    )
    return await _scalars(db, stmt)


def parse_tags(raw: Optional[str]) -> List[str]:
    """'a,b, c' -> ['a', 'b', 'c'] (빈 항목 제거)"""
    if not raw:
        return []
    return [tag.strip() for tag in raw.split(",") if tag.strip()]


async def approved_search(
    db: AsyncSession,
    search: str = "",
    publisher: Optional[str] = None,
    tags: Sequence[str] = (),
) -> List[Article]:
    """승인된 기사 중 제목 부분일치(대소문자 무시) + publisher + 태그(OR) 필터."""
    conditions = [Article.status == ArticleStatus.APPROVED]
    if search:
        conditions.append(Article.title.icontains(search, autoescape=True))
    if publisher:
        conditions.append(Article.publisher_value == publisher)
    if tags:
        conditions.append(
            Article.tags.any(ArticleTag.value.in_(list(tags)))
        )
    stmt = select(Article).where(*conditions).order_by(Article.created_at.desc(), Article.id.desc())
    return await _scalars(db, stmt)


async def paginated_list(db: AsyncSession, page: int = 0, limit: int = 10) -> Tuple[int, List[Article]]:
    """기본 순서(id)로 page*limit 건을 건너뛰고 limit 건. total 은 근사치입니다."""
    total = await estimated_count(db, Article)
    stmt = select(Article).order_by(Article.id.asc()).offset(page * limit).limit(limit)
    return total, await _scalars(db, stmt)


async def my_articles(db: AsyncSession, email: str) -> List[Article]:
    stmt = (
        select(Article)
        .where(Article.author_email == email)
        .order_by(Article.created_at.desc(), Article.id.desc())
    )
    return await _scalars(db, stmt)


async def publisher_article_counts(db: AsyncSession) -> List[dict]:
    """publisher.label 별 기사 수. 순서 보장 없음."""
    stmt = (
        select(Article.publisher_label, func.count(Article.id))
        .group_by(Article.publisher_label)
    )
    result = await db.execute(stmt)
    return [{"publisher": label, "count": count} for label, count in result.all()]
