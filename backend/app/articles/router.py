# backend/app/articles/router.py
from fastapi import APIRouter, Depends, Query
from typing import List, Optional

from ..database import SessionDep
from ..auth.dependencies import CurrentPrincipal, ensure_self_or_admin, require_admin
from ..auth.service import Principal
from ..utils import parse_object_id
from .schemas import (
    ArticleCreate,
    ArticleListResponse,
    ArticleOut,
    ArticleUpdate,
    DeleteResponse,
    ModerationRequest,
    ModerationResponse,
    PremiumResponse,
    ViewResponse,
)
from . import queries
from . import service

router = APIRouter(prefix="/articles", tags=["articles"])


@router.post("", response_model=ArticleOut)
async def submit_article(body: ArticleCreate, db: SessionDep, principal: Principal = CurrentPrincipal):
    """기사 제출. 일반 사용자는 1건, 프리미엄 사용자는 제한 없음."""
    return await service.submit_article(db, principal, body)

@router.get("", response_model=ArticleListResponse)
async def list_articles(
    db: SessionDep,
    page: int = Query(0, ge=0),
    limit: int = Query(10, ge=1, le=100),
):
    total, articles = await queries.paginated_list(db, page=page, limit=limit)
    return {"total": total, "articles": articles}

@router.get("/trending", response_model=List[ArticleOut])
async def trending_articles(db: SessionDep):
    return await queries.trending(db)

@router.get("/latest", response_model=List[ArticleOut])
async def latest_articles(db: SessionDep):
    return await queries.latest(db)

@router.get("/exclusive", response_model=List[ArticleOut])
async def exclusive_articles(db: SessionDep):
    return await queries.exclusive(db)

@router.get("/premium", response_model=List[ArticleOut])
async def premium_articles(db: SessionDep, principal: Principal = CurrentPrincipal):
    # 인증만 요구합니다. 독자의 프리미엄 여부는 검사하지 않습니다.
    return await queries.premium(db)

@router.get("/approved", response_model=List[ArticleOut])
async def approved_articles(
    db: SessionDep,
    search: str = "",
    publisher: Optional[str] = None,
    tags: Optional[str] = Query(None, description="쉼표로 구분된 태그 value 목록 (OR)"),
):
    return await queries.approved_search(
        db,
        search=search,
        publisher=publisher or None,
        tags=queries.parse_tags(tags),
    )

@router.get("/my-articles", response_model=List[ArticleOut])
async def my_articles(
    db: SessionDep,
    email: str = Query(..., min_length=3),
    principal: Principal = CurrentPrincipal,
):
    await ensure_self_or_admin(db, principal, email)
    return await queries.my_articles(db, email)

@router.get("/{article_id}", response_model=ArticleOut)
async def get_article(article_id: str, db: SessionDep):
    return await service.get_article(db, parse_object_id(article_id))

@router.patch("/view/{article_id}", response_model=ViewResponse)
async def record_view(article_id: str, db: SessionDep):
    views = await service.record_view(db, parse_object_id(article_id))
    return ViewResponse(message="View count incremented", views=views)

@router.patch("/update/{article_id}", response_model=ArticleOut)
async def update_article(
    article_id: str,
    body: ArticleUpdate,
    db: SessionDep,
    principal: Principal = CurrentPrincipal,
):
    """작성자 또는 관리자만 수정할 수 있습니다."""
    article = await service.get_article(db, parse_object_id(article_id))
    await ensure_self_or_admin(db, principal, article.author_email)
    return await service.update_article_fields(db, article, body)

@router.patch("/{article_id}/premium", response_model=PremiumResponse, dependencies=[Depends(require_admin)])
async def promote_premium(article_id: str, db: SessionDep):
    await service.promote_premium(db, parse_object_id(article_id))
    return PremiumResponse(message="Article marked as premium", is_premium=True)

@router.patch("/{article_id}", response_model=ModerationResponse, dependencies=[Depends(require_admin)])
async def moderate_article(article_id: str, body: ModerationRequest, db: SessionDep):
    new_status = await service.moderate_article(db, parse_object_id(article_id), body)
    return ModerationResponse(message="Article status updated", status=new_status)

@router.delete("/{article_id}", response_model=DeleteResponse, dependencies=[Depends(require_admin)])
async def delete_article(article_id: str, db: SessionDep):
    deleted = await service.delete_article(db, parse_object_id(article_id))
    return DeleteResponse(deleted_count=deleted)
