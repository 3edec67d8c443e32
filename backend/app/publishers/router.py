from typing import List

from fastapi import APIRouter, Depends

from ..auth.dependencies import require_admin
from ..database import SessionDep
from ..articles import queries as article_queries
from .schemas import PublisherArticleCount, PublisherCreate, PublisherOut
from . import service

router = APIRouter(tags=["publishers"])


@router.post("/publishers", response_model=PublisherOut, dependencies=[Depends(require_admin)])
async def create_publisher(body: PublisherCreate, db: SessionDep):
    return await service.create_publisher(db, body)


@router.get("/publishers", response_model=List[PublisherOut])
async def list_publishers(db: SessionDep):
    return await service.list_publishers(db)


@router.get("/publisher-article-count", response_model=List[PublisherArticleCount])
async def publisher_article_count(db: SessionDep):
    """publisher.label 별 기사 수 (차트용)"""
    return await article_queries.publisher_article_counts(db)
