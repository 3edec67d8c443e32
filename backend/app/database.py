from typing import Annotated, AsyncGenerator

from fastapi import Depends, Request

from sqlalchemy import func, select, text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.orm import declarative_base, sessionmaker

Base = declarative_base()


class Database:
    """엔진과 세션 팩토리를 묶은 저장소 연결.

    애플리케이션 시작 시 열고(lifespan), 요청마다 세션을 하나씩 발급하며,
    종료 시 `dispose()` 로 커넥션 풀을 정리합니다.
    """

    def __init__(self, url: str, *, ssl: bool = False, **engine_kwargs):
        if url.startswith("postgresql"):
            engine_kwargs.setdefault("pool_pre_ping", True)   # 연결 사전 체크
            engine_kwargs.setdefault("pool_recycle", 1800)    # 30분마다 재연결
            engine_kwargs.setdefault("connect_args", {"ssl": ssl})
        self.engine: AsyncEngine = create_async_engine(url, **engine_kwargs)
        self.session_factory = sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False
        )

    async def create_all(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        await self.engine.dispose()


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    database: Database = request.app.state.database
    async with database.session_factory() as sess:  # async with으로 자동 close/rollback 처리
        yield sess

# Annotated 별칭: 다른 모듈에서 `db: SessionDep` 만 적으면 세션이 주입됩니다.
SessionDep = Annotated[AsyncSession, Depends(get_db)]


async def estimated_count(db: AsyncSession, model) -> int:
    """테이블 전체 문서 수의 근사치.

    PostgreSQL 에서는 플래너 통계(pg_class.reltuples)를 사용하고, 통계가 아직 없거나
    다른 DB 라면 COUNT(*) 로 대체합니다. 필터를 반영하지 않는 값입니다.
    """
    if db.bind is not None and db.bind.dialect.name == "postgresql":
        result = await db.execute(
            text("SELECT reltuples::bigint FROM pg_class WHERE relname = :table"),
            {"table": model.__tablename__},
        )
        estimate = result.scalar_one_or_none()
        if estimate is not None and estimate >= 0:
            return int(estimate)
    result = await db.execute(select(func.count()).select_from(model))
    return result.scalar_one()
