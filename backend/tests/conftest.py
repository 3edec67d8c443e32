import os
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from sqlalchemy import event
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import NullPool, StaticPool
from httpx import AsyncClient, ASGITransport

# 테스트용 환경 변수 세팅 (app 모듈 임포트 전에 적용)
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("CORS_ORIGINS", "*")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret")
os.environ.setdefault("STRIPE_SECRET_KEY", "sk_test_dummy")
os.environ.setdefault("IDENTITY_PROVIDER_KEY", "test-provider-secret")
os.environ.setdefault("IDENTITY_PROVIDER_ALGORITHM", "HS256")
os.environ.setdefault("IDENTITY_PROVIDER_AUDIENCE", "newspaper-test")

# sys.path에 backend 추가하여 'app' 패키지 검색 가능하게 함
backend_path = Path(__file__).resolve().parents[1]
if str(backend_path) not in sys.path:
    sys.path.insert(0, str(backend_path))

from app.main import app
from app.database import Base
from app.database import get_db as real_get_db
from app.auth.service import create_access_token
from app.articles.models import Article, ArticleStatus, ArticleTag
from app.users.models import User


@pytest.fixture()
async def test_engine():
    # 메모리 SQLite 를 하나의 커넥션으로 공유
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture()
def session_factory(test_engine):
    return sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture()
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture(autouse=True)
async def override_db(session_factory):
    # 요청마다 새 세션 (운영과 동일)
    async def _get_db():
        async with session_factory() as session:
            yield session
    app.dependency_overrides[real_get_db] = _get_db
    yield
    app.dependency_overrides.clear()


@pytest.fixture()
async def file_session_factory(tmp_path, override_db):
    """
    세션마다 별도 커넥션을 쓰는 파일 SQLite. 동시 요청 테스트용입니다.
    BEGIN IMMEDIATE 로 쓰기 트랜잭션을 직렬화해서 "database is locked" 없이 대기하게 합니다.
    """
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'concurrency.db'}",
        poolclass=NullPool,
        connect_args={"timeout": 30},
    )

    @event.listens_for(engine.sync_engine, "connect")
    def _disable_implicit_begin(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _begin_immediate(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    factory = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async def _get_db():
        async with factory() as session:
            yield session
    app.dependency_overrides[real_get_db] = _get_db
    yield factory
    await engine.dispose()


@pytest.fixture()
async def client():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture()
def make_user(session_factory):
    async def _make_user(email: str, *, role: str = "user", premium_info: datetime | None = None, name: str | None = None) -> User:
        async with session_factory() as session:
            user = User(email=email, name=name or email.split("@")[0], role=role, premium_info=premium_info)
            session.add(user)
            await session.commit()
            await session.refresh(user)
            return user
    return _make_user


@pytest.fixture()
def make_article(session_factory):
    counter = {"n": 0}

    async def _make_article(**fields) -> Article:
        counter["n"] += 1
        tags = fields.pop("tags", [])
        publisher = fields.pop("publisher", None)
        defaults = dict(
            title=f"Article {counter['n']}",
            description="body",
            author_email="author@example.com",
            status=ArticleStatus.PENDING,
            views=0,
            is_premium=False,
            is_exclusive=False,
            created_at=datetime(2026, 1, 1, tzinfo=timezone.utc) + timedelta(minutes=counter["n"]),
        )
        defaults.update(fields)
        if publisher:
            defaults["publisher_value"], defaults["publisher_label"] = publisher
        async with session_factory() as session:
            article = Article(**defaults, tags=[ArticleTag(value=v, label=v.title()) for v in tags])
            session.add(article)
            await session.commit()
            return article
    return _make_article


@pytest.fixture()
def auth_headers():
    async def _auth_headers(email: str) -> dict:
        token = await create_access_token(email)
        return {"Authorization": f"Bearer {token}"}
    return _auth_headers


@pytest.fixture()
async def admin_headers(make_user, auth_headers):
    await make_user("admin@example.com", role="admin")
    return await auth_headers("admin@example.com")
