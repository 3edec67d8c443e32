import logging
import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .database import Database
from .db_models import *  # noqa: F401,F403
from .config import settings
from .auth.router import router as auth_router
from .users.router import router as users_router
from .articles.router import router as articles_router
from .publishers.router import router as publishers_router
from .payments.router import router as payments_router

# 로깅 설정 (Docker 환경 최적화)
log_level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
logging.basicConfig(
    level=log_level,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(sys.stdout)  # stdout으로 명시적 출력
    ]
)

logger = logging.getLogger(__name__)
logger.info(f"Application starting with log level: {settings.LOG_LEVEL}")

@asynccontextmanager
async def lifespan(app: FastAPI):
    # 저장소 연결은 프로세스 시작 시 열고 종료 시 닫습니다.
    database = Database(settings.DATABASE_URL, ssl=settings.DATABASE_SSL)
    app.state.database = database
    logger.info("Database engine created")
    try:
        yield
    finally:
        await database.dispose()
        logger.info("Database engine disposed")

app = FastAPI(title="Newspaper API", lifespan=lifespan)

# CORS 설정
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# 오류 응답은 모두 {"message": ...} 형태로 통일합니다.
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.detail},
        headers=getattr(exc, "headers", None),
    )

@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg"), "type": err.get("type")}
        for err in exc.errors()
    ]
    return JSONResponse(status_code=400, content={"message": "invalid request", "errors": errors})

@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    # 원본 오류는 로그에만 남기고 호출자에게는 일반 메시지만 반환합니다.
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(status_code=500, content={"message": "Internal server error"})

# 라우터 등록
app.include_router(auth_router)
app.include_router(users_router)
app.include_router(articles_router)
app.include_router(publishers_router)
app.include_router(payments_router)

@app.get("/", tags=["health"])
async def root():
    return {"message": "NewsPaper Server is running"}

# 간단한 헬스 체크 엔드포인트 (프로덕션 헬스체크 용도)
@app.get("/health", tags=["health"])
async def health():
    return {"status": "ok"}
