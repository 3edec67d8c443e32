import json
from typing import Annotated, List

from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Config(BaseSettings):
    model_config = SettingsConfigDict(env_file="../.env", env_file_encoding="utf-8", extra="ignore")

    # FastAPI 애플리케이션 설정
    ENVIRONMENT: str = "development"
    APP_HOST: str = "0.0.0.0"
    APP_PORT: int = 8000
    LOG_LEVEL: str = "INFO"

    # 데이터베이스 설정
    DATABASE_URL: str = "postgresql+asyncpg://user:postgres@db:5432/newspaper_db"
    DATABASE_SSL: bool = False

    # JWT 인증 설정 (POST /jwt 로 발급, Bearer 로 검증)
    JWT_SECRET_KEY: str = "your-secret-key"
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    # 외부 ID 공급자 설정. POST /jwt 는 이 키로 서명된 ID 토큰만 교환해 줍니다.
    IDENTITY_PROVIDER_KEY: str | None = None
    IDENTITY_PROVIDER_ALGORITHM: str = "RS256"
    IDENTITY_PROVIDER_AUDIENCE: str | None = None
    IDENTITY_PROVIDER_ISSUER: str | None = None

    # 결제 기록 1건으로 본인이 설정할 수 있는 최대 프리미엄 기간 (일)
    PREMIUM_MAX_DAYS: int = 30

    # CORS 설정
    # NoDecode: 쉼표 구분 문자열도 받기 위해 JSON 선디코딩을 끕니다.
    CORS_ORIGINS: Annotated[List[str], NoDecode] = [
        "http://localhost:5173",
        "http://localhost:3000",
    ]

    # 결제 게이트웨이 (Stripe) 설정
    STRIPE_SECRET_KEY: str | None = None
    STRIPE_API_BASE: str = "https://api.stripe.com"
    PAYMENT_CURRENCY: str = "usd"

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def _normalise_cors(cls, value):
        if isinstance(value, list):
            return value
        if isinstance(value, str):
            raw = value.strip()
            if raw.startswith("[") and raw.endswith("]"):
                try:
                    parsed = json.loads(raw)
                    if isinstance(parsed, list):
                        return parsed
                except json.JSONDecodeError:
                    pass
            return [item.strip() for item in raw.split(",") if item.strip()]
        raise ValueError("CORS_ORIGINS must be a string or list of strings")


settings = Config()
