from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any, Dict

from jose import jwt, JWTError

from ..config import settings
from ..models import utcnow


class InvalidCredentialsError(Exception):
    """토큰 서명/만료/형식 검증에 실패했을 때 발생합니다."""


@dataclass(frozen=True)
class Principal:
    """검증된 호출자 신원 (이메일 + 클레임)."""
    email: str
    claims: Dict[str, Any] = field(default_factory=dict)


class IdentityVerifier(ABC):
    @abstractmethod
    async def verify(self, token: str) -> Principal:
        """Bearer 토큰을 검증하고 Principal 을 반환합니다. 실패 시 InvalidCredentialsError."""


class JWTIdentityVerifier(IdentityVerifier):
    def __init__(self, secret_key: str, algorithm: str = "HS256"):
        self.secret_key = secret_key
        self.algorithm = algorithm

    async def verify(self, token: str) -> Principal:
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except JWTError as exc:
            # 토큰 디코딩 실패 (변조, 만료 등)
            raise InvalidCredentialsError(str(exc)) from exc

        if payload.get("type") != "access":
            raise InvalidCredentialsError("unexpected token type")
        email = payload.get("sub")
        if not email:
            raise InvalidCredentialsError("token has no subject")
        return Principal(email=email, claims=payload)


class ProviderIdentityVerifier(IdentityVerifier):
    """
    외부 ID 공급자가 발급한 ID 토큰을 검증합니다.
    공급자의 공개키(또는 공유 비밀)로 서명, 만료, audience/issuer 를 확인하고
    토큰의 email 클레임을 Principal 로 돌려줍니다.
    """

    def __init__(
        self,
        key: str | None,
        algorithm: str = "RS256",
        audience: str | None = None,
        issuer: str | None = None,
    ):
        self.key = key
        self.algorithm = algorithm
        self.audience = audience
        self.issuer = issuer

    async def verify(self, token: str) -> Principal:
        if not self.key:
            raise InvalidCredentialsError("identity provider key is not configured")
        try:
            payload = jwt.decode(
                token,
                self.key,
                algorithms=[self.algorithm],
                audience=self.audience,
                issuer=self.issuer,
            )
        except JWTError as exc:
            raise InvalidCredentialsError(str(exc)) from exc

        email = payload.get("email")
        if not email:
            raise InvalidCredentialsError("id token has no email claim")
        if payload.get("email_verified") is False:
            raise InvalidCredentialsError("email is not verified")
        return Principal(email=email, claims=payload)


async def create_access_token(email: str, expires_minutes: int | None = None) -> str:
    """
    이메일을 subject 로 하는 Access Token 을 생성합니다.
    """
    minutes = expires_minutes if expires_minutes is not None else settings.ACCESS_TOKEN_EXPIRE_MINUTES
    to_encode = {
        "sub": email,
        "type": "access",
        "exp": utcnow() + timedelta(minutes=minutes),
    }
    return jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def get_identity_verifier() -> IdentityVerifier:
    return JWTIdentityVerifier(settings.JWT_SECRET_KEY, settings.JWT_ALGORITHM)


def get_provider_verifier() -> IdentityVerifier:
    return ProviderIdentityVerifier(
        settings.IDENTITY_PROVIDER_KEY,
        settings.IDENTITY_PROVIDER_ALGORITHM,
        audience=settings.IDENTITY_PROVIDER_AUDIENCE,
        issuer=settings.IDENTITY_PROVIDER_ISSUER,
    )
