import logging

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ..database import SessionDep
from ..users.models import User
from ..users import service as user_service
from .policy import authorize_admin_action
from .service import IdentityVerifier, InvalidCredentialsError, Principal, get_identity_verifier

logger = logging.getLogger(__name__)

# auto_error=False: 헤더 누락은 직접 401 로 처리합니다 (HTTPBearer 기본값은 403).
bearer_scheme = HTTPBearer(auto_error=False)


async def get_principal(
    db: SessionDep,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    verifier: IdentityVerifier = Depends(get_identity_verifier),
) -> Principal:
    if credentials is None or credentials.scheme.lower() != "bearer" or not credentials.credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="unauthorized access",
            headers={"WWW-Authenticate": "Bearer"},
        )
    try:
        principal = await verifier.verify(credentials.credentials)
    except InvalidCredentialsError as e:
        logger.info(f"Token verification failed: {e}")
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="forbidden access")

    # 검증된 요청마다 한 번, 권한 판단 전에 만료된 premium_info 를 정리합니다.
    await user_service.clear_expired_premium(db, principal.email)
    return principal


CurrentPrincipal = Depends(get_principal)


async def get_current_user(db: SessionDep, principal: Principal = CurrentPrincipal) -> User | None:
    """Principal 에 해당하는 사용자 레코드 (없으면 None)."""
    return await user_service.get_user_by_email(principal.email, db)


async def require_admin(db: SessionDep, principal: Principal = CurrentPrincipal) -> User:
    """
    현재 사용자가 'admin' 역할을 가지고 있는지 확인하는 의존성.
    관리자가 아닐 경우, 403 Forbidden 에러를 발생시킵니다.
    """
    user = await user_service.get_user_by_email(principal.email, db)
    decision = authorize_admin_action(user)
    if not decision.allowed:
        logger.info(f"Admin action denied for {principal.email}")
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=decision.reason)
    return user


async def ensure_self_or_admin(db, principal: Principal, email: str) -> User | None:
    """
    email 의 주인 본인이거나 관리자일 때만 통과합니다.
    본인이면 None, 관리자 권한으로 통과했으면 관리자 User 를 돌려줍니다.
    """
    if principal.email == email:
        return None
    return await require_admin(db, principal)
