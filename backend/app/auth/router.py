import logging

from fastapi import APIRouter, Depends, HTTPException, status

from .schema import TokenRequest, TokenResponse
from .service import (
    IdentityVerifier,
    InvalidCredentialsError,
    create_access_token,
    get_provider_verifier,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])

@router.post("/jwt", response_model=TokenResponse)
async def issue_token(
    body: TokenRequest,
    verifier: IdentityVerifier = Depends(get_provider_verifier),
) -> TokenResponse:
    """외부 ID 공급자의 ID 토큰을 검증한 뒤, 그 이메일로 Access Token 을 발급합니다."""
    try:
        principal = await verifier.verify(body.id_token)
    except InvalidCredentialsError as e:
        logger.info(f"ID token exchange rejected: {e}")
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="forbidden access")
    token = await create_access_token(principal.email)
    return TokenResponse(token=token)
