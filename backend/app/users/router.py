from fastapi import APIRouter, Depends, HTTPException, Query, status

from ..config import settings
from ..database import SessionDep
from ..auth import policy
from ..auth.dependencies import CurrentPrincipal, ensure_self_or_admin, require_admin
from ..auth.service import Principal
from ..payments import service as payment_service
from ..utils import parse_object_id
from .schema import (
    PremiumUpdate,
    RoleResponse,
    UserCreate,
    UserCreateResult,
    UserListResponse,
    UserPublic,
    UserStats,
    UserUpdate,
)
from . import service as user_service

router = APIRouter(tags=["users"])

@router.post("/users", response_model=UserCreateResult)
async def register_user(user_data: UserCreate, db: SessionDep):
    """첫 로그인 시 호출. 같은 이메일이 이미 있으면 아무것도 하지 않습니다."""
    user, created = await user_service.create_user_if_absent(user_data, db)
    if not created:
        return UserCreateResult(message="user already exists", inserted_id=None)
    return UserCreateResult(inserted_id=user.id)

@router.get("/users", response_model=UserListResponse, dependencies=[Depends(require_admin)])
async def list_users(
    db: SessionDep,
    page: int = Query(0, ge=0),
    limit: int = Query(10, ge=1, le=100),
):
    total, users = await user_service.get_users(db, skip=page * limit, limit=limit)
    return {"total": total, "users": users}

@router.get("/user", response_model=UserPublic)
async def get_user_by_email(
    db: SessionDep,
    email: str = Query(..., min_length=3),
    principal: Principal = CurrentPrincipal,
):
    user = await user_service.get_user_by_email(email, db)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="user not found")
    return user

@router.get("/users/{email}/role", response_model=RoleResponse)
async def get_user_role(email: str, db: SessionDep):
    return RoleResponse(role=await user_service.get_role(email, db))

@router.patch("/users", response_model=UserPublic)
async def update_my_profile(
    db: SessionDep,
    body: UserUpdate,
    principal: Principal = CurrentPrincipal,
):
    user = await user_service.get_user_by_email(principal.email, db)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="user not found")
    return await user_service.update_user(db, db_user=user, user_in=body)

@router.patch("/users/admin/{user_id}", response_model=UserPublic, dependencies=[Depends(require_admin)])
async def make_admin(user_id: str, db: SessionDep):
    return await user_service.make_admin(db, parse_object_id(user_id))

@router.patch("/users/{email}", response_model=UserPublic)
async def update_premium(
    email: str,
    body: PremiumUpdate,
    db: SessionDep,
    principal: Principal = CurrentPrincipal,
):
    """결제 완료 후 프리미엄 만료 시각을 기록합니다. 본인 또는 관리자만 가능합니다."""
    is_admin = await ensure_self_or_admin(db, principal, email) is not None
    if not is_admin:
        caller = await user_service.get_user_by_email(principal.email, db)
        is_admin = policy.authorize_admin_action(caller).allowed

    last_payment_at = None
    if not is_admin and body.premium_info is not None:
        last_payment_at = await payment_service.latest_payment_at(db, principal.email)
    decision = policy.authorize_premium_change(
        body.premium_info,
        is_admin=is_admin,
        last_payment_at=last_payment_at,
        max_days=settings.PREMIUM_MAX_DAYS,
    )
    if not decision.allowed:
        code = status.HTTP_403_FORBIDDEN if decision.reason == policy.PAYMENT_REQUIRED else status.HTTP_400_BAD_REQUEST
        raise HTTPException(status_code=code, detail=decision.reason)
    return await user_service.set_premium(db, email, body.premium_info)

@router.get("/user-stats", response_model=UserStats)
async def get_user_stats(db: SessionDep):
    return UserStats(**await user_service.user_stats(db))
