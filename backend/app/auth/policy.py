"""접근 제어 정책.

저장소에 접근하지 않는 순수 함수들입니다. 필요한 사실(기존 기사 존재 여부, 현재 시각)은
호출 측에서 조회해서 넘겨줍니다.
"""
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from ..models import as_utc
from ..users.models import User
from .service import Principal

USER_NOT_FOUND = "user not found"
ONE_ARTICLE_LIMIT = "normal users can only post one article"
ADMIN_REQUIRED = "forbidden access"
PAYMENT_REQUIRED = "premium requires a recorded payment"
PREMIUM_WINDOW_TOO_LONG = "premium window exceeds the paid period"


@dataclass(frozen=True)
class Decision:
    allowed: bool
    reason: Optional[str] = None

    @classmethod
    def allow(cls) -> "Decision":
        return cls(True)

    @classmethod
    def deny(cls, reason: str) -> "Decision":
        return cls(False, reason)


def is_premium(user: User, now: datetime) -> bool:
    """premium_info 가 미래 시각이면 프리미엄 구간(만료 시각 미포함) 안에 있습니다."""
    if user.premium_info is None:
        return False
    return as_utc(user.premium_info) > as_utc(now)


def premium_expired(user: User, now: datetime) -> bool:
    return user.premium_info is not None and not is_premium(user, now)


def authorize_submission(
    principal: Principal,
    user: Optional[User],
    *,
    has_existing_article: bool,
    now: datetime,
) -> Decision:
    if user is None or user.email != principal.email:
        return Decision.deny(USER_NOT_FOUND)
    if not is_premium(user, now) and has_existing_article:
        return Decision.deny(ONE_ARTICLE_LIMIT)
    return Decision.allow()


def authorize_admin_action(user: Optional[User]) -> Decision:
    if user is None or user.role != "admin":
        return Decision.deny(ADMIN_REQUIRED)
    return Decision.allow()


def authorize_premium_change(
    premium_info: Optional[datetime],
    *,
    is_admin: bool,
    last_payment_at: Optional[datetime],
    max_days: int,
) -> Decision:
    """
    프리미엄 만료 시각 변경 권한.

    관리자는 제한 없이 설정할 수 있고, 해제(None)는 누구나 가능합니다.
    본인이 연장하려면 결제 기록이 있어야 하며, 만료 시각은 마지막 결제 시각부터
    max_days 이내여야 합니다. 더 길게 연장하려면 새 결제가 필요합니다.
    """
    if is_admin or premium_info is None:
        return Decision.allow()
    if last_payment_at is None:
        return Decision.deny(PAYMENT_REQUIRED)
    if as_utc(premium_info) > as_utc(last_payment_at) + timedelta(days=max_days):
        return Decision.deny(PREMIUM_WINDOW_TOO_LONG)
    return Decision.allow()
