"""
카드 결제 게이트웨이 클라이언트.

Stripe PaymentIntent API 를 httpx 로 호출합니다. 라우터는 PaymentGateway 추상 타입에만
의존하므로 테스트에서는 가짜 구현으로 교체합니다.
"""
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

import httpx

from ..config import settings

logger = logging.getLogger(__name__)


class PaymentGatewayError(Exception):
    """결제 게이트웨이 호출 실패의 기본 예외."""


class PaymentGatewayAuthError(PaymentGatewayError):
    """API 키가 없거나 거부되었을 때."""


class PaymentGatewayAPIError(PaymentGatewayError):
    """게이트웨이가 오류 응답을 돌려주었거나 요청이 실패했을 때."""


@dataclass
class PaymentIntent:
    id: str
    client_secret: str
    amount: int
    currency: str
    status: str

    @classmethod
    def from_api_response(cls, data: dict[str, Any]) -> "PaymentIntent":
        return cls(
            id=data.get("id", ""),
            client_secret=data.get("client_secret", ""),
            amount=int(data.get("amount", 0)),
            currency=data.get("currency", ""),
            status=data.get("status", ""),
        )


class PaymentGateway(ABC):
    @abstractmethod
    async def create_payment_intent(self, amount: int, currency: str) -> PaymentIntent:
        """amount 는 최소 화폐 단위(센트)."""


def to_minor_units(price: float) -> int:
    """9.99 -> 999"""
    return int(round(price * 100))


class StripePaymentGateway(PaymentGateway):
    def __init__(
        self,
        api_key: str | None,
        api_base: str = "https://api.stripe.com",
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = 30.0,
    ):
        self.api_key = api_key
        self.api_base = api_base.rstrip("/")
        self.transport = transport
        self.timeout = timeout

    def _get_headers(self) -> dict[str, str]:
        if not self.api_key:
            raise PaymentGatewayAuthError("Stripe API key not configured. Set STRIPE_SECRET_KEY.")
        return {"Authorization": f"Bearer {self.api_key}"}

    async def create_payment_intent(self, amount: int, currency: str) -> PaymentIntent:
        headers = self._get_headers()
        # Stripe 는 form-encoded 본문을 받습니다.
        form = {
            "amount": str(amount),
            "currency": currency,
            "payment_method_types[]": "card",
        }
        url = f"{self.api_base}/v1/payment_intents"
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                logger.info(f"Creating payment intent: amount={amount} {currency}")
                response = await client.post(url, headers=headers, data=form)
                if response.status_code in (401, 403):
                    raise PaymentGatewayAuthError("Stripe rejected the API key")
                response.raise_for_status()
                return PaymentIntent.from_api_response(response.json())
        except httpx.HTTPStatusError as e:
            error_detail = str(e)
            try:
                error_detail = e.response.json().get("error", {}).get("message", error_detail)
            except ValueError:
                pass
            logger.error(f"Stripe API error: {error_detail}")
            raise PaymentGatewayAPIError(f"API request failed: {error_detail}") from e
        except httpx.RequestError as e:
            logger.error(f"HTTP request error: {e}")
            raise PaymentGatewayAPIError(f"Request failed: {e}") from e


def get_payment_gateway() -> PaymentGateway:
    return StripePaymentGateway(settings.STRIPE_SECRET_KEY, settings.STRIPE_API_BASE)
