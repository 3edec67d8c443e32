from typing import Any, Dict, List

from fastapi import APIRouter, Body, Depends, HTTPException, status

from ..auth.dependencies import CurrentPrincipal
from ..auth.service import Principal
from ..config import settings
from ..database import SessionDep
from .gateway import PaymentGateway, PaymentGatewayError, get_payment_gateway, to_minor_units
from .schemas import PaymentCreateResult, PaymentIntentRequest, PaymentIntentResponse, PaymentOut
from . import service

router = APIRouter(tags=["payments"])


@router.post("/create-payment-intent", response_model=PaymentIntentResponse)
async def create_payment_intent(
    body: PaymentIntentRequest,
    principal: Principal = CurrentPrincipal,
    gateway: PaymentGateway = Depends(get_payment_gateway),
):
    try:
        intent = await gateway.create_payment_intent(to_minor_units(body.price), settings.PAYMENT_CURRENCY)
    except PaymentGatewayError:
        # 원본 오류는 gateway 에서 로그로 남기고, 호출자에게는 일반 메시지만 돌려줍니다.
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal server error")
    return PaymentIntentResponse(client_secret=intent.client_secret)


@router.post("/payments", response_model=PaymentCreateResult)
async def save_payment(
    db: SessionDep,
    details: Dict[str, Any] = Body(...),
    principal: Principal = CurrentPrincipal,
):
    if not details:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="payment details required")
    payment = await service.record_payment(db, principal.email, details)
    return PaymentCreateResult(inserted_id=payment.id)


@router.get("/payments", response_model=List[PaymentOut])
async def my_payments(db: SessionDep, principal: Principal = CurrentPrincipal):
    return await service.list_payments(db, principal.email)
