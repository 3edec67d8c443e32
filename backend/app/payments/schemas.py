from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import Field, field_validator

from ..models import CustomModel
from .gateway import to_minor_units


class PaymentIntentRequest(CustomModel):
    price: float = Field(..., gt=0, json_schema_extra={"example": 9.99})

    @field_validator("price")
    @classmethod
    def _at_least_one_minor_unit(cls, value: float) -> float:
        # 0.005 미만은 0 센트로 반올림되어 게이트웨이가 거절합니다.
        if to_minor_units(value) < 1:
            raise ValueError("price must be at least one minor currency unit")
        return value


class PaymentIntentResponse(CustomModel):
    client_secret: str


class PaymentOut(CustomModel):
    id: int
    email: str
    details: Dict[str, Any]
    created_at: Optional[datetime] = None


class PaymentCreateResult(CustomModel):
    inserted_id: int
