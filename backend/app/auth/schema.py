from pydantic import Field

from ..models import CustomModel


class TokenRequest(CustomModel):
    # 외부 ID 공급자 로그인 후 받은 ID 토큰
    id_token: str = Field(..., min_length=1)


class TokenResponse(CustomModel):
    token: str
