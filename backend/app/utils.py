from fastapi import HTTPException, status


def parse_object_id(raw: str) -> int:
    """경로로 들어온 식별자를 검증합니다. 양의 정수가 아니면 400 "invalid id"."""
    if raw.isascii() and raw.isdigit():
        value = int(raw)
        if value > 0:
            return value
    raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="invalid id")
