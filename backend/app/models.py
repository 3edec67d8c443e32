from datetime import datetime, timezone
from pydantic import BaseModel, ConfigDict, field_serializer
from pydantic.alias_generators import to_camel

class CustomModel(BaseModel):
    """
    프로젝트의 모든 Pydantic 스키마가 상속받는 공통 기본 모델.
    API 데이터 정책을 중앙에서 관리합니다.
    """
    model_config = ConfigDict(
        # 외부 JSON 은 camelCase (isPremium, declineReason ...), 내부 필드는 snake_case
        alias_generator=to_camel,

        # True일 경우, 필드 이름으로도 값을 할당할 수 있습니다.
        populate_by_name=True,

        # SQLAlchemy 모델 객체를 Pydantic 스키마로 변환 가능하게 합니다.
        from_attributes=True,

        # 정의되지 않은 필드는 거부합니다 (400).
        extra="forbid",
    )

    @field_serializer('*', check_fields=False)
    def serialize_datetime(self, value, _info):
        """datetime 객체를 UTC 기준 ISO-8601 문자열로 변환합니다."""
        if isinstance(value, datetime):
            # 시간대 정보가 없는 naive datetime 은 UTC 로 간주합니다 (SQLite 저장값).
            return as_utc(value).isoformat()
        return value


def as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)
