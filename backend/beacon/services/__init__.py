"""서비스 레이어 패키지 초기화 모듈입니다."""

from beacon.services import (
    status_classifier,
    message_normalizer,
    checkin_service,
    user_import_service,
    schema_service,
    webhook_service,
)
