"""웹훅 페이로드(3가지 형태)를 NormalizedMessage 목록으로 정규화합니다."""

import json
import logging
import uuid
from datetime import datetime
from typing import Any, Optional

from beacon.exceptions import InvalidPayload
from beacon.schemas.webhook import (
    BatchPayload,
    FlatPayload,
    NestedMessagePayload,
    NormalizedMessage,
    WebhookPayload,
)
from beacon.utils.clock import now_local, to_server_naive

logger = logging.getLogger(__name__)

UNKNOWN_USER_ID = "unknown"
UNKNOWN_USER_NAME = "Unknown User"


def render_received(payload: Any) -> str:
    try:
        return json.dumps(payload, ensure_ascii=False, default=str)
    except (TypeError, ValueError):
        return repr(payload)


def match_payload(payload: Any) -> Optional[WebhookPayload]:
    """Pick the payload variant by structure. Order matters: batch, nested message, flat legacy."""
    if not isinstance(payload, dict):
        return None
    if isinstance(payload.get("value"), list):
        return BatchPayload(value=payload["value"])
    body = payload.get("body")
    if isinstance(body, dict) and body.get("content"):
        return NestedMessagePayload(message=payload)
    if payload.get("messageContent"):
        return FlatPayload(
            messageContent=str(payload["messageContent"]),
            userId=payload.get("userId"),
            userName=payload.get("userName"),
            userEmail=payload.get("userEmail"),
            messageId=payload.get("messageId"),
            timestamp=payload.get("timestamp"),
        )
    return None


def _raw_messages(shape: WebhookPayload) -> list[Any]:
    if isinstance(shape, BatchPayload):
        return list(shape.value)
    if isinstance(shape, NestedMessagePayload):
        return [shape.message]
    return [
        {
            "body": {"content": shape.messageContent},
            "from": {"user": {"id": shape.userId, "displayName": shape.userName}},
            "userEmail": shape.userEmail,
            "id": shape.messageId,
            "createdDateTime": shape.timestamp,
        }
    ]


def _dig(value: Any, *keys: str) -> Any:
    for key in keys:
        if not isinstance(value, dict):
            return None
        value = value.get(key)
    return value


def _text_or(value: Any, default: Optional[str]) -> Optional[str]:
    if value is None or value == "":
        return default
    return str(value)


def parse_timestamp(value: Any) -> Optional[datetime]:
    if isinstance(value, datetime):
        return to_server_naive(value)
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        # 3.11+ fromisoformat: "Z" 접미사와 임의 자릿수 소수 초(7자리 이상은 절삭)를 허용한다.
        return to_server_naive(datetime.fromisoformat(value.strip()))
    except ValueError:
        logger.warning("[webhook] unparseable createdDateTime %r, using receipt time", value)
        return None


def normalize_message(raw: Any) -> NormalizedMessage:
    """Build a fully populated message; every missing or malformed field gets its placeholder."""
    content = _dig(raw, "body", "content")
    return NormalizedMessage(
        content=content if isinstance(content, str) else "",
        user_id=_text_or(_dig(raw, "from", "user", "id"), UNKNOWN_USER_ID),
        user_name=_text_or(_dig(raw, "from", "user", "displayName"), UNKNOWN_USER_NAME),
        user_email=_text_or(_dig(raw, "userEmail"), None),
        message_id=_text_or(_dig(raw, "id"), None) or f"manual-{uuid.uuid4().hex}",
        timestamp=parse_timestamp(_dig(raw, "createdDateTime")) or now_local(),
    )


def normalize_payload(payload: Any) -> list[NormalizedMessage]:
    shape = match_payload(payload)
    raw_messages = _raw_messages(shape) if shape is not None else []
    if not raw_messages:
        raise InvalidPayload("No valid messages found.", received=render_received(payload))
    return [normalize_message(raw) for raw in raw_messages]
