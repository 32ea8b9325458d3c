"""웹훅 페이로드 형태와 정규화된 메시지 스키마입니다."""

from datetime import datetime
from typing import Any, Optional, Union

from pydantic import BaseModel


class NormalizedMessage(BaseModel):
    content: str
    user_id: str
    user_name: str
    user_email: Optional[str] = None
    message_id: str
    timestamp: datetime


class BatchPayload(BaseModel):
    """"When a new message is added to a chat or channel" trigger: a list under ``value``."""

    value: list[Any]


class NestedMessagePayload(BaseModel):
    """A single Graph message object posted directly."""

    message: dict[str, Any]


class FlatPayload(BaseModel):
    """Legacy flat format with top-level ``messageContent``."""

    messageContent: str
    userId: Optional[Any] = None
    userName: Optional[Any] = None
    userEmail: Optional[Any] = None
    messageId: Optional[Any] = None
    timestamp: Optional[Any] = None


WebhookPayload = Union[BatchPayload, NestedMessagePayload, FlatPayload]
