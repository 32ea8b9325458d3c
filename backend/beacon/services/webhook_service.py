"""Webhook Service: 정규화 → 분류 → 체크인 기록 흐름을 메시지 단위로 수행합니다."""

import logging
from dataclasses import dataclass, field
from typing import Any

from sqlalchemy.orm import Session

from beacon.exceptions import StorageError
from beacon.schemas.webhook import NormalizedMessage
from beacon.services import checkin_service
from beacon.services.message_normalizer import normalize_payload
from beacon.services.status_classifier import WFH_KEYWORDS, OFFICE_KEYWORDS, classify_status

logger = logging.getLogger(__name__)

KEYWORD_HINT = f"{WFH_KEYWORDS[0]}, {OFFICE_KEYWORDS[0]}"


@dataclass
class WebhookResult:
    messages: list[NormalizedMessage]
    recorded: int = 0
    suppressed: int = 0
    unclassified: int = 0
    errors: list[StorageError] = field(default_factory=list)

    @property
    def seen_content(self) -> str:
        return " | ".join(message.content for message in self.messages)

    def response_text(self) -> str:
        if self.recorded > 0:
            return f"Processed {self.recorded} checkins"
        text = (
            "Request received but no checkins recorded. "
            f'Server saw content: "{self.seen_content}". '
            f"Keywords looked for: {KEYWORD_HINT}."
        )
        if self.suppressed:
            text += f" {self.suppressed} suppressed as already checked in today."
        return text


def process_webhook(db: Session, payload: Any) -> WebhookResult:
    """Normalize ``payload`` and record each classified message in order.

    Raises InvalidPayload when no messages are found. Storage errors are
    collected per message so later messages in the batch are still written.
    """
    result = WebhookResult(messages=normalize_payload(payload))

    for message in result.messages:
        status = classify_status(message.content)
        if status is None:
            result.unclassified += 1
            continue
        try:
            outcome = checkin_service.record_checkin(
                db,
                user_id=message.user_id,
                user_name=message.user_name,
                user_email=message.user_email,
                status=status,
                message_id=message.message_id,
                timestamp=message.timestamp,
            )
        except StorageError as exc:
            logger.exception("[webhook] failed to record %s", message.message_id)
            result.errors.append(exc)
            continue
        if outcome == checkin_service.CheckinOutcome.RECORDED:
            result.recorded += 1
        else:
            result.suppressed += 1

    if result.recorded == 0 and not result.errors:
        logger.info("[webhook] no relevant status keywords found (unclassified=%d, suppressed=%d)",
                    result.unclassified, result.suppressed)
    return result
