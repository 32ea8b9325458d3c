"""메시지 본문 키워드로 근무 위치 상태(WFH/Office)를 판정합니다."""

from enum import Enum
from typing import Optional


class CheckinStatus(str, Enum):
    WFH = "WFH"
    OFFICE = "Office"


WFH_KEYWORDS = ("wfh", "working from home")
OFFICE_KEYWORDS = ("office", "in office")


def classify_status(text: Optional[str]) -> Optional[CheckinStatus]:
    """Return the status for ``text`` or None when no keyword matches.

    WFH keywords are checked first, so a message mentioning both
    ("wfh today, office tomorrow") is classified as WFH.
    """
    content = (text or "").lower()
    if any(keyword in content for keyword in WFH_KEYWORDS):
        return CheckinStatus.WFH
    if any(keyword in content for keyword in OFFICE_KEYWORDS):
        return CheckinStatus.OFFICE
    return None
