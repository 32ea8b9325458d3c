"""SQLAlchemy 모델 패키지 초기화 모듈입니다."""

from beacon.models.checkin import Checkin
from beacon.models.user import UserProfile

__all__ = [
    "Checkin",
    "UserProfile",
]
