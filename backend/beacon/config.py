"""환경 변수 기반 애플리케이션 설정을 중앙에서 관리합니다."""

from pydantic import field_validator
from pydantic_settings import BaseSettings
from typing import List, Literal
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./wfh_beacon.db"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    ALLOWED_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:8000"]

    # 달력 일자 비교 기준 시간대 (IANA 이름). 비어 있으면 서버 로컬 시간대를 사용한다.
    TIMEZONE: str = ""

    # Dashboard
    DASHBOARD_GROUP_BY: Literal["city", "job_title"] = "city"

    # 시작 시 스키마 생성/보강을 명시적으로 수행한다.
    INIT_DB_ON_STARTUP: bool = True

    @field_validator("TIMEZONE")
    @classmethod
    def validate_timezone(cls, value: str) -> str:
        name = (value or "").strip()
        if not name:
            return ""
        try:
            ZoneInfo(name)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"unknown time zone '{name}'") from exc
        return name

    class Config:
        env_file = str(Path(__file__).resolve().parents[1] / ".env")


settings = Settings()
