"""체크인 조회/대시보드 응답 스키마입니다."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class CheckinOut(BaseModel):
    id: int
    user_id: Optional[str] = None
    user_name: Optional[str] = None
    user_email: Optional[str] = None
    status: str
    timestamp: datetime
    message_id: Optional[str] = None

    model_config = {"from_attributes": True}


class BreakdownItem(BaseModel):
    label: str
    count: int


class TimeBucket(BaseModel):
    time: str
    count: int


class DashboardOut(BaseModel):
    date: str
    wfh_count: int
    total_users: int
    wfh_percentage: int
    group_by: str
    breakdown: list[BreakdownItem]
    time_buckets: list[TimeBucket]


class ImportUsersOut(BaseModel):
    imported: int


class ClearUsersOut(BaseModel):
    cleared: int
