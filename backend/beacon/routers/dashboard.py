"""대시보드 집계 API 라우터입니다."""

from typing import Literal, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from beacon.database import get_db
from beacon.schemas.checkin import DashboardOut
from beacon.services import checkin_service

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


@router.get("", response_model=DashboardOut)
def get_dashboard(
    group_by: Optional[Literal["city", "job_title"]] = None,
    db: Session = Depends(get_db),
):
    return checkin_service.get_dashboard_stats(db, group_by=group_by)
