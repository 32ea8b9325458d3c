"""오늘 체크인 HTML 리포트와 스키마 초기화 라우터입니다."""

import html
from typing import List

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse, PlainTextResponse
from sqlalchemy.orm import Session

from beacon.database import get_db
from beacon.exceptions import StorageError
from beacon.models.checkin import Checkin
from beacon.schemas.checkin import CheckinOut
from beacon.services import checkin_service, schema_service

router = APIRouter(tags=["reports"])


def render_report(rows: List[Checkin]) -> str:
    items = []
    for row in rows:
        email = f" ({html.escape(row.user_email)})" if row.user_email else ""
        at = row.timestamp.strftime("%I:%M:%S %p") if row.timestamp else ""
        items.append(
            f"<li><strong>{html.escape(row.user_name or '')}</strong>{email}: "
            f"{html.escape(row.status)} (at {at})</li>"
        )
    return "<h1>WFH Beacon Report (Today)</h1><ul>" + "".join(items) + "</ul>"


@router.get("/", response_class=HTMLResponse)
def today_report(db: Session = Depends(get_db)):
    try:
        rows = checkin_service.get_today_report(db)
    except StorageError as exc:
        return PlainTextResponse(f"Error generating report: {exc}", status_code=500)
    return HTMLResponse(render_report(rows))


@router.get("/api/checkins/today", response_model=List[CheckinOut])
def today_checkins(db: Session = Depends(get_db)):
    return checkin_service.get_today_report(db)


@router.get("/init-db", response_class=PlainTextResponse)
def init_db(db: Session = Depends(get_db)):
    try:
        schema_service.init_db(db.get_bind())
    except StorageError as exc:
        return PlainTextResponse(f"Error initializing database: {exc}", status_code=500)
    return PlainTextResponse("Database initialized successfully")
