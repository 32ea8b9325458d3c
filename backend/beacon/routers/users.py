"""사용자 프로필 일괄 import/초기화 API 라우터입니다."""

from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException
from sqlalchemy.orm import Session

from beacon.database import get_db
from beacon.schemas.checkin import ClearUsersOut, ImportUsersOut
from beacon.services import user_import_service

router = APIRouter(prefix="/api", tags=["users"])


@router.post("/import-users", response_model=ImportUsersOut)
def import_users(
    records: Any = Body(None),
    db: Session = Depends(get_db),
):
    if not isinstance(records, list):
        raise HTTPException(status_code=400, detail="Request body must be an array of user objects.")
    return {"imported": user_import_service.import_users(db, records)}


@router.post("/clear-users", response_model=ClearUsersOut)
def clear_users(db: Session = Depends(get_db)):
    return {"cleared": user_import_service.clear_users(db)}
