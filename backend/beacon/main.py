"""FastAPI 애플리케이션 진입점. 미들웨어, 라우터, 시작 시 스키마 초기화를 등록합니다."""

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from beacon.config import settings
from beacon.database import engine
from beacon.exceptions import StorageError
from beacon.routers import dashboard, reports, users, webhook
from beacon.services import schema_service

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="WFH Beacon",
    description="Teams 메시지로 재택/출근 체크인을 수집하고 집계하는 서비스",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(webhook.router)
app.include_router(reports.router)
app.include_router(users.router)
app.include_router(dashboard.router)


@app.exception_handler(StorageError)
async def storage_error_handler(request: Request, exc: StorageError):
    logger.error("[storage] %s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=500, content={"detail": str(exc)})


@app.on_event("startup")
def ensure_schema():
    if not settings.INIT_DB_ON_STARTUP:
        return
    schema_service.init_db(engine)


@app.get("/api/health")
def health_check():
    return {"status": "ok", "service": "WFH Beacon"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("beacon.main:app", host="0.0.0.0", port=8000, reload=True)
