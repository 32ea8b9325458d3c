"""Power Automate 웹훅 수신 라우터입니다. Content-Type 과 무관하게 본문을 JSON 으로 해석합니다."""

import json
import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from beacon.database import get_db
from beacon.exceptions import InvalidPayload
from beacon.services import webhook_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["webhook"])


def _render_headers(request: Request) -> str:
    return json.dumps(dict(request.headers), indent=2)


@router.post("/webhook", response_class=PlainTextResponse)
async def receive_webhook(request: Request, db: Session = Depends(get_db)):
    raw = await request.body()
    logger.debug("[webhook] headers: %s", _render_headers(request))
    logger.debug("[webhook] body: %s", raw.decode("utf-8", errors="replace"))

    try:
        payload = json.loads(raw) if raw.strip() else None
    except ValueError:
        logger.error("[webhook] body is not valid JSON")
        return PlainTextResponse(
            f"Request body is not valid JSON. Received: {raw.decode('utf-8', errors='replace')}",
            status_code=400,
        )

    if not payload:
        logger.error("[webhook] body is empty")
        return PlainTextResponse(
            f"Request body is undefined/empty. Headers received: {_render_headers(request)}",
            status_code=400,
        )

    try:
        result = await run_in_threadpool(webhook_service.process_webhook, db, payload)
    except InvalidPayload as exc:
        logger.error("[webhook] %s", exc.message)
        return PlainTextResponse(str(exc), status_code=400)

    if result.errors:
        return PlainTextResponse(
            f"Error processing webhook: {result.errors[0]} "
            f"({result.recorded} checkins recorded before failure)",
            status_code=500,
        )
    return PlainTextResponse(result.response_text(), status_code=200)
