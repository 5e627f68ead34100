# app/routers/webhook_router.py

from fastapi import APIRouter, Depends, Header, Request, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PayloadError
from starlette.concurrency import run_in_threadpool

from app.core import logger, TariffError
from app.database.dependencies import get_tariff_store
from app.repositories import TariffRepository
from app.schemas import WebhookPayload, WebhookResult
from app.services import process_webhook_service

router = APIRouter(prefix="/webhook", tags=["Automation"])


def _failure(status_code: int, reason: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": reason})


@router.post("", response_model=WebhookResult, response_model_exclude_none=True)
async def tariff_webhook_route(
    request: Request,
    token: str | None = Header(None, alias="x-epilot-token"),
    store: TariffRepository = Depends(get_tariff_store),
):
    """
    Automation step: attaches the best matching tariff to the entity and
    resumes the waiting workflow through its callback URL.
    """
    body = await request.body()
    if not body:
        return _failure(status.HTTP_400_BAD_REQUEST, "No body provided")

    if not token:
        return _failure(status.HTTP_401_UNAUTHORIZED, "Missing x-epilot-token header")

    try:
        payload = WebhookPayload.model_validate_json(body)
    except PayloadError as e:
        logger.warning(f"Rejected webhook payload: {e.error_count()} validation errors")
        return _failure(status.HTTP_400_BAD_REQUEST, "Invalid payload")

    try:
        # Blocking HTTP calls, keep them off the event loop
        await run_in_threadpool(process_webhook_service, store, payload, token)
    except TariffError as e:
        logger.error(f"Error processing webhook for entity {payload.data.entity.entity_id}: {e.reason}")
        return _failure(status.HTTP_500_INTERNAL_SERVER_ERROR, e.reason)

    return WebhookResult(success=True)
