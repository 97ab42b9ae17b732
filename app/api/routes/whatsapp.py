import json
import logging

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse, PlainTextResponse

from app.api.deps import (
    get_conversation_service,
    get_order_repository,
    get_ticket_repository,
    verify_whatsapp_signature,
)
from app.core.config import settings
from app.domain.services.conversation_service import ConversationService
from app.infrastructure.db.repositories import OrderRepository, TicketRepository

logger = logging.getLogger("whatsapp_webhook")

router = APIRouter()


@router.get("/webhook", response_class=PlainTextResponse)
async def verify(
    hub_mode: str = Query(None, alias="hub.mode"),
    hub_challenge: str = Query(None, alias="hub.challenge"),
    hub_verify_token: str = Query(None, alias="hub.verify_token"),
):
    if hub_mode == "subscribe" and hub_verify_token and hub_verify_token == settings.WHATSAPP_VERIFY_TOKEN:
        logger.info("Webhook verified")
        return PlainTextResponse(hub_challenge or "")
    logger.warning("Webhook verification failed (mode=%s)", hub_mode)
    return PlainTextResponse("Verification failed", status_code=403)


@router.post("/webhook")
async def webhook(
    body: bytes = Depends(verify_whatsapp_signature),
    service: ConversationService = Depends(get_conversation_service),
    orders: OrderRepository = Depends(get_order_repository),
    tickets: TicketRepository = Depends(get_ticket_repository),
):
    try:
        payload = json.loads(body)
    except ValueError:
        return JSONResponse({"status": "invalid_json"}, status_code=400)
    if not isinstance(payload, dict):
        return JSONResponse({"status": "invalid_json"}, status_code=400)

    handled = await service.handle_payload(payload, orders, tickets)
    return {"status": "ok", "handled": handled}
