# app/api/deps.py
"""
Shared FastAPI dependencies for the webhook routes.

The conversation service lives on ``app.state`` (built at startup); stores
are request-scoped because they wrap the request's DB session.
"""

import hashlib
import hmac
import logging

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.db import get_db
from app.domain.services.conversation_service import ConversationService
from app.infrastructure.db.repositories import OrderRepository, TicketRepository

logger = logging.getLogger("api.deps")


def compute_signature(body: bytes, secret: str) -> str:
    digest = hmac.new(secret.encode("utf-8"), body, hashlib.sha256).hexdigest()
    return f"sha256={digest}"


def signature_matches(body: bytes, header_value: str, secret: str) -> bool:
    """Timing-safe comparison of an ``X-Hub-Signature-256`` header."""
    if not header_value:
        return False
    return hmac.compare_digest(compute_signature(body, secret), header_value.strip())


async def verify_whatsapp_signature(request: Request) -> bytes:
    """Return the raw body; 403 when an app secret is configured and the signature is wrong."""
    body = await request.body()
    secret = settings.WHATSAPP_APP_SECRET
    if secret and not signature_matches(body, request.headers.get("X-Hub-Signature-256", ""), secret):
        logger.warning("Rejected webhook with invalid signature")
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Invalid signature")
    return body


def get_conversation_service(request: Request) -> ConversationService:
    service = getattr(request.app.state, "conversation_service", None)
    if service is None:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Bot not ready")
    return service


def get_order_repository(db: AsyncSession = Depends(get_db)) -> OrderRepository:
    return OrderRepository(db)


def get_ticket_repository(db: AsyncSession = Depends(get_db)) -> TicketRepository:
    return TicketRepository(db)
