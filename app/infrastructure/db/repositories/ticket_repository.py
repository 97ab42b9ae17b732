# app/infrastructure/db/repositories/ticket_repository.py
"""Repository for support tickets raised from the WhatsApp support menu."""

from __future__ import annotations

import logging
import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.models.session import Ticket
from app.infrastructure.db.models import SupportTicket

logger = logging.getLogger("ticket_repository")


def new_ticket_number() -> str:
    return "T" + uuid.uuid4().hex[:8].upper()


class TicketRepository:
    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def create(self, user_id: str, ticket: Ticket) -> str:
        row = SupportTicket(
            ticket_number=new_ticket_number(),
            user_id=user_id,
            name=ticket.name or "",
            order_number=ticket.order_number,
            topic=ticket.topic or "",
            description=ticket.description or "",
            status="Open",
        )
        self.db.add(row)
        try:
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise
        logger.info(
            "Ticket %s submitted by %s topic=%s order=%s",
            row.ticket_number,
            user_id,
            row.topic,
            row.order_number,
        )
        return row.ticket_number
