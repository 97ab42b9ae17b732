# app/infrastructure/db/repositories/order_repository.py
"""Repository for storefront orders and their line items."""

from __future__ import annotations

import logging
import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.models.conversation import OrderDraft, OrderSummary
from app.infrastructure.db.models import Order, OrderItem

logger = logging.getLogger("order_repository")

INITIAL_STATUS = "Placed"


def new_order_id() -> str:
    """``P`` followed by 8 uppercase hex characters, e.g. ``P1A2B3C4D``."""
    return "P" + uuid.uuid4().hex[:8].upper()


class OrderRepository:
    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def create(self, draft: OrderDraft) -> str:
        """Persist header and items in one transaction; returns the order id."""
        order = Order(
            order_id=new_order_id(),
            user_id=draft.user_id,
            customer_name=draft.customer_name,
            delivery_address=draft.delivery_address,
            delivery_location=draft.delivery_location,
            billing_address=draft.billing_address,
            status=INITIAL_STATUS,
            total=draft.total,
            items=[
                OrderItem(
                    product_id=line.product_id,
                    product_name=line.name,
                    unit_price=line.unit_price,
                    quantity=line.quantity,
                    subtotal=line.subtotal,
                )
                for line in draft.lines
            ],
        )
        self.db.add(order)
        try:
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise
        logger.info("Order %s created for %s (total=%s)", order.order_id, draft.user_id, draft.total)
        return order.order_id

    async def list_for_user(self, user_id: str, limit: int = 5) -> list[OrderSummary]:
        """Most recent orders first."""
        stmt = (
            select(Order)
            .where(Order.user_id == user_id)
            .order_by(Order.created_at.desc())
            .limit(limit)
        )
        result = await self.db.execute(stmt)
        return [
            OrderSummary(
                order_id=o.order_id,
                status=o.status,
                total=o.total,
                created_at=o.created_at,
            )
            for o in result.scalars().all()
        ]
