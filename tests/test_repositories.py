# tests/test_repositories.py
"""Tests for the order / ticket repositories against a mocked AsyncSession."""

import re
from datetime import datetime, timezone
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest

from app.domain.models.conversation import OrderDraft
from app.domain.models.session import CartLine, Ticket
from app.infrastructure.db.models import Order, SupportTicket
from app.infrastructure.db.repositories import OrderRepository, TicketRepository
from app.infrastructure.db.repositories.order_repository import new_order_id

WA_ID = "218910000001"


def _db():
    db = MagicMock()
    db.add = MagicMock()
    db.commit = AsyncMock()
    db.rollback = AsyncMock()
    db.execute = AsyncMock()
    return db


def _draft():
    return OrderDraft(
        user_id=WA_ID,
        customer_name="Sara Ali",
        delivery_address="Tripoli",
        delivery_location="https://www.google.com/maps?q=32.88,13.19",
        billing_address="Tripoli",
        lines=[
            CartLine(product_id=1, name="XYZ Cologne", unit_price=Decimal("50"), quantity=2),
            CartLine(product_id=7, name="Ocean Body Spray", unit_price=Decimal("18"), quantity=1),
        ],
    )


def test_order_id_format():
    for _ in range(50):
        assert re.fullmatch(r"P[0-9A-F]{8}", new_order_id())


def test_create_adds_header_and_items_in_one_commit(event_loop):
    db = _db()

    order_id = event_loop.run_until_complete(OrderRepository(db).create(_draft()))

    db.add.assert_called_once()
    order = db.add.call_args.args[0]
    assert isinstance(order, Order)
    assert order.order_id == order_id
    assert order.status == "Placed"
    assert order.total == Decimal("118")
    assert [(i.product_id, i.quantity, i.subtotal) for i in order.items] == [
        (1, 2, Decimal("100")),
        (7, 1, Decimal("18")),
    ]
    db.commit.assert_awaited_once()
    db.rollback.assert_not_awaited()


def test_create_rolls_back_and_reraises(event_loop):
    db = _db()
    db.commit.side_effect = RuntimeError("constraint")

    with pytest.raises(RuntimeError):
        event_loop.run_until_complete(OrderRepository(db).create(_draft()))

    db.rollback.assert_awaited_once()


def test_list_for_user_maps_summaries(event_loop):
    db = _db()
    created = datetime(2026, 10, 1, tzinfo=timezone.utc)
    row = Order(order_id="P1A2B3C4D", user_id=WA_ID, status="Shipped", total=Decimal("100"), created_at=created)
    result = MagicMock()
    result.scalars.return_value.all.return_value = [row]
    db.execute.return_value = result

    summaries = event_loop.run_until_complete(OrderRepository(db).list_for_user(WA_ID, limit=5))

    assert len(summaries) == 1
    assert summaries[0].order_id == "P1A2B3C4D"
    assert summaries[0].status == "Shipped"
    assert summaries[0].total == Decimal("100")
    db.execute.assert_awaited_once()


def test_ticket_create(event_loop):
    db = _db()
    ticket = Ticket(name="Sara", order_number=None, topic="1_Delivery", description="Late parcel")

    number = event_loop.run_until_complete(TicketRepository(db).create(WA_ID, ticket))

    row = db.add.call_args.args[0]
    assert isinstance(row, SupportTicket)
    assert re.fullmatch(r"T[0-9A-F]{8}", number)
    assert row.ticket_number == number
    assert row.order_number is None
    assert row.status == "Open"
    db.commit.assert_awaited_once()


def test_ticket_create_rolls_back(event_loop):
    db = _db()
    db.commit.side_effect = RuntimeError("db down")

    with pytest.raises(RuntimeError):
        event_loop.run_until_complete(TicketRepository(db).create(WA_ID, Ticket(name="x")))

    db.rollback.assert_awaited_once()
