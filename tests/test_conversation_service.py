# tests/test_conversation_service.py
"""Tests for the webhook dispatcher / effect orchestrator.

Transport, order store, ticket store and invoice generator are AsyncMock /
MagicMock fakes; the session store and engine are the real ones.
"""

from decimal import Decimal
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from app.domain.i18n import t
from app.domain.models.conversation import InboundEvent, OrderDraft
from app.domain.models.session import (
    CartLine,
    ConversationState as S,
    Gender,
    Language,
    Session,
    Ticket,
)
from app.domain.services.conversation_engine import ConversationEngine
from app.domain.services.conversation_service import (
    ConversationService,
    extract_events,
    message_to_event,
)
from app.infrastructure.cache.session_cache import InMemorySessionStore

WA_ID = "218910000001"


def _transport():
    transport = MagicMock()
    transport.send_text = AsyncMock()
    transport.send_buttons = AsyncMock()
    transport.send_list = AsyncMock()
    transport.send_document = AsyncMock()
    return transport


def _orders(order_id="P1A2B3C4D"):
    orders = MagicMock()
    orders.create = AsyncMock(return_value=order_id)
    orders.list_for_user = AsyncMock(return_value=[])
    return orders


def _tickets(ticket_number="T0A1B2C3D"):
    tickets = MagicMock()
    tickets.create = AsyncMock(return_value=ticket_number)
    return tickets


def _service(invoices=None, engine=None):
    if invoices is None:
        invoices = MagicMock()
        invoices.generate.side_effect = lambda order_id, draft: Path(f"/tmp/invoice_{order_id}.pdf")
    return ConversationService(InMemorySessionStore(), _transport(), invoices, engine)


def _feed(event_loop, service, events, orders=None, tickets=None):
    orders = orders or _orders()
    tickets = tickets or _tickets()
    for event in events:
        event_loop.run_until_complete(service.handle(event, orders, tickets))
    return orders, tickets


def _stored(event_loop, service) -> Session:
    return event_loop.run_until_complete(service.sessions.get(WA_ID))


def _put(event_loop, service, session):
    event_loop.run_until_complete(service.sessions.save(session))


def text(body):
    return InboundEvent.text_message(WA_ID, body)


def button(option_id):
    return InboundEvent.button(WA_ID, option_id)


def list_reply(option_id):
    return InboundEvent.list_reply(WA_ID, option_id)


@pytest.fixture
def confirm_session():
    return Session(
        user_id=WA_ID,
        is_first_time=False,
        language=Language.EN,
        state=S.CHECKOUT_CONFIRM,
        gender=Gender.MEN,
        category="perfumes",
        cart=[CartLine(product_id=1, name="XYZ Cologne", unit_price=Decimal("50"), quantity=2)],
        customer_name="Sara Ali",
        delivery_address="Tripoli",
        delivery_location="https://www.google.com/maps?q=32.88,13.19",
        billing_address="Tripoli",
    )


# ── Scenario A: first contact ────────────────────────────


def test_first_contact_language_then_main_menu(event_loop):
    service = _service()

    _feed(event_loop, service, [text("hi")])
    prompt = service.transport.send_buttons.await_args
    assert [o.id for o in prompt.args[2]] == ["LANG_EN", "LANG_AR"]

    _feed(event_loop, service, [button("LANG_EN")])

    session = _stored(event_loop, service)
    assert session.state == S.MAIN_MENU
    assert session.language == Language.EN
    assert service.transport.send_text.await_args_list[0].args == (WA_ID, t("GREETING", "en"))
    menu = service.transport.send_buttons.await_args
    assert [o.id for o in menu.args[2]] == ["ORDER", "STATUS", "SUPPORT"]


# ── Scenario B: full order ───────────────────────────────


def test_full_order_creates_order_resets_and_sends_invoice(event_loop):
    service = _service()
    orders = _orders()
    _put(event_loop, service, Session(user_id=WA_ID, is_first_time=False, language=Language.EN, state=S.MAIN_MENU))

    _feed(
        event_loop,
        service,
        [
            button("ORDER"),
            button("MEN"),
            button("perfumes"),
            button("1"),
            text("2"),
            button("CHECKOUT"),
            text("Sara Ali"),
            text("Tripoli"),
            text("https://www.google.com/maps?q=32.88,13.19"),
            text("yes"),
            button("CONFIRM"),
        ],
        orders=orders,
    )

    orders.create.assert_awaited_once()
    draft = orders.create.await_args.args[0]
    assert isinstance(draft, OrderDraft)
    assert draft.total == Decimal("100")
    assert [(line.product_id, line.quantity, line.unit_price) for line in draft.lines] == [(1, 2, Decimal("50"))]
    assert draft.billing_address == "Tripoli"

    session = _stored(event_loop, service)
    assert session.state == S.WELCOME
    assert session.is_first_time is False
    assert session.language is None
    assert session.cart == []
    assert session.customer_name is None

    last_text = service.transport.send_text.await_args.args[1]
    assert last_text == t("ORDER_PLACED", "en", order_id="P1A2B3C4D", total="$100.00")

    event_loop.run_until_complete(service.drain())
    service.invoices.generate.assert_called_once()
    assert service.invoices.generate.call_args.args[0] == "P1A2B3C4D"
    service.transport.send_document.assert_awaited_once_with(
        WA_ID,
        Path("/tmp/invoice_P1A2B3C4D.pdf"),
        "invoice_P1A2B3C4D.pdf",
        t("INVOICE_CAPTION", "en", order_id="P1A2B3C4D"),
    )


def test_invoice_failure_does_not_undo_order(event_loop, confirm_session):
    invoices = MagicMock()
    invoices.generate.side_effect = OSError("disk full")
    service = _service(invoices=invoices)
    _put(event_loop, service, confirm_session)

    orders, _ = _feed(event_loop, service, [button("CONFIRM")])
    event_loop.run_until_complete(service.drain())

    orders.create.assert_awaited_once()
    service.transport.send_document.assert_not_awaited()
    assert _stored(event_loop, service).state == S.WELCOME


# ── Scenario C: status with no orders ────────────────────


def test_status_without_orders(event_loop):
    service = _service()
    orders = _orders()
    _put(event_loop, service, Session(user_id=WA_ID, is_first_time=False, language=Language.EN, state=S.MAIN_MENU))

    _feed(event_loop, service, [button("STATUS")], orders=orders)

    orders.list_for_user.assert_awaited_once_with(WA_ID, limit=5)
    service.transport.send_text.assert_awaited_once_with(WA_ID, t("NO_ORDERS", "en"))
    assert _stored(event_loop, service).state == S.MAIN_MENU


def test_status_lookup_failure_returns_to_menu(event_loop):
    service = _service()
    orders = _orders()
    orders.list_for_user.side_effect = RuntimeError("db down")
    _put(event_loop, service, Session(user_id=WA_ID, language=Language.EN, state=S.MAIN_MENU))

    _feed(event_loop, service, [button("STATUS")], orders=orders)

    service.transport.send_text.assert_awaited_once_with(WA_ID, t("STATUS_FAILED", "en"))
    assert _stored(event_loop, service).state == S.MAIN_MENU


# ── Scenario D: order store failure ──────────────────────


def test_order_store_failure_keeps_checkout(event_loop, confirm_session):
    service = _service()
    orders = _orders()
    orders.create.side_effect = RuntimeError("db down")
    _put(event_loop, service, confirm_session)

    _feed(event_loop, service, [button("CONFIRM")], orders=orders)
    event_loop.run_until_complete(service.drain())

    session = _stored(event_loop, service)
    assert session.state == S.CHECKOUT_CONFIRM
    assert len(session.cart) == 1
    assert session.customer_name == "Sara Ali"
    assert session.delivery_address == "Tripoli"
    body = service.transport.send_buttons.await_args.args[1]
    assert body == t("ORDER_FAILED", "en")
    service.invoices.generate.assert_not_called()


def test_cancel_resets_session(event_loop, confirm_session):
    service = _service()
    _put(event_loop, service, confirm_session)

    orders, _ = _feed(event_loop, service, [button("CANCEL")])

    orders.create.assert_not_awaited()
    session = _stored(event_loop, service)
    assert session.state == S.WELCOME
    assert session.cart == []
    service.transport.send_text.assert_awaited_once_with(WA_ID, t("ORDER_CANCELLED", "en"))


# ── Tickets ──────────────────────────────────────────────


def _ticket_session():
    return Session(
        user_id=WA_ID,
        is_first_time=False,
        language=Language.EN,
        state=S.TICKET_DESC,
        ticket=Ticket(name="Sara", order_number=None, topic="2_Returns"),
    )


def test_ticket_is_persisted_and_cleared(event_loop):
    service = _service()
    tickets = _tickets()
    _put(event_loop, service, _ticket_session())

    _feed(event_loop, service, [text("Wrong size")], tickets=tickets)

    user_id, ticket = tickets.create.await_args.args
    assert user_id == WA_ID
    assert ticket.description == "Wrong size"
    assert ticket.topic == "2_Returns"
    session = _stored(event_loop, service)
    assert session.state == S.MAIN_MENU
    assert session.ticket is None
    service.transport.send_text.assert_awaited_once_with(
        WA_ID, t("TICKET_SUBMITTED", "en", ticket_number="T0A1B2C3D")
    )


def test_ticket_store_failure_keeps_ticket(event_loop):
    service = _service()
    tickets = _tickets()
    tickets.create.side_effect = RuntimeError("db down")
    _put(event_loop, service, _ticket_session())

    _feed(event_loop, service, [text("Wrong size")], tickets=tickets)

    session = _stored(event_loop, service)
    assert session.state == S.TICKET_DESC
    assert session.ticket is not None
    service.transport.send_text.assert_awaited_once_with(WA_ID, t("TICKET_FAILED", "en"))


# ── Failure isolation ────────────────────────────────────


def test_engine_error_leaves_session_untouched(event_loop):
    engine = ConversationEngine()

    def boom(session, event):
        session.state = S.CHECKOUT_NAME
        session.cart.append(CartLine(product_id=1, name="x", unit_price=Decimal("1"), quantity=1))
        raise KeyError("bug")

    engine.transition = MagicMock(side_effect=boom)
    service = _service(engine=engine)
    _put(event_loop, service, Session(user_id=WA_ID, language=Language.EN, state=S.MAIN_MENU))

    _feed(event_loop, service, [button("ORDER")])

    session = _stored(event_loop, service)
    assert session.state == S.MAIN_MENU
    assert session.cart == []
    service.transport.send_text.assert_awaited_once_with(WA_ID, t("FALLBACK", "en"))


def test_send_failure_is_swallowed_and_state_kept(event_loop):
    service = _service()
    service.transport.send_buttons.side_effect = httpx.ConnectError("offline")
    _put(event_loop, service, Session(user_id=WA_ID, language=Language.EN, state=S.MAIN_MENU))

    _feed(event_loop, service, [button("ORDER")])

    assert _stored(event_loop, service).state == S.SELECT_GENDER


def test_users_do_not_share_sessions(event_loop):
    service = _service()
    other = "218910000002"

    event_loop.run_until_complete(service.handle(InboundEvent.button(other, "LANG_AR"), _orders(), _tickets()))
    _feed(event_loop, service, [text("hi")])

    assert _stored(event_loop, service).state == S.WELCOME
    other_session = event_loop.run_until_complete(service.sessions.get(other))
    assert other_session.state == S.MAIN_MENU
    assert other_session.language == Language.AR


# ── Payload parsing ──────────────────────────────────────


def _payload(messages=None, statuses=None):
    value = {"messaging_product": "whatsapp", "metadata": {"phone_number_id": "123"}}
    if messages is not None:
        value["messages"] = messages
    if statuses is not None:
        value["statuses"] = statuses
    return {"object": "whatsapp_business_account", "entry": [{"id": "1", "changes": [{"field": "messages", "value": value}]}]}


def test_message_to_event_text():
    event = message_to_event({"from": WA_ID, "type": "text", "text": {"body": "hi"}})

    assert event == InboundEvent.text_message(WA_ID, "hi")


def test_message_to_event_interactive_replies():
    btn = message_to_event(
        {"from": WA_ID, "type": "interactive", "interactive": {"type": "button_reply", "button_reply": {"id": "ORDER", "title": "Make a New Order"}}}
    )
    row = message_to_event(
        {"from": WA_ID, "type": "interactive", "interactive": {"type": "list_reply", "list_reply": {"id": "faq_orders", "title": "Orders"}}}
    )

    assert btn == InboundEvent.button(WA_ID, "ORDER")
    assert row == InboundEvent.list_reply(WA_ID, "faq_orders")


def test_message_to_event_location_becomes_maps_link():
    event = message_to_event({"from": WA_ID, "type": "location", "location": {"latitude": 32.88, "longitude": 13.19}})

    assert event.text == "https://www.google.com/maps?q=32.88,13.19"


def test_unsupported_message_is_ignored():
    assert message_to_event({"from": WA_ID, "type": "image", "image": {"id": "m1"}}) is None
    assert message_to_event({"type": "text", "text": {"body": "hi"}}) is None


def test_extract_events_collects_messages_and_statuses():
    payload = _payload(
        messages=[
            {"from": WA_ID, "type": "text", "text": {"body": "menu"}},
            {"from": WA_ID, "type": "sticker", "sticker": {}},
        ],
        statuses=[{"id": "wamid.1", "status": "delivered", "recipient_id": WA_ID}],
    )

    events, statuses = extract_events(payload)

    assert events == [InboundEvent.text_message(WA_ID, "menu")]
    assert statuses[0]["status"] == "delivered"


def test_handle_payload_processes_each_message(event_loop):
    service = _service()
    payload = _payload(messages=[
        {"from": WA_ID, "type": "text", "text": {"body": "hi"}},
        {"from": WA_ID, "type": "interactive", "interactive": {"type": "button_reply", "button_reply": {"id": "LANG_EN"}}},
    ])

    handled = event_loop.run_until_complete(service.handle_payload(payload, _orders(), _tickets()))

    assert handled == 2
    assert _stored(event_loop, service).state == S.MAIN_MENU


def test_handle_payload_status_only(event_loop):
    service = _service()

    handled = event_loop.run_until_complete(
        service.handle_payload(_payload(statuses=[{"id": "wamid.1", "status": "read"}]), _orders(), _tickets())
    )

    assert handled == 0
    assert len(service.sessions) == 0
