# app/domain/services/conversation_service.py
"""
Webhook dispatcher and effect orchestrator.

For every inbound event:

1. take the user's lock and load a deep copy of the session,
2. run the engine transition on the copy,
3. execute the requested effect against the order / ticket stores,
4. save (or reset) the session and release the lock,
5. deliver the outbound messages, then
6. build and send the invoice in a background task after an order.

Send failures are logged and dropped. Store failures become a localized
notice and leave the session where it was.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, List, Optional, Protocol, Set, Tuple

from app.domain.i18n import t
from app.domain.models.conversation import (
    ButtonsIntent,
    EffectKind,
    InboundEvent,
    Intent,
    ListIntent,
    OrderDraft,
    OrderSummary,
    TextIntent,
    Transition,
)
from app.domain.models.session import Session, Ticket
from app.domain.services.conversation_engine import MAX_STATUS_ORDERS, ConversationEngine

logger = logging.getLogger("conversation_service")

MAPS_URL = "https://www.google.com/maps?q={lat},{lng}"


class OrderStore(Protocol):
    async def create(self, draft: OrderDraft) -> str: ...

    async def list_for_user(self, user_id: str, limit: int = ...) -> List[OrderSummary]: ...


class TicketStore(Protocol):
    async def create(self, user_id: str, ticket: Ticket) -> str: ...


# ---------------------------------------------------------------------------
# Webhook payload parsing
# ---------------------------------------------------------------------------

def location_link(location: Dict[str, Any]) -> Optional[str]:
    lat = location.get("latitude")
    lng = location.get("longitude")
    if lat is None or lng is None:
        return None
    return MAPS_URL.format(lat=lat, lng=lng)


def message_to_event(message: Dict[str, Any]) -> Optional[InboundEvent]:
    """Map one Cloud API message object to an InboundEvent (None if unsupported)."""
    user_id = message.get("from")
    msg_type = message.get("type")
    if not user_id:
        return None

    if msg_type == "text":
        return InboundEvent.text_message(user_id, (message.get("text") or {}).get("body", ""))

    if msg_type == "interactive":
        interactive = message.get("interactive") or {}
        kind = interactive.get("type")
        if kind == "button_reply":
            return InboundEvent.button(user_id, (interactive.get("button_reply") or {}).get("id", ""))
        if kind == "list_reply":
            return InboundEvent.list_reply(user_id, (interactive.get("list_reply") or {}).get("id", ""))

    if msg_type == "button":
        # Quick-reply buttons on template messages
        button = message.get("button") or {}
        return InboundEvent.button(user_id, button.get("payload") or button.get("text", ""))

    if msg_type == "location":
        link = location_link(message.get("location") or {})
        if link:
            return InboundEvent.text_message(user_id, link)

    logger.info("Ignoring unsupported message type=%s from %s", msg_type, user_id)
    return None


def extract_events(payload: Dict[str, Any]) -> Tuple[List[InboundEvent], List[Dict[str, Any]]]:
    """Return (events, delivery statuses) found in a webhook payload."""
    events: List[InboundEvent] = []
    statuses: List[Dict[str, Any]] = []
    for entry in payload.get("entry") or []:
        for change in entry.get("changes") or []:
            value = change.get("value") or {}
            statuses.extend(value.get("statuses") or [])
            for message in value.get("messages") or []:
                event = message_to_event(message)
                if event is not None:
                    events.append(event)
    return events, statuses


# ---------------------------------------------------------------------------
# Orchestrator
# ---------------------------------------------------------------------------

class ConversationService:
    def __init__(self, sessions, transport, invoices, engine: Optional[ConversationEngine] = None):
        self.sessions = sessions
        self.transport = transport
        self.invoices = invoices
        self.engine = engine or ConversationEngine()
        self._background: Set[asyncio.Task] = set()

    async def handle_payload(self, payload: Dict[str, Any], orders: OrderStore, tickets: TicketStore) -> int:
        events, statuses = extract_events(payload)
        for status in statuses:
            logger.info(
                "Delivery status %s for message %s to %s",
                status.get("status"),
                status.get("id"),
                status.get("recipient_id"),
            )
        for event in events:
            await self.handle(event, orders, tickets)
        return len(events)

    async def handle(self, event: InboundEvent, orders: OrderStore, tickets: TicketStore) -> Session:
        invoice_job: Optional[Tuple[str, OrderDraft]] = None

        async with self.sessions.lock(event.user_id):
            current = await self.sessions.get(event.user_id)
            lang = current.lang
            try:
                result = self.engine.transition(current.model_copy(deep=True), event)
            except Exception:
                logger.exception(
                    "Transition failed for %s in %s (%s)", event.user_id, current.state.value, event.kind.value
                )
                session = current
                intents: List[Intent] = [TextIntent(t("FALLBACK", lang))]
            else:
                result, invoice_job = await self._apply_effect(result, orders, tickets)
                if result.effect is not None and result.effect.kind == EffectKind.RESET:
                    lang = result.session.lang
                    session = await self.sessions.reset(event.user_id)
                else:
                    session = result.session
                    await self.sessions.save(session)
                intents = result.intents

        await self.deliver(event.user_id, intents)

        if invoice_job is not None:
            order_id, draft = invoice_job
            self._spawn(self._send_invoice(event.user_id, lang, order_id, draft))
        return session

    async def _apply_effect(
        self, result: Transition, orders: OrderStore, tickets: TicketStore
    ) -> Tuple[Transition, Optional[Tuple[str, OrderDraft]]]:
        effect = result.effect
        if effect is None or effect.kind == EffectKind.RESET:
            return result, None

        session = result.session
        invoice_job = None

        if effect.kind == EffectKind.PLACE_ORDER:
            draft = OrderDraft.from_session(session)
            try:
                order_id = await orders.create(draft)
            except Exception:
                logger.exception("Order store failed for %s", session.user_id)
                outcome = self.engine.order_failed(session)
            else:
                outcome = self.engine.order_placed(session, order_id)
                invoice_job = (order_id, draft)

        elif effect.kind == EffectKind.SUBMIT_TICKET:
            try:
                ticket_number = await tickets.create(session.user_id, session.ticket or Ticket())
            except Exception:
                logger.exception("Ticket store failed for %s", session.user_id)
                outcome = self.engine.ticket_failed(session)
            else:
                outcome = self.engine.ticket_submitted(session, ticket_number)

        elif effect.kind == EffectKind.CHECK_STATUS:
            try:
                recent = await orders.list_for_user(session.user_id, limit=MAX_STATUS_ORDERS)
            except Exception:
                logger.exception("Order lookup failed for %s", session.user_id)
                outcome = self.engine.status_failed(session)
            else:
                outcome = self.engine.status_result(session, recent)

        else:
            raise ValueError(f"Unhandled effect {effect.kind}")

        return Transition(outcome.session, result.intents + outcome.intents, outcome.effect), invoice_job

    async def deliver(self, user_id: str, intents: List[Intent]) -> None:
        for intent in intents:
            try:
                if isinstance(intent, TextIntent):
                    await self.transport.send_text(user_id, intent.text)
                elif isinstance(intent, ButtonsIntent):
                    await self.transport.send_buttons(user_id, intent.body, intent.options)
                elif isinstance(intent, ListIntent):
                    await self.transport.send_list(
                        user_id,
                        intent.header,
                        intent.body,
                        intent.footer,
                        intent.button_label,
                        intent.rows,
                    )
            except Exception:
                logger.exception("Failed to send %s to %s", type(intent).__name__, user_id)

    async def _send_invoice(self, user_id: str, lang: str, order_id: str, draft: OrderDraft) -> None:
        try:
            path = await asyncio.to_thread(self.invoices.generate, order_id, draft)
            await self.transport.send_document(
                user_id, path, path.name, t("INVOICE_CAPTION", lang, order_id=order_id)
            )
            logger.info("Invoice for %s sent to %s", order_id, user_id)
        except Exception:
            logger.exception("Invoice delivery failed for order %s", order_id)

    def _spawn(self, coro) -> None:
        task = asyncio.create_task(coro)
        self._background.add(task)
        task.add_done_callback(self._background.discard)

    async def drain(self) -> None:
        """Wait for pending background work (invoices)."""
        if self._background:
            await asyncio.gather(*list(self._background), return_exceptions=True)
