# app/domain/models/conversation.py
"""
Value types exchanged between the webhook dispatcher, the conversation
engine and the effect handlers.

The engine never talks to the network or the database. It receives an
``InboundEvent`` and answers with a ``Transition``: the mutated session, a
list of intents (messages to send) and at most one ``Effect``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import List, Optional, Union

from app.domain.models.session import CartLine, Session


class EventKind(str, Enum):
    TEXT = "text"
    BUTTON = "button"
    LIST = "list"


@dataclass(frozen=True)
class InboundEvent:
    user_id: str
    kind: EventKind
    text: Optional[str] = None
    option_id: Optional[str] = None

    @classmethod
    def text_message(cls, user_id: str, text: str) -> "InboundEvent":
        return cls(user_id=user_id, kind=EventKind.TEXT, text=text)

    @classmethod
    def button(cls, user_id: str, option_id: str) -> "InboundEvent":
        return cls(user_id=user_id, kind=EventKind.BUTTON, option_id=option_id)

    @classmethod
    def list_reply(cls, user_id: str, option_id: str) -> "InboundEvent":
        return cls(user_id=user_id, kind=EventKind.LIST, option_id=option_id)


@dataclass(frozen=True)
class Option:
    id: str
    label: str


@dataclass(frozen=True)
class TextIntent:
    text: str


@dataclass(frozen=True)
class ButtonsIntent:
    body: str
    options: List[Option]


@dataclass(frozen=True)
class ListIntent:
    header: str
    body: str
    footer: str
    button_label: str
    rows: List[Option]


Intent = Union[TextIntent, ButtonsIntent, ListIntent]


class EffectKind(str, Enum):
    PLACE_ORDER = "PLACE_ORDER"
    SUBMIT_TICKET = "SUBMIT_TICKET"
    RESET = "RESET"
    CHECK_STATUS = "CHECK_STATUS"


@dataclass(frozen=True)
class Effect:
    kind: EffectKind


@dataclass
class Transition:
    session: Session
    intents: List[Intent] = field(default_factory=list)
    effect: Optional[Effect] = None


@dataclass
class OrderDraft:
    """Everything the order store needs to persist one order atomically."""

    user_id: str
    customer_name: str
    delivery_address: str
    delivery_location: str
    billing_address: str
    lines: List[CartLine]

    @property
    def total(self) -> Decimal:
        return sum((line.subtotal for line in self.lines), Decimal("0"))

    @classmethod
    def from_session(cls, session: Session) -> "OrderDraft":
        return cls(
            user_id=session.user_id,
            customer_name=session.customer_name or "",
            delivery_address=session.delivery_address or "",
            delivery_location=session.delivery_location or "",
            billing_address=session.billing_address or "",
            lines=[line.model_copy() for line in session.cart],
        )


@dataclass(frozen=True)
class OrderSummary:
    order_id: str
    status: str
    total: Decimal
    created_at: Optional[datetime] = None
