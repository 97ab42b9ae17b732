# app/domain/services/conversation_engine.py
"""
Per-user conversation state machine for the storefront bot.

``ConversationEngine.transition`` is a pure function of (session, event):
it mutates only the session it is given and answers with the messages to
send plus, optionally, one effect for the orchestrator to execute
(placing an order, submitting a ticket, resetting the session, reading
order status). Effect outcomes are folded back into the session through
the ``order_placed`` / ``order_failed`` / ``status_result`` / ... helpers,
which are pure as well.

Every (state, event kind) pair has a defined outcome; anything the current
step does not expect gets the generic fallback and leaves the state alone.
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, List, Optional

from app.domain.catalog import CATALOG, CATEGORY_LABEL_KEYS, Catalog, format_price
from app.domain.i18n import FAQ_LABEL_KEYS, faq_text, t
from app.domain.models.conversation import (
    ButtonsIntent,
    Effect,
    EffectKind,
    EventKind,
    InboundEvent,
    Intent,
    ListIntent,
    Option,
    OrderSummary,
    TextIntent,
    Transition,
)
from app.domain.models.session import (
    CartLine,
    ConversationState as S,
    Gender,
    Language,
    Session,
    Ticket,
)

logger = logging.getLogger("conversation_engine")

# Global text commands, matched case-insensitively from any state
LANGUAGE_COMMANDS = frozenset({"language", "لغة"})
MENU_COMMANDS = frozenset({"menu", "hi", "hello", "القائمة الرئيسية", "مرحبا"})

YES_ANSWERS = frozenset({"yes", "y", "نعم"})
NO_ANSWERS = frozenset({"no", "n", "لا"})
NO_ORDER_NUMBER = frozenset({"none", "لا يوجد"})

# Button / list option ids
LANG_EN = "LANG_EN"
LANG_AR = "LANG_AR"
ORDER = "ORDER"
STATUS = "STATUS"
SUPPORT = "SUPPORT"
MEN = "MEN"
WOMEN = "WOMEN"
CONTINUE = "CONTINUE"
CHECKOUT = "CHECKOUT"
CONFIRM = "CONFIRM"
CANCEL = "CANCEL"
FAQS = "FAQS"
SUBMIT_TICKET = "SUBMIT_TICKET"
LIVE_AGENT = "LIVE_AGENT"

LANGUAGE_OPTIONS = {LANG_EN: Language.EN, LANG_AR: Language.AR}
GENDER_OPTIONS = {MEN: Gender.MEN, WOMEN: Gender.WOMEN}

# Ticket topic id -> i18n label key
TICKET_TOPICS = {
    "0_Orders_and_payments": "TOPIC_ORDERS_PAYMENTS",
    "1_Delivery": "TOPIC_DELIVERY",
    "2_Returns": "TOPIC_RETURNS",
    "3_Other": "TOPIC_OTHER",
}

MAX_BUTTONS = 3
MAX_STATUS_ORDERS = 5


class ConversationEngine:
    def __init__(self, catalog: Catalog = CATALOG):
        self.catalog = catalog
        self._handlers: Dict[S, Callable[[Session, InboundEvent], Transition]] = {
            S.WELCOME: self._welcome,
            S.MAIN_MENU: self._main_menu,
            S.SELECT_GENDER: self._select_gender,
            S.SELECT_CATEGORY: self._select_category,
            S.SHOW_PRODUCTS: self._show_products,
            S.ASK_QUANTITY: self._ask_quantity,
            S.CART_DECISION: self._cart_decision,
            S.CHECKOUT_NAME: self._checkout_name,
            S.CHECKOUT_ADDRESS: self._checkout_address,
            S.CHECKOUT_DELIVERY_LOCATION: self._checkout_location,
            S.CHECKOUT_BILLING_PROMPT: self._checkout_billing_prompt,
            S.CHECKOUT_BILLING_ADDRESS: self._checkout_billing_address,
            S.CHECKOUT_CONFIRM: self._checkout_confirm,
            S.CHECK_ORDER_STATUS: self._back_to_menu,
            S.SUPPORT_MENU: self._support_menu,
            S.FAQ_LIST: self._faq_list,
            S.TICKET_NAME: self._ticket_name,
            S.TICKET_ORDERNUM: self._ticket_ordernum,
            S.TICKET_TOPIC: self._ticket_topic,
            S.TICKET_DESC: self._ticket_desc,
            S.LIVE_AGENT: self._back_to_menu,
        }

    # ── Entry point ─────────────────────────────────────────

    def transition(self, session: Session, event: InboundEvent) -> Transition:
        if event.kind == EventKind.TEXT:
            command = _normalize(event.text)
            if command in LANGUAGE_COMMANDS:
                return self._change_language(session)
            if command in MENU_COMMANDS:
                return self._menu_command(session)

        handler = self._handlers[session.state]
        result = handler(session, event)
        logger.debug(
            "user=%s %s/%s -> %s effect=%s",
            session.user_id,
            event.kind.value,
            event.option_id or "-",
            result.session.state.value,
            result.effect.kind.value if result.effect else None,
        )
        return result

    # ── Global commands ─────────────────────────────────────

    def _change_language(self, session: Session) -> Transition:
        session.language = None
        session.is_first_time = True
        session.state = S.WELCOME
        session.current_product = None
        session.ticket = None
        return Transition(session, [self.language_prompt()])

    def _menu_command(self, session: Session) -> Transition:
        session.current_product = None
        session.ticket = None
        if session.language is None:
            session.state = S.WELCOME
            return Transition(session, [self.language_prompt()])
        session.state = S.MAIN_MENU
        lang = session.lang
        return Transition(session, [TextIntent(t("WELCOME_BACK", lang)), self.main_menu(lang)])

    # ── Menus ───────────────────────────────────────────────

    @staticmethod
    def language_prompt() -> ButtonsIntent:
        return ButtonsIntent(
            body=t("LANG_PROMPT"),
            options=[Option(LANG_EN, t("BTN_LANG_EN")), Option(LANG_AR, t("BTN_LANG_AR"))],
        )

    @staticmethod
    def main_menu(lang: str) -> ButtonsIntent:
        return ButtonsIntent(
            body=t("MAIN_MENU", lang),
            options=[
                Option(ORDER, t("BTN_ORDER", lang)),
                Option(STATUS, t("BTN_STATUS", lang)),
                Option(SUPPORT, t("BTN_SUPPORT", lang)),
            ],
        )

    @staticmethod
    def _gender_menu(lang: str, body_key: str = "GENDER_PROMPT") -> ButtonsIntent:
        return ButtonsIntent(
            body=t(body_key, lang),
            options=[Option(MEN, t("BTN_MEN", lang)), Option(WOMEN, t("BTN_WOMEN", lang))],
        )

    def _category_menu(self, session: Session) -> ButtonsIntent:
        lang = session.lang
        gender_label = t(f"GENDER_{session.gender.name}", lang) if session.gender else ""
        options = [
            Option(category, t(CATEGORY_LABEL_KEYS.get(category, category), lang))
            for category in self.catalog.categories(session.gender)
        ]
        return ButtonsIntent(body=t("CATEGORY_PROMPT", lang, gender=gender_label), options=options)

    def _product_menu(self, session: Session) -> Intent:
        lang = session.lang
        products = self.catalog.products_for(session.gender, session.category)
        # Button titles cap at 20 chars; prices go in the body
        lines = [t("PRODUCT_LINE", lang, name=p.name, price=format_price(p.price)) for p in products]
        body = "\n".join([t("PRODUCTS_PROMPT", lang)] + lines)
        options = [Option(str(p.id), p.name) for p in products]
        if len(options) <= MAX_BUTTONS:
            return ButtonsIntent(body=body, options=options)
        return ListIntent(
            header=t("PRODUCTS_HEADER", lang),
            body=body,
            footer=t("LIST_FOOTER", lang),
            button_label=t("LIST_BUTTON", lang),
            rows=options,
        )

    @staticmethod
    def _cart_decision_menu(lang: str, body: str) -> ButtonsIntent:
        return ButtonsIntent(
            body=body,
            options=[Option(CONTINUE, t("BTN_CONTINUE", lang)), Option(CHECKOUT, t("BTN_CHECKOUT", lang))],
        )

    @staticmethod
    def _confirm_menu(lang: str, body: str) -> ButtonsIntent:
        return ButtonsIntent(
            body=body,
            options=[Option(CONFIRM, t("BTN_CONFIRM", lang)), Option(CANCEL, t("BTN_CANCEL", lang))],
        )

    @staticmethod
    def _support_menu_intent(lang: str, body_key: str = "SUPPORT_MENU") -> ButtonsIntent:
        return ButtonsIntent(
            body=t(body_key, lang),
            options=[
                Option(FAQS, t("BTN_FAQS", lang)),
                Option(SUBMIT_TICKET, t("BTN_SUBMIT_TICKET", lang)),
                Option(LIVE_AGENT, t("BTN_LIVE_AGENT", lang)),
            ],
        )

    @staticmethod
    def _faq_menu(lang: str) -> ListIntent:
        return ListIntent(
            header=t("FAQ_HEADER", lang),
            body=t("FAQ_BODY", lang),
            footer=t("LIST_FOOTER", lang),
            button_label=t("LIST_BUTTON", lang),
            rows=[Option(faq_id, t(key, lang)) for faq_id, key in FAQ_LABEL_KEYS.items()],
        )

    @staticmethod
    def _topic_menu(lang: str) -> ListIntent:
        return ListIntent(
            header=t("TICKET_TOPIC_HEADER", lang),
            body=t("TICKET_TOPIC_BODY", lang),
            footer=t("LIST_FOOTER", lang),
            button_label=t("LIST_BUTTON", lang),
            rows=[Option(topic_id, t(key, lang)) for topic_id, key in TICKET_TOPICS.items()],
        )

    @staticmethod
    def fallback(session: Session) -> Transition:
        return Transition(session, [TextIntent(t("FALLBACK", session.lang))])

    # ── Summaries ───────────────────────────────────────────

    @staticmethod
    def cart_summary(session: Session) -> str:
        lang = session.lang
        lines = [t("CART_HEADER", lang)]
        for line in session.cart:
            lines.append(
                t(
                    "CART_LINE",
                    lang,
                    quantity=line.quantity,
                    name=line.name,
                    price=format_price(line.unit_price),
                    subtotal=format_price(line.subtotal),
                )
            )
        lines.append(t("CART_TOTAL", lang, total=format_price(session.cart_total())))
        return "\n".join(lines)

    def order_summary(self, session: Session) -> str:
        lang = session.lang
        return "\n".join([
            t("ORDER_SUMMARY_HEADER", lang),
            self.cart_summary(session),
            "",
            t("SUMMARY_NAME", lang, value=session.customer_name),
            t("SUMMARY_DELIVERY_ADDRESS", lang, value=session.delivery_address),
            t("SUMMARY_DELIVERY_LOCATION", lang, value=session.delivery_location),
            t("SUMMARY_BILLING_ADDRESS", lang, value=session.billing_address),
            t("SUMMARY_PAYMENT", lang),
            "",
            t("CONFIRM_PROMPT", lang),
        ])

    def _enter_confirm(self, session: Session) -> Transition:
        session.state = S.CHECKOUT_CONFIRM
        return Transition(session, [self._confirm_menu(session.lang, self.order_summary(session))])

    # ── State handlers ──────────────────────────────────────

    def _welcome(self, session: Session, event: InboundEvent) -> Transition:
        if event.kind == EventKind.BUTTON and event.option_id in LANGUAGE_OPTIONS:
            greet_first = session.is_first_time
            session.language = LANGUAGE_OPTIONS[event.option_id]
            session.is_first_time = False
            session.state = S.MAIN_MENU
            lang = session.lang
            if greet_first:
                intents: List[Intent] = [
                    TextIntent(t("GREETING", lang)),
                    TextIntent(t("GREETING_FOLLOWUP", lang)),
                ]
            else:
                intents = [TextIntent(t("WELCOME_BACK", lang))]
            intents.append(self.main_menu(lang))
            return Transition(session, intents)

        if event.kind == EventKind.TEXT:
            return Transition(session, [self.language_prompt()])

        return Transition(
            session,
            [TextIntent(t("SELECT_LANGUAGE", session.lang)), self.language_prompt()],
        )

    def _main_menu(self, session: Session, event: InboundEvent) -> Transition:
        if event.kind != EventKind.BUTTON:
            return self.fallback(session)
        lang = session.lang

        if event.option_id == ORDER:
            session.state = S.SELECT_GENDER
            return Transition(session, [self._gender_menu(lang)])

        if event.option_id == STATUS:
            session.state = S.CHECK_ORDER_STATUS
            return Transition(session, [], Effect(EffectKind.CHECK_STATUS))

        if event.option_id == SUPPORT:
            session.state = S.SUPPORT_MENU
            return Transition(session, [self._support_menu_intent(lang)])

        return Transition(session, [TextIntent(t("UNKNOWN_MAIN_MENU", lang)), self.main_menu(lang)])

    def _back_to_menu(self, session: Session, event: InboundEvent) -> Transition:
        # Transient states: nothing waits for input here.
        session.state = S.MAIN_MENU
        return Transition(session, [TextIntent(t("FALLBACK", session.lang)), self.main_menu(session.lang)])

    def _select_gender(self, session: Session, event: InboundEvent) -> Transition:
        if event.kind != EventKind.BUTTON:
            return self.fallback(session)
        gender = GENDER_OPTIONS.get(event.option_id)
        if gender is None:
            return Transition(session, [self._gender_menu(session.lang, "PICK_GENDER")])

        session.gender = gender
        session.category = None
        session.state = S.SELECT_CATEGORY
        return Transition(session, [self._category_menu(session)])

    def _select_category(self, session: Session, event: InboundEvent) -> Transition:
        if event.kind not in (EventKind.BUTTON, EventKind.LIST):
            return self.fallback(session)
        lang = session.lang
        category = event.option_id

        if not self.catalog.has_category(session.gender, category):
            return Transition(session, [TextIntent(t("UNKNOWN_CATEGORY", lang)), self._category_menu(session)])

        if not self.catalog.products_for(session.gender, category):
            return Transition(session, [TextIntent(t("NO_PRODUCTS", lang)), self._category_menu(session)])

        session.category = category
        session.state = S.SHOW_PRODUCTS
        return Transition(session, [self._product_menu(session)])

    def _show_products(self, session: Session, event: InboundEvent) -> Transition:
        if event.kind not in (EventKind.BUTTON, EventKind.LIST):
            return self.fallback(session)
        product = self.catalog.find_product(session.gender, session.category, event.option_id)
        if product is None:
            return Transition(session, [TextIntent(t("PRODUCT_NOT_FOUND", session.lang))])

        session.current_product = product
        session.state = S.ASK_QUANTITY
        return Transition(session, [TextIntent(t("ASK_QUANTITY", session.lang, name=product.name))])

    def _ask_quantity(self, session: Session, event: InboundEvent) -> Transition:
        lang = session.lang
        product = session.current_product
        if product is None:
            session.state = S.SHOW_PRODUCTS
            return Transition(session, [TextIntent(t("PRODUCT_NOT_FOUND", lang)), self._product_menu(session)])
        if event.kind != EventKind.TEXT:
            return self.fallback(session)

        quantity = parse_quantity(event.text)
        if quantity is None:
            return Transition(session, [TextIntent(t("INVALID_QUANTITY", lang))])

        session.cart.append(
            CartLine(product_id=product.id, name=product.name, unit_price=product.price, quantity=quantity)
        )
        session.current_product = None
        session.state = S.CART_DECISION
        body = "\n\n".join([
            t("ADDED_TO_CART", lang, quantity=quantity, name=product.name),
            self.cart_summary(session),
            t("CART_DECISION", lang),
        ])
        return Transition(session, [self._cart_decision_menu(lang, body)])

    def _cart_decision(self, session: Session, event: InboundEvent) -> Transition:
        if event.kind != EventKind.BUTTON:
            return self.fallback(session)
        lang = session.lang

        if event.option_id == CONTINUE:
            session.category = None
            session.state = S.SELECT_CATEGORY
            return Transition(session, [self._category_menu(session)])

        if event.option_id == CHECKOUT:
            session.state = S.CHECKOUT_NAME
            return Transition(session, [TextIntent(t("ASK_NAME", lang))])

        return Transition(session, [self._cart_decision_menu(lang, t("PICK_CONTINUE_OR_CHECKOUT", lang))])

    def _checkout_name(self, session: Session, event: InboundEvent) -> Transition:
        value = self._required_text(session, event)
        if isinstance(value, Transition):
            return value
        session.customer_name = value
        session.state = S.CHECKOUT_ADDRESS
        return Transition(session, [TextIntent(t("ASK_ADDRESS", session.lang, name=value))])

    def _checkout_address(self, session: Session, event: InboundEvent) -> Transition:
        value = self._required_text(session, event)
        if isinstance(value, Transition):
            return value
        session.delivery_address = value
        session.state = S.CHECKOUT_DELIVERY_LOCATION
        return Transition(session, [TextIntent(t("ASK_LOCATION", session.lang))])

    def _checkout_location(self, session: Session, event: InboundEvent) -> Transition:
        value = self._required_text(session, event)
        if isinstance(value, Transition):
            return value
        session.delivery_location = value
        session.state = S.CHECKOUT_BILLING_PROMPT
        return Transition(session, [TextIntent(t("ASK_BILLING_SAME", session.lang))])

    def _checkout_billing_prompt(self, session: Session, event: InboundEvent) -> Transition:
        if event.kind != EventKind.TEXT:
            return self.fallback(session)
        answer = _normalize(event.text)

        if answer in YES_ANSWERS:
            session.billing_address = session.delivery_address
            return self._enter_confirm(session)

        if answer in NO_ANSWERS:
            session.state = S.CHECKOUT_BILLING_ADDRESS
            return Transition(session, [TextIntent(t("ASK_BILLING_ADDRESS", session.lang))])

        return Transition(session, [TextIntent(t("INVALID_YES_NO", session.lang))])

    def _checkout_billing_address(self, session: Session, event: InboundEvent) -> Transition:
        value = self._required_text(session, event)
        if isinstance(value, Transition):
            return value
        session.billing_address = value
        return self._enter_confirm(session)

    def _checkout_confirm(self, session: Session, event: InboundEvent) -> Transition:
        if event.kind != EventKind.BUTTON:
            return self.fallback(session)
        lang = session.lang

        if event.option_id == CONFIRM:
            return Transition(session, [], Effect(EffectKind.PLACE_ORDER))

        if event.option_id == CANCEL:
            return Transition(session, [TextIntent(t("ORDER_CANCELLED", lang))], Effect(EffectKind.RESET))

        return Transition(session, [self._confirm_menu(lang, t("PICK_CONFIRM_OR_CANCEL", lang))])

    def _support_menu(self, session: Session, event: InboundEvent) -> Transition:
        if event.kind != EventKind.BUTTON:
            return self.fallback(session)
        lang = session.lang

        if event.option_id == FAQS:
            session.state = S.FAQ_LIST
            return Transition(session, [self._faq_menu(lang)])

        if event.option_id == SUBMIT_TICKET:
            session.ticket = Ticket()
            session.state = S.TICKET_NAME
            return Transition(session, [TextIntent(t("TICKET_ASK_NAME", lang))])

        if event.option_id == LIVE_AGENT:
            session.state = S.MAIN_MENU
            return Transition(session, [TextIntent(t("LIVE_AGENT", lang)), self.main_menu(lang)])

        return Transition(session, [self._support_menu_intent(lang, "UNKNOWN_SUPPORT")])

    def _faq_list(self, session: Session, event: InboundEvent) -> Transition:
        if event.kind != EventKind.LIST:
            return self.fallback(session)
        lang = session.lang
        text = faq_text(event.option_id, lang)
        if text is None:
            return Transition(session, [TextIntent(t("FAQ_UNKNOWN", lang)), self._faq_menu(lang)])

        session.state = S.MAIN_MENU
        return Transition(session, [TextIntent(text), self.main_menu(lang)])

    def _ticket_name(self, session: Session, event: InboundEvent) -> Transition:
        value = self._required_text(session, event)
        if isinstance(value, Transition):
            return value
        session.ticket = session.ticket or Ticket()
        session.ticket.name = value
        session.state = S.TICKET_ORDERNUM
        return Transition(session, [TextIntent(t("TICKET_ASK_ORDERNUM", session.lang))])

    def _ticket_ordernum(self, session: Session, event: InboundEvent) -> Transition:
        value = self._required_text(session, event)
        if isinstance(value, Transition):
            return value
        session.ticket = session.ticket or Ticket()
        session.ticket.order_number = None if value.lower() in NO_ORDER_NUMBER else value
        session.state = S.TICKET_TOPIC
        return Transition(session, [self._topic_menu(session.lang)])

    def _ticket_topic(self, session: Session, event: InboundEvent) -> Transition:
        if event.kind != EventKind.LIST:
            return self.fallback(session)
        lang = session.lang
        if event.option_id not in TICKET_TOPICS:
            return Transition(session, [TextIntent(t("TICKET_PICK_TOPIC", lang)), self._topic_menu(lang)])

        session.ticket = session.ticket or Ticket()
        session.ticket.topic = event.option_id
        session.state = S.TICKET_DESC
        return Transition(session, [TextIntent(t("TICKET_ASK_DESC", lang))])

    def _ticket_desc(self, session: Session, event: InboundEvent) -> Transition:
        value = self._required_text(session, event)
        if isinstance(value, Transition):
            return value
        session.ticket = session.ticket or Ticket()
        session.ticket.description = value
        return Transition(session, [], Effect(EffectKind.SUBMIT_TICKET))

    def _required_text(self, session: Session, event: InboundEvent):
        """Return the stripped text of ``event``, or a re-prompt Transition."""
        if event.kind != EventKind.TEXT:
            return self.fallback(session)
        value = (event.text or "").strip()
        if not value:
            return Transition(session, [TextIntent(t("EMPTY_INPUT", session.lang))])
        return value

    # ── Effect outcomes ─────────────────────────────────────

    def order_placed(self, session: Session, order_id: str) -> Transition:
        text = t("ORDER_PLACED", session.lang, order_id=order_id, total=format_price(session.cart_total()))
        return Transition(session, [TextIntent(text)], Effect(EffectKind.RESET))

    def order_failed(self, session: Session) -> Transition:
        session.state = S.CHECKOUT_CONFIRM
        lang = session.lang
        return Transition(session, [self._confirm_menu(lang, t("ORDER_FAILED", lang))])

    def status_result(self, session: Session, orders: List[OrderSummary]) -> Transition:
        lang = session.lang
        session.state = S.MAIN_MENU
        if not orders:
            text = t("NO_ORDERS", lang)
        else:
            lines = [t("ORDER_STATUS_HEADER", lang)]
            for order in orders[:MAX_STATUS_ORDERS]:
                lines.append(
                    t(
                        "ORDER_STATUS_LINE",
                        lang,
                        order_id=order.order_id,
                        status=order.status,
                        total=format_price(order.total),
                    )
                )
            text = "\n".join(lines)
        return Transition(session, [TextIntent(text), self.main_menu(lang)])

    def status_failed(self, session: Session) -> Transition:
        session.state = S.MAIN_MENU
        lang = session.lang
        return Transition(session, [TextIntent(t("STATUS_FAILED", lang)), self.main_menu(lang)])

    def ticket_submitted(self, session: Session, ticket_number: str) -> Transition:
        session.ticket = None
        session.state = S.MAIN_MENU
        lang = session.lang
        return Transition(
            session,
            [TextIntent(t("TICKET_SUBMITTED", lang, ticket_number=ticket_number)), self.main_menu(lang)],
        )

    def ticket_failed(self, session: Session) -> Transition:
        session.state = S.TICKET_DESC
        return Transition(session, [TextIntent(t("TICKET_FAILED", session.lang))])


def _normalize(text: Optional[str]) -> str:
    return (text or "").strip().lower()


def parse_quantity(text: Optional[str]) -> Optional[int]:
    """Positive integer or None. No upper bound."""
    value = (text or "").strip()
    if not value.isdecimal():
        return None
    quantity = int(value)
    return quantity if quantity > 0 else None
