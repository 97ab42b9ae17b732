# app/domain/models/session.py
from decimal import Decimal
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class ConversationState(str, Enum):
    WELCOME = "WELCOME"
    MAIN_MENU = "MAIN_MENU"
    # Ordering
    SELECT_GENDER = "SELECT_GENDER"
    SELECT_CATEGORY = "SELECT_CATEGORY"
    SHOW_PRODUCTS = "SHOW_PRODUCTS"
    ASK_QUANTITY = "ASK_QUANTITY"
    CART_DECISION = "CART_DECISION"
    # Checkout
    CHECKOUT_NAME = "CHECKOUT_NAME"
    CHECKOUT_ADDRESS = "CHECKOUT_ADDRESS"
    CHECKOUT_DELIVERY_LOCATION = "CHECKOUT_DELIVERY_LOCATION"
    CHECKOUT_BILLING_PROMPT = "CHECKOUT_BILLING_PROMPT"
    CHECKOUT_BILLING_ADDRESS = "CHECKOUT_BILLING_ADDRESS"
    CHECKOUT_CONFIRM = "CHECKOUT_CONFIRM"
    # Order status
    CHECK_ORDER_STATUS = "CHECK_ORDER_STATUS"
    # Support
    SUPPORT_MENU = "SUPPORT_MENU"
    FAQ_LIST = "FAQ_LIST"
    TICKET_NAME = "TICKET_NAME"
    TICKET_ORDERNUM = "TICKET_ORDERNUM"
    TICKET_TOPIC = "TICKET_TOPIC"
    TICKET_DESC = "TICKET_DESC"
    LIVE_AGENT = "LIVE_AGENT"


TICKET_STATES = frozenset({
    ConversationState.TICKET_NAME,
    ConversationState.TICKET_ORDERNUM,
    ConversationState.TICKET_TOPIC,
    ConversationState.TICKET_DESC,
})


class Language(str, Enum):
    EN = "en"
    AR = "ar"


class Gender(str, Enum):
    MEN = "men"
    WOMEN = "women"


class Product(BaseModel):
    id: int
    name: str
    price: Decimal


class CartLine(BaseModel):
    product_id: int
    name: str
    unit_price: Decimal
    quantity: int

    @property
    def subtotal(self) -> Decimal:
        return self.unit_price * self.quantity


class Ticket(BaseModel):
    name: Optional[str] = None
    order_number: Optional[str] = None
    topic: Optional[str] = None
    description: Optional[str] = None


class Session(BaseModel):
    """Per-user conversational state. Lives in memory for the process lifetime."""

    user_id: str
    is_first_time: bool = True
    language: Optional[Language] = None
    state: ConversationState = ConversationState.WELCOME

    # Ordering
    gender: Optional[Gender] = None
    category: Optional[str] = None
    cart: List[CartLine] = Field(default_factory=list)
    current_product: Optional[Product] = None

    # Checkout
    customer_name: Optional[str] = None
    delivery_address: Optional[str] = None
    delivery_location: Optional[str] = None
    billing_address: Optional[str] = None

    # Support
    ticket: Optional[Ticket] = None

    @property
    def lang(self) -> str:
        return (self.language or Language.EN).value

    def cart_total(self) -> Decimal:
        return sum((line.subtotal for line in self.cart), Decimal("0"))
