"""Shared test fixtures for the storefront order bot test suite."""

import asyncio
from decimal import Decimal

import pytest

from app.domain.models.session import (
    CartLine,
    ConversationState,
    Gender,
    Language,
    Session,
)
from app.domain.services.conversation_engine import ConversationEngine

WA_ID = "218910000001"


@pytest.fixture(scope="session")
def event_loop():
    """Use a single event loop for the entire test session."""
    loop = asyncio.new_event_loop()
    yield loop
    loop.close()


@pytest.fixture
def engine() -> ConversationEngine:
    return ConversationEngine()


@pytest.fixture
def session() -> Session:
    """A brand new user, nothing chosen yet."""
    return Session(user_id=WA_ID)


@pytest.fixture
def english_session() -> Session:
    return Session(
        user_id=WA_ID,
        is_first_time=False,
        language=Language.EN,
        state=ConversationState.MAIN_MENU,
    )


@pytest.fixture
def checkout_session() -> Session:
    """A session sitting on the confirm screen with 2 x XYZ Cologne."""
    return Session(
        user_id=WA_ID,
        is_first_time=False,
        language=Language.EN,
        state=ConversationState.CHECKOUT_CONFIRM,
        gender=Gender.MEN,
        category="perfumes",
        cart=[CartLine(product_id=1, name="XYZ Cologne", unit_price=Decimal("50"), quantity=2)],
        customer_name="Sara Ali",
        delivery_address="12 Omar Mukhtar St, Tripoli",
        delivery_location="https://www.google.com/maps?q=32.88,13.19",
        billing_address="12 Omar Mukhtar St, Tripoli",
    )

