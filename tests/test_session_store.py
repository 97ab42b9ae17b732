# tests/test_session_store.py
"""Tests for the in-memory session store."""

import asyncio

from app.domain.models.session import ConversationState, Language
from app.infrastructure.cache.session_cache import InMemorySessionStore

WA_ID = "218910000001"


def test_get_creates_fresh_session(event_loop):
    store = InMemorySessionStore()

    session = event_loop.run_until_complete(store.get(WA_ID))

    assert session.user_id == WA_ID
    assert session.state == ConversationState.WELCOME
    assert session.is_first_time is True
    assert len(store) == 1


def test_save_then_get_returns_saved(event_loop):
    store = InMemorySessionStore()
    session = event_loop.run_until_complete(store.get(WA_ID))
    updated = session.model_copy(update={"state": ConversationState.MAIN_MENU, "language": Language.AR})

    event_loop.run_until_complete(store.save(updated))

    assert event_loop.run_until_complete(store.get(WA_ID)).state == ConversationState.MAIN_MENU


def test_reset_clears_everything_but_identity(event_loop):
    store = InMemorySessionStore()
    session = event_loop.run_until_complete(store.get(WA_ID))
    session.language = Language.EN
    session.customer_name = "Sara"
    session.state = ConversationState.CHECKOUT_CONFIRM

    fresh = event_loop.run_until_complete(store.reset(WA_ID))

    assert fresh.user_id == WA_ID
    assert fresh.state == ConversationState.WELCOME
    assert fresh.is_first_time is False
    assert fresh.language is None
    assert fresh.customer_name is None
    assert fresh.cart == []


def test_lock_is_per_user():
    store = InMemorySessionStore()

    assert store.lock("a") is store.lock("a")
    assert store.lock("a") is not store.lock("b")


def test_lock_serialises_same_user(event_loop):
    store = InMemorySessionStore()
    order = []

    async def worker(name):
        async with store.lock(WA_ID):
            order.append(f"{name}-in")
            await asyncio.sleep(0.01)
            order.append(f"{name}-out")

    async def main():
        await asyncio.gather(worker("one"), worker("two"))

    event_loop.run_until_complete(main())

    assert order == ["one-in", "one-out", "two-in", "two-out"]
