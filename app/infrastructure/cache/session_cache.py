import asyncio
import logging
from typing import Dict

from app.domain.models.session import Session

logger = logging.getLogger("session_cache")


class InMemorySessionStore:
    """Process-local session map keyed by WhatsApp user id.

    Sessions are lost on restart. One ``asyncio.Lock`` per user serialises
    that user's events; different users never share a lock or a session.
    """

    def __init__(self) -> None:
        self._sessions: Dict[str, Session] = {}
        self._locks: Dict[str, asyncio.Lock] = {}

    def lock(self, user_id: str) -> asyncio.Lock:
        # No await between lookup and insert, so this is atomic on the loop.
        lock = self._locks.get(user_id)
        if lock is None:
            lock = self._locks[user_id] = asyncio.Lock()
        return lock

    async def get(self, user_id: str) -> Session:
        session = self._sessions.get(user_id)
        if session is None:
            session = self._sessions[user_id] = Session(user_id=user_id)
            logger.info("New session for %s", user_id)
        return session

    async def save(self, session: Session) -> None:
        self._sessions[session.user_id] = session

    async def reset(self, user_id: str) -> Session:
        session = Session(user_id=user_id, is_first_time=False)
        self._sessions[user_id] = session
        return session

    def __len__(self) -> int:
        return len(self._sessions)
