from contextlib import asynccontextmanager

from fastapi import FastAPI

from app.api.routes import api_router
from app.core.config import settings
from app.core.db import engine
from app.core.logging_config import setup_logging
from app.domain.services.conversation_service import ConversationService
from app.domain.services.invoice_pdf import PdfInvoiceGenerator
from app.infrastructure.cache.session_cache import InMemorySessionStore
from app.infrastructure.db.base import Base
from app.infrastructure.external.whatsapp_client import WhatsAppClient

setup_logging()


@asynccontextmanager
async def lifespan(app: FastAPI):
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    transport = WhatsAppClient()
    app.state.conversation_service = ConversationService(
        sessions=InMemorySessionStore(),
        transport=transport,
        invoices=PdfInvoiceGenerator(),
    )
    yield
    await app.state.conversation_service.drain()
    await transport.aclose()
    await engine.dispose()


app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)

app.include_router(api_router)
