# app/infrastructure/external/whatsapp_client.py
"""
Outbound WhatsApp Cloud API transport.

POST /{PHONE_NUMBER_ID}/messages   text / interactive button / interactive list / document
POST /{PHONE_NUMBER_ID}/media      multipart upload, returns a media id
"""

import asyncio
import logging
from pathlib import Path
from typing import List, Optional

import httpx

from app.core.config import settings
from app.domain.models.conversation import Option

logger = logging.getLogger("whatsapp_client")

GRAPH_BASE = "https://graph.facebook.com"

# WhatsApp interactive limits
MAX_BUTTONS = 3
MAX_LIST_ROWS = 10
BUTTON_TITLE_LIMIT = 20
ROW_TITLE_LIMIT = 24
HEADER_LIMIT = 60
FOOTER_LIMIT = 60
LIST_BUTTON_LIMIT = 20
SECTION_TITLE = "Categories"


def truncate(text: str, limit: int) -> str:
    text = text or ""
    if len(text) <= limit:
        return text
    return text[: limit - 1] + "…"


class WhatsAppClient:
    def __init__(
        self,
        access_token: Optional[str] = None,
        phone_number_id: Optional[str] = None,
        api_version: Optional[str] = None,
        timeout: Optional[float] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.access_token = access_token or settings.WHATSAPP_ACCESS_TOKEN
        self.phone_number_id = phone_number_id or settings.WHATSAPP_PHONE_NUMBER_ID
        self.api_version = api_version or settings.WHATSAPP_API_VERSION
        self._client = client or httpx.AsyncClient(
            timeout=timeout or settings.WHATSAPP_TIMEOUT_SECONDS
        )

    @property
    def base_url(self) -> str:
        if not self.phone_number_id:
            raise RuntimeError("WHATSAPP_PHONE_NUMBER_ID is not set")
        return f"{GRAPH_BASE}/{self.api_version}/{self.phone_number_id}"

    def _auth_headers(self) -> dict:
        if not self.access_token:
            raise RuntimeError("WHATSAPP_ACCESS_TOKEN is not set")
        return {"Authorization": f"Bearer {self.access_token}"}

    async def _post_message(self, to: str, payload: dict) -> dict:
        body = {"messaging_product": "whatsapp", "recipient_type": "individual", "to": to, **payload}
        r = await self._client.post(f"{self.base_url}/messages", headers=self._auth_headers(), json=body)
        if r.status_code >= 400:
            logger.error("WhatsApp send failed to=%s status=%s body=%s", to, r.status_code, r.text[:500])
        r.raise_for_status()
        return r.json()

    async def send_text(self, to: str, text: str) -> dict:
        return await self._post_message(to, {"type": "text", "text": {"preview_url": True, "body": text}})

    async def send_buttons(self, to: str, text: str, options: List[Option]) -> dict:
        if len(options) > MAX_BUTTONS:
            logger.warning("Dropping %d buttons over the limit for %s", len(options) - MAX_BUTTONS, to)
        buttons = [
            {"type": "reply", "reply": {"id": o.id, "title": truncate(o.label, BUTTON_TITLE_LIMIT)}}
            for o in options[:MAX_BUTTONS]
        ]
        payload = {
            "type": "interactive",
            "interactive": {
                "type": "button",
                "body": {"text": text},
                "action": {"buttons": buttons},
            },
        }
        return await self._post_message(to, payload)

    async def send_list(
        self,
        to: str,
        header: str,
        body: str,
        footer: str,
        button_label: str,
        rows: List[Option],
    ) -> dict:
        if len(rows) > MAX_LIST_ROWS:
            logger.warning("Dropping %d list rows over the limit for %s", len(rows) - MAX_LIST_ROWS, to)
        payload = {
            "type": "interactive",
            "interactive": {
                "type": "list",
                "header": {"type": "text", "text": truncate(header, HEADER_LIMIT)},
                "body": {"text": body},
                "footer": {"text": truncate(footer, FOOTER_LIMIT)},
                "action": {
                    "button": truncate(button_label, LIST_BUTTON_LIMIT),
                    "sections": [
                        {
                            "title": SECTION_TITLE,
                            "rows": [
                                {"id": r.id, "title": truncate(r.label, ROW_TITLE_LIMIT)}
                                for r in rows[:MAX_LIST_ROWS]
                            ],
                        }
                    ],
                },
            },
        }
        return await self._post_message(to, payload)

    async def upload_media(
        self,
        file_bytes: bytes,
        mime_type: str = "application/pdf",
        filename: str = "document.pdf",
    ) -> str:
        """Upload a file and return its WhatsApp media id."""
        files = {"file": (filename, file_bytes, mime_type)}
        data = {"messaging_product": "whatsapp", "type": mime_type}
        r = await self._client.post(
            f"{self.base_url}/media", headers=self._auth_headers(), data=data, files=files
        )
        r.raise_for_status()
        media_id = r.json().get("id")
        if not media_id:
            raise RuntimeError(f"WhatsApp media upload failed: {r.text[:500]}")
        return media_id

    async def send_document(self, to: str, path: Path, filename: str, caption: str = "") -> dict:
        file_bytes = await asyncio.to_thread(Path(path).read_bytes)
        media_id = await self.upload_media(file_bytes, filename=filename)
        document = {"id": media_id, "filename": filename}
        if caption:
            document["caption"] = caption
        return await self._post_message(to, {"type": "document", "document": document})

    async def aclose(self) -> None:
        await self._client.aclose()
