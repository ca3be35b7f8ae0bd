"""Telegram Bot API notification adapter.

Uses the Bot API over aiohttp so notifications need only a bot token.
"""

from __future__ import annotations

from typing import Any, Optional

import aiohttp

from core.errors import SendError


class TelegramBotNotifier:
    """Notifier adapter that sends messages via the Telegram Bot API."""

    def __init__(self, session: aiohttp.ClientSession, bot_token: str) -> None:
        if not bot_token:
            raise RuntimeError("TELEGRAM_BOT_TOKEN is required for bot notifications")
        self._session = session
        self._bot_token = bot_token

    def _endpoint(self, method: str) -> str:
        # The Bot API endpoint is deterministic and derived from the token.
        return f"https://api.telegram.org/bot{self._bot_token}/{method}"

    async def _call(self, chat_id: str, method: str, **kwargs: Any) -> None:
        try:
            async with self._session.post(self._endpoint(method), **kwargs) as response:
                if response.status >= 400:
                    body = await response.text()
                    raise SendError(chat_id, f"Bot API error {response.status}: {body}")
        except aiohttp.ClientError as exc:
            raise SendError(chat_id, str(exc)) from exc

    async def send_text(self, chat_id: str, text: str, parse_mode: Optional[str] = None) -> None:
        payload: dict[str, Any] = {
            "chat_id": chat_id,
            "text": text,
            "disable_web_page_preview": True,
        }
        if parse_mode:
            payload["parse_mode"] = parse_mode
        await self._call(chat_id, "sendMessage", json=payload)

    async def send_photo(
        self,
        chat_id: str,
        photo: bytes,
        caption: str,
        parse_mode: Optional[str] = None,
    ) -> None:
        form = aiohttp.FormData()
        form.add_field("chat_id", str(chat_id))
        form.add_field("caption", caption)
        if parse_mode:
            form.add_field("parse_mode", parse_mode)
        form.add_field("photo", photo, filename="preview.png", content_type="image/png")
        await self._call(chat_id, "sendPhoto", data=form)
