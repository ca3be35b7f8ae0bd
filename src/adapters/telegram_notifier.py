"""Telegram client notification adapter.

Sends messages through a Telethon client logged in with the bot token.
"""

from __future__ import annotations

import io
from typing import Optional, Union

from telethon import TelegramClient, errors

from core.errors import SendError


def _peer(chat_id: str) -> Union[int, str]:
    # Telethon resolves numeric chat ids only when passed as int.
    if chat_id.lstrip("-").isdigit():
        return int(chat_id)
    return chat_id


class TelegramClientNotifier:
    """Notifier adapter that sends messages with a Telethon client."""

    def __init__(self, client: TelegramClient) -> None:
        self._client = client

    async def send_text(self, chat_id: str, text: str, parse_mode: Optional[str] = None) -> None:
        try:
            await self._client.send_message(_peer(chat_id), text, parse_mode=parse_mode)
        except (errors.RPCError, ValueError) as exc:
            raise SendError(chat_id, str(exc)) from exc

    async def send_photo(
        self,
        chat_id: str,
        photo: bytes,
        caption: str,
        parse_mode: Optional[str] = None,
    ) -> None:
        try:
            # Telethon picks the media type from the buffer name.
            upload = io.BytesIO(photo)
            upload.name = "preview.png"
            await self._client.send_file(_peer(chat_id), upload, caption=caption, parse_mode=parse_mode)
        except (errors.RPCError, ValueError) as exc:
            raise SendError(chat_id, str(exc)) from exc
