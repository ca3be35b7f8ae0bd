"""Fan-out of diff events to subscribed chats (core domain)."""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, List, Optional

from core.errors import FetchError, SendError
from core.events import Event, JobStarted
from core.ports import MessengerPort, PrinterSourcePort, SubscriptionRegistryPort

LOGGER = logging.getLogger(__name__)

EventFormatter = Callable[[Event], str]


class Dispatcher:
    """Resolves recipients for a printer and sends each one a message.

    Every recipient is delivered by its own task; a failure is logged for
    that recipient only and never blocks the others.
    """

    def __init__(
        self,
        registry: SubscriptionRegistryPort,
        messenger: MessengerPort,
        source: PrinterSourcePort,
        formatter: EventFormatter,
        parse_mode: Optional[str] = "HTML",
    ) -> None:
        self._registry = registry
        self._messenger = messenger
        self._source = source
        self._formatter = formatter
        self._parse_mode = parse_mode

    def recipients_for(self, printer_id: str) -> List[str]:
        return [
            subscription.chat_id
            for subscription in self._registry.list_subscriptions()
            if subscription.printer_id == printer_id
        ]

    async def notify(self, printer_id: str, event: Event) -> int:
        """Deliver event to every chat subscribed to printer_id.

        Returns the number of successful deliveries.
        """

        recipients = self.recipients_for(printer_id)
        if not recipients:
            return 0

        text = self._formatter(event)
        photo = None
        if isinstance(event, JobStarted):
            photo = await self._load_preview(event)

        tasks = [
            asyncio.create_task(self._deliver(chat_id, text, photo))
            for chat_id in recipients
        ]
        results = await asyncio.gather(*tasks)
        return sum(1 for delivered in results if delivered)

    async def _load_preview(self, event: JobStarted) -> Optional[bytes]:
        if not event.preview_url:
            return None
        try:
            return await self._source.fetch_preview(event.preview_url)
        except FetchError:
            LOGGER.warning("Preview unavailable for %s, sending text only", event.printer_name, exc_info=True)
            return None
        except Exception:
            LOGGER.exception("Unexpected error loading preview for %s, sending text only", event.printer_name)
            return None

    async def _deliver(self, chat_id: str, text: str, photo: Optional[bytes]) -> bool:
        try:
            if photo:
                await self._messenger.send_photo(chat_id, photo, caption=text, parse_mode=self._parse_mode)
            else:
                await self._messenger.send_text(chat_id, text, parse_mode=self._parse_mode)
        except SendError as exc:
            LOGGER.error("%s", exc)
            return False
        except Exception:
            LOGGER.exception("Unexpected error while sending to %s", chat_id)
            return False
        return True
