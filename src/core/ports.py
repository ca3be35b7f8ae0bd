"""Ports (interfaces) used by the core engine.

Ports define the minimal contracts for the printer source, subscription
storage, and messaging adapters so that the core can be reused with
different backends.
"""

from __future__ import annotations

from typing import Optional, Protocol, Sequence

from core.models import PrinterSnapshot, Subscription


class PrinterSourcePort(Protocol):
    """Remote printer API operations required by the engine."""

    async def fetch_all(self) -> Sequence[PrinterSnapshot]:
        ...

    async def fetch_preview(self, preview_url: Optional[str]) -> Optional[bytes]:
        ...


class SubscriptionRegistryPort(Protocol):
    """Subscription storage operations required by the dispatcher."""

    def list_subscriptions(self) -> Sequence[Subscription]:
        ...

    def subscribe(self, chat_id: str, printer_id: str) -> None:
        ...

    def unsubscribe(self, chat_id: str, printer_id: str) -> None:
        ...


class MessengerPort(Protocol):
    """Message delivery operations required by the dispatcher."""

    async def send_text(self, chat_id: str, text: str, parse_mode: Optional[str] = None) -> None:
        ...

    async def send_photo(
        self,
        chat_id: str,
        photo: bytes,
        caption: str,
        parse_mode: Optional[str] = None,
    ) -> None:
        ...


class SnapshotSinkPort(Protocol):
    """Optional diagnostic sink called for every detected diff."""

    def record(self, previous: PrinterSnapshot, current: PrinterSnapshot) -> None:
        ...
