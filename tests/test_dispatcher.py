from __future__ import annotations

import asyncio
from typing import Optional

from core.dispatcher import Dispatcher
from core.errors import FetchError, SendError
from core.events import JobProgress, JobStarted
from core.models import Subscription


class FakeRegistry:
    def __init__(self, subscriptions: list[Subscription]) -> None:
        self.subscriptions = subscriptions

    def list_subscriptions(self) -> list[Subscription]:
        return list(self.subscriptions)

    def subscribe(self, chat_id: str, printer_id: str) -> None:
        self.subscriptions.append(Subscription(chat_id, printer_id))

    def unsubscribe(self, chat_id: str, printer_id: str) -> None:
        self.subscriptions.remove(Subscription(chat_id, printer_id))


class FakeMessenger:
    def __init__(self, failing: Optional[set[str]] = None) -> None:
        self.failing = failing or set()
        self.texts: list[tuple[str, str]] = []
        self.photos: list[tuple[str, bytes, str]] = []

    async def send_text(self, chat_id: str, text: str, parse_mode: Optional[str] = None) -> None:
        if chat_id in self.failing:
            raise SendError(chat_id, "blocked by user")
        self.texts.append((chat_id, text))

    async def send_photo(self, chat_id: str, photo: bytes, caption: str, parse_mode: Optional[str] = None) -> None:
        if chat_id in self.failing:
            raise SendError(chat_id, "blocked by user")
        self.photos.append((chat_id, photo, caption))


class FakeSource:
    def __init__(self, preview: Optional[bytes] = None, fail: bool = False, error: Optional[Exception] = None) -> None:
        self.preview = preview
        self.fail = fail
        self.error = error

    async def fetch_all(self):
        return []

    async def fetch_preview(self, preview_url: Optional[str]) -> Optional[bytes]:
        if self.fail:
            raise FetchError("preview down")
        if self.error is not None:
            raise self.error
        return self.preview


def _progress(printer_id: str = "p1") -> JobProgress:
    return JobProgress(printer_id=printer_id, printer_name="MK4", progress=40, time_remaining=-1, progress_changed=True)


def _started() -> JobStarted:
    return JobStarted(printer_id="p1", printer_name="MK4", display_name="benchy", preview_url="/preview/1")


def _dispatcher(registry, messenger, source=None) -> Dispatcher:
    return Dispatcher(
        registry=registry,
        messenger=messenger,
        source=source or FakeSource(),
        formatter=lambda event: f"event:{type(event).__name__}",
    )


def test_sends_only_to_subscribers_of_printer() -> None:
    registry = FakeRegistry([Subscription("1", "p1"), Subscription("2", "p2"), Subscription("3", "p1")])
    messenger = FakeMessenger()
    delivered = asyncio.run(_dispatcher(registry, messenger).notify("p1", _progress()))
    assert delivered == 2
    assert sorted(chat for chat, _ in messenger.texts) == ["1", "3"]


def test_failed_recipient_does_not_block_others() -> None:
    registry = FakeRegistry([Subscription("1", "p1"), Subscription("2", "p1"), Subscription("3", "p1")])
    messenger = FakeMessenger(failing={"2"})
    delivered = asyncio.run(_dispatcher(registry, messenger).notify("p1", _progress()))
    assert delivered == 2
    assert sorted(chat for chat, _ in messenger.texts) == ["1", "3"]


def test_job_started_sends_preview_photo() -> None:
    registry = FakeRegistry([Subscription("1", "p1")])
    messenger = FakeMessenger()
    asyncio.run(_dispatcher(registry, messenger, FakeSource(preview=b"png")).notify("p1", _started()))
    assert messenger.photos == [("1", b"png", "event:JobStarted")]
    assert messenger.texts == []


def test_job_started_falls_back_to_text_when_preview_fails() -> None:
    registry = FakeRegistry([Subscription("1", "p1")])
    messenger = FakeMessenger()
    asyncio.run(_dispatcher(registry, messenger, FakeSource(fail=True)).notify("p1", _started()))
    assert messenger.photos == []
    assert messenger.texts == [("1", "event:JobStarted")]


def test_job_started_without_preview_sends_text() -> None:
    registry = FakeRegistry([Subscription("1", "p1")])
    messenger = FakeMessenger()
    asyncio.run(_dispatcher(registry, messenger, FakeSource(preview=None)).notify("p1", _started()))
    assert messenger.texts == [("1", "event:JobStarted")]


def test_no_subscribers_sends_nothing() -> None:
    messenger = FakeMessenger()
    delivered = asyncio.run(_dispatcher(FakeRegistry([]), messenger).notify("p1", _progress()))
    assert delivered == 0
    assert messenger.texts == []


def test_job_started_falls_back_to_text_on_unexpected_preview_error() -> None:
    registry = FakeRegistry([Subscription("1", "p1"), Subscription("2", "p1")])
    messenger = FakeMessenger()
    source = FakeSource(error=asyncio.TimeoutError())
    delivered = asyncio.run(_dispatcher(registry, messenger, source).notify("p1", _started()))
    assert delivered == 2
    assert messenger.photos == []
    assert sorted(messenger.texts) == [("1", "event:JobStarted"), ("2", "event:JobStarted")]
