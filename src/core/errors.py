"""Error taxonomy shared by the core and adapters."""

from __future__ import annotations


class PrintwatchError(Exception):
    """Base class for printwatch errors."""


class AuthenticationError(PrintwatchError):
    """The remote API credential is missing; fatal at startup."""


class FetchError(PrintwatchError):
    """A poll request or its payload decoding failed; aborts one cycle."""


class SendError(PrintwatchError):
    """Delivering a message to one recipient failed."""

    def __init__(self, chat_id: str, message: str) -> None:
        super().__init__(f"Send to {chat_id} failed: {message}")
        self.chat_id = chat_id
