"""Two-generation printer snapshot store."""

from __future__ import annotations

from types import MappingProxyType
from typing import Iterable, Mapping, Optional

from core.models import PrinterSnapshot

Generation = dict[str, PrinterSnapshot]


class SnapshotStore:
    """Holds the current and previous fleet generations.

    Not reentrant: one begin_cycle at a time. Snapshots are immutable, so the
    previous generation is a shallow copy sharing values with current.
    """

    def __init__(self) -> None:
        self._current: Generation = {}
        self._previous: Generation = {}

    def begin_cycle(self, printers: Iterable[PrinterSnapshot]) -> None:
        """Archive current as previous and install the new poll results."""

        incoming = list(printers)
        self._previous = dict(self._current)
        for printer in incoming:
            self._current[printer.uuid] = printer

    def current_view(self) -> Mapping[str, PrinterSnapshot]:
        return MappingProxyType(self._current)

    def previous_view(self) -> Mapping[str, PrinterSnapshot]:
        return MappingProxyType(self._previous)

    def get(self, printer_id: str) -> Optional[PrinterSnapshot]:
        return self._current.get(printer_id)

    def previous_for(self, printer_id: str) -> Optional[PrinterSnapshot]:
        return self._previous.get(printer_id)

    def printer_ids(self) -> list[str]:
        return list(self._current)
