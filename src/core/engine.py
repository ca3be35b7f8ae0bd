"""Poll cycle orchestration (core domain).

This module is integration-agnostic. It only relies on ports for the printer
source, subscriptions, and messaging. One cycle runs in strict order:
1) Fetch the full printer list
2) Archive current as previous and install the new generation
3) Diff every printer that has a previous snapshot
4) Throttle progress events
5) Dispatch surviving events to subscribers
A failed fetch leaves both generations untouched.
"""

from __future__ import annotations

import logging
from typing import Callable, Mapping, Optional

from core.diff import DiffEngine
from core.dispatcher import Dispatcher
from core.errors import FetchError
from core.events import Event, JobFinished, JobProgress, JobStarted
from core.models import PrinterSnapshot
from core.ports import PrinterSourcePort, SnapshotSinkPort
from core.snapshots import SnapshotStore
from core.throttle import NotificationThrottler

LOGGER = logging.getLogger(__name__)

DurationFormatter = Callable[[float], str]


def _seconds(value: float) -> str:
    return f"{int(value)}s"


class PollEngine:
    """Engine context owning both generations and the throttle state.

    Separate instances never share state, so tests can run several side by side.
    """

    def __init__(
        self,
        source: PrinterSourcePort,
        dispatcher: Dispatcher,
        throttler: NotificationThrottler,
        store: Optional[SnapshotStore] = None,
        snapshot_sink: Optional[SnapshotSinkPort] = None,
        describe_duration: DurationFormatter = _seconds,
    ) -> None:
        self._source = source
        self._dispatcher = dispatcher
        self._throttler = throttler
        self._store = store or SnapshotStore()
        self._differ = DiffEngine(self._store)
        self._snapshot_sink = snapshot_sink
        self._describe_duration = describe_duration

    async def run_cycle(self) -> int:
        """Run one poll cycle and return the number of dispatched events."""

        try:
            printers = await self._source.fetch_all()
        except FetchError:
            LOGGER.exception("Printer fetch failed, skipping this cycle")
            return 0

        self._store.begin_cycle(printers)

        dispatched = 0
        for printer_id in self._store.printer_ids():
            previous = self._store.previous_for(printer_id)
            if previous is None:
                continue
            events = self._differ.diff(printer_id)
            if self._snapshot_sink is not None:
                current = self._store.get(printer_id)
                if current is not None and current != previous:
                    self._record_snapshot(previous, current)
            for event in events:
                if not self._admit(event):
                    continue
                await self._dispatcher.notify(printer_id, event)
                dispatched += 1
        return dispatched

    def _admit(self, event: Event) -> bool:
        if isinstance(event, JobStarted):
            self._throttler.mark(event.printer_id)
            return True
        if isinstance(event, JobFinished):
            LOGGER.info("Job is done for printer %s", event.printer_name)
            self._throttler.clear(event.printer_id)
            return True
        if isinstance(event, JobProgress):
            decision = self._throttler.should_notify(event.printer_id, event.progress_changed)
            if not decision.notify:
                LOGGER.info(
                    "Not notifying for printer %s, will notify again in (latest time possible) %s",
                    event.printer_name,
                    self._describe_duration(max(decision.next_forced_in or 0.0, 0.0)),
                )
            return decision.notify
        return True

    def _record_snapshot(self, previous: PrinterSnapshot, current: PrinterSnapshot) -> None:
        try:
            self._snapshot_sink.record(previous, current)
        except (OSError, TypeError, ValueError):
            LOGGER.exception("Failed to write debug snapshot for %s", current.uuid)

    def get_printer_state(self, printer_id: str) -> Optional[PrinterSnapshot]:
        return self._store.get(printer_id)

    def get_printer_states(self) -> Mapping[str, PrinterSnapshot]:
        return self._store.current_view()
