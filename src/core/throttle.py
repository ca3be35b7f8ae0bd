"""Progress notification throttling (core domain)."""

from __future__ import annotations

from dataclasses import dataclass
import logging
import time
from typing import Callable, Optional

from core.config import ThrottleConfig

LOGGER = logging.getLogger(__name__)

Clock = Callable[[], float]


@dataclass(frozen=True)
class ThrottleDecision:
    """Outcome of one throttle evaluation.

    next_forced_in is the latest time (seconds) until a forced notification;
    it is only meaningful when notify is False and is meant for logs.
    """

    notify: bool
    elapsed: Optional[float]
    next_forced_in: Optional[float]


class NotificationThrottler:
    """Per-printer timer state bounding progress notification frequency."""

    def __init__(self, config: ThrottleConfig, clock: Clock = time.monotonic) -> None:
        if not config.is_well_formed:
            LOGGER.warning(
                "Throttle min_interval (%ss) >= max_interval (%ss); forced progress "
                "notifications will only follow the min interval",
                config.min_interval,
                config.max_interval,
            )
        self._config = config
        self._clock = clock
        self._last: dict[str, float] = {}

    def last_notified(self, printer_id: str) -> Optional[float]:
        return self._last.get(printer_id)

    def should_notify(
        self,
        printer_id: str,
        progress_changed: bool,
        now: Optional[float] = None,
    ) -> ThrottleDecision:
        """Decide whether a progress event for printer_id goes out at now."""

        now = self._clock() if now is None else now
        last = self._last.get(printer_id)
        if last is None:
            self._record(printer_id, now)
            return ThrottleDecision(notify=True, elapsed=None, next_forced_in=None)

        elapsed = now - last
        notify = elapsed > self._config.max_interval or (
            progress_changed and elapsed > self._config.min_interval
        )
        if notify:
            self._record(printer_id, now)
            return ThrottleDecision(notify=True, elapsed=elapsed, next_forced_in=None)
        return ThrottleDecision(
            notify=False,
            elapsed=elapsed,
            next_forced_in=self._config.max_interval - elapsed,
        )

    def mark(self, printer_id: str, now: Optional[float] = None) -> None:
        """Record a notification sent outside the throttle (job start)."""

        self._record(printer_id, self._clock() if now is None else now)

    def clear(self, printer_id: str) -> None:
        self._last.pop(printer_id, None)

    def _record(self, printer_id: str, now: float) -> None:
        # Timestamps never move backwards for a printer.
        last = self._last.get(printer_id)
        self._last[printer_id] = now if last is None else max(last, now)
