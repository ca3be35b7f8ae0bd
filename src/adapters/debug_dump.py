"""Debug snapshot dump adapter.

Writes ./<directory>/<printer uuid>/<epoch ms>.json for every meaningful
change, so payload fields can be inspected offline.
"""

from __future__ import annotations

from dataclasses import asdict, replace
import json
import logging
import os
import time
from typing import Callable, Optional

from core.models import PrinterSnapshot, ToolConfig

LOGGER = logging.getLogger(__name__)


def without_noisy_fields(snapshot: PrinterSnapshot) -> PrinterSnapshot:
    """Drop fields that change on every poll (heartbeat, live temperatures)."""

    return replace(snapshot, last_online=0, temp=None, tools=ToolConfig())


class DebugSnapshotWriter:
    """SnapshotSinkPort that writes changed snapshots as JSON files."""

    def __init__(self, directory: str, clock: Callable[[], float] = time.time) -> None:
        self._directory = directory
        self._clock = clock

    def record(self, previous: PrinterSnapshot, current: PrinterSnapshot) -> Optional[str]:
        """Write current if more than noisy fields changed; return the path."""

        path = os.path.join(self._directory, current.uuid)
        os.makedirs(path, exist_ok=True)

        if without_noisy_fields(current) == without_noisy_fields(previous):
            return None

        filename = os.path.join(path, f"{int(self._clock() * 1000)}.json")
        payload = current.raw
        if payload is None:
            payload = asdict(current)
            payload.pop("raw", None)
        with open(filename, "w", encoding="utf-8") as handle:
            json.dump(payload, handle, indent=2)
        LOGGER.debug("Wrote debug snapshot %s", filename)
        return filename
