"""Snapshot diffing and event classification (core domain)."""

from __future__ import annotations

from typing import List, Optional

from core.events import (
    ConnectivityChanged,
    Event,
    JobFinished,
    JobProgress,
    JobStarted,
)
from core.models import STOPPED, JobSnapshot, PrinterSnapshot
from core.snapshots import SnapshotStore


def job_is_active(job: Optional[JobSnapshot], printer_state: str) -> bool:
    """A job is active until it reaches 100% or the printer stops.

    A missing job counts as active on a printer that is not stopped.
    """

    if printer_state == STOPPED:
        return False
    return job is None or job.progress != 100


def classify(previous: PrinterSnapshot, current: PrinterSnapshot) -> List[Event]:
    """Return the events describing the change from previous to current.

    Classification rules:
    - Structurally equal snapshots produce nothing.
    - A connect_state change produces ConnectivityChanged.
    - When current carries a job, at most one of JobStarted (inactive to
      active), JobProgress (still active) or JobFinished (active to inactive).
    """

    if current == previous:
        return []

    events: List[Event] = []

    if current.connect_state != previous.connect_state:
        events.append(
            ConnectivityChanged(
                printer_id=current.uuid,
                printer_name=current.name,
                new_state=current.connect_state,
            )
        )

    job = current.job_info
    if job is None:
        return events

    previous_job = previous.job_info
    was_active = job_is_active(previous_job, previous.printer_state)
    is_active = job_is_active(job, current.printer_state)

    if is_active and not was_active:
        events.append(
            JobStarted(
                printer_id=current.uuid,
                printer_name=current.name,
                display_name=job.display_name,
                preview_url=job.preview_url,
            )
        )
    elif is_active:
        previous_progress = previous_job.progress if previous_job else None
        events.append(
            JobProgress(
                printer_id=current.uuid,
                printer_name=current.name,
                progress=job.progress,
                time_remaining=job.time_remaining,
                progress_changed=job.progress != previous_progress,
            )
        )
    elif was_active:
        events.append(JobFinished(printer_id=current.uuid, printer_name=current.name))

    return events


class DiffEngine:
    """Diffs printers of a SnapshotStore against their previous generation."""

    def __init__(self, store: SnapshotStore) -> None:
        self._store = store

    def diff(self, printer_id: str) -> List[Event]:
        current = self._store.get(printer_id)
        previous = self._store.previous_for(printer_id)
        # First sighting: nothing to compare against yet.
        if current is None or previous is None:
            return []
        return classify(previous, current)
