"""Closed set of diff events produced by the classifier."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union


@dataclass(frozen=True)
class ConnectivityChanged:
    printer_id: str
    printer_name: str
    new_state: str


@dataclass(frozen=True)
class JobStarted:
    """Leading edge of a job; never throttled."""

    printer_id: str
    printer_name: str
    display_name: str
    preview_url: Optional[str] = None


@dataclass(frozen=True)
class JobProgress:
    """A running job reported again; subject to throttling."""

    printer_id: str
    printer_name: str
    progress: float
    time_remaining: int
    progress_changed: bool


@dataclass(frozen=True)
class JobFinished:
    """Trailing edge of a job; never throttled, resets the throttle clock."""

    printer_id: str
    printer_name: str


Event = Union[ConnectivityChanged, JobStarted, JobProgress, JobFinished]
