"""Shared notification formatting helpers.

Keeping formatting here prevents drift between adapters and keeps messages
consistent regardless of delivery channel. Messages are HTML for Telegram's
parse_mode="HTML".
"""

from __future__ import annotations

from datetime import datetime, timedelta
import html
from typing import Optional

from core.events import (
    ConnectivityChanged,
    Event,
    JobFinished,
    JobProgress,
    JobStarted,
)
from core.models import UNKNOWN_TIME_REMAINING


def humanize_duration(seconds: float) -> str:
    """Render a duration the way people say it ("an hour", "3 days")."""

    seconds = abs(seconds)
    minutes = seconds / 60
    hours = minutes / 60
    days = hours / 24

    if seconds < 45:
        return "a few seconds"
    if seconds < 90:
        return "a minute"
    if minutes < 45:
        return f"{round(minutes)} minutes"
    if minutes < 90:
        return "an hour"
    if hours < 22:
        return f"{round(hours)} hours"
    if hours < 36:
        return "a day"
    if days < 26:
        return f"{round(days)} days"
    if days < 45:
        return "a month"
    if days < 320:
        return f"{round(days / 30)} months"
    if days < 548:
        return "a year"
    return f"{round(days / 365)} years"


def format_calendar(moment: datetime, now: datetime) -> str:
    """Render a point in time relative to now ("today at 14:05")."""

    clock = moment.strftime("%H:%M")
    day_delta = (moment.date() - now.date()).days
    if day_delta == 0:
        return f"today at {clock}"
    if day_delta == 1:
        return f"tomorrow at {clock}"
    if day_delta == -1:
        return f"yesterday at {clock}"
    if 1 < day_delta < 7:
        return f"{moment.strftime('%A')} at {clock}"
    if -7 < day_delta < -1:
        return f"last {moment.strftime('%A')} at {clock}"
    return f"{moment.strftime('%d.%m.%Y')} at {clock}"


def format_time_remaining(time_remaining: int, now: Optional[datetime] = None) -> str:
    """Return the " (X remaining, done at)" clause, or "" when unknown."""

    if time_remaining == UNKNOWN_TIME_REMAINING or time_remaining < 0:
        return ""
    now = now or datetime.now().astimezone()
    done_at = now + timedelta(seconds=time_remaining)
    return f" ({humanize_duration(time_remaining)} remaining, {format_calendar(done_at, now)})"


def _format_progress(progress: float) -> str:
    if float(progress).is_integer():
        return str(int(progress))
    return f"{progress:g}"


def format_event(event: Event, now: Optional[datetime] = None) -> str:
    """Return the HTML notification text for a diff event."""

    name = html.escape(event.printer_name)

    if isinstance(event, ConnectivityChanged):
        return f"Printer {name} state changed to {html.escape(event.new_state)}"
    if isinstance(event, JobStarted):
        job_name = html.escape(event.display_name)
        return f"Print job \"{job_name}\" on {name} has started"
    if isinstance(event, JobProgress):
        remaining = html.escape(format_time_remaining(event.time_remaining, now))
        return f"Print job on {name} is now at {_format_progress(event.progress)}%{remaining}"
    if isinstance(event, JobFinished):
        return f"Print job on {name} is done!"
    raise ValueError(f"Unsupported event: {event!r}")
