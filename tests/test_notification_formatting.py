from __future__ import annotations

from datetime import datetime

import pytest

from adapters.notification_formatting import (
    format_calendar,
    format_event,
    format_time_remaining,
    humanize_duration,
)
from core.events import ConnectivityChanged, JobFinished, JobProgress, JobStarted

NOW = datetime(2024, 3, 4, 10, 0)


def _progress(time_remaining: int, progress: float = 42) -> JobProgress:
    return JobProgress(
        printer_id="p1",
        printer_name="MK4 <lab>",
        progress=progress,
        time_remaining=time_remaining,
        progress_changed=True,
    )


def test_unknown_time_remaining_has_no_clause() -> None:
    text = format_event(_progress(-1), now=NOW)
    assert text == "Print job on MK4 &lt;lab&gt; is now at 42%"
    assert "remaining" not in text


def test_known_time_remaining_clause() -> None:
    text = format_event(_progress(2 * 3600), now=NOW)
    assert text.endswith("(2 hours remaining, today at 12:00)")


def test_fractional_progress() -> None:
    assert "at 42.5%" in format_event(_progress(-1, progress=42.5), now=NOW)


def test_other_events() -> None:
    assert format_event(ConnectivityChanged("p1", "MK4", "OFFLINE")) == "Printer MK4 state changed to OFFLINE"
    assert format_event(JobStarted("p1", "MK4", "benchy & co")) == 'Print job "benchy &amp; co" on MK4 has started'
    assert format_event(JobFinished("p1", "MK4")) == "Print job on MK4 is done!"


def test_unknown_event_type_is_rejected() -> None:
    with pytest.raises(ValueError):
        format_event(object())  # type: ignore[arg-type]


@pytest.mark.parametrize(
    "seconds, expected",
    [
        (10, "a few seconds"),
        (60, "a minute"),
        (25 * 60, "25 minutes"),
        (3600, "an hour"),
        (5 * 3600, "5 hours"),
        (30 * 3600, "a day"),
        (3 * 86400, "3 days"),
    ],
)
def test_humanize_duration(seconds: float, expected: str) -> None:
    assert humanize_duration(seconds) == expected


def test_format_calendar() -> None:
    assert format_calendar(datetime(2024, 3, 5, 8, 30), NOW) == "tomorrow at 08:30"
    assert format_calendar(datetime(2024, 3, 7, 8, 30), NOW) == "Thursday at 08:30"
    assert format_calendar(datetime(2024, 4, 1, 8, 30), NOW) == "01.04.2024 at 08:30"


def test_format_time_remaining_negative_sentinel() -> None:
    assert format_time_remaining(-1, now=NOW) == ""
