from __future__ import annotations

from core.config import ThrottleConfig
from core.throttle import NotificationThrottler

CONFIG = ThrottleConfig(min_interval=300, max_interval=1800)


class FakeClock:
    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


def test_first_evaluation_always_notifies() -> None:
    throttler = NotificationThrottler(CONFIG, clock=FakeClock())
    decision = throttler.should_notify("a", progress_changed=True)
    assert decision.notify
    assert throttler.last_notified("a") == 1000.0


def test_progress_change_inside_min_interval_is_throttled() -> None:
    clock = FakeClock()
    throttler = NotificationThrottler(CONFIG, clock=clock)
    throttler.should_notify("a", progress_changed=True)

    clock.now += CONFIG.min_interval - 1
    decision = throttler.should_notify("a", progress_changed=True)

    assert not decision.notify
    assert decision.next_forced_in == CONFIG.max_interval - (CONFIG.min_interval - 1)
    assert throttler.last_notified("a") == 1000.0


def test_progress_change_after_min_interval_notifies() -> None:
    clock = FakeClock()
    throttler = NotificationThrottler(CONFIG, clock=clock)
    throttler.should_notify("a", progress_changed=True)

    clock.now += CONFIG.min_interval + 1
    assert throttler.should_notify("a", progress_changed=True).notify


def test_unchanged_progress_waits_for_max_interval() -> None:
    clock = FakeClock()
    throttler = NotificationThrottler(CONFIG, clock=clock)
    throttler.should_notify("a", progress_changed=True)

    clock.now += CONFIG.min_interval + 1
    assert not throttler.should_notify("a", progress_changed=False).notify

    clock.now += CONFIG.max_interval
    assert throttler.should_notify("a", progress_changed=False).notify


def test_state_is_per_printer() -> None:
    throttler = NotificationThrottler(CONFIG, clock=FakeClock())
    throttler.should_notify("a", progress_changed=True)
    assert throttler.should_notify("b", progress_changed=True).notify


def test_clear_resets_printer() -> None:
    throttler = NotificationThrottler(CONFIG, clock=FakeClock())
    throttler.should_notify("a", progress_changed=True)
    throttler.clear("a")
    assert throttler.last_notified("a") is None
    assert throttler.should_notify("a", progress_changed=True).notify


def test_notification_timestamps_never_decrease() -> None:
    throttler = NotificationThrottler(CONFIG, clock=FakeClock())
    throttler.mark("a", now=5000.0)
    throttler.mark("a", now=4000.0)
    assert throttler.last_notified("a") == 5000.0

    stamps = []
    for now in (5000.0, 7000.0, 9000.0, 12000.0):
        if throttler.should_notify("a", progress_changed=True, now=now).notify:
            stamps.append(throttler.last_notified("a"))
    assert stamps == sorted(stamps)


def test_inverted_config_is_flagged(caplog) -> None:
    NotificationThrottler(ThrottleConfig(min_interval=600, max_interval=60), clock=FakeClock())
    assert "min_interval" in caplog.text
