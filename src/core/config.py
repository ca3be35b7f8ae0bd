"""Core configuration dataclasses.

We keep config parsing outside the core, but these dataclasses define the
shape the core expects so adapters and app layers can build safely.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ThrottleConfig:
    """Progress notification window, in seconds.

    - min_interval: never repeat a progress notification sooner than this
    - max_interval: force a progress notification at least this often
    """

    min_interval: float = 5 * 60
    max_interval: float = 30 * 60

    @property
    def is_well_formed(self) -> bool:
        return self.min_interval < self.max_interval


@dataclass(frozen=True)
class PollingConfig:
    """Poll loop settings consumed by the scheduler."""

    interval: float = 10.0
