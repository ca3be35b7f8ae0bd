"""Core domain models.

These dataclasses are shared across the core and adapters to avoid tight
coupling to the Prusa Connect payload shape or Telegram types.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional, Tuple

# printer_state value reported for an idle/aborted printer.
STOPPED = "STOPPED"

# time_remaining value reported when the printer has no estimate.
UNKNOWN_TIME_REMAINING = -1


@dataclass(frozen=True)
class JobSnapshot:
    """Print job attached to a printer while a job exists."""

    id: int
    display_name: str
    progress: float
    time_printing: int
    time_remaining: int
    state: Optional[str] = None
    preview_url: Optional[str] = None


@dataclass(frozen=True)
class Temperature:
    temp_nozzle: Optional[float] = None
    temp_bed: Optional[float] = None
    target_nozzle: Optional[float] = None
    target_bed: Optional[float] = None


@dataclass(frozen=True)
class Tool:
    """The printer's primary tool head."""

    active: bool = False
    nozzle_diameter: Optional[float] = None
    material: Optional[str] = None
    temp: Optional[float] = None
    hardened: Optional[bool] = None
    high_flow: Optional[bool] = None
    mmu_enabled: Optional[bool] = None


@dataclass(frozen=True)
class ToolSlot:
    """A secondary filament slot such as "1.2" on an MMU setup."""

    index: int
    material: Optional[str] = None


@dataclass(frozen=True)
class ToolConfig:
    """Primary tool plus ordered secondary slots."""

    primary: Tool = field(default_factory=Tool)
    slots: Tuple[ToolSlot, ...] = ()


@dataclass(frozen=True)
class PrinterSnapshot:
    """Observed state of one printer at a poll instant.

    Equality is structural across every field except the raw payload, which
    is kept only for diagnostics.
    """

    uuid: str
    name: str
    printer_state: str
    connect_state: str
    job_info: Optional[JobSnapshot] = None
    last_online: Optional[float] = None
    temp: Optional[Temperature] = None
    tools: ToolConfig = field(default_factory=ToolConfig)
    printer_model: Optional[str] = None
    location: Optional[str] = None
    firmware: Optional[str] = None
    team_name: Optional[str] = None
    raw: Optional[dict[str, Any]] = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class Subscription:
    """One chat watching one printer."""

    chat_id: str
    printer_id: str


@dataclass(frozen=True)
class UserRecord:
    """Registry row for a known chat, used for listings only."""

    chat_id: str
    authed: bool
    banned: bool
