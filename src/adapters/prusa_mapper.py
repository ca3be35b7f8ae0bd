"""Prusa Connect payload to core model mapping adapter.

This keeps the remote JSON shape out of the core engine.
"""

from __future__ import annotations

from typing import Any, Optional

from core.errors import FetchError
from core.models import (
    JobSnapshot,
    PrinterSnapshot,
    Temperature,
    Tool,
    ToolConfig,
    ToolSlot,
)

PRIMARY_TOOL_KEY = "1"


def _slot_index(key: str) -> Optional[int]:
    """Return the slot index for keys shaped like "1.3", else None."""

    base, _, slot = key.partition(".")
    if base != PRIMARY_TOOL_KEY or not slot.isdigit():
        return None
    return int(slot)


def map_tools(raw_tools: Optional[dict[str, Any]]) -> ToolConfig:
    if not raw_tools:
        return ToolConfig()

    primary_raw = raw_tools.get(PRIMARY_TOOL_KEY) or {}
    mmu = primary_raw.get("mmu")
    primary = Tool(
        active=bool(primary_raw.get("active", False)),
        nozzle_diameter=primary_raw.get("nozzle_diameter"),
        material=primary_raw.get("material"),
        temp=primary_raw.get("temp"),
        hardened=primary_raw.get("hardened"),
        high_flow=primary_raw.get("high_flow"),
        mmu_enabled=mmu.get("enabled") if isinstance(mmu, dict) else None,
    )

    slots: list[ToolSlot] = []
    for key, value in raw_tools.items():
        index = _slot_index(key)
        if index is None or not isinstance(value, dict):
            continue
        slots.append(ToolSlot(index=index, material=value.get("material")))
    slots.sort(key=lambda slot: slot.index)
    return ToolConfig(primary=primary, slots=tuple(slots))


def map_job(raw_job: Optional[dict[str, Any]]) -> Optional[JobSnapshot]:
    if not raw_job:
        return None
    return JobSnapshot(
        id=int(raw_job.get("id", 0)),
        display_name=str(raw_job.get("display_name", "")),
        progress=raw_job.get("progress", 0),
        time_printing=int(raw_job.get("time_printing", 0)),
        time_remaining=int(raw_job.get("time_remaining", -1)),
        state=raw_job.get("state"),
        preview_url=raw_job.get("preview_url") or None,
    )


def map_temperature(raw_temp: Optional[dict[str, Any]]) -> Optional[Temperature]:
    if not raw_temp:
        return None
    return Temperature(
        temp_nozzle=raw_temp.get("temp_nozzle"),
        temp_bed=raw_temp.get("temp_bed"),
        target_nozzle=raw_temp.get("target_nozzle"),
        target_bed=raw_temp.get("target_bed"),
    )


def map_printer(raw: dict[str, Any]) -> PrinterSnapshot:
    """Build a PrinterSnapshot from one entry of the printers list."""

    try:
        uuid = raw["uuid"]
    except (KeyError, TypeError) as exc:
        raise FetchError("Printer entry without uuid") from exc

    try:
        return PrinterSnapshot(
            uuid=str(uuid),
            name=str(raw.get("name") or uuid),
            printer_state=str(raw.get("printer_state", "")),
            connect_state=str(raw.get("connect_state", "")),
            job_info=map_job(raw.get("job_info")),
            last_online=raw.get("last_online"),
            temp=map_temperature(raw.get("temp")),
            tools=map_tools(raw.get("tools")),
            printer_model=raw.get("printer_model"),
            location=raw.get("location"),
            firmware=raw.get("firmware"),
            team_name=raw.get("team_name"),
            raw=raw,
        )
    except (TypeError, ValueError, AttributeError) as exc:
        raise FetchError(f"Malformed printer entry {uuid}") from exc
