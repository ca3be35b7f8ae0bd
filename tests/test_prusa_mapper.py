from __future__ import annotations

import pytest

from adapters.prusa_mapper import map_printer, map_tools
from core.errors import FetchError


def test_map_printer_with_job() -> None:
    raw = {
        "uuid": "abc",
        "name": "MK4",
        "printer_state": "PRINTING",
        "connect_state": "ONLINE",
        "last_online": 1700000000,
        "temp": {"temp_nozzle": 215.1, "temp_bed": 60.0},
        "job_info": {
            "id": 42,
            "display_name": "benchy.bgcode",
            "progress": 12,
            "time_printing": 300,
            "time_remaining": -1,
            "state": "PRINTING",
            "preview_url": "/app/jobs/42/preview",
        },
    }
    printer = map_printer(raw)
    assert printer.uuid == "abc"
    assert printer.job_info is not None
    assert printer.job_info.display_name == "benchy.bgcode"
    assert printer.job_info.time_remaining == -1
    assert printer.temp.temp_bed == 60.0
    assert printer.raw is raw


def test_raw_payload_is_not_part_of_equality() -> None:
    first = map_printer({"uuid": "abc", "name": "MK4", "extra": 1})
    second = map_printer({"uuid": "abc", "name": "MK4", "extra": 2})
    assert first == second


def test_map_tools_orders_secondary_slots() -> None:
    tools = map_tools(
        {
            "1": {"active": True, "nozzle_diameter": 0.4, "mmu": {"enabled": True}},
            "1.3": {"material": "PETG"},
            "1.1": {"material": "PLA"},
            "1.2": {"material": "ASA"},
        }
    )
    assert tools.primary.active
    assert tools.primary.mmu_enabled is True
    assert [slot.index for slot in tools.slots] == [1, 2, 3]
    assert [slot.material for slot in tools.slots] == ["PLA", "ASA", "PETG"]


def test_map_printer_without_uuid_fails() -> None:
    with pytest.raises(FetchError):
        map_printer({"name": "ghost"})
