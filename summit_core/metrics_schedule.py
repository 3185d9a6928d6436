from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict, List, Optional

import pandas as pd

from summit_core.schedule import Schedule, find_conflicts, sessions_by_type, sessions_for_day
from summit_core.xref import resolve_grid_cell


def _schedule_payload(schedule: Schedule) -> Dict[str, Any]:
    venues = []
    for venue in schedule.venues:
        cells = []
        for cell in venue.sessions:
            payload = asdict(cell)
            payload["status"] = cell.status
            cells.append(payload)
        venues.append({"name": venue.name, "capacity": venue.capacity, "sessions": cells})
    return {
        "time_slots": [asdict(slot) for slot in schedule.time_slots],
        "venues": venues,
        "days": schedule.days,
    }


def compute_schedule(ctx: Dict[str, Any], *, day: Optional[str] = None, slot_type: Optional[str] = None) -> Dict[str, Any]:
    schedule: Optional[Schedule] = ctx.get("schedule")
    if schedule is None:
        return {"loaded": False, "time_slots": [], "venues": [], "days": [], "all_days": []}
    view = schedule
    if day:
        view = sessions_for_day(view, day)
    if slot_type:
        view = sessions_by_type(view, slot_type)
    return {"loaded": True, **_schedule_payload(view), "all_days": schedule.days}


def compute_conflicts(ctx: Dict[str, Any]) -> Dict[str, Any]:
    schedule: Optional[Schedule] = ctx.get("schedule")
    conflicts = find_conflicts(schedule) if schedule is not None else []
    return {"conflicts": [asdict(c) for c in conflicts]}


def compute_cell_details(ctx: Dict[str, Any], code: str) -> Dict[str, Any]:
    """Every grid placement of a session code, joined to its export row."""
    schedule: Optional[Schedule] = ctx.get("schedule")
    sessions: pd.DataFrame = ctx.get("sessions", pd.DataFrame())
    placements: List[Dict[str, Any]] = []
    session: Optional[Dict[str, Any]] = None
    if schedule is not None:
        for venue in schedule.venues:
            for cell in venue.sessions:
                if cell.session_code and cell.session_code.upper() == code.upper():
                    resolved = resolve_grid_cell(cell, sessions)
                    session = session or resolved.session
                    placements.append(asdict(cell))
    return {"session_code": code, "placements": placements, "session": session}
