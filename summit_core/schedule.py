"""Scheduling grid parsing.

The grid export is a header-less venue x time-slot matrix:

- row 0 holds time-slot names ("Sessions #1", "Labs #3", "Strategy Keynote #2")
- row 1 holds time-slot detail text (usually the clock time)
- row 2 is unused; venue rows start at row 3
- columns 0-3 are metadata; time slots start at column 4

Venue rows are recognised by a closed list of name fragments. Rows that match
nothing are not data and are skipped.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field, replace
from typing import Dict, List, Literal, Optional, Sequence, Tuple

from summit_core.errors import MalformedGridError

logger = logging.getLogger(__name__)

SlotType = Literal["Session", "Lab", "Strategy Keynote"]
Day = Literal["Monday", "Tuesday", "Wednesday", "Thursday", "Unknown"]

SESSION_SLOT = "Session"
LAB_SLOT = "Lab"
STRATEGY_KEYNOTE_SLOT = "Strategy Keynote"
UNKNOWN_DAY = "Unknown"

HEADER_ROW = 0
DETAIL_ROW = 1
FIRST_DATA_ROW = 3
FIRST_SLOT_COLUMN = 4

# First-column labels of rows that annotate the grid rather than host sessions.
METADATA_ROW_LABELS = frozenset({"Speakers", "Special Notes", "Add Mics", "AV", "LABS"})

# A row is a venue only if its first column contains one of these (case-sensitive).
VENUE_NAME_FRAGMENTS: Tuple[str, ...] = (
    "CAP",
    "Level",
    "Palazzo",
    "Delfino",
    "Lido",
    "Murano",
    "Marcello",
    "Lando",
    "Zeno",
)

# (category, first number, last number, day)
DAY_RANGES: Tuple[Tuple[str, int, int, str], ...] = (
    (SESSION_SLOT, 1, 1, "Monday"),
    (SESSION_SLOT, 2, 4, "Tuesday"),
    (SESSION_SLOT, 5, 7, "Wednesday"),
    (SESSION_SLOT, 8, 10, "Thursday"),
    (LAB_SLOT, 1, 1, "Monday"),
    (LAB_SLOT, 2, 3, "Tuesday"),
    (LAB_SLOT, 4, 5, "Wednesday"),
    (LAB_SLOT, 6, 7, "Thursday"),
)

STRATEGY_KEYNOTE_MARKER = "Strategy Keynote"
STRATEGY_KEYNOTE_TUESDAY_MAX = 2

SLOT_RE = re.compile(r"(Sessions?|Labs?)\s*#?(\d+)", re.IGNORECASE)
KEYNOTE_NUMBER_RE = re.compile(r"#(\d+)")
CAPACITY_RE = re.compile(r"CAP[:\s]*(\d+)", re.IGNORECASE)
SESSION_CODE_RE = re.compile(r"[A-Z]+\d+")

# Highest priority first; used when several markers appear in one cell.
CELL_STATUS_PRIORITY: Tuple[Tuple[str, str], ...] = (
    ("is_do_not_schedule", "do-not-schedule"),
    ("is_hold", "hold"),
    ("is_repeat", "repeat"),
    ("is_tbd", "tbd"),
    ("is_open", "open"),
)


@dataclass(frozen=True)
class TimeSlot:
    index: int
    name: str
    time: str
    type: str
    day: str
    number: int
    full_time: str


@dataclass(frozen=True)
class GridSessionCell:
    time_slot: str
    time_slot_index: int
    day: str
    type: str
    venue: str
    capacity: Optional[int]
    session_code: Optional[str]
    title: str
    raw_content: str
    is_open: bool = False
    is_tbd: bool = False
    is_do_not_schedule: bool = False
    is_hold: bool = False
    is_repeat: bool = False

    @property
    def status(self) -> Optional[str]:
        for attr, label in CELL_STATUS_PRIORITY:
            if getattr(self, attr):
                return label
        return None


@dataclass(frozen=True)
class Venue:
    name: str
    capacity: Optional[int]
    sessions: List[GridSessionCell] = field(default_factory=list)


@dataclass(frozen=True)
class Schedule:
    time_slots: List[TimeSlot] = field(default_factory=list)
    venues: List[Venue] = field(default_factory=list)

    @property
    def days(self) -> List[str]:
        return unique_days(self.time_slots)


@dataclass(frozen=True)
class Conflict:
    time_slot: str
    duplicate_codes: List[str]


def unique_days(time_slots: Sequence[TimeSlot]) -> List[str]:
    days: List[str] = []
    for slot in time_slots:
        if slot.day != UNKNOWN_DAY and slot.day not in days:
            days.append(slot.day)
    return days


def day_for(slot_type: str, number: int) -> str:
    for category, low, high, day in DAY_RANGES:
        if category == slot_type and low <= number <= high:
            return day
    return UNKNOWN_DAY


def parse_time_slot(index: int, name: str, time: str) -> TimeSlot:
    name = name.strip()
    time = (time or "").strip()

    slot_type = SESSION_SLOT
    number = 0
    match = SLOT_RE.search(name)
    if match:
        slot_type = LAB_SLOT if "lab" in match.group(1).lower() else SESSION_SLOT
        number = int(match.group(2))
    day = day_for(slot_type, number)

    if STRATEGY_KEYNOTE_MARKER in name:
        slot_type = STRATEGY_KEYNOTE_SLOT
        keynote = KEYNOTE_NUMBER_RE.search(name)
        if keynote:
            day = "Tuesday" if int(keynote.group(1)) <= STRATEGY_KEYNOTE_TUESDAY_MAX else "Wednesday"

    full_time = f"{name}\n{time}" if time else name
    return TimeSlot(index=index, name=name, time=time, type=slot_type, day=day, number=number, full_time=full_time)


def extract_capacity(venue_name: str) -> Optional[int]:
    match = CAPACITY_RE.search(venue_name)
    return int(match.group(1)) if match else None


def is_venue_row(label: str) -> bool:
    return bool(label) and any(fragment in label for fragment in VENUE_NAME_FRAGMENTS)


def type_from_cell_code(code: Optional[str], fallback: str) -> str:
    if not code:
        return fallback
    if code.startswith("L"):
        return LAB_SLOT
    if code.startswith("SK"):
        return STRATEGY_KEYNOTE_SLOT
    if code.startswith("S"):
        return SESSION_SLOT
    return fallback


def parse_session_cell(content: str, slot: TimeSlot, venue: str, capacity: Optional[int]) -> GridSessionCell:
    code_match = SESSION_CODE_RE.search(content)
    code = code_match.group(0) if code_match else None

    colon = content.find(":")
    if colon > -1:
        title = content[colon + 1 :].strip()
    elif code is None:
        title = content
    else:
        title = ""

    lowered = content.lower()
    return GridSessionCell(
        time_slot=slot.name,
        time_slot_index=slot.index,
        day=slot.day,
        type=type_from_cell_code(code, slot.type),
        venue=venue,
        capacity=capacity,
        session_code=code,
        title=title,
        raw_content=content,
        is_open="open" in lowered,
        is_tbd="tbd" in lowered,
        is_do_not_schedule="do not schedule" in lowered,
        is_hold="hold" in lowered,
        is_repeat="repeat" in lowered,
    )


def _cell(row: Sequence[object], index: int) -> str:
    if index >= len(row) or row[index] is None:
        return ""
    return str(row[index]).strip()


def parse_grid(matrix: Sequence[Sequence[object]]) -> Schedule:
    """Decode the raw grid matrix into time slots and venues."""
    if not matrix or len(matrix) < 2:
        raise MalformedGridError("Invalid schedule data: the grid needs at least a slot-name row and a slot-time row")

    header = matrix[HEADER_ROW]
    details = matrix[DETAIL_ROW]
    time_slots: List[TimeSlot] = []
    for idx in range(FIRST_SLOT_COLUMN, len(header)):
        name = _cell(header, idx)
        if name:
            time_slots.append(parse_time_slot(idx, name, _cell(details, idx)))

    venues: List[Venue] = []
    skipped = 0
    for row in matrix[FIRST_DATA_ROW:]:
        label = _cell(row, 0)
        if label in METADATA_ROW_LABELS:
            continue
        if not is_venue_row(label):
            skipped += 1
            continue
        capacity = extract_capacity(label)
        cells: List[GridSessionCell] = []
        for slot in time_slots:
            content = _cell(row, slot.index)
            if content:
                cells.append(parse_session_cell(content, slot, label, capacity))
        venues.append(Venue(name=label, capacity=capacity, sessions=cells))

    if skipped:
        logger.debug("skipped %d non-venue grid rows", skipped)
    return Schedule(time_slots=time_slots, venues=venues)


# ---------------- Lookups ----------------
def sessions_for_day(schedule: Schedule, day: str) -> Schedule:
    slots = [slot for slot in schedule.time_slots if slot.day == day]
    venues = [replace(v, sessions=[c for c in v.sessions if c.day == day]) for v in schedule.venues]
    return Schedule(time_slots=slots, venues=[v for v in venues if v.sessions])


def sessions_by_type(schedule: Schedule, slot_type: str) -> Schedule:
    slots = [slot for slot in schedule.time_slots if slot.type == slot_type]
    venues = [replace(v, sessions=[c for c in v.sessions if c.type == slot_type]) for v in schedule.venues]
    return Schedule(time_slots=slots, venues=[v for v in venues if v.sessions])


def sessions_at_time_slot(schedule: Schedule, time_slot_name: str) -> List[GridSessionCell]:
    return [cell for venue in schedule.venues for cell in venue.sessions if cell.time_slot == time_slot_name]


def find_conflicts(schedule: Schedule) -> List[Conflict]:
    """Session codes booked into more than one venue under the same slot name."""
    conflicts: List[Conflict] = []
    seen_names: List[str] = []
    for slot in schedule.time_slots:
        if slot.name in seen_names:
            continue
        seen_names.append(slot.name)
        venues_by_code: Dict[str, List[str]] = {}
        for cell in sessions_at_time_slot(schedule, slot.name):
            if not cell.session_code:
                continue
            venues = venues_by_code.setdefault(cell.session_code, [])
            if cell.venue not in venues:
                venues.append(cell.venue)
        duplicates = [code for code, venues in venues_by_code.items() if len(venues) > 1]
        if duplicates:
            conflicts.append(Conflict(time_slot=slot.name, duplicate_codes=duplicates))
    return conflicts
