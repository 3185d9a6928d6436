from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Literal, Mapping, Sequence

from summit_core.columns import (
    TA_CONFIRMED,
    TA_ETEAM,
    TA_FIRST_NAME,
    TA_LABS,
    TA_LAST_NAME,
    TA_NOMINATED_BY,
    TA_NOTES,
    TA_SVP,
    TA_TRACK,
)

logger = logging.getLogger(__name__)

StaffingStatus = Literal["critical", "toofew", "good", "toomany"]

LAB_CODE_RE = re.compile(r"^L\d+$", re.IGNORECASE)
CONFIRMED_VALUES = frozenset({"yes", "y", "true"})

MIN_TAS_PER_LAB = 3
MAX_TAS_PER_LAB = 5


@dataclass(frozen=True)
class TARecord:
    track: str
    first_name: str
    last_name: str
    full_name: str
    labs: List[str] = field(default_factory=list)
    confirmed: bool = False
    nominated_by: str = ""
    notes: str = ""
    svp: str = ""
    eteam: str = ""


def _field(row: Mapping[str, object], key: str) -> str:
    value = row.get(key)
    if value is None:
        return ""
    return str(value).strip()


def parse_lab_codes(value: str) -> List[str]:
    return [token.strip().upper() for token in value.split(",") if LAB_CODE_RE.match(token.strip())]


def parse_confirmed(value: str) -> bool:
    return value.strip().lower() in CONFIRMED_VALUES


def full_name(first: str, last: str) -> str:
    return " ".join(part for part in (first.strip(), last.strip()) if part) or "Unknown"


def parse_roster(rows: Iterable[Mapping[str, object]]) -> List[TARecord]:
    """Normalize roster rows. Rows without any valid lab code are dropped."""
    records: List[TARecord] = []
    dropped = 0
    for row in rows:
        first = _field(row, TA_FIRST_NAME)
        last = _field(row, TA_LAST_NAME)
        labs_text = _field(row, TA_LABS)
        # Section headers like "Analytics (4)" carry neither.
        if not (first or last or labs_text):
            continue
        labs = parse_lab_codes(labs_text)
        if not labs:
            dropped += 1
            continue
        records.append(
            TARecord(
                track=_field(row, TA_TRACK),
                first_name=first,
                last_name=last,
                full_name=full_name(first, last),
                labs=labs,
                confirmed=parse_confirmed(_field(row, TA_CONFIRMED)),
                nominated_by=_field(row, TA_NOMINATED_BY),
                notes=_field(row, TA_NOTES),
                svp=_field(row, TA_SVP),
                eteam=_field(row, TA_ETEAM),
            )
        )
    if dropped:
        logger.debug("dropped %d roster rows without a valid lab code", dropped)
    return records


def build_lab_index(records: Iterable[TARecord]) -> Dict[str, List[TARecord]]:
    index: Dict[str, List[TARecord]] = {}
    for ta in records:
        for code in ta.labs:
            index.setdefault(code, []).append(ta)
    return index


def confirmed_count(tas: Sequence[TARecord]) -> int:
    return sum(1 for ta in tas if ta.confirmed)


def staffing_status(confirmed: int) -> StaffingStatus:
    if confirmed < MIN_TAS_PER_LAB:
        return "critical"
    if confirmed == MIN_TAS_PER_LAB:
        return "toofew"
    if confirmed <= MAX_TAS_PER_LAB:
        return "good"
    return "toomany"
