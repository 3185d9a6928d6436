"""Joins across the three independently uploaded sources.

The session export, the scheduling grid and the TA roster only share the
session code. Each may be missing; every join tolerates that.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Set

import pandas as pd

from summit_core.columns import SESSION_CODE
from summit_core.roster import TARecord, confirmed_count, staffing_status
from summit_core.schedule import GridSessionCell

WHITESPACE_RE = re.compile(r"\s+")


def find_by_code(sessions: pd.DataFrame, code: Optional[str]) -> Optional[Dict[str, Any]]:
    """Exact code match first, then one upper-cased retry."""
    if not code or sessions is None or sessions.empty or SESSION_CODE not in sessions.columns:
        return None
    codes = sessions[SESSION_CODE]
    for candidate in (code, code.upper()):
        hits = sessions[codes == candidate]
        if not hits.empty:
            return hits.iloc[0].to_dict()
    return None


@dataclass(frozen=True)
class ResolvedCell:
    cell: GridSessionCell
    session: Optional[Dict[str, Any]]


@dataclass(frozen=True)
class LabStaffing:
    lab_code: str
    session: Optional[Dict[str, Any]]
    tas: List[TARecord] = field(default_factory=list)
    confirmed: int = 0
    status: str = "critical"


def resolve_grid_cell(cell: GridSessionCell, sessions: pd.DataFrame) -> ResolvedCell:
    return ResolvedCell(cell=cell, session=find_by_code(sessions, cell.session_code))


def resolve_lab(lab_code: str, sessions: pd.DataFrame, lab_index: Mapping[str, List[TARecord]]) -> LabStaffing:
    tas = list(lab_index.get(lab_code.upper(), []))
    confirmed = confirmed_count(tas)
    return LabStaffing(
        lab_code=lab_code,
        session=find_by_code(sessions, lab_code),
        tas=tas,
        confirmed=confirmed,
        status=staffing_status(confirmed),
    )


def normalize_person_name(name: Optional[str]) -> str:
    """'Doe,Jane ' -> 'doe jane'."""
    if not name:
        return ""
    return WHITESPACE_RE.sub(" ", str(name).lower().replace(",", " ")).strip()


def ta_name_index(tas: Iterable[TARecord]) -> Set[str]:
    return {normalize_person_name(ta.full_name) for ta in tas} - {""}


def speaker_is_ta(name: Optional[str], ta_names: Set[str]) -> bool:
    normalized = normalize_person_name(name)
    return bool(normalized) and normalized in ta_names
