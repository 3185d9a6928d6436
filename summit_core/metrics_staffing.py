from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict, List, Mapping

import pandas as pd

from summit_core.classify import HANDS_ON_LAB
from summit_core.columns import (
    DERIVED_SESSION_TYPE,
    INTERNAL_TRACK,
    SESSION_CODE,
    SESSION_TITLE,
    SPEAKER1_COMPANY,
    SPEAKER1_NAME,
    SPEAKER2_COMPANY,
    SPEAKER2_NAME,
)
from summit_core.data import text_column
from summit_core.filters import DashboardFilters
from summit_core.roster import MIN_TAS_PER_LAB, TARecord, confirmed_count, staffing_status

MVP_LAB_COUNT = 3
WELL_STAFFED_TAS = 5
STATUSES = ("critical", "toofew", "good", "toomany")


def staffing_percent(confirmed: int) -> float:
    return min(confirmed / MIN_TAS_PER_LAB * 100, 100.0)


def lab_staffing(sessions: pd.DataFrame, lab_index: Mapping[str, List[TARecord]]) -> List[Dict[str, Any]]:
    """Every Hands-on Lab session with its TAs and staffing status, sorted by code."""
    if sessions.empty:
        return []
    labs = sessions[text_column(sessions, DERIVED_SESSION_TYPE).eq(HANDS_ON_LAB)]
    out: List[Dict[str, Any]] = []
    for record in labs.to_dict(orient="records"):
        code = record.get(SESSION_CODE) or ""
        tas = lab_index.get(code.upper(), [])
        confirmed = confirmed_count(tas)
        instructors = [
            {"name": record[name_col], "company": record.get(company_col) or ""}
            for name_col, company_col in ((SPEAKER1_NAME, SPEAKER1_COMPANY), (SPEAKER2_NAME, SPEAKER2_COMPANY))
            if record.get(name_col)
        ]
        out.append(
            {
                "lab_code": code,
                "title": record.get(SESSION_TITLE) or "",
                "track": record.get(INTERNAL_TRACK) or "Other",
                "instructors": instructors,
                "tas": [asdict(ta) for ta in tas],
                "ta_count": len(tas),
                "confirmed_count": confirmed,
                "staffing_status": staffing_status(confirmed),
                "staffing_percent": staffing_percent(confirmed),
            }
        )
    out.sort(key=lambda lab: lab["lab_code"])
    return out


def roster_stats(tas: List[TARecord], lab_index: Mapping[str, List[TARecord]]) -> Dict[str, Any]:
    total_labs = len(lab_index)
    total_assignments = sum(len(ta.labs) for ta in tas)
    mvps = sorted((ta for ta in tas if len(ta.labs) >= MVP_LAB_COUNT), key=lambda ta: len(ta.labs), reverse=True)
    return {
        "total_tas": len(tas),
        "total_labs": total_labs,
        "total_assignments": total_assignments,
        "avg_tas_per_lab": round(total_assignments / total_labs, 1) if total_labs else 0,
        "mvp_tas": [{"full_name": ta.full_name, "labs": ta.labs} for ta in mvps],
        "understaffed_labs": [
            {"lab_code": code, "ta_count": len(assigned)} for code, assigned in lab_index.items() if len(assigned) < MIN_TAS_PER_LAB
        ],
        "well_staffed_labs": [
            {"lab_code": code, "ta_count": len(assigned)} for code, assigned in lab_index.items() if len(assigned) >= WELL_STAFFED_TAS
        ],
    }


def compute_staffing(filters: DashboardFilters, ctx: Dict[str, Any]) -> Dict[str, Any]:
    sessions: pd.DataFrame = ctx.get("sessions", pd.DataFrame())
    tas: List[TARecord] = ctx.get("tas", [])
    lab_index: Mapping[str, List[TARecord]] = ctx.get("lab_index", {})

    labs = lab_staffing(sessions, lab_index)
    by_track: Dict[str, List[Dict[str, Any]]] = {}
    for lab in labs:
        by_track.setdefault(lab["track"], []).append(lab)

    status_counts = {status: sum(1 for lab in labs if lab["staffing_status"] == status) for status in STATUSES}
    return {
        "filters": asdict(filters),
        "has_roster": bool(tas),
        "kpis": {"total_labs": len(labs), **status_counts},
        "roster": roster_stats(tas, lab_index),
        "labs_by_track": dict(sorted(by_track.items())),
    }
