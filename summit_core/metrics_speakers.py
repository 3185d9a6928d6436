from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict, List, Optional, Set

import pandas as pd

from summit_core.columns import (
    DERIVED_SESSION_TYPE,
    INTERNAL_TRACK,
    PUBLISHED,
    SESSION_CODE,
    SPEAKER1_COMPANY,
    SPEAKER1_NAME,
    SPEAKER2_COMPANY,
    SPEAKER2_NAME,
)
from summit_core.filters import DashboardFilters
from summit_core.xref import speaker_is_ta, ta_name_index


def clean_company_name(company: Optional[str]) -> str:
    """'Acme, Acme,Beta' -> 'Acme, Beta'."""
    if not company:
        return ""
    parts: List[str] = []
    for part in str(company).split(","):
        part = part.strip()
        if part and part not in parts:
            parts.append(part)
    return ", ".join(parts)


def speaker_rows(sessions: pd.DataFrame, ta_names: Set[str]) -> List[Dict[str, Any]]:
    """One row per session that has at least one speaker."""
    rows: List[Dict[str, Any]] = []
    for record in sessions.to_dict(orient="records"):
        speaker = record.get(SPEAKER1_NAME) or ""
        co_speaker = record.get(SPEAKER2_NAME) or ""
        if not (speaker or co_speaker):
            continue
        rows.append(
            {
                "speaker": speaker,
                "co_speaker": co_speaker,
                "speaker_company": clean_company_name(record.get(SPEAKER1_COMPANY)),
                "co_speaker_company": clean_company_name(record.get(SPEAKER2_COMPANY)),
                "speaker_is_ta": speaker_is_ta(speaker, ta_names),
                "co_speaker_is_ta": speaker_is_ta(co_speaker, ta_names),
                "session_code": record.get(SESSION_CODE) or "",
                "internal_track": record.get(INTERNAL_TRACK) or "",
                "session_type": record.get(DERIVED_SESSION_TYPE) or "",
                "published": record.get(PUBLISHED) or "",
            }
        )
    return rows


def compute_speakers(
    filters: DashboardFilters,
    ctx: Dict[str, Any],
    *,
    company: str = "",
    track: str = "",
    session_type: str = "",
) -> Dict[str, Any]:
    sessions: pd.DataFrame = ctx.get("sessions", pd.DataFrame())
    rows = speaker_rows(sessions, ta_name_index(ctx.get("tas", [])))

    companies = sorted({r[k] for r in rows for k in ("speaker_company", "co_speaker_company") if r[k]})
    tracks = sorted({r["internal_track"] for r in rows if r["internal_track"]})
    session_types = sorted({r["session_type"] for r in rows if r["session_type"]})

    if company:
        rows = [r for r in rows if company in (r["speaker_company"], r["co_speaker_company"])]
    if track:
        rows = [r for r in rows if r["internal_track"] == track]
    if session_type:
        rows = [r for r in rows if r["session_type"] == session_type]

    return {
        "filters": asdict(filters),
        "options": {"companies": companies, "tracks": tracks, "session_types": session_types},
        "rows": rows,
        "speakers_also_tas": sum(1 for r in rows if r["speaker_is_ta"] or r["co_speaker_is_ta"]),
    }
