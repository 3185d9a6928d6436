from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List

import pandas as pd

from summit_core.classify import PRE_CONFERENCE_TRAINING, SKILL_EXCHANGE
from summit_core.columns import DERIVED_SESSION_TYPE, INTERNAL_TRACK, PRODUCTS, PUBLISHED, SESSION_STATUS
from summit_core.data import text_column

# Picking one of these session types also pins the internal track.
TRACK_FOR_SESSION_TYPE: Dict[str, str] = {
    SKILL_EXCHANGE: "Skill Exchange",
    PRE_CONFERENCE_TRAINING: "ADLS",
}


@dataclass(frozen=True)
class DashboardFilters:
    session_type: str = ""
    internal_track: str = ""
    published: str = ""
    session_status: str = ""
    products: str = ""
    show_overrides: bool = True
    main_tracks_only: bool = False


def _as_str(value: object) -> str:
    if value is None:
        return ""
    return str(value).strip()


def normalize_filters(raw: dict) -> DashboardFilters:
    session_type = _as_str(raw.get("session_type"))
    internal_track = _as_str(raw.get("internal_track"))
    if session_type in TRACK_FOR_SESSION_TYPE:
        internal_track = TRACK_FOR_SESSION_TYPE[session_type]

    return DashboardFilters(
        session_type=session_type,
        internal_track=internal_track,
        published=_as_str(raw.get("published")),
        session_status=_as_str(raw.get("session_status")),
        products=_as_str(raw.get("products")),
        show_overrides=bool(raw.get("show_overrides", True)),
        main_tracks_only=bool(raw.get("main_tracks_only", False)),
    )


def apply_filters(sessions: pd.DataFrame, filters: DashboardFilters) -> pd.DataFrame:
    if sessions.empty:
        return sessions
    mask = pd.Series(True, index=sessions.index)
    if filters.session_type:
        mask &= text_column(sessions, DERIVED_SESSION_TYPE).eq(filters.session_type)
    if filters.internal_track:
        mask &= text_column(sessions, INTERNAL_TRACK).eq(filters.internal_track)
    if filters.published:
        mask &= text_column(sessions, PUBLISHED).str.lower().eq(filters.published.lower())
    if filters.session_status:
        mask &= text_column(sessions, SESSION_STATUS).eq(filters.session_status)
    if filters.products:
        mask &= text_column(sessions, PRODUCTS).eq(filters.products)
    return sessions[mask]


def unique_values(sessions: pd.DataFrame, col: str) -> List[str]:
    values = text_column(sessions, col)
    return sorted({v for v in values if v.strip()})


def filter_options(sessions: pd.DataFrame) -> Dict[str, List[str]]:
    return {
        "session_types": unique_values(sessions, DERIVED_SESSION_TYPE),
        "internal_tracks": unique_values(sessions, INTERNAL_TRACK),
        "session_statuses": unique_values(sessions, SESSION_STATUS),
        "products": unique_values(sessions, PRODUCTS),
    }
