from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict, Iterable, List

import pandas as pd

from summit_core.charts import horizontal_bar
from summit_core.columns import (
    DERIVED_SESSION_TYPE,
    HAS_OVERRIDE,
    INTERNAL_TRACK,
    PUBLISHED,
    SESSION_CODE,
    SESSION_TITLE,
)
from summit_core.data import is_published, text_column
from summit_core.filters import DashboardFilters
from summit_core.metrics_overview import NO_TRACK, track_type_breakdown
from summit_core.overrides import is_wip_session


def session_summaries(sessions: pd.DataFrame) -> List[Dict[str, Any]]:
    rows: List[Dict[str, Any]] = []
    for record in sessions.to_dict(orient="records"):
        rows.append(
            {
                "session_code": record.get(SESSION_CODE, ""),
                "title": record.get(SESSION_TITLE, ""),
                "type": record.get(DERIVED_SESSION_TYPE, ""),
                "published": str(record.get(PUBLISHED, "")).lower() == "yes",
                "is_wip": is_wip_session(record),
                "has_override": bool(record.get(HAS_OVERRIDE, False)),
            }
        )
    return rows


def compute_tracks(filters: DashboardFilters, ctx: Dict[str, Any], *, excluded_tracks: Iterable[str] = ()) -> Dict[str, Any]:
    sessions: pd.DataFrame = ctx.get("sessions", pd.DataFrame())
    if sessions.empty:
        return {"filters": asdict(filters), "tracks": [], "charts": {}}

    excluded = {t.strip() for t in excluded_tracks} if filters.main_tracks_only else set()
    track_series = text_column(sessions, INTERNAL_TRACK)
    tracks = [
        t
        for t in track_type_breakdown(sessions)
        if t["track"] != NO_TRACK and t["track"].strip() not in excluded
    ]
    tracks.sort(key=lambda t: t["track"])
    for track in tracks:
        track["sessions"] = session_summaries(sessions[track_series == track["track"]])

    charts: Dict[str, Any] = {}
    if tracks:
        chart_df = pd.DataFrame(
            [{"track": t["track"], "completion_pct": t["completion_pct"], "total": t["total"]} for t in tracks]
        )
        charts["completion_by_track"] = horizontal_bar(
            chart_df,
            value="completion_pct",
            label="track",
            value_title="Published %",
            label_title="Track",
            tooltip=["track", "completion_pct", "total"],
            domain=[0, 100],
            sort=None,
        )

    published_total = int(is_published(text_column(sessions, PUBLISHED)).sum())
    return {
        "filters": asdict(filters),
        "published_total": published_total,
        "tracks": tracks,
        "charts": charts,
    }
