from __future__ import annotations

import re
from dataclasses import asdict
from typing import Any, Dict, List, Optional

import pandas as pd

from summit_core.charts import horizontal_bar
from summit_core.columns import DERIVED_SESSION_TYPE, INTERNAL_TRACK, PUBLISHED, SESSION_STATUS, TRACK_MANAGER
from summit_core.data import is_published, round_half_up, text_column
from summit_core.filters import DashboardFilters

NO_TRACK = "No Track"
NO_TYPE = "No Type"
UNKNOWN_STATUS = "Unknown"

MANAGER_COMMA_RE = re.compile(r",(\S)")


def summarize(sessions: pd.DataFrame) -> Dict[str, Any]:
    """Totals and status counts. unpublished is derived so the totals always add up."""
    total = int(len(sessions))
    published = int(is_published(text_column(sessions, PUBLISHED)).sum())
    status = text_column(sessions, SESSION_STATUS).replace("", UNKNOWN_STATUS)
    status_counts = {str(k): int(v) for k, v in status.groupby(status, sort=False).size().items()}
    return {
        "total_sessions": total,
        "published_count": published,
        "unpublished_count": total - published,
        "status_counts": status_counts,
    }


def completion_pct(published: int, total: int) -> int:
    if not total:
        return 0
    return int(round_half_up(published / total * 100))


def format_manager_name(name: str) -> str:
    return MANAGER_COMMA_RE.sub(r", \1", name)


def most_common_manager(managers: pd.Series) -> Optional[str]:
    counts: Dict[str, int] = {}
    for name in managers:
        if name and name.strip():
            counts[name] = counts.get(name, 0) + 1
    if not counts:
        return None
    # max() keeps the first key on ties, i.e. the first-seen manager.
    return format_manager_name(max(counts, key=counts.get))


def track_type_breakdown(sessions: pd.DataFrame) -> List[Dict[str, Any]]:
    """Per track: totals, completion, manager, and a per-derived-type split."""
    if sessions.empty:
        return []
    frame = pd.DataFrame(
        {
            "track": text_column(sessions, INTERNAL_TRACK).replace("", NO_TRACK),
            "type": text_column(sessions, DERIVED_SESSION_TYPE).replace("", NO_TYPE),
            "published": is_published(text_column(sessions, PUBLISHED)),
            "manager": text_column(sessions, TRACK_MANAGER),
        }
    )
    out: List[Dict[str, Any]] = []
    for track, group in frame.groupby("track", sort=False):
        cells = group.groupby("type", sort=False)["published"].agg(total="size", published="sum").reset_index()
        types = [
            {
                "type": str(row["type"]),
                "total": int(row["total"]),
                "published": int(row["published"]),
                "unpublished": int(row["total"] - row["published"]),
            }
            for _, row in cells.iterrows()
        ]
        total = int(len(group))
        published = int(group["published"].sum())
        out.append(
            {
                "track": str(track),
                "manager": most_common_manager(group["manager"]),
                "total": total,
                "published": published,
                "unpublished": total - published,
                "completion_pct": completion_pct(published, total),
                "types": types,
            }
        )
    return out


def compute_overview(filters: DashboardFilters, ctx: Dict[str, Any]) -> Dict[str, Any]:
    sessions: pd.DataFrame = ctx.get("sessions", pd.DataFrame())
    kpis = summarize(sessions)
    tracks = track_type_breakdown(sessions)

    charts: Dict[str, Any] = {}
    if kpis["status_counts"]:
        status_df = pd.DataFrame(
            [{"status": k, "sessions": v} for k, v in kpis["status_counts"].items()]
        )
        charts["status_counts"] = horizontal_bar(
            status_df,
            value="sessions",
            label="status",
            value_title="Sessions",
            label_title="Status",
            tooltip=["status", "sessions"],
        )

    store = ctx.get("override_store")
    return {
        "filters": asdict(filters),
        "kpis": kpis,
        "tracks": tracks,
        "override_count": store.count() if store is not None else 0,
        "charts": charts,
    }
