from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict

import pandas as pd

from summit_core.classify import SUMMIT_SESSION_TYPES, TRACK_SESSION_TYPES
from summit_core.columns import HAS_OVERRIDE, SESSION_CODE
from summit_core.filters import DashboardFilters, filter_options
from summit_core.metrics_overview import summarize
from summit_core.overrides import OverrideStore, is_wip_session


def compute_sessions(filters: DashboardFilters, ctx: Dict[str, Any]) -> Dict[str, Any]:
    sessions: pd.DataFrame = ctx.get("sessions", pd.DataFrame())
    filtered: pd.DataFrame = ctx.get("filtered_sessions", sessions)
    store: OverrideStore = ctx.get("override_store")

    overrides = store.all() if store is not None else {}
    records = []
    for record in filtered.to_dict(orient="records"):
        code = record.get(SESSION_CODE) or ""
        record["is_wip"] = is_wip_session(record)
        record["has_override"] = bool(code) and code in overrides
        record[HAS_OVERRIDE] = bool(record.get(HAS_OVERRIDE, False))
        records.append(record)

    return {
        "filters": asdict(filters),
        "options": {
            **filter_options(sessions),
            "track_session_types": TRACK_SESSION_TYPES,
            "summit_session_types": SUMMIT_SESSION_TYPES,
        },
        "kpis": summarize(filtered),
        "sessions": records,
    }
