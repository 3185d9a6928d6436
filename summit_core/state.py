"""In-process dashboard state.

Each source is parsed completely before it replaces the current value, so a
failed or superseded upload never leaves a half-applied result behind.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import replace
from typing import Any, Dict, Optional

import pandas as pd

from summit_core.data import CsvSource, DashboardData, load_roster, load_schedule, load_sessions
from summit_core.filters import DashboardFilters, apply_filters
from summit_core.overrides import OverrideStore
from summit_core.roster import build_lab_index

logger = logging.getLogger(__name__)


class DashboardState:
    def __init__(self, data: Optional[DashboardData] = None) -> None:
        self._data = data or DashboardData()
        self._lock = threading.Lock()

    @property
    def data(self) -> DashboardData:
        return self._data

    def _swap(self, **changes: Any) -> DashboardData:
        with self._lock:
            self._data = replace(self._data, **changes)
            return self._data

    def upload_sessions(self, source: CsvSource) -> DashboardData:
        sessions = load_sessions(source)
        return self._swap(sessions=sessions)

    def upload_schedule(self, source: CsvSource) -> DashboardData:
        schedule = load_schedule(source)
        return self._swap(schedule=schedule)

    def upload_roster(self, source: CsvSource) -> DashboardData:
        tas = load_roster(source)
        return self._swap(tas=tas, lab_index=build_lab_index(tas))


def prepare_context(filters: DashboardFilters, data: DashboardData, store: OverrideStore) -> Dict[str, Any]:
    """Override-merged and filtered views handed to the compute_* functions."""
    sessions = data.sessions if data.sessions is not None else pd.DataFrame()
    merged = store.apply_all(sessions, filters.show_overrides)
    return {
        "sessions": merged,
        "filtered_sessions": apply_filters(merged, filters),
        "schedule": data.schedule,
        "tas": data.tas,
        "lab_index": data.lab_index,
        "override_store": store,
    }
