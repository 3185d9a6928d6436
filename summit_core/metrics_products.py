from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict, Iterable, List, Optional

import pandas as pd

from summit_core.classify import HANDS_ON_LAB
from summit_core.columns import (
    DERIVED_SESSION_TYPE,
    HAS_OVERRIDE,
    INTERNAL_TRACK,
    PRODUCTS,
    PUBLISHED,
    SESSION_CODE,
    SESSION_TITLE,
    SPEAKER1_COMPANY,
    SPEAKER1_NAME,
    SPEAKER2_COMPANY,
    SPEAKER2_NAME,
)
from summit_core.data import split_list_field, text_column
from summit_core.filters import DashboardFilters
from summit_core.metrics_speakers import clean_company_name
from summit_core.overrides import OverrideStore, is_wip_session


def lab_card(record: Dict[str, Any], overrides: Optional[Dict[str, Dict[str, Any]]] = None) -> Dict[str, Any]:
    code = record.get(SESSION_CODE) or ""
    speakers = [
        {"name": record[name_col], "company": clean_company_name(record.get(company_col))}
        for name_col, company_col in ((SPEAKER1_NAME, SPEAKER1_COMPANY), (SPEAKER2_NAME, SPEAKER2_COMPANY))
        if record.get(name_col)
    ]
    entry = (overrides or {}).get(code) if code else None
    return {
        "session_code": code,
        "title": record.get(SESSION_TITLE) or "Untitled",
        "track": record.get(INTERNAL_TRACK) or "",
        "published": str(record.get(PUBLISHED) or "").lower() == "yes",
        "products": split_list_field(record.get(PRODUCTS)),
        "speakers": speakers,
        "is_wip": is_wip_session(record),
        "has_override": bool(entry),
        "override_enabled": bool(entry) and entry.get("enabled", True) is not False,
        "override_applied": bool(record.get(HAS_OVERRIDE, False)),
    }


def product_rollup(sessions: pd.DataFrame) -> Dict[str, List[Dict[str, Any]]]:
    """Product -> labs listing it. A lab appears under every product it names."""
    rollup: Dict[str, List[Dict[str, Any]]] = {}
    if sessions.empty:
        return rollup
    labs = sessions[text_column(sessions, DERIVED_SESSION_TYPE).eq(HANDS_ON_LAB)]
    for record in labs.to_dict(orient="records"):
        for product in split_list_field(record.get(PRODUCTS)):
            rollup.setdefault(product, []).append(record)
    return rollup


def products_without_labs(rollup: Dict[str, List[Dict[str, Any]]], master_products: Iterable[str]) -> List[str]:
    return sorted(set(master_products) - set(rollup))


def compute_products(
    filters: DashboardFilters,
    ctx: Dict[str, Any],
    *,
    master_products: Iterable[str] = (),
) -> Dict[str, Any]:
    sessions: pd.DataFrame = ctx.get("sessions", pd.DataFrame())
    store: Optional[OverrideStore] = ctx.get("override_store")
    overrides = store.all() if store is not None else {}
    rollup = product_rollup(sessions)
    products = [
        {"name": name, "lab_count": len(labs), "labs": [lab_card(r, overrides) for r in labs]}
        for name, labs in sorted(rollup.items())
    ]
    return {
        "filters": asdict(filters),
        "products": products,
        "products_without_labs": products_without_labs(rollup, master_products),
        "override_count": store.count() if store is not None else 0,
    }
