from __future__ import annotations

from dataclasses import asdict
import logging
import math
import threading
from typing import Literal, Optional

import numpy as np
import pandas as pd
from fastapi import Depends, FastAPI, Query, Request
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.schemas import DashboardFiltersModel, OverrideEnabledModel, OverrideFieldsModel
from summit_core.app_logging import configure_logging
from summit_core.config import get_settings
from summit_core.data import load_dashboard_data
from summit_core.errors import DashboardDataError
from summit_core.filters import DashboardFilters, filter_options, normalize_filters
from summit_core.metrics_overview import compute_overview
from summit_core.metrics_products import compute_products
from summit_core.metrics_schedule import compute_cell_details, compute_conflicts, compute_schedule
from summit_core.metrics_sessions import compute_sessions
from summit_core.metrics_speakers import compute_speakers
from summit_core.metrics_staffing import compute_staffing
from summit_core.metrics_tracks import compute_tracks
from summit_core.overrides import JsonFileStorage, OverrideStore
from summit_core.state import DashboardState, prepare_context
from summit_core.xref import resolve_lab

configure_logging(get_settings().log_level)

app = FastAPI(title="Summit Session Dashboard API", version="0.1.0")
logger = logging.getLogger(__name__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000", "http://127.0.0.1:3000", "http://localhost:5173"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

_state: Optional[DashboardState] = None
_store: Optional[OverrideStore] = None
_init_lock = threading.Lock()


def get_state() -> DashboardState:
    global _state
    with _init_lock:
        if _state is None:
            try:
                _state = DashboardState(load_dashboard_data())
            except DashboardDataError:
                logger.exception("initial data load failed; starting empty")
                _state = DashboardState()
        return _state


def get_store() -> OverrideStore:
    global _store
    with _init_lock:
        if _store is None:
            _store = OverrideStore(JsonFileStorage(get_settings().resolved_overrides_path()))
        return _store


def _filters_from_model(model: DashboardFiltersModel) -> DashboardFilters:
    return normalize_filters(model.model_dump())


def _json(data: object) -> JSONResponse:
    """Return JSON with safe encoding for pandas/numpy objects."""

    def _safe_float(value: object) -> float | None:
        try:
            out = float(value)  # type: ignore[arg-type]
        except Exception:
            return None
        if math.isnan(out) or math.isinf(out):
            return None
        return out

    return JSONResponse(
        content=jsonable_encoder(
            data,
            custom_encoder={
                type(pd.NA): lambda _: None,
                np.integer: int,
                float: _safe_float,
                np.floating: _safe_float,
                np.bool_: bool,
                np.ndarray: lambda arr: arr.tolist(),
            },
        )
    )


def _failure(name: str, exc: Exception) -> JSONResponse:
    if isinstance(exc, DashboardDataError):
        logger.warning("%s rejected: %s", name, exc)
        return JSONResponse(status_code=400, content={"error": str(exc), "type": type(exc).__name__})
    logger.exception("%s failed", name)
    return JSONResponse(status_code=500, content={"error": str(exc), "type": type(exc).__name__})


# ---------------- Uploads ----------------
@app.post("/upload/sessions")
async def upload_sessions(request: Request, state: DashboardState = Depends(get_state)):
    body = await request.body()
    try:
        data = state.upload_sessions(body)
        return _json({"source": "sessions", "rows": int(len(data.sessions))})
    except Exception as exc:
        return _failure("upload_sessions", exc)


@app.post("/upload/schedule")
async def upload_schedule(request: Request, state: DashboardState = Depends(get_state)):
    body = await request.body()
    try:
        data = state.upload_schedule(body)
        return _json({"source": "schedule", "rows": len(data.schedule.venues), "days": data.schedule.days})
    except Exception as exc:
        return _failure("upload_schedule", exc)


@app.post("/upload/roster")
async def upload_roster(request: Request, state: DashboardState = Depends(get_state)):
    body = await request.body()
    try:
        data = state.upload_roster(body)
        return _json({"source": "roster", "rows": len(data.tas), "labs": len(data.lab_index)})
    except Exception as exc:
        return _failure("upload_roster", exc)


# ---------------- Pages ----------------
@app.get("/meta/filters")
def meta_filters(state: DashboardState = Depends(get_state)):
    try:
        return _json(filter_options(state.data.sessions))
    except Exception as exc:
        return _failure("meta_filters", exc)


@app.post("/overview")
def overview(
    filters: DashboardFiltersModel,
    state: DashboardState = Depends(get_state),
    store: OverrideStore = Depends(get_store),
):
    try:
        f = _filters_from_model(filters)
        ctx = prepare_context(f, state.data, store)
        return _json(compute_overview(f, ctx))
    except Exception as exc:
        return _failure("overview", exc)


@app.post("/sessions")
def sessions(
    filters: DashboardFiltersModel,
    state: DashboardState = Depends(get_state),
    store: OverrideStore = Depends(get_store),
):
    try:
        f = _filters_from_model(filters)
        ctx = prepare_context(f, state.data, store)
        return _json(compute_sessions(f, ctx))
    except Exception as exc:
        return _failure("sessions", exc)


@app.post("/tracks")
def tracks(
    filters: DashboardFiltersModel,
    state: DashboardState = Depends(get_state),
    store: OverrideStore = Depends(get_store),
):
    try:
        f = _filters_from_model(filters)
        ctx = prepare_context(f, state.data, store)
        return _json(compute_tracks(f, ctx, excluded_tracks=get_settings().excluded_tracks))
    except Exception as exc:
        return _failure("tracks", exc)


@app.post("/products")
def products(
    filters: DashboardFiltersModel,
    state: DashboardState = Depends(get_state),
    store: OverrideStore = Depends(get_store),
):
    try:
        f = _filters_from_model(filters)
        ctx = prepare_context(f, state.data, store)
        return _json(compute_products(f, ctx, master_products=get_settings().master_products))
    except Exception as exc:
        return _failure("products", exc)


@app.post("/speakers")
def speakers(
    filters: DashboardFiltersModel,
    company: str = Query(default=""),
    track: str = Query(default=""),
    session_type: str = Query(default=""),
    state: DashboardState = Depends(get_state),
    store: OverrideStore = Depends(get_store),
):
    try:
        f = _filters_from_model(filters)
        ctx = prepare_context(f, state.data, store)
        return _json(compute_speakers(f, ctx, company=company, track=track, session_type=session_type))
    except Exception as exc:
        return _failure("speakers", exc)


@app.post("/staffing")
def staffing(
    filters: DashboardFiltersModel,
    state: DashboardState = Depends(get_state),
    store: OverrideStore = Depends(get_store),
):
    try:
        f = _filters_from_model(filters)
        ctx = prepare_context(f, state.data, store)
        return _json(compute_staffing(f, ctx))
    except Exception as exc:
        return _failure("staffing", exc)


@app.get("/staffing/{lab_code}")
def staffing_lab(lab_code: str, state: DashboardState = Depends(get_state)):
    try:
        lab = resolve_lab(lab_code, state.data.sessions, state.data.lab_index)
        return _json(asdict(lab))
    except Exception as exc:
        return _failure("staffing_lab", exc)


@app.get("/schedule")
def schedule(
    day: Optional[str] = Query(default=None),
    slot_type: Optional[Literal["Session", "Lab", "Strategy Keynote"]] = Query(default=None, alias="type"),
    state: DashboardState = Depends(get_state),
):
    try:
        ctx = {"schedule": state.data.schedule}
        return _json(compute_schedule(ctx, day=day, slot_type=slot_type))
    except Exception as exc:
        return _failure("schedule", exc)


@app.get("/schedule/conflicts")
def schedule_conflicts(state: DashboardState = Depends(get_state)):
    try:
        return _json(compute_conflicts({"schedule": state.data.schedule}))
    except Exception as exc:
        return _failure("schedule_conflicts", exc)


@app.get("/schedule/cell/{code}")
def schedule_cell(
    code: str,
    show_overrides: bool = Query(default=True),
    state: DashboardState = Depends(get_state),
    store: OverrideStore = Depends(get_store),
):
    try:
        f = DashboardFilters(show_overrides=show_overrides)
        ctx = prepare_context(f, state.data, store)
        return _json(compute_cell_details(ctx, code))
    except Exception as exc:
        return _failure("schedule_cell", exc)


# ---------------- Overrides ----------------
@app.get("/overrides")
def list_overrides(store: OverrideStore = Depends(get_store)):
    overrides = store.all()
    return _json({"count": len(overrides), "overrides": overrides})


@app.get("/overrides/{code}")
def get_override(code: str, store: OverrideStore = Depends(get_store)):
    override = store.get(code)
    if override is None:
        return JSONResponse(status_code=404, content={"error": f"No override for {code}", "type": "NotFound"})
    return _json({"code": code, "override": override, "enabled": store.is_enabled(code)})


@app.put("/overrides/{code}")
def save_override(code: str, fields: OverrideFieldsModel, store: OverrideStore = Depends(get_store)):
    saved = store.save(code, fields.model_dump(exclude_none=True))
    if not saved:
        return JSONResponse(status_code=507, content={"error": "Override could not be saved", "type": "StorageError"})
    return _json({"code": code, "override": store.get(code)})


@app.delete("/overrides/{code}")
def delete_override(code: str, store: OverrideStore = Depends(get_store)):
    return _json({"code": code, "deleted": store.delete(code)})


@app.post("/overrides/{code}/enabled")
def set_override_enabled(code: str, body: OverrideEnabledModel, store: OverrideStore = Depends(get_store)):
    if not store.has(code):
        return JSONResponse(status_code=404, content={"error": f"No override for {code}", "type": "NotFound"})
    updated = store.set_enabled(code, body.enabled)
    return _json({"code": code, "enabled": store.is_enabled(code), "updated": updated})
