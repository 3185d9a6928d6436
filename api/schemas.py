from __future__ import annotations

from typing import Optional

from pydantic import BaseModel


class DashboardFiltersModel(BaseModel):
    session_type: str = ""
    internal_track: str = ""
    published: str = ""
    session_status: str = ""
    products: str = ""
    show_overrides: bool = True
    main_tracks_only: bool = False


class OverrideFieldsModel(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    speaker1: Optional[str] = None
    speaker1Company: Optional[str] = None
    speaker2: Optional[str] = None
    speaker2Company: Optional[str] = None


class OverrideEnabledModel(BaseModel):
    enabled: bool
