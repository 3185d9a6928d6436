from __future__ import annotations

from typing import Iterable


class DashboardDataError(Exception):
    """Base error for anything that stops an uploaded file from being used."""


class DecodeError(DashboardDataError):
    """CSV text could not be decoded into rows."""


class StructuralError(DashboardDataError):
    """Rows decoded fine but do not have the expected shape."""


class MalformedGridError(StructuralError):
    pass


class MissingColumnsError(StructuralError):
    def __init__(self, source: str, missing: Iterable[str]) -> None:
        self.source = source
        self.missing = list(missing)
        super().__init__(f"{source} is missing expected column(s): {', '.join(self.missing)}")
