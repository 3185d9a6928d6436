from __future__ import annotations

import io
import logging
import warnings
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from functools import lru_cache
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple, Union

import pandas as pd

from summit_core.classify import classify_sessions
from summit_core.columns import ROSTER_COLUMNS, SESSION_CODE, SESSION_COLUMNS, TA_FIRST_NAME, TA_LABS, TA_LAST_NAME
from summit_core.config import Settings, get_settings
from summit_core.errors import DecodeError, MissingColumnsError
from summit_core.roster import TARecord, build_lab_index, parse_roster
from summit_core.schedule import Schedule, parse_grid

logger = logging.getLogger(__name__)

CsvSource = Union[str, bytes, Path]

def _read_text(source: CsvSource) -> str:
    if isinstance(source, Path):
        raw = source.read_bytes()
    elif isinstance(source, bytes):
        raw = source
    else:
        return source
    try:
        return raw.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise DecodeError(f"CSV is not valid UTF-8: {exc}") from exc


def drop_duplicate_columns(df: pd.DataFrame) -> pd.DataFrame:
    return df.loc[:, ~df.columns.duplicated()]


def coerce_str_safe(df: pd.DataFrame, cols: Optional[Iterable[str]] = None) -> pd.DataFrame:
    """Make every (or every listed) column a plain string column with '' for missing."""
    for col in cols if cols is not None else list(df.columns):
        if col in df.columns:
            series = df[col]
            if isinstance(series, pd.DataFrame):
                series = series.iloc[:, 0]
            df[col] = series.where(series.notna(), "").astype(str)
    return df


def ensure_columns(df: pd.DataFrame, cols: Iterable[str]) -> pd.DataFrame:
    for col in cols:
        if col not in df.columns:
            df[col] = ""
    return df


def text_column(df: pd.DataFrame, col: str) -> pd.Series:
    """Column as strings, or an all-empty series aligned to df when absent."""
    if col not in df.columns:
        return pd.Series("", index=df.index, dtype=object)
    val = df[col]
    if isinstance(val, pd.DataFrame):
        val = val.iloc[:, 0]
    return val.where(val.notna(), "").astype(str)


def is_published(series: pd.Series) -> pd.Series:
    return series.fillna("").astype(str).str.lower().eq("yes")


def round_half_up(value: object, ndigits: int = 0) -> Optional[float]:
    if value is None or pd.isna(value):
        return None
    q = Decimal(10) ** -ndigits
    return float(Decimal(str(value)).quantize(q, rounding=ROUND_HALF_UP))


def split_list_field(value: object) -> List[str]:
    """'A, B,,C ' -> ['A', 'B', 'C']."""
    if value is None or (isinstance(value, float) and pd.isna(value)):
        return []
    return [part.strip() for part in str(value).split(",") if part.strip()]


# ---------------- Decoders ----------------
def _keep_long_row(bad_line: List[str]) -> List[str]:
    return bad_line


def read_keyed_csv(source: CsvSource, *, trim_headers: bool = False) -> pd.DataFrame:
    """Header-keyed CSV -> all-string DataFrame. Empty lines are skipped.

    Fields past the header width are dropped rather than failing the file.
    """
    text = _read_text(source)
    try:
        with warnings.catch_warnings():
            warnings.simplefilter("ignore", pd.errors.ParserWarning)
            df = pd.read_csv(
                io.StringIO(text),
                dtype=str,
                keep_default_na=False,
                skip_blank_lines=True,
                index_col=False,
                engine="python",
                on_bad_lines=_keep_long_row,
            )
    except pd.errors.EmptyDataError as exc:
        raise DecodeError("CSV is empty") from exc
    except pd.errors.ParserError as exc:
        raise DecodeError(f"Malformed CSV: {exc}") from exc
    if trim_headers:
        df.columns = [str(c).strip() for c in df.columns]
    df = drop_duplicate_columns(df)
    return coerce_str_safe(df)


def read_grid_matrix(source: CsvSource) -> List[List[str]]:
    """Header-less CSV -> list of rows of raw cell strings.

    Rows with every cell blank are dropped before positional indexing. Short
    rows are padded with ''. Cells past the first row's width are cut, since
    no time slot can live there.
    """
    text = _read_text(source)
    try:
        with warnings.catch_warnings():
            warnings.simplefilter("ignore", pd.errors.ParserWarning)
            df = pd.read_csv(
                io.StringIO(text),
                header=None,
                dtype=str,
                keep_default_na=False,
                skip_blank_lines=True,
                engine="python",
                on_bad_lines=_keep_long_row,
            )
    except pd.errors.EmptyDataError:
        return []
    except pd.errors.ParserError as exc:
        raise DecodeError(f"Malformed schedule grid CSV: {exc}") from exc
    df = df.fillna("").astype(str)
    blank = df.apply(lambda row: row.str.strip().eq("").all(), axis=1)
    df = df[~blank]
    return df.values.tolist()


# ---------------- Loaders ----------------
def load_sessions(source: CsvSource) -> pd.DataFrame:
    """Session export -> classified session frame."""
    raw = read_keyed_csv(source)
    if SESSION_CODE not in raw.columns:
        raise MissingColumnsError("Session export", [SESSION_CODE])
    raw = ensure_columns(raw, SESSION_COLUMNS)
    sessions = classify_sessions(raw)
    logger.info("loaded %d sessions", len(sessions))
    return sessions


def load_schedule(source: CsvSource) -> Schedule:
    schedule = parse_grid(read_grid_matrix(source))
    logger.info("loaded schedule: %d time slots, %d venues", len(schedule.time_slots), len(schedule.venues))
    return schedule


def load_roster(source: CsvSource) -> List[TARecord]:
    raw = read_keyed_csv(source, trim_headers=True)
    if not any(c in raw.columns for c in (TA_FIRST_NAME, TA_LAST_NAME, TA_LABS)):
        raise MissingColumnsError("TA roster", [TA_FIRST_NAME, TA_LAST_NAME, TA_LABS])
    raw = ensure_columns(raw, ROSTER_COLUMNS)
    records = parse_roster(raw.to_dict(orient="records"))
    logger.info("loaded %d TA records", len(records))
    return records


# ---------------- Disk loading (cached by file signature) ----------------
def latest_file(data_dir: Path, pattern: str) -> Optional[Path]:
    files = sorted(data_dir.glob(pattern), key=lambda p: (p.stat().st_mtime, p.name))
    return files[-1] if files else None


def file_signature(files: Iterable[Optional[Path]]) -> Tuple[Tuple[str, float], ...]:
    return tuple((str(f), f.stat().st_mtime) if f is not None else ("", 0.0) for f in files)


@dataclass(frozen=True)
class DashboardData:
    sessions: pd.DataFrame = field(default_factory=pd.DataFrame)
    schedule: Optional[Schedule] = None
    tas: List[TARecord] = field(default_factory=list)
    lab_index: Dict[str, List[TARecord]] = field(default_factory=dict)
    files: List[str] = field(default_factory=list)


@lru_cache(maxsize=4)
def _load_dashboard_data_cached(files_sig: Tuple[Tuple[str, float], ...]) -> DashboardData:
    sessions_path, grid_path, roster_path = (Path(name) if name else None for name, _ in files_sig)
    sessions = load_sessions(sessions_path) if sessions_path else pd.DataFrame(columns=SESSION_COLUMNS)
    schedule = load_schedule(grid_path) if grid_path else None
    tas = load_roster(roster_path) if roster_path else []
    return DashboardData(
        sessions=sessions,
        schedule=schedule,
        tas=tas,
        lab_index=build_lab_index(tas),
        files=[name for name, _ in files_sig if name],
    )


def load_dashboard_data(settings: Optional[Settings] = None) -> DashboardData:
    """Read the newest session export, grid and roster found in the data dir."""
    settings = settings or get_settings()
    data_dir = settings.data_dir
    if not data_dir.is_dir():
        logger.info("data dir %s does not exist; starting empty", data_dir)
        return DashboardData(sessions=pd.DataFrame(columns=SESSION_COLUMNS))
    grid = latest_file(data_dir, settings.grid_glob)
    roster = latest_file(data_dir, settings.roster_glob)
    sessions = latest_file(data_dir, settings.sessions_glob)
    return _load_dashboard_data_cached(file_signature([sessions, grid, roster]))
