"""Tests for CSV decoding and source loaders."""

import os

import pytest

from summit_core.columns import DERIVED_SESSION_TYPE, SESSION_CODE, SESSION_COLUMNS
from summit_core.config import Settings
from summit_core.data import (
    load_dashboard_data,
    load_roster,
    load_sessions,
    read_keyed_csv,
    round_half_up,
    split_list_field,
)
from summit_core.errors import DecodeError, MissingColumnsError


def test_read_keyed_csv_keeps_strings() -> None:
    df = read_keyed_csv(b"\xef\xbb\xbfSESSION CODE,CAP\nL1,007\n\n,NA\n")
    assert list(df.columns) == ["SESSION CODE", "CAP"]
    assert list(df["CAP"]) == ["007", "NA"]
    assert list(df["SESSION CODE"]) == ["L1", ""]


def test_read_keyed_csv_rejects_empty_and_binary() -> None:
    with pytest.raises(DecodeError):
        read_keyed_csv("")
    with pytest.raises(DecodeError):
        read_keyed_csv(b"\xff\xfe\x00bad")


def test_load_sessions_adds_expected_columns() -> None:
    sessions = load_sessions("SESSION CODE,PUBLISHED\nL1,Yes\n")
    for col in SESSION_COLUMNS:
        assert col in sessions.columns
    assert sessions.loc[0, DERIVED_SESSION_TYPE] == "Hands-on Lab"


def test_load_sessions_requires_code_column() -> None:
    with pytest.raises(MissingColumnsError) as excinfo:
        load_sessions("TITLE\nHello\n")
    assert "SESSION CODE" in str(excinfo.value)


def test_load_roster_requires_some_known_column() -> None:
    with pytest.raises(MissingColumnsError):
        load_roster("Name,Lab\nJane,L1\n")


def test_load_roster_trims_headers() -> None:
    tas = load_roster(" First Name , Last Name ,Labs #s (EX: L129),Confirmed\nJane,Doe,L1,yes\n")
    assert tas[0].full_name == "Jane Doe"
    assert tas[0].confirmed


def test_round_half_up() -> None:
    assert round_half_up(2.5) == 3
    assert round_half_up(0.125, 2) == 0.13
    assert round_half_up(None) is None


def test_split_list_field() -> None:
    assert split_list_field("A, B,,C ") == ["A", "B", "C"]
    assert split_list_field(None) == []


def test_load_dashboard_data_from_dir(tmp_path, session_csv, grid_csv, roster_csv) -> None:
    (tmp_path / "Summit Session Details 2026.csv").write_text(session_csv, encoding="utf-8")
    (tmp_path / "Summit Grid.csv").write_text(grid_csv, encoding="utf-8")
    (tmp_path / "Summit TA Roster.csv").write_text(roster_csv, encoding="utf-8")

    data = load_dashboard_data(Settings(data_dir=tmp_path))

    assert len(data.sessions) == 6
    assert len(data.schedule.venues) == 2
    assert set(data.lab_index) == {"L045", "L046"}
    assert len(data.files) == 3


def test_load_dashboard_data_picks_newest_export(tmp_path) -> None:
    old = tmp_path / "Session Details old.csv"
    new = tmp_path / "Session Details new.csv"
    old.write_text("SESSION CODE\nL1\n", encoding="utf-8")
    new.write_text("SESSION CODE\nL1\nL2\n", encoding="utf-8")
    os.utime(old, (1_000_000, 1_000_000))
    os.utime(new, (2_000_000, 2_000_000))

    data = load_dashboard_data(Settings(data_dir=tmp_path))

    assert list(data.sessions[SESSION_CODE]) == ["L1", "L2"]
    assert data.schedule is None
    assert data.tas == []


def test_load_dashboard_data_missing_dir(tmp_path) -> None:
    data = load_dashboard_data(Settings(data_dir=tmp_path / "absent"))
    assert data.sessions.empty
    assert data.schedule is None


def test_read_keyed_csv_drops_extra_trailing_fields() -> None:
    df = read_keyed_csv("SESSION CODE,PUBLISHED\nL1,Yes,stray\nS2,no\n")
    assert list(df.columns) == ["SESSION CODE", "PUBLISHED"]
    assert df.values.tolist() == [["L1", "Yes"], ["S2", "no"]]


def test_load_sessions_keeps_rows_with_extra_fields() -> None:
    sessions = load_sessions("SESSION CODE,PUBLISHED\nL1,Yes,,stray\n")
    assert list(sessions[SESSION_CODE]) == ["L1"]
    assert sessions.loc[0, DERIVED_SESSION_TYPE] == "Hands-on Lab"
