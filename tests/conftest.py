"""Shared test fixtures."""

from typing import Dict, List

import pandas as pd
import pytest

from summit_core.columns import (
    CFP_SESSION_TYPE,
    INTERNAL_TRACK,
    PRODUCTS,
    PUBLISHED,
    SESSION_ABSTRACT,
    SESSION_CODE,
    SESSION_STATUS,
    SESSION_TITLE,
    SPEAKER1_COMPANY,
    SPEAKER1_NAME,
    SPEAKER2_COMPANY,
    SPEAKER2_NAME,
    TA_CONFIRMED,
    TA_FIRST_NAME,
    TA_LABS,
    TA_LAST_NAME,
    TA_NOMINATED_BY,
    TA_TRACK,
    TRACK_MANAGER,
)
from summit_core.data import load_roster, load_sessions
from summit_core.overrides import InMemoryStorage, OverrideStore
from summit_core.roster import TARecord

LONG_ABSTRACT = (
    "<p>Learn how to build end-to-end commerce experiences with real customer data, "
    "reusable components and production-grade deployment pipelines.</p>"
)

SESSION_ROWS: List[Dict[str, str]] = [
    {
        SESSION_CODE: "L045",
        SESSION_TITLE: "Composable storefronts in practice",
        SESSION_ABSTRACT: LONG_ABSTRACT,
        CFP_SESSION_TYPE: "Hands-on Lab",
        INTERNAL_TRACK: "Commerce",
        PUBLISHED: "Yes",
        SESSION_STATUS: "Accepted",
        PRODUCTS: "Commerce, Analytics",
        SPEAKER1_NAME: "Jane Doe",
        SPEAKER1_COMPANY: "Acme,Acme",
        SPEAKER2_NAME: "",
        SPEAKER2_COMPANY: "",
        TRACK_MANAGER: "Smith,John",
    },
    {
        SESSION_CODE: "S100",
        SESSION_TITLE: "Commerce Session 2",
        SESSION_ABSTRACT: "Speakers TBD",
        CFP_SESSION_TYPE: "Session",
        INTERNAL_TRACK: "Commerce",
        PUBLISHED: "no",
        SESSION_STATUS: "Accepted",
        PRODUCTS: "Commerce",
        SPEAKER1_NAME: "Bob Lee",
        SPEAKER1_COMPANY: "Globex",
        SPEAKER2_NAME: "Ann Doe",
        SPEAKER2_COMPANY: "Initech, Initech",
        TRACK_MANAGER: "Smith,John",
    },
    {
        SESSION_CODE: "SK01",
        SESSION_TITLE: "Strategy for the agentic web",
        SESSION_ABSTRACT: LONG_ABSTRACT,
        CFP_SESSION_TYPE: "Strategy Keynote",
        INTERNAL_TRACK: "Strategy Keynote",
        PUBLISHED: "YES",
        SESSION_STATUS: "",
        PRODUCTS: "",
        SPEAKER1_NAME: "",
        SPEAKER1_COMPANY: "",
        SPEAKER2_NAME: "",
        SPEAKER2_COMPANY: "",
        TRACK_MANAGER: "",
    },
    {
        SESSION_CODE: "OS200",
        SESSION_TITLE: "Swap your best dashboards",
        SESSION_ABSTRACT: LONG_ABSTRACT,
        CFP_SESSION_TYPE: "Online Skill Exchange",
        INTERNAL_TRACK: "Skill Exchange",
        PUBLISHED: "",
        SESSION_STATUS: "Submitted",
        PRODUCTS: "Analytics",
        SPEAKER1_NAME: "",
        SPEAKER1_COMPANY: "",
        SPEAKER2_NAME: "",
        SPEAKER2_COMPANY: "",
        TRACK_MANAGER: "",
    },
    {
        SESSION_CODE: "L046",
        SESSION_TITLE: "Attribution modeling lab",
        SESSION_ABSTRACT: LONG_ABSTRACT,
        CFP_SESSION_TYPE: "Hands-on Lab",
        INTERNAL_TRACK: "Analytics",
        PUBLISHED: "yes",
        SESSION_STATUS: "Accepted",
        PRODUCTS: "Analytics",
        SPEAKER1_NAME: "Carl Zed",
        SPEAKER1_COMPANY: "Acme",
        SPEAKER2_NAME: "",
        SPEAKER2_COMPANY: "",
        TRACK_MANAGER: "Doe,Ann",
    },
    {
        SESSION_CODE: "GS1",
        SESSION_TITLE: "Opening keynote",
        SESSION_ABSTRACT: LONG_ABSTRACT,
        CFP_SESSION_TYPE: "Keynote",
        INTERNAL_TRACK: "",
        PUBLISHED: "Y",
        SESSION_STATUS: "",
        PRODUCTS: "",
        SPEAKER1_NAME: "",
        SPEAKER1_COMPANY: "",
        SPEAKER2_NAME: "",
        SPEAKER2_COMPANY: "",
        TRACK_MANAGER: "",
    },
]

ROSTER_ROWS: List[Dict[str, str]] = [
    {TA_TRACK: "Analytics (4)", TA_FIRST_NAME: "", TA_LAST_NAME: "", TA_LABS: "", TA_CONFIRMED: ""},
    {TA_TRACK: "Commerce", TA_FIRST_NAME: "Jane", TA_LAST_NAME: "Doe", TA_LABS: "L045, l046, X12", TA_CONFIRMED: "Yes"},
    {TA_TRACK: "Commerce", TA_FIRST_NAME: "Bob", TA_LAST_NAME: "Lee", TA_LABS: "L045", TA_CONFIRMED: "y"},
    {TA_TRACK: "Commerce", TA_FIRST_NAME: "Eve", TA_LAST_NAME: "Ray", TA_LABS: "", TA_CONFIRMED: "yes"},
    {TA_TRACK: "Commerce", TA_FIRST_NAME: "", TA_LAST_NAME: "", TA_LABS: "L045", TA_CONFIRMED: "no"},
    {TA_TRACK: "Commerce", TA_FIRST_NAME: "Dana", TA_LAST_NAME: "Fox", TA_LABS: "L045", TA_CONFIRMED: "TRUE"},
]

GRID_MATRIX: List[List[str]] = [
    ["", "", "", "", "Sessions #1", "Sessions #2", "Labs #2", "Strategy Keynote #3", "Sessions #12"],
    ["", "", "", "", "9:00 AM", "10:00 AM", "1:00 PM", "3:00 PM", "5:00 PM"],
    ["Room", "Setup", "", "", "", "", "", "", ""],
    ["Palazzo A CAP: 250", "", "", "", "S100: Commerce deep dive", "S200", "L300 - hold", "SK01", ""],
    ["Speakers", "", "", "", "Jane Doe", "", "", "", ""],
    ["Lido 3001 CAP 120", "", "", "", "OPEN", "S200", "TBD repeat", "", "Do not schedule"],
    ["Random notes row", "", "", "", "S999", "", "", "", ""],
    ["LABS", "", "", "", "", "", "", "", ""],
]


def frame_to_csv(rows: List[Dict[str, str]]) -> str:
    return pd.DataFrame(rows).to_csv(index=False)


@pytest.fixture
def session_csv() -> str:
    return frame_to_csv(SESSION_ROWS)


@pytest.fixture
def sessions(session_csv: str) -> pd.DataFrame:
    return load_sessions(session_csv)


@pytest.fixture
def roster_csv() -> str:
    rows = []
    for row in ROSTER_ROWS:
        rows.append({**row, TA_NOMINATED_BY: "Instructor", " Notes ": ""})
    return frame_to_csv(rows)


@pytest.fixture
def tas(roster_csv: str) -> List[TARecord]:
    return load_roster(roster_csv)


@pytest.fixture
def grid_matrix() -> List[List[str]]:
    return [list(row) for row in GRID_MATRIX]


@pytest.fixture
def grid_csv() -> str:
    return pd.DataFrame(GRID_MATRIX).to_csv(index=False, header=False)


@pytest.fixture
def store() -> OverrideStore:
    return OverrideStore(InMemoryStorage())
