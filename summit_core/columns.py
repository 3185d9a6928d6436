"""Column names of the session-management export and the TA roster.

Names are matched exactly: case and spacing are significant.
"""

from __future__ import annotations

from typing import List

SESSION_CODE = "SESSION CODE"
SESSION_TITLE = "SESSION TITLE"
SESSION_ABSTRACT = "SESSION ABSTRACT"
CFP_SESSION_TYPE = "CFP: SESSION TYPE"
INTERNAL_TRACK = "CFP: INTERNAL TRACK (SUMMIT)"
PUBLISHED = "PUBLISHED"
SESSION_STATUS = "SESSION STATUS"
PRODUCTS = "CFP: PRODUCTS"
SPEAKER1_NAME = "SPEAKER (ASSIGNED TO SESSION TASKS) NAME"
SPEAKER1_COMPANY = "SPEAKER (ASSIGNED TO SESSION TASKS) COMPANY"
SPEAKER2_NAME = "SPEAKER NAME"
SPEAKER2_COMPANY = "SPEAKER COMPANY"
TRACK_MANAGER = "TRACK MANAGER NAME"
SESSION_DATE = "SESSION DATE"
SESSION_START_TIME = "SESSION START TIME"
SESSION_END_TIME = "SESSION END TIME"
SESSION_ROOM = "SESSION ROOM"
SESSION_CAPACITY = "SESSION CAPACITY"
CATALOG_URL = "SESSION CATALOG URL"

DERIVED_SESSION_TYPE = "DERIVED_SESSION_TYPE"
HAS_OVERRIDE = "_HAS_WIP_OVERRIDE"

SESSION_COLUMNS: List[str] = [
    SESSION_CODE,
    SESSION_TITLE,
    SESSION_ABSTRACT,
    CFP_SESSION_TYPE,
    INTERNAL_TRACK,
    PUBLISHED,
    SESSION_STATUS,
    PRODUCTS,
    SPEAKER1_NAME,
    SPEAKER1_COMPANY,
    SPEAKER2_NAME,
    SPEAKER2_COMPANY,
    TRACK_MANAGER,
    SESSION_DATE,
    SESSION_START_TIME,
    SESSION_END_TIME,
    SESSION_ROOM,
    SESSION_CAPACITY,
    CATALOG_URL,
]

# TA roster headers (outer whitespace is trimmed on decode).
TA_TRACK = "Track"
TA_FIRST_NAME = "First Name"
TA_LAST_NAME = "Last Name"
TA_LABS = "Labs #s (EX: L129)"
TA_CONFIRMED = "Confirmed"
TA_NOMINATED_BY = "Nominated by: \n(EX: Instructor, TM)"
TA_NOTES = "Notes"
TA_SVP = "SVP (below Anil)"
TA_ETEAM = "Eteam (Anil or other)"

ROSTER_COLUMNS: List[str] = [
    TA_TRACK,
    TA_FIRST_NAME,
    TA_LAST_NAME,
    TA_LABS,
    TA_CONFIRMED,
    TA_NOMINATED_BY,
    TA_NOTES,
    TA_SVP,
    TA_ETEAM,
]
