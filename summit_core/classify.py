from __future__ import annotations

import logging
from typing import List, Literal, Mapping, Optional, Tuple

import pandas as pd

from summit_core.columns import CFP_SESSION_TYPE, DERIVED_SESSION_TYPE, SESSION_CODE

logger = logging.getLogger(__name__)

DerivedType = Literal[
    "Online Session",
    "Session",
    "Hands-on Lab",
    "Certification Exam",
    "Community Theater",
    "Keynote",
    "Sneaks",
    "Strategy Keynote",
    "Pre-conference Training",
    "Skill Exchange",
    "Other",
]

ONLINE_SESSION = "Online Session"
SESSION = "Session"
HANDS_ON_LAB = "Hands-on Lab"
CERTIFICATION_EXAM = "Certification Exam"
COMMUNITY_THEATER = "Community Theater"
KEYNOTE = "Keynote"
SNEAKS = "Sneaks"
STRATEGY_KEYNOTE = "Strategy Keynote"
PRE_CONFERENCE_TRAINING = "Pre-conference Training"
SKILL_EXCHANGE = "Skill Exchange"
OTHER = "Other"

SESSION_TYPES: Tuple[str, ...] = (
    ONLINE_SESSION,
    SESSION,
    HANDS_ON_LAB,
    CERTIFICATION_EXAM,
    COMMUNITY_THEATER,
    KEYNOTE,
    SNEAKS,
    STRATEGY_KEYNOTE,
    PRE_CONFERENCE_TRAINING,
    SKILL_EXCHANGE,
    OTHER,
)

# Grouping used by session list filters.
TRACK_SESSION_TYPES: List[str] = [COMMUNITY_THEATER, HANDS_ON_LAB, SESSION, ONLINE_SESSION]
SUMMIT_SESSION_TYPES: List[str] = [
    CERTIFICATION_EXAM,
    KEYNOTE,
    STRATEGY_KEYNOTE,
    SNEAKS,
    SKILL_EXCHANGE,
    PRE_CONFERENCE_TRAINING,
    OTHER,
]

# Checked in order; SK must precede S.
CODE_PREFIX_RULES: List[Tuple[str, str]] = [
    ("OS", ONLINE_SESSION),
    ("SK", STRATEGY_KEYNOTE),
    ("S", SESSION),
    ("L", HANDS_ON_LAB),
    ("CERT", CERTIFICATION_EXAM),
    ("CP", COMMUNITY_THEATER),
    ("TRN", PRE_CONFERENCE_TRAINING),
]

EXACT_CODE_RULES = {
    "GS1": KEYNOTE,
    "GS2": KEYNOTE,
    "GS3": SNEAKS,
}

SKILL_EXCHANGE_MARKER = "Skill Exchange"


def _as_text(value: object) -> str:
    if value is None or (isinstance(value, float) and pd.isna(value)):
        return ""
    return str(value)


def type_from_code(code: Optional[str]) -> str:
    code = _as_text(code)
    if code in EXACT_CODE_RULES:
        return EXACT_CODE_RULES[code]
    for prefix, derived in CODE_PREFIX_RULES:
        if code.startswith(prefix):
            return derived
    return OTHER


def derive_session_type(code: Optional[str], cfp_session_type: Optional[str]) -> str:
    derived = type_from_code(code)
    if SKILL_EXCHANGE_MARKER in _as_text(cfp_session_type):
        return SKILL_EXCHANGE
    return derived


def classify(record: Mapping[str, object]) -> str:
    """Derived session type of one raw export row. Total: defaults to Other."""
    return derive_session_type(record.get(SESSION_CODE), record.get(CFP_SESSION_TYPE))


def classify_sessions(raw: pd.DataFrame) -> pd.DataFrame:
    """Return a copy of the export with DERIVED_SESSION_TYPE appended.

    The input frame is not modified.
    """
    out = raw.copy()
    if out.empty:
        out[DERIVED_SESSION_TYPE] = pd.Series(dtype=object)
        return out
    codes = out[SESSION_CODE] if SESSION_CODE in out.columns else pd.Series("", index=out.index)
    cfp_types = out[CFP_SESSION_TYPE] if CFP_SESSION_TYPE in out.columns else pd.Series("", index=out.index)
    out[DERIVED_SESSION_TYPE] = [derive_session_type(c, t) for c, t in zip(codes, cfp_types)]
    logger.debug("classified %d sessions", len(out))
    return out
