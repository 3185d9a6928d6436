"""Manual (WIP) overrides layered over the session export.

Overrides are keyed by session code and kept in a small local key-value
store, so they survive re-uploads of a newer export. They are merged into a
copy of the session frame on read; the parsed export itself is never edited.
"""

from __future__ import annotations

import json
import logging
import re
import threading
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Protocol

import pandas as pd

from summit_core.columns import (
    HAS_OVERRIDE,
    SESSION_ABSTRACT,
    SESSION_CODE,
    SESSION_TITLE,
    SPEAKER1_COMPANY,
    SPEAKER1_NAME,
    SPEAKER2_COMPANY,
    SPEAKER2_NAME,
)

logger = logging.getLogger(__name__)

STORAGE_KEY = "summit-wip-sessions"

# Override bundle field -> session column it replaces.
OVERRIDE_FIELDS: Dict[str, str] = {
    "title": SESSION_TITLE,
    "description": SESSION_ABSTRACT,
    "speaker1": SPEAKER1_NAME,
    "speaker1Company": SPEAKER1_COMPANY,
    "speaker2": SPEAKER2_NAME,
    "speaker2Company": SPEAKER2_COMPANY,
}

GENERIC_TITLE_RE = re.compile(r"^[A-Za-z\s]+(Lab|Session|Theater)\s+\d+$", re.IGNORECASE)
TAG_RE = re.compile(r"<[^>]*>")
WIP_INDICATORS = (
    "placeholder",
    "tbd",
    "to be determined",
    "speakers tbd",
    "speaker tbd",
    "need speaker",
    "needs speaker",
    "need content",
    "needs content",
    "coming soon",
    "draft",
    "in progress",
    "wip",
)
SHORT_ABSTRACT_CHARS = 50


class Storage(Protocol):
    def get_item(self, key: str) -> Optional[str]:
        ...

    def set_item(self, key: str, value: str) -> None:
        ...


class InMemoryStorage:
    def __init__(self) -> None:
        self.items: Dict[str, str] = {}

    def get_item(self, key: str) -> Optional[str]:
        return self.items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self.items[key] = value


class JsonFileStorage:
    """Key-value strings persisted as one JSON object on disk."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def _read_all(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        items = json.loads(self.path.read_text(encoding="utf-8"))
        if not isinstance(items, dict):
            logger.error("Ignoring %s: expected a JSON object, got %s", self.path, type(items).__name__)
            return {}
        return items

    def get_item(self, key: str) -> Optional[str]:
        return self._read_all().get(key)

    def set_item(self, key: str, value: str) -> None:
        items = self._read_all()
        items[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp.write_text(json.dumps(items), encoding="utf-8")
        tmp.replace(self.path)


def is_wip_session(record: Mapping[str, Any]) -> bool:
    """Heuristic: does this session still carry placeholder content?"""
    title = str(record.get(SESSION_TITLE) or "")
    description = str(record.get(SESSION_ABSTRACT) or "")

    if GENERIC_TITLE_RE.match(title.strip()):
        return True
    lowered = description.lower()
    if any(indicator in lowered for indicator in WIP_INDICATORS):
        return True
    plain = TAG_RE.sub("", description).strip()
    return 0 < len(plain) < SHORT_ABSTRACT_CHARS


def _timestamp() -> str:
    return datetime.now(tz=UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class OverrideStore:
    """Session code -> edited fields, persisted under a single storage key."""

    def __init__(self, storage: Storage, key: str = STORAGE_KEY) -> None:
        self._storage = storage
        self._key = key
        self._lock = threading.RLock()

    def all(self) -> Dict[str, Dict[str, Any]]:
        try:
            stored = self._storage.get_item(self._key)
            overrides = json.loads(stored) if stored else {}
        except (OSError, TypeError, ValueError) as exc:
            logger.error("Error reading WIP data: %s", exc)
            return {}
        if not isinstance(overrides, dict):
            logger.error("Error reading WIP data: expected an object, got %s", type(overrides).__name__)
            return {}
        bad = [code for code, entry in overrides.items() if not isinstance(entry, dict)]
        for code in bad:
            logger.error("Error reading WIP data: dropping malformed override for %s", code)
            del overrides[code]
        return overrides

    def _write(self, overrides: Dict[str, Dict[str, Any]]) -> bool:
        try:
            self._storage.set_item(self._key, json.dumps(overrides))
        except (OSError, TypeError, ValueError) as exc:
            logger.error("Error saving WIP data: %s", exc)
            return False
        return True

    def save(self, code: str, fields: Mapping[str, Any]) -> bool:
        with self._lock:
            overrides = self.all()
            entry = {k: v for k, v in fields.items() if k not in ("updatedAt", "enabled")}
            previous = overrides.get(code) or {}
            if "enabled" in previous:
                entry["enabled"] = previous["enabled"]
            entry["updatedAt"] = _timestamp()
            overrides[code] = entry
            return self._write(overrides)

    def get(self, code: str) -> Optional[Dict[str, Any]]:
        return self.all().get(code) or None

    def has(self, code: str) -> bool:
        return bool(self.all().get(code))

    def delete(self, code: str) -> bool:
        with self._lock:
            overrides = self.all()
            overrides.pop(code, None)
            return self._write(overrides)

    def set_enabled(self, code: str, enabled: bool) -> bool:
        with self._lock:
            overrides = self.all()
            if code not in overrides:
                return False
            overrides[code] = {**overrides[code], "enabled": bool(enabled)}
            return self._write(overrides)

    def is_enabled(self, code: str) -> bool:
        entry = self.all().get(code) or {}
        return entry.get("enabled", True) is not False

    def count(self) -> int:
        return len(self.all())

    def apply_all(self, sessions: pd.DataFrame, show_overrides: bool = True) -> pd.DataFrame:
        """Merge enabled overrides into a copy of the session frame.

        With show_overrides off the input frame is returned as-is. Only
        non-empty override fields replace the exported value, and touched rows
        get the _HAS_WIP_OVERRIDE flag.
        """
        if not show_overrides:
            return sessions
        overrides = self.all()
        merged = sessions.copy()
        flags = pd.Series(False, index=merged.index, dtype=bool)
        if overrides and SESSION_CODE in merged.columns and not merged.empty:
            for column in OVERRIDE_FIELDS.values():
                if column not in merged.columns:
                    merged[column] = ""
            for idx, code in merged[SESSION_CODE].items():
                override = overrides.get(code)
                if not override or override.get("enabled", True) is False:
                    continue
                for key, column in OVERRIDE_FIELDS.items():
                    value = override.get(key)
                    if value:
                        merged.at[idx, column] = value
                flags.at[idx] = True
        merged[HAS_OVERRIDE] = flags
        return merged
