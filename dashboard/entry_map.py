from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Dict, Iterable, Optional

from dashboard.dates import parse_iso, to_iso

ENTRY_FIELDS = ("reflection", "plan_tomorrow", "outfit")


@dataclass(frozen=True)
class Entry:
    entry_date: str
    reflection: str = ""
    plan_tomorrow: str = ""
    outfit: str = ""
    updated_at: Optional[str] = None

    @classmethod
    def from_row(cls, row) -> "Entry":
        if isinstance(row, Entry):
            return row
        payload = dict(row or {})
        return cls(
            entry_date=to_iso(parse_iso(payload.get("entry_date"))),
            reflection=str(payload.get("reflection") or ""),
            plan_tomorrow=str(payload.get("plan_tomorrow") or ""),
            outfit=str(payload.get("outfit") or ""),
            updated_at=payload.get("updated_at"),
        )

    def fields(self) -> Dict[str, str]:
        return {key: getattr(self, key) for key in ENTRY_FIELDS}


class EntryMap:
    """Entries of one signed-in user keyed by ISO date."""

    def __init__(self, rows: Iterable = ()):
        self._lock = threading.Lock()
        self._entries: Dict[str, Entry] = {}
        if rows:
            self.load(rows)

    def load(self, rows: Iterable) -> None:
        fresh = {}
        for row in rows or ():
            entry = Entry.from_row(row)
            fresh[entry.entry_date] = entry
        with self._lock:
            self._entries = fresh

    def upsert(self, entry) -> Entry:
        entry = Entry.from_row(entry)
        with self._lock:
            entries = dict(self._entries)
            entries[entry.entry_date] = entry
            self._entries = entries
        return entry

    def get(self, iso_date) -> Optional[Entry]:
        key = iso_date if isinstance(iso_date, str) else to_iso(iso_date)
        return self._entries.get(key)

    def clear(self) -> None:
        with self._lock:
            self._entries = {}

    def done_dates(self) -> frozenset:
        return frozenset(self._entries)

    def entries_sorted(self, reverse: bool = False) -> list:
        snapshot = self._entries
        return [snapshot[key] for key in sorted(snapshot, reverse=reverse)]

    def __contains__(self, iso_date) -> bool:
        key = iso_date if isinstance(iso_date, str) else to_iso(iso_date)
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)
