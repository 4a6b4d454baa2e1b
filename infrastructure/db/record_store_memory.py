from __future__ import annotations

from typing import Dict, Optional

from domain.repositories import RecordStore


class InMemoryRecordStore(RecordStore):
    """Dict-backed `RecordStore`. Nothing survives the process."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self.records: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self.records.get(key)

    def set(self, key: str, value: str) -> None:
        self.records[key] = value

    def remove(self, key: str) -> None:
        self.records.pop(key, None)
