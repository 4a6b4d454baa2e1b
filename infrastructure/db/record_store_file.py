from __future__ import annotations

from pathlib import Path
from typing import Optional

from domain.repositories import RecordStore


class FileRecordStore(RecordStore):
    """
    Directory-backed implementation of `RecordStore`.

    Each key lives in its own `<key>.json` file under `root_dir`. The
    directory is created on first write.
    """

    def __init__(self, root_dir: str) -> None:
        self._root = Path(root_dir)

    def _path_for(self, key: str) -> Path:
        return self._root / f"{key}.json"

    def get(self, key: str) -> Optional[str]:
        path = self._path_for(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set(self, key: str, value: str) -> None:
        self._root.mkdir(parents=True, exist_ok=True)
        path = self._path_for(key)
        # Write beside the target, then rename into place.
        tmp_path = path.with_suffix(".json.tmp")
        tmp_path.write_text(value, encoding="utf-8")
        tmp_path.replace(path)

    def remove(self, key: str) -> None:
        self._path_for(key).unlink(missing_ok=True)
