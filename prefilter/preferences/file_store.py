import json
import threading
from pathlib import Path

from prefilter.preferences.base import BasePreferenceStore
from prefilter.preferences.exceptions import PreferenceStoreError


class JsonFilePreferenceStore(BasePreferenceStore):
    """Keeps all preferences in one JSON object on disk."""

    def __init__(self, path: Path) -> None:
        self._path = path
        self._lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._path

    def get(self, key: str) -> str | None:
        with self._lock:
            value = self._read().get(key)
        if value is None:
            return None
        if not isinstance(value, str):
            raise PreferenceStoreError(f"Preference '{key}' in {self._path} is not a string")
        return value

    def set(self, key: str, value: str) -> None:
        with self._lock:
            values = self._read()
            values[key] = value
            self._write(values)

    def _read(self) -> dict[str, object]:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise PreferenceStoreError(f"Failed to read {self._path}: {exc}") from exc
        if not isinstance(data, dict):
            raise PreferenceStoreError(f"{self._path} must hold a JSON object")
        return data

    def _write(self, values: dict[str, object]) -> None:
        tmp_path = self._path.with_name(self._path.name + ".tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(json.dumps(values, indent=2, sort_keys=True), encoding="utf-8")
            tmp_path.replace(self._path)
        except OSError as exc:
            raise PreferenceStoreError(f"Failed to write {self._path}: {exc}") from exc
