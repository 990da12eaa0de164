import threading

from prefilter.preferences.base import BasePreferenceStore


class InMemoryPreferenceStore(BasePreferenceStore):
    """Process-local store; values are lost on exit."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._values = dict(initial or {})
        self._lock = threading.Lock()

    def get(self, key: str) -> str | None:
        with self._lock:
            return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            self._values[key] = value
