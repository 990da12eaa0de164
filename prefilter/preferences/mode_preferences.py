from prefilter.detection.models import AnalysisMode
from prefilter.logging.logger import Log
from prefilter.preferences.base import BasePreferenceStore
from prefilter.preferences.exceptions import PreferenceStoreError

MODE_PREFERENCE_KEY = "prefilter_mode"
_KNOWN_MODE_NAMES = frozenset({"off", "none", "light", "deep"})


class ModePreferences:
    """Reads and writes the persisted analysis mode. Never raises."""

    def __init__(self, store: BasePreferenceStore) -> None:
        self._store = store

    def get_mode(self) -> AnalysisMode:
        try:
            stored = self._store.get(MODE_PREFERENCE_KEY)
        except PreferenceStoreError as exc:
            Log.error(f"Error loading prefilter mode, using light: {exc}")
            return AnalysisMode.LIGHT
        if stored is not None and stored.strip().lower() not in _KNOWN_MODE_NAMES:
            Log.warning(f"Unrecognized prefilter mode '{stored}', using light")
        return AnalysisMode.parse(stored)

    def set_mode(self, mode: AnalysisMode) -> None:
        try:
            self._store.set(MODE_PREFERENCE_KEY, mode.value)
        except PreferenceStoreError as exc:
            Log.error(f"Error saving prefilter mode: {exc}")
