from pathlib import Path

from prefilter.config.settings import Settings
from prefilter.preferences.base import BasePreferenceStore
from prefilter.preferences.file_store import JsonFilePreferenceStore
from prefilter.preferences.memory_store import InMemoryPreferenceStore
from prefilter.preferences.postgres_store import PostgresPreferenceStore


class PreferenceStoreFactory:
    """Creates the preference store selected in settings."""

    BACKENDS: tuple[str, ...] = ("memory", "file", "postgres")

    @classmethod
    def create(cls, settings: Settings) -> BasePreferenceStore:
        backend = settings.preference_backend.lower()
        if backend == "memory":
            return InMemoryPreferenceStore()
        if backend == "file":
            return JsonFilePreferenceStore(Path(settings.preference_file_path).expanduser())
        if backend == "postgres":
            return PostgresPreferenceStore()
        raise ValueError(
            f"Unknown preference backend '{backend}'. Choose from: {list(cls.BACKENDS)}"
        )
