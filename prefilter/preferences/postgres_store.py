import psycopg

from prefilter.database.connection import get_connection
from prefilter.preferences.base import BasePreferenceStore
from prefilter.preferences.exceptions import PreferenceStoreError


class PostgresPreferenceStore(BasePreferenceStore):
    """Database operations for the preferences table.

    Expects ``preferences(key text primary key, value text not null)``.
    """

    def get(self, key: str) -> str | None:
        try:
            with get_connection() as conn:
                row = conn.execute(
                    "SELECT value FROM preferences WHERE key = %s",
                    (key,),
                ).fetchone()
        except (psycopg.Error, RuntimeError) as exc:
            raise PreferenceStoreError(f"Failed to read preference '{key}': {exc}") from exc
        if row is None:
            return None
        return str(row[0])

    def set(self, key: str, value: str) -> None:
        try:
            with get_connection() as conn:
                conn.execute(
                    """
                    INSERT INTO preferences (key, value)
                    VALUES (%s, %s)
                    ON CONFLICT (key) DO UPDATE SET value = EXCLUDED.value
                    """,
                    (key, value),
                )
                conn.commit()
        except (psycopg.Error, RuntimeError) as exc:
            raise PreferenceStoreError(f"Failed to write preference '{key}': {exc}") from exc
