import os
from collections.abc import Generator
from typing import Any

import psycopg
import pytest

from prefilter.config.settings import Settings
from prefilter.database.connection import close_pool, get_connection, init_pool

_CREATE_PREFERENCES = """
CREATE TABLE IF NOT EXISTS preferences (
    key text PRIMARY KEY,
    value text NOT NULL
)
"""


def _test_settings() -> Settings:
    os.environ.setdefault("DB_DATABASE", "prefilter_test")
    return Settings()


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    return _test_settings()


@pytest.fixture(scope="session")
def integration_pool(test_settings: Settings) -> Generator[None, None, None]:
    try:
        init_pool(test_settings)
        with get_connection() as conn:
            conn.execute(_CREATE_PREFERENCES)
            conn.commit()
    except Exception as e:
        close_pool()
        pytest.skip(f"PostgreSQL test DB not available: {e}. Set DB_* env to run.")
    try:
        yield
    finally:
        close_pool()


@pytest.fixture
def db_conn(integration_pool: None) -> Generator[psycopg.Connection[Any], None, None]:
    with get_connection() as conn:
        yield conn


@pytest.fixture
def preference_cleanup(db_conn: psycopg.Connection[Any]) -> Generator[list[str], None, None]:
    keys: list[str] = []
    yield keys
    for key in keys:
        db_conn.execute("DELETE FROM preferences WHERE key = %s", (key,))
    db_conn.commit()
