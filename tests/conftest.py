"""Shared pytest fixtures.

Every test runs with the store-selecting environment variables cleared so a
developer's shell (or ``.env``) cannot point tests at a real Supabase project.
"""

from __future__ import annotations

import pytest

_STORE_ENV_VARS: tuple[str, ...] = (
    "SUPABASE_URL",
    "SUPABASE_KEY",
    "SUPABASE_TABLE",
    "CONFIG_DB_PATH",
    "UBI_CONTRACT",
    "ADMIN_WALLET",
    "TOKEN_ADDRESS",
    "LOG_LEVEL",
    "EXPLORER_URL",
    "HOST",
    "PORT",
)


@pytest.fixture(autouse=True)
def _clean_store_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove environment variables that change store selection or settings."""
    for name in _STORE_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
