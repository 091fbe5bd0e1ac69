"""Configuration store subpackage for UBI Drip.

Mirrors the configuration document to optional durable storage (Supabase or a
local SQLite file) and falls back to process memory when none is configured.
"""

from __future__ import annotations

import logging

from ubi_drip.config import AppConfig
from ubi_drip.store.base import (
    ConfigStore,
    NullConfigStore,
    StoreOutcome,
    StoreResult,
)
from ubi_drip.store.sqlite import SqliteConfigStore
from ubi_drip.store.supabase_store import SupabaseConfigStore

logger = logging.getLogger(__name__)

__all__: list[str] = [
    "ConfigStore",
    "NullConfigStore",
    "SqliteConfigStore",
    "StoreOutcome",
    "StoreResult",
    "SupabaseConfigStore",
    "build_store",
]


def build_store(settings: AppConfig) -> ConfigStore:
    """Choose the configuration store for *settings*.

    Supabase wins when both its URL and key are set; otherwise a SQLite file
    is used when ``config_db_path`` is set; otherwise configuration stays in
    memory.
    """
    if settings.supabase_url and settings.supabase_key:
        logger.info("Using Supabase config store at %s", settings.supabase_url)
        return SupabaseConfigStore.from_credentials(
            settings.supabase_url,
            settings.supabase_key,
            table=settings.supabase_table,
        )
    if settings.config_db_path is not None:
        logger.info("Using SQLite config store at %s", settings.config_db_path)
        return SqliteConfigStore(db_path=settings.config_db_path)
    logger.info("No config store configured; configuration is kept in memory only")
    return NullConfigStore()
