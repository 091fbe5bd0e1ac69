"""SupabaseConfigStore: remote persistence for the UBI Drip configuration.

The configuration document lives in a Supabase (PostgREST) table, by default
``ubi_config``, with the columns ``id``, ``config`` (JSON) and
``updated_at``.  Only the row with ``id = 1`` is used.

Any error raised by the Supabase client (network, HTTP, PostgREST) is logged
and returned as a ``failure`` :class:`~ubi_drip.store.base.StoreResult`.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from pydantic import ValidationError
from supabase import Client, create_client

from ubi_drip.model.configuration import Configuration
from ubi_drip.store.base import CONFIG_DOCUMENT_ID, StoreResult

logger = logging.getLogger(__name__)


class SupabaseConfigStore:
    """Configuration store backed by a Supabase table.

    Args:
        client: A ready :class:`supabase.Client`.  Use :meth:`from_credentials`
            to build one from a project URL and key.
        table: Name of the table holding the configuration document.
    """

    name = "supabase"

    def __init__(self, client: Client | None, table: str = "ubi_config") -> None:
        self._client = client
        self._table = table

    @classmethod
    def from_credentials(cls, url: str, key: str, table: str = "ubi_config") -> SupabaseConfigStore:
        """Create the Supabase client and wrap it.

        A client that cannot be created (e.g. a malformed URL or key) is
        logged; the returned store then reports ``failure`` on every call.
        """
        try:
            client: Client | None = create_client(url, key)
        except Exception as exc:  # noqa: BLE001
            logger.warning("Supabase client could not be created for %s: %s", url, exc)
            client = None
        return cls(client, table=table)

    def load(self) -> StoreResult:
        """Fetch the configuration document with ``id = 1``.

        Returns:
            ``ok`` with ``config`` when the row exists, ``ok`` with
            ``config=None`` when it does not, ``failure`` on any client
            error or an invalid stored document.
        """
        if self._client is None:
            return StoreResult.failure("supabase client is not available")
        try:
            response = (
                self._client.table(self._table)
                .select("*")
                .eq("id", CONFIG_DOCUMENT_ID)
                .limit(1)
                .execute()
            )
        except Exception as exc:  # noqa: BLE001
            logger.warning("Using in-memory config; Supabase load failed: %s", exc)
            return StoreResult.failure(str(exc))

        rows: list[dict[str, Any]] = response.data or []
        if not rows or not rows[0].get("config"):
            return StoreResult.success()

        try:
            config = Configuration.from_document(rows[0]["config"])
        except (ValueError, TypeError, ValidationError) as exc:
            logger.warning("Stored Supabase config is invalid: %s", exc)
            return StoreResult.failure(f"invalid stored config: {exc}")
        return StoreResult.success(config)

    def save(self, config: Configuration) -> StoreResult:
        """Upsert *config* with the current UTC time as ``updated_at``."""
        if self._client is None:
            return StoreResult.failure("supabase client is not available")
        document = {
            "id": CONFIG_DOCUMENT_ID,
            "config": config.to_document(),
            "updated_at": datetime.now(timezone.utc).isoformat(),
        }
        try:
            self._client.table(self._table).upsert(document).execute()
        except Exception as exc:  # noqa: BLE001
            logger.warning("Config save failed: %s", exc)
            return StoreResult.failure(str(exc))
        return StoreResult.success()
