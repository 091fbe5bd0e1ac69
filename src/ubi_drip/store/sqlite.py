"""SqliteConfigStore: local SQLite persistence for the UBI Drip configuration.

Schema overview
---------------
- ``ubi_config``: one row per configuration document.  Only the row with
  ``id = 1`` is ever read or written.

Design notes
-------------
- :meth:`SqliteConfigStore.__init__` accepts a ``db_path: Path``.  Pass
  ``Path(":memory:")`` or a temp-dir path in tests.
- The ``config`` column holds the camelCase JSON document produced by
  :meth:`~ubi_drip.model.Configuration.to_document`.
- :meth:`SqliteConfigStore.save` is an upsert keyed on ``id``.
- All SQL uses parameterised ``?`` placeholders.
- ``check_same_thread=False`` because FastAPI runs handlers in a threadpool;
  callers serialise access through
  :class:`~ubi_drip.model.service.ConfigurationService`.
"""

from __future__ import annotations

import json
import logging
import sqlite3
from datetime import datetime, timezone
from pathlib import Path

from pydantic import ValidationError

from ubi_drip.model.configuration import Configuration
from ubi_drip.store.base import CONFIG_DOCUMENT_ID, StoreResult

logger = logging.getLogger(__name__)


class SqliteConfigStore:
    """Configuration store backed by a SQLite file.

    On initialisation the ``ubi_config`` table is created if it does not
    exist.  A database that cannot be opened does not raise; every later
    call then returns a ``failure`` result.

    Parameters
    ----------
    db_path:
        Path to the SQLite database file.  Pass ``Path(":memory:")`` for
        tests.
    """

    name = "sqlite"

    def __init__(self, db_path: Path) -> None:
        self._db_path: Path = db_path
        self._conn: sqlite3.Connection | None = None
        try:
            self._conn = self._open_connection(db_path)
            self._init_schema()
        except sqlite3.Error as exc:
            logger.warning("Config database %s could not be opened: %s", db_path, exc)
            self._conn = None

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def load(self) -> StoreResult:
        """Read the configuration document with ``id = 1``.

        Returns
        -------
        StoreResult
            ``ok`` with ``config`` set when a document exists, ``ok`` with
            ``config=None`` when the table is empty, ``failure`` when the
            database or the stored JSON is unusable.
        """
        if self._conn is None:
            return StoreResult.failure(f"database {self._db_path} is not open")
        try:
            row = self._conn.execute(
                "SELECT config FROM ubi_config WHERE id = ?",
                (CONFIG_DOCUMENT_ID,),
            ).fetchone()
        except sqlite3.Error as exc:
            logger.warning("Config load from %s failed: %s", self._db_path, exc)
            return StoreResult.failure(str(exc))

        if row is None:
            return StoreResult.success()

        try:
            config = Configuration.from_document(json.loads(row["config"]))
        except (ValueError, TypeError, ValidationError) as exc:
            logger.warning("Stored config in %s is invalid: %s", self._db_path, exc)
            return StoreResult.failure(f"invalid stored config: {exc}")
        return StoreResult.success(config)

    def save(self, config: Configuration) -> StoreResult:
        """Upsert *config* as the document with ``id = 1``.

        Parameters
        ----------
        config:
            The configuration to persist.

        Returns
        -------
        StoreResult
            ``ok`` on success, ``failure`` with the SQLite error otherwise.
        """
        if self._conn is None:
            return StoreResult.failure(f"database {self._db_path} is not open")
        updated_at = datetime.now(timezone.utc).isoformat()
        try:
            self._conn.execute(
                """
                INSERT INTO ubi_config (id, config, updated_at)
                VALUES (?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    config = excluded.config,
                    updated_at = excluded.updated_at
                """,
                (CONFIG_DOCUMENT_ID, json.dumps(config.to_document()), updated_at),
            )
            self._conn.commit()
        except sqlite3.Error as exc:
            logger.warning("Config save to %s failed: %s", self._db_path, exc)
            return StoreResult.failure(str(exc))
        return StoreResult.success()

    def close(self) -> None:
        """Close the underlying connection.  Later calls return ``failure``."""
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _open_connection(db_path: Path) -> sqlite3.Connection:
        conn = sqlite3.connect(str(db_path), check_same_thread=False)
        conn.row_factory = sqlite3.Row
        return conn

    def _init_schema(self) -> None:
        assert self._conn is not None
        self._conn.execute(
            """
            CREATE TABLE IF NOT EXISTS ubi_config (
                id INTEGER PRIMARY KEY,
                config TEXT NOT NULL,
                updated_at TIMESTAMP NOT NULL
            )
            """
        )
        self._conn.commit()
