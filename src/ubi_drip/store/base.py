"""Store contract shared by every configuration store backend.

A configuration store mirrors the single :class:`~ubi_drip.model.Configuration`
document to durable storage.  Stores never raise past their public methods:
every outcome, including "no store configured", is reported as a
:class:`StoreResult`, and failures are logged where they occur.

Backends
--------
- :class:`NullConfigStore` — no durable storage; every call is ``unavailable``.
- :class:`~ubi_drip.store.sqlite.SqliteConfigStore` — local SQLite file.
- :class:`~ubi_drip.store.supabase_store.SupabaseConfigStore` — Supabase table.

:func:`~ubi_drip.store.build_store` picks one from :class:`~ubi_drip.config.AppConfig`.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from ubi_drip.model.configuration import Configuration

logger = logging.getLogger(__name__)

#: Key of the single configuration document in every backend.
CONFIG_DOCUMENT_ID: int = 1


class StoreOutcome(str, enum.Enum):
    """Kind of result returned by a store operation."""

    OK = "ok"
    UNAVAILABLE = "unavailable"
    FAILURE = "failure"


@dataclass(frozen=True)
class StoreResult:
    """Outcome of a :meth:`ConfigStore.load` or :meth:`ConfigStore.save` call.

    Attributes:
        outcome: Whether the call succeeded, had no store to talk to, or failed.
        config: The loaded configuration.  Only set by a successful load that
            found a stored document.
        reason: Human-readable cause for ``unavailable`` and ``failure``.
    """

    outcome: StoreOutcome
    config: Configuration | None = None
    reason: str | None = None

    @property
    def ok(self) -> bool:
        return self.outcome is StoreOutcome.OK

    @classmethod
    def success(cls, config: Configuration | None = None) -> StoreResult:
        return cls(StoreOutcome.OK, config=config)

    @classmethod
    def unavailable(cls, reason: str = "no configuration store configured") -> StoreResult:
        return cls(StoreOutcome.UNAVAILABLE, reason=reason)

    @classmethod
    def failure(cls, reason: str) -> StoreResult:
        return cls(StoreOutcome.FAILURE, reason=reason)


@runtime_checkable
class ConfigStore(Protocol):
    """Load/save interface implemented by every backend."""

    name: str

    def load(self) -> StoreResult:
        """Fetch the stored configuration document, if any."""
        ...

    def save(self, config: Configuration) -> StoreResult:
        """Upsert *config* as the stored configuration document."""
        ...


class NullConfigStore:
    """Store used when no durable storage is configured.

    Configuration then lives in process memory only.
    """

    name = "memory"

    def load(self) -> StoreResult:
        return StoreResult.unavailable()

    def save(self, config: Configuration) -> StoreResult:
        return StoreResult.unavailable()
