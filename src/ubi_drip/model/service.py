"""ConfigurationService: the single owner of the running configuration.

Combines a :class:`~ubi_drip.model.configuration.ConfigurationModel` with a
:class:`~ubi_drip.store.base.ConfigStore` behind one re-entrant lock.  Every
refresh and every mutate-then-persist sequence holds the lock for its whole
duration, so concurrent writers cannot lose each other's updates.

Persistence policy
------------------
Each mutation is applied in memory first, then saved.  The save outcome is
returned to the caller as a :class:`~ubi_drip.store.base.StoreResult` inside
a :class:`MutationResult`; the HTTP layer logs it and otherwise ignores it.
The in-memory configuration stays authoritative whatever the store reports.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass

from ubi_drip.model.configuration import Configuration, ConfigurationModel, Recipient
from ubi_drip.store.base import ConfigStore, NullConfigStore, StoreOutcome, StoreResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MutationResult:
    """Configuration after a mutation, plus the outcome of persisting it."""

    config: Configuration
    persisted: StoreResult


class ConfigurationService:
    """Thread-safe facade over the configuration model and its store.

    Parameters
    ----------
    store:
        Durable mirror of the configuration.  Defaults to
        :class:`~ubi_drip.store.base.NullConfigStore`.
    initial:
        Configuration to start from.  Defaults to
        :meth:`~ubi_drip.model.configuration.Configuration.default`.
    """

    def __init__(
        self,
        store: ConfigStore | None = None,
        initial: Configuration | None = None,
    ) -> None:
        self._store: ConfigStore = store if store is not None else NullConfigStore()
        self._model = ConfigurationModel(initial)
        self._lock = threading.RLock()

    @property
    def store(self) -> ConfigStore:
        return self._store

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def refresh(self) -> StoreResult:
        """Replace the in-memory configuration with the stored one, if any.

        A failed or unavailable load leaves the in-memory configuration as it
        was.
        """
        with self._lock:
            result = self._store.load()
            if result.ok and result.config is not None:
                self._model.replace(result.config)
            elif result.outcome is StoreOutcome.FAILURE:
                logger.info("Keeping in-memory config: %s", result.reason)
            return result

    def snapshot(self, refresh: bool = True) -> Configuration:
        """Return a copy of the current configuration, refreshing it first by default."""
        with self._lock:
            if refresh:
                self.refresh()
            return self._model.get_config()

    def recipients(self, refresh: bool = True) -> list[Recipient]:
        """Return a copy of the recipient list, refreshing it first by default."""
        with self._lock:
            if refresh:
                self.refresh()
            return self._model.get_recipients()

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def update_rates(
        self,
        eth: str | int | float | None = None,
        tokens: str | int | float | None = None,
    ) -> MutationResult:
        """Apply :meth:`ConfigurationModel.set_rates` and persist."""
        with self._lock:
            self._model.set_rates(eth=eth, tokens=tokens)
            config = self._model.get_config()
            logger.info(
                "Rates set to %s ETH / %s tokens per recipient",
                config.eth_per_recipient,
                config.tokens_per_recipient,
            )
            return MutationResult(config, self._persist(config))

    def add_recipient(self, address: str | None, label: str | None = None) -> MutationResult:
        """Apply :meth:`ConfigurationModel.add_recipient` and persist.

        Raises
        ------
        InvalidAddressError, DuplicateRecipientError
            Propagated from the model; nothing is persisted.
        """
        with self._lock:
            recipient = self._model.add_recipient(address, label)
            config = self._model.get_config()
            logger.info("Added recipient %s (%d total)", recipient.address, len(config.recipients))
            return MutationResult(config, self._persist(config))

    def remove_recipient(self, address: str) -> MutationResult:
        """Apply :meth:`ConfigurationModel.remove_recipient` and persist.

        Persists even when nothing was removed.
        """
        with self._lock:
            removed = self._model.remove_recipient(address)
            config = self._model.get_config()
            logger.info("Removed %d recipient(s) matching %s", removed, address.lower())
            return MutationResult(config, self._persist(config))

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _persist(self, config: Configuration) -> StoreResult:
        result = self._store.save(config)
        if result.outcome is StoreOutcome.FAILURE:
            logger.warning("Config change kept in memory only: %s", result.reason)
        return result
