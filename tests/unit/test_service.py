"""Tests for ConfigurationService: refresh, mutations, persistence outcomes
and locking.

Coverage map
------------
- refresh installs a stored configuration; failure/unavailable keep memory
- every mutation persists the new configuration through the store
- store failures are returned, logged, and never raised; memory stays authoritative
- validation errors propagate and nothing is persisted
- concurrent add_recipient calls lose no updates
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from ubi_drip.model.configuration import (
    Configuration,
    DuplicateRecipientError,
    InvalidAddressError,
    Recipient,
)
from ubi_drip.model.service import ConfigurationService
from ubi_drip.store import NullConfigStore, SqliteConfigStore, StoreOutcome, StoreResult

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

_ADDR = "0x8f69c8eb92ed068aa577ce1847d568b39b0d9ebf"
_ADDR_2 = "0x4c3a28d81c52f5ca03cd7e1c8b3c02b396937adc"


def _mock_store(load: StoreResult | None = None, save: StoreResult | None = None) -> MagicMock:
    """Return a mock store with fixed load/save results."""
    store = MagicMock()
    store.name = "mock"
    store.load.return_value = load if load is not None else StoreResult.success()
    store.save.return_value = save if save is not None else StoreResult.success()
    return store


def _service(store: object | None = None) -> ConfigurationService:
    """Return a service starting from an empty recipient list."""
    return ConfigurationService(store=store, initial=Configuration())  # type: ignore[arg-type]


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------


class TestRefresh:
    """Reads refresh from the store first."""

    def test_default_store_is_null(self) -> None:
        """Without a store the service uses NullConfigStore."""
        assert isinstance(ConfigurationService().store, NullConfigStore)

    def test_default_initial_configuration(self) -> None:
        """Without an initial configuration the defaults are used."""
        assert ConfigurationService().snapshot() == Configuration.default()

    def test_snapshot_installs_stored_config(self) -> None:
        """A stored configuration replaces the in-memory one on read."""
        stored = Configuration(ethPerRecipient="0.3", recipients=[Recipient(address=_ADDR_2)])
        service = _service(_mock_store(load=StoreResult.success(stored)))
        assert service.snapshot() == stored

    def test_snapshot_without_refresh_skips_store(self) -> None:
        """snapshot(refresh=False) does not call the store."""
        store = _mock_store()
        _service(store).snapshot(refresh=False)
        store.load.assert_not_called()

    def test_recipients_refreshes(self) -> None:
        """recipients() also reads through the store."""
        stored = Configuration(recipients=[Recipient(address=_ADDR, label="@s")])
        service = _service(_mock_store(load=StoreResult.success(stored)))
        assert service.recipients() == stored.recipients

    @pytest.mark.parametrize(
        "result",
        [StoreResult.success(None), StoreResult.unavailable(), StoreResult.failure("down")],
    )
    def test_no_stored_config_keeps_memory(self, result: StoreResult) -> None:
        """Empty, unavailable and failed loads leave memory untouched."""
        service = _service(_mock_store(load=result))
        service.update_rates(eth="0.7")
        assert service.snapshot().eth_per_recipient == "0.7"
        assert service.refresh() is result


# ---------------------------------------------------------------------------
# Mutations
# ---------------------------------------------------------------------------


class TestMutations:
    """Each mutation is applied in memory and then persisted."""

    def test_update_rates_persists(self) -> None:
        """update_rates saves the resulting configuration."""
        store = _mock_store()
        result = _service(store).update_rates(eth="0.02")
        assert result.config.eth_per_recipient == "0.02"
        store.save.assert_called_once_with(result.config)
        assert result.persisted.ok

    def test_add_recipient_persists(self) -> None:
        """add_recipient saves the list including the new recipient."""
        store = _mock_store()
        result = _service(store).add_recipient(_ADDR, "@test")
        assert result.config.recipients == [Recipient(address=_ADDR, label="@test")]
        store.save.assert_called_once()

    def test_remove_recipient_persists_even_when_absent(self) -> None:
        """remove_recipient saves even if nothing matched."""
        store = _mock_store()
        result = _service(store).remove_recipient(_ADDR)
        assert result.config.recipients == []
        store.save.assert_called_once()

    def test_invalid_address_propagates_without_save(self) -> None:
        """InvalidAddressError reaches the caller; nothing is saved."""
        store = _mock_store()
        with pytest.raises(InvalidAddressError):
            _service(store).add_recipient("0x123")
        store.save.assert_not_called()

    def test_duplicate_propagates_without_second_save(self) -> None:
        """DuplicateRecipientError reaches the caller; only the first add is saved."""
        store = _mock_store()
        service = _service(store)
        service.add_recipient(_ADDR)
        with pytest.raises(DuplicateRecipientError):
            service.add_recipient(_ADDR.upper().replace("0X", "0x"))
        assert store.save.call_count == 1

    def test_save_failure_returned_and_memory_kept(self, caplog: pytest.LogCaptureFixture) -> None:
        """A failed save is reported in the result and logged; the change stays in memory."""
        store = _mock_store(save=StoreResult.failure("disk full"))
        service = _service(store)
        with caplog.at_level(logging.WARNING, logger="ubi_drip.model.service"):
            result = service.add_recipient(_ADDR)
        assert result.persisted.outcome is StoreOutcome.FAILURE
        assert "disk full" in caplog.text
        assert service.snapshot(refresh=False).recipients == [Recipient(address=_ADDR)]

    def test_unavailable_store_is_not_logged_as_warning(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Running without a store is normal and does not warn."""
        with caplog.at_level(logging.WARNING):
            _service(NullConfigStore()).update_rates(tokens="5")
        assert not [r for r in caplog.records if r.levelno >= logging.WARNING]


# ---------------------------------------------------------------------------
# SQLite-backed service
# ---------------------------------------------------------------------------


class TestWithSqliteStore:
    """The service against a real SQLite store."""

    def test_changes_survive_new_service(self, tmp_path: Path) -> None:
        """A second service over the same file sees the first service's changes."""
        db_path = tmp_path / "config.db"
        first = _service(SqliteConfigStore(db_path=db_path))
        first.add_recipient(_ADDR, "@test")
        first.update_rates(tokens="4000")

        second = ConfigurationService(store=SqliteConfigStore(db_path=db_path))
        cfg = second.snapshot()
        assert cfg.recipients == [Recipient(address=_ADDR, label="@test")]
        assert cfg.tokens_per_recipient == "4000"


# ---------------------------------------------------------------------------
# Concurrency
# ---------------------------------------------------------------------------


class TestConcurrency:
    """Mutations are serialised by the service lock."""

    def test_parallel_adds_lose_nothing(self) -> None:
        """Fifty threads adding distinct recipients all land in the list."""
        service = _service(NullConfigStore())
        addresses = [f"0x{i:040x}" for i in range(50)]
        barrier = threading.Barrier(len(addresses))

        def add(address: str) -> None:
            barrier.wait()
            service.add_recipient(address)

        threads = [threading.Thread(target=add, args=(a,)) for a in addresses]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        stored = {r.address for r in service.recipients(refresh=False)}
        assert stored == set(addresses)

    def test_parallel_duplicate_adds_keep_one(self) -> None:
        """Racing adds of the same address keep exactly one entry."""
        service = _service(NullConfigStore())
        errors: list[Exception] = []
        barrier = threading.Barrier(10)

        def add() -> None:
            barrier.wait()
            try:
                service.add_recipient(_ADDR)
            except DuplicateRecipientError as exc:
                errors.append(exc)

        threads = [threading.Thread(target=add) for _ in range(10)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(service.recipients(refresh=False)) == 1
        assert len(errors) == 9
