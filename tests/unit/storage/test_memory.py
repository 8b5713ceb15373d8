"""Tests for the in-memory stores."""

from silence_journal.core.interfaces import ISettingsStore, ITradeStore
from silence_journal.storage.memory import InMemorySettingsStore, InMemoryTradeStore

from tests.conftest import make_trade


def test_satisfy_protocols():
    assert isinstance(InMemoryTradeStore(), ITradeStore)
    assert isinstance(InMemorySettingsStore(), ISettingsStore)


def test_trade_list_is_a_snapshot():
    store = InMemoryTradeStore([make_trade()])
    snapshot = store.list()
    snapshot.append(make_trade())
    assert len(store.list()) == 1


def test_settings_are_copied():
    store = InMemorySettingsStore()
    settings = store.get()
    settings.pairs.append("BTCUSD")
    assert "BTCUSD" not in store.get().pairs
