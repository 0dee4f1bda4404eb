"""Shared fixtures for PaperPress tests."""

import pytest

from paperpress.core.credentials import CredentialPool, KEYS_SETTING
from paperpress.core.settings import SettingsStore


class FixedRng:
    """Deterministic stand-in for random.Random."""

    def __init__(self, index=0, value=0.0):
        self.index = index
        self.value = value
        self.randrange_calls = 0

    def randrange(self, n):
        self.randrange_calls += 1
        return min(self.index, n - 1)

    def random(self):
        return self.value


class SleepRecorder:
    """Records requested waits instead of blocking."""

    def __init__(self):
        self.calls = []

    def __call__(self, seconds):
        self.calls.append(seconds)


@pytest.fixture
def sleeps():
    return SleepRecorder()


@pytest.fixture
def make_pool():
    """Build an in-memory pool holding ``keys``, starting at index 0."""

    def _make(keys, default=None, rng=None):
        store = SettingsStore()
        if keys is not None:
            store.set(KEYS_SETTING, list(keys))
        return CredentialPool(store, default_credential=default, rng=rng or FixedRng())

    return _make
