"""Pytest configuration and shared fixtures."""
import pytest

from staterecorder import ObservableStore, OverrideController, RecorderConfig
import staterecorder.config as config_module


@pytest.fixture(autouse=True)
def reset_recorder_config():
    """Restore the module-level recorder config after each test."""
    original = config_module._default_config
    config_module._default_config = RecorderConfig()

    yield

    config_module._default_config = original


@pytest.fixture
def store():
    """Provide a store seeded with a counter state."""
    return ObservableStore({"count": 0})


@pytest.fixture
def controller(store):
    """Provide an attached controller with only the seed record."""
    recorder = OverrideController(store, diff_callback=lambda previous, current: None)
    recorder.attach()
    yield recorder
    recorder.detach()


@pytest.fixture
def push(store):
    """Deliver n counter increments, returning the records in delivery order."""
    def _push(n):
        return [store.update(lambda s: {"count": s["count"] + 1}) for _ in range(n)]
    return _push


@pytest.fixture
def six_records(controller, push):
    """Controller with 6 primary records (indices 0-5), live."""
    push(5)
    return controller
