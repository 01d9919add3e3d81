"""
Host store adapter boundary.

The recorder never owns the application's state. It needs three things
from the host store:

1. read_state(): the current snapshot, read once at attach time
2. subscribe(callback): every transition delivered as an UpdateRecord
3. state_override: a write-only slot; while it holds a record, the store
   must render from record.current_state instead of its live state

RecordableStore spells that contract out. ObservableStore is a small
in-process host store implementing it, usable directly by applications
whose state is a single value and as the reference for custom adapters.
"""
from abc import ABC, abstractmethod
import logging
from typing import Any, Callable, List, Optional

from staterecorder.update_record import UpdateRecord

logger = logging.getLogger(__name__)

UpdateCallback = Callable[[UpdateRecord], None]

_ADAPTER_METHODS = ('read_state', 'subscribe')


def is_recordable_store(obj: Any) -> bool:
    """Duck-typed check for the adapter surface (no inheritance required)."""
    if isinstance(obj, RecordableStore):
        return True
    return all(callable(getattr(obj, name, None)) for name in _ADAPTER_METHODS) and hasattr(obj, 'state_override')


class RecordableStore(ABC):
    """Abstract host store as seen by the recorder."""

    @abstractmethod
    def read_state(self) -> Any:
        """Current state snapshot, read synchronously."""

    @abstractmethod
    def subscribe(self, callback: UpdateCallback) -> Callable[[], None]:
        """Deliver every UpdateRecord to callback; return an unsubscribe function."""

    @property
    @abstractmethod
    def state_override(self) -> Optional[UpdateRecord]:
        """Record currently injected into the store, or None when live."""

    @state_override.setter
    @abstractmethod
    def state_override(self, record: Optional[UpdateRecord]) -> None:
        ...


class ObservableStore(RecordableStore):
    """Single-value state container with update notifications and an override slot.

    Subscribers are notified in subscription order. A failing subscriber is
    logged and skipped; delivery to the rest continues.

    Thread safety: Not thread-safe (mutations expected on one thread).
    """

    def __init__(self, initial_state: Any = None) -> None:
        self._state = initial_state
        self._override: Optional[UpdateRecord] = None
        self._subscribers: List[UpdateCallback] = []

    # ========== STATE ==========

    @property
    def state(self) -> Any:
        """What the application should render: injected state if overridden."""
        if self._override is not None:
            return self._override.current_state
        return self._state

    @property
    def live_state(self) -> Any:
        """The store's own state, ignoring any override."""
        return self._state

    @property
    def is_overridden(self) -> bool:
        return self._override is not None

    def read_state(self) -> Any:
        return self._state

    def set_state(self, new_state: Any, label: str = "") -> UpdateRecord:
        """Replace the live state and notify subscribers with the transition."""
        record = UpdateRecord.create(self._state, new_state, label=label)
        self._state = new_state
        self._notify(record)
        return record

    def update(self, fn: Callable[[Any], Any], label: str = "") -> UpdateRecord:
        """Derive the next state from the live one."""
        return self.set_state(fn(self._state), label=label)

    # ========== OVERRIDE SLOT ==========

    @property
    def state_override(self) -> Optional[UpdateRecord]:
        return self._override

    @state_override.setter
    def state_override(self, record: Optional[UpdateRecord]) -> None:
        self._override = record
        if record is None:
            logger.debug("Store override cleared, rendering live state")
        else:
            logger.debug(f"Store override set to record {record.identity[:8]}")

    # ========== SUBSCRIPTION ==========

    def subscribe(self, callback: UpdateCallback) -> Callable[[], None]:
        if callback not in self._subscribers:
            self._subscribers.append(callback)
            logger.debug(f"Subscribed update listener: {callback}")

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)
                logger.debug(f"Unsubscribed update listener: {callback}")

        return unsubscribe

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def _notify(self, record: UpdateRecord) -> None:
        for callback in list(self._subscribers):
            try:
                callback(record)
            except Exception as e:
                logger.warning(f"Update listener failed: {e}")
