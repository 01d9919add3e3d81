"""
OverrideController: the recorder's state machine.

Mediates between the host store's update stream, the TimelineBuffer and the
store's override slot, and exposes the command surface a recorder panel
drives.

Modes (the cursor IS the mode, there is no separate flag):
- Live: cursor unset. Updates append to primary, override slot is None.
- Overriding: cursor set. Updates append to pending, override slot holds the
  record under the cursor.

Leaving override mode splices pending onto primary.

All three event sources (store updates, commands, paused-binding edges) run
through one SerialDispatcher, so the timeline is never mutated concurrently
and updates are processed strictly in delivery order.
"""
import logging
from typing import Any, Callable, Dict, List, Optional

from staterecorder.binding import Binding, PausedBindingSync
from staterecorder.config import RecorderConfig, get_recorder_config
from staterecorder.diff import DiffCallback, resolve_diff_callback
from staterecorder.dispatch import SerialDispatcher
from staterecorder.store import RecordableStore
from staterecorder.timeline import TimelineBuffer
from staterecorder.update_record import UpdateRecord

logger = logging.getLogger(__name__)


class OverrideController:
    """Records a store's history and injects historical states back into it.

    Lifecycle: attach() seeds the timeline and subscribes, detach() undoes it.
    One controller owns one TimelineBuffer; neither is shared between stores.
    """

    def __init__(
        self,
        store: RecordableStore,
        paused: Optional[Binding[bool]] = None,
        diff_callback: Optional[DiffCallback] = None,
        config: Optional[RecorderConfig] = None,
    ) -> None:
        self.store = store
        self.config = config or get_recorder_config()
        self.timeline = TimelineBuffer()
        self._diff_callback = resolve_diff_callback(diff_callback, self.config)
        self._dispatcher = SerialDispatcher(name=f"recorder:{type(store).__name__}")
        self._paused_sync: Optional[PausedBindingSync] = None
        if paused is not None:
            self._paused_sync = PausedBindingSync(paused, self._start_override, self._stop_override)
        self._unsubscribe: Optional[Callable[[], None]] = None

        # Mode listeners receive the new is_overriding value
        self._mode_listeners: List[Callable[[bool], None]] = []

    # ========== LIFECYCLE ==========

    @property
    def is_attached(self) -> bool:
        return self._unsubscribe is not None

    @property
    def has_paused_binding(self) -> bool:
        return self._paused_sync is not None

    def attach(self) -> None:
        """Seed primary from the store's current state, then start recording."""
        if self.is_attached:
            return
        self.timeline.append(UpdateRecord.seed(self.store.read_state()))
        self._unsubscribe = self.store.subscribe(self._on_store_update)
        if self._paused_sync is not None:
            self._paused_sync.connect(self._on_paused_changed)
        logger.info(f"State recorder attached to {type(self.store).__name__}")

    def detach(self) -> None:
        """Stop recording. The store is returned to its live state."""
        if not self.is_attached:
            return
        if self._paused_sync is not None:
            self._paused_sync.disconnect()
        self._dispatcher.submit(self._stop_override)
        self._unsubscribe()
        self._unsubscribe = None
        logger.info(f"State recorder detached from {type(self.store).__name__} "
                    f"({self.timeline.record_count} records)")

    # ========== EVENT SOURCES ==========

    def _on_store_update(self, record: UpdateRecord) -> None:
        self._dispatcher.submit(self._record, record)

    def _on_paused_changed(self, is_paused: bool) -> None:
        self._dispatcher.submit(self._paused_sync.observe, is_paused)

    def _record(self, record: UpdateRecord) -> None:
        in_primary = self.timeline.append(record)
        target = "primary" if in_primary else "pending"
        logger.debug(f"⏱️ RECORD: {record.identity[:8]} -> {target}")

    # ========== COMMANDS ==========

    def step_forward(self) -> None:
        self._dispatcher.submit(self._step, self.config.step_size)

    def step_backward(self) -> None:
        self._dispatcher.submit(self._step, -self.config.step_size)

    def long_step_forward(self) -> None:
        self._dispatcher.submit(self._step, self.config.long_step_size)

    def long_step_backward(self) -> None:
        self._dispatcher.submit(self._step, -self.config.long_step_size)

    def set_index(self, index: int) -> None:
        """Jump to index (clamped). Enters override mode."""
        self._dispatcher.submit(self._set_index, index)

    def set_progress(self, value: float) -> None:
        """Slider entry point: value in [0, 1]."""
        self._dispatcher.submit(self._set_progress, value)

    def start_override(self) -> None:
        """Pause at the most recent record."""
        self._dispatcher.submit(self._start_override)

    def stop_override(self) -> None:
        """Resume live updates and splice anything recorded meanwhile."""
        self._dispatcher.submit(self._stop_override)

    def request_diff(self) -> None:
        """Present the transition of the record just before the cursor. No-op while live."""
        self._dispatcher.submit(self._request_diff)

    # ========== COMMAND HANDLERS ==========

    def _step(self, delta: int) -> None:
        self._set_index(self.timeline.current_index + delta)

    def _set_index(self, index: int) -> None:
        self._move_cursor(lambda: self.timeline.set_index(index))

    def _set_progress(self, value: float) -> None:
        def apply():
            self.timeline.progress = value
        self._move_cursor(apply)

    def _start_override(self) -> None:
        if self.timeline.is_overriding:
            return
        self._move_cursor(self.timeline.pause)

    def _stop_override(self) -> None:
        if not self.timeline.is_overriding:
            return
        self._move_cursor(self.timeline.clear_cursor)

    def _request_diff(self) -> None:
        # No cursor, nothing to diff against
        if not self.timeline.is_overriding:
            return
        index = self.timeline.current_index
        if index == 0:
            return
        record = self.timeline.primary[index - 1]
        try:
            self._diff_callback(record.previous_state, record.current_state)
        except Exception as e:
            logger.warning(f"Diff callback failed: {e}")

    def _move_cursor(self, apply: Callable[[], Any]) -> None:
        """Run a cursor mutation and propagate its effects.

        A changed cursor is pushed to the override slot; a cleared cursor
        splices pending into primary; a mode flip is published.
        """
        was_overriding = self.timeline.is_overriding
        before = self.timeline.cursor
        apply()
        after = self.timeline.cursor

        if after is not before:
            self.store.state_override = after
            if after is None:
                self.timeline.splice_pending()
            else:
                logger.debug(f"⏱️ CURSOR: index {self.timeline.current_index}/{self.timeline.max_index}")

        if was_overriding != self.timeline.is_overriding:
            self._mode_changed(self.timeline.is_overriding)

    def _mode_changed(self, is_overriding: bool) -> None:
        logger.debug(f"⏱️ MODE: {'overriding' if is_overriding else 'live'}")
        if self._paused_sync is not None:
            self._paused_sync.publish(is_overriding)
        for listener in list(self._mode_listeners):
            try:
                listener(is_overriding)
            except Exception as e:
                logger.warning(f"Mode listener failed: {e}")

    def add_mode_listener(self, listener: Callable[[bool], None]) -> None:
        if listener not in self._mode_listeners:
            self._mode_listeners.append(listener)

    def remove_mode_listener(self, listener: Callable[[bool], None]) -> None:
        if listener in self._mode_listeners:
            self._mode_listeners.remove(listener)

    # ========== READ SURFACE ==========

    @property
    def current_index(self) -> int:
        return self.timeline.current_index

    @property
    def max_index(self) -> int:
        return self.timeline.max_index

    @property
    def progress(self) -> float:
        return self.timeline.progress

    @property
    def can_step_backward(self) -> bool:
        """True at the oldest record, i.e. when the back buttons are disabled."""
        return self.timeline.current_index == 0

    @property
    def can_step_forward(self) -> bool:
        """True at the newest record, i.e. when the forward buttons are disabled."""
        return self.timeline.current_index == self.timeline.max_index

    @property
    def is_overriding(self) -> bool:
        return self.timeline.is_overriding

    @property
    def record_count(self) -> int:
        return self.timeline.record_count

    @property
    def pending_count(self) -> int:
        return self.timeline.pending_count

    @property
    def current_record(self) -> Optional[UpdateRecord]:
        if not self.timeline.primary:
            return None
        return self.timeline.primary[self.timeline.current_index]

    def history_info(self) -> List[Dict[str, Any]]:
        return self.timeline.history_info()
