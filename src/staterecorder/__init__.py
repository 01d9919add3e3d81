"""
Time-travel state recorder.

Attaches to an application's state store, records every state transition,
and lets a developer pause live updates, scrub through history and force the
application to render from a recorded state.

Quick Start:
    >>> from staterecorder import ObservableStore, install
    >>>
    >>> store = ObservableStore({"count": 0})
    >>> overlay = install(store)
    >>> store.update(lambda s: {"count": s["count"] + 1})
    >>>
    >>> recorder = overlay.controller
    >>> recorder.start_override()      # pause at the newest record
    >>> recorder.step_backward()       # store now renders the seed state
    >>> store.state
    {'count': 0}
    >>> recorder.stop_override()       # back to live
    >>> store.state
    {'count': 1}

Architecture:
    ObservableStore / RecordableStore
        └── UpdateRecord stream ──> SerialDispatcher ──> OverrideController
                                                            ├── TimelineBuffer (primary, pending, cursor)
                                                            ├── override slot (store.state_override)
                                                            └── PausedBindingSync (optional two-way Binding)

Modules:
    - update_record: immutable, identity-compared transition records
    - timeline: history buffer and index/progress arithmetic
    - store: host store adapter contract and in-process store
    - binding: two-way paused binding with edge detection
    - dispatch: single-consumer event queue
    - controller: override state machine and command surface
    - diff: diff presentation strategies
    - overlay: install() and the headless overlay view
    - config: recorder configuration
"""

from staterecorder.update_record import UpdateRecord
from staterecorder.timeline import TimelineBuffer
from staterecorder.store import RecordableStore, ObservableStore, is_recordable_store
from staterecorder.binding import Binding, PausedBindingSync
from staterecorder.dispatch import SerialDispatcher
from staterecorder.controller import OverrideController
from staterecorder.diff import DiffCallback, print_states, unified_state_diff
from staterecorder.overlay import OverlayViewState, RecorderOverlay, install
from staterecorder.config import (
    Edge,
    RecorderConfig,
    get_recorder_config,
    set_recorder_config,
    recorder_config,
)

__all__ = [
    # Records and history
    'UpdateRecord',
    'TimelineBuffer',
    # Store adapter
    'RecordableStore',
    'ObservableStore',
    'is_recordable_store',
    # Paused binding
    'Binding',
    'PausedBindingSync',
    # Dispatch
    'SerialDispatcher',
    # Controller
    'OverrideController',
    # Diff
    'DiffCallback',
    'print_states',
    'unified_state_diff',
    # Overlay
    'OverlayViewState',
    'RecorderOverlay',
    'install',
    # Configuration
    'Edge',
    'RecorderConfig',
    'get_recorder_config',
    'set_recorder_config',
    'recorder_config',
]

__version__ = '1.0.0'
__description__ = 'Time-travel state recorder for application state stores'
