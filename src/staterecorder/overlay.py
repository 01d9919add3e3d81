"""
Recorder overlay: the attach point for host applications.

install() wires an OverrideController to a store and returns a
RecorderOverlay, the decorated view a UI toolkit renders. The overlay is
headless: render() produces an OverlayViewState describing what the panel
should show, and the panel's buttons call the controller's commands.

Example:
    store = ObservableStore({"count": 0})
    with install(store) as overlay:
        store.update(lambda s: {"count": s["count"] + 1})
        overlay.controller.start_override()
        overlay.controller.step_backward()
        store.state            # {"count": 0}, the recorded past
"""
from dataclasses import dataclass
import logging
from typing import Any, Optional

from staterecorder.binding import Binding
from staterecorder.config import Edge, get_recorder_config
from staterecorder.controller import OverrideController
from staterecorder.diff import DiffCallback
from staterecorder.store import is_recordable_store

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OverlayViewState:
    """Snapshot of what the recorder panel displays."""
    show_panel: bool  # Scrubbing controls, shown while overriding
    show_pause_button: bool  # Own pause button, only without an external binding
    position_label: str  # "index/max"
    backward_disabled: bool
    forward_disabled: bool
    progress: float
    edge: Edge

    @property
    def alignment(self) -> str:
        return self.edge.alignment


class RecorderOverlay:
    """Decorated view returned by install(). Context manager; close() detaches."""

    def __init__(self, controller: OverrideController, edge: Edge) -> None:
        self.controller = controller
        self.edge = edge

    def render(self) -> OverlayViewState:
        controller = self.controller
        overriding = controller.is_overriding
        return OverlayViewState(
            show_panel=overriding,
            show_pause_button=not overriding and not controller.has_paused_binding,
            position_label=f"{controller.current_index}/{controller.record_count - 1}",
            backward_disabled=controller.can_step_backward,
            forward_disabled=controller.can_step_forward,
            progress=controller.progress,
            edge=self.edge,
        )

    def close(self) -> None:
        self.controller.detach()

    def __enter__(self) -> 'RecorderOverlay':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


def install(
    store: Any,
    paused: Optional[Binding[bool]] = None,
    edge: Optional[Edge] = None,
    diff_callback: Optional[DiffCallback] = None,
) -> RecorderOverlay:
    """Attach a state recorder to store.

    Args:
        store: Host store exposing read_state(), subscribe() and state_override
        paused: Optional two-way binding driving pause/resume externally
        edge: Screen edge for the overlay (defaults to the configured edge)
        diff_callback: Called with (previous_state, current_state) on diff
                       requests; defaults to printing both states

    Returns:
        The attached RecorderOverlay.
    """
    if not is_recordable_store(store):
        raise TypeError(
            f"{type(store).__name__} is not a recordable store "
            f"(needs read_state(), subscribe() and state_override)"
        )

    config = get_recorder_config()
    controller = OverrideController(store, paused=paused, diff_callback=diff_callback, config=config)
    controller.attach()
    overlay = RecorderOverlay(controller, edge or config.default_edge)
    logger.debug(f"Recorder overlay installed at {overlay.edge.value} edge "
                 f"(external pause binding: {paused is not None})")
    return overlay
