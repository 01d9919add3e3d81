"""
Two-way paused binding between the host application and the recorder.

The host may own a "paused" flag (e.g. toggled by a keyboard shortcut) that
must stay in sync with the recorder's override mode in both directions.
Naively mirroring both ways loops: recorder sets the flag, the flag notifies
the recorder, the recorder reacts again. PausedBindingSync breaks the loop
with two edge-triggered signals and one last-observed-value cache.
"""
import logging
from typing import Callable, Generic, List, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar('T')


class Binding(Generic[T]):
    """Observable value shared between two owners.

    Setting an equal value is not a change and does not notify.
    """

    def __init__(self, initial: T) -> None:
        self._value = initial
        self._observers: List[Callable[[T], None]] = []

    @property
    def value(self) -> T:
        return self._value

    @value.setter
    def value(self, new_value: T) -> None:
        if new_value == self._value:
            return
        self._value = new_value
        for observer in list(self._observers):
            try:
                observer(new_value)
            except Exception as e:
                logger.warning(f"Binding observer failed: {e}")

    def subscribe(self, observer: Callable[[T], None]) -> Callable[[], None]:
        """Observe changes; returns an unsubscribe function."""
        if observer not in self._observers:
            self._observers.append(observer)

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe


class PausedBindingSync:
    """Edge-triggered synchronisation of a Binding[bool] with override mode.

    Inbound: observe() acts only on edges of the external value.
    Outbound: publish() pushes internal mode changes out, recording the
    value first so the binding's echo arrives as a non-edge.
    """

    def __init__(
        self,
        binding: Binding[bool],
        on_pause: Callable[[], None],
        on_resume: Callable[[], None],
    ) -> None:
        self.binding = binding
        self._on_pause = on_pause
        self._on_resume = on_resume
        self._last_observed = False
        self._unsubscribe: Callable[[], None] = lambda: None

    @property
    def last_observed(self) -> bool:
        return self._last_observed

    def connect(self, observer: Callable[[bool], None]) -> None:
        """Subscribe observer to the binding and process its current value as an edge."""
        self._unsubscribe = self.binding.subscribe(observer)
        observer(self.binding.value)

    def disconnect(self) -> None:
        self._unsubscribe()
        self._unsubscribe = lambda: None

    def observe(self, is_paused: bool) -> None:
        """Handle an externally observed value; no-op unless it is an edge."""
        if is_paused == self._last_observed:
            return
        self._last_observed = is_paused
        logger.debug(f"⏱️ BINDING: external edge -> paused={is_paused}")
        if is_paused:
            self._on_pause()
        else:
            self._on_resume()

    def publish(self, is_paused: bool) -> None:
        """Push an internal mode change out to the binding."""
        if is_paused == self._last_observed:
            return
        self._last_observed = is_paused
        logger.debug(f"⏱️ BINDING: internal change -> paused={is_paused}")
        self.binding.value = is_paused
