"""
Serial event dispatch.

Store updates, presentation commands and paused-binding edges must never
interleave while they mutate the timeline. SerialDispatcher funnels all of
them into one FIFO queue with a single consumer:

- submit() on an idle dispatcher drains immediately on the calling thread,
  so single-threaded callers see commands complete before submit() returns
- submit() from inside a running handler is queued behind the current event
- submit() from another thread while a drain is active is queued and run
  by the draining thread
"""
import logging
import threading
from collections import deque
from typing import Any, Callable, Deque, Tuple

logger = logging.getLogger(__name__)


class SerialDispatcher:
    """Single-consumer FIFO executor for timeline events."""

    def __init__(self, name: str = "recorder") -> None:
        self.name = name
        self._queue: Deque[Tuple[Callable[..., Any], Tuple[Any, ...]]] = deque()
        self._lock = threading.Lock()
        self._draining = False

    @property
    def is_draining(self) -> bool:
        return self._draining

    def submit(self, fn: Callable[..., Any], *args: Any) -> None:
        """Queue fn(*args) and drain unless a drain is already running."""
        with self._lock:
            self._queue.append((fn, args))
            if self._draining:
                logger.debug(f"[{self.name}] queued {getattr(fn, '__name__', fn)} behind running event")
                return
            self._draining = True
        self._drain()

    def _drain(self) -> None:
        while True:
            with self._lock:
                if not self._queue:
                    self._draining = False
                    return
                fn, args = self._queue.popleft()
            try:
                fn(*args)
            except Exception as e:
                logger.warning(f"[{self.name}] event handler {getattr(fn, '__name__', fn)} failed: {e}")
