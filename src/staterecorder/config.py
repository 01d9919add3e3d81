"""
Recorder configuration.

Configuration is immutable and provided as Python objects. A module-level
default is used unless a scope is pushed with recorder_config(), which
uses contextvars so nested and concurrent scopes stay independent.

Example:
    with recorder_config(long_step_size=10):
        overlay = install(store)   # long steps jump 10 records
"""

import contextvars
import dataclasses
import logging
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from typing import Generator, Optional

logger = logging.getLogger(__name__)


class Edge(Enum):
    """Screen edge the recorder overlay is pinned to."""
    TOP = "top"
    BOTTOM = "bottom"
    LEADING = "leading"
    TRAILING = "trailing"

    @property
    def alignment(self) -> str:
        """Alignment of the overlay content inside its container."""
        return self.value


@dataclass(frozen=True)
class RecorderConfig:
    """Tunables for stepping and the default diff dump."""
    step_size: int = 1
    long_step_size: int = 5
    default_edge: Edge = Edge.BOTTOM
    diff_width: int = 80  # Line width for pretty-printed states

    def __post_init__(self):
        if self.step_size < 1:
            raise ValueError(f"step_size must be positive, got {self.step_size}")
        if self.long_step_size < 1:
            raise ValueError(f"long_step_size must be positive, got {self.long_step_size}")


_default_config = RecorderConfig()

# Scoped override pushed by recorder_config(); None = use the module default
_scoped_config: contextvars.ContextVar[Optional[RecorderConfig]] = contextvars.ContextVar(
    'staterecorder_scoped_config', default=None
)


def set_recorder_config(config: RecorderConfig) -> None:
    """Replace the module-level default configuration."""
    global _default_config
    _default_config = config
    logger.debug(f"Recorder config set: {config}")


def get_recorder_config() -> RecorderConfig:
    """Effective configuration: innermost scope, else module default."""
    scoped = _scoped_config.get()
    return scoped if scoped is not None else _default_config


@contextmanager
def recorder_config(**changes) -> Generator[RecorderConfig, None, None]:
    """Scope a configuration derived from the current one.

    Args:
        **changes: RecorderConfig fields to override inside the block
    """
    config = dataclasses.replace(get_recorder_config(), **changes)
    token = _scoped_config.set(config)
    try:
        yield config
    finally:
        _scoped_config.reset(token)
