"""
Diff presentation strategies.

A diff callback receives (previous_state, current_state) and presents them
however the host likes. print_states is used when none is injected.
"""
import difflib
import functools
import pprint
import sys
from typing import Any, Callable, Optional, TextIO

from staterecorder.config import RecorderConfig, get_recorder_config

DiffCallback = Callable[[Any, Any], None]


def _format_state(state: Any, width: int) -> str:
    return pprint.pformat(state, width=width, sort_dicts=False)


def _effective_width(width: Optional[int]) -> int:
    return width if width is not None else get_recorder_config().diff_width


def print_states(previous: Any, current: Any, out: Optional[TextIO] = None,
                 width: Optional[int] = None) -> None:
    """Default dump: both states, pretty-printed, one after the other.

    Args:
        width: Line width for pretty-printing; None reads the current config
    """
    out = out or sys.stdout
    width = _effective_width(width)
    print("previous", _format_state(previous, width), file=out)
    print("current", _format_state(current, width), file=out)


def unified_state_diff(previous: Any, current: Any, out: Optional[TextIO] = None,
                       width: Optional[int] = None) -> None:
    """Line diff of the pretty-printed states. Prints nothing if they format identically."""
    out = out or sys.stdout
    width = _effective_width(width)
    lines = difflib.unified_diff(
        _format_state(previous, width).splitlines(),
        _format_state(current, width).splitlines(),
        fromfile="previous",
        tofile="current",
        lineterm="",
    )
    for line in lines:
        print(line, file=out)


def resolve_diff_callback(callback: Optional[DiffCallback], config: RecorderConfig) -> DiffCallback:
    """Injected callback, else print_states bound to config's width."""
    if callback is not None:
        return callback
    return functools.partial(print_states, width=config.diff_width)
