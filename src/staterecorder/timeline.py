"""
TimelineBuffer: recorded history plus the cursor used for time travel.

Two sequences are kept:
- primary: the timeline being inspected, append-only while live
- pending: updates that arrive while a historical record is being viewed

The cursor is the single source of truth for the mode. Cursor unset = live,
cursor set = overriding. No separate mode flag exists.

Thread safety: Not thread-safe. The owning controller serialises access.
"""
import logging
import math
from typing import Any, Dict, List, Optional

from staterecorder.update_record import UpdateRecord

logger = logging.getLogger(__name__)


class TimelineBuffer:
    """Ordered record history with index and progress arithmetic.

    Index 0 = oldest (seed record), max_index = newest.
    Nothing is ever evicted; history grows for the lifetime of the buffer.
    """

    def __init__(self) -> None:
        self.primary: List[UpdateRecord] = []
        self.pending: List[UpdateRecord] = []
        self.cursor: Optional[UpdateRecord] = None

    # ========== RECORDING ==========

    def append(self, record: UpdateRecord) -> bool:
        """Append to primary when live, to pending when overriding.

        Returns:
            True if the record landed in primary.
        """
        if self.cursor is None:
            self.primary.append(record)
            return True
        self.pending.append(record)
        return False

    def splice_pending(self) -> List[UpdateRecord]:
        """Move pending onto the end of primary, preserving order.

        Returns:
            The records that were moved (empty list if none).
        """
        moved = self.pending
        if moved:
            self.primary.extend(moved)
            logger.debug(f"⏱️ SPLICE: moved {len(moved)} pending record(s) into primary")
        self.pending = []
        return moved

    # ========== INDEXING ==========

    @property
    def max_index(self) -> int:
        return max(0, len(self.primary) - 1)

    @property
    def record_count(self) -> int:
        return len(self.primary)

    @property
    def pending_count(self) -> int:
        return len(self.pending)

    @property
    def is_overriding(self) -> bool:
        return self.cursor is not None

    def index_of(self, record: UpdateRecord) -> int:
        """Position of record in primary by identity.

        Falls back to the last index when the record is not in primary
        (e.g. a synthesized record that was never recorded).
        """
        for i, candidate in enumerate(self.primary):
            if candidate.identity == record.identity:
                return i
        logger.debug(f"⏱️ INDEX: record {record.identity[:8]} not in primary, using last index")
        return self.max_index

    @property
    def current_index(self) -> int:
        if self.cursor is None:
            return self.max_index
        return self.index_of(self.cursor)

    def set_index(self, index: int) -> Optional[UpdateRecord]:
        """Point the cursor at primary[clamp(index, 0, max_index)].

        Every step, jump and drag goes through here so clamping is uniform.
        Setting the cursor enters override mode as a side effect.

        Returns:
            The record now under the cursor, or None if primary is empty.
        """
        if not self.primary:
            return None
        clamped = max(0, min(index, self.max_index))
        self.cursor = self.primary[clamped]
        return self.cursor

    def pause(self) -> Optional[UpdateRecord]:
        """Set the cursor to the most recent record in primary."""
        if not self.primary:
            return None
        self.cursor = self.primary[-1]
        return self.cursor

    def clear_cursor(self) -> None:
        """Unset the cursor (return to live). Caller splices pending."""
        self.cursor = None

    # ========== PROGRESS ==========

    @property
    def progress(self) -> float:
        """Position as a fraction of history in [0, 1].

        Empty primary reads as fully live (1.0). A single record has no
        range to scrub, so it reads as 0.0 instead of 0/0.
        """
        if not self.primary:
            return 1.0
        if self.max_index == 0:
            return 0.0
        return self.current_index / self.max_index

    @progress.setter
    def progress(self, value: float) -> None:
        if math.isnan(value):
            return
        value = max(0.0, min(1.0, value))
        # Halfway points round up to the later record
        self.set_index(math.floor(value * self.max_index + 0.5))

    # ========== INSPECTION ==========

    def history_info(self) -> List[Dict[str, Any]]:
        """Human-readable history for display, oldest first."""
        current_index = self.current_index
        head_index = self.max_index

        result = []
        for i, record in enumerate(self.primary):
            info = record.to_dict()
            info.update({
                'index': i,
                'label': record.label or f"Update #{i}",
                'is_current': i == current_index,
                'is_head': i == head_index,
            })
            result.append(info)
        return result
