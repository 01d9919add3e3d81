"""
UpdateRecord dataclass for the state recorder timeline.

One record is one observed transition of the host store's state: the
snapshot before the change, the snapshot after it, and an identity token.

Design Philosophy: Correct by Construction
- Immutable records (frozen dataclass)
- UUID-based identity, independent of the state payload
- Two transitions with equal content are still different events
"""

from dataclasses import dataclass, field
from typing import Any, Dict
import datetime
import time
import uuid


@dataclass(frozen=True, eq=False)
class UpdateRecord:
    """Immutable record of a single state transition.

    Equality and hashing use ``identity`` only; equal snapshots from
    distinct events stay distinct.
    """
    previous_state: Any
    current_state: Any
    identity: str  # UUID string
    timestamp: float = field(default_factory=time.time)
    label: str = ""

    @classmethod
    def create(cls, previous_state: Any, current_state: Any, label: str = "") -> 'UpdateRecord':
        """Create a new record with auto-generated identity and timestamp."""
        return cls(
            previous_state=previous_state,
            current_state=current_state,
            identity=str(uuid.uuid4()),
            timestamp=time.time(),
            label=label,
        )

    @classmethod
    def seed(cls, state: Any, label: str = "init") -> 'UpdateRecord':
        """Create the attach-time record: no transition yet, both sides equal."""
        return cls.create(state, state, label=label)

    def __eq__(self, other):
        if not isinstance(other, UpdateRecord):
            return NotImplemented
        return self.identity == other.identity

    def __hash__(self):
        return hash(self.identity)

    def to_dict(self) -> Dict:
        """Export to JSON-friendly dict (states are repr'd, they are opaque)."""
        return {
            'identity': self.identity,
            'timestamp': self.timestamp,
            'time': datetime.datetime.fromtimestamp(self.timestamp).strftime('%H:%M:%S.%f')[:-3],
            'label': self.label,
            'previous_state': repr(self.previous_state),
            'current_state': repr(self.current_state),
        }
