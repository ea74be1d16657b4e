"""Edit history for the in-memory host.

Each committed edit records the state it replaced. Undo and redo swap the
current state for a recorded one, so whatever the buffer and selections
look like at the moment of an undo is what a redo brings back. Selection
changes made after an edit committed are therefore part of the redo.
"""

from collections import deque
from dataclasses import dataclass
from typing import TYPE_CHECKING, Deque, Optional

from .constants import EditorConstants

if TYPE_CHECKING:
    from .model import Selection


@dataclass(frozen=True)
class ModelSnapshot:
    lines: tuple[str, ...]
    selections: tuple["Selection", ...]


class EditHistory:
    """Bounded stacks of snapshots on either side of the current state."""

    def __init__(self, limit: int = EditorConstants.MAX_UNDO_ENTRIES):
        self._past: Deque[ModelSnapshot] = deque(maxlen=limit)
        self._future: list[ModelSnapshot] = []

    def record(self, replaced: ModelSnapshot):
        """Remember the state an edit is about to replace."""
        self._past.append(replaced)
        self._future.clear()

    def can_undo(self) -> bool:
        return bool(self._past)

    def can_redo(self) -> bool:
        return bool(self._future)

    def undo(self, current: ModelSnapshot) -> Optional[ModelSnapshot]:
        """Trade current for the most recent recorded state, if any."""
        if not self._past:
            return None
        self._future.append(current)
        return self._past.pop()

    def redo(self, current: ModelSnapshot) -> Optional[ModelSnapshot]:
        if not self._future:
            return None
        self._past.append(current)
        return self._future.pop()
