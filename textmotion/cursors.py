"""Apply a motion to every cursor of a multi-cursor selection set.

Each selection is resolved from its active point on its own; results keep
the order of the input selections.
"""

from typing import Sequence

from .model import Position, Range, Selection, TextBuffer
from .motions import MotionSpec, resolve


def target_positions(buffer: TextBuffer, selections: Sequence[Selection], spec: MotionSpec) -> list[Position]:
    """Resolved target of each active point."""
    return [resolve(buffer, selection.active, spec) for selection in selections]


def target_ranges(buffer: TextBuffer, selections: Sequence[Selection], spec: MotionSpec) -> list[Range]:
    """Span from each active point to its resolved target."""
    return [
        Range(selection.active, resolve(buffer, selection.active, spec))
        for selection in selections
    ]


def target_selections(buffer: TextBuffer, selections: Sequence[Selection], spec: MotionSpec) -> list[Selection]:
    """Each selection with its active end moved to the resolved target."""
    return [
        Selection(selection.anchor, resolve(buffer, selection.active, spec))
        for selection in selections
    ]
