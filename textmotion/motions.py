"""Motion specifications and the resolver that turns them into positions.

A motion is resolved against a TextBuffer without modifying it. Motions
that cannot advance resolve to the position they started from.
"""

from collections.abc import Mapping
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Optional

from .model import Position, TextBuffer


class MotionKind(str, Enum):
    """Kinds of motion understood by the resolver."""
    LETTER = "letter"
    AFTER_LETTER = "afterLetter"
    WORD = "word"
    LINE_END = "lineEnd"


LETTER_KINDS = (MotionKind.LETTER, MotionKind.AFTER_LETTER)


def _kind_name(kind: Any) -> Any:
    return kind.value if isinstance(kind, MotionKind) else kind


class MotionError(Exception):
    """Raised for a motion the resolver cannot interpret."""

    def __init__(self, message: str, kind: Any = None):
        super().__init__(message)
        self.kind = kind


@dataclass(frozen=True)
class MotionSpec:
    """Declarative description of a cursor motion.

    Attributes:
        kind: Which motion to perform
        letter: Character (or string) searched for by letter motions
        inside_only: For word motions, stop at the end of the current word
        count: How many times to repeat the single step
        will_repeat: Set by the resolver on steps taken inside a repeat;
            callers leave it False
    """
    kind: MotionKind
    letter: Optional[str] = None
    inside_only: bool = False
    count: int = 1
    will_repeat: bool = False

    def __post_init__(self):
        if isinstance(self.count, bool) or not isinstance(self.count, int) or self.count < 1:
            raise MotionError(f"Motion count must be a positive integer, got {self.count!r}")
        if self.kind in LETTER_KINDS and not self.letter:
            raise MotionError(f"Motion {_kind_name(self.kind)} needs a letter", kind=self.kind)

    def with_(self, **changes) -> "MotionSpec":
        """Copy of this spec with some fields overridden."""
        return replace(self, **changes)

    @classmethod
    def from_dict(cls, data: Any) -> "MotionSpec":
        """Read a motion from a command request.

        Accepts ``kind`` or ``type``, ``insideOnly`` or ``inside``, and the
        ``{"type": "line", "modifier": "end"}`` spelling of a line-end
        motion. ``willRepeat`` belongs to the resolver and is ignored.

        Raises:
            MotionError: If the kind is unknown or a field is malformed
        """
        if not isinstance(data, Mapping):
            raise MotionError(f"Movement must be an object, got {type(data).__name__}")

        raw_kind = data.get("kind", data.get("type"))
        if raw_kind == "line" and data.get("modifier") == "end":
            raw_kind = MotionKind.LINE_END.value
        try:
            kind = MotionKind(raw_kind)
        except ValueError:
            raise MotionError(f"Unknown movement: {raw_kind}", kind=raw_kind) from None

        letter = data.get("letter")
        if kind in LETTER_KINDS and (not isinstance(letter, str) or not letter):
            raise MotionError(f"Motion {kind.value} needs a letter", kind=kind)

        count = data.get("count")
        if count is None:
            count = 1

        inside_only = data.get("insideOnly", data.get("inside", False))
        return cls(kind=kind, letter=letter, inside_only=bool(inside_only), count=count)


def resolve(buffer: TextBuffer, pos: Position, spec: MotionSpec) -> Position:
    """Resolve spec starting at pos.

    Raises:
        MotionError: If spec.kind is not a known MotionKind
    """
    if spec.count > 1:
        return _resolve_repeated(buffer, pos, spec)
    return _single_step(buffer, pos, spec)


def _resolve_repeated(buffer: TextBuffer, pos: Position, spec: MotionSpec) -> Position:
    """Fold a count into single steps.

    Each fold starting at p with n > 1 steps left does:
      next = repeat step from p
      next == p              -> p (blocked, the whole repeat halts)
      fold(next, n - 1) == next -> plain single step from p
      otherwise              -> fold(next, n - 1)
    and a fold with one step left is a plain single step.

    Folds are evaluated with a loop instead of recursion so large counts do
    not exhaust the stack: walk forward collecting each fold's start, then
    unwind from the innermost fold outwards.
    """
    repeat_spec = spec.with_(count=1, will_repeat=True)
    single_spec = spec.with_(count=1)

    starts = [pos]
    blocked = False
    while len(starts) < spec.count:
        next_pos = _single_step(buffer, starts[-1], repeat_spec)
        if next_pos == starts[-1]:
            blocked = True
            break
        starts.append(next_pos)

    if blocked:
        result = starts[-1]
    else:
        result = _single_step(buffer, starts[-1], single_spec)

    for index in range(len(starts) - 2, -1, -1):
        if result == starts[index + 1]:
            # Remaining repeats stalled: redo this fold's step standalone
            result = _single_step(buffer, starts[index], single_spec)
    return result


def _next_letter_position(buffer: TextBuffer, pos: Position, letter: str) -> Optional[Position]:
    """Position of the first letter strictly after pos on its line."""
    remaining = buffer.line_text(pos.line)[pos.character + 1:]
    index = remaining.find(letter)
    if index < 0:
        return None
    return Position(pos.line, pos.character + index + 1)


def _single_step(buffer: TextBuffer, pos: Position, spec: MotionSpec) -> Position:
    if spec.kind == MotionKind.LETTER:
        found = _next_letter_position(buffer, pos, spec.letter)
        return found if found is not None else pos

    elif spec.kind == MotionKind.LINE_END:
        return pos.with_character(len(buffer.line_text(pos.line)))

    elif spec.kind == MotionKind.AFTER_LETTER:
        found = _next_letter_position(buffer, pos, spec.letter)
        if found is None:
            return pos
        # Inside a repeat, stay on the letter so the next step searches past it
        return found if spec.will_repeat else found.translate(0, 1)

    elif spec.kind == MotionKind.WORD:
        line = buffer.line_text(pos.line)
        word_range = buffer.word_range_at(pos)
        word_end = word_range.end if word_range is not None else pos
        if spec.will_repeat or not spec.inside_only:
            # Skip to the start of the next word, or the end of the line
            while word_end.character < len(line):
                word_end = word_end.translate(0, 1)
                if buffer.word_range_at(word_end) is not None:
                    break
        return word_end

    raise MotionError(f"Unknown movement: {_kind_name(spec.kind)}", kind=spec.kind)
