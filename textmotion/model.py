import re
from abc import ABC, abstractmethod
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Callable, ContextManager, Iterator, Optional, Sequence

from .constants import EditorConstants
from .undo import EditHistory, ModelSnapshot


@dataclass(frozen=True, order=True)
class Position:
    line: int = 0
    character: int = 0

    def __post_init__(self):
        if self.line < 0 or self.character < 0:
            raise ValueError(
                f"Position must be non-negative, got ({self.line}, {self.character})"
            )

    def translate(self, line_delta: int = 0, character_delta: int = 0) -> "Position":
        return Position(self.line + line_delta, self.character + character_delta)

    def with_character(self, character: int) -> "Position":
        return Position(self.line, character)


@dataclass(frozen=True)
class Range:
    """Half-open span. Callers are responsible for start <= end."""
    start: Position
    end: Position

    def normalized(self) -> "Range":
        if self.end < self.start:
            return Range(self.end, self.start)
        return self

    @property
    def is_empty(self) -> bool:
        return self.start == self.end

    def contains(self, position: Position) -> bool:
        span = self.normalized()
        return span.start <= position < span.end


@dataclass(frozen=True)
class Selection:
    anchor: Position
    active: Position

    @classmethod
    def at(cls, position: Position) -> "Selection":
        """Zero-width selection (a plain cursor) at position."""
        return cls(position, position)

    @property
    def start(self) -> Position:
        return min(self.anchor, self.active)

    @property
    def end(self) -> Position:
        return max(self.anchor, self.active)

    @property
    def is_empty(self) -> bool:
        return self.anchor == self.active


class EditError(Exception):
    """Raised when an edit transaction cannot be applied as a whole."""


class HostCommandError(Exception):
    """Raised when a pass-through command is not known to the host."""


class TextBuffer(ABC):
    """Read-only capability the motion resolver needs from a host."""

    @abstractmethod
    def line_text(self, line_number: int) -> str:
        """Return the text of a line, without its line terminator."""

    @abstractmethod
    def word_range_at(self, position: Position) -> Optional[Range]:
        """Return the range of the word containing position, or None.

        A position just past the last character of a word still counts
        as inside that word.
        """


class EditBuilder:
    """Collects the deletions of one edit transaction."""

    def __init__(self):
        self.ranges: list[Range] = []

    def delete(self, range_: Range):
        self.ranges.append(range_.normalized())


class HostEditor(TextBuffer):
    """Editor capabilities consumed by the motion-driven operations."""

    @property
    @abstractmethod
    def selections(self) -> list[Selection]:
        """Current selections, primary first."""

    @selections.setter
    @abstractmethod
    def selections(self, selections: Sequence[Selection]):
        """Replace every selection."""

    @abstractmethod
    def edit(self) -> ContextManager[EditBuilder]:
        """Open an edit transaction.

        Deletions registered on the yielded builder are applied together
        when the block exits normally; if the block raises, or the ranges
        cannot be applied, the buffer is left untouched.
        """

    @abstractmethod
    def execute_command(self, name: str, args: dict[str, Any]) -> Any:
        """Run a host command by name."""

    @abstractmethod
    def increment_number(self, position: Position) -> bool:
        """Increment the number under or after position."""

    @abstractmethod
    def show_error(self, message: str):
        """Tell the user something went wrong."""


def _delete_range(lines: list[str], span: Range):
    head = lines[span.start.line][:span.start.character]
    tail = lines[span.end.line][span.end.character:]
    lines[span.start.line:span.end.line + 1] = [head + tail]


def _shift_position(position: Position, span: Range) -> Position:
    """Map a position through the deletion of span."""
    if position <= span.start:
        return position
    if position <= span.end:
        return span.start
    if position.line == span.end.line:
        return Position(
            span.start.line,
            span.start.character + position.character - span.end.character,
        )
    return Position(position.line - (span.end.line - span.start.line), position.character)


class TextModel(HostEditor):
    """In-memory host editor over a list of lines."""

    lines: list[str]

    def __init__(self, lines: Optional[Sequence[str]] = None, word_pattern: Optional[str] = None):
        self.lines = list(lines) if lines else [""]
        self.word_pattern = re.compile(word_pattern or EditorConstants.DEFAULT_WORD_PATTERN)
        self._selections: list[Selection] = [Selection.at(Position())]
        self.history = EditHistory()
        self.status_message: Optional[str] = None
        # Pass-through requests in the order they were executed
        self.executed_commands: list[tuple[str, dict[str, Any]]] = []
        self._host_commands: dict[str, Callable[[dict[str, Any]], Any]] = {
            EditorConstants.UNDO_COMMAND: lambda args: self.undo(),
            EditorConstants.REDO_COMMAND: lambda args: self.redo(),
        }

    @classmethod
    def from_text(cls, text: str, word_pattern: Optional[str] = None) -> "TextModel":
        return cls(text.split("\n") if text else [""], word_pattern=word_pattern)

    @property
    def text(self) -> str:
        return "\n".join(self.lines)

    # --- TextBuffer ---

    def line_text(self, line_number: int) -> str:
        if not 0 <= line_number < len(self.lines):
            raise IndexError(f"Line {line_number} out of range (0..{len(self.lines) - 1})")
        return self.lines[line_number]

    def word_range_at(self, position: Position) -> Optional[Range]:
        text = self.line_text(position.line)
        for match in self.word_pattern.finditer(text):
            if match.start() == match.end():
                continue
            if match.start() > position.character:
                break
            if position.character <= match.end():
                return Range(
                    position.with_character(match.start()),
                    position.with_character(match.end()),
                )
        return None

    # --- Selections ---

    @property
    def selections(self) -> list[Selection]:
        return list(self._selections)

    @selections.setter
    def selections(self, selections: Sequence[Selection]):
        if not selections:
            raise ValueError("An editor needs at least one selection")
        self._selections = list(selections)

    # --- Edits ---

    @contextmanager
    def edit(self) -> Iterator[EditBuilder]:
        builder = EditBuilder()
        yield builder
        self._apply_deletions(builder.ranges)

    def _validate_range(self, span: Range):
        for position in (span.start, span.end):
            if position.line >= len(self.lines) or position.character > len(self.lines[position.line]):
                raise EditError(f"Position ({position.line}, {position.character}) is outside the buffer")

    def _apply_deletions(self, ranges: list[Range]):
        for span in ranges:
            self._validate_range(span)
        ordered = sorted(
            (span for span in ranges if not span.is_empty),
            key=lambda span: (span.start, span.end),
        )
        if not ordered:
            return
        for previous, current in zip(ordered, ordered[1:]):
            if current.start < previous.end:
                raise EditError("Overlapping ranges are not allowed in one edit")

        self.history.record(self.snapshot())
        lines = list(self.lines)
        selections = list(self._selections)
        # Back to front so earlier ranges keep their coordinates
        for span in reversed(ordered):
            _delete_range(lines, span)
            selections = [
                Selection(_shift_position(s.anchor, span), _shift_position(s.active, span))
                for s in selections
            ]
        self.lines = lines
        self._selections = selections

    def increment_number(self, position: Position, delta: int = 1) -> bool:
        """Add delta to the first number on the line ending after position.

        The cursor lands on the last digit of the new number.

        Returns:
            True if a number was found and changed
        """
        text = self.line_text(position.line)
        for match in re.finditer(EditorConstants.NUMBER_PATTERN, text):
            if match.end() <= position.character:
                continue
            self.history.record(self.snapshot())
            replacement = str(int(match.group()) + delta)
            self.lines[position.line] = text[:match.start()] + replacement + text[match.end():]
            cursor = Position(position.line, match.start() + len(replacement) - 1)
            self._selections = [Selection.at(cursor)]
            return True
        return False

    # --- History ---

    def snapshot(self) -> ModelSnapshot:
        return ModelSnapshot(lines=tuple(self.lines), selections=tuple(self._selections))

    def apply_snapshot(self, snapshot: ModelSnapshot):
        self.lines = list(snapshot.lines)
        self._selections = list(snapshot.selections)

    def undo(self) -> bool:
        """Restore the state before the last edit. Also the ``undo`` host command."""
        previous = self.history.undo(self.snapshot())
        if previous is None:
            return False
        self.apply_snapshot(previous)
        return True

    def redo(self) -> bool:
        following = self.history.redo(self.snapshot())
        if following is None:
            return False
        self.apply_snapshot(following)
        return True

    # --- Host services ---

    def register_command(self, name: str, callback: Callable[[dict[str, Any]], Any]):
        self._host_commands[name] = callback

    def execute_command(self, name: str, args: dict[str, Any]) -> Any:
        callback = self._host_commands.get(name)
        if callback is None:
            raise HostCommandError(f"Host command not found: {name}")
        self.executed_commands.append((name, args))
        return callback(args)

    def show_error(self, message: str):
        self.status_message = message
