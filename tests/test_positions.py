"""Test Position, Range and Selection value types."""

import pytest
from textmotion.model import Position, Range, Selection


def test_position_ordering():
    """Positions order by line, then character."""
    assert Position(0, 5) < Position(1, 0)
    assert Position(1, 2) < Position(1, 3)
    assert Position(2, 0) >= Position(1, 9)
    assert max(Position(0, 4), Position(0, 2)) == Position(0, 4)


def test_position_translate_returns_new_value():
    pos = Position(1, 2)
    moved = pos.translate(0, 3)
    assert moved == Position(1, 5)
    assert pos == Position(1, 2)  # Unchanged
    assert pos.translate(line_delta=2) == Position(3, 2)


def test_position_with_character():
    assert Position(4, 7).with_character(0) == Position(4, 0)


def test_position_is_immutable():
    pos = Position(0, 0)
    with pytest.raises(AttributeError):
        pos.line = 3


def test_negative_position_rejected():
    with pytest.raises(ValueError):
        Position(-1, 0)
    with pytest.raises(ValueError):
        Position(0, 2).translate(0, -3)


def test_range_normalized():
    """A backwards range normalizes to start <= end."""
    backwards = Range(Position(0, 6), Position(0, 1))
    assert backwards.normalized() == Range(Position(0, 1), Position(0, 6))
    forwards = Range(Position(0, 1), Position(0, 6))
    assert forwards.normalized() is forwards


def test_range_contains_is_half_open():
    span = Range(Position(0, 2), Position(0, 5))
    assert span.contains(Position(0, 2))
    assert span.contains(Position(0, 4))
    assert not span.contains(Position(0, 5))
    assert not span.contains(Position(1, 3))


def test_range_is_empty():
    assert Range(Position(2, 3), Position(2, 3)).is_empty
    assert not Range(Position(2, 3), Position(2, 4)).is_empty


def test_selection_at_is_zero_width():
    selection = Selection.at(Position(3, 1))
    assert selection.anchor == selection.active == Position(3, 1)
    assert selection.is_empty


def test_selection_start_and_end():
    """start/end order the two ends regardless of direction."""
    selection = Selection(anchor=Position(1, 8), active=Position(0, 2))
    assert selection.start == Position(0, 2)
    assert selection.end == Position(1, 8)
    assert not selection.is_empty
