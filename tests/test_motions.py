"""Test motion resolution: single steps, count folding, errors."""

import itertools

import pytest
from textmotion.model import Position, TextModel
from textmotion.motions import MotionError, MotionKind, MotionSpec, resolve


def create_test_model(lines):
    """Create a test model with given lines."""
    return TextModel(lines)


def letter(ch, **kwargs):
    return MotionSpec(MotionKind.LETTER, letter=ch, **kwargs)


def after_letter(ch, **kwargs):
    return MotionSpec(MotionKind.AFTER_LETTER, letter=ch, **kwargs)


def word(**kwargs):
    return MotionSpec(MotionKind.WORD, **kwargs)


def line_end(**kwargs):
    return MotionSpec(MotionKind.LINE_END, **kwargs)


# --- letter ---

def test_letter_finds_first_occurrence():
    model = create_test_model(["hello world"])
    assert resolve(model, Position(0, 0), letter('o')) == Position(0, 4)


def test_letter_not_found_stays_put():
    model = create_test_model(["hello world"])
    assert resolve(model, Position(0, 0), letter('z')) == Position(0, 0)


def test_letter_searches_strictly_after_cursor():
    """The character under the cursor is never a match."""
    model = create_test_model(["hello"])
    assert resolve(model, Position(0, 2), letter('l')) == Position(0, 3)
    assert resolve(model, Position(0, 3), letter('l')) == Position(0, 3)


def test_letter_stays_on_its_line():
    model = create_test_model(["abc", "xyz"])
    assert resolve(model, Position(0, 0), letter('y')) == Position(0, 0)
    assert resolve(model, Position(1, 0), letter('z')) == Position(1, 2)


def test_letter_with_count():
    model = create_test_model(["hello world"])
    assert resolve(model, Position(0, 0), letter('o', count=2)) == Position(0, 7)


def test_letter_count_beyond_occurrences():
    """Extra repeats stop at the last occurrence found."""
    model = create_test_model(["hello world"])
    assert resolve(model, Position(0, 0), letter('o', count=3)) == Position(0, 7)


# --- lineEnd ---

def test_line_end():
    model = create_test_model(["hello world"])
    assert resolve(model, Position(0, 3), line_end()) == Position(0, 11)


def test_line_end_independent_of_start():
    model = create_test_model(["hello world", ""])
    assert resolve(model, Position(0, 11), line_end()) == Position(0, 11)
    assert resolve(model, Position(1, 0), line_end()) == Position(1, 0)


def test_line_end_is_idempotent():
    model = create_test_model(["hello world"])
    for character in range(12):
        once = resolve(model, Position(0, character), line_end())
        assert resolve(model, once, line_end()) == once


def test_line_end_with_count():
    model = create_test_model(["hello world"])
    assert resolve(model, Position(0, 3), line_end(count=3)) == Position(0, 11)


# --- afterLetter ---

def test_after_letter_lands_past_the_letter():
    model = create_test_model(["a,b,c"])
    assert resolve(model, Position(0, 0), after_letter(',')) == Position(0, 2)


def test_after_letter_not_found():
    model = create_test_model(["abc"])
    assert resolve(model, Position(0, 0), after_letter(',')) == Position(0, 0)


def test_after_letter_while_repeating_stays_on_letter():
    model = create_test_model(["a,b,c"])
    spec = after_letter(',', will_repeat=True)
    assert resolve(model, Position(0, 0), spec) == Position(0, 1)


def test_after_letter_with_count():
    model = create_test_model(["a,b,c"])
    assert resolve(model, Position(0, 0), after_letter(',', count=2)) == Position(0, 4)


def test_after_letter_count_falls_back_to_single_step():
    """When only one letter is left, the result is one plain step."""
    model = create_test_model(["a,b"])
    assert resolve(model, Position(0, 0), after_letter(',', count=2)) == Position(0, 2)


def test_after_letter_count_differs_from_repeated_steps():
    """Folding searches from the letter, so adjacent letters are both consumed."""
    model = create_test_model(["a,,b"])
    single = after_letter(',')
    twice = resolve(model, resolve(model, Position(0, 0), single), single)
    assert twice == Position(0, 2)
    assert resolve(model, Position(0, 0), after_letter(',', count=2)) == Position(0, 3)


# --- word ---

def test_word_inside_stops_at_word_end():
    model = create_test_model(["foo bar"])
    assert resolve(model, Position(0, 0), word(inside_only=True)) == Position(0, 3)


def test_word_skips_to_next_word_start():
    model = create_test_model(["foo bar"])
    assert resolve(model, Position(0, 0), word()) == Position(0, 4)


def test_word_skips_punctuation_and_spaces():
    model = create_test_model(["foo, (bar)"])
    assert resolve(model, Position(0, 1), word()) == Position(0, 6)


def test_word_at_end_of_line():
    model = create_test_model(["foo"])
    assert resolve(model, Position(0, 3), word()) == Position(0, 3)
    assert resolve(model, Position(0, 1), word()) == Position(0, 3)


def test_word_without_following_word_stops_at_line_end():
    model = create_test_model(["foo  ;;"])
    assert resolve(model, Position(0, 0), word()) == Position(0, 7)


def test_word_from_whitespace():
    model = create_test_model(["foo   bar"])
    assert resolve(model, Position(0, 4), word()) == Position(0, 6)
    # Not in a word and not scanning: nothing moves
    assert resolve(model, Position(0, 4), word(inside_only=True)) == Position(0, 4)


def test_word_inside_while_repeating_scans():
    """will_repeat forces the scan to the next word even for inside motions."""
    model = create_test_model(["foo bar"])
    spec = word(inside_only=True, will_repeat=True)
    assert resolve(model, Position(0, 0), spec) == Position(0, 4)


def test_word_with_count():
    model = create_test_model(["foo bar baz"])
    assert resolve(model, Position(0, 0), word(count=2)) == Position(0, 8)


def test_word_inside_with_count_ends_inside_last_word():
    model = create_test_model(["foo bar baz"])
    assert resolve(model, Position(0, 0), word(inside_only=True, count=2)) == Position(0, 7)


def test_word_inside_count_past_last_word():
    model = create_test_model(["foo bar"])
    assert resolve(model, Position(0, 0), word(inside_only=True, count=3)) == Position(0, 7)


# --- properties ---

LINES = ["hello world", "a,,b,c", "foo bar  baz.qux", "", "x = -1.5e3 + y"]
SPECS = [
    letter('o'), letter('z'), letter(','),
    after_letter(','), after_letter('o'),
    word(), word(inside_only=True),
    line_end(),
]


def _all_positions(model):
    for line_number, text in enumerate(model.lines):
        for character in range(len(text) + 1):
            yield Position(line_number, character)


def test_not_found_letter_is_identity():
    model = create_test_model(LINES)
    for pos in _all_positions(model):
        assert resolve(model, pos, letter('#')) == pos


def test_blocked_first_step_halts_every_count():
    """If one step makes no progress, no count can make progress."""
    model = create_test_model(LINES)
    for spec, pos in itertools.product(SPECS, _all_positions(model)):
        if resolve(model, pos, spec.with_(will_repeat=True)) != pos:
            continue
        for count in range(2, 6):
            assert resolve(model, pos, spec.with_(count=count)) == pos


def _recursive_resolve(buffer, pos, spec):
    """Count folding written as the plain recursion."""
    if spec.count > 1:
        next_pos = _recursive_resolve(buffer, pos, spec.with_(count=1, will_repeat=True))
        if next_pos == pos:
            return pos
        final = _recursive_resolve(buffer, next_pos, spec.with_(count=spec.count - 1))
        if final == next_pos:
            return _recursive_resolve(buffer, pos, spec.with_(count=1))
        return final
    return resolve(buffer, pos, spec)


def test_count_folding_matches_recursive_definition():
    model = create_test_model(LINES)
    for spec, pos in itertools.product(SPECS, _all_positions(model)):
        for count in range(2, 7):
            counted = spec.with_(count=count)
            assert resolve(model, pos, counted) == _recursive_resolve(model, pos, counted), (
                f"{counted} from {pos}"
            )


def test_large_count_does_not_recurse():
    model = create_test_model(["o" * 3000])
    assert resolve(model, Position(0, 0), letter('o', count=5000)) == Position(0, 2999)


def test_resolve_does_not_modify_buffer():
    model = create_test_model(["hello world"])
    for spec in SPECS:
        resolve(model, Position(0, 0), spec.with_(count=3))
    assert model.lines == ["hello world"]
    assert not model.history.can_undo()


# --- errors ---

def test_unknown_kind_raises_motion_error():
    model = create_test_model(["hello"])
    with pytest.raises(MotionError) as excinfo:
        resolve(model, Position(0, 0), MotionSpec(kind="bogus"))
    assert excinfo.value.kind == "bogus"
    assert "bogus" in str(excinfo.value)


def test_unknown_kind_propagates_through_count():
    model = create_test_model(["hello"])
    with pytest.raises(MotionError):
        resolve(model, Position(0, 0), MotionSpec(kind="bogus", count=4))


def test_string_kind_is_accepted():
    model = create_test_model(["hello world"])
    assert resolve(model, Position(0, 0), MotionSpec(kind="letter", letter="w")) == Position(0, 6)


def test_count_must_be_positive():
    with pytest.raises(MotionError):
        line_end(count=0)


def test_letter_motion_needs_letter():
    with pytest.raises(MotionError):
        MotionSpec(MotionKind.LETTER)
    with pytest.raises(MotionError):
        MotionSpec("afterLetter", letter="")


def test_with_returns_copy():
    spec = letter('o', count=3)
    derived = spec.with_(count=1, will_repeat=True)
    assert derived == MotionSpec(MotionKind.LETTER, letter='o', count=1, will_repeat=True)
    assert spec.count == 3
    assert not spec.will_repeat


def test_count_must_be_an_integer():
    for count in (None, "2", 1.5, True):
        with pytest.raises(MotionError):
            MotionSpec(MotionKind.WORD, count=count)
