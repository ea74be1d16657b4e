"""textmotion CLI entry point.

Allows running via `python -m textmotion` and provides the console script
defined in `pyproject.toml`. Applies one command request to a file and
prints the buffer with its cursors highlighted.
"""

from __future__ import annotations

import json
import logging
import os
import sys
import tempfile
from typing import Optional

from .constants import EditorConstants
from .model import Position, Selection, TextModel
from .version import get_version_string


def _parse_position(text: str) -> Position:
    line, sep, character = text.partition(':')
    if not sep:
        raise ValueError(f"Invalid position {text!r}, expected LINE:CHAR")
    return Position(int(line), int(character))


def parse_cursor(text: str) -> Selection:
    """Parse LINE:CHAR (a cursor) or LINE:CHAR-LINE:CHAR (anchor-active)."""
    anchor_text, sep, active_text = text.partition('-')
    anchor = _parse_position(anchor_text)
    active = _parse_position(active_text) if sep else anchor
    return Selection(anchor, active)


def load_model(filename: str, word_pattern: Optional[str] = None) -> TextModel:
    """Load a file into a TextModel; a missing file gives an empty buffer."""
    try:
        with open(filename, 'r', encoding='utf-8') as f:
            return TextModel.from_text(f.read(), word_pattern=word_pattern)
    except FileNotFoundError:
        return TextModel(word_pattern=word_pattern)


def save_model(model: TextModel, filename: str):
    """Save the buffer to filename atomically."""
    dir_name = os.path.dirname(filename) or '.'
    suffix = os.path.splitext(filename)[1]
    with tempfile.NamedTemporaryFile(mode='w', encoding='utf-8',
                                     dir=dir_name, suffix=suffix,
                                     delete=False) as temp_file:
        temp_filename = temp_file.name
        temp_file.write(model.text)
        temp_file.flush()
        os.fsync(temp_file.fileno())
    try:
        os.replace(temp_filename, filename)
    except OSError:
        os.remove(temp_filename)
        raise


def _usage_error(message: str) -> int:
    print(f"textmotion: {message}", file=sys.stderr)
    print(EditorConstants.USAGE_MESSAGE, file=sys.stderr)
    return 2


def init_settings() -> int:
    """Write the effective settings to the user's settings file and print its path.

    Existing values are kept; missing or invalid ones are filled with defaults.
    """
    from .settings import SettingsStore

    store = SettingsStore()
    if not store.save(store.load()):
        print(f"Error: Cannot write {store.settings_file}", file=sys.stderr)
        return 1
    print(store.settings_file)
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    # Very small arg parsing: version, settings file, or FILE REQUEST [CURSOR ...] [--write]
    args = list(sys.argv[1:] if argv is None else argv)
    if args and args[0] in ("--version", "-V"):
        print(get_version_string())
        return 0
    if args and args[0] == "--init-settings":
        return init_settings()

    write = '--write' in args
    args = [a for a in args if a != '--write']
    if len(args) < 2:
        return _usage_error("expected FILE and REQUEST")
    filename, request_text, *cursor_args = args

    try:
        request = json.loads(request_text)
        selections = [parse_cursor(c) for c in cursor_args]
    except ValueError as e:
        return _usage_error(str(e))
    if not isinstance(request, dict):
        return _usage_error("REQUEST must be a JSON object")

    # Lazy import to avoid importing terminal deps for --version
    import blessed
    from .commands import execute_request
    from .render import render_lines, render_status
    from .settings import load_settings

    settings = load_settings()
    logging.basicConfig(level=settings.log_level, format="%(levelname)s %(name)s: %(message)s")

    try:
        model = load_model(filename, settings.word_pattern)
    except OSError as e:
        print(f"Error loading file: {e}", file=sys.stderr)
        return 1
    if selections:
        model.selections = selections

    modified = execute_request(model, request)

    term = blessed.Terminal()
    for line in render_lines(model, term):
        print(line)
    status = render_status(model, term)
    if status:
        print(status)

    if modified and write:
        try:
            save_model(model, filename)
        except OSError as e:
            print(f"Error: Cannot save to {filename}: {e}", file=sys.stderr)
            return 1
    return 1 if model.status_message else 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
