"""Terminal rendering of a buffer and its cursors using Blessed."""

from typing import Optional

import blessed

from .model import TextModel


def render_lines(model: TextModel, term: blessed.Terminal) -> list[str]:
    """Render each line with its active points in reverse video.

    A cursor past the last character of a line is drawn as a highlighted
    space.
    """
    cursors: dict[int, set[int]] = {}
    for selection in model.selections:
        cursors.setdefault(selection.active.line, set()).add(selection.active.character)

    rendered = []
    for line_number, line in enumerate(model.lines):
        columns = cursors.get(line_number, set())
        width = max([len(line)] + [c + 1 for c in columns])
        display = line.ljust(width) if columns else line
        out = []
        for i, ch in enumerate(display):
            out.append(term.reverse(ch) if i in columns else ch)
        rendered.append(''.join(out))
    return rendered


def render_status(model: TextModel, term: blessed.Terminal) -> Optional[str]:
    """Format the model's status message, if any."""
    if not model.status_message:
        return None
    return term.bold(model.status_message)
