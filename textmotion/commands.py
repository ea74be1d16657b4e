"""Command pattern implementation for motion-driven editor actions."""

import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any, Dict, Optional

from .constants import EditorConstants
from .cursors import target_positions, target_ranges, target_selections
from .model import HostEditor, Selection
from .motions import MotionSpec

logger = logging.getLogger(__name__)


def move(editor: HostEditor, spec: MotionSpec):
    """Collapse every selection to a cursor at its resolved target."""
    targets = target_positions(editor, editor.selections, spec)
    editor.selections = [Selection.at(position) for position in targets]


def select(editor: HostEditor, spec: MotionSpec):
    """Move every active end to its resolved target, keeping anchors."""
    editor.selections = target_selections(editor, editor.selections, spec)


def delete(editor: HostEditor, spec: MotionSpec) -> bool:
    """Delete from every active point to its resolved target.

    All ranges are resolved before the buffer is touched and removed in a
    single edit transaction. Afterwards the selections are set back to
    exactly what they were before the edit; they are not moved to follow
    the shifted text. On a TextModel, undoing the delete and redoing it
    comes back to these restored selections.

    Returns:
        True if any text was removed. When every motion is blocked the
        editor is not touched at all.
    """
    selections = editor.selections
    ranges = [span for span in target_ranges(editor, selections, spec) if not span.is_empty]
    if not ranges:
        return False
    with editor.edit() as edits:
        for span in ranges:
            edits.delete(span)
    editor.selections = selections
    return True


class EditorCommand(ABC):
    """Base class for commands reachable from a command request."""

    @abstractmethod
    def execute(self, editor: HostEditor, request: Mapping[str, Any]) -> bool:
        """Execute the command.

        Args:
            editor: Host editor to act on
            request: The command request that selected this command

        Returns:
            True if the command modified the document
        """
        pass


class MotionCommand(EditorCommand):
    """Base class for commands driven by the request's movement."""

    def execute(self, editor: HostEditor, request: Mapping[str, Any]) -> bool:
        spec = MotionSpec.from_dict(request.get("movement"))
        return self._apply(editor, spec)

    @abstractmethod
    def _apply(self, editor: HostEditor, spec: MotionSpec) -> bool:
        """Perform the motion-driven operation."""
        pass


class MoveCommand(MotionCommand):
    def _apply(self, editor, spec):
        move(editor, spec)
        return False


class SelectCommand(MotionCommand):
    def _apply(self, editor, spec):
        select(editor, spec)
        return False


class DeleteCommand(MotionCommand):
    def _apply(self, editor, spec):
        return delete(editor, spec)


class IncrementCommand(EditorCommand):
    """Increment the number at the primary selection; implemented by the host."""

    def execute(self, editor, request):
        return editor.increment_number(editor.selections[0].start)


class CommandsBatchCommand(EditorCommand):
    """Forward each ``{command, args}`` entry to the host unchanged."""

    def execute(self, editor, request):
        for entry in request.get("commands") or []:
            name = entry["command"]
            args = entry.get("args") or {}
            logger.debug("Forwarding host command %s %r", name, args)
            editor.execute_command(name, args)
        return False


class CommandRegistry:
    """Registry mapping command names to commands."""

    def __init__(self):
        self._commands: Dict[str, EditorCommand] = {}
        self._setup_default_commands()

    def _setup_default_commands(self):
        """Set up the default command names."""
        # Motion-driven operations
        self.register("move", MoveCommand())
        self.register("select", SelectCommand())
        self.register("delete", DeleteCommand())

        # Host actions passed through this layer
        self.register("increment", IncrementCommand())
        self.register("commands", CommandsBatchCommand())

    def register(self, name: str, command: EditorCommand):
        """Register a command under a name."""
        self._commands[name] = command

    def get_command(self, name: Any) -> Optional[EditorCommand]:
        """Get the command registered under name."""
        if not isinstance(name, str):
            return None
        return self._commands.get(name)

    def execute(self, editor: HostEditor, request: Mapping[str, Any]) -> bool:
        """Execute the command named by request['command'].

        Unknown commands and failing commands are reported through
        editor.show_error and leave the editor unchanged.

        Returns:
            True if the document was modified
        """
        name = request.get("command") if isinstance(request, Mapping) else None
        command = self.get_command(name)
        if command is None:
            editor.show_error(EditorConstants.UNKNOWN_COMMAND_MESSAGE.format(name))
            return False

        logger.debug("Executing command %s", name)
        try:
            return command.execute(editor, request)
        except Exception as error:
            # Dispatch boundary: message to the user, traceback to the log
            editor.show_error(str(error))
            logger.exception("Command %s failed", name)
            return False


_default_registry = CommandRegistry()


def execute_request(editor: HostEditor, request: Mapping[str, Any]) -> bool:
    """Execute a command request with the default registry."""
    return _default_registry.execute(editor, request)
