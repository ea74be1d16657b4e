"""textmotion - A motion resolution engine for line-oriented text buffers."""

from .model import Position, Range, Selection, TextBuffer, HostEditor, TextModel
from .motions import MotionKind, MotionSpec, MotionError, resolve
from .commands import CommandRegistry, execute_request, move, select, delete

__all__ = [
    'Position',
    'Range',
    'Selection',
    'TextBuffer',
    'HostEditor',
    'TextModel',
    'MotionKind',
    'MotionSpec',
    'MotionError',
    'resolve',
    'CommandRegistry',
    'execute_request',
    'move',
    'select',
    'delete',
]
