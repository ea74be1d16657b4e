"""Constants and configuration for the textmotion engine."""

class EditorConstants:
    """Central configuration constants for the engine and its in-memory host."""

    # Word definition used by word_range_at (numbers like -1.5e3, or runs of
    # characters that are neither whitespace nor punctuation)
    DEFAULT_WORD_PATTERN = r"(-?\d*\.\d\w*)|([^`~!@#$%^&*()\-=+\[{\]}\\|;:'\",.<>/?\s]+)"

    # Numeric increment
    NUMBER_PATTERN = r"-?\d+"

    # Edit history and the host commands that walk it
    MAX_UNDO_ENTRIES = 500
    UNDO_COMMAND = "undo"
    REDO_COMMAND = "redo"

    # Settings
    APP_NAME = "textmotion"
    SETTINGS_FILENAME = "settings.json"
    DEFAULT_LOG_LEVEL = "WARNING"

    # File operations
    ATOMIC_SAVE_SUFFIX = ".tmp"  # Suffix for temporary save files

    # Status messages
    UNKNOWN_COMMAND_MESSAGE = "Unknown command: {}"
    USAGE_MESSAGE = (
        "usage: textmotion FILE REQUEST [LINE:CHAR[-LINE:CHAR] ...] [--write]\n"
        "       textmotion --init-settings | --version"
    )
