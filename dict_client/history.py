"""History file management for the dict-client REPL.

Uses prompt_toolkit's FileHistory to persist lookups across sessions in
~/.dict_client_history.
"""

import os

from prompt_toolkit.history import FileHistory

HISTORY_PATH = os.path.expanduser("~/.dict_client_history")


def get_history(path: str = HISTORY_PATH) -> FileHistory:
    """Return a FileHistory instance for the REPL.

    The file is created on first write.
    """
    return FileHistory(path)
