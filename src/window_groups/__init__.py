"""
WindowGroups - save groups of open windows and switch between them on macOS
"""

__version__ = "0.1.0"
__author__ = "WindowGroups Team"
__description__ = "Save groups of open windows and switch between them on macOS"

from .config import Config
from .exceptions import (
    WindowGroupsError,
    GroupNotFoundError,
    GroupNameConflictError,
    InvalidGroupError,
    WindowAlreadyGroupedError,
    WindowServerError,
    StorageError,
)
from .models import WindowReference, LiveWindow, Group, SwitchResult
from .matcher import match_key, matches
from .repository import GroupRepository
from .switcher import GroupSwitcher
from .window_server import WindowServer, AppleScriptWindowServer

__all__ = [
    "Config",
    "WindowGroupsError",
    "GroupNotFoundError",
    "GroupNameConflictError",
    "InvalidGroupError",
    "WindowAlreadyGroupedError",
    "WindowServerError",
    "StorageError",
    "WindowReference",
    "LiveWindow",
    "Group",
    "SwitchResult",
    "match_key",
    "matches",
    "GroupRepository",
    "GroupSwitcher",
    "WindowServer",
    "AppleScriptWindowServer",
]
