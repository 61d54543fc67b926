"""
Window server: enumerate, minimize and raise windows of running applications.

``WindowServer`` is the boundary the rest of the package depends on.
``AppleScriptWindowServer`` implements it on macOS by scripting System
Events through osascript, which requires the Accessibility permission.
"""

import logging
import os
from abc import ABC, abstractmethod

from .applescript import (
    AppleScriptExecutor,
    applescript_list,
    escape_applescript_string,
    parse_window_listing,
)
from .exceptions import WindowServerError
from .models import LiveWindow

logger = logging.getLogger(__name__)


class WindowServer(ABC):
    """Abstract window automation capability"""

    @abstractmethod
    def list_visible_windows(self) -> list[LiveWindow]:
        """Titled, non-minimized windows of user-facing apps, excluding the tool itself"""

    @abstractmethod
    def minimize_window(self, app_name: str, window_title: str) -> None:
        """Minimize the window(s) with this title. Raises WindowServerError."""

    @abstractmethod
    def unminimize_and_raise(self, app_name: str, window_title: str) -> bool:
        """Bring the app to front, unminimize and raise the first window with this title.

        Returns False when the app is not running or has no such window.
        """

    @abstractmethod
    def set_application_visible(self, app_name: str) -> None:
        """Unhide an application; a missing application is not an error"""

    @abstractmethod
    def is_application_running(self, app_name: str) -> bool:
        ...

    @abstractmethod
    def restore_all_windows(self) -> None:
        """Unhide every user-facing application and unminimize all of its windows"""


_LIST_WINDOWS_SCRIPT = """
tell application "System Events"
    set windowList to ""
    set allProcs to every process whose visible is true and background only is false
    repeat with proc in allProcs
        try
            set procName to name of proc
            set procPid to unix id of proc
            set procBundle to ""
            try
                set procBundle to bundle identifier of proc
            end try
            if procBundle is missing value then set procBundle to ""
            repeat with w in (every window of proc)
                try
                    set winTitle to name of w
                    set isMinimized to false
                    try
                        set isMinimized to value of attribute "AXMinimized" of w
                    end try
                    if winTitle is not missing value and winTitle is not "" and isMinimized is false then
                        set windowList to windowList & procName & "|||" & winTitle & "|||" & procBundle & "|||" & procPid & linefeed
                    end if
                end try
            end repeat
        end try
    end repeat
    return windowList
end tell
"""

# Window identity is case-sensitive; AppleScript name comparisons are not by default
_MINIMIZE_WINDOW_SCRIPT = """
tell application "System Events"
    considering case
        tell process "{app}"
            repeat with w in (every window whose name is "{title}")
                try
                    if value of attribute "AXMinimized" of w is false then
                        set value of attribute "AXMinimized" of w to true
                    end if
                end try
            end repeat
        end tell
    end considering
end tell
"""

_RAISE_WINDOW_SCRIPT = """
tell application "System Events"
    considering case
        if not (exists process "{app}") then return "notfound"
        tell process "{app}"
            set frontmost to true
            try
                set targetWindow to first window whose name is "{title}"
            on error
                return "notfound"
            end try
            try
                if value of attribute "AXMinimized" of targetWindow is true then
                    set value of attribute "AXMinimized" of targetWindow to false
                end if
            end try
            perform action "AXRaise" of targetWindow
            return "found"
        end tell
    end considering
end tell
"""

_SET_VISIBLE_SCRIPT = """
tell application "System Events"
    considering case
        if exists process "{app}" then
            try
                set visible of process "{app}" to true
            end try
        end if
    end considering
end tell
"""

_IS_RUNNING_SCRIPT = """
tell application "System Events"
    considering case
        return (exists process "{app}")
    end considering
end tell
"""

_RESTORE_ALL_SCRIPT = """
tell application "System Events"
    set skipBundles to {skip_bundles}
    set allProcs to every process whose background only is false
    repeat with proc in allProcs
        try
            set procBundle to ""
            try
                set procBundle to bundle identifier of proc
            end try
            if procBundle is missing value then set procBundle to ""
            if (unix id of proc) is not {own_pid} and skipBundles does not contain procBundle then
                set visible of proc to true
                repeat with w in (every window of proc)
                    try
                        if value of attribute "AXMinimized" of w is true then
                            set value of attribute "AXMinimized" of w to false
                        end if
                    end try
                end repeat
            end if
        end try
    end repeat
end tell
"""


class AppleScriptWindowServer(WindowServer):
    """WindowServer backed by System Events scripting"""

    def __init__(
        self,
        executor: AppleScriptExecutor | None = None,
        excluded_bundle_ids: list[str] | None = None,
        own_pid: int | None = None,
    ):
        self.executor = executor or AppleScriptExecutor()
        self.excluded_bundle_ids = set(excluded_bundle_ids or [])
        self.own_pid = own_pid if own_pid is not None else os.getpid()

    def _run(self, script: str, action: str) -> str | None:
        success, stdout, stderr = self.executor.execute(script)
        if not success:
            raise WindowServerError(f"{action} failed: {stderr or 'unknown error'}")
        return stdout

    @staticmethod
    def _fill(template: str, app_name: str, window_title: str = "") -> str:
        return template.format(
            app=escape_applescript_string(app_name),
            title=escape_applescript_string(window_title),
        )

    def list_visible_windows(self) -> list[LiveWindow]:
        output = self._run(_LIST_WINDOWS_SCRIPT, "Listing windows")
        windows = parse_window_listing(
            output,
            excluded_bundle_ids=self.excluded_bundle_ids,
            excluded_pids={self.own_pid},
        )
        logger.debug("Listed %d visible windows", len(windows))
        return windows

    def minimize_window(self, app_name: str, window_title: str) -> None:
        self._run(
            self._fill(_MINIMIZE_WINDOW_SCRIPT, app_name, window_title),
            f"Minimizing '{app_name} - {window_title}'",
        )

    def unminimize_and_raise(self, app_name: str, window_title: str) -> bool:
        output = self._run(
            self._fill(_RAISE_WINDOW_SCRIPT, app_name, window_title),
            f"Raising '{app_name} - {window_title}'",
        )
        return (output or "").strip() == "found"

    def set_application_visible(self, app_name: str) -> None:
        self._run(self._fill(_SET_VISIBLE_SCRIPT, app_name), f"Showing '{app_name}'")

    def is_application_running(self, app_name: str) -> bool:
        output = self._run(
            self._fill(_IS_RUNNING_SCRIPT, app_name), f"Looking up '{app_name}'"
        )
        return (output or "").strip() == "true"

    def restore_all_windows(self) -> None:
        script = _RESTORE_ALL_SCRIPT.format(
            skip_bundles=applescript_list(sorted(self.excluded_bundle_ids)),
            own_pid=int(self.own_pid),
        )
        self._run(script, "Restoring all windows")
