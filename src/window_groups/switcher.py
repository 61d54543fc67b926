"""
Group switching: minimize everything outside a group, then restore the group.

A switch is a sequence of locally committing steps against the window
server with no rollback. The only compensating action is ``restore_all``,
which unminimizes every window of every user-facing application.
All window server calls are made one at a time, in order: raising a
window makes its application frontmost, which the next call depends on.
"""

import logging
from typing import Iterable

from PyQt6.QtCore import QObject, pyqtSignal

from .exceptions import InvalidGroupError
from .matcher import assign_composite_ids, available_windows, match_key, target_keys
from .models import Group, LiveWindow, SwitchResult, WindowReference
from .repository import GroupRepository
from .window_server import WindowServer

logger = logging.getLogger(__name__)


def references_from_live(windows: Iterable[LiveWindow]) -> list[WindowReference]:
    """Turn a selection of live windows into references, dropping untitled and repeated windows"""
    references: list[WindowReference] = []
    seen: set[str] = set()
    for window in windows:
        if not window.application_name or not window.window_title:
            continue
        key = match_key(window)
        if key in seen:
            continue
        seen.add(key)
        references.append(WindowReference.from_live(window))
    return references


class GroupSwitcher(QObject):
    """Orchestrates switching between window groups"""

    switch_started = pyqtSignal(str)  # group name
    window_minimized = pyqtSignal(str, str)  # app_name, window_title
    window_shown = pyqtSignal(str, str)
    window_not_found = pyqtSignal(str, str, str)  # app_name, window_title, reason
    switch_finished = pyqtSignal(str, int, int)  # group name, shown, not found
    all_restored = pyqtSignal()
    all_minimized = pyqtSignal(int)

    def __init__(self, window_server: WindowServer):
        super().__init__()
        self.window_server = window_server

    def switch_to(self, group: Group) -> SwitchResult:
        """Show ``group`` and minimize everything else.

        Faults while listing windows or unhiding applications propagate;
        faults on a single window are logged and that window is skipped
        (or reported as not found).
        """
        logger.info("Switching to group '%s'", group.name)
        self.switch_started.emit(group.name)

        self.minimize_others(group)
        self.show_applications(group)
        # Unhiding an application brings back all of its windows
        self.minimize_others(group, group.application_names())
        result = self.restore_group_windows(group)

        logger.info(
            "Switched to '%s': %d shown, %d not found",
            group.name,
            result.shown,
            len(result.not_found),
        )
        self.switch_finished.emit(group.name, result.shown, len(result.not_found))
        return result

    def minimize_others(self, group: Group, applications: Iterable[str] | None = None) -> int:
        """Minimize every visible window that is not part of ``group``.

        With ``applications``, only windows of those applications are considered.
        """
        skip = target_keys(group)
        only = set(applications) if applications is not None else None
        minimized = 0
        # Minimized windows are not listed, so they are skipped
        for window in self.window_server.list_visible_windows():
            if only is not None and window.application_name not in only:
                continue
            key = match_key(window)
            if key in skip:
                continue
            # One call minimizes every window sharing the title
            skip.add(key)
            if self._minimize(window):
                minimized += 1
        logger.debug("Minimized %d window(s) outside '%s'", minimized, group.name)
        return minimized

    def show_applications(self, group: Group) -> None:
        """Unhide every application the group refers to, skipping ones not running"""
        for app_name in group.application_names():
            if not self.window_server.is_application_running(app_name):
                logger.debug("Skipping '%s': not running", app_name)
                continue
            self.window_server.set_application_visible(app_name)

    def restore_group_windows(self, group: Group) -> SwitchResult:
        """Unminimize and raise each window of the group, in list order"""
        result = SwitchResult()
        for reference in group.windows:
            app_name = reference.application_name
            title = reference.window_title
            try:
                found = self.window_server.unminimize_and_raise(app_name, title)
                reason = "not_found"
            except Exception as e:
                logger.warning("Error raising '%s - %s': %s", app_name, title, e)
                found = False
                reason = str(e) or "error"

            if found:
                result.shown += 1
                self.window_shown.emit(app_name, title)
            else:
                result.not_found.append(reference)
                self.window_not_found.emit(app_name, title, reason)
        return result

    def restore_all(self) -> None:
        """Unminimize every window of every user-facing application"""
        logger.info("Restoring all windows")
        try:
            self.window_server.restore_all_windows()
        except Exception as e:
            logger.error("Error restoring all windows: %s", e)
            raise
        self.all_restored.emit()

    def minimize_all(self) -> int:
        """Minimize every visible window except the tool's own"""
        logger.info("Minimizing all windows")
        minimized = sum(
            1 for window in self.window_server.list_visible_windows() if self._minimize(window)
        )
        self.all_minimized.emit(minimized)
        return minimized

    def available_windows(self, groups: list[Group]) -> list[LiveWindow]:
        """Visible windows that no group has claimed yet"""
        live = assign_composite_ids(self.window_server.list_visible_windows())
        return available_windows(live, groups)

    def create_group_from_windows(
        self, repository: GroupRepository, name: str, windows: Iterable[LiveWindow]
    ) -> Group:
        """Save a selection of live windows as a new group"""
        references = references_from_live(windows)
        if not references:
            raise InvalidGroupError("Select at least one titled window")
        return repository.create(name, references)

    def _minimize(self, window: LiveWindow) -> bool:
        try:
            self.window_server.minimize_window(window.application_name, window.window_title)
        except Exception as e:
            logger.warning(
                "Error minimizing '%s - %s': %s", window.application_name, window.window_title, e
            )
            return False
        self.window_minimized.emit(window.application_name, window.window_title)
        return True
