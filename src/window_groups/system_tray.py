"""
System tray icon for WindowGroups
"""

import os
import sys
from PyQt6.QtWidgets import QSystemTrayIcon, QMenu, QApplication, QStyle
from PyQt6.QtGui import QIcon, QAction

from .config import Config
from .feedback import FAILURE

NOTIFICATION_MS = 3000


class SystemTrayIcon(QSystemTrayIcon):
    """System tray icon with quick group switching"""

    def __init__(self, main_window, config: Config, parent=None):
        super().__init__(parent)
        self.main_window = main_window
        self.config = config

        self.set_icon()
        self.create_context_menu()

        self.activated.connect(self.on_activated)
        self.main_window.notification.connect(self.show_notification)

        self.show()

    def set_icon(self):
        path = self._resource_path("assets/window-groups-icon.png")
        if os.path.exists(path):
            self.setIcon(QIcon(path))
        else:
            self.setIcon(
                QApplication.style().standardIcon(QStyle.StandardPixmap.SP_TitleBarMaxButton)
            )
        self.setToolTip("WindowGroups - Window Group Switcher")

    def _resource_path(self, relative):
        base = getattr(sys, "_MEIPASS", None)
        if base:
            p = os.path.join(base, relative)
            if os.path.exists(p):
                return p
        here = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
        return os.path.join(here, relative)

    def create_context_menu(self):
        """Create the context menu for the tray icon"""
        menu = QMenu()

        self.switch_menu = menu.addMenu("Switch to Group")
        self.switch_menu.aboutToShow.connect(self.populate_switch_menu)

        show_all_action = QAction("Show All Windows", self)
        show_all_action.triggered.connect(self.main_window.show_all_windows)
        menu.addAction(show_all_action)

        minimize_all_action = QAction("Minimize All Windows", self)
        minimize_all_action.triggered.connect(self.main_window.minimize_all_windows)
        menu.addAction(minimize_all_action)

        menu.addSeparator()

        create_action = QAction("Create Group...", self)
        create_action.triggered.connect(self.create_group)
        menu.addAction(create_action)

        manage_action = QAction("Manage Groups", self)
        manage_action.triggered.connect(self.main_window.show_window)
        menu.addAction(manage_action)

        settings_action = QAction("Settings...", self)
        settings_action.triggered.connect(self.show_settings)
        menu.addAction(settings_action)

        menu.addSeparator()

        exit_action = QAction("Exit", self)
        exit_action.triggered.connect(self.exit_application)
        menu.addAction(exit_action)

        # Keep a reference; the tray does not take ownership of the menu
        self.menu = menu
        self.setContextMenu(menu)

    def populate_switch_menu(self):
        """List saved groups, marking the active one"""
        menu = self.switch_menu
        menu.clear()

        groups = self.main_window.groups()
        if not groups:
            empty_action = QAction("No window groups saved", self)
            empty_action.setEnabled(False)
            menu.addAction(empty_action)
            return

        for group in groups:
            action = QAction(group.name, self)
            action.setCheckable(True)
            action.setChecked(group.id == self.main_window.active_group_id)
            action.triggered.connect(
                lambda checked, g=group: self.main_window.switch_to_group(g)
            )
            menu.addAction(action)

    def on_activated(self, reason):
        if reason == QSystemTrayIcon.ActivationReason.Trigger:
            self.main_window.show_window()

    def show_notification(self, level: str, title: str, message: str):
        icon = (
            QSystemTrayIcon.MessageIcon.Critical
            if level == FAILURE
            else QSystemTrayIcon.MessageIcon.Information
        )
        self.showMessage(title, message, icon, NOTIFICATION_MS)

    def create_group(self):
        self.main_window.show_window()
        self.main_window.update_window_list()

    def show_settings(self):
        self.main_window.show_window()
        self.main_window.show_settings()

    def exit_application(self):
        QApplication.quit()
