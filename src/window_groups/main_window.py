"""
Main window for WindowGroups
"""

from PyQt6.QtWidgets import (
    QMainWindow,
    QWidget,
    QVBoxLayout,
    QHBoxLayout,
    QPushButton,
    QListWidget,
    QListWidgetItem,
    QTextEdit,
    QLineEdit,
    QLabel,
    QGroupBox,
    QSplitter,
    QMessageBox,
    QStatusBar,
    QDialog,
    QDialogButtonBox,
    QDockWidget,
    QTableWidget,
    QTableWidgetItem,
    QHeaderView,
)
from PyQt6.QtCore import Qt, pyqtSignal
from PyQt6.QtGui import QAction, QKeySequence, QFont
from datetime import datetime
import json
import logging

from .config import Config
from .exceptions import WindowGroupsError
from .feedback import (
    Feedback,
    error_feedback,
    group_created_feedback,
    group_deleted_feedback,
    minimize_all_feedback,
    restore_all_feedback,
    switch_feedback,
)
from .matcher import group_by_application
from .models import Group, LiveWindow
from .permissions import PermissionsHelper
from .repository import GroupRepository
from .settings_dialog import SettingsDialog
from .switcher import GroupSwitcher

logger = logging.getLogger(__name__)

LIST_STYLE = "QListWidget { font-size: 15px; } QListWidget::item { padding: 6px 4px; }"


class GroupNameDialog(QDialog):
    """Dialog for naming a new group"""

    def __init__(self, selected: list[LiveWindow], parent=None):
        super().__init__(parent)
        self.setWindowTitle("Name Your Group")
        self.setModal(True)
        self.resize(420, 280)

        layout = QVBoxLayout(self)

        name_layout = QHBoxLayout()
        name_layout.addWidget(QLabel("Group Name:"))
        self.name_edit = QLineEdit()
        self.name_edit.setPlaceholderText("e.g., Work, Personal, Development")
        name_layout.addWidget(self.name_edit)
        layout.addLayout(name_layout)

        layout.addWidget(QLabel(f"Selected Windows ({len(selected)}):"))
        windows_text = QTextEdit()
        windows_text.setReadOnly(True)
        windows_text.setPlainText(
            "\n".join(f"{w.application_name} - {w.window_title}" for w in selected)
        )
        layout.addWidget(windows_text)

        buttons = QDialogButtonBox(
            QDialogButtonBox.StandardButton.Ok | QDialogButtonBox.StandardButton.Cancel,
            Qt.Orientation.Horizontal,
            self,
        )
        buttons.accepted.connect(self.accept)
        buttons.rejected.connect(self.reject)
        layout.addWidget(buttons)

    def get_name(self) -> str:
        return self.name_edit.text().strip()


class MainWindow(QMainWindow):
    """Main application window: create, switch and manage window groups"""

    notification = pyqtSignal(str, str, str)  # level, title, message

    def __init__(
        self,
        switcher: GroupSwitcher,
        repository: GroupRepository,
        config: Config,
    ):
        super().__init__()
        self.switcher = switcher
        self.repository = repository
        self.config = config
        self.permissions_helper = PermissionsHelper(
            getattr(switcher.window_server, "executor", None)
        )
        # Cosmetic only; the switcher keeps no notion of an active group
        self.active_group_id: str | None = None

        self.setWindowTitle("WindowGroups - Window Group Switcher")
        self.setGeometry(100, 100, 1100, 720)

        self.init_ui()
        self.setup_menu_bar()
        self.setup_status_bar()
        self.setup_shortcuts()

        self.check_permissions()

        self.load_groups()
        self.update_window_list()

    def init_ui(self):
        """Initialize the user interface"""
        central_widget = QWidget()
        self.setCentralWidget(central_widget)

        main_layout = QHBoxLayout(central_widget)

        splitter = QSplitter(Qt.Orientation.Horizontal)
        self.splitter = splitter
        main_layout.addWidget(splitter)

        splitter.addWidget(self.create_available_windows_panel())
        splitter.addWidget(self.create_groups_panel())

        splitter.setSizes([500, 600])
        self.create_debug_dock()
        self.setup_logging_connections()

    def create_available_windows_panel(self):
        """Windows that can still be added to a new group"""
        group = QGroupBox("Available Windows")
        layout = QVBoxLayout(group)

        self.window_list = QListWidget()
        font = QFont()
        font.setPointSize(15)
        self.window_list.setFont(font)
        self.window_list.setStyleSheet(LIST_STYLE)
        self.window_list.itemChanged.connect(self.on_window_check_changed)
        layout.addWidget(self.window_list)

        button_layout = QHBoxLayout()

        self.refresh_btn = QPushButton("Refresh")
        self.refresh_btn.clicked.connect(self.update_window_list)
        button_layout.addWidget(self.refresh_btn)

        self.clear_selection_btn = QPushButton("Clear Selection")
        self.clear_selection_btn.clicked.connect(self.clear_selection)
        button_layout.addWidget(self.clear_selection_btn)

        self.create_group_btn = QPushButton("Create Group")
        self.create_group_btn.setEnabled(False)
        self.create_group_btn.clicked.connect(self.create_group_dialog)
        button_layout.addWidget(self.create_group_btn)

        layout.addLayout(button_layout)

        return group

    def create_groups_panel(self):
        """Saved groups with details and actions"""
        group = QGroupBox("Window Groups")
        layout = QVBoxLayout(group)

        self.group_list = QListWidget()
        font = QFont()
        font.setPointSize(15)
        self.group_list.setFont(font)
        self.group_list.setStyleSheet(LIST_STYLE)
        self.group_list.itemSelectionChanged.connect(self.on_group_selected)
        self.group_list.itemDoubleClicked.connect(self.switch_to_selected_group)
        layout.addWidget(self.group_list)

        self.group_info = QTextEdit()
        self.group_info.setMaximumHeight(120)
        self.group_info.setReadOnly(True)
        layout.addWidget(self.group_info)

        self.group_windows_table = QTableWidget()
        self.group_windows_table.setColumnCount(3)
        self.group_windows_table.setHorizontalHeaderLabels(["Title", "App", "Bundle ID"])
        self.group_windows_table.setEditTriggers(QTableWidget.EditTrigger.NoEditTriggers)
        self.group_windows_table.setSelectionBehavior(QTableWidget.SelectionBehavior.SelectRows)
        self.group_windows_table.setAlternatingRowColors(True)
        self.group_windows_table.horizontalHeader().setSectionResizeMode(
            QHeaderView.ResizeMode.Stretch
        )
        self.group_windows_table.verticalHeader().setVisible(False)
        layout.addWidget(self.group_windows_table)

        button_layout = QHBoxLayout()

        self.switch_btn = QPushButton("Switch to Group")
        self.switch_btn.clicked.connect(self.switch_to_selected_group)
        button_layout.addWidget(self.switch_btn)

        self.show_all_btn = QPushButton("Show All Windows")
        self.show_all_btn.clicked.connect(self.show_all_windows)
        button_layout.addWidget(self.show_all_btn)

        self.minimize_all_btn = QPushButton("Minimize All")
        self.minimize_all_btn.clicked.connect(self.minimize_all_windows)
        button_layout.addWidget(self.minimize_all_btn)

        self.delete_group_btn = QPushButton("Delete")
        self.delete_group_btn.clicked.connect(self.delete_selected_group)
        button_layout.addWidget(self.delete_group_btn)

        self.view_json_btn = QPushButton("View Raw JSON")
        self.view_json_btn.clicked.connect(self.view_raw_json)
        button_layout.addWidget(self.view_json_btn)

        layout.addLayout(button_layout)

        return group

    def create_debug_dock(self):
        dock = QDockWidget("Activity Log", self)
        dock.setObjectName("ActivityDock")
        container = QWidget()
        layout = QVBoxLayout(container)
        self.debug_log = QTextEdit()
        self.debug_log.setReadOnly(True)
        self.debug_log.setMinimumHeight(160)
        layout.addWidget(self.debug_log)
        clear_btn = QPushButton("Clear")
        clear_btn.clicked.connect(self.debug_log.clear)
        layout.addWidget(clear_btn)
        dock.setWidget(container)
        self.addDockWidget(Qt.DockWidgetArea.BottomDockWidgetArea, dock)
        dock.hide()
        self.debug_dock = dock

    def setup_logging_connections(self):
        self.switcher.switch_started.connect(
            lambda name: self.append_debug_log(f"SWITCH {name}")
        )
        self.switcher.window_minimized.connect(
            lambda app, title: self.append_debug_log(f"MIN   {app} | {title}")
        )
        self.switcher.window_shown.connect(
            lambda app, title: self.append_debug_log(f"SHOW  {app} | {title}")
        )
        self.switcher.window_not_found.connect(
            lambda app, title, reason: self.append_debug_log(
                f"MISS  {app} | {title} reason={reason}"
            )
        )
        self.switcher.switch_finished.connect(
            lambda name, shown, missing: self.append_debug_log(
                f"DONE  {name} shown={shown} not_found={missing}"
            )
        )
        self.switcher.all_restored.connect(lambda: self.append_debug_log("RESTORE ALL"))
        self.switcher.all_minimized.connect(
            lambda count: self.append_debug_log(f"MINIMIZE ALL count={count}")
        )
        self.repository.group_created.connect(self.on_groups_changed)
        self.repository.group_updated.connect(self.on_groups_changed)
        self.repository.group_deleted.connect(self.on_groups_changed)

    def append_debug_log(self, line: str):
        ts = datetime.now().strftime("%H:%M:%S")
        self.debug_log.append(f"[{ts}] {line}")

    def setup_menu_bar(self):
        """Setup the menu bar"""
        menubar = self.menuBar()

        file_menu = menubar.addMenu("File")

        create_action = QAction("Create Group...", self)
        create_action.setShortcut(QKeySequence.StandardKey.New)
        create_action.triggered.connect(self.create_group_dialog)
        file_menu.addAction(create_action)

        settings_action = QAction("Settings...", self)
        settings_action.triggered.connect(self.show_settings)
        file_menu.addAction(settings_action)

        file_menu.addSeparator()

        exit_action = QAction("Exit", self)
        exit_action.setShortcut(QKeySequence.StandardKey.Quit)
        exit_action.triggered.connect(self.close)
        file_menu.addAction(exit_action)

        view_menu = menubar.addMenu("View")

        refresh_action = QAction("Refresh", self)
        refresh_action.setShortcut(QKeySequence.StandardKey.Refresh)
        refresh_action.triggered.connect(self.refresh)
        view_menu.addAction(refresh_action)
        view_menu.addAction(self.debug_dock.toggleViewAction())

        groups_menu = menubar.addMenu("Groups")

        switch_action = QAction("Switch to Selected Group", self)
        switch_action.triggered.connect(self.switch_to_selected_group)
        groups_menu.addAction(switch_action)

        show_all_action = QAction("Show All Windows", self)
        show_all_action.triggered.connect(self.show_all_windows)
        groups_menu.addAction(show_all_action)

        minimize_all_action = QAction("Minimize All Windows", self)
        minimize_all_action.triggered.connect(self.minimize_all_windows)
        groups_menu.addAction(minimize_all_action)

        groups_menu.addSeparator()

        delete_action = QAction("Delete Selected Group", self)
        delete_action.triggered.connect(self.delete_selected_group)
        groups_menu.addAction(delete_action)

        help_menu = menubar.addMenu("Help")

        permissions_action = QAction("Permissions...", self)
        permissions_action.triggered.connect(self.show_permissions_instructions)
        help_menu.addAction(permissions_action)

        about_action = QAction("About", self)
        about_action.triggered.connect(self.show_about)
        help_menu.addAction(about_action)

    def setup_status_bar(self):
        """Setup the status bar"""
        self.status_bar = QStatusBar()
        self.setStatusBar(self.status_bar)
        self.status_bar.showMessage("Ready")

    def setup_shortcuts(self):
        """Setup keyboard shortcuts from configuration"""
        shortcuts = [
            ("hotkeys.create_group", self.create_group_dialog),
            ("hotkeys.switch_group", self.switch_to_selected_group),
            ("hotkeys.show_all", self.show_all_windows),
            ("hotkeys.manage_groups", self.show_window),
        ]

        for key, callback in shortcuts:
            sequence = self.config.get(key)
            if not sequence:
                continue
            action = QAction(self)
            action.setShortcut(QKeySequence(sequence))
            action.triggered.connect(callback)
            self.addAction(action)

    def notify(self, feedback: Feedback):
        """Report the terminal outcome of an action"""
        self.status_bar.showMessage(f"{feedback.title}: {feedback.message}")
        self.append_debug_log(f"{feedback.level.upper()} {feedback.title}: {feedback.message}")
        self.notification.emit(feedback.level, feedback.title, feedback.message)
        if feedback.is_failure and self.isVisible():
            QMessageBox.warning(self, feedback.title, feedback.message)

    def refresh(self):
        self.load_groups()
        self.update_window_list()

    def on_groups_changed(self, _group_id: str):
        self.refresh()

    # ------------------------------
    # Available windows / create
    # ------------------------------
    def update_window_list(self):
        """List live windows not yet claimed by any group, grouped by application"""
        self.window_list.blockSignals(True)
        self.window_list.clear()

        try:
            windows = self.switcher.available_windows(self.repository.load_all())
        except WindowGroupsError as e:
            self.window_list.blockSignals(False)
            self.status_bar.showMessage(f"Error listing windows: {e}")
            return

        for app_name, app_windows in group_by_application(windows).items():
            header = QListWidgetItem(f"{app_name}  ({len(app_windows)} window(s))")
            header.setFlags(Qt.ItemFlag.NoItemFlags)
            font = header.font()
            font.setBold(True)
            header.setFont(font)
            self.window_list.addItem(header)

            for window in app_windows:
                item = QListWidgetItem(f"    {window.window_title}")
                item.setFlags(Qt.ItemFlag.ItemIsEnabled | Qt.ItemFlag.ItemIsUserCheckable)
                item.setCheckState(Qt.CheckState.Unchecked)
                item.setData(Qt.ItemDataRole.UserRole, window)
                self.window_list.addItem(item)

        self.window_list.blockSignals(False)
        self.on_window_check_changed()

        if not windows:
            self.status_bar.showMessage(
                "No windows found. Open some applications before creating a group"
            )
        else:
            self.status_bar.showMessage(f"Found {len(windows)} available window(s)")

    def selected_windows(self) -> list[LiveWindow]:
        selected = []
        for i in range(self.window_list.count()):
            item = self.window_list.item(i)
            window = item.data(Qt.ItemDataRole.UserRole)
            if window is not None and item.checkState() == Qt.CheckState.Checked:
                selected.append(window)
        return selected

    def on_window_check_changed(self, _item=None):
        count = len(self.selected_windows())
        self.create_group_btn.setEnabled(count > 0)
        self.create_group_btn.setText(
            f"Create Group ({count})" if count else "Create Group"
        )

    def clear_selection(self):
        for i in range(self.window_list.count()):
            item = self.window_list.item(i)
            if item.data(Qt.ItemDataRole.UserRole) is not None:
                item.setCheckState(Qt.CheckState.Unchecked)

    def create_group_dialog(self):
        """Name and save the selected windows as a new group"""
        selected = self.selected_windows()
        if not selected:
            self.show_window()
            QMessageBox.information(
                self, "Create Group", "Select one or more windows to add to the group."
            )
            return

        dialog = GroupNameDialog(selected, self)
        if dialog.exec() != QDialog.DialogCode.Accepted:
            return

        name = dialog.get_name()
        if not name:
            QMessageBox.warning(self, "Create Group", "Group name is required")
            return

        try:
            group = self.switcher.create_group_from_windows(self.repository, name, selected)
        except WindowGroupsError as e:
            self.notify(error_feedback(e, "Error Creating Group"))
            return

        self.notify(group_created_feedback(group.name, len(group.windows)))
        self.select_group_by_id(group.id)

    # ------------------------------
    # Groups
    # ------------------------------
    def load_groups(self):
        """Reload groups; the active indicator does not survive a reload"""
        self.active_group_id = None
        self.group_list.clear()
        groups = self.repository.load_all()
        for group in groups:
            item = QListWidgetItem()
            item.setData(Qt.ItemDataRole.UserRole, group)
            self.group_list.addItem(item)
        self.render_group_items()
        self.status_bar.showMessage(f"Loaded {len(groups)} group(s)")

    def render_group_items(self):
        for i in range(self.group_list.count()):
            item = self.group_list.item(i)
            group: Group = item.data(Qt.ItemDataRole.UserRole)
            marker = "✓ " if group.id == self.active_group_id else ""
            apps = group.application_names()
            item.setText(
                f"{marker}{group.name}  ·  {len(group.windows)} window(s) · "
                f"{len(apps)} app(s): {', '.join(apps)}"
            )

    def current_group(self) -> Group | None:
        item = self.group_list.currentItem()
        if not item:
            return None
        return item.data(Qt.ItemDataRole.UserRole)

    def select_group_by_id(self, group_id: str):
        for i in range(self.group_list.count()):
            item = self.group_list.item(i)
            if item.data(Qt.ItemDataRole.UserRole).id == group_id:
                self.group_list.setCurrentItem(item)
                break

    def groups(self) -> list[Group]:
        return [
            self.group_list.item(i).data(Qt.ItemDataRole.UserRole)
            for i in range(self.group_list.count())
        ]

    def on_group_selected(self):
        group = self.current_group()
        if not group:
            self.group_info.clear()
            self.group_windows_table.setRowCount(0)
            return

        lines = [
            f"Name: {group.name}",
            f"Windows: {len(group.windows)}",
            f"Apps: {', '.join(group.application_names())}",
            f"Created: {group.created_at.astimezone().strftime('%Y-%m-%d %H:%M:%S')}",
            f"Updated: {group.updated_at.astimezone().strftime('%Y-%m-%d %H:%M:%S')}",
        ]
        if group.id == self.active_group_id:
            lines.append("Status: Active")
        self.group_info.setPlainText("\n".join(lines))

        self.group_windows_table.setRowCount(len(group.windows))
        for row, window in enumerate(group.windows):
            self.group_windows_table.setItem(row, 0, QTableWidgetItem(window.window_title))
            self.group_windows_table.setItem(row, 1, QTableWidgetItem(window.application_name))
            self.group_windows_table.setItem(row, 2, QTableWidgetItem(window.bundle_id or ""))

    def switch_to_selected_group(self, _item=None):
        group = self.current_group()
        if not group:
            QMessageBox.warning(self, "Warning", "Please select a group to switch to.")
            return
        self.switch_to_group(group)

    def switch_to_group(self, group: Group):
        self.status_bar.showMessage(f'Switching... Activating "{group.name}"')
        try:
            result = self.switcher.switch_to(group)
        except Exception as e:
            logger.error("Switch to '%s' failed: %s", group.name, e)
            self.notify(error_feedback(e))
            return

        self.active_group_id = group.id
        self.render_group_items()
        self.on_group_selected()
        self.notify(switch_feedback(group.name, result))

    def show_all_windows(self):
        self.status_bar.showMessage("Restoring All Windows...")
        try:
            self.switcher.restore_all()
        except Exception as e:
            self.notify(error_feedback(e))
            return

        self.active_group_id = None
        self.render_group_items()
        self.notify(restore_all_feedback())
        self.update_window_list()

    def minimize_all_windows(self):
        try:
            count = self.switcher.minimize_all()
        except Exception as e:
            self.notify(error_feedback(e))
            return

        self.active_group_id = None
        self.render_group_items()
        self.notify(minimize_all_feedback(count))

    def delete_selected_group(self):
        group = self.current_group()
        if not group:
            QMessageBox.warning(self, "Warning", "Please select a group to delete.")
            return
        self.delete_group(group)

    def delete_group(self, group: Group):
        reply = QMessageBox.question(
            self,
            "Delete Group",
            f'Are you sure you want to delete "{group.name}"?',
            QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.No,
        )
        if reply != QMessageBox.StandardButton.Yes:
            return

        try:
            self.repository.delete(group.id)
        except WindowGroupsError as e:
            self.notify(error_feedback(e, "Error Deleting Group"))
            return

        if self.active_group_id == group.id:
            self.active_group_id = None
        self.notify(group_deleted_feedback(group.name))

    def view_raw_json(self):
        group = self.current_group()
        if not group:
            QMessageBox.warning(self, "Warning", "Please select a group.")
            return

        dlg = QDialog(self)
        dlg.setWindowTitle(f"Group JSON: {group.name}")
        dlg.resize(640, 480)

        v = QVBoxLayout(dlg)
        te = QTextEdit()
        te.setReadOnly(True)
        te.setPlainText(json.dumps(group.to_dict(), indent=2))
        v.addWidget(te)

        buttons = QDialogButtonBox(
            QDialogButtonBox.StandardButton.Ok,
            Qt.Orientation.Horizontal,
            dlg,
        )
        buttons.accepted.connect(dlg.accept)
        v.addWidget(buttons)

        dlg.exec()

    # ------------------------------
    # Misc
    # ------------------------------
    def show_window(self):
        self.show()
        self.raise_()
        self.activateWindow()

    def show_settings(self):
        dialog = SettingsDialog(self.config, self)
        if dialog.exec() == QDialog.DialogCode.Accepted:
            self.status_bar.showMessage("Settings saved; some changes apply after restart")

    def show_about(self):
        QMessageBox.about(
            self,
            "About WindowGroups",
            "WindowGroups v0.1.0\n\n"
            "Save groups of open windows and switch between them.\n\n"
            "Switching minimizes every other window; use Show All Windows to get everything back.",
        )

    def check_permissions(self):
        """Check and inform about required permissions"""
        if not self.permissions_helper.is_macos():
            return
        missing = self.permissions_helper.get_missing_permissions()

        if missing:
            permission_text = " and ".join(missing)
            message = (
                f"WindowGroups needs {permission_text} permission to work properly.\n\n"
                "Would you like to see instructions for granting these permissions?"
            )

            reply = QMessageBox.question(
                self,
                "Permissions Required",
                message,
                QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.No,
            )

            if reply == QMessageBox.StandardButton.Yes:
                self.show_permissions_instructions()

    def show_permissions_instructions(self):
        instructions = self.permissions_helper.request_permissions_instructions()

        dialog = QMessageBox(self)
        dialog.setWindowTitle("Permission Instructions")
        dialog.setText("Permissions Required")
        dialog.setDetailedText(instructions)
        dialog.setIcon(QMessageBox.Icon.Information)

        open_prefs_btn = dialog.addButton(
            "Open System Settings", QMessageBox.ButtonRole.ActionRole
        )
        open_prefs_btn.clicked.connect(self.permissions_helper.open_system_preferences)

        dialog.addButton(QMessageBox.StandardButton.Ok)
        dialog.exec()
