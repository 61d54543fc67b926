from PyQt6.QtWidgets import (
    QDialog,
    QVBoxLayout,
    QTabWidget,
    QWidget,
    QFormLayout,
    QCheckBox,
    QComboBox,
    QLineEdit,
    QDialogButtonBox,
    QLabel,
)
from PyQt6.QtCore import Qt

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


def parse_bundle_ids(text: str) -> list[str]:
    return [part.strip() for part in text.split(",") if part.strip()]


class SettingsDialog(QDialog):
    def __init__(self, config, parent=None):
        super().__init__(parent)
        self.config = config
        self.setWindowTitle("Settings")
        self.resize(520, 360)
        root = QVBoxLayout(self)
        self.tabs = QTabWidget()
        root.addWidget(self.tabs)
        self.general_tab = QWidget()
        self.windows_tab = QWidget()
        self.hotkeys_tab = QWidget()
        self.tabs.addTab(self.general_tab, "General")
        self.tabs.addTab(self.windows_tab, "Windows")
        self.tabs.addTab(self.hotkeys_tab, "Hotkeys")
        self._build_general()
        self._build_windows()
        self._build_hotkeys()
        buttons = QDialogButtonBox(
            QDialogButtonBox.StandardButton.Ok
            | QDialogButtonBox.StandardButton.Apply
            | QDialogButtonBox.StandardButton.Cancel,
            Qt.Orientation.Horizontal,
            self,
        )
        buttons.accepted.connect(self._apply_and_accept)
        buttons.rejected.connect(self.reject)
        buttons.button(QDialogButtonBox.StandardButton.Apply).clicked.connect(self._apply)
        root.addWidget(buttons)

    def _build_general(self):
        layout = QFormLayout(self.general_tab)
        self.start_minimized_chk = QCheckBox("Start in the menu bar only")
        self.start_minimized_chk.setChecked(self.config.get("start_minimized", False))
        layout.addRow(self.start_minimized_chk)
        self.log_level_combo = QComboBox()
        self.log_level_combo.addItems(LOG_LEVELS)
        level = str(self.config.get("logging.level", "INFO")).upper()
        self.log_level_combo.setCurrentIndex(LOG_LEVELS.index(level) if level in LOG_LEVELS else 1)
        layout.addRow(QLabel("Log level"), self.log_level_combo)

    def _build_windows(self):
        layout = QFormLayout(self.windows_tab)
        self.excluded_edit = QLineEdit(", ".join(self.config.excluded_bundle_ids))
        self.excluded_edit.setPlaceholderText("com.raycast.macos, com.example.launcher")
        layout.addRow(QLabel("Never touch bundle IDs"), self.excluded_edit)
        self.osascript_edit = QLineEdit(self.config.get("window_server.osascript", "osascript"))
        layout.addRow(QLabel("osascript path"), self.osascript_edit)

    def _build_hotkeys(self):
        layout = QFormLayout(self.hotkeys_tab)
        self.hotkey_edits = {}
        for key, label in [
            ("create_group", "Create group"),
            ("switch_group", "Switch to selected group"),
            ("show_all", "Show all windows"),
            ("manage_groups", "Show window"),
        ]:
            edit = QLineEdit(self.config.get(f"hotkeys.{key}", ""))
            self.hotkey_edits[key] = edit
            layout.addRow(QLabel(label), edit)

    def _apply(self):
        self.config.set("start_minimized", self.start_minimized_chk.isChecked())
        self.config.set("logging.level", self.log_level_combo.currentText())
        self.config.set(
            "window_server.excluded_bundle_ids",
            parse_bundle_ids(self.excluded_edit.text()),
        )
        self.config.set(
            "window_server.osascript",
            self.osascript_edit.text().strip() or "osascript",
        )
        for key, edit in self.hotkey_edits.items():
            self.config.set(f"hotkeys.{key}", edit.text().strip())

    def _apply_and_accept(self):
        self._apply()
        self.accept()
