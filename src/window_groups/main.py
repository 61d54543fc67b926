"""
WindowGroups - save groups of open windows and switch between them on macOS
"""

import logging
import sys
from PyQt6.QtWidgets import QApplication

from .applescript import AppleScriptExecutor
from .config import Config
from .main_window import MainWindow
from .repository import GroupRepository
from .switcher import GroupSwitcher
from .system_tray import SystemTrayIcon
from .window_server import AppleScriptWindowServer


def setup_logging(config: Config) -> None:
    level = str(config.get("logging.level", "INFO")).upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main():
    """Main application entry point"""
    config = Config()
    setup_logging(config)

    app = QApplication(sys.argv)
    # Closing the window leaves the tray icon running
    app.setQuitOnLastWindowClosed(False)

    app.setApplicationName("WindowGroups")
    app.setApplicationVersion("0.1.0")
    app.setOrganizationName("WindowGroups")

    app.setStyle("Fusion")
    app.setPalette(app.style().standardPalette())

    executor = AppleScriptExecutor(
        osascript=config.get("window_server.osascript", "osascript"),
        timeout=config.get("window_server.script_timeout"),
    )
    window_server = AppleScriptWindowServer(
        executor=executor,
        excluded_bundle_ids=config.excluded_bundle_ids,
    )
    switcher = GroupSwitcher(window_server)
    repository = GroupRepository(config)

    main_window = MainWindow(switcher, repository, config)
    tray = SystemTrayIcon(main_window, config)

    if not config.get("start_minimized", False):
        main_window.show()

    exit_code = app.exec()
    tray.hide()
    return exit_code


if __name__ == "__main__":
    sys.exit(main())
