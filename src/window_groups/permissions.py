"""
Permissions helper for the macOS Accessibility and Automation permissions
"""

import logging
import platform
import subprocess

from .applescript import AppleScriptExecutor

logger = logging.getLogger(__name__)


class PermissionsHelper:
    """Helper for checking and requesting macOS permissions"""

    def __init__(self, executor: AppleScriptExecutor | None = None):
        self.executor = executor or AppleScriptExecutor()

    @staticmethod
    def check_accessibility_permissions() -> bool:
        """Check if the app can read window information"""
        try:
            import Quartz

            window_list = Quartz.CGWindowListCopyWindowInfo(
                Quartz.kCGWindowListOptionOnScreenOnly, Quartz.kCGNullWindowID
            )
            return window_list is not None
        except Exception as e:
            logger.debug("Accessibility check failed: %s", e)
            return False

    def check_automation_permissions(self) -> bool:
        """Check if System Events accepts scripting from this process"""
        success, _, stderr = self.executor.execute(
            'tell application "System Events" to count processes'
        )
        if not success:
            logger.debug("Automation check failed: %s", stderr)
        return success

    def get_missing_permissions(self) -> list[str]:
        """Get list of missing permissions"""
        missing = []

        if not self.check_accessibility_permissions():
            missing.append("Accessibility")

        if not self.check_automation_permissions():
            missing.append("Automation (System Events)")

        return missing

    @staticmethod
    def request_permissions_instructions() -> str:
        """Get instructions for granting permissions"""
        instructions = """
To switch window groups, WindowGroups needs the following permissions:

1. **Accessibility Permission** (required to minimize and raise windows):
   - Open System Settings → Privacy & Security → Accessibility
   - Add this application (or your terminal) to the list
   - Enable the toggle next to it

2. **Automation Permission** (required to script System Events):
   - Open System Settings → Privacy & Security → Automation
   - Allow this application to control "System Events"

3. **Restart the application** after granting permissions
"""
        return instructions.strip()

    @staticmethod
    def open_system_preferences():
        """Open the Accessibility privacy pane"""
        try:
            subprocess.run(
                [
                    "open",
                    "x-apple.systempreferences:com.apple.preference.security?Privacy_Accessibility",
                ],
                check=False,
            )
        except OSError as e:
            logger.error("Could not open System Settings: %s", e)

    @staticmethod
    def is_macos() -> bool:
        return platform.system() == "Darwin"
