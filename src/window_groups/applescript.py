"""
AppleScript plumbing for talking to System Events
"""

import logging
import subprocess

from .models import LiveWindow

logger = logging.getLogger(__name__)

FIELD_SEPARATOR = "|||"


def escape_applescript_string(text: str) -> str:
    """Escape text for use inside an AppleScript string literal"""
    # Backslashes first
    text = text.replace("\\", "\\\\")
    text = text.replace('"', '\\"')
    text = text.replace("\n", "\\n")
    text = text.replace("\r", "\\r")
    text = text.replace("\t", "\\t")
    return text


def applescript_list(items: list[str]) -> str:
    """Render a list of strings as an AppleScript list literal"""
    return "{" + ", ".join(f'"{escape_applescript_string(i)}"' for i in items) + "}"


def parse_window_listing(
    output: str | None,
    excluded_bundle_ids: set[str] | None = None,
    excluded_pids: set[int] | None = None,
) -> list[LiveWindow]:
    """Parse ``app|||title|||bundle|||pid`` lines produced by the listing script"""
    excluded_bundle_ids = excluded_bundle_ids or set()
    excluded_pids = excluded_pids or set()
    windows: list[LiveWindow] = []
    if not output:
        return windows

    for line in output.splitlines():
        parts = line.split(FIELD_SEPARATOR)
        if len(parts) < 3:
            continue
        # Titles are kept verbatim; System Events matches them exactly
        app_name = parts[0]
        title = parts[1]
        bundle_id = parts[2].strip()
        if bundle_id in ("", "missing value"):
            bundle_id = None
        pid = None
        if len(parts) > 3:
            try:
                pid = int(parts[3].strip())
            except ValueError:
                pid = None

        if not app_name or not title:
            continue
        if bundle_id and bundle_id in excluded_bundle_ids:
            continue
        if pid is not None and pid in excluded_pids:
            continue

        windows.append(
            LiveWindow(
                application_name=app_name,
                window_title=title,
                composite_id=f"{app_name}::{title}",
                bundle_id=bundle_id,
                pid=pid,
            )
        )
    return windows


class AppleScriptExecutor:
    """Runs AppleScript source through osascript"""

    def __init__(self, osascript: str = "osascript", timeout: float | None = None):
        self.osascript = osascript
        self.timeout = timeout

    def execute(self, script: str) -> tuple[bool, str | None, str | None]:
        """
        Execute an AppleScript program.

        Returns:
            Tuple of (success, stdout, stderr); empty output is None.
        """
        try:
            result = subprocess.run(
                [self.osascript, "-e", script],
                capture_output=True,
                text=True,
                check=False,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired:
            logger.error("osascript timed out after %ss", self.timeout)
            return False, None, "timeout"
        except OSError as e:
            logger.error("Could not run %s: %s", self.osascript, e)
            return False, None, str(e)

        stdout = result.stdout.strip() or None
        stderr = result.stderr.strip() or None
        if result.returncode != 0:
            logger.debug("osascript exited with %s: %s", result.returncode, stderr)
        return result.returncode == 0, stdout, stderr
