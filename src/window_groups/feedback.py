"""
User-facing outcome messages for group actions
"""

from dataclasses import dataclass

from .models import SwitchResult

SUCCESS = "success"
FAILURE = "failure"


@dataclass(frozen=True)
class Feedback:
    level: str
    title: str
    message: str

    @property
    def is_failure(self) -> bool:
        return self.level == FAILURE


def switch_feedback(group_name: str, result: SwitchResult) -> Feedback:
    """Describe a finished switch. Finding nothing is a failure even though nothing raised."""
    outcome = result.outcome
    if outcome == "failure":
        return Feedback(
            FAILURE,
            "No Windows Found",
            "None of the windows in this group could be found. They may have been closed.",
        )
    if outcome == "partial":
        return Feedback(
            SUCCESS,
            "Partially Switched",
            f"{result.shown} window(s) shown, {len(result.not_found)} not found",
        )
    return Feedback(
        SUCCESS,
        "Success",
        f'Now showing {result.shown} window(s) from "{group_name}"',
    )


def restore_all_feedback() -> Feedback:
    return Feedback(
        SUCCESS, "All Windows Restored", "All minimized windows have been restored"
    )


def minimize_all_feedback(count: int) -> Feedback:
    return Feedback(SUCCESS, "Windows Minimized", f"Minimized {count} window(s)")


def group_created_feedback(name: str, window_count: int) -> Feedback:
    return Feedback(SUCCESS, "Group Created", f'"{name}" with {window_count} window(s)')


def group_deleted_feedback(name: str) -> Feedback:
    return Feedback(SUCCESS, "Group Deleted", f'"{name}" has been deleted')


def error_feedback(error: Exception, title: str = "Error") -> Feedback:
    return Feedback(FAILURE, title, str(error) or error.__class__.__name__)
