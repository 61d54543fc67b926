"""
Window identity: correlating stored window references with live windows.

Windows are identified by the pair (application name, window title),
compared case-sensitively with no normalisation. The window server offers
no handle that survives an application restart, so this pair is the only
identity test used anywhere in the package. ``bundle_id`` is captured but
not consulted.
"""

from typing import Iterable, Protocol

from .models import Group, LiveWindow

# Unit separator; cannot appear in a window title coming from System Events.
KEY_SEPARATOR = "\x1f"


class WindowLike(Protocol):
    application_name: str
    window_title: str


def match_key(window: WindowLike) -> str:
    """Identity key of a stored reference or a live window"""
    return f"{window.application_name}{KEY_SEPARATOR}{window.window_title}"


def matches(first: WindowLike, second: WindowLike) -> bool:
    return (
        first.application_name == second.application_name
        and first.window_title == second.window_title
    )


def target_keys(group: Group) -> set[str]:
    return {match_key(w) for w in group.windows}


def claimed_keys(groups: Iterable[Group]) -> dict[str, Group]:
    """Map every claimed match key to the (first) group that holds it"""
    claimed: dict[str, Group] = {}
    for group in groups:
        for window in group.windows:
            claimed.setdefault(match_key(window), group)
    return claimed


def available_windows(
    live_windows: Iterable[LiveWindow], groups: Iterable[Group]
) -> list[LiveWindow]:
    """Live windows not already claimed by any group, in snapshot order"""
    claimed = claimed_keys(groups)
    return [w for w in live_windows if match_key(w) not in claimed]


def assign_composite_ids(live_windows: list[LiveWindow]) -> list[LiveWindow]:
    """Give each window of a snapshot a display key.

    ``"App::Title"`` normally; a repeated (app, title) pair falls back to
    ``"App::<n>"`` where ``n`` is the window's index within its application.
    """
    seen: set[str] = set()
    per_app: dict[str, int] = {}
    for window in live_windows:
        index = per_app.get(window.application_name, 0)
        per_app[window.application_name] = index + 1
        key = match_key(window)
        if key in seen:
            window.composite_id = f"{window.application_name}::{index}"
        else:
            window.composite_id = f"{window.application_name}::{window.window_title}"
        seen.add(key)
    return live_windows


def group_by_application(windows: Iterable[LiveWindow]) -> dict[str, list[LiveWindow]]:
    grouped: dict[str, list[LiveWindow]] = {}
    for window in windows:
        grouped.setdefault(window.application_name, []).append(window)
    return grouped
