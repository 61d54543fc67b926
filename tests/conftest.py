from dataclasses import dataclass, field
from datetime import datetime, timezone

import pytest

from window_groups.config import Config
from window_groups.exceptions import WindowServerError
from window_groups.models import Group, LiveWindow, WindowReference
from window_groups.repository import GroupRepository
from window_groups.window_server import WindowServer


@dataclass
class FakeWindow:
    title: str
    minimized: bool = False


@dataclass
class FakeApp:
    name: str
    bundle_id: str | None = None
    running: bool = True
    hidden: bool = False
    # Front-most window first
    windows: list[FakeWindow] = field(default_factory=list)


class FakeWindowServer(WindowServer):
    """In-memory desktop: apps, their windows, minimized flags and z-order"""

    def __init__(self, tool_bundle_id: str = "com.raycast.macos"):
        self.apps: dict[str, FakeApp] = {}
        self.frontmost: str | None = None
        self.tool_bundle_id = tool_bundle_id
        self.calls: list[tuple] = []
        self.failures: dict[tuple, Exception] = {}

    # --- setup helpers ---
    def add_window(self, app_name, title, minimized=False, bundle_id=None):
        app = self.apps.setdefault(app_name, FakeApp(app_name, bundle_id=bundle_id))
        app.windows.append(FakeWindow(title, minimized))
        return app

    def fail(self, method, *args, error=None):
        self.failures[(method, *args)] = error or WindowServerError(f"{method} exploded")

    def _check(self, method, *args):
        self.calls.append((method, *args))
        for key in ((method, *args), (method,)):
            if key in self.failures:
                raise self.failures[key]

    def _is_tool(self, app):
        return app.bundle_id == self.tool_bundle_id

    # --- inspection helpers ---
    def window(self, app_name, title) -> FakeWindow:
        return next(w for w in self.apps[app_name].windows if w.title == title)

    def minimized_keys(self) -> set[tuple[str, str]]:
        return {
            (app.name, w.title)
            for app in self.apps.values()
            for w in app.windows
            if w.minimized
        }

    def visible_keys(self) -> set[tuple[str, str]]:
        return {(w.application_name, w.window_title) for w in self.list_visible_windows()}

    # --- WindowServer ---
    def list_visible_windows(self) -> list[LiveWindow]:
        self._check("list_visible_windows")
        windows = []
        for app in self.apps.values():
            if not app.running or app.hidden or self._is_tool(app):
                continue
            for w in app.windows:
                if w.title and not w.minimized:
                    windows.append(
                        LiveWindow(
                            application_name=app.name,
                            window_title=w.title,
                            composite_id=f"{app.name}::{w.title}",
                            bundle_id=app.bundle_id,
                        )
                    )
        return windows

    def minimize_window(self, app_name, window_title):
        self._check("minimize_window", app_name, window_title)
        app = self.apps.get(app_name)
        if app is None or not app.running:
            raise WindowServerError(f"no process {app_name}")
        for w in app.windows:
            if w.title == window_title:
                w.minimized = True

    def unminimize_and_raise(self, app_name, window_title):
        self._check("unminimize_and_raise", app_name, window_title)
        app = self.apps.get(app_name)
        if app is None or not app.running:
            return False
        self.frontmost = app_name
        for w in app.windows:
            if w.title == window_title:
                w.minimized = False
                app.windows.remove(w)
                app.windows.insert(0, w)
                return True
        return False

    def set_application_visible(self, app_name):
        self._check("set_application_visible", app_name)
        app = self.apps.get(app_name)
        if app is not None and app.running:
            app.hidden = False

    def is_application_running(self, app_name):
        self._check("is_application_running", app_name)
        app = self.apps.get(app_name)
        return bool(app and app.running)

    def restore_all_windows(self):
        self._check("restore_all_windows")
        for app in self.apps.values():
            if not app.running or self._is_tool(app):
                continue
            app.hidden = False
            for w in app.windows:
                w.minimized = False


@pytest.fixture
def window_server():
    return FakeWindowServer()


@pytest.fixture
def config(tmp_path):
    return Config(config_dir=tmp_path / "config")


@pytest.fixture
def repository(config):
    return GroupRepository(config)


def ref(app_name, title, bundle_id=None) -> WindowReference:
    return WindowReference(
        application_name=app_name,
        window_title=title,
        composite_id=f"{app_name}::{title}",
        bundle_id=bundle_id,
    )


def make_group(name, windows, group_id=None) -> Group:
    now = datetime(2024, 1, 1, tzinfo=timezone.utc)
    return Group(
        id=group_id or name.lower(),
        name=name,
        windows=[ref(a, t) for a, t in windows],
        created_at=now,
        updated_at=now,
    )
