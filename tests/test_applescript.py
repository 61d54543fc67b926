import subprocess
from types import SimpleNamespace

import pytest

from window_groups import applescript
from window_groups.applescript import (
    AppleScriptExecutor,
    applescript_list,
    escape_applescript_string,
    parse_window_listing,
)
from window_groups.exceptions import WindowServerError
from window_groups.window_server import AppleScriptWindowServer


class RecordingExecutor:
    """Stands in for osascript: returns queued results and records scripts"""

    def __init__(self, *results):
        self.results = list(results)
        self.scripts = []

    def execute(self, script):
        self.scripts.append(script)
        if self.results:
            return self.results.pop(0)
        return True, None, None


def test_escape_applescript_string():
    assert escape_applescript_string('say "hi"\\now') == 'say \\"hi\\"\\\\now'
    assert escape_applescript_string("a\nb\tc") == "a\\nb\\tc"


def test_applescript_list():
    assert applescript_list(["a", 'b"c']) == '{"a", "b\\"c"}'
    assert applescript_list([]) == "{}"


def test_parse_window_listing():
    output = "\n".join(
        [
            "Cursor|||main.ts|||com.todesktop.cursor|||101",
            "Terminal|||bash|||missing value|||102",
            "Raycast|||Search|||com.raycast.macos|||103",
            "Python|||Window Groups|||org.python.python|||999",
            "Finder||||||com.apple.finder|||104",
            "garbage line",
        ]
    )

    windows = parse_window_listing(
        output, excluded_bundle_ids={"com.raycast.macos"}, excluded_pids={999}
    )

    assert [(w.application_name, w.window_title, w.bundle_id, w.pid) for w in windows] == [
        ("Cursor", "main.ts", "com.todesktop.cursor", 101),
        ("Terminal", "bash", None, 102),
    ]
    assert windows[0].composite_id == "Cursor::main.ts"


def test_parse_window_listing_empty():
    assert parse_window_listing(None) == []
    assert parse_window_listing("") == []


def test_executor_success(monkeypatch):
    seen = {}

    def fake_run(cmd, **kwargs):
        seen["cmd"] = cmd
        seen["timeout"] = kwargs.get("timeout")
        return SimpleNamespace(returncode=0, stdout="found\n", stderr="")

    monkeypatch.setattr(applescript.subprocess, "run", fake_run)

    result = AppleScriptExecutor(osascript="/usr/bin/osascript", timeout=5).execute("return 1")

    assert result == (True, "found", None)
    assert seen["cmd"] == ["/usr/bin/osascript", "-e", "return 1"]
    assert seen["timeout"] == 5


def test_executor_failure(monkeypatch):
    monkeypatch.setattr(
        applescript.subprocess,
        "run",
        lambda cmd, **kwargs: SimpleNamespace(returncode=1, stdout="", stderr="execution error\n"),
    )

    assert AppleScriptExecutor().execute("boom") == (False, None, "execution error")


def test_executor_timeout_and_missing_binary(monkeypatch):
    def timeout(cmd, **kwargs):
        raise subprocess.TimeoutExpired(cmd, 1)

    monkeypatch.setattr(applescript.subprocess, "run", timeout)
    assert AppleScriptExecutor(timeout=1).execute("x") == (False, None, "timeout")

    def missing(cmd, **kwargs):
        raise FileNotFoundError("osascript")

    monkeypatch.setattr(applescript.subprocess, "run", missing)
    success, stdout, stderr = AppleScriptExecutor().execute("x")
    assert not success and stdout is None and "osascript" in stderr


def test_server_lists_windows_excluding_self():
    executor = RecordingExecutor(
        (True, "Notes|||Todo|||com.apple.Notes|||10\nPython|||Me|||org.python|||42", None)
    )
    server = AppleScriptWindowServer(executor, excluded_bundle_ids=[], own_pid=42)

    windows = server.list_visible_windows()

    assert [(w.application_name, w.window_title) for w in windows] == [("Notes", "Todo")]


def test_server_listing_failure_raises():
    server = AppleScriptWindowServer(RecordingExecutor((False, None, "not allowed assistive access")))

    with pytest.raises(WindowServerError, match="assistive access"):
        server.list_visible_windows()


def test_server_raise_reports_found_and_not_found():
    executor = RecordingExecutor((True, "found", None), (True, "notfound", None))
    server = AppleScriptWindowServer(executor)

    assert server.unminimize_and_raise("Cursor", "main.ts") is True
    assert server.unminimize_and_raise("Cursor", "gone.ts") is False
    assert 'tell process "Cursor"' in executor.scripts[0]
    assert 'first window whose name is "main.ts"' in executor.scripts[0]


def test_server_escapes_names_in_scripts():
    executor = RecordingExecutor()
    server = AppleScriptWindowServer(executor)

    server.minimize_window('My "App"', 'say "hi"')

    assert 'tell process "My \\"App\\""' in executor.scripts[0]
    assert 'whose name is "say \\"hi\\""' in executor.scripts[0]


def test_server_is_application_running():
    executor = RecordingExecutor((True, "true", None), (True, "false", None))
    server = AppleScriptWindowServer(executor)

    assert server.is_application_running("Terminal") is True
    assert server.is_application_running("Nope") is False


def test_server_restore_all_skips_tool():
    executor = RecordingExecutor()
    server = AppleScriptWindowServer(
        executor, excluded_bundle_ids=["com.raycast.macos"], own_pid=4242
    )

    server.restore_all_windows()

    script = executor.scripts[0]
    assert 'set skipBundles to {"com.raycast.macos"}' in script
    assert "is not 4242" in script


def test_server_minimize_failure_raises():
    server = AppleScriptWindowServer(RecordingExecutor((False, None, "Can't get process")))

    with pytest.raises(WindowServerError):
        server.minimize_window("Ghost", "window")


def test_name_lookups_are_case_sensitive():
    executor = RecordingExecutor((True, "found", None), (True, "true", None))
    server = AppleScriptWindowServer(executor)

    server.minimize_window("Cursor", "main.ts")
    server.unminimize_and_raise("Cursor", "Main.ts")
    server.set_application_visible("Cursor")
    server.is_application_running("Cursor")

    assert len(executor.scripts) == 4
    for script in executor.scripts:
        considering = script.index("considering case")
        assert considering < script.index('"Cursor"')
        assert script.index("end considering") > script.rindex('"Cursor"')


def test_parse_window_listing_keeps_title_whitespace():
    windows = parse_window_listing("Terminal|||  build  |||com.apple.Terminal|||7")

    assert windows[0].window_title == "  build  "
    assert windows[0].composite_id == "Terminal::  build  "
