from window_groups.permissions import PermissionsHelper


class StubExecutor:
    def __init__(self, success):
        self.success = success
        self.scripts = []

    def execute(self, script):
        self.scripts.append(script)
        return self.success, None, None if self.success else "not authorized"


def test_missing_permissions_reports_both(monkeypatch):
    helper = PermissionsHelper(StubExecutor(False))
    monkeypatch.setattr(PermissionsHelper, "check_accessibility_permissions", staticmethod(lambda: False))

    assert helper.get_missing_permissions() == ["Accessibility", "Automation (System Events)"]


def test_no_missing_permissions(monkeypatch):
    executor = StubExecutor(True)
    helper = PermissionsHelper(executor)
    monkeypatch.setattr(PermissionsHelper, "check_accessibility_permissions", staticmethod(lambda: True))

    assert helper.get_missing_permissions() == []
    assert "System Events" in executor.scripts[0]


def test_instructions_mention_accessibility():
    assert "Accessibility" in PermissionsHelper.request_permissions_instructions()
