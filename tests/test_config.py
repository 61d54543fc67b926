import yaml

from window_groups.config import Config


def test_defaults_written_on_first_run(tmp_path):
    config = Config(tmp_path / "cfg")

    assert config.config_file.exists()
    assert config.get("storage.key") == "window-groups"
    assert config.excluded_bundle_ids == ["com.raycast.macos"]
    assert config.database_path == tmp_path / "cfg" / "groups.db"


def test_user_values_merge_with_defaults(tmp_path):
    tmp_path.joinpath("config.yaml").write_text(
        yaml.safe_dump({"window_server": {"osascript": "/opt/bin/osascript"}})
    )

    config = Config(tmp_path)

    assert config.get("window_server.osascript") == "/opt/bin/osascript"
    assert config.get("window_server.excluded_bundle_ids") == ["com.raycast.macos"]
    assert config.get("hotkeys.show_all") == "Ctrl+Shift+A"


def test_set_persists_with_dot_notation(tmp_path):
    config = Config(tmp_path)

    config.set("logging.level", "DEBUG")
    config.set("new.nested.key", 3)

    reloaded = Config(tmp_path)
    assert reloaded.get("logging.level") == "DEBUG"
    assert reloaded.get("new.nested.key") == 3


def test_get_missing_key_returns_default(tmp_path):
    config = Config(tmp_path)

    assert config.get("window_server.nope", "fallback") == "fallback"
    assert config.get("start_minimized.deeper") is None


def test_invalid_yaml_falls_back_to_defaults(tmp_path):
    tmp_path.joinpath("config.yaml").write_text("window_server: [unclosed")

    config = Config(tmp_path)

    assert config.get("storage.key") == "window-groups"


def test_defaults_are_not_shared_between_instances(tmp_path):
    first = Config(tmp_path / "a")
    first.config["window_server"]["excluded_bundle_ids"].append("com.example.app")

    assert Config(tmp_path / "b").excluded_bundle_ids == ["com.raycast.macos"]
