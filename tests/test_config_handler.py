import toml

from applauncher.shared.config_handler import ConfigHandler


def test_missing_file_is_created_from_defaults_without_hints(tmp_path, logger):
    config_file = tmp_path / "conf" / "config.toml"
    handler = ConfigHandler(logger, config_file=config_file)
    assert config_file.exists()
    written = toml.load(config_file)
    assert written["icons"]["size"] == 64
    assert "size_hint" not in written["icons"]
    assert "_section_hint" not in written
    assert handler.get_root_setting(["discovery", "extension"]) == ".desktop"


def test_user_values_win_and_missing_keys_are_merged(tmp_path, logger):
    config_file = tmp_path / "config.toml"
    config_file.write_text('[icons]\nsize = 32\n\n[custom]\nkey = "kept"\n')
    handler = ConfigHandler(logger, config_file=config_file)
    assert handler.get_root_setting(["icons", "size"]) == 32
    assert handler.get_root_setting(["icons", "theme"]) == ""
    assert handler.get_root_setting(["window", "title"]) == "App Launcher"
    assert handler.get_root_setting(["custom", "key"]) == "kept"


def test_missing_path_returns_default(tmp_path, logger):
    handler = ConfigHandler(logger, config_file=tmp_path / "config.toml")
    assert handler.get_root_setting(["nope", "deeper"], "fallback") == "fallback"
    assert handler.get_root_setting(["icons", "size", "deeper"], 7) == 7


def test_corrupt_file_falls_back_to_defaults_and_is_not_overwritten(tmp_path, logger):
    config_file = tmp_path / "config.toml"
    config_file.write_text("this is = = not toml [")
    handler = ConfigHandler(logger, config_file=config_file)
    assert handler.get_root_setting(["icons", "size"]) == 64
    handler.save_config()
    assert config_file.read_text() == "this is = = not toml ["
    assert any(level == "error" for level, _ in logger.messages)


def test_defaults_are_not_shared_between_handlers(tmp_path, logger):
    first = ConfigHandler(logger, config_file=tmp_path / "a.toml")
    first.config_data["discovery"]["search_paths"].append("/somewhere")
    second = ConfigHandler(logger, config_file=tmp_path / "b.toml")
    assert second.get_root_setting(["discovery", "search_paths"]) == []


def test_default_location_is_xdg_config_home(isolated_xdg, logger):
    handler = ConfigHandler(logger)
    assert handler.config_file == isolated_xdg / ".config" / "applauncher" / "config.toml"
    assert handler.config_file.exists()


def test_config_is_read_once_at_startup(tmp_path, logger):
    config_file = tmp_path / "config.toml"
    handler = ConfigHandler(logger, config_file=config_file)
    data = toml.load(config_file)
    data["window"]["width"] = 800
    config_file.write_text(toml.dumps(data))
    assert handler.get_root_setting(["window", "width"]) == 400
    assert ConfigHandler(logger, config_file=config_file).get_root_setting(["window", "width"]) == 800
