"""Tests for configuration loading."""

import json
import logging

import pytest

from xhair.core.config import (
    ENV_MAPPINGS,
    LoggingConfig,
    XhairConfig,
    config_to_dict,
    dict_to_config,
    get_config,
    load_config,
    load_config_file,
    load_env_config,
    merge_configs,
    reset_config,
    set_config,
    setup_logging,
)


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Isolate config loading from the host environment and files."""
    for name in ENV_MAPPINGS:
        # setenv first so teardown restores the original state
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    monkeypatch.chdir(tmp_path)
    yield monkeypatch
    reset_config()


class TestDefaults:
    """Default configuration values."""

    def test_defaults(self):
        config = XhairConfig()
        assert config.faceit.base_url == "https://open.faceit.com/data/v4"
        assert config.faceit.game == "csgo"
        assert config.faceit.history_limit == 20
        assert config.faceit.timeout_seconds == 10.0
        assert config.service.port == 3500
        assert config.service.uniform_error_status is False
        assert config.service.cors_origins == ["*"]

    def test_resolve_temp_dir(self, tmp_path):
        config = XhairConfig()
        assert config.replay.resolve_temp_dir().is_dir()
        config.replay.temp_dir = str(tmp_path)
        assert config.replay.resolve_temp_dir() == tmp_path


class TestEnvConfig:
    """Environment variable overrides."""

    def test_api_key_and_port(self, clean_env):
        clean_env.setenv("FACEIT_API_KEY", "abc123")
        clean_env.setenv("PORT", "8080")
        data = load_env_config()
        assert data == {"faceit": {"api_key": "abc123"}, "service": {"port": 8080}}

    def test_numeric_api_key_stays_string(self, clean_env):
        clean_env.setenv("FACEIT_API_KEY", "123456")
        assert load_env_config()["faceit"]["api_key"] == "123456"

    def test_bool_and_float_conversion(self, clean_env):
        clean_env.setenv("XHAIR_UNIFORM_ERROR_STATUS", "true")
        clean_env.setenv("XHAIR_PARSE_TIMEOUT", "12.5")
        data = load_env_config()
        assert data["service"]["uniform_error_status"] is True
        assert data["replay"]["parse_timeout_seconds"] == 12.5

    def test_empty_value_ignored(self, clean_env):
        clean_env.setenv("PORT", "")
        assert load_env_config() == {}


class TestConfigFiles:
    """File-based configuration."""

    def test_toml(self, tmp_path):
        path = tmp_path / "xhair.toml"
        path.write_text('[faceit]\ngame = "cs2"\n\n[service]\nport = 9000\n')
        data = load_config_file(path)
        assert data["faceit"]["game"] == "cs2"
        assert data["service"]["port"] == 9000

    def test_json(self, tmp_path):
        path = tmp_path / "xhair.json"
        path.write_text(json.dumps({"replay": {"chunk_size": 4096}}))
        assert load_config_file(path) == {"replay": {"chunk_size": 4096}}

    def test_missing_file(self, tmp_path):
        assert load_config_file(tmp_path / "absent.toml") == {}

    def test_unknown_extension(self, tmp_path):
        path = tmp_path / "xhair.ini"
        path.write_text("[faceit]")
        assert load_config_file(path) == {}


class TestLoadConfig:
    """Precedence and assembly in load_config()."""

    def test_env_overrides_file(self, clean_env, tmp_path):
        path = tmp_path / "custom.toml"
        path.write_text("[service]\nport = 9000\nhost = \"127.0.0.1\"\n")
        clean_env.setenv("PORT", "7000")

        config = load_config(path, load_dotenv_file=False)

        assert config.service.port == 7000
        assert config.service.host == "127.0.0.1"

    def test_default_path_discovered(self, clean_env, tmp_path):
        (tmp_path / "xhair.toml").write_text('[faceit]\ngame = "cs2"\n')
        config = load_config(load_dotenv_file=False)
        assert config.faceit.game == "cs2"

    def test_dotenv_file(self, clean_env, tmp_path):
        (tmp_path / ".env").write_text("FACEIT_API_KEY=from-dotenv\n")
        config = load_config()
        assert config.faceit.api_key == "from-dotenv"

    def test_dotenv_does_not_override_env(self, clean_env, tmp_path):
        (tmp_path / ".env").write_text("FACEIT_API_KEY=from-dotenv\n")
        clean_env.setenv("FACEIT_API_KEY", "from-env")
        assert load_config().faceit.api_key == "from-env"

    def test_missing_api_key_warns(self, clean_env, caplog):
        with caplog.at_level(logging.WARNING, logger="xhair.core.config"):
            load_config(load_dotenv_file=False)
        assert "FACEIT_API_KEY" in caplog.text


class TestHelpers:
    """merge/convert helpers."""

    def test_merge_is_recursive(self):
        merged = merge_configs(
            {"faceit": {"game": "csgo", "history_limit": 20}},
            {"faceit": {"game": "cs2"}},
        )
        assert merged == {"faceit": {"game": "cs2", "history_limit": 20}}

    def test_dict_to_config_ignores_unknown_keys(self):
        config = dict_to_config({"faceit": {"game": "cs2", "bogus": 1}, "other": {}})
        assert config.faceit.game == "cs2"
        assert not hasattr(config.faceit, "bogus")

    def test_config_to_dict_redacts_key(self):
        config = XhairConfig()
        config.faceit.api_key = "secret"
        assert config_to_dict(config)["faceit"]["api_key"] == "***"
        assert config_to_dict(config, redact=False)["faceit"]["api_key"] == "secret"


class TestGlobalConfig:
    """Process-wide configuration access."""

    def test_set_and_get(self, clean_env):
        config = XhairConfig()
        set_config(config)
        assert get_config() is config

    def test_reset_reloads(self, clean_env):
        clean_env.setenv("XHAIR_FACEIT_GAME", "cs2")
        reset_config()
        assert get_config().faceit.game == "cs2"


class TestSetupLogging:
    """Logging setup from LoggingConfig."""

    def test_file_handler(self, tmp_path):
        root = logging.getLogger()
        before = list(root.handlers)
        level = root.level
        log_file = tmp_path / "xhair.log"
        try:
            setup_logging(LoggingConfig(level="DEBUG", file=str(log_file)))
            logging.getLogger("xhair.test").info("hello")
            assert root.level == logging.DEBUG
            assert "hello" in log_file.read_text()
        finally:
            for handler in root.handlers[:]:
                if handler not in before:
                    root.removeHandler(handler)
                    handler.close()
            root.setLevel(level)

    def test_repeated_setup_writes_each_line_once(self, tmp_path):
        root = logging.getLogger()
        before = list(root.handlers)
        level = root.level
        log_file = tmp_path / "xhair.log"
        try:
            setup_logging(LoggingConfig(file=str(log_file)))
            setup_logging(LoggingConfig(file=str(log_file)))
            logging.getLogger("xhair.test").warning("once")
            assert log_file.read_text().count("once") == 1
        finally:
            for handler in root.handlers[:]:
                if handler not in before:
                    root.removeHandler(handler)
                    handler.close()
            root.setLevel(level)
