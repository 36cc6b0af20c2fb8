"""Unit tests for config."""

import json
import os
import stat
from unittest.mock import patch

import pytest

from imgen.core.config import (
    DEFAULT_IMAGE_MODEL,
    DEFAULT_OPENAI_BASE_URL,
    DEFAULT_REQUEST_TIMEOUT,
    Config,
    StoredConfig,
    config_path,
    get_config,
    set_config,
)
from imgen.utils.exceptions import ConfigurationError

_ENV_KEYS = (
    "OPENAI_API_KEY",
    "OPENAI_BASE_URL",
    "IMGEN_MODEL",
    "IMGEN_TIMEOUT",
    "IMGEN_DEBUG_API",
)


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Unset imgen env vars and point the config dir at an empty temp dir."""
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
    return tmp_path


@pytest.mark.unit
class TestConfig:
    def test_defaults(self):
        c = Config()
        assert c.openai_base_url == DEFAULT_OPENAI_BASE_URL
        assert c.image_model == DEFAULT_IMAGE_MODEL
        assert c.request_timeout == DEFAULT_REQUEST_TIMEOUT
        assert c.debug_api is False

    def test_validate_raises_when_no_api_key(self):
        c = Config(openai_api_key="")
        with pytest.raises(ConfigurationError) as exc_info:
            c.validate()
        assert "API key" in str(exc_info.value)

    def test_validate_raises_when_api_key_bad_prefix(self):
        c = Config(openai_api_key="invalid")
        with pytest.raises(ConfigurationError) as exc_info:
            c.validate()
        assert "sk-" in str(exc_info.value)

    def test_validate_raises_on_non_positive_timeout(self):
        with pytest.raises(ConfigurationError):
            Config(openai_api_key="sk-x", request_timeout=0).validate()

    def test_validate_raises_on_empty_model(self):
        with pytest.raises(ConfigurationError):
            Config(openai_api_key="sk-x", image_model="").validate()

    def test_validate_accepts_valid_config(self):
        Config(openai_api_key="sk-valid-key").validate()

    def test_repr_does_not_contain_api_key(self):
        c = Config(openai_api_key="sk-secret")
        assert "sk-secret" not in repr(c)

    def test_set_api_key(self):
        c = Config(openai_api_key="sk-old")
        c.set_api_key("sk-new")
        assert c.openai_api_key == "sk-new"

    def test_set_api_key_rejects_empty_and_bad_prefix(self):
        c = Config()
        with pytest.raises(ConfigurationError):
            c.set_api_key("")
        with pytest.raises(ConfigurationError):
            c.set_api_key("pk-123")


@pytest.mark.unit
class TestConfigFromEnv:
    def test_from_env_uses_env_vars(self, clean_env):
        with patch.dict(
            os.environ,
            {
                "OPENAI_API_KEY": "sk-from-env",
                "OPENAI_BASE_URL": "http://localhost:8080/v1",
                "IMGEN_MODEL": "gpt-image-1-mini",
                "IMGEN_TIMEOUT": "60",
                "IMGEN_DEBUG_API": "true",
            },
        ):
            c = Config.from_env()
        assert c.openai_api_key == "sk-from-env"
        assert c.openai_base_url == "http://localhost:8080/v1"
        assert c.image_model == "gpt-image-1-mini"
        assert c.request_timeout == 60
        assert c.debug_api is True

    def test_from_env_defaults(self, clean_env):
        c = Config.from_env()
        assert c.openai_api_key == ""
        assert c.openai_base_url == DEFAULT_OPENAI_BASE_URL
        assert c.image_model == DEFAULT_IMAGE_MODEL
        assert c.request_timeout == DEFAULT_REQUEST_TIMEOUT
        assert c.debug_api is False

    def test_invalid_timeout(self, clean_env):
        with patch.dict(os.environ, {"IMGEN_TIMEOUT": "soon"}):
            with pytest.raises(ConfigurationError) as exc_info:
                Config.from_env()
        assert "IMGEN_TIMEOUT" in str(exc_info.value)

    def test_falls_back_to_stored_key(self, clean_env):
        StoredConfig(openai_api_key="sk-stored").save()
        assert Config.from_env().openai_api_key == "sk-stored"

    def test_env_key_wins_over_stored(self, clean_env):
        StoredConfig(openai_api_key="sk-stored").save()
        with patch.dict(os.environ, {"OPENAI_API_KEY": "sk-env"}):
            assert Config.from_env().openai_api_key == "sk-env"

    def test_corrupt_stored_config_is_ignored(self, clean_env):
        path = clean_env / "imgen" / "config.json"
        path.parent.mkdir(parents=True)
        path.write_text("{not json", encoding="utf-8")
        assert Config.from_env().openai_api_key == ""


@pytest.mark.unit
class TestConfigPath:
    def test_xdg_config_home(self, monkeypatch, tmp_path):
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
        assert config_path() == tmp_path / "imgen" / "config.json"

    def test_home_fallback(self, monkeypatch, tmp_path):
        monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
        monkeypatch.setenv("HOME", str(tmp_path))
        assert config_path() == tmp_path / ".config" / "imgen" / "config.json"

    def test_undeterminable(self, monkeypatch):
        monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
        monkeypatch.delenv("HOME", raising=False)
        assert config_path() is None
        assert StoredConfig.load().openai_api_key is None
        with pytest.raises(ConfigurationError):
            StoredConfig(openai_api_key="sk-x").save()


@pytest.mark.unit
class TestStoredConfig:
    def test_missing_file_is_empty(self, tmp_path):
        assert StoredConfig.load_from_path(tmp_path / "nope.json").openai_api_key is None

    def test_round_trip_and_permissions(self, tmp_path):
        path = tmp_path / "dir" / "config.json"
        StoredConfig(openai_api_key="sk-abc").save_to_path(path)

        assert json.loads(path.read_text(encoding="utf-8")) == {"openai_api_key": "sk-abc"}
        assert stat.S_IMODE(path.stat().st_mode) == 0o600
        assert StoredConfig.load_from_path(path).openai_api_key == "sk-abc"

    def test_overwrite_tightens_existing_permissions(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("{}", encoding="utf-8")
        path.chmod(0o644)
        StoredConfig(openai_api_key="sk-abc").save_to_path(path)
        assert stat.S_IMODE(path.stat().st_mode) == 0o600

    def test_save_returns_default_path(self, monkeypatch, tmp_path):
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
        path = StoredConfig(openai_api_key="sk-abc").save()
        assert path == tmp_path / "imgen" / "config.json"
        assert StoredConfig.load().openai_api_key == "sk-abc"

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("{oops", encoding="utf-8")
        with pytest.raises(ConfigurationError) as exc_info:
            StoredConfig.load_from_path(path)
        assert "Invalid JSON" in str(exc_info.value)

    def test_not_an_object(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("[1, 2]", encoding="utf-8")
        with pytest.raises(ConfigurationError):
            StoredConfig.load_from_path(path)

    def test_key_not_a_string(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text('{"openai_api_key": 42}', encoding="utf-8")
        with pytest.raises(ConfigurationError):
            StoredConfig.load_from_path(path)

    def test_unknown_keys_ignored(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text('{"openai_api_key": "sk-1", "theme": "dark"}', encoding="utf-8")
        assert StoredConfig.load_from_path(path).openai_api_key == "sk-1"

    def test_repr_hides_key(self):
        assert "sk-secret" not in repr(StoredConfig(openai_api_key="sk-secret"))


@pytest.mark.unit
class TestGlobalConfig:
    def test_set_and_get(self):
        c = Config(openai_api_key="sk-global")
        set_config(c)
        try:
            assert get_config() is c
        finally:
            set_config(None)  # type: ignore[arg-type]
