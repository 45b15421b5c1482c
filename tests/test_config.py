import pytest
from pydantic import SecretStr

from rapidllm.config import (
    DEFAULT_CHARACTER_LIMIT,
    DEFAULT_ENDPOINT,
    DEFAULT_MODEL,
    Settings,
    get_api_key,
    load_settings,
)
from rapidllm.errors import ConfigurationError, CredentialError


def test_settings_defaults(isolated_home):
    settings = load_settings()
    assert settings.endpoint == DEFAULT_ENDPOINT
    assert settings.default_model == DEFAULT_MODEL
    assert settings.character_limit == DEFAULT_CHARACTER_LIMIT
    assert settings.api_key is None
    assert settings.prompts_root == isolated_home / ".config" / "rapidllm" / "prompts"
    assert settings.api_key_file == isolated_home / ".config" / "rapidllm" / "openrouter" / "api_key"


def test_settings_read_environment(monkeypatch, tmp_path):
    monkeypatch.setenv("RAPIDLLM_ENDPOINT", "http://localhost:9/v1/chat/completions")
    monkeypatch.setenv("RAPIDLLM_DEFAULT_MODEL", "foo/bar")
    monkeypatch.setenv("RAPIDLLM_CHARACTER_LIMIT", "42")
    monkeypatch.setenv("RAPIDLLM_CONFIG_DIR", str(tmp_path / "conf"))
    monkeypatch.setenv("OPENROUTER_API_KEY", "sk-env")

    settings = load_settings()
    assert settings.endpoint == "http://localhost:9/v1/chat/completions"
    assert settings.default_model == "foo/bar"
    assert settings.character_limit == 42
    assert settings.prompts_root == tmp_path / "conf" / "prompts"
    assert settings.api_key.get_secret_value() == "sk-env"


def test_overrides_beat_environment_and_none_is_ignored(monkeypatch):
    monkeypatch.setenv("RAPIDLLM_CHARACTER_LIMIT", "42")
    assert load_settings(character_limit=7).character_limit == 7
    assert load_settings(character_limit=None).character_limit == 42


def test_invalid_setting_raises_configuration_error(monkeypatch):
    monkeypatch.setenv("RAPIDLLM_CHARACTER_LIMIT", "0")
    with pytest.raises(ConfigurationError):
        load_settings()


def test_settings_are_frozen():
    settings = load_settings()
    with pytest.raises(Exception):
        settings.endpoint = "http://elsewhere"


def test_api_key_is_not_rendered():
    settings = Settings(api_key="sk-hidden")
    assert isinstance(settings.api_key, SecretStr)
    assert "sk-hidden" not in repr(settings)


class TestGetApiKey:
    def test_environment_variable_wins(self, monkeypatch, isolated_home):
        key_file = isolated_home / ".config" / "rapidllm" / "openrouter" / "api_key"
        key_file.parent.mkdir(parents=True)
        key_file.write_text("sk-file\n", encoding="utf-8")
        monkeypatch.setenv("OPENROUTER_API_KEY", "sk-env")
        assert get_api_key(load_settings()) == "sk-env"

    def test_falls_back_to_key_file(self, isolated_home):
        key_file = isolated_home / ".config" / "rapidllm" / "openrouter" / "api_key"
        key_file.parent.mkdir(parents=True)
        key_file.write_text("sk-file\n", encoding="utf-8")
        assert get_api_key(load_settings()) == "sk-file"

    def test_missing_key(self):
        with pytest.raises(CredentialError, match="OPENROUTER_API_KEY is not set"):
            get_api_key(load_settings())

    def test_empty_environment_key(self, monkeypatch):
        monkeypatch.setenv("OPENROUTER_API_KEY", "  ")
        with pytest.raises(CredentialError, match="empty"):
            get_api_key(load_settings())

    def test_empty_key_file(self, isolated_home):
        key_file = isolated_home / ".config" / "rapidllm" / "openrouter" / "api_key"
        key_file.parent.mkdir(parents=True)
        key_file.write_text("\n", encoding="utf-8")
        with pytest.raises(CredentialError, match="is empty"):
            get_api_key(load_settings())
