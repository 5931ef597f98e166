import pytest

from promptscope.utils.settings import (
    DEFAULT_UNCATEGORIZED_NAME,
    dev_mode_active,
    get_settings,
    refresh_settings_cache,
    uncategorized_name,
)


def test_defaults():
    settings = get_settings()
    assert settings.uncategorized_name == DEFAULT_UNCATEGORIZED_NAME == "未分类"
    assert settings.dev_mode is False
    assert settings.log_level == "INFO"


def test_reserved_name_is_configurable(monkeypatch):
    monkeypatch.setenv("UNCATEGORIZED_CATEGORY_NAME", "  Uncategorized ")
    refresh_settings_cache()
    assert uncategorized_name() == "Uncategorized"


def test_blank_reserved_name_falls_back_to_default(monkeypatch):
    monkeypatch.setenv("UNCATEGORIZED_CATEGORY_NAME", "   ")
    refresh_settings_cache()
    assert uncategorized_name() == DEFAULT_UNCATEGORIZED_NAME


def test_settings_are_cached(monkeypatch):
    first = get_settings()
    monkeypatch.setenv("LOG_LEVEL", "debug")
    assert get_settings() is first
    refresh_settings_cache()
    assert get_settings().log_level == "DEBUG"


def test_dev_mode_local(monkeypatch):
    monkeypatch.setenv("DEV_MODE", "true")
    monkeypatch.setenv("APP_BASE_URL", "http://localhost:3000")
    refresh_settings_cache()
    assert dev_mode_active() is True


def test_dev_mode_refused_for_remote_host(monkeypatch):
    monkeypatch.setenv("DEV_MODE", "true")
    monkeypatch.setenv("APP_BASE_URL", "https://prompts.example.com")
    refresh_settings_cache()
    with pytest.raises(RuntimeError, match="prompts.example.com"):
        dev_mode_active()
