"""
Tests for environment-driven search settings.
"""

from catalog_search.config import SearchSettings, get_settings, reset_settings


def test_settings_are_cached():
    assert get_settings() is get_settings()


def test_environment_is_read_after_reset(monkeypatch):
    monkeypatch.setenv("SEARCH_SLOW_MS", "750")
    reset_settings()
    assert get_settings().slow_search_ms == 750


def test_reset_drops_cached_instance():
    first = get_settings()
    reset_settings()
    assert get_settings() is not first


def test_defaults_without_environment():
    settings = SearchSettings()
    assert settings.default_page_size == 24
    assert settings.max_page_size == 100
