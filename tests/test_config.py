"""Settings tests."""

from pathlib import Path

import pytest

from agency.config import Settings


def test_defaults() -> None:
    """Defaults match the site's search behaviour."""
    settings = Settings(_env_file=None)
    assert settings.search_default_limit == 10
    assert settings.search_max_limit == 50
    assert settings.static_index_format == "simple"
    assert settings.locales == ["de", "en"]


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """AGENCY_* variables configure the service."""
    monkeypatch.setenv("AGENCY_CONTENT_ROOT", str(tmp_path))
    monkeypatch.setenv("AGENCY_STATIC_INDEX_FORMAT", "categorized")
    monkeypatch.setenv("AGENCY_CORS_ORIGINS_RAW", "https://a.example, https://b.example,")
    monkeypatch.setenv("AGENCY_LOCALES_RAW", "en, fr, en")

    settings = Settings(_env_file=None)

    assert settings.content_root == tmp_path
    assert settings.static_index_format == "categorized"
    assert settings.cors_origins == ["https://a.example", "https://b.example"]
    assert settings.locales == ["en"]


def test_env_file(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Values can come from a .env file."""
    env_file = tmp_path / ".env"
    env_file.write_text("AGENCY_PORT=9001\nAGENCY_KEY=abc\n", encoding="utf-8")

    settings = Settings(_env_file=env_file)

    assert settings.port == 9001
    assert settings.key == "abc"


def test_unused_media_url_setting_is_ignored(monkeypatch: pytest.MonkeyPatch) -> None:
    """Settings only carry values the service reads."""
    monkeypatch.setenv("AGENCY_SERVER_URL", "https://cdn.example")

    settings = Settings(_env_file=None)

    assert "server_url" not in Settings.model_fields
    assert not hasattr(settings, "server_url")
