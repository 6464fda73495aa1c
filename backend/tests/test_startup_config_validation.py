from __future__ import annotations

import logging

import pytest

from app.core.config import Settings, get_settings


@pytest.mark.asyncio
async def test_startup_fails_fast_on_config_errors_in_production(monkeypatch):
    from app import main as app_main

    monkeypatch.setenv("ENVIRONMENT", "production")
    get_settings.cache_clear()
    monkeypatch.setattr(Settings, "validate_required_config", lambda _self: ["missing secret"])

    with pytest.raises(RuntimeError, match="Configuration validation failed in production environment"):
        await app_main._startup_checks()


@pytest.mark.asyncio
async def test_startup_logs_warning_only_on_config_errors_in_test(monkeypatch, caplog):
    from app import main as app_main

    monkeypatch.setenv("ENVIRONMENT", "test")
    get_settings.cache_clear()
    monkeypatch.setattr(Settings, "validate_required_config", lambda _self: ["missing secret"])

    with caplog.at_level(logging.WARNING, logger="app.main"):
        await app_main._startup_checks()
    assert "missing secret" in caplog.text


def test_live_mode_without_key_is_reported():
    errors = Settings(ai_invoice_mode="live", gemini_api_key="").validate_required_config()
    assert any("GOOGLE_GEMINI_API_KEY" in e for e in errors)


def test_demo_mode_without_key_is_fine():
    assert Settings(ai_invoice_mode="demo", gemini_api_key="").validate_required_config() == []


def test_gemini_key_read_from_environment(monkeypatch):
    monkeypatch.setenv("GOOGLE_GEMINI_API_KEY", "env-key")
    settings = Settings()
    assert settings.gemini_api_key == "env-key"
    assert settings.has_gemini_credentials is True
