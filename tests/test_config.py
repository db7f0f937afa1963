from __future__ import annotations

import json
import logging

import pytest

from app.core.config import _build_config
from app.core.exceptions import ConfigurationError
from app.core.logging_config import JsonFormatter


def test_defaults_build_a_valid_development_config(monkeypatch):
    for key in ("ENV", "DATABASE_URL", "DEBUG", "LOG_LEVEL", "DEFAULT_TAX_YEAR"):
        monkeypatch.delenv(key, raising=False)
    cfg = _build_config()
    assert cfg.ENV == "development"
    assert cfg.DATABASE_URL.startswith("sqlite")
    assert cfg.API_PREFIX == "/api/v1"
    assert cfg.is_production is False


@pytest.mark.parametrize(
    ("key", "value"),
    [
        ("DATABASE_URL", "mysql://localhost/clienthub"),
        ("LOG_LEVEL", "chatty"),
        ("API_PREFIX", "api"),
        ("PORTAL_API_TIMEOUT_SECONDS", "0"),
    ],
)
def test_invalid_settings_raise_configuration_error(monkeypatch, key, value):
    monkeypatch.setenv(key, value)
    with pytest.raises(ConfigurationError):
        _build_config()


def test_production_rejects_placeholder_jwt_secret(monkeypatch):
    monkeypatch.delenv("JWT_SECRET", raising=False)
    monkeypatch.setenv("DATABASE_URL", "postgresql://db.internal/clienthub")
    with pytest.raises(ConfigurationError, match="JWT_SECRET"):
        _build_config("production")


def test_json_formatter_includes_event_fields():
    record = logging.LogRecord("app.test", logging.INFO, __file__, 1, "pipeline.stage.updated", None, None)
    record.event = "pipeline.stage.updated"
    record.entity_id = 7
    payload = json.loads(JsonFormatter().format(record))
    assert payload["event"] == "pipeline.stage.updated"
    assert payload["entity_id"] == 7
