# -*- coding: utf-8 -*-
"""
Tests de configuración: selección por entorno, prefijos de entorno,
validaciones de producción y formato de logging.
"""

import json
import logging

import pytest
from pythonjsonlogger.json import JsonFormatter

from app.shared.config import (
    PaymentsSettings,
    SubscriptionCodesSettings,
    get_settings,
    setup_logging,
)
from app.shared.config.settings_prod import ProdSettings
from app.shared.config.settings_testing import EnvTestingSettings


def test_loader_selects_test_settings():
    settings = get_settings()

    assert isinstance(settings, EnvTestingSettings)
    assert settings.is_test is True
    assert settings.is_sqlite is True
    assert settings is get_settings()


def test_codes_settings_defaults_and_env_prefix(monkeypatch):
    defaults = SubscriptionCodesSettings()
    assert defaults.code_ttl_minutes == 60
    assert defaults.rate_limit_max_attempts == 5
    assert defaults.rate_limit_window_seconds == 60
    assert defaults.subscription_days_per_code == 30

    monkeypatch.setenv("CODES_CODE_TTL_MINUTES", "30")
    monkeypatch.setenv("CODES_RATE_LIMIT_MAX_ATTEMPTS", "3")
    overridden = SubscriptionCodesSettings()
    assert overridden.code_ttl_minutes == 30
    assert overridden.rate_limit_max_attempts == 3


def test_payments_settings_env_prefix(monkeypatch):
    monkeypatch.setenv("PAYMENTS_PLAN_PRICE_CENTS", "900")
    monkeypatch.setenv("PAYMENTS_CURRENCY", "EUR")

    settings = PaymentsSettings()

    assert settings.plan_price_cents == 900
    assert settings.currency == "EUR"
    assert settings.retry_delay_minutes == 60


def test_prod_rejects_weak_jwt(monkeypatch):
    monkeypatch.delenv("JWT_SECRET_KEY", raising=False)

    with pytest.raises(ValueError, match="JWT_SECRET_KEY"):
        ProdSettings()._security_checks()


def test_prod_rejects_sqlite(monkeypatch):
    monkeypatch.setenv("JWT_SECRET_KEY", "x" * 48)

    with pytest.raises(ValueError, match="SQLite"):
        ProdSettings()._security_checks()


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("*", ["*"]),
        ("https://a.example, 'https://b.example'", ["https://a.example", "https://b.example"]),
    ],
)
def test_cors_origins(monkeypatch, raw, expected):
    monkeypatch.setenv("CORS_ORIGINS", raw)
    assert EnvTestingSettings().get_cors_origins() == expected


def test_json_logging_format():
    setup_logging("INFO", "json", service="billing-test")
    try:
        handler = logging.getLogger().handlers[0]
        assert isinstance(handler.formatter, JsonFormatter)

        record = logging.LogRecord("app.test", logging.INFO, __file__, 1, "code %s issued", ("X",), None)
        payload = json.loads(handler.format(record))
        assert payload["message"] == "code X issued"
        assert payload["levelname"] == "INFO"
        assert payload["name"] == "app.test"
        assert payload["service"] == "billing-test"
        assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING
    finally:
        setup_logging("WARNING", "plain")


def test_debug_logging_unmutes_libraries():
    setup_logging("DEBUG", "pretty")
    try:
        assert logging.getLogger().level == logging.DEBUG
        assert logging.getLogger("httpx").level == logging.DEBUG
    finally:
        setup_logging("WARNING", "plain")
