# -*- coding: utf-8 -*-
"""
app/shared/config/settings_testing.py

Overrides para entorno de PRUEBAS (test) usando Pydantic v2.
Determinista: logging moderado, SQLite local y secretos dummy.

Autor: EcoPro
Fecha: 2026-10-02
"""

from typing import Optional

from pydantic import SecretStr
from pydantic_settings import SettingsConfigDict

from .settings_base import BaseAppSettings


class EnvTestingSettings(BaseAppSettings):
    # --- Identidad de entorno ---
    python_env: str = "test"

    # --- Logging en test: menos ruido ---
    log_level: str = "WARNING"
    log_format: str = "plain"

    # --- Base de datos: SQLite por defecto (los tests sobreescriben la sesión) ---
    db_url: Optional[str] = "sqlite+aiosqlite:///./ecopro_test.db"

    # --- Auth ---
    jwt_secret_key: SecretStr = SecretStr("test-secret-for-subscription-codes-suite")
    internal_service_token: Optional[SecretStr] = SecretStr("test-internal-token")

    model_config = SettingsConfigDict(
        env_file=".env.test",
        env_file_encoding="utf-8",
        extra="ignore",
    )


__all__ = ["EnvTestingSettings"]
# Fin del archivo app/shared/config/settings_testing.py
