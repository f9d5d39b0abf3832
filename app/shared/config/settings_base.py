# -*- coding: utf-8 -*-
"""
app/shared/config/settings_base.py

Base de configuración (Pydantic v2) para EcoPro Billing.
- Esta clase NO instancia singletons ni resuelve .env; eso lo hace config_loader.
- Es la base para settings_dev.py, settings_testing.py y settings_prod.py.

Autor: EcoPro
Fecha: 2026-10-02
"""

from typing import Literal, Optional

from pydantic import Field, SecretStr, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


# Tipos de entorno soportados
EnvName = Literal["development", "test", "production"]


class BaseAppSettings(BaseSettings):
    # =========================
    # Núcleo de la aplicación
    # =========================
    python_env: EnvName = Field(default="development", validation_alias="PYTHON_ENV")
    app_name: str = Field(default="EcoPro Billing", validation_alias="APP_NAME")
    app_version: str = Field(default="0.1.0", validation_alias="APP_VERSION")
    app_host: str = Field(default="0.0.0.0", validation_alias="APP_HOST")
    app_port: int = Field(default=8000, validation_alias="APP_PORT")
    debug: bool = Field(default=False, validation_alias="DEBUG")

    # =========================
    # Base de datos (PostgreSQL)
    # =========================
    db_user: str = Field(default="postgres", validation_alias="DB_USER")
    db_password: SecretStr = Field(default=SecretStr("postgres"), validation_alias="DB_PASSWORD")
    db_host: str = Field(default="localhost", validation_alias="DB_HOST")
    db_port: int = Field(default=5432, validation_alias="DB_PORT")
    db_name: str = Field(default="ecopro", validation_alias="DB_NAME")
    db_echo_sql: bool = Field(default=False, validation_alias="DB_ECHO_SQL")
    db_tls: bool = Field(default=False, validation_alias="DB_TLS")
    db_url: Optional[str] = Field(default=None, validation_alias="DB_URL")

    # Timeouts (segundos / milisegundos)
    db_connect_timeout_s: float = Field(default=5.0, validation_alias="DB_CONNECT_TIMEOUT_S")
    db_command_timeout_s: float = Field(default=5.0, validation_alias="DB_COMMAND_TIMEOUT_S")
    db_session_statement_timeout_ms: int = Field(default=5000, validation_alias="DB_SESSION_STATEMENT_TIMEOUT_MS")

    @computed_field  # type: ignore[misc]
    @property
    def database_url(self) -> str:
        """
        URL de conexión para SQLAlchemy async.
        Prioriza DB_URL (normaliza postgres:// -> postgresql+asyncpg://),
        si no, construye desde componentes individuales.
        """
        from urllib.parse import quote_plus

        if self.db_url:
            url = self.db_url
            if url.startswith("postgres://"):
                url = "postgresql+asyncpg://" + url[len("postgres://"):]
            elif url.startswith("postgresql://"):
                url = "postgresql+asyncpg://" + url[len("postgresql://"):]
            return url

        pw = quote_plus(self.db_password.get_secret_value())
        return (
            f"postgresql+asyncpg://{quote_plus(self.db_user)}:{pw}"
            f"@{self.db_host}:{self.db_port}/{self.db_name}"
        )

    # =========================
    # CORS / Frontend
    # =========================
    allowed_origins: str = Field(default="*", validation_alias="CORS_ORIGINS")
    frontend_url: str = Field(default="http://localhost:8080", validation_alias="FRONTEND_URL")

    # =========================
    # Auth / JWT
    # =========================
    jwt_secret_key: SecretStr = Field(default=SecretStr("please-change-me"), validation_alias="JWT_SECRET_KEY")
    jwt_algorithm: Literal["HS256", "RS256"] = Field(default="HS256", validation_alias="JWT_ALGORITHM")
    access_token_expire_minutes: int = Field(default=60, validation_alias="ACCESS_TOKEN_EXPIRE_MINUTES")

    # =========================
    # Internal Service Auth
    # =========================
    internal_service_token: Optional[SecretStr] = Field(default=None, validation_alias="APP_SERVICE_TOKEN")

    # =========================
    # Observabilidad / Logging
    # =========================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(default="INFO", validation_alias="LOG_LEVEL")
    log_format: Literal["json", "pretty", "plain"] = Field(default="pretty", validation_alias="LOG_FORMAT")
    metrics_enabled: bool = Field(default=True, validation_alias="METRICS_ENABLED")

    # ===== Helpers de entorno =====
    @computed_field  # type: ignore[misc]
    @property
    def is_dev(self) -> bool:
        return self.python_env == "development"

    @computed_field  # type: ignore[misc]
    @property
    def is_test(self) -> bool:
        return self.python_env == "test"

    @computed_field  # type: ignore[misc]
    @property
    def is_prod(self) -> bool:
        return self.python_env == "production"

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")

    # ===== Utilidad para normalizar CORS =====
    def get_cors_origins(self) -> list[str]:
        """Convierte allowed_origins en lista procesable para CORS middleware."""
        if not self.allowed_origins or self.allowed_origins == "*":
            return ["*"]
        return [o.strip().strip('"').strip("'") for o in self.allowed_origins.split(",") if o.strip()]

    def _security_checks(self) -> None:
        """
        Validaciones mínimas de seguridad y coherencia.
        Se invoca desde config_loader tras instanciar el settings.
        """
        import logging
        logger = logging.getLogger(__name__)

        jwt_key = self.jwt_secret_key.get_secret_value()
        weak_jwt = not jwt_key or jwt_key == "please-change-me" or len(jwt_key) < 32

        if self.is_prod:
            if weak_jwt:
                raise ValueError("JWT_SECRET_KEY debe tener ≥32 caracteres en producción")
            if not self.internal_service_token:
                raise ValueError("APP_SERVICE_TOKEN es requerido en producción")
            if self.is_sqlite:
                raise ValueError("SQLite no está soportado en producción (DB_URL)")

        if self.is_dev and weak_jwt:
            logger.info("JWT_SECRET_KEY es débil o usa valor por defecto (solo aceptable en desarrollo)")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


__all__ = ["BaseAppSettings", "EnvName"]
# Fin del archivo app/shared/config/settings_base.py
