"""
Configuració del motor de lectura d'actius
"""
from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    """Configuració de l'aplicació"""

    # App
    app_name: str = "Asset Scan Engine"
    app_version: str = "1.0.0"
    debug: bool = False
    log_level: str = "INFO"

    # Servei de desxifrat SADL (permís de conduir xifrat)
    sadl_enabled: bool = True
    sadl_service_url: Optional[str] = None
    sadl_api_key: Optional[str] = None
    sadl_timeout_seconds: float = 15.0

    # Inducció
    qr_code_prefix: str = "NT"
    induction_session_ttl_seconds: float = 900.0

    # API
    api_key_enabled: bool = False
    api_keys: list[str] = []

    class Config:
        env_file = ".env"
        case_sensitive = False


# Singleton de configuració
settings = Settings()
