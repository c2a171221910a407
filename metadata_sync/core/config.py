"""
Configuracion central del job de sincronizacion.
Gestiona variables de entorno (o archivo .env) y valida lo minimo necesario
para poder conectarse a Sectigo y a Keyfactor.

Las declaraciones de campos (fields.json) y la tabla de caracteres prohibidos
(bannedcharacters.json) viven en CONFIG_DIR; este modulo solo resuelve sus rutas.
"""
from pathlib import Path
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from metadata_sync.shared.exceptions.sync import ConfigurationError


class Settings(BaseSettings):
    """
    Clase de configuracion del job.
    Lee variables de entorno y proporciona valores por defecto.

    Credenciales:
    - SECTIGO_LOGIN / SECTIGO_PASSWORD / SECTIGO_CUSTOMER_URI (headers de Sectigo)
    - KEYFACTOR_LOGIN / KEYFACTOR_PASSWORD (Basic auth de Keyfactor)
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",  # Ignorar campos extra del .env
    )

    # Sectigo
    SECTIGO_API_URL: str = Field(default="")
    SECTIGO_LOGIN: str = Field(default="")
    SECTIGO_PASSWORD: str = Field(default="")
    SECTIGO_CUSTOMER_URI: str = Field(default="")
    SECTIGO_PAGE_SIZE: int = Field(default=25)
    SSL_TYPE_IDS: List[int] = Field(default_factory=list)

    # Keyfactor
    KEYFACTOR_API_URL: str = Field(default="")
    KEYFACTOR_LOGIN: str = Field(default="")
    KEYFACTOR_PASSWORD: str = Field(default="")
    KEYFACTOR_PAGE_SIZE: int = Field(default=100)
    # Formato .NET en el que Keyfactor devuelve los campos fecha
    KEYFACTOR_DATE_FORMAT: str = Field(default="M/d/yyyy h:mm:ss tt")
    ISSUER_DN_LOOKUP_TERM: str = Field(default="Sectigo")

    # Comportamiento del sync
    IMPORT_ALL_CUSTOM_FIELDS: bool = Field(default=False)
    ENABLE_DISABLED_FIELD_SYNC: bool = Field(default=False)
    SYNC_REVOKED_AND_EXPIRED_CERTS: bool = Field(default=False)
    SANITIZER_WORKERS: int = Field(default=4)

    # HTTP
    HTTP_TIMEOUT_S: int = Field(default=30)
    HTTP_MAX_RETRIES: int = Field(default=4)

    # Archivos de configuracion
    CONFIG_DIR: str = Field(default="config")

    # Logging
    LOG_LEVEL: str = Field(default="INFO")
    LOG_FILE: str = Field(default="logs/metadata_sync.log")

    @property
    def config_dir(self) -> Path:
        return Path(self.CONFIG_DIR)

    @property
    def fields_file(self) -> Path:
        """Ruta del archivo con ManualFields / CustomFields."""
        return self.config_dir / "fields.json"

    @property
    def banned_characters_file(self) -> Path:
        """Ruta del archivo persistido de caracteres prohibidos."""
        return self.config_dir / "bannedcharacters.json"

    def validate_required(self) -> None:
        """
        Valida que la configuracion critica este presente.

        Raises:
            ConfigurationError: si falta alguna URL/credencial o algun valor es invalido
        """
        required = {
            "SECTIGO_API_URL": self.SECTIGO_API_URL,
            "SECTIGO_LOGIN": self.SECTIGO_LOGIN,
            "SECTIGO_PASSWORD": self.SECTIGO_PASSWORD,
            "SECTIGO_CUSTOMER_URI": self.SECTIGO_CUSTOMER_URI,
            "KEYFACTOR_API_URL": self.KEYFACTOR_API_URL,
            "KEYFACTOR_LOGIN": self.KEYFACTOR_LOGIN,
            "KEYFACTOR_PASSWORD": self.KEYFACTOR_PASSWORD,
        }
        missing = [name for name, value in required.items() if not value]
        if missing:
            raise ConfigurationError(
                f"Faltan variables de configuracion obligatorias: {', '.join(missing)}",
                details={"missing": missing},
            )

        if not self.SSL_TYPE_IDS:
            raise ConfigurationError("SSL_TYPE_IDS no puede estar vacio")

        if self.SECTIGO_PAGE_SIZE <= 0 or self.KEYFACTOR_PAGE_SIZE <= 0:
            raise ConfigurationError(
                "SECTIGO_PAGE_SIZE y KEYFACTOR_PAGE_SIZE deben ser mayores que cero"
            )

        if self.SANITIZER_WORKERS <= 0:
            raise ConfigurationError("SANITIZER_WORKERS debe ser mayor que cero")


def load_settings(env_file: str | None = None, config_dir: str | None = None) -> Settings:
    """
    Construye Settings desde el entorno.

    Args:
        env_file: archivo .env alternativo (por defecto ".env")
        config_dir: override de CONFIG_DIR (argumento de CLI)
    """
    overrides = {}
    if config_dir:
        overrides["CONFIG_DIR"] = config_dir
    if env_file:
        return Settings(_env_file=env_file, **overrides)
    return Settings(**overrides)
