"""
CLI: sync de metadata de certificados entre Sectigo y Keyfactor.

Uso recomendado:
  - Ejecutar como job (cron/systemd timer), una corrida por invocacion.
  - SCtoKF debe ejecutarse al menos una vez antes de KFtoSC (crea el esquema en Keyfactor).

Ejecución:
  metadata-sync SCtoKF
  metadata-sync KFtoSC --config-dir /etc/metadata-sync
  python -m metadata_sync SCtoKF --env-file prod.env

Codigos de salida:
  0  corrida completa (aunque haya certificados sin match o parciales)
  2  configuracion invalida o modo desconocido
  3  caracteres prohibidos sin reemplazo en bannedcharacters.json
  4  no se pudo obtener el esquema o los certificados iniciales
"""
from __future__ import annotations

import argparse
from typing import Optional, Sequence

from dotenv import load_dotenv
from loguru import logger
from pydantic import ValidationError

from metadata_sync.application.use_cases.metadata_sync_use_cases import MetadataSyncUseCases
from metadata_sync.core.config import Settings, load_settings
from metadata_sync.core.logging import configure_logging
from metadata_sync.infrastructure.external.keyfactor.client import KeyfactorClient
from metadata_sync.infrastructure.external.sectigo.client import SectigoClient
from metadata_sync.infrastructure.repositories.banned_character_repository import BannedCharacterRepository
from metadata_sync.shared.exceptions.sync import ConfigurationError, FatalSyncError


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="metadata-sync",
        description="Sincroniza metadata de certificados entre Sectigo y Keyfactor.",
    )
    parser.add_argument("mode", nargs="?", help="Sentido del sync: KFtoSC o SCtoKF")
    parser.add_argument("--config-dir", help="Directorio con fields.json y bannedcharacters.json")
    parser.add_argument("--env-file", help="Archivo .env alternativo")
    return parser


def build_use_cases(settings: Settings) -> MetadataSyncUseCases:
    """Constructor "oficial" del sync a partir de Settings."""
    http_options = {
        "timeout_s": settings.HTTP_TIMEOUT_S,
        "max_retries": settings.HTTP_MAX_RETRIES,
    }
    return MetadataSyncUseCases(
        settings=settings,
        sectigo=SectigoClient(settings.SECTIGO_API_URL, **http_options),
        keyfactor=KeyfactorClient(settings.KEYFACTOR_API_URL, **http_options),
        banned_characters=BannedCharacterRepository(settings.banned_characters_file),
    )


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _build_parser().parse_args(argv)

    # Cargar variables desde .env si existe (no pisa el entorno)
    load_dotenv(args.env_file or ".env", override=False)

    try:
        try:
            settings = load_settings(env_file=args.env_file, config_dir=args.config_dir)
        except ValidationError as e:
            raise ConfigurationError(f"Configuracion invalida: {e}") from e

        configure_logging(settings.LOG_LEVEL, settings.LOG_FILE)
        build_use_cases(settings).run(args.mode)
    except FatalSyncError as e:
        logger.critical(f"Error critico [{e.error_code}]: {e.message}")
        return e.exit_code

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
