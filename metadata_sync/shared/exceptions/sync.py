"""
Excepciones fatales del sync.

Solo estas excepciones suben hasta main() y terminan el proceso con
codigo distinto de cero. Los errores recuperables (por campo o por
certificado) nunca se lanzan: se registran en el SyncOutcome.
"""
from typing import Iterable

from metadata_sync.shared.exceptions.base import AppException


class FatalSyncError(AppException):
    """Excepción base para errores que abortan la corrida."""

    def __init__(self, message: str, error_code: str = "FATAL_SYNC_ERROR", details=None, exit_code: int = 1):
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
            exit_code=exit_code,
        )


class ConfigurationError(FatalSyncError):
    """Configuracion faltante o invalida (env, fields.json, bannedcharacters.json)."""

    def __init__(self, message: str, details=None):
        super().__init__(
            message=message,
            error_code="CONFIGURATION_ERROR",
            details=details,
            exit_code=2,
        )


class InvalidSyncDirectionError(FatalSyncError):
    """El modo de sync no es KFtoSC ni SCtoKF."""

    def __init__(self, value: str | None, valid_values: Iterable[str]):
        valid = list(valid_values)
        super().__init__(
            message=f"Modo de sync invalido: '{value}'. Especifica uno de: {', '.join(valid)}",
            error_code="INVALID_SYNC_DIRECTION",
            details={"value_provided": value, "valid_values": valid},
            exit_code=2,
        )


class UnresolvedBannedCharactersError(FatalSyncError):
    """Hay caracteres prohibidos sin reemplazo configurado."""

    def __init__(self, characters: list[str]):
        super().__init__(
            message=(
                "Hay caracteres prohibidos sin reemplazo: "
                f"{', '.join(repr(c) for c in characters)}. "
                "Completa 'replacementcharacter' en bannedcharacters.json y vuelve a ejecutar."
            ),
            error_code="UNRESOLVED_BANNED_CHARACTERS",
            details={"characters": characters},
            exit_code=3,
        )


class SnapshotRetrievalError(FatalSyncError):
    """No se pudo obtener el esquema o los certificados iniciales de un sistema."""

    def __init__(self, system: str, reason: str):
        super().__init__(
            message=f"No se pudo obtener datos iniciales de {system}: {reason}",
            error_code="SNAPSHOT_RETRIEVAL_FAILED",
            details={"system": system, "reason": reason},
            exit_code=4,
        )
