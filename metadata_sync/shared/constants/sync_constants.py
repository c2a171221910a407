"""
Constantes del sync: modos de ejecucion, tipos de dato y origen de campos.
"""
from enum import Enum, IntEnum

from metadata_sync.shared.exceptions.sync import InvalidSyncDirectionError


class SyncDirection(str, Enum):
    """Sentido de la sincronizacion."""
    KF_TO_SC = "KFtoSC"  # Keyfactor -> Sectigo (solo campos Custom)
    SC_TO_KF = "SCtoKF"  # Sectigo -> Keyfactor (campos Manual y Custom)

    @classmethod
    def parse(cls, value: str | None) -> "SyncDirection":
        """
        Parsea el modo sin distinguir mayusculas.

        Raises:
            InvalidSyncDirectionError: si el valor no es uno de los dos modos
        """
        if value:
            for member in cls:
                if member.value.lower() == value.strip().lower():
                    return member
        raise InvalidSyncDirectionError(value, [m.value for m in cls])


class MetadataDataType(IntEnum):
    """Tipos de dato de un campo de metadata en Keyfactor (codigos de la API)."""
    STRING = 1
    INTEGER = 2
    DATE = 3
    BOOLEAN = 4
    MULTIPLE_CHOICE = 5
    BIG_TEXT = 6
    EMAIL = 7


class CustomFieldInputType(str, Enum):
    """Tipos de input de un custom field de Sectigo."""
    TEXT_SINGLE_LINE = "TEXT_SINGLE_LINE"
    TEXT_MULTI_LINE = "TEXT_MULTI_LINE"
    EMAIL = "EMAIL"
    NUMBER = "NUMBER"
    TEXT_OPTION = "TEXT_OPTION"
    DATE = "DATE"


class FieldOrigin(str, Enum):
    """Origen de un campo unificado."""
    MANUAL = "manual"  # declarado por el operador, se lee por property path
    CUSTOM = "custom"  # custom field nativo de Sectigo


# Caracteres permitidos en nombres de campo de Keyfactor
ALLOWED_FIELD_NAME_PATTERN = r"[A-Za-z0-9_-]"

# Formato canonico de fecha que espera Sectigo
CANONICAL_DATE_FORMAT = "%Y-%m-%d"

# Header requerido por la API de Keyfactor
KEYFACTOR_REQUESTED_WITH = "APIClient"
