"""
Lectura de fields.json (ManualFields / CustomFields declarados por el operador).
"""
from __future__ import annotations

import json
from pathlib import Path

from loguru import logger
from pydantic import ValidationError

from metadata_sync.domain.entities.fields import FieldsFile
from metadata_sync.shared.exceptions.sync import ConfigurationError


def load_field_declarations(path: Path | str) -> FieldsFile:
    """
    Raises:
        ConfigurationError: si el archivo no existe, no es JSON o no respeta el formato
    """
    path = Path(path)
    if not path.exists():
        raise ConfigurationError(f"No existe el archivo de campos: {path}")

    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"{path} no es JSON valido: {e}") from e

    try:
        declarations = FieldsFile.model_validate(raw)
    except ValidationError as e:
        raise ConfigurationError(f"{path} tiene un formato invalido: {e}") from e

    logger.debug(
        f"fields.json: {len(declarations.manual_fields)} ManualFields, "
        f"{len(declarations.custom_fields)} CustomFields"
    )
    return declarations
