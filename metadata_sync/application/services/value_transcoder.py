"""
Conversion de valores entre la representacion de Keyfactor y la de Sectigo.

- Date: Keyfactor devuelve las fechas con un formato .NET configurable
  (KEYFACTOR_DATE_FORMAT); Sectigo espera yyyy-MM-dd.
- Resto de tipos: se copian tal cual, como texto. El tipo de dato es
  metadata para Keyfactor, no una validacion del sync.
"""
from __future__ import annotations

from datetime import datetime
from typing import Any, List, Optional

from loguru import logger

from metadata_sync.domain.entities.fields import UnifiedField
from metadata_sync.domain.entities.outcomes import FieldResult
from metadata_sync.shared.constants.sync_constants import CANONICAL_DATE_FORMAT, MetadataDataType
from metadata_sync.shared.exceptions.sync import ConfigurationError

# Tokens de formato .NET -> directivas strptime, del mas largo al mas corto
_DOTNET_TOKENS = [
    ("yyyy", "%Y"),
    ("yy", "%y"),
    ("MMMM", "%B"),
    ("MMM", "%b"),
    ("MM", "%m"),
    ("M", "%m"),
    ("dddd", "%A"),
    ("ddd", "%a"),
    ("dd", "%d"),
    ("d", "%d"),
    ("HH", "%H"),
    ("H", "%H"),
    ("hh", "%I"),
    ("h", "%I"),
    ("mm", "%M"),
    ("m", "%M"),
    ("ss", "%S"),
    ("s", "%S"),
    ("tt", "%p"),
]


def dotnet_to_strptime(pattern: str) -> str:
    """
    Traduce un formato de fecha .NET ("M/d/yyyy h:mm:ss tt") a strptime
    ("%m/%d/%Y %I:%M:%S %p").

    Soporta literales entre comillas simples y escapes con barra invertida.
    Fracciones de segundo (f, ff, fff...) se traducen a %f.
    """
    out: List[str] = []
    i = 0
    while i < len(pattern):
        char = pattern[i]

        if char == "\\" and i + 1 < len(pattern):
            out.append(pattern[i + 1].replace("%", "%%"))
            i += 2
            continue

        if char in ("'", '"'):
            end = pattern.find(char, i + 1)
            if end == -1:
                raise ValueError(f"Literal sin cerrar en el formato de fecha: {pattern}")
            out.append(pattern[i + 1:end].replace("%", "%%"))
            i = end + 1
            continue

        if char in "fF":
            j = i
            while j < len(pattern) and pattern[j] == char:
                j += 1
            out.append("%f")
            i = j
            continue

        for token, directive in _DOTNET_TOKENS:
            if pattern.startswith(token, i):
                out.append(directive)
                i += len(token)
                break
        else:
            out.append("%%" if char == "%" else char)
            i += 1

    return "".join(out)


def format_value(value: Any) -> str:
    """Representacion en texto de un valor leido por property path."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "True" if value else "False"
    if isinstance(value, (list, tuple)):
        return ",".join(format_value(v) for v in value)
    return str(value)


class ValueTranscoder:
    """
    Uso:
        transcoder = ValueTranscoder("M/d/yyyy h:mm:ss tt")
        transcoder.to_sectigo(field, "3/4/2024 1:02:03 PM")  # FieldResult("2024-03-04")
    """

    def __init__(self, keyfactor_date_format: str) -> None:
        self.keyfactor_date_format = keyfactor_date_format
        try:
            self._strptime_format = dotnet_to_strptime(keyfactor_date_format)
        except ValueError as e:
            raise ConfigurationError(f"KEYFACTOR_DATE_FORMAT invalido: {e}") from e

    def parse_keyfactor_date(self, raw: str) -> Optional[datetime]:
        try:
            return datetime.strptime(raw.strip(), self._strptime_format)
        except ValueError:
            return None

    def to_sectigo(self, unified_field: UnifiedField, raw: Optional[str]) -> FieldResult:
        """Valor de Keyfactor -> valor para el custom field de Sectigo."""
        if raw is None:
            return FieldResult.failure(f"El campo '{unified_field.target_name}' no tiene valor")

        if unified_field.data_type != MetadataDataType.DATE:
            return FieldResult.success(raw)

        parsed = self.parse_keyfactor_date(raw)
        if parsed is None:
            message = (
                f"Formato de fecha invalido en el campo '{unified_field.target_name}'. "
                f"Formato esperado: {self.keyfactor_date_format}. Valor recibido: {raw}"
            )
            logger.warning(message)
            return FieldResult.failure(message)
        return FieldResult.success(parsed.strftime(CANONICAL_DATE_FORMAT))

    def to_keyfactor(self, unified_field: UnifiedField, raw: Any) -> FieldResult:
        """Valor de Sectigo -> valor de metadata de Keyfactor (siempre texto, sin interpretar)."""
        return FieldResult.success(format_value(raw))
