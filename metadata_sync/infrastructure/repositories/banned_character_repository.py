"""
Repositorio JSON de la tabla de caracteres prohibidos (bannedcharacters.json).

Formato:
    {"BannedCharacters": [{"character": "#", "replacementcharacter": "-"},
                          {"character": "$", "replacementcharacter": null}]}

El string "null" (formato heredado) se interpreta como "sin reemplazo".
"""
from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any

from loguru import logger

from metadata_sync.domain.entities.banned_characters import BannedCharacterEntry, BannedCharacterTable
from metadata_sync.shared.constants.sync_constants import ALLOWED_FIELD_NAME_PATTERN
from metadata_sync.shared.exceptions.sync import ConfigurationError

_ROOT_KEY = "BannedCharacters"
_LEGACY_UNSET = "null"
_ALLOWED_REPLACEMENT = re.compile(rf"^{ALLOWED_FIELD_NAME_PATTERN}*$")


class BannedCharacterRepository:
    def __init__(self, path: Path | str) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> BannedCharacterTable:
        """
        Lee la tabla. Si el archivo no existe se parte de una tabla vacia.

        Raises:
            ConfigurationError: JSON invalido, caracteres duplicados o de largo != 1
        """
        if not self._path.exists():
            logger.info(f"No existe {self._path}; se parte de una tabla de caracteres vacia")
            return BannedCharacterTable()

        try:
            raw = json.loads(self._path.read_text(encoding="utf-8") or "{}")
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"{self._path} no es JSON valido: {e}") from e

        items = raw.get(_ROOT_KEY) if isinstance(raw, dict) else None
        if items is None:
            items = []
        if not isinstance(items, list):
            raise ConfigurationError(f"'{_ROOT_KEY}' en {self._path} debe ser una lista")

        entries = [self._parse_item(item) for item in items]
        try:
            table = BannedCharacterTable(entries)
        except ValueError as e:
            raise ConfigurationError(f"{self._path}: {e}") from e

        logger.debug(f"Cargados {len(table)} caracteres prohibidos desde {self._path}")
        return table

    def save(self, table: BannedCharacterTable) -> None:
        """Sobrescribe el archivo con la tabla completa (incluye entradas sin resolver)."""
        self._path.parent.mkdir(parents=True, exist_ok=True)
        document = {
            _ROOT_KEY: [
                {"character": entry.character, "replacementcharacter": entry.replacement}
                for entry in table
            ]
        }
        self._path.write_text(json.dumps(document, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")
        logger.info(f"Tabla de caracteres prohibidos guardada en {self._path} ({len(table)} entradas)")

    def _parse_item(self, item: Any) -> BannedCharacterEntry:
        if not isinstance(item, dict):
            raise ConfigurationError(f"Entrada invalida en {self._path}: {item!r}")

        character = item.get("character")
        if not isinstance(character, str) or len(character) != 1:
            raise ConfigurationError(
                f"Entrada invalida en {self._path}: 'character' debe ser un unico caracter ({character!r})"
            )
        if _ALLOWED_REPLACEMENT.match(character):
            raise ConfigurationError(
                f"Entrada invalida en {self._path}: {character!r} es un caracter permitido y no puede prohibirse"
            )

        replacement = item.get("replacementcharacter")
        if replacement == _LEGACY_UNSET:
            replacement = None
        if replacement is not None and not isinstance(replacement, str):
            raise ConfigurationError(
                f"Entrada invalida en {self._path}: 'replacementcharacter' de {character!r} debe ser string o null"
            )

        if replacement is not None and not _ALLOWED_REPLACEMENT.match(replacement):
            raise ConfigurationError(
                f"El reemplazo {replacement!r} para {character!r} en {self._path} contiene caracteres no permitidos"
            )

        return BannedCharacterEntry(character=character, replacement=replacement)
