"""
Tabla de caracteres prohibidos en nombres de campo de Keyfactor.

La tabla es un valor explicito: se carga al inicio de la corrida, se pasa
como argumento al sanitizador y al orquestador, y se persiste una sola vez
al terminar la fase de descubrimiento. Nunca es estado global.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional


@dataclass(frozen=True)
class BannedCharacterEntry:
    """
    Un caracter prohibido y su reemplazo.

    replacement=None significa "sin reemplazo configurado todavia".
    Un reemplazo "" elimina el caracter.
    """

    character: str
    replacement: Optional[str] = None

    @property
    def is_resolved(self) -> bool:
        return self.replacement is not None

    @property
    def code_point(self) -> str:
        return f"U+{ord(self.character):04X}"


class BannedCharacterTable:
    """
    Tabla ordenada de BannedCharacterEntry con caracteres unicos.

    Crece de forma monotona durante la corrida: merge() solo agrega
    caracteres nuevos, nunca pisa un reemplazo existente.
    """

    def __init__(self, entries: Iterable[BannedCharacterEntry] = ()) -> None:
        self._entries: dict[str, BannedCharacterEntry] = {}
        for entry in entries:
            if entry.character in self._entries:
                raise ValueError(f"Caracter duplicado en la tabla: {entry.character!r}")
            self._entries[entry.character] = entry

    def __iter__(self) -> Iterator[BannedCharacterEntry]:
        return iter(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, character: object) -> bool:
        return character in self._entries

    def get(self, character: str) -> Optional[BannedCharacterEntry]:
        return self._entries.get(character)

    def merge(self, findings: Iterable[BannedCharacterEntry]) -> List[BannedCharacterEntry]:
        """
        Agrega a la tabla los caracteres que aun no estan.

        Returns:
            Las entradas efectivamente agregadas, en orden de aparicion.
        """
        added: List[BannedCharacterEntry] = []
        for entry in findings:
            if entry.character not in self._entries:
                self._entries[entry.character] = entry
                added.append(entry)
        return added

    def unresolved(self) -> List[BannedCharacterEntry]:
        return [entry for entry in self._entries.values() if not entry.is_resolved]

    def replacements(self) -> dict[str, str]:
        """Mapa caracter -> reemplazo, solo para entradas resueltas."""
        return {
            entry.character: entry.replacement
            for entry in self._entries.values()
            if entry.replacement is not None
        }
