"""
Sanitizador de nombres de campo.

Keyfactor solo acepta nombres con [A-Za-z0-9_-]. Este modulo:
- clasifica un nombre y devuelve los caracteres prohibidos que contiene
- reescribe un nombre aplicando los reemplazos configurados
- escanea la lista completa de campos en paralelo y fusiona los hallazgos
  en la tabla compartida de forma secuencial (collect-then-merge)

Funciones puras salvo scan_fields, que solo muta la tabla recibida.
"""
from __future__ import annotations

import re
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from functools import partial
from typing import List, Sequence, Tuple

from loguru import logger

from metadata_sync.domain.entities.banned_characters import BannedCharacterEntry, BannedCharacterTable
from metadata_sync.domain.entities.fields import UnifiedField
from metadata_sync.shared.constants.sync_constants import ALLOWED_FIELD_NAME_PATTERN
from metadata_sync.shared.exceptions.sync import UnresolvedBannedCharactersError

_ALLOWED_CHAR = re.compile(ALLOWED_FIELD_NAME_PATTERN)


def is_allowed_character(character: str) -> bool:
    return bool(_ALLOWED_CHAR.fullmatch(character))


def classify(text: str, table: BannedCharacterTable | None = None) -> Tuple[BannedCharacterEntry, ...]:
    """
    Devuelve una entrada por cada caracter prohibido distinto de `text`,
    en orden de primera aparicion. El reemplazo se toma de la tabla si
    el caracter ya esta registrado; si no, queda sin reemplazo.
    """
    seen: set[str] = set()
    found: List[BannedCharacterEntry] = []
    for character in text:
        if character in seen or is_allowed_character(character):
            continue
        seen.add(character)
        known = table.get(character) if table is not None else None
        found.append(known or BannedCharacterEntry(character=character))
    return tuple(found)


def sanitize(text: str, table: BannedCharacterTable) -> str:
    """
    Aplica todos los reemplazos resueltos de la tabla.

    Los caracteres sin reemplazo se dejan como estan y se reportan en el log.
    Idempotente mientras los reemplazos solo contengan caracteres permitidos.
    """
    result = text.translate(str.maketrans(table.replacements()))

    missing = [e for e in table.unresolved() if e.character in result]
    if missing:
        logger.warning(
            f"El nombre '{text}' tiene caracteres prohibidos sin reemplazo: "
            + ", ".join(f"'{e.character}' ({e.code_point})" for e in missing)
        )
    elif result != text:
        logger.info(f"El nombre de campo '{text}' se convierte a '{result}' para Keyfactor")
    return result


@dataclass
class ScanReport:
    """Resultado del escaneo de nombres de campo."""

    fields_checked: int = 0
    new_entries: List[BannedCharacterEntry] = field(default_factory=list)
    details: List[str] = field(default_factory=list)


def _describe(name: str, findings: Sequence[BannedCharacterEntry]) -> List[str]:
    return [
        f"El nombre de campo '{name}' contiene el caracter invalido '{e.character}' ({e.code_point})"
        for e in findings
        if not e.is_resolved
    ]


def scan_fields(
    fields: Sequence[UnifiedField],
    table: BannedCharacterTable,
    *,
    max_workers: int = 4,
) -> ScanReport:
    """
    Clasifica el nombre destino de cada campo en paralelo y fusiona
    los caracteres nuevos en `table`.

    La clasificacion de cada campo es independiente; la fusion en la tabla
    se hace despues, en un solo hilo y en el orden original de los campos,
    para que el resultado sea determinista.
    """
    names = [f.target_name for f in fields]
    report = ScanReport(fields_checked=len(names))
    if not names:
        return report

    # La tabla solo se lee durante la clasificacion; merge() corre despues
    with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="sanitizer-") as executor:
        findings = list(executor.map(partial(classify, table=table), names))

    for name, found in zip(names, findings):
        report.details.extend(_describe(name, found))
        report.new_entries.extend(table.merge(found))

    logger.info(f"Revisados {report.fields_checked} campos en busca de caracteres prohibidos")
    if report.details:
        logger.warning(
            "Se encontraron caracteres invalidos en los nombres de campo: " + "; ".join(report.details)
        )
    return report


def ensure_resolved(table: BannedCharacterTable) -> None:
    """
    Raises:
        UnresolvedBannedCharactersError: si alguna entrada de la tabla no tiene reemplazo
    """
    unresolved = table.unresolved()
    if unresolved:
        raise UnresolvedBannedCharactersError([e.character for e in unresolved])


def apply_sanitization(fields: Sequence[UnifiedField], table: BannedCharacterTable) -> None:
    """Reescribe target_name de cada campo con su forma sanitizada."""
    for unified_field in fields:
        unified_field.target_name = sanitize(unified_field.target_name, table)
