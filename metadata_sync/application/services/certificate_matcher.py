"""
Emparejamiento de certificados entre sistemas por numero de serie.

La clave de identidad es el serial sin ceros a la izquierda y sin
distinguir mayusculas: "00A1B2" y "a1b2" son el mismo certificado.
"""
from __future__ import annotations

from typing import Callable, Dict, Generic, Iterable, List, Optional, TypeVar

from loguru import logger

T = TypeVar("T")


def normalize_serial(serial: str | None) -> str:
    """Quita ceros a la izquierda y pasa a minusculas."""
    return (serial or "").strip().lstrip("0").lower()


def match(serial: str, candidates: Iterable[T], key: Callable[[T], str]) -> Optional[T]:
    """Primer candidato (en orden de iteracion) cuyo serial normalizado coincide."""
    wanted = normalize_serial(serial)
    for candidate in candidates:
        if normalize_serial(key(candidate)) == wanted:
            return candidate
    return None


class CertificateIndex(Generic[T]):
    """
    Indice de candidatos por serial normalizado, construido una vez por corrida.

    Ante seriales duplicados gana el primero en orden de iteracion (igual que
    match()) y el serial queda listado en `duplicates` para el resumen.
    """

    def __init__(self, candidates: Iterable[T], key: Callable[[T], str]) -> None:
        self._by_serial: Dict[str, T] = {}
        self._duplicates: List[str] = []
        for candidate in candidates:
            normalized = normalize_serial(key(candidate))
            if not normalized:
                continue
            if normalized in self._by_serial:
                if normalized not in self._duplicates:
                    self._duplicates.append(normalized)
                    logger.warning(f"Serial duplicado entre los candidatos: {normalized}; se usa el primero")
                continue
            self._by_serial[normalized] = candidate

    def __len__(self) -> int:
        return len(self._by_serial)

    @property
    def duplicates(self) -> List[str]:
        return list(self._duplicates)

    def find(self, serial: str | None) -> Optional[T]:
        normalized = normalize_serial(serial)
        if not normalized:
            return None
        return self._by_serial.get(normalized)
