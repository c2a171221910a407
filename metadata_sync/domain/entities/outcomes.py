"""
Resultados del sync: por campo, por certificado y de la corrida completa.

Los errores recuperables viajan como valores (FieldResult, SyncOutcome)
y se pliegan en el RunSummary; nunca se lanzan hacia arriba.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from loguru import logger


@dataclass(frozen=True)
class FieldResult:
    """Valor listo para escribir, o el motivo por el que no se escribe."""

    value: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: str) -> "FieldResult":
        return cls(value=value)

    @classmethod
    def failure(cls, error: str) -> "FieldResult":
        return cls(error=error)


class OutcomeStatus(str, Enum):
    """Estado final de un certificado."""
    UNMATCHED = "unmatched"
    PROCESSED = "processed"
    PARTIAL = "partial"
    SCHEMA_ABSENT = "schema_absent"  # no habia valores para escribir


@dataclass
class SyncOutcome:
    """Resultado de procesar un certificado."""

    serial_number: str
    status: OutcomeStatus
    errors: List[str] = field(default_factory=list)
    fields_written: int = 0

    @property
    def matched(self) -> bool:
        return self.status != OutcomeStatus.UNMATCHED


@dataclass
class SchemaPushResult:
    """Conteos de la publicacion del esquema en Keyfactor."""

    created: int = 0
    updated: int = 0
    failed: int = 0
    failed_fields: List[str] = field(default_factory=list)


@dataclass
class RunSummary:
    """
    Resumen de la corrida. Se construye plegando SyncOutcome en orden
    de procesamiento.
    """

    unmatched: List[str] = field(default_factory=list)
    partially_processed: List[str] = field(default_factory=list)
    processed: List[str] = field(default_factory=list)
    schema_absent: List[str] = field(default_factory=list)
    duplicate_serials: List[str] = field(default_factory=list)
    field_errors: Dict[str, List[str]] = field(default_factory=dict)
    pages_processed: int = 0
    schema_push: Optional[SchemaPushResult] = None

    def add(self, outcome: SyncOutcome) -> None:
        buckets = {
            OutcomeStatus.UNMATCHED: self.unmatched,
            OutcomeStatus.PROCESSED: self.processed,
            OutcomeStatus.PARTIAL: self.partially_processed,
            OutcomeStatus.SCHEMA_ABSENT: self.schema_absent,
        }
        buckets[outcome.status].append(outcome.serial_number)
        if outcome.errors:
            self.field_errors.setdefault(outcome.serial_number, []).extend(outcome.errors)

    @property
    def total_records(self) -> int:
        return (
            len(self.unmatched)
            + len(self.partially_processed)
            + len(self.processed)
            + len(self.schema_absent)
        )

    def counts(self) -> Dict[str, int]:
        return {
            "total": self.total_records,
            "processed": len(self.processed),
            "partially_processed": len(self.partially_processed),
            "unmatched": len(self.unmatched),
            "schema_absent": len(self.schema_absent),
            "duplicate_serials": len(self.duplicate_serials),
        }

    def emit(self) -> None:
        """Escribe el resumen en el log. Nunca falla."""
        counts = self.counts()
        logger.info(
            f"[SUMMARY] Certificados procesados correctamente: {counts['processed']}. "
            f"Sin valores para escribir: {counts['schema_absent']}. "
            f"Total revisados: {counts['total']} en {self.pages_processed} paginas."
        )
        if self.schema_push is not None:
            logger.info(
                f"[SUMMARY] Esquema: {self.schema_push.created} creados, "
                f"{self.schema_push.updated} actualizados, {self.schema_push.failed} con error."
            )
        problems = counts["partially_processed"] + counts["unmatched"]
        if problems:
            logger.warning(f"[SUMMARY] Certificados con procesamiento parcial o sin match: {problems}")
        if self.unmatched:
            logger.warning(
                f"[SUMMARY] Sin certificado correspondiente en Sectigo: {', '.join(self.unmatched)}"
            )
        if self.partially_processed:
            logger.warning(
                f"[SUMMARY] Procesados parcialmente: {', '.join(self.partially_processed)}"
            )
        if self.duplicate_serials:
            logger.warning(
                f"[SUMMARY] Seriales duplicados en Sectigo (se uso el primero): {', '.join(self.duplicate_serials)}"
            )
        if self.schema_absent:
            logger.debug(f"[SUMMARY] Sin valores para escribir: {', '.join(self.schema_absent)}")
        if self.processed:
            logger.debug(f"[SUMMARY] Actualizados correctamente: {', '.join(self.processed)}")
