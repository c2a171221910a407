"""
Orquestador del sync de metadata Sectigo <-> Keyfactor.

Diseño (resumen):
- Valida el modo (KFtoSC / SCtoKF) y la configuracion
- Autentica ambos clientes y obtiene los esquemas iniciales
- Unifica campos (Custom + Manual), busca caracteres prohibidos y persiste la tabla
- Aborta si queda algun caracter sin reemplazo (antes de escribir nada)
- Publica el esquema en Keyfactor
- Pagina los certificados de Keyfactor, empareja cada uno con Sectigo por serial
  y escribe los valores en el sistema opuesto
- Pliega los resultados en un RunSummary

Politica de errores:
- FatalSyncError sube hasta main() y termina el proceso.
- Errores por campo o por certificado se registran en el SyncOutcome y la
  corrida sigue con el siguiente campo / certificado.
"""
from __future__ import annotations

import uuid
from datetime import datetime
from typing import Dict, List, Optional, Tuple

from loguru import logger

from metadata_sync.application.services.banned_characters import (
    apply_sanitization,
    ensure_resolved,
    scan_fields,
)
from metadata_sync.application.services.certificate_matcher import CertificateIndex
from metadata_sync.application.services.field_accessors import (
    FieldAccessorRegistry,
    FieldPathError,
    Getter,
)
from metadata_sync.application.services.schema_unifier import build_unified_fields, push_schema
from metadata_sync.application.services.value_transcoder import ValueTranscoder
from metadata_sync.core.config import Settings
from metadata_sync.domain.entities.fields import FieldsFile, UnifiedField
from metadata_sync.domain.entities.outcomes import OutcomeStatus, RunSummary, SchemaPushResult, SyncOutcome
from metadata_sync.infrastructure.external.keyfactor.client import KeyfactorClient
from metadata_sync.infrastructure.external.keyfactor.models import KeyfactorCertificate
from metadata_sync.infrastructure.external.sectigo.client import SectigoClient
from metadata_sync.infrastructure.external.sectigo.models import (
    CustomFieldValue,
    SectigoCertificate,
    SectigoCertificateDetails,
)
from metadata_sync.infrastructure.repositories.banned_character_repository import BannedCharacterRepository
from metadata_sync.infrastructure.repositories.field_declaration_repository import load_field_declarations
from metadata_sync.shared.constants.sync_constants import SyncDirection
from metadata_sync.shared.exceptions.sync import FatalSyncError, SnapshotRetrievalError

_BANNER = "=" * 60


def _display_serial(serial: str) -> str:
    return (serial or "").strip().lstrip("0")


class MetadataSyncUseCases:
    """
    Una corrida completa del sync (one-shot batch).

    Uso:
        use_cases = MetadataSyncUseCases(settings=settings, sectigo=sc, keyfactor=kf,
                                         banned_characters=BannedCharacterRepository(path))
        summary = use_cases.run("SCtoKF")
    """

    def __init__(
        self,
        *,
        settings: Settings,
        sectigo: SectigoClient,
        keyfactor: KeyfactorClient,
        banned_characters: BannedCharacterRepository,
        declarations: Optional[FieldsFile] = None,
    ) -> None:
        self._settings = settings
        self._sectigo = sectigo
        self._keyfactor = keyfactor
        self._banned_characters = banned_characters
        self._declarations = declarations
        self._transcoder = ValueTranscoder(settings.KEYFACTOR_DATE_FORMAT)
        self._accessors = FieldAccessorRegistry(SectigoCertificateDetails)

    def run(self, direction: str | SyncDirection) -> RunSummary:
        run_id = uuid.uuid4()
        logger.info(_BANNER)
        logger.info(f"[START] Metadata Sync - {datetime.now():%Y-%m-%d %H:%M:%S} [RUN ID: {run_id}]")
        logger.info(_BANNER)

        mode = direction if isinstance(direction, SyncDirection) else SyncDirection.parse(direction)
        logger.info(f"Modo de sync: {mode.value}")

        self._settings.validate_required()
        declarations = self._declarations
        if declarations is None:
            declarations = load_field_declarations(self._settings.fields_file)
        table = self._banned_characters.load()

        sectigo_fields, keyfactor_fields = self._connect()

        # Unificacion de esquemas
        fields = build_unified_fields(
            declarations,
            import_all_custom_fields=self._settings.IMPORT_ALL_CUSTOM_FIELDS,
            sectigo_custom_fields=sectigo_fields,
            include_disabled=self._settings.ENABLE_DISABLED_FIELD_SYNC,
        )

        # Descubrimiento de caracteres prohibidos: la tabla se persiste siempre,
        # aunque haya entradas sin resolver, para que el operador las complete.
        scan_fields(fields, table, max_workers=self._settings.SANITIZER_WORKERS)
        self._banned_characters.save(table)
        ensure_resolved(table)
        apply_sanitization(fields, table)

        summary = RunSummary()
        summary.schema_push = self._push_schema(fields, keyfactor_fields)

        manual_getters = self._compile_manual_fields(fields)
        index = self._load_sectigo_index()
        summary.duplicate_serials = index.duplicates

        try:
            self._reconcile_pages(mode, fields, manual_getters, index, summary)
        except FatalSyncError:
            summary.emit()
            raise

        summary.emit()
        logger.info(_BANNER)
        logger.info(f"[END] Metadata Sync - {datetime.now():%Y-%m-%d %H:%M:%S} [RUN ID: {run_id}]")
        logger.info(_BANNER)
        return summary

    # ------------------------------------------------------------------
    # Conexion y snapshots iniciales
    # ------------------------------------------------------------------

    def _connect(self):
        s = self._settings
        self._sectigo.authenticate(s.SECTIGO_LOGIN, s.SECTIGO_PASSWORD, s.SECTIGO_CUSTOMER_URI)
        try:
            sectigo_fields = self._sectigo.list_custom_fields()
        except Exception as e:
            raise SnapshotRetrievalError("Sectigo", str(e)) from e
        logger.debug(f"Obtenidos {len(sectigo_fields)} custom fields de Sectigo")

        self._keyfactor.authenticate(s.KEYFACTOR_LOGIN, s.KEYFACTOR_PASSWORD)
        try:
            keyfactor_fields = self._keyfactor.list_metadata_fields()
        except Exception as e:
            raise SnapshotRetrievalError("Keyfactor", str(e)) from e
        logger.debug(f"Obtenidos {len(keyfactor_fields)} metadata fields de Keyfactor")

        logger.info("Conexion con Sectigo y Keyfactor verificada")
        return sectigo_fields, keyfactor_fields

    def _load_sectigo_index(self) -> CertificateIndex[SectigoCertificate]:
        s = self._settings
        try:
            certificates = self._sectigo.list_certificates(
                s.SSL_TYPE_IDS,
                include_revoked_and_expired=s.SYNC_REVOKED_AND_EXPIRED_CERTS,
                page_size=s.SECTIGO_PAGE_SIZE,
            )
        except Exception as e:
            raise SnapshotRetrievalError("Sectigo", str(e)) from e

        logger.info(f"Obtenidos {len(certificates)} certificados de Sectigo")
        return CertificateIndex(certificates, key=lambda c: c.serial_number)

    def _push_schema(self, fields: List[UnifiedField], existing) -> SchemaPushResult:
        if not fields:
            logger.warning("No hay campos para publicar en Keyfactor")
            return SchemaPushResult()
        return push_schema(fields, existing, self._keyfactor.upsert_metadata_field)

    def _compile_manual_fields(
        self, fields: List[UnifiedField]
    ) -> List[Tuple[UnifiedField, Optional[Getter], Optional[str]]]:
        compiled = []
        for unified_field in fields:
            if not unified_field.is_manual:
                continue
            try:
                compiled.append((unified_field, self._accessors.compile(unified_field.source_name), None))
            except FieldPathError as e:
                logger.warning(f"ManualField '{unified_field.target_name}' con path invalido: {e}")
                compiled.append((unified_field, None, str(e)))
        return compiled

    # ------------------------------------------------------------------
    # Paginacion y reconciliacion
    # ------------------------------------------------------------------

    def _reconcile_pages(self, mode, fields, manual_getters, index, summary: RunSummary) -> None:
        s = self._settings
        page_size = s.KEYFACTOR_PAGE_SIZE
        page_number = 1
        logger.info("Iniciando lectura paginada de certificados de Keyfactor")

        while True:
            try:
                page = self._keyfactor.list_certificates_by_issuer(
                    s.ISSUER_DN_LOOKUP_TERM,
                    include_revoked_and_expired=s.SYNC_REVOKED_AND_EXPIRED_CERTS,
                    page=page_number,
                    page_size=page_size,
                )
            except Exception as e:
                raise SnapshotRetrievalError("Keyfactor", f"pagina {page_number}: {e}") from e

            logger.debug(f"[PAGE INFO] {len(page)} certificados en la pagina {page_number}")
            for certificate in page:
                summary.add(self._reconcile_certificate(mode, certificate, fields, manual_getters, index))

            summary.pages_processed += 1
            logger.info(f"[PAGE PROCESSING] Pagina {page_number} procesada")

            # Una pagina incompleta es la ultima, aunque no este vacia
            if len(page) < page_size:
                break
            page_number += 1

    def _reconcile_certificate(
        self,
        mode: SyncDirection,
        certificate: KeyfactorCertificate,
        fields: List[UnifiedField],
        manual_getters,
        index: CertificateIndex[SectigoCertificate],
    ) -> SyncOutcome:
        serial = _display_serial(certificate.serial_number)
        match = index.find(certificate.serial_number)
        if match is None:
            logger.debug(f"Sin certificado en Sectigo para el serial {serial}")
            return SyncOutcome(serial_number=serial, status=OutcomeStatus.UNMATCHED)

        try:
            details = self._sectigo.get_certificate_details(match.ssl_id)
        except Exception as e:
            logger.warning(f"[PAGE ERROR] No se pudo obtener el detalle del certificado {serial}: {e}")
            return SyncOutcome(serial_number=serial, status=OutcomeStatus.PARTIAL, errors=[str(e)])

        if mode == SyncDirection.SC_TO_KF:
            return self._sync_to_keyfactor(serial, certificate, details, fields, manual_getters)
        return self._sync_to_sectigo(serial, certificate, details.ssl_id or match.ssl_id, fields)

    def _sync_to_keyfactor(
        self,
        serial: str,
        certificate: KeyfactorCertificate,
        details: SectigoCertificateDetails,
        fields: List[UnifiedField],
        manual_getters,
    ) -> SyncOutcome:
        """Sectigo -> Keyfactor: campos Manual (property path) y Custom."""
        payload: Dict[str, str] = {}
        errors: List[str] = []

        for unified_field, getter, compile_error in manual_getters:
            if getter is None:
                errors.append(f"{unified_field.target_name}: {compile_error}")
                continue
            try:
                result = self._transcoder.to_keyfactor(unified_field, getter(details))
            except Exception as e:
                result = None
                errors.append(f"{unified_field.target_name}: {e}")
                logger.warning(
                    f"[PAGE ERROR] Error procesando el campo manual '{unified_field.target_name}' "
                    f"del certificado {serial}: {e}"
                )
            if result is not None and result.ok:
                payload[unified_field.target_name] = result.value

        for unified_field in fields:
            if not unified_field.is_custom:
                continue
            raw = details.custom_field_value(unified_field.source_name)
            if raw is None:
                continue
            result = self._transcoder.to_keyfactor(unified_field, raw)
            if result.ok:
                payload[unified_field.target_name] = result.value
            else:
                errors.append(result.error)

        return self._commit(
            serial,
            payload,
            errors,
            lambda: self._keyfactor.update_certificate_metadata(certificate.id, payload),
        )

    def _sync_to_sectigo(
        self,
        serial: str,
        certificate: KeyfactorCertificate,
        ssl_id: int,
        fields: List[UnifiedField],
    ) -> SyncOutcome:
        """Keyfactor -> Sectigo: solo campos Custom; los Manual son de una sola via."""
        values: List[CustomFieldValue] = []
        errors: List[str] = []

        for unified_field in fields:
            if not unified_field.is_custom:
                continue
            raw = certificate.metadata_value(unified_field.target_name)
            if raw is None:
                continue
            result = self._transcoder.to_sectigo(unified_field, raw)
            if result.ok:
                values.append(CustomFieldValue(name=unified_field.source_name, value=result.value))
            else:
                errors.append(result.error)

        return self._commit(
            serial,
            values,
            errors,
            lambda: self._sectigo.update_certificate_metadata(ssl_id, values),
        )

    def _commit(self, serial: str, payload, errors: List[str], write) -> SyncOutcome:
        if not payload:
            status = OutcomeStatus.PARTIAL if errors else OutcomeStatus.SCHEMA_ABSENT
            return SyncOutcome(serial_number=serial, status=status, errors=errors)

        try:
            write()
        except Exception as e:
            logger.warning(f"[PAGE ERROR] Error actualizando la metadata del certificado {serial}: {e}")
            errors.append(str(e))
            return SyncOutcome(serial_number=serial, status=OutcomeStatus.PARTIAL, errors=errors)

        status = OutcomeStatus.PARTIAL if errors else OutcomeStatus.PROCESSED
        return SyncOutcome(serial_number=serial, status=status, errors=errors, fields_written=len(payload))
