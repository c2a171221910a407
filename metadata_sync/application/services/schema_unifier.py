"""
Unificacion de esquemas Sectigo / Keyfactor.

Construye la lista canonica de campos en dos pasadas:
1. Custom fields: importados de Sectigo (IMPORT_ALL_CUSTOM_FIELDS) o
   declarados por el operador en fields.json.
2. Manual fields de fields.json, siempre incluidos.

No deduplica: la deduplicacion contra el esquema existente de Keyfactor
ocurre al publicar (push_schema).
"""
from __future__ import annotations

from typing import Callable, Iterable, List, Optional, Sequence

from loguru import logger

from metadata_sync.domain.entities.fields import FieldsFile, UnifiedField
from metadata_sync.domain.entities.outcomes import SchemaPushResult
from metadata_sync.infrastructure.external.keyfactor.models import KeyfactorMetadataField
from metadata_sync.infrastructure.external.sectigo.models import SectigoCustomField
from metadata_sync.shared.constants.sync_constants import (
    CustomFieldInputType,
    FieldOrigin,
    MetadataDataType,
)

INPUT_TYPE_TO_DATA_TYPE = {
    CustomFieldInputType.TEXT_SINGLE_LINE: MetadataDataType.STRING,
    CustomFieldInputType.TEXT_MULTI_LINE: MetadataDataType.BIG_TEXT,
    CustomFieldInputType.EMAIL: MetadataDataType.EMAIL,
    CustomFieldInputType.NUMBER: MetadataDataType.INTEGER,
    CustomFieldInputType.TEXT_OPTION: MetadataDataType.MULTIPLE_CHOICE,
    CustomFieldInputType.DATE: MetadataDataType.DATE,
}

SINGLE_LINE_VALIDATION = ".*"
SINGLE_LINE_MESSAGE = "Please enter valid data."
ENROLLMENT_MANDATORY = "ENROLLMENT"


def to_target_data_type(input_type: CustomFieldInputType) -> MetadataDataType:
    return INPUT_TYPE_TO_DATA_TYPE.get(input_type, MetadataDataType.STRING)


def unified_from_custom_field(custom_field: SectigoCustomField) -> UnifiedField:
    """Convierte un custom field de Sectigo en un campo canonico (origen Custom)."""
    input_type = custom_field.input.type
    single_line = input_type == CustomFieldInputType.TEXT_SINGLE_LINE
    options = None
    if input_type == CustomFieldInputType.TEXT_OPTION and custom_field.input.options:
        options = list(custom_field.input.options)

    return UnifiedField(
        source_name=custom_field.name,
        target_name=custom_field.name,
        description=custom_field.name,
        data_type=to_target_data_type(input_type),
        origin=FieldOrigin.CUSTOM,
        hint=input_type.value,
        validation=SINGLE_LINE_VALIDATION if single_line else None,
        enrollment=1 if ENROLLMENT_MANDATORY in custom_field.mandatories else 0,
        message=SINGLE_LINE_MESSAGE if single_line else None,
        options=options,
        default_value=None,
        display_order=0,
        case_sensitive=False,
    )


def import_custom_fields(
    custom_fields: Iterable[SectigoCustomField],
    *,
    include_disabled: bool = False,
) -> List[UnifiedField]:
    """Pasada 1 (auto-import): un campo canonico por custom field de Sectigo."""
    unified: List[UnifiedField] = []
    skipped = 0
    for custom_field in custom_fields:
        if custom_field.is_disabled and not include_disabled:
            skipped += 1
            continue
        unified.append(unified_from_custom_field(custom_field))

    logger.info(f"Importados {len(unified)} custom fields desde Sectigo ({skipped} deshabilitados omitidos)")
    return unified


def build_unified_fields(
    declarations: FieldsFile,
    *,
    import_all_custom_fields: bool,
    sectigo_custom_fields: Optional[Sequence[SectigoCustomField]] = None,
    include_disabled: bool = False,
) -> List[UnifiedField]:
    """
    Lista canonica de campos: Custom (auto-import o fields.json) + Manual.
    """
    if import_all_custom_fields:
        logger.info("IMPORT_ALL_CUSTOM_FIELDS habilitado: se importan los custom fields de Sectigo")
        custom = import_custom_fields(sectigo_custom_fields or [], include_disabled=include_disabled)
    else:
        logger.info("IMPORT_ALL_CUSTOM_FIELDS deshabilitado: se usan los CustomFields de fields.json")
        custom = [d.to_unified(FieldOrigin.CUSTOM) for d in declarations.custom_fields]

    manual = [d.to_unified(FieldOrigin.MANUAL) for d in declarations.manual_fields]
    logger.debug(f"Cargados {len(custom)} campos Custom y {len(manual)} campos Manual")
    return custom + manual


def to_keyfactor_field(unified_field: UnifiedField, existing_id: int = 0) -> KeyfactorMetadataField:
    return KeyfactorMetadataField(
        id=existing_id,
        name=unified_field.target_name,
        description=unified_field.description,
        data_type=int(unified_field.data_type),
        hint=unified_field.hint,
        validation=unified_field.validation,
        enrollment=unified_field.enrollment,
        message=unified_field.message,
        options=",".join(unified_field.options) if unified_field.options else None,
        default_value=unified_field.default_value,
        display_order=unified_field.display_order,
        case_sensitive=unified_field.case_sensitive,
    )


def push_schema(
    fields: Sequence[UnifiedField],
    existing: Sequence[KeyfactorMetadataField],
    upsert: Callable[[KeyfactorMetadataField], int],
) -> SchemaPushResult:
    """
    Publica los campos canonicos en Keyfactor.

    - Si ya existe un campo con el mismo nombre (sin distinguir mayusculas) se
      actualiza conservando su Id; si no, se crea.
    - El Id resultante queda registrado en UnifiedField.target_id.
    - Un error en un campo se registra y no detiene el resto.
    """
    result = SchemaPushResult()
    existing_by_name = {}
    for metadata_field in existing:
        existing_by_name.setdefault(metadata_field.name.lower(), metadata_field)

    for unified_field in fields:
        current = existing_by_name.get(unified_field.target_name.lower())
        payload = to_keyfactor_field(unified_field, current.id if current else 0)
        try:
            assigned_id = upsert(payload)
        except Exception as e:
            logger.error(f"Error publicando el metadata field '{unified_field.target_name}': {e}")
            result.failed += 1
            result.failed_fields.append(unified_field.target_name)
            continue

        unified_field.target_id = assigned_id or (current.id if current else None)
        if current is not None:
            result.updated += 1
        else:
            result.created += 1
            # Un segundo campo con el mismo nombre actualiza en vez de duplicar
            existing_by_name[unified_field.target_name.lower()] = payload.model_copy(
                update={"id": unified_field.target_id or 0}
            )
        logger.trace(f"Campo '{unified_field.target_name}' publicado con Id {unified_field.target_id}")

    logger.info(
        f"Metadata fields procesados: {result.created} creados, {result.updated} actualizados, "
        f"{result.failed} con error"
    )
    return result
