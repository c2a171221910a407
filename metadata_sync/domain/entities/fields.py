"""
Campo unificado: descriptor canonico de un campo de metadata, independiente
de Sectigo y de Keyfactor.

Se construye una vez por corrida (desde fields.json o desde los custom fields
de Sectigo) y solo se muta para registrar el nombre sanitizado y el id que
asigna Keyfactor al publicar el esquema.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from metadata_sync.shared.constants.sync_constants import FieldOrigin, MetadataDataType


def parse_data_type(value: Any) -> MetadataDataType:
    """
    Acepta el nombre del tipo ("Date", "MultipleChoice", "big_text") o su codigo numerico.
    Un valor vacio se interpreta como String.
    """
    if value is None or value == "":
        return MetadataDataType.STRING
    if isinstance(value, MetadataDataType):
        return value
    if isinstance(value, int) or (isinstance(value, str) and value.strip().isdigit()):
        return MetadataDataType(int(value))

    normalized = str(value).strip().replace("_", "").replace(" ", "").lower()
    for member in MetadataDataType:
        if member.name.replace("_", "").lower() == normalized:
            return member
    raise ValueError(f"Tipo de dato desconocido: {value}")


@dataclass
class UnifiedField:
    """
    Campo canonico.

    - source_name: nombre en Sectigo (custom field) o property path (Manual)
    - target_name: nombre del metadata field en Keyfactor
    - target_id: id asignado por Keyfactor tras publicar el esquema (None si aun no existe)
    """

    source_name: str
    target_name: str
    description: str
    data_type: MetadataDataType = MetadataDataType.STRING
    origin: FieldOrigin = FieldOrigin.CUSTOM
    hint: Optional[str] = None
    validation: Optional[str] = None
    enrollment: int = 0
    message: Optional[str] = None
    options: Optional[List[str]] = None
    default_value: Optional[str] = None
    display_order: int = 0
    case_sensitive: bool = False
    target_id: Optional[int] = None
    original_target_name: str = field(default="", repr=False)

    def __post_init__(self) -> None:
        if not self.original_target_name:
            self.original_target_name = self.target_name

    @property
    def is_manual(self) -> bool:
        return self.origin == FieldOrigin.MANUAL

    @property
    def is_custom(self) -> bool:
        return self.origin == FieldOrigin.CUSTOM


class FieldDeclaration(BaseModel):
    """Campo declarado por el operador en fields.json (claves camelCase)."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    sectigo_field_name: str = Field(..., alias="sectigoFieldName", min_length=1)
    keyfactor_metadata_field_name: str = Field(..., alias="keyfactorMetadataFieldName", min_length=1)
    keyfactor_description: str = Field(default="", alias="keyfactorDescription")
    keyfactor_data_type: MetadataDataType = Field(default=MetadataDataType.STRING, alias="keyfactorDataType")
    keyfactor_hint: Optional[str] = Field(default=None, alias="keyfactorHint")
    keyfactor_validation: Optional[str] = Field(default=None, alias="keyfactorValidation")
    keyfactor_enrollment: int = Field(default=0, alias="keyfactorEnrollment")
    keyfactor_message: Optional[str] = Field(default=None, alias="keyfactorMessage")
    keyfactor_options: Optional[List[str]] = Field(default=None, alias="keyfactorOptions")
    keyfactor_default_value: Optional[str] = Field(default=None, alias="keyfactorDefaultValue")
    keyfactor_display_order: int = Field(default=0, alias="keyfactorDisplayOrder")
    keyfactor_case_sensitive: bool = Field(default=False, alias="keyfactorCaseSensitive")

    @field_validator("keyfactor_data_type", mode="before")
    @classmethod
    def _coerce_data_type(cls, value: Any) -> MetadataDataType:
        return parse_data_type(value)

    @field_validator("keyfactor_options", mode="before")
    @classmethod
    def _split_options(cls, value: Any) -> Any:
        # Se aceptan tanto lista JSON como string separado por comas
        if isinstance(value, str):
            return [opt.strip() for opt in value.split(",") if opt.strip()]
        return value

    def to_unified(self, origin: FieldOrigin) -> UnifiedField:
        return UnifiedField(
            source_name=self.sectigo_field_name,
            target_name=self.keyfactor_metadata_field_name,
            description=self.keyfactor_description or self.keyfactor_metadata_field_name,
            data_type=self.keyfactor_data_type,
            origin=origin,
            hint=self.keyfactor_hint or None,
            validation=self.keyfactor_validation or None,
            enrollment=self.keyfactor_enrollment,
            message=self.keyfactor_message or None,
            options=list(self.keyfactor_options) if self.keyfactor_options else None,
            default_value=self.keyfactor_default_value or None,
            display_order=self.keyfactor_display_order,
            case_sensitive=self.keyfactor_case_sensitive,
        )


class FieldsFile(BaseModel):
    """Contenido de fields.json."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    manual_fields: List[FieldDeclaration] = Field(default_factory=list, alias="ManualFields")
    custom_fields: List[FieldDeclaration] = Field(default_factory=list, alias="CustomFields")
