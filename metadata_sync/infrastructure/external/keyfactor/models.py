"""
Modelos de la API REST de Keyfactor Command (claves PascalCase).
"""
from __future__ import annotations

from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class KeyfactorModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data):
        # Keyfactor devuelve null en campos string opcionales (Description, Hint...)
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data


class KeyfactorMetadataField(KeyfactorModel):
    """Definicion de un metadata field (GET/POST/PUT MetadataFields)."""

    id: int = Field(default=0, alias="Id")
    name: str = Field(default="", alias="Name")
    description: str = Field(default="", alias="Description")
    data_type: int = Field(default=1, alias="DataType")
    hint: Optional[str] = Field(default=None, alias="Hint")
    validation: Optional[str] = Field(default=None, alias="Validation")
    enrollment: int = Field(default=0, alias="Enrollment")
    message: Optional[str] = Field(default=None, alias="Message")
    options: Optional[str] = Field(default=None, alias="Options")
    default_value: Optional[str] = Field(default=None, alias="DefaultValue")
    display_order: int = Field(default=0, alias="DisplayOrder")
    case_sensitive: bool = Field(default=False, alias="CaseSensitive")

    def to_payload(self) -> dict:
        """Body JSON para POST/PUT. Sin Id cuando el campo es nuevo."""
        payload = self.model_dump(by_alias=True, exclude_none=True)
        if not self.id:
            payload.pop("Id", None)
        return payload


class KeyfactorCertificate(KeyfactorModel):
    """Certificado de Keyfactor (GET Certificates con includeMetadata=true)."""

    id: int = Field(default=0, alias="Id")
    thumbprint: str = Field(default="", alias="Thumbprint")
    serial_number: str = Field(default="", alias="SerialNumber")
    issued_dn: Optional[str] = Field(default=None, alias="IssuedDN")
    issued_cn: Optional[str] = Field(default=None, alias="IssuedCN")
    issuer_dn: Optional[str] = Field(default=None, alias="IssuerDN")
    not_before: Optional[str] = Field(default=None, alias="NotBefore")
    not_after: Optional[str] = Field(default=None, alias="NotAfter")
    cert_state_string: Optional[str] = Field(default=None, alias="CertStateString")
    metadata: Optional[Dict[str, str]] = Field(default=None, alias="Metadata")

    @field_validator("metadata", mode="before")
    @classmethod
    def _stringify_metadata(cls, value):
        # Keyfactor puede devolver valores no-string (numeros, booleanos)
        if isinstance(value, dict):
            return {str(k): "" if v is None else str(v) for k, v in value.items()}
        return value

    def metadata_value(self, name: str) -> Optional[str]:
        """Valor del metadata field con ese nombre (sin distinguir mayusculas)."""
        for key, value in (self.metadata or {}).items():
            if key.lower() == name.lower():
                return value
        return None
