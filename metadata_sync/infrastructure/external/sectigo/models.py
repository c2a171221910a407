"""
Modelos de la API REST de Sectigo Certificate Manager.

Solo se declaran los campos que el sync usa o que pueden referenciarse
desde un ManualField (property path). El resto se ignora.
"""
from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from metadata_sync.shared.constants.sync_constants import CustomFieldInputType


class SectigoModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data):
        # Un null explicito toma el valor por defecto del campo
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data


class CustomFieldInput(SectigoModel):
    type: CustomFieldInputType = CustomFieldInputType.TEXT_SINGLE_LINE
    options: Optional[List[str]] = None


class SectigoCustomField(SectigoModel):
    """Definicion de un custom field (GET api/customField/v2)."""

    id: int = 0
    name: str = ""
    mandatories: List[str] = Field(default_factory=list)
    cert_type: str = Field(default="", alias="certType")
    state: str = ""
    input: CustomFieldInput = Field(default_factory=CustomFieldInput)

    @property
    def is_disabled(self) -> bool:
        return self.state.lower() == "disabled"


class SectigoCertificate(SectigoModel):
    """Resumen de certificado (listado api/ssl/v1)."""

    ssl_id: int = Field(default=0, alias="sslId")
    common_name: str = Field(default="", alias="commonName")
    subject_alternative_names: Optional[List[str]] = Field(default=None, alias="subjectAlternativeNames")
    serial_number: str = Field(default="", alias="serialNumber")


class CustomFieldValue(SectigoModel):
    name: str = ""
    value: Optional[str] = None


class KeyTypes(SectigoModel):
    rsa: List[str] = Field(default_factory=list, alias="RSA")


class CertType(SectigoModel):
    id: int = 0
    name: str = ""
    description: str = ""
    terms: List[int] = Field(default_factory=list)
    key_types: KeyTypes = Field(default_factory=KeyTypes, alias="keyTypes")
    use_secondary_org_name: bool = Field(default=False, alias="useSecondaryOrgName")


class CertificateDetailsInfo(SectigoModel):
    issuer: str = ""
    sha1_hash: str = Field(default="", alias="sha1Hash")


class StateDetails(SectigoModel):
    state: str = ""


class SectigoCertificateDetails(SectigoModel):
    """Detalle completo de un certificado (GET api/ssl/v1/{id})."""

    common_name: str = Field(default="", alias="commonName")
    ssl_id: int = Field(default=0, alias="sslId")
    id: int = 0
    org_id: int = Field(default=0, alias="orgId")
    status: str = ""
    order_number: int = Field(default=0, alias="orderNumber")
    backend_cert_id: str = Field(default="", alias="backendCertId")
    vendor: str = ""
    cert_type: CertType = Field(default_factory=CertType, alias="certType")
    sub_type: str = Field(default="", alias="subType")
    validation_type: str = Field(default="", alias="validationType")
    term: int = 0
    owner: str = ""
    owner_id: int = Field(default=0, alias="ownerId")
    requester: str = ""
    requested_via: str = Field(default="", alias="requestedVia")
    comments: str = ""
    requested: str = ""
    expires: str = ""
    not_before: Optional[str] = Field(default=None, alias="notBefore")
    not_after: Optional[str] = Field(default=None, alias="notAfter")
    renewed: bool = False
    serial_number: str = Field(default="", alias="serialNumber")
    key_algorithm: str = Field(default="", alias="keyAlgorithm")
    key_size: int = Field(default=0, alias="keySize")
    key_type: str = Field(default="", alias="keyType")
    subject_alternative_names: Optional[List[str]] = Field(default=None, alias="subjectAlternativeNames")
    custom_fields: Optional[List[CustomFieldValue]] = Field(default=None, alias="customFields")
    certificate_details: Optional[CertificateDetailsInfo] = Field(default=None, alias="certificateDetails")
    auto_install_details: Optional[StateDetails] = Field(default=None, alias="autoInstallDetails")
    auto_renew_details: Optional[StateDetails] = Field(default=None, alias="autoRenewDetails")
    suspend_notifications: bool = Field(default=False, alias="suspendNotifications")

    def custom_field_value(self, name: str) -> Optional[str]:
        """Valor del custom field con ese nombre (sin distinguir mayusculas); None si falta o viene null."""
        for custom_field in self.custom_fields or []:
            if custom_field.name.lower() == name.lower():
                return custom_field.value
        return None
