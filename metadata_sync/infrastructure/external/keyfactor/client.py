"""
Cliente de la API REST de Keyfactor Command.

Autenticacion Basic + header x-keyfactor-requested-with.
"""

from __future__ import annotations

import base64
from typing import Dict, List

from loguru import logger
from pydantic import TypeAdapter

from metadata_sync.infrastructure.external.http_client import ExternalApiError, JsonApiClient
from metadata_sync.infrastructure.external.keyfactor.models import (
    KeyfactorCertificate,
    KeyfactorMetadataField,
)
from metadata_sync.shared.constants.sync_constants import KEYFACTOR_REQUESTED_WITH

_METADATA_FIELDS = TypeAdapter(List[KeyfactorMetadataField])
_CERTIFICATES = TypeAdapter(List[KeyfactorCertificate])


class KeyfactorApiError(ExternalApiError):
    """Error de integración con Keyfactor."""


def build_issuer_query(issuer_substring: str) -> str:
    """Query de Keyfactor para certificados cuyo IssuerDN contiene el texto dado."""
    return f'IssuerDN -contains "{issuer_substring}"'


class KeyfactorClient(JsonApiClient):
    error_class = KeyfactorApiError
    system_name = "Keyfactor"

    def authenticate(self, username: str, password: str, requested_with: str = KEYFACTOR_REQUESTED_WITH) -> None:
        """Configura Basic auth. Debe llamarse una vez antes de cualquier request."""
        credentials = base64.b64encode(f"{username}:{password}".encode("utf-8")).decode("ascii")
        self._session.headers.update(
            {
                "Authorization": f"Basic {credentials}",
                "x-keyfactor-requested-with": requested_with,
                "Accept": "application/json",
            }
        )
        self._authenticated = True
        logger.info("Credenciales de Keyfactor configuradas")

    def list_metadata_fields(self) -> List[KeyfactorMetadataField]:
        payload = self._request_json("GET", "MetadataFields")
        return self._parse(_METADATA_FIELDS, payload or [], "metadata fields")

    def upsert_metadata_field(self, field: KeyfactorMetadataField) -> int:
        """
        Crea (POST) o actualiza (PUT, si trae Id) un metadata field.

        Returns:
            El Id asignado por Keyfactor.
        """
        method = "PUT" if field.id else "POST"
        body = field.to_payload()
        logger.trace(f"Keyfactor: {method} MetadataFields {body}")

        payload = self._request_json(method, "MetadataFields", json_body=body)
        if not payload:
            # Algunas versiones responden 204 al actualizar
            return field.id
        return self._parse(KeyfactorMetadataField, payload, f"metadata field {field.name}").id

    def list_certificates_by_issuer(
        self,
        issuer_substring: str = "Sectigo",
        *,
        include_revoked_and_expired: bool = False,
        page: int = 1,
        page_size: int = 100,
    ) -> List[KeyfactorCertificate]:
        """Una pagina de certificados (con metadata) cuyo IssuerDN contiene issuer_substring."""
        if not issuer_substring:
            raise ValueError("issuer_substring no puede estar vacio")

        params: dict[str, object] = {
            "QueryString": build_issuer_query(issuer_substring),
            "includeMetadata": "true",
            "PageReturned": page,
            "ReturnLimit": page_size,
        }
        if include_revoked_and_expired:
            params["IncludeRevoked"] = "true"
            params["IncludeExpired"] = "true"

        payload = self._request_json("GET", "Certificates", params=params)
        return self._parse(_CERTIFICATES, payload or [], f"certificados pagina {page}")

    def update_certificate_metadata(self, certificate_id: int, metadata: Dict[str, str]) -> None:
        """Actualiza la metadata de un certificado (PUT Certificates/Metadata)."""
        if certificate_id <= 0:
            raise ValueError("certificate_id debe ser mayor que cero")
        if not metadata:
            raise ValueError("metadata no puede estar vacia")

        body = {"Id": certificate_id, "Metadata": metadata}
        logger.trace(f"Keyfactor: payload de metadata {body}")
        self._request_json("PUT", "Certificates/Metadata", json_body=body)
