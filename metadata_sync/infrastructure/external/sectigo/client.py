"""
Cliente de la API REST de Sectigo Certificate Manager.

Autenticacion por headers (login, password, customerUri). Paginacion de
certificados por position/size: una pagina mas corta que el tamaño pedido
indica el final.
"""

from __future__ import annotations

from typing import Iterable, List, Optional

from loguru import logger
from pydantic import TypeAdapter

from metadata_sync.infrastructure.external.http_client import ExternalApiError, JsonApiClient
from metadata_sync.infrastructure.external.sectigo.models import (
    CustomFieldValue,
    SectigoCertificate,
    SectigoCertificateDetails,
    SectigoCustomField,
)

_CUSTOM_FIELDS = TypeAdapter(List[SectigoCustomField])
_CERTIFICATES = TypeAdapter(List[SectigoCertificate])


class SectigoApiError(ExternalApiError):
    """Error de integración con Sectigo."""


class SectigoClient(JsonApiClient):
    error_class = SectigoApiError
    system_name = "Sectigo"

    def authenticate(self, login: str, password: str, customer_uri: str) -> None:
        """Configura los headers de autenticacion. Debe llamarse una vez antes de cualquier request."""
        self._session.headers.update(
            {
                "login": login,
                "password": password,
                "customerUri": customer_uri,
                "Accept": "application/json",
            }
        )
        self._authenticated = True
        logger.info("Headers de autenticacion de Sectigo configurados")

    def list_custom_fields(self) -> List[SectigoCustomField]:
        logger.debug("Obteniendo custom fields de Sectigo")
        payload = self._request_json("GET", "api/customField/v2")
        return self._parse(_CUSTOM_FIELDS, payload or [], "custom fields")

    def list_certificates(
        self,
        ssl_type_ids: Iterable[int],
        *,
        include_revoked_and_expired: bool = False,
        page_size: int = 25,
    ) -> List[SectigoCertificate]:
        """
        Lista todos los certificados de los perfiles (sslTypeId) indicados.

        Sin include_revoked_and_expired solo se traen certificados en estado Issued.
        """
        profile_ids = list(ssl_type_ids)
        if not profile_ids:
            raise ValueError("ssl_type_ids no puede estar vacio")
        if page_size <= 0:
            raise ValueError("page_size debe ser mayor que cero")

        status = None if include_revoked_and_expired else "Issued"
        combined: List[SectigoCertificate] = []
        for profile_id in profile_ids:
            combined.extend(self._list_certificates_for_profile(profile_id, status, page_size))
        return combined

    def _list_certificates_for_profile(
        self, profile_id: int, status: Optional[str], page_size: int
    ) -> List[SectigoCertificate]:
        position = 0
        certificates: List[SectigoCertificate] = []

        while True:
            params: dict[str, object] = {"sslTypeId": profile_id, "position": position, "size": page_size}
            if status:
                params["status"] = status

            logger.trace(
                f"Sectigo: perfil {profile_id}, estado '{status or 'todos'}', position={position}, size={page_size}"
            )
            payload = self._request_json("GET", "api/ssl/v1", params=params)
            page = self._parse(_CERTIFICATES, payload or [], "certificados")
            certificates.extend(page)

            if len(page) < page_size:
                break
            position += page_size

        logger.debug(f"Sectigo: {len(certificates)} certificados para el perfil {profile_id}")
        return certificates

    def get_certificate_details(self, ssl_id: int) -> SectigoCertificateDetails:
        if ssl_id <= 0:
            raise ValueError("ssl_id debe ser mayor que cero")
        payload = self._request_json("GET", f"api/ssl/v1/{ssl_id}")
        if not payload:
            raise SectigoApiError(f"Certificado {ssl_id} no encontrado en Sectigo")
        return self._parse(SectigoCertificateDetails, payload, f"certificado {ssl_id}")

    def update_certificate_metadata(
        self,
        ssl_id: int,
        custom_fields: List[CustomFieldValue],
        comments: Optional[str] = None,
    ) -> None:
        """Actualiza los custom fields de un certificado (PUT api/ssl/v1)."""
        if ssl_id <= 0:
            raise ValueError("ssl_id debe ser mayor que cero")

        body: dict[str, object] = {
            "sslId": ssl_id,
            "customFields": [cf.model_dump(by_alias=True) for cf in custom_fields],
        }
        if comments is not None:
            body["comments"] = comments

        logger.trace(f"Sectigo: payload de actualizacion {body}")
        self._request_json("PUT", "api/ssl/v1", json_body=body)

