"""
Base HTTP comun para los clientes de Sectigo y Keyfactor.

Cada cliente concreto fija `error_class` y `system_name`; la autenticacion
queda en los headers de la requests.Session compartida. Las respuestas
429/5xx y los errores de red se reintentan con espera creciente; cualquier
otro 4xx se propaga en el primer intento.
"""

from __future__ import annotations

import time
from typing import Any, Optional

import requests
from loguru import logger
from pydantic import TypeAdapter, ValidationError


class ExternalApiError(RuntimeError):
    """Fallo al hablar con Sectigo o Keyfactor."""


def _is_retryable(status_code: int) -> bool:
    return status_code == 429 or 500 <= status_code < 600


class JsonApiClient:
    """
    Cliente JSON sincrono con reintentos. Las subclases definen `error_class` y `system_name`.
    """

    error_class: type[ExternalApiError] = ExternalApiError
    system_name: str = "API"

    def __init__(
        self,
        base_url: str,
        *,
        session: Optional[requests.Session] = None,
        timeout_s: int = 30,
        max_retries: int = 4,
        min_backoff_s: float = 0.8,
        max_backoff_s: float = 20.0,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout_s = timeout_s
        self.max_retries = max_retries
        self.backoff_bounds = (min_backoff_s, max_backoff_s)
        self._session = session if session is not None else requests.Session()
        self._authenticated = False

    def _url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def _require_auth(self) -> None:
        if not self._authenticated:
            raise self.error_class(f"{self.system_name}: authenticate() debe llamarse antes de usar el cliente")

    def _request_json(
        self,
        method: str,
        path: str,
        *,
        params: Any = None,
        json_body: Any = None,
    ) -> Any:
        """
        Ejecuta la request y devuelve el JSON decodificado (None si el body viene vacio).

        Raises:
            error_class: 4xx no recuperable, reintentos agotados o JSON invalido
        """
        self._require_auth()
        url = self._url(path)
        attempt = 0

        while True:
            try:
                response = self._session.request(
                    method=method,
                    url=url,
                    params=params,
                    json=json_body,
                    timeout=self.timeout_s,
                )
            except requests.RequestException as e:
                if attempt >= self.max_retries:
                    raise self.error_class(
                        f"{self.system_name} sin respuesta en {method} {url} tras {attempt} reintentos: {e}"
                    ) from e
                self._wait(attempt, None)
                attempt += 1
                continue

            status = response.status_code
            if status < 300:
                return self._decode(response, method, url)

            if not _is_retryable(status):
                raise self.error_class(
                    f"{self.system_name} rechazo {method} {url} con {status}: {response.text}"
                )

            if attempt >= self.max_retries:
                raise self.error_class(
                    f"{self.system_name} respondio {status} en {method} {url} tras {attempt} reintentos: "
                    f"{response.text}"
                )
            self._wait(attempt, response.headers.get("Retry-After"))
            attempt += 1

    def _decode(self, response: requests.Response, method: str, url: str) -> Any:
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise self.error_class(f"{self.system_name} devolvio JSON invalido en {method} {url}") from e

    def _backoff_delay(self, attempt: int, retry_after: Optional[str]) -> float:
        """Retry-After en segundos si el servidor lo indica; si no, exponencial acotado + 15%."""
        low, high = self.backoff_bounds
        if retry_after:
            try:
                return max(0.0, float(retry_after))
            except ValueError:
                return low
        delay = min(high, low * (2**attempt))
        return delay * 1.15

    def _wait(self, attempt: int, retry_after: Optional[str]) -> None:
        delay = self._backoff_delay(attempt, retry_after)
        logger.debug(f"{self.system_name}: reintento {attempt + 1}/{self.max_retries} en {delay:.2f}s")
        time.sleep(delay)

    def _parse(self, model: Any, payload: Any, what: str) -> Any:
        """Valida la respuesta contra un modelo pydantic (o un TypeAdapter de lista)."""
        try:
            if isinstance(model, TypeAdapter):
                return model.validate_python(payload)
            return model.model_validate(payload)
        except ValidationError as e:
            raise self.error_class(f"Respuesta de {self.system_name} invalida ({what}): {e}") from e
