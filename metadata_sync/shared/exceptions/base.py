"""
Raiz de la jerarquia de errores del job de sync.
"""
from typing import Any, Dict, Optional


class AppException(Exception):
    """
    Error con codigo estable y datos estructurados para el log.

    exit_code es el codigo con el que termina el proceso cuando la
    excepcion llega sin capturar hasta main().
    """

    def __init__(
        self,
        message: str,
        error_code: str = "INTERNAL_ERROR",
        details: Optional[Dict[str, Any]] = None,
        exit_code: int = 1,
    ):
        self.message = message
        self.error_code = error_code
        self.details = dict(details) if details else {}
        self.exit_code = exit_code
        super().__init__(message)

    def __str__(self) -> str:
        return f"[{self.error_code}] {self.message}"
