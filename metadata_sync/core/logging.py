"""
Configuracion de loguru para el job.

Un sink a stderr con el nivel configurado y un archivo rotado
para conservar el historial de corridas.
"""
import sys
from pathlib import Path

from loguru import logger

LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function} - {message}"


def configure_logging(level: str = "INFO", log_file: str | None = None) -> None:
    """
    Reemplaza los sinks por defecto de loguru.

    Args:
        level: nivel minimo (DEBUG, INFO, WARNING...)
        log_file: ruta del archivo de log; None desactiva el sink a archivo
    """
    logger.remove()
    logger.add(sys.stderr, level=level, format=LOG_FORMAT)

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_file,
            format=LOG_FORMAT,
            rotation="50 MB",
            retention="30 days",
            level=level,
        )
