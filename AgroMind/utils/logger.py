"""
utils/logger.py
---------------
Configuración centralizada de logging.
Todos los módulos obtienen su logger con `get_logger(__name__)`.
"""

import logging
import sys

from config.settings import settings

_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
_initialized = False


def _init_logging() -> None:
    """Configura el root logger una sola vez."""
    global _initialized
    if _initialized:
        return
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(_LOG_FORMAT, _DATE_FORMAT))
    root = logging.getLogger()
    root.setLevel(settings.LOG_LEVEL.upper())
    root.addHandler(handler)
    _initialized = True


def get_logger(name: str) -> logging.Logger:
    """
    Obtener un logger con nombre.

    Args:
        name: Normalmente ``__name__`` del módulo que lo pide.

    Returns:
        logging.Logger ya configurado.
    """
    _init_logging()
    return logging.getLogger(name)
