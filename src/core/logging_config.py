"""Logger estructurado para el cliente y la CLI.

El cliente acepta cualquier `logging.Logger`; este helper solo construye uno
por defecto (JSON en stderr) para quien no tenga su propio sink.
"""

from __future__ import annotations

import logging

from pythonjsonlogger.json import JsonFormatter


def get_logger(name: str = "cinebot", level: int = logging.INFO) -> logging.Logger:
    """Configura un logger JSON una sola vez y lo reutiliza."""

    logger = logging.getLogger(name)
    logger.setLevel(level)
    if logger.handlers:
        return logger

    handler = logging.StreamHandler()
    formatter = JsonFormatter("%(levelname)s %(name)s %(message)s %(asctime)s")
    handler.setFormatter(formatter)
    logger.addHandler(handler)
    logger.propagate = False
    return logger
