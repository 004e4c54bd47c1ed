"""
logger.py

Utilitário para padronizar os logs de diagnóstico do tempered-cli.

- Respeita `settings.LOG_LEVEL` e `settings.LOG_JSON`.
- Escreve sempre no stderr, com um único handler (sem duplicar).
- Registros podem carregar `dispositivo` e `sensor` via `extra=`; no
  formato JSON eles viram campos próprios.

As linhas de resultado (stdout) e as mensagens de erro por dispositivo
(stderr) NÃO passam por aqui.

Uso:

    logger = get_logger(__name__)
    logger.debug("sensores lidos", extra={"dispositivo": "/dev/hidraw0"})
"""

import json
import logging
import sys
from typing import Any, Dict

from tempered_cli.config.settings import settings

CAMPOS_CONTEXTO = ("dispositivo", "sensor")

_CONFIGURED = False


class JSONFormatter(logging.Formatter):
    """
    Uma linha JSON por registro: level, logger, message, time e, quando
    presentes, os campos de contexto e exc_info.
    """

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "time": self.formatTime(record, datefmt="%Y-%m-%dT%H:%M:%S%z"),
        }
        for campo in CAMPOS_CONTEXTO:
            if hasattr(record, campo):
                payload[campo] = getattr(record, campo)
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=True)


def _criar_formatter() -> logging.Formatter:
    if settings.LOG_JSON:
        return JSONFormatter()
    return logging.Formatter(
        fmt="%(asctime)s [%(levelname)s] %(name)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def _configure_logging() -> None:
    global _CONFIGURED
    if _CONFIGURED:
        return

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(_criar_formatter())

    root = logging.getLogger()
    root.setLevel(settings.LOG_LEVEL)
    root.handlers.clear()
    root.addHandler(handler)

    _CONFIGURED = True


def get_logger(name: str) -> logging.Logger:
    """
    Retorna um logger configurado.
    """
    if not _CONFIGURED:
        _configure_logging()
    return logging.getLogger(name)
