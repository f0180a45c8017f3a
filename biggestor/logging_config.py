"""Configuração de logging

Saída em JSON (compatível com Cloud Logging) no Cloud Run ou quando
LOG_FORMAT=json; texto simples no terminal.

Uso:
    from biggestor.logging_config import setup_logging
    setup_logging()

Variáveis de ambiente:
    LOG_LEVEL: DEBUG, INFO, WARNING, ERROR, CRITICAL (padrão: INFO)
    LOG_FORMAT: "json" ou "text" (padrão: text fora do Cloud Run)
    K_SERVICE / CLOUD_RUN_JOB: definidas automaticamente pelo Cloud Run
"""

import json
import logging
import os


class JsonLogFormatter(logging.Formatter):
    """Formatter JSON com campo `severity` para o Cloud Logging

    Campos estruturados entram via ``extra={"extra_fields": {...}}``
    (uid, coleção, evento) e viram chaves de primeiro nível do JSON.
    """

    def format(self, record: logging.LogRecord) -> str:
        # os nomes de nível do logging coincidem com as severidades do Cloud Logging
        log_entry: dict = {
            "severity": record.levelname,
            "message": record.getMessage(),
            "logger": record.name,
            "timestamp": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
        }
        if record.exc_info and record.exc_info[0]:
            log_entry["exception"] = self.formatException(record.exc_info)
        extra_fields = getattr(record, "extra_fields", None)
        if isinstance(extra_fields, dict):
            log_entry.update(extra_fields)
        return json.dumps(log_entry, ensure_ascii=False)


def _use_json() -> bool:
    log_format = os.getenv("LOG_FORMAT", "").lower()
    if log_format:
        return log_format == "json"
    return bool(os.getenv("K_SERVICE") or os.getenv("CLOUD_RUN_JOB"))


def setup_logging() -> None:
    """Inicializa o logger raiz (nível e formatter)"""
    log_level = os.getenv("LOG_LEVEL", "INFO").upper()

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, log_level, logging.INFO))

    handler = logging.StreamHandler()
    if _use_json():
        handler.setFormatter(JsonLogFormatter())
    else:
        handler.setFormatter(
            logging.Formatter(
                "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )

    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    # google-auth/urllib3 são verbosos em DEBUG
    for noisy in ("urllib3", "google.auth"):
        logging.getLogger(noisy).setLevel(max(root_logger.level, logging.INFO))
