# backend/proposal_export/utils/logging.py
import logging
import os
from logging.handlers import RotatingFileHandler

from pythonjsonlogger.json import JsonFormatter

from proposal_export.config import settings

SERVICE_NAME = os.getenv("SERVICE_NAME", "proposal-export")


class ContextFilter(logging.Filter):
    def filter(self, record):
        # export_id is passed per call via extra={...}; default to None if absent
        if not hasattr(record, "export_id"):
            record.export_id = None
        record.service = SERVICE_NAME
        return True


base_format = (
    "%(asctime)s %(levelname)s %(service)s %(name)s %(message)s "
    "%(exception)s %(export_id)s"
)

json_formatter = JsonFormatter(
    base_format,
    rename_fields={"exception": "exception"}
)

logger = logging.getLogger("proposal_export")
logger.setLevel(getattr(logging, settings.log_level, logging.INFO))

# Console / stdout handler (always on)
if not logger.handlers:
    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(json_formatter)
    stream_handler.addFilter(ContextFilter())
    logger.addHandler(stream_handler)

    # Optional file handler
    if settings.log_to_file:
        settings.log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            settings.log_dir / "export.log",
            maxBytes=10_000_000,
            backupCount=5,
            encoding="utf-8"
        )
        file_handler.setFormatter(json_formatter)
        file_handler.addFilter(ContextFilter())
        logger.addHandler(file_handler)

# reportlab and docx are chatty at DEBUG
logging.getLogger("reportlab").setLevel(logging.WARNING)
logging.getLogger("docx").setLevel(logging.WARNING)
