"""Structured JSON logging for calculator requests"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional, TextIO
from pythonjsonlogger import jsonlogger

from wealth_engine.config import settings

# Outcome of a calculation -> level of its log record
OUTCOME_LEVELS = {
    "ok": logging.INFO,
    "invalid": logging.WARNING,
    "error": logging.ERROR,
}


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """JSON records stamped with UTC time, level, service and tax year"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = settings.service_name
        log_record["tax_year"] = settings.tax_year


def setup_logging(level: str = "INFO", stream: Optional[TextIO] = None) -> logging.Handler:
    """Route the root logger to a single JSON handler and return it"""
    logger = logging.getLogger()
    logger.setLevel(level)
    logger.handlers.clear()

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(CustomJsonFormatter("%(timestamp)s %(level)s %(name)s %(message)s"))
    logger.addHandler(handler)
    return handler


def log_calculation(
    request_id: str,
    calculation: str,
    outcome: str,
    duration_ms: float,
    error: Optional[str] = None,
    **fields: Any,
) -> None:
    """
    One record per calculator call.

    ok is logged at INFO, invalid (rejected input) at WARNING and error at
    ERROR. Extra keyword fields describe the request (frequency, risk flag...).
    """
    extra = {
        "request_id": request_id,
        "calculation": calculation,
        "step": "calculation_complete",
        "outcome": outcome,
        "duration_ms": round(duration_ms, 3),
        **fields,
    }
    if error is not None:
        extra["error"] = error

    logging.log(
        OUTCOME_LEVELS.get(outcome, logging.INFO),
        f"Calculation {calculation} {outcome}",
        extra=extra,
    )
