"""Structured JSON logging for production observability"""

import logging
import sys
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from pythonjsonlogger.json import JsonFormatter

from payoff_planner.config import settings

# Set per request by RequestIDMiddleware
request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)
user_id_var: ContextVar[Optional[str]] = ContextVar("user_id", default=None)


class RequestContextFilter(logging.Filter):
    """Stamp the current request and user ids onto every record"""

    def filter(self, record: logging.LogRecord) -> bool:
        if getattr(record, "request_id", None) is None:
            record.request_id = request_id_var.get()
        if getattr(record, "user_id", None) is None:
            record.user_id = user_id_var.get()
        return True


class CustomJsonFormatter(JsonFormatter):
    """JSON formatter adding timestamp, level and service name"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = settings.service_name


def setup_logging(level: str = "INFO") -> None:
    """Send JSON records to stdout, replacing any configured handlers"""
    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(RequestContextFilter())
    handler.setFormatter(CustomJsonFormatter("%(timestamp)s %(level)s %(name)s %(message)s"))
    root.addHandler(handler)


def log_calculation(
    user_id: str,
    report_id: str | None,
    outcome: str,
    duration_ms: float,
    **fields: Any,
) -> None:
    """Log structured calculation outcome for analysis"""
    logging.info(
        "Calculation completed",
        extra={
            "user_id": user_id,
            "report_id": report_id,
            "step": "calculation_complete",
            "outcome": outcome,
            "duration_ms": round(duration_ms, 2),
            **fields,
        },
    )
