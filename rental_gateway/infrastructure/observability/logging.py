"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from pythonjsonlogger import jsonlogger

from rental_gateway.config import settings


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = settings.service_name


def setup_logging(level: str = "INFO") -> None:
    """Configure structured JSON logging"""
    logger = logging.getLogger()
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_quote(
    request_id: str,
    customer_id: str,
    vehicle_id: str,
    rate_tier: str,
    total: float,
    approved: bool,
    duration_ms: float,
) -> None:
    """Log structured pricing outcome for analysis"""
    logging.info(
        "Quote computed",
        extra={
            "request_id": request_id,
            "customer_id": customer_id,
            "vehicle_id": vehicle_id,
            "step": "quote_complete",
            "rate_tier": rate_tier,
            "total": total,
            "approval_outcome": "auto_approved" if approved else "manual_review",
            "duration_ms": duration_ms,
        },
    )


def log_agreement_draft(
    request_id: str,
    source: str,
    source_id: Optional[str],
    customer_id: str,
    agreement_type: str,
) -> None:
    """Log booking-to-agreement conversion"""
    logging.info(
        "Agreement draft mapped",
        extra={
            "request_id": request_id,
            "step": "agreement_draft",
            "source": source,
            "source_id": source_id,
            "customer_id": customer_id,
            "agreement_type": agreement_type,
        },
    )
