"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from pythonjsonlogger import jsonlogger

from shortlet_settlement.config import settings


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

    # JSON handler for stdout
    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_settlement_step(
    payment_id: str,
    step: str,
    from_status: str,
    to_status: str,
    amounts: Optional[Dict[str, str]] = None,
) -> None:
    """Log an escrow transition with the amounts it moved"""
    logging.getLogger("shortlet_settlement.settlement").info(
        "Settlement step completed",
        extra={
            "payment_id": payment_id,
            "step": step,
            "from_status": from_status,
            "to_status": to_status,
            "amounts": amounts or {},
        },
    )


def log_payout(
    payment_id: str,
    realtor_id: str,
    amount: str,
    currency: str,
    payout_reference: str,
) -> None:
    """Log a processed realtor payout"""
    logging.getLogger("shortlet_settlement.payouts").info(
        "Payout processed",
        extra={
            "payment_id": payment_id,
            "realtor_id": realtor_id,
            "step": "payout_complete",
            "amount": amount,
            "currency": currency,
            "payout_reference": payout_reference,
        },
    )
