"""Structured JSON logging for ledger observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict
from pythonjsonlogger import jsonlogger

from wallet_ledger.config import settings
from wallet_ledger.domain.models import Wallet


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


def log_mutation(step: str, wallet: Wallet, **fields: Any) -> None:
    """Log a ledger mutation together with the wallet totals it produced"""
    logging.getLogger("wallet_ledger.ledger").info(
        "Ledger mutation",
        extra={
            "step": step,
            "wallet_id": str(wallet.id),
            "balance": str(wallet.balance),
            "total_income": str(wallet.total_income),
            "total_expenses": str(wallet.total_expenses),
            **fields,
        },
    )
