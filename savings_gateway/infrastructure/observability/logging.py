"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime
from typing import Any, Dict
from pythonjsonlogger import jsonlogger

from savings_gateway.config import settings
from savings_gateway.domain.models import Recalculation


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.utcnow().isoformat()
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


def log_recalculation(
    user_id: str,
    recalculation: Recalculation,
    attempts: int,
    duration_ms: float,
) -> None:
    """Log structured recalculation outcome for analysis"""
    profile = recalculation.profile
    logging.info(
        "Recalculation completed",
        extra={
            "user_id": user_id,
            "step": "recalculation_complete",
            "workflow": recalculation.workflow,
            "total_balance": profile.total_balance,
            "daily_savings_target": profile.daily_savings_target,
            "daily_spending_buffer": profile.daily_spending_buffer,
            "buffer_status": recalculation.buffer.status.value,
            "buffer_days": recalculation.buffer.buffer_days,
            "buffer_message": recalculation.buffer.message,
            "surplus_detected": recalculation.surplus is not None,
            "overspending_detected": recalculation.overspending is not None,
            "goal_count": len(recalculation.goals),
            "attempts": attempts,
            "duration_ms": duration_ms,
        },
    )
