"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict
from pythonjsonlogger import jsonlogger

from factoring_gateway.domain.models import Offer


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = "factoring-gateway"


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


def log_offer_created(offer: Offer) -> None:
    """Log upfront split of a new offer"""
    logging.getLogger(__name__).info(
        "Offer created",
        extra={
            "offer_id": offer.offer_id,
            "tier_id": offer.params.tier_id,
            "step": "offer_created",
            "asset_id": offer.params.asset_id,
            "advanced_amount": offer.advanced_amount,
            "reserve": offer.reserve,
            "upfront_fee": offer.upfront_fee,
        },
    )


def log_offer_settled(offer: Offer) -> None:
    """Log final fee/net split of a settled offer"""
    refunded = offer.refunded
    logging.getLogger(__name__).info(
        "Offer settled",
        extra={
            "offer_id": offer.offer_id,
            "step": "reserve_refund",
            "number_of_late_days": refunded.number_of_late_days,
            "late_fee": refunded.late_fee,
            "total_calculated_fees": refunded.total_calculated_fees,
            "net_amount": refunded.net_amount,
        },
    )
