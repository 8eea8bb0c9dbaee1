"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict
from pythonjsonlogger import jsonlogger

SERVICE_NAME = "finsight-gateway"


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = SERVICE_NAME


def setup_logging(level: str = "INFO") -> None:
    """Configure structured JSON logging"""
    logger = logging.getLogger()
    logger.setLevel(level)

    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(CustomJsonFormatter("%(timestamp)s %(level)s %(name)s %(message)s"))
    logger.addHandler(handler)


def log_insights(
    request_id: str,
    user_id: str,
    insight_count: int,
    anomaly_count: int,
    recommendation_count: int,
    flagged_count: int,
    duration_ms: float,
) -> None:
    """Log one structured record per advanced-insights request"""
    logging.info(
        "Insights generated",
        extra={
            "request_id": request_id,
            "user_id": user_id,
            "step": "insights_complete",
            "insight_count": insight_count,
            "anomaly_count": anomaly_count,
            "recommendation_count": recommendation_count,
            "flagged_count": flagged_count,
            "duration_ms": duration_ms,
        },
    )


def log_goal_event(request_id: str, user_id: str, goal_id: str, event: str) -> None:
    logging.info(
        "Goal updated",
        extra={"request_id": request_id, "user_id": user_id, "goal_id": goal_id, "step": f"goal_{event}"},
    )
