"""Dependency injection for FastAPI endpoints"""

import logging
from typing import Optional
from fastapi import Header, HTTPException, Request
from jose import JWTError, jwt

from finsight_gateway.config import settings
from finsight_gateway.domain.classification import KeywordClassifier
from finsight_gateway.domain.exceptions import AuthenticationError
from finsight_gateway.domain.models import InsightThresholds


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def decode_user_id(token: str) -> str:
    """Verify a bearer token and return its `userId` claim"""
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError as e:
        raise AuthenticationError("Invalid or expired token") from e

    user_id = payload.get("userId")
    if not user_id:
        raise AuthenticationError("Token has no userId claim")
    return str(user_id)


def get_current_user_id(authorization: Optional[str] = Header(default=None)) -> str:
    """Resolve the authenticated user from the Authorization header"""
    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="No token provided")

    try:
        return decode_user_id(authorization[len("Bearer "):])
    except AuthenticationError as e:
        logging.warning(f"Authentication failed: {e}")
        raise HTTPException(status_code=401, detail="Invalid or expired token")


def get_thresholds() -> InsightThresholds:
    """Pipeline heuristics from configuration"""
    return InsightThresholds(
        monthly_trend_threshold_pct=settings.monthly_trend_threshold_pct,
        monthly_trend_high_pct=settings.monthly_trend_high_pct,
        category_trend_threshold_pct=settings.category_trend_threshold_pct,
        category_trend_high_pct=settings.category_trend_high_pct,
        anomaly_multiplier=settings.anomaly_multiplier,
        max_anomalies=settings.max_anomalies,
        recurring_min_occurrences=settings.recurring_min_occurrences,
        recurring_max_cv=settings.recurring_max_cv,
        recurring_min_interval_days=settings.recurring_min_interval_days,
        recurring_max_interval_days=settings.recurring_max_interval_days,
        max_recurring_payments=settings.max_recurring_payments,
        max_recommendations=settings.max_recommendations,
        emergency_fund_months=settings.emergency_fund_months,
    )


def get_classifier() -> KeywordClassifier:
    return KeywordClassifier(
        income_keywords=settings.income_keywords,
        transfer_keywords=settings.transfer_keywords,
    )
