"""GET /v1/insights/advanced - Derived financial insights endpoint"""

import time
import logging
from datetime import date, datetime, timezone
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from finsight_gateway.api.v1.schemas import (
    AdvancedInsightsResponse,
    AnomalySchema,
    PredictionReportSchema,
    RecommendationSchema,
    TrendReportSchema,
)
from finsight_gateway.api.v1.goals import goal_schema
from finsight_gateway.api.dependencies import get_classifier, get_current_user_id, get_request_id, get_thresholds
from finsight_gateway.config import settings
from finsight_gateway.domain.classification import KeywordClassifier
from finsight_gateway.domain.models import InsightThresholds
from finsight_gateway.domain.pipeline import build_advanced_insights
from finsight_gateway.infrastructure.database.session import get_db
from finsight_gateway.infrastructure.database.repositories import (
    AccountRepository,
    GoalRepository,
    TransactionRepository,
)
from finsight_gateway.infrastructure.observability.logging import log_insights
from finsight_gateway.infrastructure.observability.metrics import (
    insights_counter,
    insights_duration_histogram,
    record_insights,
)

router = APIRouter()


@router.get("/insights/advanced", response_model=AdvancedInsightsResponse)
def get_advanced_insights(
    request: Request,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    thresholds: InsightThresholds = Depends(get_thresholds),
    classifier: KeywordClassifier = Depends(get_classifier),
):
    """
    Compute trend, prediction, recommendation, anomaly, and goal insights.

    Flow:
    1. Load accounts, full transaction history, and active goals
    2. Run the insights pipeline on that snapshot
    3. Persist changed is_anomaly flags for the last 30 days
    4. Return the derived records (never stored)
    """
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        accounts = AccountRepository(db).list_for_user(user_id)
        transactions = TransactionRepository(db).list_for_user(user_id)
        goals = GoalRepository(db).list_for_user(user_id, status="active")

        today = date.today()
        with insights_duration_histogram.time():
            result = build_advanced_insights(
                accounts,
                transactions,
                goals,
                today,
                thresholds=thresholds,
                classifier=classifier,
                default_currency=settings.default_currency,
            )

        flagged = TransactionRepository(db).set_anomaly_flags(user_id, result.anomaly_flags)
        db.commit()

        duration_ms = (time.time() - start_time) * 1000
        record_insights(result.anomalies, result.recommendations, flagged)
        log_insights(
            request_id,
            user_id,
            insight_count=len(result.trend_insights.insights),
            anomaly_count=len(result.anomalies),
            recommendation_count=len(result.recommendations),
            flagged_count=flagged,
            duration_ms=duration_ms,
        )

        return AdvancedInsightsResponse(
            trend_insights=TrendReportSchema.model_validate(result.trend_insights),
            predictions=PredictionReportSchema.model_validate(result.predictions),
            recommendations=[RecommendationSchema.model_validate(r) for r in result.recommendations],
            anomalies=[AnomalySchema.model_validate(a) for a in result.anomalies],
            goal_insights=[goal_schema(g) for g in result.goal_insights],
            currency=result.currency,
            generated_at=datetime.now(timezone.utc),
        )

    except Exception as e:
        db.rollback()
        insights_counter.labels(outcome="error").inc()
        logging.error(f"Get advanced insights error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Failed to fetch advanced insights")
