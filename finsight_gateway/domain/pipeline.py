"""Insights pipeline - main entry point combining every analyzer"""

from datetime import date
from typing import List
from finsight_gateway.domain.accounts import primary_currency
from finsight_gateway.domain.anomalies import anomaly_flags, detect_anomalies
from finsight_gateway.domain.classification import KeywordClassifier, TransactionClassifier
from finsight_gateway.domain.goals import build_goal_insights
from finsight_gateway.domain.models import Account, AdvancedInsights, Goal, InsightThresholds, Transaction
from finsight_gateway.domain.predictions import generate_predictions
from finsight_gateway.domain.recommendations import build_snapshot, generate_recommendations
from finsight_gateway.domain.trends import analyze_trends
from finsight_gateway.domain.windows import split_windows


def build_advanced_insights(
    accounts: List[Account],
    transactions: List[Transaction],
    goals: List[Goal],
    today: date,
    thresholds: InsightThresholds | None = None,
    classifier: TransactionClassifier | None = None,
    default_currency: str = "USD",
) -> AdvancedInsights:
    """
    Derive every insight for one user snapshot.

    Pure: inputs are never mutated and the same snapshot always yields the
    same result. `anomaly_flags` carries the `is_anomaly` value each recent
    transaction should have; persisting it is left to the caller.
    """
    thresholds = thresholds or InsightThresholds()
    classifier = classifier or KeywordClassifier()
    currency = primary_currency(accounts, default_currency)
    windows = split_windows(transactions, today)

    snapshot = build_snapshot(
        accounts,
        windows.last_30,
        goals,
        currency,
        classifier,
        emergency_fund_months=thresholds.emergency_fund_months,
    )

    return AdvancedInsights(
        trend_insights=analyze_trends(windows, classifier, thresholds),
        predictions=generate_predictions(transactions, accounts, goals, today, classifier, thresholds),
        recommendations=generate_recommendations(snapshot, thresholds),
        anomalies=detect_anomalies(windows.last_30, transactions, currency, thresholds),
        goal_insights=build_goal_insights(goals, today, currency),
        currency=currency,
        anomaly_flags=anomaly_flags(windows.last_30, transactions, thresholds.anomaly_multiplier),
    )
