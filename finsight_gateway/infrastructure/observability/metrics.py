"""Prometheus metrics for insight generation, anomaly flagging, and goal activity"""

from typing import List
from prometheus_client import Counter, Histogram
from finsight_gateway.domain.models import Anomaly, Recommendation

# Insights pipeline
insights_counter = Counter(
    "finsight_insights_total",
    "Advanced insights requests",
    ["outcome"],  # success | error
)

insights_duration_histogram = Histogram(
    "finsight_insights_duration_seconds",
    "Time spent loading data and deriving insights",
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
)

anomalies_counter = Counter(
    "finsight_anomalies_detected_total",
    "Anomalies reported to users",
    ["type"],  # duplicate | unusual_amount
)

recommendations_counter = Counter(
    "finsight_recommendations_total",
    "Recommendations emitted",
    ["recommendation"],
)

anomaly_flags_counter = Counter(
    "finsight_anomaly_flags_updated_total",
    "Transactions newly flagged as anomalous",
)

# Goals
goal_events_counter = Counter(
    "finsight_goal_events_total",
    "Goal lifecycle events",
    ["event"],  # created | updated | contributed | deleted | completed
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_insights(anomalies: List[Anomaly], recommendations: List[Recommendation], flagged: int) -> None:
    """Record what one successful insights request surfaced"""
    insights_counter.labels(outcome="success").inc()
    for anomaly in anomalies:
        anomalies_counter.labels(type=anomaly.type).inc()
    for recommendation in recommendations:
        recommendations_counter.labels(recommendation=recommendation.id).inc()
    if flagged:
        anomaly_flags_counter.inc(flagged)


def record_goal_event(event: str, completed: bool = False) -> None:
    goal_events_counter.labels(event=event).inc()
    if completed:
        goal_events_counter.labels(event="completed").inc()
