"""Anomaly detection: likely duplicates and category outliers"""

from collections import defaultdict
from datetime import date
from typing import Dict, List, Tuple
from finsight_gateway.domain.classification import derive_category
from finsight_gateway.domain.models import Anomaly, InsightThresholds, Transaction
from finsight_gateway.utils.currency import format_currency


def category_averages(history: List[Transaction]) -> Dict[str, float]:
    """
    Mean absolute amount per derived category.

    Only categories with at least one transaction appear, so lookups never
    divide by zero and every mean is >= 0.
    """
    totals: Dict[str, float] = defaultdict(float)
    counts: Dict[str, int] = defaultdict(int)
    for txn in history:
        category = derive_category(txn)
        totals[category] += abs(txn.amount)
        counts[category] += 1
    return {category: totals[category] / counts[category] for category in totals}


def is_unusual_amount(txn: Transaction, averages: Dict[str, float], multiplier: float) -> bool:
    average = averages.get(derive_category(txn))
    if not average:
        return False
    return abs(txn.amount) > average * multiplier


def find_duplicates(recent: List[Transaction]) -> List[Anomaly]:
    """One record per (name, |amount|, day) group with more than one member"""
    groups: Dict[Tuple[str, float, date], List[Transaction]] = defaultdict(list)
    for txn in recent:
        groups[(txn.name, abs(txn.amount), txn.date)].append(txn)

    anomalies = []
    for (name, amount, day), txns in groups.items():
        if len(txns) < 2:
            continue
        anomalies.append(
            Anomaly(
                type="duplicate",
                severity="medium",
                title="Possible Duplicate Transaction",
                description=f'Found {len(txns)} identical transactions for "{name}" on {day.isoformat()}',
                amount=amount,
                date=day,
                transaction_ids=[t.id for t in txns],
            )
        )
    return anomalies


def find_unusual_amounts(
    recent: List[Transaction],
    history: List[Transaction],
    currency: str,
    multiplier: float = 3.0,
) -> List[Anomaly]:
    """Recent transactions above `multiplier` x their category's historical mean"""
    averages = category_averages(history)

    anomalies = []
    for txn in recent:
        if not is_unusual_amount(txn, averages, multiplier):
            continue
        category = derive_category(txn)
        average = averages[category]
        amount = abs(txn.amount)
        anomalies.append(
            Anomaly(
                type="unusual_amount",
                severity="high",
                title=f"Unusually High {category} Transaction",
                description=(
                    f"Transaction of {format_currency(amount, currency)} is "
                    f"{amount / average * 100:.0f}% of your average {category.lower()} expense."
                ),
                amount=amount,
                date=txn.date,
                transaction_ids=[txn.id],
                average=average,
                category=category,
            )
        )
    return anomalies


def detect_anomalies(
    recent: List[Transaction],
    history: List[Transaction],
    currency: str,
    thresholds: InsightThresholds | None = None,
) -> List[Anomaly]:
    """Duplicates first, then unusual amounts, capped at `max_anomalies`"""
    thresholds = thresholds or InsightThresholds()
    anomalies = find_duplicates(recent) + find_unusual_amounts(
        recent, history, currency, thresholds.anomaly_multiplier
    )
    return anomalies[: thresholds.max_anomalies]


def anomaly_flags(
    evaluated: List[Transaction],
    history: List[Transaction],
    multiplier: float = 3.0,
) -> Dict[str, bool]:
    """Desired `is_anomaly` value per evaluated transaction id"""
    averages = category_averages(history)
    return {txn.id: is_unusual_amount(txn, averages, multiplier) for txn in evaluated}
