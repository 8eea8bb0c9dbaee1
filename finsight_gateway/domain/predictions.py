"""Cash-flow forecasting, goal completion projection, and recurring-payment detection"""

import math
import re
from collections import defaultdict
from datetime import date, timedelta
from typing import Dict, List
from finsight_gateway.domain.classification import TransactionClassifier, TransactionKind
from finsight_gateway.domain.goals import project_goal
from finsight_gateway.domain.models import (
    Account,
    BalanceForecast,
    Goal,
    InsightThresholds,
    PredictionReport,
    RecurringPayment,
    Transaction,
)
from finsight_gateway.utils.date_utils import add_months, month_key, short_month_label

FORECAST_CONFIDENCE = ["high", "medium", "low"]
TRAILING_MONTHS = 6

_DIGITS = re.compile(r"[0-9]")


def monthly_net_cash_flow(
    transactions: List[Transaction], classifier: TransactionClassifier
) -> Dict[str, float]:
    """Income minus expenses per calendar month (transfers ignored)"""
    net: Dict[str, float] = defaultdict(float)
    for txn in transactions:
        kind = classifier.classify(txn)
        if kind == TransactionKind.INCOME:
            net[month_key(txn.date)] += txn.amount
        elif kind == TransactionKind.EXPENSE:
            net[month_key(txn.date)] -= abs(txn.amount)
    return dict(net)


def average_monthly_change(net_by_month: Dict[str, float], trailing: int = TRAILING_MONTHS) -> float:
    """Mean net flow over the most recent `trailing` months with activity"""
    recent = [net_by_month[m] for m in sorted(net_by_month)[-trailing:]]
    if not recent:
        return 0.0
    return sum(recent) / len(recent)


def forecast_balances(
    current_balance: float, avg_change: float, today: date, months: int = 3
) -> List[BalanceForecast]:
    """
    Naive average-delta extrapolation.

    The running balance is not floored between steps; only the reported value
    is clamped at zero.
    """
    forecasts = []
    running = current_balance
    for i in range(1, months + 1):
        running += avg_change
        forecasts.append(
            BalanceForecast(
                month=short_month_label(add_months(today, i)),
                predicted_balance=max(running, 0.0),
                confidence=FORECAST_CONFIDENCE[min(i, len(FORECAST_CONFIDENCE)) - 1],
            )
        )
    return forecasts


def normalize_description(name: str) -> str:
    """Grouping key for recurring detection: lower-case, digits stripped"""
    return _DIGITS.sub("", (name or "").lower()).strip()


def coefficient_of_variation(values: List[float]) -> float | None:
    """Population standard deviation over mean; None when the mean is zero"""
    mean = sum(values) / len(values)
    if mean == 0:
        return None
    variance = sum((v - mean) ** 2 for v in values) / len(values)
    return math.sqrt(variance) / mean


def detect_recurring_payments(
    transactions: List[Transaction], thresholds: InsightThresholds | None = None
) -> List[RecurringPayment]:
    """
    Find monthly-cadence payments with stable amounts.

    A group of same-description transactions qualifies when it has enough
    occurrences, its amounts vary little (coefficient of variation below the
    threshold) and the mean gap between dates falls inside the monthly band.
    """
    thresholds = thresholds or InsightThresholds()

    groups: Dict[str, List[Transaction]] = defaultdict(list)
    for txn in transactions:
        groups[normalize_description(txn.name)].append(txn)

    recurring = []
    for txns in groups.values():
        if len(txns) < thresholds.recurring_min_occurrences:
            continue

        amounts = [abs(t.amount) for t in txns]
        cv = coefficient_of_variation(amounts)
        if cv is None or cv >= thresholds.recurring_max_cv:
            continue

        dates = sorted(t.date for t in txns)
        intervals = [(dates[i] - dates[i - 1]).days for i in range(1, len(dates))]
        avg_interval = sum(intervals) / len(intervals)
        if not (
            thresholds.recurring_min_interval_days
            <= avg_interval
            <= thresholds.recurring_max_interval_days
        ):
            continue

        recurring.append(
            RecurringPayment(
                name=txns[0].name,
                amount=sum(amounts) / len(amounts),
                frequency="monthly",
                next_expected_date=dates[-1] + timedelta(days=round(avg_interval)),
                confidence="high" if len(txns) >= 6 else "medium",
                last_occurrence=dates[-1],
                occurrences=len(txns),
            )
        )

    return recurring[: thresholds.max_recurring_payments]


def generate_predictions(
    transactions: List[Transaction],
    accounts: List[Account],
    goals: List[Goal],
    today: date,
    classifier: TransactionClassifier,
    thresholds: InsightThresholds | None = None,
) -> PredictionReport:
    """Balance forecast, goal completion estimates, and recurring payments"""
    thresholds = thresholds or InsightThresholds()

    avg_change = average_monthly_change(monthly_net_cash_flow(transactions, classifier))
    current_balance = sum(a.current_balance for a in accounts)

    return PredictionReport(
        cash_balance=forecast_balances(current_balance, avg_change, today),
        goal_completions=[project_goal(g, today) for g in goals if g.status == "active"],
        recurring_payments=detect_recurring_payments(transactions, thresholds),
        avg_monthly_change=avg_change,
    )
