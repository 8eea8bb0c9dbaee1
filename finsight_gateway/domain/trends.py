"""Spending trend analysis - period-over-period comparisons"""

from collections import defaultdict
from datetime import date
from typing import Dict, List, Optional
from finsight_gateway.domain.classification import (
    TransactionClassifier,
    TransactionKind,
    derive_category,
    filter_kind,
    total_expenses,
    total_income,
)
from finsight_gateway.domain.models import (
    InsightThresholds,
    MonthlyExpense,
    Transaction,
    TransactionWindows,
    TrendInsight,
    TrendReport,
    TrendSummary,
)
from finsight_gateway.utils.date_utils import add_months, days_ago, month_start, short_month_label


def percent_change(current: float, previous: float) -> Optional[float]:
    """Relative change in percent; None when there is no baseline"""
    if previous == 0:
        return None
    # Scale before dividing so exact boundaries (e.g. 110 vs 100) stay exact
    return (current - previous) * 100 / previous


def _direction(change: float) -> tuple[str, str]:
    return ("Increased", "rose") if change > 0 else ("Decreased", "fell")


def _category_totals(
    transactions: List[Transaction], classifier: TransactionClassifier
) -> Dict[str, float]:
    totals: Dict[str, float] = defaultdict(float)
    for txn in filter_kind(transactions, classifier, TransactionKind.EXPENSE):
        totals[derive_category(txn)] += abs(txn.amount)
    return totals


def monthly_trend_insight(
    current: float, previous: float, thresholds: InsightThresholds
) -> Optional[TrendInsight]:
    change = percent_change(current, previous)
    if change is None or abs(change) <= thresholds.monthly_trend_threshold_pct:
        return None

    verb_title, verb = _direction(change)
    return TrendInsight(
        type="monthly_trend",
        title=f"Monthly Spending {verb_title}",
        description=f"Your expenses {verb} {abs(change):.1f}% compared to last month.",
        change=change,
        current=current,
        previous=previous,
        severity="high" if abs(change) > thresholds.monthly_trend_high_pct else "medium",
    )


def category_trend_insights(
    current_by_category: Dict[str, float],
    previous_by_category: Dict[str, float],
    thresholds: InsightThresholds,
) -> List[TrendInsight]:
    insights = []
    for category in sorted(set(current_by_category) | set(previous_by_category)):
        current = current_by_category.get(category, 0.0)
        previous = previous_by_category.get(category, 0.0)

        change = percent_change(current, previous)
        if change is None or abs(change) <= thresholds.category_trend_threshold_pct:
            continue

        verb_title, verb = _direction(change)
        insights.append(
            TrendInsight(
                type="category_trend",
                title=f"{category} Expenses {verb_title}",
                description=(
                    f"Your {category.lower()} expenses {verb} {abs(change):.1f}% compared to last month."
                ),
                change=change,
                current=current,
                previous=previous,
                severity="high" if abs(change) > thresholds.category_trend_high_pct else "medium",
                category=category,
            )
        )
    return insights


def monthly_expense_series(
    transactions: List[Transaction],
    today: date,
    classifier: TransactionClassifier,
    months: int = 6,
) -> List[MonthlyExpense]:
    """Expense totals per calendar month, oldest first, ending with the current month"""
    series = []
    current_month = month_start(today)
    for offset in range(months - 1, -1, -1):
        start = add_months(current_month, -offset)
        end = add_months(start, 1)
        in_month = [t for t in transactions if start <= t.date < end]
        series.append(
            MonthlyExpense(month=short_month_label(start), expenses=total_expenses(in_month, classifier))
        )
    return series


def savings_rate(transactions: List[Transaction], classifier: TransactionClassifier) -> Optional[float]:
    """(income - expenses) / income * 100; None without income"""
    income = total_income(transactions, classifier)
    if income <= 0:
        return None
    return (income - total_expenses(transactions, classifier)) / income * 100


def analyze_trends(
    windows: TransactionWindows,
    classifier: TransactionClassifier,
    thresholds: InsightThresholds | None = None,
) -> TrendReport:
    """
    Compare the last 30 days of spending against the 30 days before it.

    Emits a monthly_trend insight for overall spend and a category_trend
    insight per category whose change crosses its threshold (strictly greater).
    """
    thresholds = thresholds or InsightThresholds()
    cutoff = days_ago(windows.today, 30)
    previous_window = [t for t in windows.last_60 if t.date < cutoff]

    current_month = total_expenses(windows.last_30, classifier)
    previous_month = total_expenses(previous_window, classifier)
    current_quarter = total_expenses(windows.last_90, classifier)

    insights: List[TrendInsight] = []
    overall = monthly_trend_insight(current_month, previous_month, thresholds)
    if overall is not None:
        insights.append(overall)

    insights.extend(
        category_trend_insights(
            _category_totals(windows.last_30, classifier),
            _category_totals(previous_window, classifier),
            thresholds,
        )
    )

    return TrendReport(
        insights=insights,
        monthly_data=monthly_expense_series(windows.last_365, windows.today, classifier),
        summary=TrendSummary(
            current_month=current_month,
            previous_month=previous_month,
            current_quarter=current_quarter,
            savings_rate=savings_rate(windows.last_30, classifier),
        ),
    )
