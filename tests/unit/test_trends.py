"""Unit tests for spending trend analysis"""

from datetime import date, timedelta
from finsight_gateway.domain.classification import KeywordClassifier
from finsight_gateway.domain.models import InsightThresholds
from finsight_gateway.domain.trends import (
    analyze_trends,
    category_trend_insights,
    monthly_trend_insight,
    percent_change,
)
from finsight_gateway.domain.windows import split_windows

TODAY = date(2024, 6, 15)
THRESHOLDS = InsightThresholds()


def test_percent_change_without_baseline():
    assert percent_change(500.0, 0.0) is None
    assert percent_change(150.0, 100.0) == 50.0


def test_monthly_trend_boundary_does_not_trigger():
    """Exactly 10% is not a trend (strictly greater required)"""
    assert monthly_trend_insight(110.0, 100.0, THRESHOLDS) is None
    assert monthly_trend_insight(90.0, 100.0, THRESHOLDS) is None


def test_monthly_trend_severity():
    medium = monthly_trend_insight(111.0, 100.0, THRESHOLDS)
    assert medium.type == "monthly_trend"
    assert medium.severity == "medium"
    assert medium.title == "Monthly Spending Increased"

    # 25% exactly stays medium
    assert monthly_trend_insight(125.0, 100.0, THRESHOLDS).severity == "medium"

    high = monthly_trend_insight(60.0, 100.0, THRESHOLDS)
    assert high.severity == "high"
    assert high.title == "Monthly Spending Decreased"
    assert "fell 40.0%" in high.description


def test_category_trend_boundaries():
    insights = category_trend_insights(
        {"Dining": 125.0, "Travel": 126.0, "Rent": 151.0, "Gym": 50.0},
        {"Dining": 100.0, "Travel": 100.0, "Rent": 100.0},
        THRESHOLDS,
    )
    by_category = {i.category: i for i in insights}

    assert "Dining" not in by_category  # exactly 25%
    assert "Gym" not in by_category  # no previous spend
    assert by_category["Travel"].severity == "medium"
    assert by_category["Rent"].severity == "high"
    assert by_category["Rent"].type == "category_trend"


def test_analyze_trends_month_over_month(txn):
    transactions = [
        txn(-200.0, TODAY - timedelta(days=2), category=["Groceries"]),
        txn(-200.0, TODAY - timedelta(days=9), category=["Groceries"]),
        txn(4000.0, TODAY - timedelta(days=5), name="Payroll Deposit"),
        txn(-100.0, TODAY - timedelta(days=40), category=["Groceries"]),
    ]

    report = analyze_trends(split_windows(transactions, TODAY), KeywordClassifier())

    assert report.summary.current_month == 400.0
    assert report.summary.previous_month == 100.0
    assert report.summary.current_quarter == 500.0
    assert report.summary.savings_rate == 90.0

    types = [(i.type, i.severity) for i in report.insights]
    assert ("monthly_trend", "high") in types
    assert ("category_trend", "high") in types


def test_monthly_series_covers_six_months(txn):
    transactions = [
        txn(-200.0, TODAY - timedelta(days=2)),  # June
        txn(-200.0, TODAY - timedelta(days=9)),  # June
        txn(-100.0, TODAY - timedelta(days=40)),  # May
    ]

    series = analyze_trends(split_windows(transactions, TODAY), KeywordClassifier()).monthly_data

    assert [m.month for m in series] == ["Jan 2024", "Feb 2024", "Mar 2024", "Apr 2024", "May 2024", "Jun 2024"]
    assert series[-1].expenses == 400.0
    assert series[-2].expenses == 100.0
    assert series[0].expenses == 0


def test_empty_history_yields_empty_insights():
    report = analyze_trends(split_windows([], TODAY), KeywordClassifier())

    assert report.insights == []
    assert len(report.monthly_data) == 6
    assert report.summary.current_month == 0
    assert report.summary.savings_rate is None
