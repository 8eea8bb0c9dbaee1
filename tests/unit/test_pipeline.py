"""Unit tests for the combined insights pipeline"""

import copy
from datetime import date, timedelta
from finsight_gateway.domain.accounts import group_by_institution, institution_name
from finsight_gateway.domain.models import Account
from finsight_gateway.domain.pipeline import build_advanced_insights

TODAY = date(2024, 6, 15)


def _history(txn):
    history = [txn(-20.0, TODAY - timedelta(days=100 + i), category=["Dining"]) for i in range(9)]
    history.extend(
        [
            txn(4000.0, TODAY - timedelta(days=5), name="Payroll Deposit"),
            txn(-500.0, TODAY - timedelta(days=1), category=["Dining"], txn_id="spike"),
            txn(-22.0, TODAY - timedelta(days=3), category=["Dining"], txn_id="normal"),
        ]
    )
    return history


def test_pipeline_is_deterministic_and_pure(txn, checking_account, savings_goal):
    transactions = _history(txn)
    accounts = [checking_account]
    goals = [savings_goal]
    before = copy.deepcopy((accounts, transactions, goals))

    first = build_advanced_insights(accounts, transactions, goals, TODAY)
    second = build_advanced_insights(accounts, transactions, goals, TODAY)

    assert first == second
    assert (accounts, transactions, goals) == before


def test_anomaly_flags_cover_recent_window_only(txn, checking_account):
    transactions = _history(txn)

    insights = build_advanced_insights([checking_account], transactions, [], TODAY)

    assert insights.anomaly_flags["spike"] is True
    assert insights.anomaly_flags["normal"] is False
    # older history is evaluated only as the baseline
    assert len(insights.anomaly_flags) == 3
    assert [a.type for a in insights.anomalies] == ["unusual_amount"]


def test_currency_defaults_without_accounts():
    insights = build_advanced_insights([], [], [], TODAY, default_currency="EUR")

    assert insights.currency == "EUR"
    assert insights.anomalies == []
    assert insights.goal_insights == []
    assert len(insights.trend_insights.monthly_data) == 6
    assert len(insights.predictions.cash_balance) == 3


def test_currency_follows_first_account(checking_account):
    inr = Account(id="a2", user_id="u", name="HDFC Savings", type="depository", subtype="savings",
                  current_balance=1000.0, currency="INR")

    assert build_advanced_insights([inr, checking_account], [], [], TODAY).currency == "INR"


def test_goal_insights_follow_goals(checking_account, savings_goal):
    insights = build_advanced_insights([checking_account], [], [savings_goal], TODAY)

    assert [g.goal.id for g in insights.goal_insights] == [savings_goal.id]
    assert insights.predictions.goal_completions[0].goal_id == savings_goal.id


def test_group_by_institution():
    accounts = [
        Account(id="1", user_id="u", name="Chase Checking", type="depository", subtype="checking", current_balance=100.0),
        Account(id="2", user_id="u", name="Chase Savings", type="depository", subtype="savings", current_balance=250.0),
        Account(id="3", user_id="u", name="Card", type="credit", subtype="credit card", current_balance=-40.0,
                official_name="Capital One"),
    ]

    institutions = group_by_institution(accounts)

    assert [i.institution_name for i in institutions] == ["Chase", "Capital One"]
    assert institutions[0].total_balance == 350.0
    assert len(institutions[0].accounts) == 2
    assert institution_name(Account(id="4", user_id="u", name="", type="x", subtype="y", current_balance=0.0)) == (
        "Unknown Institution"
    )
