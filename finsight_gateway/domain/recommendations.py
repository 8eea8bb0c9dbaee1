"""Rule-based savings recommendations"""

import math
from collections import defaultdict
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional
from finsight_gateway.domain.classification import (
    TransactionClassifier,
    TransactionKind,
    derive_category,
    filter_kind,
    total_expenses,
    total_income,
)
from finsight_gateway.domain.models import Account, Goal, InsightThresholds, Recommendation, Transaction
from finsight_gateway.utils.currency import format_currency

# Rule thresholds
TOP_CATEGORY_INCOME_SHARE = 0.2
TOP_CATEGORY_REDUCTION = 0.15
INVESTING_MIN_SAVINGS = 5000
INVESTING_MIN_BALANCE = 10000
INVESTING_SAVINGS_SHARE = 0.3
INVESTING_MAX_MONTHLY = 10000
INVESTING_ANNUAL_RETURN = 1.12
EMERGENCY_SAVINGS_SHARE = 0.5
DEBT_SAVINGS_SHARE = 0.3
DEBT_MAX_MONTHLY = 5000
GOAL_SAVINGS_SHARE = 0.4


@dataclass
class FinancialSnapshot:
    """30-day aggregates the rules evaluate"""

    total_balance: float
    monthly_income: float
    monthly_expenses: float
    category_expenses: Dict[str, float]
    accounts: List[Account]
    active_goals: List[Goal]
    currency: str
    emergency_fund_months: int = 6

    @property
    def monthly_savings(self) -> float:
        return self.monthly_income - self.monthly_expenses


def build_snapshot(
    accounts: List[Account],
    recent: List[Transaction],
    goals: List[Goal],
    currency: str,
    classifier: TransactionClassifier,
    emergency_fund_months: int = 6,
) -> FinancialSnapshot:
    categories: Dict[str, float] = defaultdict(float)
    for txn in filter_kind(recent, classifier, TransactionKind.EXPENSE):
        categories[derive_category(txn)] += abs(txn.amount)

    return FinancialSnapshot(
        total_balance=sum(a.current_balance for a in accounts),
        monthly_income=total_income(recent, classifier),
        monthly_expenses=total_expenses(recent, classifier),
        category_expenses=dict(categories),
        accounts=accounts,
        active_goals=[g for g in goals if g.status == "active"],
        currency=currency,
        emergency_fund_months=emergency_fund_months,
    )


def reduce_top_category(snap: FinancialSnapshot) -> Optional[Recommendation]:
    if not snap.category_expenses or snap.monthly_income <= 0:
        return None

    category, spent = max(snap.category_expenses.items(), key=lambda item: item[1])
    if spent <= snap.monthly_income * TOP_CATEGORY_INCOME_SHARE:
        return None

    savings = spent * TOP_CATEGORY_REDUCTION
    share = spent / snap.monthly_income * 100
    return Recommendation(
        id="reduce-top-category",
        title=f"Reduce {category} Spending",
        description=(
            f"Your {category.lower()} expenses are {share:.0f}% of your income. "
            f"Consider reducing by {TOP_CATEGORY_REDUCTION * 100:.0f}%."
        ),
        action=(
            f"Set a monthly limit of {format_currency(spent - savings, snap.currency)} for {category}"
        ),
        impact=f"Save {format_currency(savings, snap.currency)}/month",
        confidence="high",
        category=category,
        potential_savings=savings,
    )


def start_investing(snap: FinancialSnapshot) -> Optional[Recommendation]:
    if snap.monthly_savings <= INVESTING_MIN_SAVINGS or snap.total_balance <= INVESTING_MIN_BALANCE:
        return None

    amount = min(snap.monthly_savings * INVESTING_SAVINGS_SHARE, INVESTING_MAX_MONTHLY)
    return Recommendation(
        id="start-investing",
        title="Start a Monthly Investment Plan",
        description=(
            f"You're saving {format_currency(snap.monthly_savings, snap.currency)}/month. "
            f"Consider investing {format_currency(amount, snap.currency)} in diversified funds."
        ),
        action="Set up an automatic monthly investment",
        impact=f"Grow wealth by {format_currency(amount * 12, snap.currency)}/year",
        confidence="high",
        potential_growth=amount * 12 * INVESTING_ANNUAL_RETURN,
    )


def build_emergency_fund(snap: FinancialSnapshot) -> Optional[Recommendation]:
    target = snap.monthly_expenses * snap.emergency_fund_months
    if snap.total_balance >= target:
        return None

    gap = target - snap.total_balance
    monthly = max(min(snap.monthly_savings * EMERGENCY_SAVINGS_SHARE, gap), 0.0)
    if monthly > 0:
        impact = f"Reach target in {math.ceil(gap / monthly)} months"
    else:
        impact = "Free up part of your monthly budget to start the fund"

    return Recommendation(
        id="build-emergency-fund",
        title="Build Emergency Fund",
        description=(
            f"Your emergency fund should cover {snap.emergency_fund_months} months of expenses "
            f"({format_currency(target, snap.currency)}). "
            f"You currently have {format_currency(snap.total_balance, snap.currency)}."
        ),
        action=f"Save {format_currency(monthly, snap.currency)}/month",
        impact=impact,
        confidence="high",
        target_amount=target,
    )


def pay_off_debt(snap: FinancialSnapshot) -> Optional[Recommendation]:
    liabilities = [a for a in snap.accounts if a.current_balance < 0]
    if not liabilities:
        return None

    largest = max(liabilities, key=lambda a: abs(a.current_balance))
    extra = max(min(snap.monthly_savings * DEBT_SAVINGS_SHARE, DEBT_MAX_MONTHLY), 0.0)
    return Recommendation(
        id="pay-off-debt",
        title="Pay Off High-Interest Debt First",
        description=(
            f"Focus on paying off {largest.name} "
            f"({format_currency(abs(largest.current_balance), snap.currency)}) to reduce interest payments."
        ),
        action=f"Allocate an extra {format_currency(extra, snap.currency)}/month towards debt",
        impact="Reduce debt faster and save on interest",
        confidence="high",
        account_name=largest.name,
    )


def increase_goal_contributions(snap: FinancialSnapshot) -> Optional[Recommendation]:
    if not snap.active_goals:
        return None

    total_remaining = sum(g.target_amount - g.current_amount for g in snap.active_goals)
    contribution = min(snap.monthly_savings * GOAL_SAVINGS_SHARE, total_remaining / 12)
    if contribution > 0:
        months_earlier = max(math.ceil(12 - total_remaining / (contribution * 12) * 12), 0)
        impact = f"Achieve goals {months_earlier} months earlier"
    else:
        contribution = 0.0
        impact = "Review your budget to make room for goal contributions"

    return Recommendation(
        id="increase-goal-contributions",
        title="Increase Goal Contributions",
        description=(
            f"You have {len(snap.active_goals)} active goal(s). "
            "Increase monthly contributions to reach them faster."
        ),
        action=f"Allocate {format_currency(contribution, snap.currency)}/month across your goals",
        impact=impact,
        confidence="medium",
        affected_goals=len(snap.active_goals),
    )


# Evaluated in priority order
RULES: List[Callable[[FinancialSnapshot], Optional[Recommendation]]] = [
    reduce_top_category,
    start_investing,
    build_emergency_fund,
    pay_off_debt,
    increase_goal_contributions,
]


def generate_recommendations(
    snapshot: FinancialSnapshot, thresholds: InsightThresholds | None = None
) -> List[Recommendation]:
    """Apply every rule in order and keep at most `max_recommendations`"""
    thresholds = thresholds or InsightThresholds()
    recommendations = [rec for rec in (rule(snapshot) for rule in RULES) if rec is not None]
    return recommendations[: thresholds.max_recommendations]
