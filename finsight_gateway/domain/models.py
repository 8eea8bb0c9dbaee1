"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List, Optional


@dataclass
class Account:
    """Institution-scoped balance record (liabilities carry a negative balance)"""

    id: str
    user_id: str
    name: str
    type: str
    subtype: str
    current_balance: float
    available_balance: Optional[float] = None
    currency: str = "USD"
    official_name: Optional[str] = None


@dataclass
class Transaction:
    """Synced bank transaction; negative amount = outflow"""

    id: str
    user_id: str
    account_id: str
    amount: float
    date: date
    name: str
    merchant_name: Optional[str] = None
    category: List[str] = field(default_factory=list)
    pending: bool = False
    is_anomaly: bool = False
    is_recurring: bool = False
    tags: List[str] = field(default_factory=list)


@dataclass
class Goal:
    """User savings goal"""

    id: str
    user_id: str
    name: str
    target_amount: float
    current_amount: float = 0.0
    monthly_contribution: Optional[float] = None
    status: str = "active"  # active | completed | paused | cancelled
    deadline: Optional[date] = None
    category: str = "savings"
    priority: str = "medium"
    currency: str = "USD"
    description: Optional[str] = None


@dataclass
class InsightThresholds:
    """Tunable heuristics for the insights pipeline"""

    monthly_trend_threshold_pct: float = 10.0
    monthly_trend_high_pct: float = 25.0
    category_trend_threshold_pct: float = 25.0
    category_trend_high_pct: float = 50.0
    anomaly_multiplier: float = 3.0
    max_anomalies: int = 10
    recurring_min_occurrences: int = 3
    recurring_max_cv: float = 0.10
    recurring_min_interval_days: float = 25.0
    recurring_max_interval_days: float = 35.0
    max_recurring_payments: int = 10
    max_recommendations: int = 5
    emergency_fund_months: int = 6


@dataclass
class TransactionWindows:
    """Trailing lookback windows relative to a reference day"""

    today: date
    last_30: List[Transaction]
    last_60: List[Transaction]
    last_90: List[Transaction]
    last_180: List[Transaction]
    last_365: List[Transaction]


# ----- Derived, request-scoped records -----


@dataclass
class TrendInsight:
    type: str  # monthly_trend | category_trend
    title: str
    description: str
    change: float
    current: float
    previous: float
    severity: str
    category: Optional[str] = None


@dataclass
class MonthlyExpense:
    month: str
    expenses: float


@dataclass
class TrendSummary:
    current_month: float
    previous_month: float
    current_quarter: float
    savings_rate: Optional[float] = None


@dataclass
class TrendReport:
    insights: List[TrendInsight]
    monthly_data: List[MonthlyExpense]
    summary: TrendSummary


@dataclass
class BalanceForecast:
    month: str
    predicted_balance: float
    confidence: str


@dataclass
class GoalProjection:
    goal_id: str
    goal_name: str
    estimated_completion: Optional[date]
    confidence: str
    message: str
    months_remaining: Optional[int] = None


@dataclass
class RecurringPayment:
    name: str
    amount: float
    frequency: str
    next_expected_date: date
    confidence: str
    last_occurrence: date
    occurrences: int


@dataclass
class PredictionReport:
    cash_balance: List[BalanceForecast]
    goal_completions: List[GoalProjection]
    recurring_payments: List[RecurringPayment]
    avg_monthly_change: float


@dataclass
class Anomaly:
    type: str  # duplicate | unusual_amount
    severity: str
    title: str
    description: str
    amount: float
    date: date
    transaction_ids: List[str] = field(default_factory=list)
    average: Optional[float] = None
    category: Optional[str] = None


@dataclass
class Recommendation:
    id: str
    title: str
    description: str
    action: str
    impact: str
    confidence: str
    category: Optional[str] = None
    potential_savings: Optional[float] = None
    potential_growth: Optional[float] = None
    target_amount: Optional[float] = None
    account_name: Optional[str] = None
    affected_goals: Optional[int] = None


@dataclass
class GoalInsight:
    goal: Goal
    progress: float
    remaining: float
    estimated_completion: Optional[date]
    tip: str


@dataclass
class AdvancedInsights:
    """Output of the full insights pipeline for one request"""

    trend_insights: TrendReport
    predictions: PredictionReport
    recommendations: List[Recommendation]
    anomalies: List[Anomaly]
    goal_insights: List[GoalInsight]
    currency: str
    anomaly_flags: Dict[str, bool] = field(default_factory=dict)


@dataclass
class Institution:
    institution_name: str
    accounts: List[Account]
    total_balance: float
