"""Pydantic schemas for API request/response validation"""

from datetime import date, datetime
from typing import List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

GoalCategory = Literal["savings", "purchase", "debt", "investment", "emergency", "other"]
GoalPriority = Literal["low", "medium", "high"]
GoalStatus = Literal["active", "completed", "paused", "cancelled"]


class ApiModel(BaseModel):
    """camelCase on the wire; accepts snake_case input and domain dataclasses"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


# ----- Insights -----


class TrendInsightSchema(ApiModel):
    type: str
    title: str
    description: str
    change: float
    current: float
    previous: float
    severity: str
    category: Optional[str] = None


class MonthlyExpenseSchema(ApiModel):
    month: str
    expenses: float


class TrendSummarySchema(ApiModel):
    current_month: float
    previous_month: float
    current_quarter: float
    savings_rate: Optional[float] = None


class TrendReportSchema(ApiModel):
    insights: List[TrendInsightSchema]
    monthly_data: List[MonthlyExpenseSchema]
    summary: TrendSummarySchema


class BalanceForecastSchema(ApiModel):
    month: str
    predicted_balance: float
    confidence: str


class GoalProjectionSchema(ApiModel):
    goal_id: str
    goal_name: str
    estimated_completion: Optional[date] = None
    months_remaining: Optional[int] = None
    confidence: str
    message: str


class RecurringPaymentSchema(ApiModel):
    name: str
    amount: float
    frequency: str
    next_expected_date: date
    confidence: str
    last_occurrence: date
    occurrences: int


class PredictionReportSchema(ApiModel):
    cash_balance: List[BalanceForecastSchema]
    goal_completions: List[GoalProjectionSchema]
    recurring_payments: List[RecurringPaymentSchema]
    avg_monthly_change: float


class AnomalySchema(ApiModel):
    type: str
    severity: str
    title: str
    description: str
    amount: float
    date: date
    transaction_ids: List[str]
    average: Optional[float] = None
    category: Optional[str] = None


class RecommendationSchema(ApiModel):
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


# ----- Goals -----


class GoalSchema(ApiModel):
    """Goal with derived progress fields"""

    id: str
    name: str
    description: Optional[str] = None
    target_amount: float
    current_amount: float
    monthly_contribution: Optional[float] = None
    status: str
    deadline: Optional[date] = None
    category: str
    priority: str
    currency: str
    progress: float
    remaining: float
    estimated_completion: Optional[date] = None
    tip: str


class GoalCreateRequest(ApiModel):
    """Request body for POST /v1/goals"""

    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    target_amount: float = Field(..., gt=0, allow_inf_nan=False)
    current_amount: float = Field(0.0, ge=0, allow_inf_nan=False)
    category: GoalCategory = "savings"
    deadline: Optional[date] = None
    priority: GoalPriority = "medium"
    monthly_contribution: Optional[float] = Field(None, ge=0, allow_inf_nan=False)


class GoalUpdateRequest(ApiModel):
    """Request body for PUT /v1/goals/{goal_id}; only provided fields change"""

    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    target_amount: Optional[float] = Field(None, gt=0, allow_inf_nan=False)
    current_amount: Optional[float] = Field(None, ge=0, allow_inf_nan=False)
    category: Optional[GoalCategory] = None
    deadline: Optional[date] = None
    priority: Optional[GoalPriority] = None
    status: Optional[GoalStatus] = None
    monthly_contribution: Optional[float] = Field(None, ge=0, allow_inf_nan=False)

    # description, deadline and monthly_contribution may be cleared with null
    @field_validator("name", "target_amount", "current_amount", "category", "priority", "status")
    @classmethod
    def reject_null(cls, value):
        if value is None:
            raise ValueError("may be omitted but not null")
        return value


class ContributionRequest(ApiModel):
    """Request body for POST /v1/goals/{goal_id}/contribute"""

    amount: float = Field(..., allow_inf_nan=False)


class GoalResponse(ApiModel):
    goal: GoalSchema


class GoalListResponse(ApiModel):
    goals: List[GoalSchema]


class AdvancedInsightsResponse(ApiModel):
    """Response for GET /v1/insights/advanced"""

    trend_insights: TrendReportSchema
    predictions: PredictionReportSchema
    recommendations: List[RecommendationSchema]
    anomalies: List[AnomalySchema]
    goal_insights: List[GoalSchema]
    currency: str
    generated_at: datetime


# ----- Transactions & accounts -----


class TransactionSchema(ApiModel):
    id: str
    account_id: str
    amount: float
    date: date
    name: str
    merchant_name: Optional[str] = None
    category: List[str]
    pending: bool
    is_anomaly: bool
    is_recurring: bool
    tags: List[str]


class TransactionListResponse(ApiModel):
    transactions: List[TransactionSchema]
    total: int
    limit: int
    offset: int


class TransactionResponse(ApiModel):
    transaction: TransactionSchema


class LatestTransactionsResponse(ApiModel):
    transactions: List[TransactionSchema]


class TransactionUpdateRequest(ApiModel):
    """Request body for PATCH /v1/transactions/{transaction_id}; only provided fields change"""

    tags: Optional[List[str]] = None
    is_recurring: Optional[bool] = None

    @field_validator("tags", "is_recurring")
    @classmethod
    def reject_null(cls, value):
        if value is None:
            raise ValueError("may be omitted but not null")
        return value


class AnomalyScanResponse(ApiModel):
    message: str
    anomalies_detected: int


class AccountSchema(ApiModel):
    id: str
    name: str
    type: str
    subtype: str
    current_balance: float
    available_balance: Optional[float] = None
    currency: str


class InstitutionSchema(ApiModel):
    institution_name: str
    accounts: List[AccountSchema]
    total_balance: float


class AccountsResponse(ApiModel):
    institutions: List[InstitutionSchema]


class MessageResponse(ApiModel):
    message: str
