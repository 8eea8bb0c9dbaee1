"""Goal progress, completion projection, and savings tips"""

import math
from datetime import date
from typing import List, Optional
from finsight_gateway.domain.models import Goal, GoalInsight, GoalProjection
from finsight_gateway.utils.currency import format_currency
from finsight_gateway.utils.date_utils import add_months, long_month_label

# Average month length used to turn a day span into months
DAYS_PER_MONTH = 30


def goal_progress(goal: Goal) -> float:
    """Percent of target reached (0 for a zero target)"""
    if goal.target_amount == 0:
        return 0.0
    return goal.current_amount / goal.target_amount * 100


def goal_remaining(goal: Goal) -> float:
    return goal.target_amount - goal.current_amount


def months_to_complete(remaining: float, monthly_contribution: Optional[float]) -> Optional[int]:
    """
    Whole months of contributions needed to cover `remaining`.

    Returns None when no positive contribution is set; never negative.

    Example:
        remaining 10000, contribution 1000 -> 10
    """
    if not monthly_contribution or monthly_contribution <= 0:
        return None
    return max(math.ceil(remaining / monthly_contribution), 0)


def estimated_completion(goal: Goal, today: date) -> Optional[date]:
    months = months_to_complete(goal_remaining(goal), goal.monthly_contribution)
    if months is None:
        return None
    return add_months(today, months)


def project_goal(goal: Goal, today: date) -> GoalProjection:
    """Completion-date estimate from the goal's declared monthly contribution"""
    months = months_to_complete(goal_remaining(goal), goal.monthly_contribution)
    if months is None:
        return GoalProjection(
            goal_id=goal.id,
            goal_name=goal.name,
            estimated_completion=None,
            confidence="low",
            message="Set a monthly contribution to predict completion date",
        )

    completion = add_months(today, months)
    if months <= 6:
        confidence = "high"
    elif months <= 12:
        confidence = "medium"
    else:
        confidence = "low"

    return GoalProjection(
        goal_id=goal.id,
        goal_name=goal.name,
        estimated_completion=completion,
        months_remaining=months,
        confidence=confidence,
        message=f"Expected completion: {long_month_label(completion)}",
    )


def goal_tip(goal: Goal, today: date, currency: str | None = None) -> str:
    """Short, human-readable nudge for a goal based on contribution, deadline, and progress"""
    currency = currency or goal.currency
    progress = goal_progress(goal)
    remaining = goal_remaining(goal)

    if progress >= 100:
        return "Congratulations! You've reached your goal!"

    if goal.monthly_contribution and goal.monthly_contribution > 0:
        completion = add_months(today, months_to_complete(remaining, goal.monthly_contribution))
        contribution = format_currency(goal.monthly_contribution, currency)

        if goal.deadline:
            if completion > goal.deadline:
                months_left = (goal.deadline - today).days / DAYS_PER_MONTH
                if months_left > 0:
                    additional = math.ceil(remaining / months_left - goal.monthly_contribution)
                    if additional > 0:
                        return (
                            f"Increase your monthly contribution by "
                            f"{format_currency(additional, currency)} to meet your deadline."
                        )
            else:
                return (
                    f"On track! Continue {contribution}/month to reach your goal "
                    f"by {long_month_label(completion)}."
                )

        return f"Add {contribution}/month to reach your goal by {long_month_label(completion)}."

    if goal.deadline:
        months_left = (goal.deadline - today).days / DAYS_PER_MONTH
        if months_left > 0:
            needed = math.ceil(remaining / months_left)
            return f"Save {format_currency(needed, currency)}/month to reach your goal by the deadline."
        return "Deadline passed. Consider extending it or increasing contributions."

    if progress < 25:
        return "Just getting started! Set a monthly contribution to track progress."
    if progress < 50:
        return f"Good progress! You're {progress:.0f}% of the way there."
    if progress < 75:
        return "Over halfway! Keep up the momentum."
    return f"Almost there! Just {format_currency(remaining, currency)} to go."


def build_goal_insight(goal: Goal, today: date, currency: str | None = None) -> GoalInsight:
    return GoalInsight(
        goal=goal,
        progress=goal_progress(goal),
        remaining=goal_remaining(goal),
        estimated_completion=estimated_completion(goal, today),
        tip=goal_tip(goal, today, currency),
    )


def build_goal_insights(goals: List[Goal], today: date, currency: str) -> List[GoalInsight]:
    return [build_goal_insight(goal, today, currency) for goal in goals if goal.status == "active"]


def reaches_target(goal: Goal) -> bool:
    """An active goal completes once its balance covers the target"""
    return goal.status == "active" and goal.current_amount >= goal.target_amount
