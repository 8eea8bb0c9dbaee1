"""/v1/goals - Goal CRUD and contributions"""

import uuid
import logging
from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from finsight_gateway.api.v1.schemas import (
    ContributionRequest,
    GoalCreateRequest,
    GoalListResponse,
    GoalResponse,
    GoalSchema,
    GoalUpdateRequest,
    MessageResponse,
)
from finsight_gateway.api.dependencies import get_current_user_id, get_request_id
from finsight_gateway.config import settings
from finsight_gateway.domain.accounts import primary_currency
from finsight_gateway.domain.exceptions import GoalNotFoundError, InvalidContributionError
from finsight_gateway.domain.goals import build_goal_insight
from finsight_gateway.domain.models import Goal, GoalInsight
from finsight_gateway.infrastructure.database.session import get_db
from finsight_gateway.infrastructure.database.repositories import AccountRepository, GoalRepository
from finsight_gateway.infrastructure.observability.logging import log_goal_event
from finsight_gateway.infrastructure.observability.metrics import record_goal_event

router = APIRouter()


def goal_schema(insight: GoalInsight) -> GoalSchema:
    """Flatten a goal and its derived fields into the response shape"""
    return GoalSchema(
        **vars(insight.goal),
        progress=insight.progress,
        remaining=insight.remaining,
        estimated_completion=insight.estimated_completion,
        tip=insight.tip,
    )


def _goal_response(goal: Goal) -> GoalResponse:
    return GoalResponse(goal=goal_schema(build_goal_insight(goal, date.today())))


def _parse_goal_id(goal_id: str) -> uuid.UUID:
    try:
        return uuid.UUID(goal_id)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid goal ID format")


@router.get("/goals", response_model=GoalListResponse)
def list_goals(
    status: Optional[str] = Query(None, description="Filter by goal status"),
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """List goals, highest priority and nearest deadline first"""
    today = date.today()
    goals = GoalRepository(db).list_for_user(user_id, status=status)
    return GoalListResponse(goals=[goal_schema(build_goal_insight(g, today)) for g in goals])


@router.get("/goals/{goal_id}", response_model=GoalResponse)
def get_goal(goal_id: str, user_id: str = Depends(get_current_user_id), db: Session = Depends(get_db)):
    goal_uuid = _parse_goal_id(goal_id)
    try:
        return _goal_response(GoalRepository(db).get(user_id, goal_uuid))
    except GoalNotFoundError:
        raise HTTPException(status_code=404, detail="Goal not found")


@router.post("/goals", response_model=GoalResponse, status_code=201)
def create_goal(
    request_body: GoalCreateRequest,
    request: Request,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Create an active goal in the user's primary account currency"""
    request_id = get_request_id(request)
    try:
        currency = primary_currency(AccountRepository(db).list_for_user(user_id), settings.default_currency)
        goal = GoalRepository(db).create(user_id, currency, **request_body.model_dump())
        db.commit()

        record_goal_event("created", completed=goal.status == "completed")
        log_goal_event(request_id, user_id, goal.id, "created")
        return _goal_response(goal)

    except Exception as e:
        db.rollback()
        logging.error(f"Create goal error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Failed to create goal")


@router.put("/goals/{goal_id}", response_model=GoalResponse)
def update_goal(
    goal_id: str,
    request_body: GoalUpdateRequest,
    request: Request,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    goal_uuid = _parse_goal_id(goal_id)
    request_id = get_request_id(request)
    try:
        repo = GoalRepository(db)
        was_active = repo.get(user_id, goal_uuid).status == "active"
        goal = repo.update(user_id, goal_uuid, request_body.model_dump(exclude_unset=True))
        db.commit()

        record_goal_event("updated", completed=was_active and goal.status == "completed")
        log_goal_event(request_id, user_id, goal.id, "updated")
        return _goal_response(goal)

    except GoalNotFoundError:
        db.rollback()
        raise HTTPException(status_code=404, detail="Goal not found")
    except Exception as e:
        db.rollback()
        logging.error(f"Update goal error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Failed to update goal")


@router.delete("/goals/{goal_id}", response_model=MessageResponse)
def delete_goal(
    goal_id: str,
    request: Request,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    goal_uuid = _parse_goal_id(goal_id)
    request_id = get_request_id(request)
    try:
        GoalRepository(db).delete(user_id, goal_uuid)
        db.commit()

        record_goal_event("deleted")
        log_goal_event(request_id, user_id, goal_id, "deleted")
        return MessageResponse(message="Goal deleted successfully")

    except GoalNotFoundError:
        db.rollback()
        raise HTTPException(status_code=404, detail="Goal not found")
    except Exception as e:
        db.rollback()
        logging.error(f"Delete goal error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Failed to delete goal")


@router.post("/goals/{goal_id}/contribute", response_model=GoalResponse)
def contribute_to_goal(
    goal_id: str,
    request_body: ContributionRequest,
    request: Request,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Add money to a goal; reaching the target completes it"""
    goal_uuid = _parse_goal_id(goal_id)
    request_id = get_request_id(request)
    try:
        repo = GoalRepository(db)
        was_active = repo.get(user_id, goal_uuid).status == "active"
        goal = repo.contribute(user_id, goal_uuid, request_body.amount)
        db.commit()

        record_goal_event("contributed", completed=was_active and goal.status == "completed")
        log_goal_event(request_id, user_id, goal.id, "contributed")
        return _goal_response(goal)

    except InvalidContributionError as e:
        db.rollback()
        logging.warning(f"Invalid contribution: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=400, detail="Invalid contribution amount")
    except GoalNotFoundError:
        db.rollback()
        raise HTTPException(status_code=404, detail="Goal not found")
    except Exception as e:
        db.rollback()
        logging.error(f"Contribute to goal error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Failed to add contribution")
