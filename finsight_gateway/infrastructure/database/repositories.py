"""Data access layer - user-scoped repositories returning domain models"""

import json
import uuid
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional, Tuple
from sqlalchemy import String, case, cast, or_
from sqlalchemy.orm import Session
from finsight_gateway.infrastructure.database.models import AccountRecord, TransactionRecord, GoalRecord
from finsight_gateway.domain.models import Account, Transaction, Goal
from finsight_gateway.domain.goals import reaches_target
from finsight_gateway.domain.exceptions import (
    GoalNotFoundError,
    InvalidContributionError,
    TransactionNotFoundError,
)

GOAL_FIELDS = (
    "name",
    "description",
    "target_amount",
    "current_amount",
    "category",
    "deadline",
    "priority",
    "status",
    "monthly_contribution",
)

TRANSACTION_FIELDS = ("tags", "is_recurring")


def _to_account(record: AccountRecord) -> Account:
    return Account(
        id=str(record.id),
        user_id=record.user_id,
        name=record.name,
        official_name=record.official_name,
        type=record.type,
        subtype=record.subtype,
        current_balance=record.current_balance or 0.0,
        available_balance=record.available_balance,
        currency=record.currency,
    )


def _to_transaction(record: TransactionRecord) -> Transaction:
    return Transaction(
        id=str(record.id),
        user_id=record.user_id,
        account_id=str(record.account_id),
        amount=record.amount,
        date=record.date,
        name=record.name,
        merchant_name=record.merchant_name,
        category=list(record.category or []),
        pending=record.pending,
        is_anomaly=record.is_anomaly,
        is_recurring=record.is_recurring,
        tags=list(record.tags or []),
    )


def _to_goal(record: GoalRecord) -> Goal:
    return Goal(
        id=str(record.id),
        user_id=record.user_id,
        name=record.name,
        description=record.description,
        target_amount=record.target_amount,
        current_amount=record.current_amount,
        monthly_contribution=record.monthly_contribution,
        status=record.status,
        deadline=record.deadline,
        category=record.category,
        priority=record.priority,
        currency=record.currency,
    )


class AccountRepository:
    """Repository for synced bank accounts"""

    def __init__(self, db: Session):
        self.db = db

    def list_for_user(self, user_id: str) -> List[Account]:
        records = (
            self.db.query(AccountRecord)
            .filter(AccountRecord.user_id == user_id)
            .order_by(AccountRecord.created_at, AccountRecord.name)
            .all()
        )
        return [_to_account(r) for r in records]


class TransactionRepository:
    """Repository for synced transactions"""

    def __init__(self, db: Session):
        self.db = db

    def list_for_user(self, user_id: str, since: Optional[date] = None) -> List[Transaction]:
        """All transactions for a user, newest first"""
        query = self.db.query(TransactionRecord).filter(TransactionRecord.user_id == user_id)
        if since is not None:
            query = query.filter(TransactionRecord.date >= since)
        records = query.order_by(TransactionRecord.date.desc(), TransactionRecord.created_at.desc()).all()
        return [_to_transaction(r) for r in records]

    def _get_record(self, user_id: str, transaction_id: uuid.UUID) -> TransactionRecord:
        record = (
            self.db.query(TransactionRecord)
            .filter(TransactionRecord.id == transaction_id, TransactionRecord.user_id == user_id)
            .first()
        )
        if record is None:
            raise TransactionNotFoundError(f"Transaction {transaction_id} not found")
        return record

    def get(self, user_id: str, transaction_id: uuid.UUID) -> Transaction:
        return _to_transaction(self._get_record(user_id, transaction_id))

    def latest(self, user_id: str, limit: int = 3) -> List[Transaction]:
        records = (
            self.db.query(TransactionRecord)
            .filter(TransactionRecord.user_id == user_id)
            .order_by(TransactionRecord.date.desc(), TransactionRecord.created_at.desc())
            .limit(limit)
            .all()
        )
        return [_to_transaction(r) for r in records]

    def update(self, user_id: str, transaction_id: uuid.UUID, changes: Dict[str, Any]) -> Transaction:
        """Apply user annotations (tags, recurring flag); synced fields stay untouched"""
        record = self._get_record(user_id, transaction_id)
        for key, value in changes.items():
            if key in TRANSACTION_FIELDS:
                setattr(record, key, value)
        self.db.flush()
        return _to_transaction(record)

    def search(
        self,
        user_id: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        category: Optional[str] = None,
        account_id: Optional[uuid.UUID] = None,
        search: Optional[str] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> Tuple[List[Transaction], int]:
        """Filtered, paginated listing; returns (page, total matching)"""
        query = self.db.query(TransactionRecord).filter(TransactionRecord.user_id == user_id)

        if start_date is not None:
            query = query.filter(TransactionRecord.date >= start_date)
        if end_date is not None:
            query = query.filter(TransactionRecord.date <= end_date)
        if category:
            # category is serialized JSON; match one whole, identically encoded element
            query = query.filter(
                cast(TransactionRecord.category, String).contains(json.dumps(category), autoescape=True)
            )
        if account_id is not None:
            query = query.filter(TransactionRecord.account_id == account_id)
        if search:
            query = query.filter(
                or_(
                    TransactionRecord.name.icontains(search, autoescape=True),
                    TransactionRecord.merchant_name.icontains(search, autoescape=True),
                )
            )

        total = query.count()
        records = (
            query.order_by(TransactionRecord.date.desc(), TransactionRecord.created_at.desc())
            .offset(offset)
            .limit(limit)
            .all()
        )
        return [_to_transaction(r) for r in records], total

    def set_anomaly_flags(self, user_id: str, flags: Dict[str, bool]) -> int:
        """
        Write `is_anomaly` for the given transactions, touching only rows whose
        value changes. Returns how many transactions became flagged.
        """
        if not flags:
            return 0

        ids = [uuid.UUID(txn_id) for txn_id in flags]
        records = (
            self.db.query(TransactionRecord)
            .filter(TransactionRecord.user_id == user_id, TransactionRecord.id.in_(ids))
            .all()
        )

        newly_flagged = 0
        for record in records:
            desired = flags[str(record.id)]
            if record.is_anomaly != desired:
                record.is_anomaly = desired
                if desired:
                    newly_flagged += 1

        self.db.flush()
        return newly_flagged


class GoalRepository:
    """Repository for user goals"""

    def __init__(self, db: Session):
        self.db = db

    def _get_record(self, user_id: str, goal_id: uuid.UUID) -> GoalRecord:
        record = (
            self.db.query(GoalRecord)
            .filter(GoalRecord.id == goal_id, GoalRecord.user_id == user_id)
            .first()
        )
        if record is None:
            raise GoalNotFoundError(f"Goal {goal_id} not found")
        return record

    def _complete_if_reached(self, record: GoalRecord) -> None:
        if reaches_target(_to_goal(record)):
            record.status = "completed"
            record.completed_at = datetime.now(timezone.utc)

    def list_for_user(self, user_id: str, status: Optional[str] = None) -> List[Goal]:
        """Goals ordered by priority (high first) then nearest deadline"""
        query = self.db.query(GoalRecord).filter(GoalRecord.user_id == user_id)
        if status:
            query = query.filter(GoalRecord.status == status)

        priority_rank = case({"high": 0, "medium": 1, "low": 2}, value=GoalRecord.priority, else_=3)
        records = query.order_by(
            priority_rank,
            GoalRecord.deadline.is_(None),
            GoalRecord.deadline,
            GoalRecord.created_at,
        ).all()
        return [_to_goal(r) for r in records]

    def get(self, user_id: str, goal_id: uuid.UUID) -> Goal:
        return _to_goal(self._get_record(user_id, goal_id))

    def create(self, user_id: str, currency: str, **fields: Any) -> Goal:
        values = {k: v for k, v in fields.items() if k in GOAL_FIELDS and k != "status"}
        values["current_amount"] = values.get("current_amount") or 0.0
        values["category"] = values.get("category") or "savings"
        values["priority"] = values.get("priority") or "medium"
        record = GoalRecord(user_id=user_id, currency=currency, status="active", **values)
        self._complete_if_reached(record)
        self.db.add(record)
        self.db.flush()
        return _to_goal(record)

    def update(self, user_id: str, goal_id: uuid.UUID, changes: Dict[str, Any]) -> Goal:
        """Apply only the provided fields"""
        record = self._get_record(user_id, goal_id)
        for key, value in changes.items():
            if key in GOAL_FIELDS:
                setattr(record, key, value)
        self._complete_if_reached(record)
        self.db.flush()
        return _to_goal(record)

    def contribute(self, user_id: str, goal_id: uuid.UUID, amount: float) -> Goal:
        if amount is None or amount <= 0:
            raise InvalidContributionError("Contribution amount must be positive")

        record = self._get_record(user_id, goal_id)
        record.current_amount = (record.current_amount or 0.0) + amount
        self._complete_if_reached(record)
        self.db.flush()
        return _to_goal(record)

    def delete(self, user_id: str, goal_id: uuid.UUID) -> None:
        record = self._get_record(user_id, goal_id)
        self.db.delete(record)
        self.db.flush()
