"""Pytest fixtures for testing"""

import uuid
import pytest
from datetime import date, timedelta
from typing import Callable, Dict, Generator, List, Optional
from fastapi.testclient import TestClient
from jose import jwt
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from finsight_gateway.api.main import create_app
from finsight_gateway.config import settings
from finsight_gateway.domain.models import Account, Goal, Transaction
from finsight_gateway.infrastructure.database.models import AccountRecord, Base, GoalRecord, TransactionRecord
from finsight_gateway.infrastructure.database.session import get_db


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

TEST_USER = "user_test"
OTHER_USER = "someone_else"


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db: Session) -> TestClient:
    """Create FastAPI test client with test database"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    return TestClient(app)


def make_token(user_id: str) -> str:
    return jwt.encode({"userId": user_id}, settings.jwt_secret, algorithm=settings.jwt_algorithm)


@pytest.fixture
def auth_headers() -> Dict[str, str]:
    """Bearer header for TEST_USER"""
    return {"Authorization": f"Bearer {make_token(TEST_USER)}"}


@pytest.fixture
def other_user_headers() -> Dict[str, str]:
    return {"Authorization": f"Bearer {make_token(OTHER_USER)}"}


@pytest.fixture
def today() -> date:
    return date.today()


@pytest.fixture
def txn() -> Callable[..., Transaction]:
    """Build domain transactions with sensible defaults"""
    counter = {"n": 0}

    def build(
        amount: float,
        day: date,
        name: str = "Coffee Shop",
        category: Optional[List[str]] = None,
        merchant_name: Optional[str] = None,
        txn_id: Optional[str] = None,
    ) -> Transaction:
        counter["n"] += 1
        return Transaction(
            id=txn_id or f"txn_{counter['n']}",
            user_id=TEST_USER,
            account_id="acct_1",
            amount=amount,
            date=day,
            name=name,
            merchant_name=merchant_name,
            category=category if category is not None else [],
        )

    return build


@pytest.fixture
def checking_account() -> Account:
    return Account(
        id="acct_1",
        user_id=TEST_USER,
        name="Everyday Checking",
        type="depository",
        subtype="checking",
        current_balance=5000.0,
        currency="USD",
    )


@pytest.fixture
def savings_goal() -> Goal:
    return Goal(
        id="goal_1",
        user_id=TEST_USER,
        name="Vacation",
        target_amount=12000.0,
        current_amount=2000.0,
        monthly_contribution=1000.0,
    )


@pytest.fixture
def seed_account(db: Session) -> Callable[..., AccountRecord]:
    """Insert an account row for a user"""

    def seed(
        user_id: str = TEST_USER,
        name: str = "Chase Checking",
        current_balance: float = 5000.0,
        currency: str = "USD",
        official_name: Optional[str] = None,
        type: str = "depository",
        subtype: str = "checking",
    ) -> AccountRecord:
        record = AccountRecord(
            user_id=user_id,
            name=name,
            official_name=official_name,
            type=type,
            subtype=subtype,
            current_balance=current_balance,
            currency=currency,
        )
        db.add(record)
        db.commit()
        return record

    return seed


@pytest.fixture
def seed_transaction(db: Session) -> Callable[..., TransactionRecord]:
    """Insert a transaction row against an existing account"""

    def seed(
        account: AccountRecord,
        amount: float,
        day: date,
        name: str = "Coffee Shop",
        category: Optional[List[str]] = None,
        merchant_name: Optional[str] = None,
        is_anomaly: bool = False,
    ) -> TransactionRecord:
        record = TransactionRecord(
            user_id=account.user_id,
            account_id=account.id,
            external_transaction_id=str(uuid.uuid4()),
            amount=amount,
            date=day,
            name=name,
            merchant_name=merchant_name,
            category=category or [],
            is_anomaly=is_anomaly,
        )
        db.add(record)
        db.commit()
        return record

    return seed


@pytest.fixture
def seed_goal(db: Session) -> Callable[..., GoalRecord]:
    def seed(
        user_id: str = TEST_USER,
        name: str = "Emergency Fund",
        target_amount: float = 12000.0,
        current_amount: float = 2000.0,
        monthly_contribution: Optional[float] = 1000.0,
        status: str = "active",
        priority: str = "medium",
        deadline: Optional[date] = None,
    ) -> GoalRecord:
        record = GoalRecord(
            user_id=user_id,
            name=name,
            target_amount=target_amount,
            current_amount=current_amount,
            monthly_contribution=monthly_contribution,
            status=status,
            priority=priority,
            deadline=deadline,
        )
        db.add(record)
        db.commit()
        return record

    return seed


@pytest.fixture
def spending_history(
    seed_account: Callable[..., AccountRecord],
    seed_transaction: Callable[..., TransactionRecord],
    today: date,
) -> AccountRecord:
    """Two months of payroll plus grocery spend that grows month over month"""
    account = seed_account()
    for offset in (5, 35):
        seed_transaction(account, 4000.0, today - timedelta(days=offset), name="Payroll Deposit", category=["Income"])
    for offset in (2, 9, 16):
        seed_transaction(account, -200.0, today - timedelta(days=offset), name="Whole Foods", category=["Groceries"])
    for offset in (40, 47):
        seed_transaction(account, -100.0, today - timedelta(days=offset), name="Whole Foods", category=["Groceries"])
    return account
