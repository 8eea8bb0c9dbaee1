"""/v1/transactions - Transaction listing, annotation, and anomaly flagging"""

import uuid
import logging
from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from finsight_gateway.api.v1.schemas import (
    AnomalyScanResponse,
    LatestTransactionsResponse,
    TransactionListResponse,
    TransactionResponse,
    TransactionSchema,
    TransactionUpdateRequest,
)
from finsight_gateway.api.dependencies import get_current_user_id, get_request_id, get_thresholds
from finsight_gateway.domain.anomalies import anomaly_flags
from finsight_gateway.domain.exceptions import TransactionNotFoundError
from finsight_gateway.domain.models import InsightThresholds
from finsight_gateway.infrastructure.database.session import get_db
from finsight_gateway.infrastructure.database.repositories import TransactionRepository
from finsight_gateway.infrastructure.observability.metrics import anomaly_flags_counter

router = APIRouter()

LATEST_TRANSACTIONS_LIMIT = 3


@router.get("/transactions", response_model=TransactionListResponse)
def list_transactions(
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    category: Optional[str] = Query(None, description="Match any category label"),
    account_id: Optional[str] = Query(None),
    search: Optional[str] = Query(None, description="Case-insensitive name/merchant match"),
    limit: int = Query(50, ge=1, le=500),
    offset: int = Query(0, ge=0),
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """List transactions newest first with optional filters"""
    account_uuid = None
    if account_id:
        try:
            account_uuid = uuid.UUID(account_id)
        except ValueError:
            raise HTTPException(status_code=400, detail="Invalid account ID format")

    transactions, total = TransactionRepository(db).search(
        user_id,
        start_date=start_date,
        end_date=end_date,
        category=category,
        account_id=account_uuid,
        search=search,
        limit=limit,
        offset=offset,
    )

    return TransactionListResponse(
        transactions=[TransactionSchema.model_validate(t) for t in transactions],
        total=total,
        limit=limit,
        offset=offset,
    )


def _parse_transaction_id(transaction_id: str) -> uuid.UUID:
    try:
        return uuid.UUID(transaction_id)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid transaction ID format")


@router.get("/transactions/latest/summary", response_model=LatestTransactionsResponse)
def latest_transactions(user_id: str = Depends(get_current_user_id), db: Session = Depends(get_db)):
    """Most recent transactions for dashboard summaries"""
    transactions = TransactionRepository(db).latest(user_id, limit=LATEST_TRANSACTIONS_LIMIT)
    return LatestTransactionsResponse(transactions=[TransactionSchema.model_validate(t) for t in transactions])


@router.get("/transactions/{transaction_id}", response_model=TransactionResponse)
def get_transaction(transaction_id: str, user_id: str = Depends(get_current_user_id), db: Session = Depends(get_db)):
    transaction_uuid = _parse_transaction_id(transaction_id)
    try:
        transaction = TransactionRepository(db).get(user_id, transaction_uuid)
    except TransactionNotFoundError:
        raise HTTPException(status_code=404, detail="Transaction not found")
    return TransactionResponse(transaction=TransactionSchema.model_validate(transaction))


@router.patch("/transactions/{transaction_id}", response_model=TransactionResponse)
def update_transaction(
    transaction_id: str,
    request_body: TransactionUpdateRequest,
    request: Request,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Set tags and/or the recurring flag"""
    transaction_uuid = _parse_transaction_id(transaction_id)
    request_id = get_request_id(request)
    try:
        transaction = TransactionRepository(db).update(
            user_id, transaction_uuid, request_body.model_dump(exclude_unset=True)
        )
        db.commit()
        return TransactionResponse(transaction=TransactionSchema.model_validate(transaction))

    except TransactionNotFoundError:
        db.rollback()
        raise HTTPException(status_code=404, detail="Transaction not found")
    except Exception as e:
        db.rollback()
        logging.error(f"Update transaction error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Failed to update transaction")


@router.post("/transactions/detect-anomalies", response_model=AnomalyScanResponse)
def detect_transaction_anomalies(
    request: Request,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    thresholds: InsightThresholds = Depends(get_thresholds),
):
    """Recompute is_anomaly over the user's full history"""
    request_id = get_request_id(request)
    try:
        repo = TransactionRepository(db)
        history = repo.list_for_user(user_id)
        flags = anomaly_flags(history, history, thresholds.anomaly_multiplier)
        newly_flagged = repo.set_anomaly_flags(user_id, flags)
        db.commit()

        if newly_flagged:
            anomaly_flags_counter.inc(newly_flagged)
        logging.info(
            "Anomaly detection completed",
            extra={"request_id": request_id, "user_id": user_id, "anomalies_detected": newly_flagged},
        )
        return AnomalyScanResponse(message="Anomaly detection completed", anomalies_detected=newly_flagged)

    except Exception as e:
        db.rollback()
        logging.error(f"Detect anomalies error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Failed to detect anomalies")
