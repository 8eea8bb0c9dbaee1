"""Trailing lookback windows over a user's transaction history"""

from datetime import date
from typing import List
from finsight_gateway.domain.models import Transaction, TransactionWindows
from finsight_gateway.utils.date_utils import days_ago


def transactions_since(transactions: List[Transaction], start: date) -> List[Transaction]:
    return [t for t in transactions if t.date >= start]


def split_windows(transactions: List[Transaction], today: date) -> TransactionWindows:
    """Slice history into 30/60/90/180/365-day windows ending at `today`"""
    return TransactionWindows(
        today=today,
        last_30=transactions_since(transactions, days_ago(today, 30)),
        last_60=transactions_since(transactions, days_ago(today, 60)),
        last_90=transactions_since(transactions, days_ago(today, 90)),
        last_180=transactions_since(transactions, days_ago(today, 180)),
        last_365=transactions_since(transactions, days_ago(today, 365)),
    )
