"""Transaction classification: income / expense / transfer, and spending categories"""

from enum import Enum
from typing import Iterable, List, Protocol, Sequence
from finsight_gateway.domain.models import Transaction

DEFAULT_INCOME_KEYWORDS = ("deposit", "payroll")


class TransactionKind(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"
    TRANSFER = "transfer"


class TransactionClassifier(Protocol):
    """Strategy deciding how a transaction counts toward cash flow"""

    def classify(self, transaction: Transaction) -> TransactionKind: ...


class KeywordClassifier:
    """
    Name-based heuristic classifier.

    Rules, in order:
    - name contains a transfer keyword -> TRANSFER (none configured by default)
    - amount < 0 -> EXPENSE
    - amount > 0 and name contains an income keyword -> INCOME
    - anything else -> EXPENSE (positive amounts without an income marker are
      outflows in the bank feed's sign convention)
    """

    def __init__(
        self,
        income_keywords: Iterable[str] = DEFAULT_INCOME_KEYWORDS,
        transfer_keywords: Iterable[str] = (),
    ):
        self.income_keywords = tuple(k.lower() for k in income_keywords)
        self.transfer_keywords = tuple(k.lower() for k in transfer_keywords)

    def classify(self, transaction: Transaction) -> TransactionKind:
        name = (transaction.name or "").lower()

        if any(k in name for k in self.transfer_keywords):
            return TransactionKind.TRANSFER
        if transaction.amount < 0:
            return TransactionKind.EXPENSE
        if transaction.amount > 0 and any(k in name for k in self.income_keywords):
            return TransactionKind.INCOME
        return TransactionKind.EXPENSE


def filter_kind(
    transactions: Iterable[Transaction],
    classifier: TransactionClassifier,
    kind: TransactionKind,
) -> List[Transaction]:
    return [t for t in transactions if classifier.classify(t) == kind]


def total_expenses(transactions: Sequence[Transaction], classifier: TransactionClassifier) -> float:
    """Sum of absolute amounts over expense transactions"""
    return sum(abs(t.amount) for t in filter_kind(transactions, classifier, TransactionKind.EXPENSE))


def total_income(transactions: Sequence[Transaction], classifier: TransactionClassifier) -> float:
    return sum(t.amount for t in filter_kind(transactions, classifier, TransactionKind.INCOME))


_MERCHANT_CATEGORIES = [
    (("uber", "lyft"), "Transportation"),
    (("food", "restaurant"), "Food and Dining"),
    (("amazon", "shop"), "Shopping"),
    (("gas",), "Gas"),
]

_NAME_CATEGORIES = [
    (("uber", "lyft"), "Transportation"),
    (("deposit", "payroll"), "Income"),
]


def _match_category(text: str, rules) -> str:
    text = text.lower()
    for keywords, category in rules:
        if any(k in text for k in keywords):
            return category
    return "General"


def derive_category(transaction: Transaction) -> str:
    """
    Spending category for grouping.

    Uses the bank-provided primary category when present, otherwise falls back
    to merchant-name then transaction-name heuristics.
    """
    if transaction.category and transaction.category[0]:
        return transaction.category[0]

    if transaction.merchant_name:
        return _match_category(transaction.merchant_name, _MERCHANT_CATEGORIES)

    if transaction.name:
        return _match_category(transaction.name, _NAME_CATEGORIES)

    return "Uncategorized"
