"""Account grouping helpers"""

from typing import Dict, List
from finsight_gateway.domain.models import Account, Institution


def institution_name(account: Account) -> str:
    """Official name if known, else the first word of the display name"""
    if account.official_name:
        return account.official_name
    if account.name and account.name.split():
        return account.name.split()[0]
    return "Unknown Institution"


def group_by_institution(accounts: List[Account]) -> List[Institution]:
    institutions: Dict[str, Institution] = {}
    for account in accounts:
        name = institution_name(account)
        if name not in institutions:
            institutions[name] = Institution(institution_name=name, accounts=[], total_balance=0.0)
        institutions[name].accounts.append(account)
        institutions[name].total_balance += account.current_balance or 0.0
    return list(institutions.values())


def primary_currency(accounts: List[Account], default: str = "USD") -> str:
    return accounts[0].currency if accounts else default
