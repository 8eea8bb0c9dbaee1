"""Currency display helpers"""

CURRENCY_SYMBOLS = {
    "USD": "$",
    "INR": "₹",
    "EUR": "€",
    "GBP": "£",
}


def format_currency(amount: float, currency_code: str = "USD") -> str:
    """Render an amount with its currency symbol and no decimals, e.g. $1250"""
    symbol = CURRENCY_SYMBOLS.get(currency_code, currency_code)
    return f"{symbol}{amount:.0f}"
