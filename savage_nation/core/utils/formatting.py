from __future__ import annotations

from datetime import date, datetime, timezone as dt_timezone
from decimal import Decimal, InvalidOperation

from django.utils import timezone
from django.utils.dateparse import parse_datetime

CURRENCY_SYMBOLS = {"USD": "$", "EUR": "€", "GBP": "£"}


def format_currency(value, currency: str = "USD") -> str:
    """'' for missing prices, ``$1,234.50`` style otherwise."""
    if value is None or value == "":
        return ""
    symbol = CURRENCY_SYMBOLS.get(currency.upper())
    try:
        amount = Decimal(str(value)).quantize(Decimal("0.01"))
    except (InvalidOperation, ValueError):
        return f"{symbol}{value}" if symbol else f"{value} {currency.upper()}"
    sign = "-" if amount < 0 else ""
    if symbol:
        return f"{sign}{symbol}{abs(amount):,.2f}"
    return f"{sign}{abs(amount):,.2f} {currency.upper()}"


def _as_datetime(value):
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, (int, float)):
        return datetime.fromtimestamp(value / 1000, tz=dt_timezone.utc)
    if isinstance(value, str):
        return parse_datetime(value)
    return None


def format_date(value) -> str:
    dt = _as_datetime(value) if value else None
    if dt is None:
        return ""
    return dt.strftime("%b %d, %Y")


def format_datetime(value) -> str:
    dt = _as_datetime(value) if value else None
    if dt is None:
        return ""
    if timezone.is_aware(dt):
        dt = timezone.localtime(dt)
    return dt.strftime("%b %d, %Y, %I:%M %p")
