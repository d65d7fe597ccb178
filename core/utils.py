import datetime
import calendar
from typing import Optional

import config


def month_name(m: int) -> str:
    """
    Returns the full name of a month.
    Example: 1 -> 'January', 2 -> 'February'.
    """
    # 1900 is an arbitrary valid year used just to format the month name
    return datetime.date(1900, m, 1).strftime("%B")


def format_date(year: Optional[str], month: int, day: Optional[str]) -> str:
    """
    Builds a 'YYYY-MM-DD' string from the form's date selectors.
    Month is 1-based. Falls back to the default date if year or day is missing.
    """
    if not year or not day:
        return config.DEFAULT_DATE
    return f"{int(year):04d}-{int(month):02d}-{int(day):02d}"


def is_valid_date(date_str: Optional[str]) -> bool:
    """
    Checks a 'YYYY-MM-DD' string: correct shape, year 1900-2100 and a real
    calendar day (leap years included).
    """
    if not date_str or len(date_str) != 10 or date_str[4] != "-" or date_str[7] != "-":
        return False

    parts = date_str.split("-")
    if not all(p.isdigit() for p in parts):
        return False

    year, month, day = (int(p) for p in parts)
    if year < 1900 or year > 2100 or month < 1 or month > 12:
        return False

    return 1 <= day <= calendar.monthrange(year, month)[1]


def is_valid_phone(phone: Optional[str]) -> bool:
    """
    A valid phone is exactly 10 digits starting with 97 or 98.
    Spaces, hyphens and dots are ignored.
    """
    if phone is None:
        return False

    cleaned = phone.replace(" ", "").replace("-", "").replace(".", "")
    if not cleaned.isdigit() or len(cleaned) != 10:
        return False

    return cleaned[:2] in ("97", "98")


def is_valid_email(email: Optional[str]) -> bool:
    """
    Loose email check: a local part, an '@', a dotted domain and a
    top-level part of at least two characters.
    """
    if not email:
        return False

    at = email.find("@")
    if at <= 0 or at == len(email) - 1:
        return False

    dot = email.rfind(".")
    if dot <= at + 1 or dot == len(email) - 1:
        return False

    return len(email[dot + 1:]) >= 2


def format_currency(amount: float) -> str:
    """Example: 6500 -> 'Rs. 6,500.00'."""
    return f"Rs. {amount:,.2f}"
