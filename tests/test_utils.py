import pytest

import config
from core.utils import (
    format_currency, format_date, is_valid_date, is_valid_email, is_valid_phone, month_name
)


@pytest.mark.parametrize("phone", ["9812345678", "9712345678", "98-1234-5678", "97.123.45678", "98 1234 5678"])
def test_valid_phones(phone):
    assert is_valid_phone(phone)


@pytest.mark.parametrize("phone", ["9612345678", "981234567", "98123456789", "98a2345678", "", None])
def test_invalid_phones(phone):
    assert not is_valid_phone(phone)


@pytest.mark.parametrize("email", ["john@example.com", "a@b.co", "first.last@mail.example.org"])
def test_valid_emails(email):
    assert is_valid_email(email)


@pytest.mark.parametrize("email", [
    "@example.com", "john@", "john.example.com", "john@example", "john@.com",
    "john@example.c", "john@example.", "", None,
])
def test_invalid_emails(email):
    assert not is_valid_email(email)


@pytest.mark.parametrize("date_str", ["2024-02-29", "1900-01-01", "2100-12-31", "2025-04-30"])
def test_valid_dates(date_str):
    assert is_valid_date(date_str)


@pytest.mark.parametrize("date_str", [
    "2023-02-29", "2024-13-01", "2024-00-10", "1899-12-31", "2101-01-01",
    "2024-04-31", "2024-1-01", "2024/01/01", "abcd-ef-gh", "", None,
])
def test_invalid_dates(date_str):
    assert not is_valid_date(date_str)


def test_format_date():
    assert format_date("2024", 3, "7") == "2024-03-07"
    assert format_date("1999", 12, "31") == "1999-12-31"


@pytest.mark.parametrize("year, day", [(None, "1"), ("2024", None), ("", "")])
def test_format_date_falls_back_to_default(year, day):
    assert format_date(year, 1, day) == config.DEFAULT_DATE == "2023-01-01"


def test_month_name():
    assert month_name(1) == "January"
    assert month_name(12) == "December"


def test_format_currency():
    assert format_currency(6500) == "Rs. 6,500.00"
    assert format_currency(18500.5) == "Rs. 18,500.50"
    assert format_currency(0) == "Rs. 0.00"
