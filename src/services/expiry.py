"""Expiry-status derivation and expiry buckets."""

from datetime import date

from src.models.enums import ItemStatus

EXPIRING_WINDOW_DAYS = 7
MONTH_WINDOW_DAYS = 30


def days_until_expiry(expiry_date: date | None, today: date | None = None) -> int | None:
    """Whole days from today until the expiry date; negative once past."""
    if expiry_date is None:
        return None
    today = today or date.today()
    return (expiry_date - today).days


def derive_status(expiry_date: date | None, today: date | None = None) -> ItemStatus:
    """Status implied by an expiry date.

    Expired before the date, Expiring from 7 days out through the date itself,
    Fresh otherwise or when there is no date.
    """
    days = days_until_expiry(expiry_date, today)
    if days is None:
        return ItemStatus.FRESH
    if days < 0:
        return ItemStatus.EXPIRED
    if days <= EXPIRING_WINDOW_DAYS:
        return ItemStatus.EXPIRING
    return ItemStatus.FRESH


def expiry_bucket(days: int | None) -> str | None:
    """Name of the overview bucket for a day count, or None if it fits none."""
    if days is None:
        return None
    if days < 0:
        return "expired"
    if days == 0:
        return "today"
    if days <= EXPIRING_WINDOW_DAYS:
        return "this_week"
    if days <= MONTH_WINDOW_DAYS:
        return "this_month"
    return None
