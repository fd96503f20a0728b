from __future__ import annotations

from datetime import date, datetime, timezone

from ..core.constants import ISO_DATE_FORMAT


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, ISO_DATE_FORMAT).date()


def format_iso_date(value: date) -> str:
    return value.strftime(ISO_DATE_FORMAT)


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def today(*, use_utc: bool = False) -> date:
    """Calendar date attendance is recorded against.

    With ``use_utc`` the date rolls over at UTC midnight instead of local midnight.
    """
    if use_utc:
        return datetime.now(timezone.utc).date()
    return now_local().date()
