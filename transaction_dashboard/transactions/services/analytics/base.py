"""Base utilities and helpers for transaction analytics services."""

import calendar
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import date
from typing import Any

import structlog
from sqlalchemy import String, cast, extract, or_
from sqlalchemy.exc import DBAPIError, OperationalError, SQLAlchemyError
from sqlalchemy.sql.elements import ColumnElement

from transaction_dashboard.core.exceptions import (
    InvalidMonthError,
    QueryFailedError,
    StoreUnavailableError,
)
from transaction_dashboard.transactions.models.transaction import Transaction

logger = structlog.get_logger(__name__)

MONTH_NAMES = (
    "january",
    "february",
    "march",
    "april",
    "may",
    "june",
    "july",
    "august",
    "september",
    "october",
    "november",
    "december",
)

_MONTH_LOOKUP: dict[str, int] = {
    **{name: number for number, name in enumerate(MONTH_NAMES, start=1)},
    **{name[:3]: number for number, name in enumerate(MONTH_NAMES, start=1)},
}


@dataclass(frozen=True)
class MonthWindow:
    """Resolved month filter.

    With ``year`` set the window is the closed interval ``[start, end]`` of
    that month; without it the window matches the month in every year.
    """

    month: int
    year: int | None = None
    start: date | None = None
    end: date | None = None

    def as_params(self) -> dict[str, Any]:
        return {"month": self.month, "year": self.year}


def resolve_month(designator: str | int | None) -> int:
    """Resolve a month designator to its 1-based month number.

    Args:
        designator: Full English month name ("January"), three-letter
            abbreviation ("jan"), or month number 1-12. Names are
            case-insensitive.

    Returns:
        Month number in 1..12.

    Raises:
        InvalidMonthError: If the designator does not name a month.
    """
    if isinstance(designator, int):
        number = designator
    else:
        text = (designator or "").strip().lower()
        if text.isascii() and text.isdigit():
            number = int(text)
        else:
            number = _MONTH_LOOKUP.get(text, 0)

    if not 1 <= number <= 12:
        raise InvalidMonthError(None if designator is None else str(designator))
    return number


def get_month_interval(month: int, year: int) -> tuple[date, date]:
    """Get first and last calendar day of a month (both inclusive).

    Args:
        month: Month number 1..12.
        year: Four-digit calendar year.

    Returns:
        Tuple of (start_date, end_date).
    """
    if not 1 <= month <= 12 or not 1 <= year <= 9999:
        raise InvalidMonthError(str(month), year)
    _, last_day = calendar.monthrange(year, month)
    return date(year, month, 1), date(year, month, last_day)


def get_month_window(designator: str | int | None, year: int | None = None) -> MonthWindow:
    """Resolve a month designator (and optional year) into a MonthWindow."""
    month = resolve_month(designator)
    if year is None:
        return MonthWindow(month=month)
    if not 1 <= year <= 9999:
        raise InvalidMonthError(str(designator), year)
    start, end = get_month_interval(month, year)
    return MonthWindow(month=month, year=year, start=start, end=end)


def month_filter(window: MonthWindow) -> ColumnElement[bool]:
    """Predicate matching transactions sold within the window."""
    if window.year is None:
        return extract("month", Transaction.date_of_sale) == window.month
    return Transaction.date_of_sale.between(window.start, window.end)


def build_transaction_filters(
    window: MonthWindow, search: str | None = None
) -> list[ColumnElement[bool]]:
    """Build filter clauses for a month window and optional free-text search.

    The search term matches case-insensitively as a literal substring of the
    title, the description, or the text form of the price. A blank term adds
    no clause at all.
    """
    filters = [month_filter(window)]

    # Whitespace only decides blankness; the term itself is matched as given.
    if search and search.strip():
        filters.append(
            or_(
                Transaction.title.icontains(search, autoescape=True),
                Transaction.description.icontains(search, autoescape=True),
                cast(Transaction.price, String).icontains(search, autoescape=True),
            )
        )
    return filters


@contextmanager
def store_errors(operation: str, **params: Any) -> Iterator[None]:
    """Translate SQLAlchemy failures into store errors carrying query context."""
    try:
        yield
    except DBAPIError as e:
        if isinstance(e, OperationalError) or e.connection_invalidated:
            logger.error("store_unavailable", operation=operation, error=str(e), **params)
            raise StoreUnavailableError(operation, params) from e
        logger.error("query_failed", operation=operation, error=str(e), **params)
        raise QueryFailedError(operation, params) from e
    except SQLAlchemyError as e:
        logger.error("query_failed", operation=operation, error=str(e), **params)
        raise QueryFailedError(operation, params) from e
