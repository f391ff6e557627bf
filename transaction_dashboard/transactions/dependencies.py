from functools import lru_cache

from fastapi import Query

from transaction_dashboard.core.config import settings
from transaction_dashboard.transactions.schemas.analytics import PriceRange
from transaction_dashboard.transactions.services.analytics import (
    MonthWindow,
    get_month_window,
    validate_price_ranges,
)


def get_month(
    month: str | None = Query(
        None, description="Month name ('January'), abbreviation ('Jan') or number 1-12"
    ),
    year: int | None = Query(
        None, description="Calendar year; omit to match the month in every year"
    ),
) -> MonthWindow:
    """Resolve the month query parameters once per request."""
    return get_month_window(month, year)


@lru_cache
def get_configured_price_ranges() -> tuple[PriceRange, ...]:
    """Histogram ranges from settings, validated on first use."""
    ranges = [PriceRange.model_validate(item) for item in settings.price_ranges]
    return tuple(validate_price_ranges(ranges))


def get_price_ranges(
    ranges: list[str] | None = Query(
        None,
        alias="range",
        description="Price range as '<min>-<max>' or '<min>-above'; repeat for more buckets",
    ),
) -> list[PriceRange]:
    """Caller-supplied histogram ranges, falling back to the configured ones."""
    if not ranges:
        return list(get_configured_price_ranges())
    return validate_price_ranges([PriceRange.parse(text) for text in ranges])
