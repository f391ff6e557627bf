"""Price histogram service."""

from collections.abc import Sequence

import structlog
from sqlalchemy import and_, case, func, select
from sqlalchemy.orm import Session

from transaction_dashboard.core.exceptions import InvalidPriceRangeError
from transaction_dashboard.transactions.models.transaction import Transaction
from transaction_dashboard.transactions.schemas.analytics import PriceRange, PriceRangeCount
from transaction_dashboard.transactions.services.analytics.base import (
    MonthWindow,
    month_filter,
    store_errors,
)

logger = structlog.get_logger(__name__)

# Integer-labelled buckets such as 0-100 / 101-200 count as contiguous.
ADJACENT_BOUND_TOLERANCE = 1.0


def validate_price_ranges(ranges: Sequence[PriceRange]) -> list[PriceRange]:
    """Validate histogram ranges before they reach the aggregator.

    Negative or inverted ranges are rejected. Overlaps (double counting) and
    gaps (undercounting) between neighbouring ranges are logged as warnings;
    the caller's order is kept either way.

    Raises:
        InvalidPriceRangeError: If a range has ``min < 0`` or ``max < min``.
    """
    for price_range in ranges:
        if price_range.min < 0:
            raise InvalidPriceRangeError("Price range minimum must be >= 0", price_range.label)
        if price_range.max is not None and price_range.max < price_range.min:
            raise InvalidPriceRangeError(
                "Price range maximum must be >= minimum", price_range.label
            )

    ordered = sorted(ranges, key=lambda r: r.min)
    for previous, current in zip(ordered, ordered[1:]):
        if previous.max is None or current.min <= previous.max:
            logger.warning("price_ranges_overlap", first=previous.label, second=current.label)
        elif current.min - previous.max > ADJACENT_BOUND_TOLERANCE:
            logger.warning("price_ranges_gap", first=previous.label, second=current.label)

    return list(ranges)


class PriceHistogramService:
    """Service for per-price-range transaction counts."""

    @staticmethod
    def get_histogram(
        db: Session, window: MonthWindow, ranges: Sequence[PriceRange]
    ) -> list[PriceRangeCount]:
        """Count transactions in the window for every price range.

        Each range is evaluated independently with inclusive bounds, so
        overlapping ranges count a transaction more than once. Output order
        matches ``ranges`` and zero counts are kept.

        Args:
            db: Database session.
            window: Resolved month window.
            ranges: Price ranges in display order.

        Returns:
            One PriceRangeCount per input range.
        """
        if not ranges:
            return []

        columns = []
        for index, price_range in enumerate(ranges):
            conditions = [Transaction.price >= price_range.min]
            if price_range.max is not None:
                conditions.append(Transaction.price <= price_range.max)
            columns.append(func.count(case((and_(*conditions), 1))).label(f"range_{index}"))

        with store_errors("histogram", **window.as_params()):
            counts = db.execute(select(*columns).where(month_filter(window))).one()

        return [
            PriceRangeCount(range=price_range.label, count=count or 0)
            for price_range, count in zip(ranges, counts)
        ]
