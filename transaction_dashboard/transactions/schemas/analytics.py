"""Analytics schemas for the transaction dashboard charts."""

import math

from pydantic import Field

from transaction_dashboard.core.exceptions import InvalidPriceRangeError
from transaction_dashboard.core.schemas import CamelModel


class PriceRange(CamelModel):
    """Inclusive price bucket; ``max=None`` means no upper bound."""

    label: str
    min: float = Field(allow_inf_nan=False)
    max: float | None = Field(default=None, allow_inf_nan=False)

    @classmethod
    def parse(cls, text: str) -> "PriceRange":
        """Parse ``"<min>-<max>"`` or ``"<min>-above"`` into a range labelled ``text``."""
        low, sep, high = text.strip().partition("-")
        if not sep:
            raise InvalidPriceRangeError(f"Expected '<min>-<max>', got {text!r}", text)
        try:
            min_price = float(low)
            max_price = None if high.strip().lower() == "above" else float(high)
        except ValueError as e:
            raise InvalidPriceRangeError(f"Non-numeric price range {text!r}", text) from e
        bounds = [min_price] if max_price is None else [min_price, max_price]
        if not all(math.isfinite(bound) for bound in bounds):
            raise InvalidPriceRangeError(f"Non-finite price range {text!r}", text)
        return cls(label=text.strip(), min=min_price, max=max_price)


class SalesStatisticsResponse(CamelModel):
    """Sales totals for a month."""

    total_sale_amount: float = Field(description="Sum of prices of sold transactions")
    total_sold_items: int = Field(description="Number of sold transactions")
    total_not_sold_items: int = Field(description="Number of unsold transactions")


class PriceRangeCount(CamelModel):
    """Single bar of the price histogram."""

    range: str = Field(description="Range label, e.g. '101-200'")
    count: int


class CategoryCount(CamelModel):
    """Single slice of the category pie chart."""

    category: str
    count: int


class CombinedAnalyticsResponse(CamelModel):
    """Statistics, histogram and category distribution for one month."""

    statistics: SalesStatisticsResponse
    bar_chart: list[PriceRangeCount]
    pie_chart: list[CategoryCount]
