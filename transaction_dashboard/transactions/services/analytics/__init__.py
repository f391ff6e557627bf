"""Transaction analytics, split into one service per dashboard widget:

- base: month resolution, filter building, store error translation
- listing_service: paginated, searchable transaction table
- statistics_service: sold/unsold totals
- histogram_service: price range bar chart
- category_service: category pie chart
- combined_service: all charts in one concurrent call
"""

from transaction_dashboard.transactions.services.analytics.base import (
    MonthWindow,
    build_transaction_filters,
    get_month_interval,
    get_month_window,
    month_filter,
    resolve_month,
)
from transaction_dashboard.transactions.services.analytics.category_service import (
    CategoryDistributionService,
)
from transaction_dashboard.transactions.services.analytics.combined_service import (
    CombinedAnalyticsService,
)
from transaction_dashboard.transactions.services.analytics.histogram_service import (
    PriceHistogramService,
    validate_price_ranges,
)
from transaction_dashboard.transactions.services.analytics.listing_service import (
    TransactionListingService,
)
from transaction_dashboard.transactions.services.analytics.statistics_service import (
    SalesStatisticsService,
)

__all__ = [
    # Base utilities
    "MonthWindow",
    "resolve_month",
    "get_month_interval",
    "get_month_window",
    "month_filter",
    "build_transaction_filters",
    "validate_price_ranges",
    # Services
    "TransactionListingService",
    "SalesStatisticsService",
    "PriceHistogramService",
    "CategoryDistributionService",
    "CombinedAnalyticsService",
]
