from transaction_dashboard.transactions.schemas.analytics import (
    CategoryCount,
    CombinedAnalyticsResponse,
    PriceRange,
    PriceRangeCount,
    SalesStatisticsResponse,
)
from transaction_dashboard.transactions.schemas.transaction import (
    TransactionListResponse,
    TransactionResponse,
    TransactionSeed,
)

__all__ = [
    "CategoryCount",
    "CombinedAnalyticsResponse",
    "PriceRange",
    "PriceRangeCount",
    "SalesStatisticsResponse",
    "TransactionListResponse",
    "TransactionResponse",
    "TransactionSeed",
]
