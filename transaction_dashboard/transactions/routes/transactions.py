"""Transaction table and dashboard chart routes."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session, sessionmaker

from transaction_dashboard.core.config import settings
from transaction_dashboard.core.schemas import ERROR_RESPONSES
from transaction_dashboard.db.session import get_db, get_session_factory
from transaction_dashboard.transactions.dependencies import get_month, get_price_ranges
from transaction_dashboard.transactions.schemas.analytics import (
    CategoryCount,
    CombinedAnalyticsResponse,
    PriceRange,
    PriceRangeCount,
    SalesStatisticsResponse,
)
from transaction_dashboard.transactions.schemas.transaction import TransactionListResponse
from transaction_dashboard.transactions.services.analytics import (
    CategoryDistributionService,
    CombinedAnalyticsService,
    MonthWindow,
    PriceHistogramService,
    SalesStatisticsService,
    TransactionListingService,
)

router = APIRouter(responses=ERROR_RESPONSES)


@router.get("/transactions", response_model=TransactionListResponse)
def list_transactions(
    window: MonthWindow = Depends(get_month),
    search: str | None = Query(
        None, description="Case-insensitive match on title, description or price"
    ),
    page: int = Query(1, ge=1, description="1-based page number"),
    per_page: int = Query(
        settings.DEFAULT_PER_PAGE,
        ge=1,
        le=settings.MAX_PER_PAGE,
        alias="perPage",
        description="Transactions per page",
    ),
    db: Session = Depends(get_db),
) -> TransactionListResponse:
    """
    List transactions sold in a month.

    Returns:
    - One page of transactions ordered by id
    - Total number of matches (independent of paging)
    - The page and perPage that were applied
    """
    return TransactionListingService.list_transactions(db, window, search, page, per_page)


@router.get("/statistics", response_model=SalesStatisticsResponse)
def get_statistics(
    window: MonthWindow = Depends(get_month),
    db: Session = Depends(get_db),
) -> SalesStatisticsResponse:
    """
    Get sales totals for a month.

    Returns:
    - Total sale amount of sold items
    - Number of sold and unsold items
    """
    return SalesStatisticsService.get_statistics(db, window)


@router.get("/bar-chart", response_model=list[PriceRangeCount])
def get_price_histogram(
    window: MonthWindow = Depends(get_month),
    ranges: list[PriceRange] = Depends(get_price_ranges),
    db: Session = Depends(get_db),
) -> list[PriceRangeCount]:
    """
    Get the number of transactions per price range for a month.

    Ranges are returned in configured (or requested) order, including empty ones.
    """
    return PriceHistogramService.get_histogram(db, window, ranges)


@router.get("/pie-chart", response_model=list[CategoryCount])
def get_category_distribution(
    window: MonthWindow = Depends(get_month),
    db: Session = Depends(get_db),
) -> list[CategoryCount]:
    """
    Get the number of transactions per category for a month.
    """
    return CategoryDistributionService.get_distribution(db, window)


@router.get("/combined-data", response_model=CombinedAnalyticsResponse)
async def get_combined_data(
    window: MonthWindow = Depends(get_month),
    ranges: list[PriceRange] = Depends(get_price_ranges),
    session_factory: sessionmaker[Session] = Depends(get_session_factory),
) -> CombinedAnalyticsResponse:
    """
    Get statistics, bar chart and pie chart data for a month in one call.

    The three aggregations run concurrently against the same month window.
    If any of them fails the request fails as a whole.
    """
    return await CombinedAnalyticsService.get_combined(session_factory, window, ranges)
