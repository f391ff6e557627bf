"""Combined dashboard analytics service."""

import asyncio
from collections.abc import Callable, Sequence
from functools import partial
from typing import Any

import structlog
from sqlalchemy.orm import Session, sessionmaker
from starlette.concurrency import run_in_threadpool

from transaction_dashboard.core.exceptions import AppError, PartialAggregationError
from transaction_dashboard.transactions.schemas.analytics import (
    CombinedAnalyticsResponse,
    PriceRange,
)
from transaction_dashboard.transactions.services.analytics.base import MonthWindow
from transaction_dashboard.transactions.services.analytics.category_service import (
    CategoryDistributionService,
)
from transaction_dashboard.transactions.services.analytics.histogram_service import (
    PriceHistogramService,
)
from transaction_dashboard.transactions.services.analytics.statistics_service import (
    SalesStatisticsService,
)

logger = structlog.get_logger(__name__)


def _run_branch(session_factory: sessionmaker[Session], branch: Callable[[Session], Any]) -> Any:
    # Sessions are not thread-safe; every branch gets its own.
    with session_factory() as db:
        return branch(db)


class CombinedAnalyticsService:
    """Service composing statistics, histogram and category data in one call."""

    @staticmethod
    async def get_combined(
        session_factory: sessionmaker[Session],
        window: MonthWindow,
        ranges: Sequence[PriceRange],
    ) -> CombinedAnalyticsResponse:
        """Run the three aggregations concurrently against one resolved window.

        Each aggregation runs in a worker thread with its own session. All
        branches are awaited before merging; if any of them failed the whole
        call fails and no partial payload is returned.

        Args:
            session_factory: Factory producing independent database sessions.
            window: Month window resolved once by the caller.
            ranges: Price ranges for the histogram.

        Returns:
            CombinedAnalyticsResponse with statistics, barChart and pieChart.

        Raises:
            PartialAggregationError: Naming every section that failed.
        """
        branches: dict[str, Callable[[Session], Any]] = {
            "statistics": partial(SalesStatisticsService.get_statistics, window=window),
            "barChart": partial(PriceHistogramService.get_histogram, window=window, ranges=ranges),
            "pieChart": partial(CategoryDistributionService.get_distribution, window=window),
        }

        results = await asyncio.gather(
            *(
                run_in_threadpool(_run_branch, session_factory, branch)
                for branch in branches.values()
            ),
            return_exceptions=True,
        )
        outcome = dict(zip(branches, results))

        failures = {
            section: result
            for section, result in outcome.items()
            if isinstance(result, BaseException)
        }
        if failures:
            for section, error in failures.items():
                logger.error(
                    "combined_branch_failed",
                    section=section,
                    error=str(error),
                    **window.as_params(),
                )
            causes = {
                section: error.error_code if isinstance(error, AppError) else "INTERNAL_ERROR"
                for section, error in failures.items()
            }
            raise PartialAggregationError(causes, window.as_params()) from next(
                iter(failures.values())
            )

        return CombinedAnalyticsResponse(
            statistics=outcome["statistics"],
            bar_chart=outcome["barChart"],
            pie_chart=outcome["pieChart"],
        )
