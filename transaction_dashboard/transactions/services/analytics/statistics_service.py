"""Sales statistics service."""

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from transaction_dashboard.transactions.models.transaction import Transaction
from transaction_dashboard.transactions.schemas.analytics import SalesStatisticsResponse
from transaction_dashboard.transactions.services.analytics.base import (
    MonthWindow,
    month_filter,
    store_errors,
)


class SalesStatisticsService:
    """Service for sold/unsold totals."""

    @staticmethod
    def get_statistics(db: Session, window: MonthWindow) -> SalesStatisticsResponse:
        """Get total sale amount and sold/unsold counts for the window.

        Sold and unsold totals come from one grouped query, so they always
        describe the same snapshot.

        Args:
            db: Database session.
            window: Resolved month window.

        Returns:
            SalesStatisticsResponse; the amount is 0 when nothing was sold.
        """
        with store_errors("statistics", **window.as_params()):
            grouped = db.execute(
                select(Transaction.sold, func.count(Transaction.id), func.sum(Transaction.price))
                .where(month_filter(window))
                .group_by(Transaction.sold)
            ).all()

        total_sale_amount = 0.0
        sold_items = 0
        not_sold_items = 0
        for sold, count, amount in grouped:
            if sold:
                sold_items = count
                total_sale_amount = float(amount or 0)
            else:
                not_sold_items = count

        return SalesStatisticsResponse(
            total_sale_amount=total_sale_amount,
            total_sold_items=sold_items,
            total_not_sold_items=not_sold_items,
        )
