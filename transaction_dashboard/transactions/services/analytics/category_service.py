"""Category distribution service."""

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from transaction_dashboard.transactions.models.transaction import Transaction
from transaction_dashboard.transactions.schemas.analytics import CategoryCount
from transaction_dashboard.transactions.services.analytics.base import (
    MonthWindow,
    month_filter,
    store_errors,
)


class CategoryDistributionService:
    """Service for per-category transaction counts."""

    @staticmethod
    def get_distribution(db: Session, window: MonthWindow) -> list[CategoryCount]:
        """Get every category sold in the window with its count, ordered by name."""
        with store_errors("category_distribution", **window.as_params()):
            grouped = db.execute(
                select(Transaction.category, func.count(Transaction.id))
                .where(month_filter(window))
                .group_by(Transaction.category)
                .order_by(Transaction.category)
            ).all()

        return [CategoryCount(category=category, count=count) for category, count in grouped]
