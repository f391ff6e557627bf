"""Transaction listing service."""

import structlog
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from transaction_dashboard.core.exceptions import ValidationError
from transaction_dashboard.transactions.models.transaction import Transaction
from transaction_dashboard.transactions.schemas.transaction import (
    TransactionListResponse,
    TransactionResponse,
)
from transaction_dashboard.transactions.services.analytics.base import (
    MonthWindow,
    build_transaction_filters,
    store_errors,
)

logger = structlog.get_logger(__name__)


class TransactionListingService:
    """Service for paginated, searchable transaction listings."""

    @staticmethod
    def list_transactions(
        db: Session,
        window: MonthWindow,
        search: str | None = None,
        page: int = 1,
        per_page: int = 10,
    ) -> TransactionListResponse:
        """Get one page of transactions sold in the window.

        Args:
            db: Database session.
            window: Resolved month window.
            search: Optional case-insensitive term matched against title,
                description and price.
            page: 1-based page number.
            per_page: Page size.

        Returns:
            TransactionListResponse with the page ordered by id and the total
            number of matches. A page past the end is empty, not an error.
        """
        if page < 1:
            raise ValidationError("page must be >= 1", field="page")
        if per_page < 1:
            raise ValidationError("perPage must be >= 1", field="perPage")

        filters = build_transaction_filters(window, search)

        with store_errors("list_transactions", search=search, **window.as_params()):
            total = db.scalar(select(func.count(Transaction.id)).where(*filters)) or 0
            rows = db.scalars(
                select(Transaction)
                .where(*filters)
                .order_by(Transaction.id)
                .offset((page - 1) * per_page)
                .limit(per_page)
            ).all()

        logger.debug(
            "transactions_listed",
            total=total,
            returned=len(rows),
            page=page,
            per_page=per_page,
            **window.as_params(),
        )

        return TransactionListResponse(
            transactions=[TransactionResponse.model_validate(row) for row in rows],
            total=total,
            page=page,
            per_page=per_page,
        )
