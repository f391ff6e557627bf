from datetime import date

from sqlalchemy import CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column

from transaction_dashboard.db.session import Base


class Transaction(Base):
    __tablename__ = "transactions"
    __table_args__ = (CheckConstraint("price >= 0", name="ck_transactions_price_non_negative"),)

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=False)  # Seed-assigned
    title: Mapped[str] = mapped_column()
    description: Mapped[str] = mapped_column(default="")
    price: Mapped[float] = mapped_column()
    date_of_sale: Mapped[date] = mapped_column(index=True)
    category: Mapped[str] = mapped_column(index=True)
    sold: Mapped[bool] = mapped_column(default=False, index=True)
    image: Mapped[str | None] = mapped_column(default=None)

    def __repr__(self) -> str:
        return (
            f"<Transaction(id={self.id}, title={self.title!r}, date_of_sale={self.date_of_sale})>"
        )
