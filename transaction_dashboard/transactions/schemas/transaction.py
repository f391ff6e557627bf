from datetime import date, datetime

from pydantic import Field, field_validator

from transaction_dashboard.core.schemas import CamelModel


class TransactionResponse(CamelModel):
    id: int
    title: str
    description: str
    price: float
    date_of_sale: date
    category: str
    sold: bool
    image: str | None = None


class TransactionListResponse(CamelModel):
    """One page of month-filtered transactions."""

    transactions: list[TransactionResponse]
    total: int = Field(description="Number of matching transactions across all pages")
    page: int = Field(ge=1)
    per_page: int = Field(ge=1)


class TransactionSeed(CamelModel):
    """Record shape of the sample dataset loaded by the seed script.

    ``dateOfSale`` arrives as an ISO datetime with offset; only the calendar
    date in that offset is kept.
    """

    id: int
    title: str
    description: str = ""
    price: float = Field(ge=0)
    date_of_sale: date
    category: str
    sold: bool = False
    image: str | None = None

    @field_validator("date_of_sale", mode="before")
    @classmethod
    def _date_from_datetime(cls, value: object) -> object:
        if isinstance(value, str) and "T" in value:
            return datetime.fromisoformat(value.replace("Z", "+00:00")).date()
        if isinstance(value, datetime):
            return value.date()
        return value
