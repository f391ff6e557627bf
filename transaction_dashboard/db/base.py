"""
Database base module - imports all models so they register with ``Base.metadata``.

Import this module before calling ``Base.metadata.create_all`` (the seed
script and the test fixtures do).
"""

from transaction_dashboard.db.session import Base
from transaction_dashboard.transactions.models.transaction import Transaction

__all__ = [
    "Base",
    "Transaction",
]
