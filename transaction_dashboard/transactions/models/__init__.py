from transaction_dashboard.transactions.models.transaction import Transaction

__all__ = ["Transaction"]
