"""Transaction domain service."""

from datetime import date
from decimal import Decimal
from typing import Optional

from nexus.database.base import Collection, Store
from nexus.domain.entities import Transaction, TransactionKind
from nexus.domain.errors import NotFoundError, record_not_found


class TransactionService:
    """Service for listing, totalling and removing transactions."""

    def __init__(self, store: Store):
        """Initialize transaction service.

        Args:
            store: Store instance
        """
        self.store = store

    def list_transactions(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        kind: Optional[TransactionKind] = None,
        category: Optional[str] = None,
        entity: Optional[str] = None,
    ) -> list[Transaction]:
        """List transactions with filters, newest first.

        Args:
            start_date: Optional start date filter (inclusive)
            end_date: Optional end date filter (inclusive)
            kind: Optional income/expense filter
            category: Optional exact category filter
            entity: Optional exact entity filter

        Returns:
            List of transaction entities
        """
        transactions = [
            txn
            for txn in self.store.get_all(Collection.TRANSACTIONS)
            if (start_date is None or txn.date >= start_date)
            and (end_date is None or txn.date <= end_date)
            and (kind is None or txn.kind is kind)
            and (category is None or txn.category == category)
            and (entity is None or txn.entity == entity)
        ]
        return sorted(transactions, key=lambda txn: (txn.date, txn.id), reverse=True)

    def get_transaction(self, transaction_id: str) -> Optional[Transaction]:
        return self.store.get(Collection.TRANSACTIONS, transaction_id)

    def delete_transaction(self, transaction_id: str) -> None:
        """Delete a transaction.

        Raises:
            NotFoundError: If the transaction doesn't exist
        """
        if self.store.get(Collection.TRANSACTIONS, transaction_id) is None:
            raise NotFoundError(record_not_found(Collection.TRANSACTIONS.value, transaction_id))
        self.store.delete(Collection.TRANSACTIONS, transaction_id)

    @staticmethod
    def totals(transactions: list[Transaction]) -> dict[str, Decimal]:
        """Income, expense and balance of a list of transactions."""
        income = sum(
            (txn.amount for txn in transactions if txn.kind is TransactionKind.INCOME), Decimal("0")
        )
        expense = sum(
            (txn.amount for txn in transactions if txn.kind is TransactionKind.EXPENSE), Decimal("0")
        )
        return {"income": income, "expense": expense, "balance": income - expense}
