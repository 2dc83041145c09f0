# finance/services/__init__.py
from .budget_allocator import BudgetAllocator
from .budget_service import BudgetService
from .debt_service import DebtService
from .ledger_aggregator import LedgerAggregator
from .ledger_service import LedgerService
from .repositories import BudgetAllocationRepository, TransactionRepository
from .transaction_service import TransactionService

__all__ = [
    "BudgetAllocationRepository",
    "BudgetAllocator",
    "BudgetService",
    "DebtService",
    "LedgerAggregator",
    "LedgerService",
    "TransactionRepository",
    "TransactionService",
]
